"""
reviewdesk - Terminal Entry Point
=================================

Run this to start answering reviews:
    python main.py --app-id 123456789
    python main.py --android --app-id com.example.app

Credentials can also come from a .env file; see reviewdesk/infrastructure/config/settings.py.
"""

import sys
from pathlib import Path

# Allow running from a checkout without installing
sys.path.insert(0, str(Path(__file__).parent))

from reviewdesk.__main__ import main


if __name__ == "__main__":
    sys.exit(main())
