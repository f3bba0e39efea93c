# Presentation Layer
# ==================
# - view.py: rich renderables projected from the session state
# - tui.py:  Textual app that polls keys and redraws on a fixed tick

from .tui import ReviewDeskApp, to_key_press
from .view import render_session

__all__ = ["ReviewDeskApp", "render_session", "to_key_press"]
