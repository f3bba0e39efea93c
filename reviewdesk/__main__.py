"""
reviewdesk - Command Line Entry Point
=====================================

    python -m reviewdesk --app-id 123456789                 # App Store (default)
    python -m reviewdesk --android --app-id com.example.app
    python -m reviewdesk --android --test-store             # one fetch, no UI
    python -m reviewdesk --test-ai                          # draft a reply for a sample review
"""

import argparse
import logging
import sys
from datetime import datetime, timezone
from typing import List, Optional

from .application import SessionController
from .domain import Review
from .infrastructure.auth import CredentialUnavailableError
from .infrastructure.config import Platform, Settings, build_settings
from .infrastructure.llm import ResponseGenerationError, ResponseGenerator
from .infrastructure.stores import ReviewStoreError, create_client

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="reviewdesk",
        description="Respond to App Store and Google Play reviews from the terminal.",
    )
    store = parser.add_mutually_exclusive_group()
    store.add_argument("--ios", action="store_true", help="Use Apple App Store (default)")
    store.add_argument("--android", action="store_true", help="Use Google Play Store")

    parser.add_argument("--app-id", help="App Store ID (iOS) or package name (Android)")
    parser.add_argument("--key-id", help="App Store Connect API Key ID (iOS only)")
    parser.add_argument("--issuer-id", help="App Store Connect API Issuer ID (iOS only)")
    parser.add_argument(
        "--private-key", metavar="PRIVATE_KEY_PATH",
        help="Path to your App Store Connect API private key file (iOS only)",
    )
    parser.add_argument(
        "--service-account", metavar="SERVICE_ACCOUNT_PATH",
        help="Path to Google Play Console service account JSON file (Android only)",
    )
    parser.add_argument("--log-file", help="Where to write logs while the UI is running")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug details")

    diagnostics = parser.add_mutually_exclusive_group()
    diagnostics.add_argument(
        "--test-store", action="store_true",
        help="Fetch all reviews once, print the count and exit",
    )
    diagnostics.add_argument(
        "--test-ai", action="store_true",
        help="Draft a reply to a sample review and exit",
    )
    return parser


def settings_from_args(args: argparse.Namespace) -> Settings:
    platform = Platform.ANDROID if args.android else Platform.IOS
    return build_settings(
        platform,
        app_id=args.app_id,
        key_id=args.key_id,
        issuer_id=args.issuer_id,
        private_key_path=args.private_key,
        service_account_path=args.service_account,
        log_file=args.log_file,
    )


def check_settings(settings: Settings) -> bool:
    """Print configuration problems. Returns False if the store cannot be used."""
    issues = settings.validate()
    for issue in issues:
        print(issue, file=sys.stderr)
    return not settings.errors()


def run_store_check(settings: Settings) -> int:
    """One full fetch cycle, no UI."""
    client = create_client(settings)
    try:
        reviews = client.refresh_all_reviews()
    except (ReviewStoreError, CredentialUnavailableError) as e:
        print(f"Error accessing reviews: {e}")
        return 1
    print(f"Successfully accessed reviews: {len(reviews)} found")
    return 0


def run_ai_check(settings: Settings) -> int:
    generator = ResponseGenerator(settings.llm, max_length=settings.response_char_limit)
    sample = Review(
        id="test",
        rating=5,
        reviewer_nickname="TestUser",
        created_date=datetime.now(timezone.utc),
        territory="US",
        title="Great app!",
        body="I love this app, it works perfectly!",
        version="1.0",
    )

    print("Testing AI response generation...")
    try:
        print(f"AI Response: {generator.generate(sample)}")
    except ResponseGenerationError as e:
        print(f"AI Error: {e}")
        print(f"Template fallback: {generator.fallback_response(sample)}")
        return 1
    return 0


def run_interactive(settings: Settings) -> int:
    # Imported here so the diagnostics work without a terminal
    from .presentation import ReviewDeskApp

    client = create_client(settings)
    generator = ResponseGenerator(settings.llm, max_length=settings.response_char_limit)
    controller = SessionController(client, generator)
    app = ReviewDeskApp(
        controller,
        platform_label=settings.platform.label,
        tick_seconds=settings.ui.tick_seconds,
    )
    app.run()
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = settings_from_args(args)
    level = logging.DEBUG if args.verbose else logging.INFO

    if args.test_ai:
        logging.basicConfig(level=level, format=LOG_FORMAT)
        return run_ai_check(settings)

    if not check_settings(settings):
        return 1

    if args.test_store:
        logging.basicConfig(level=level, format=LOG_FORMAT)
        return run_store_check(settings)

    # The terminal belongs to the UI, so logs go to a file
    logging.basicConfig(level=level, format=LOG_FORMAT, filename=str(settings.ui.log_file))
    logger.info(f"Starting session for {settings.platform.label} app {settings.app_id}")
    return run_interactive(settings)


if __name__ == "__main__":
    sys.exit(main())
