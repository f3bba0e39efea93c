"""
Settings Module - Centralized Configuration Management
=======================================================

ARCHITECTURAL DECISION:
- Credentials and identifiers come from CLI flags first, then environment variables
- Settings are immutable dataclasses
- Single source of truth for all configurable values

Environment variables (a .env file in the working directory is honoured):
    APP_STORE_APP_ID, APP_STORE_CONNECT_KEY_ID, APP_STORE_CONNECT_ISSUER_ID,
    APP_STORE_CONNECT_PRIVATE_KEY_PATH, GOOGLE_PLAY_PACKAGE_NAME,
    GOOGLE_PLAY_SERVICE_ACCOUNT_PATH, OPENAI_API_KEY, OPENAI_API_URL,
    REVIEWDESK_AI_MODEL, REVIEWDESK_AI_KEYWORDS, REVIEWDESK_SUPPORT_EMAIL,
    REVIEWDESK_AI_INSTRUCTIONS, REVIEWDESK_APP_CONTEXT, REVIEWDESK_LOG_FILE
"""

import os
from dataclasses import dataclass, field, replace
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

# Google Play caps developer replies at 350 characters
GOOGLE_PLAY_REPLY_LIMIT = 350


def _env_path(name: str) -> Optional[Path]:
    value = os.getenv(name)
    return Path(value).expanduser() if value else None


def _env_list(name: str) -> tuple:
    raw = os.getenv(name, "")
    return tuple(item.strip() for item in raw.split(",") if item.strip())


class Platform(Enum):
    """Which store the session talks to."""
    IOS = "ios"
    ANDROID = "android"

    @property
    def label(self) -> str:
        return "App Store" if self is Platform.IOS else "Google Play"


@dataclass(frozen=True)
class AppStoreSettings:
    """App Store Connect API credentials."""

    app_id: str = field(default_factory=lambda: os.getenv("APP_STORE_APP_ID", ""))
    key_id: str = field(default_factory=lambda: os.getenv("APP_STORE_CONNECT_KEY_ID", ""))
    issuer_id: str = field(default_factory=lambda: os.getenv("APP_STORE_CONNECT_ISSUER_ID", ""))
    private_key_path: Optional[Path] = field(
        default_factory=lambda: _env_path("APP_STORE_CONNECT_PRIVATE_KEY_PATH")
    )

    # Apple allows at most 200 reviews per request
    page_size: int = 200


@dataclass(frozen=True)
class GooglePlaySettings:
    """Google Play Developer API credentials."""

    package_name: str = field(default_factory=lambda: os.getenv("GOOGLE_PLAY_PACKAGE_NAME", ""))
    service_account_path: Optional[Path] = field(
        default_factory=lambda: _env_path("GOOGLE_PLAY_SERVICE_ACCOUNT_PATH")
    )
    page_size: int = 100


@dataclass(frozen=True)
class LLMSettings:
    """OpenAI-compatible chat completion settings for drafting replies."""

    api_key: str = field(default_factory=lambda: os.getenv("OPENAI_API_KEY", ""))
    api_url: str = field(
        default_factory=lambda: os.getenv(
            "OPENAI_API_URL", "https://api.openai.com/v1/chat/completions"
        )
    )
    model: str = field(default_factory=lambda: os.getenv("REVIEWDESK_AI_MODEL", "gpt-4.1-nano"))
    temperature: float = 0.7
    max_tokens: int = 500
    timeout_seconds: int = 30

    # Prompt customisation
    keywords: tuple = field(default_factory=lambda: _env_list("REVIEWDESK_AI_KEYWORDS"))
    support_email: str = field(default_factory=lambda: os.getenv("REVIEWDESK_SUPPORT_EMAIL", ""))
    custom_instructions: str = field(
        default_factory=lambda: os.getenv("REVIEWDESK_AI_INSTRUCTIONS", "")
    )
    app_context: str = field(default_factory=lambda: os.getenv("REVIEWDESK_APP_CONTEXT", ""))


@dataclass(frozen=True)
class UISettings:
    """Terminal UI settings."""

    tick_seconds: float = 0.25
    log_file: Path = field(
        default_factory=lambda: Path(os.getenv("REVIEWDESK_LOG_FILE", "reviewdesk.log"))
    )


@dataclass(frozen=True)
class Settings:
    """
    Root settings container - Single source of truth for all configuration.

    Usage:
        from reviewdesk.infrastructure.config import build_settings, Platform
        settings = build_settings(Platform.ANDROID, app_id="com.example.app")
        print(settings.response_char_limit)  # 350
    """

    platform: Platform = Platform.IOS

    # Sub-settings groups
    app_store: AppStoreSettings = field(default_factory=AppStoreSettings)
    google_play: GooglePlaySettings = field(default_factory=GooglePlaySettings)
    llm: LLMSettings = field(default_factory=LLMSettings)
    ui: UISettings = field(default_factory=UISettings)

    # Passed to every store request
    http_timeout_seconds: int = 30

    @property
    def app_id(self) -> str:
        """App Store numeric ID or Google Play package name."""
        if self.platform is Platform.ANDROID:
            return self.google_play.package_name
        return self.app_store.app_id

    @property
    def response_char_limit(self) -> Optional[int]:
        """Maximum reply length enforced while composing, if the store has one."""
        if self.platform is Platform.ANDROID:
            return GOOGLE_PLAY_REPLY_LIMIT
        return None

    def validate(self) -> list[str]:
        """
        Validate settings and return list of warnings/errors.
        Entries starting with "ERROR:" make the store unusable.
        Returns empty list if all settings are valid.
        """
        issues = []

        if self.platform is Platform.IOS:
            store = self.app_store
            if not store.app_id:
                issues.append(
                    "ERROR: App ID is required. "
                    "Use --app-id or set APP_STORE_APP_ID."
                )
            if not store.key_id:
                issues.append(
                    "ERROR: Key ID is required for iOS. "
                    "Use --key-id or set APP_STORE_CONNECT_KEY_ID."
                )
            if not store.issuer_id:
                issues.append(
                    "ERROR: Issuer ID is required for iOS. "
                    "Use --issuer-id or set APP_STORE_CONNECT_ISSUER_ID."
                )
            if store.private_key_path is None:
                issues.append(
                    "ERROR: Private key path is required for iOS. "
                    "Use --private-key or set APP_STORE_CONNECT_PRIVATE_KEY_PATH."
                )
            elif not store.private_key_path.exists():
                issues.append(f"WARNING: Private key file not found: {store.private_key_path}")
        else:
            play = self.google_play
            if not play.package_name:
                issues.append(
                    "ERROR: Package name is required. "
                    "Use --app-id or set GOOGLE_PLAY_PACKAGE_NAME."
                )
            if play.service_account_path is None:
                issues.append(
                    "ERROR: Service account path is required for Android. "
                    "Use --service-account or set GOOGLE_PLAY_SERVICE_ACCOUNT_PATH."
                )
            elif not play.service_account_path.exists():
                issues.append(
                    f"WARNING: Service account file not found: {play.service_account_path}"
                )

        if not self.llm.api_key:
            issues.append(
                "WARNING: OPENAI_API_KEY not set. "
                "AI drafts will use a template reply."
            )

        return issues

    def errors(self) -> list[str]:
        return [issue for issue in self.validate() if issue.startswith("ERROR:")]


def build_settings(
    platform: Platform = Platform.IOS,
    *,
    app_id: Optional[str] = None,
    key_id: Optional[str] = None,
    issuer_id: Optional[str] = None,
    private_key_path: Optional[str] = None,
    service_account_path: Optional[str] = None,
    log_file: Optional[str] = None,
) -> Settings:
    """
    Build Settings for a platform, letting explicit values win over the environment.
    None means "not given on the command line".
    """
    base = Settings(platform=platform)

    app_store = base.app_store
    google_play = base.google_play
    if platform is Platform.IOS:
        app_store = replace(
            app_store,
            app_id=app_id or app_store.app_id,
            key_id=key_id or app_store.key_id,
            issuer_id=issuer_id or app_store.issuer_id,
            private_key_path=(
                Path(private_key_path).expanduser() if private_key_path
                else app_store.private_key_path
            ),
        )
    else:
        google_play = replace(
            google_play,
            package_name=app_id or google_play.package_name,
            service_account_path=(
                Path(service_account_path).expanduser() if service_account_path
                else google_play.service_account_path
            ),
        )

    ui = base.ui
    if log_file:
        ui = replace(ui, log_file=Path(log_file))

    return replace(base, app_store=app_store, google_play=google_play, ui=ui)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get singleton Settings instance built from the environment only.
    Cached to ensure consistent settings throughout application lifecycle.
    """
    return Settings()
