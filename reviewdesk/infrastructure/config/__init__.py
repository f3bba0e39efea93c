from .settings import (
    AppStoreSettings,
    GooglePlaySettings,
    LLMSettings,
    Platform,
    Settings,
    UISettings,
    build_settings,
    get_settings,
)

__all__ = [
    "AppStoreSettings",
    "GooglePlaySettings",
    "LLMSettings",
    "Platform",
    "Settings",
    "UISettings",
    "build_settings",
    "get_settings",
]
