from .tokens import (
    AppStoreTokenManager,
    Credential,
    CredentialUnavailableError,
    GooglePlayTokenManager,
    TokenManager,
)

__all__ = [
    "AppStoreTokenManager",
    "Credential",
    "CredentialUnavailableError",
    "GooglePlayTokenManager",
    "TokenManager",
]
