from .base import (
    ReviewStore,
    ReviewStoreError,
    StoreParseError,
    StoreRequestError,
    StoreTransport,
)
from .app_store import AppStoreStore
from .google_play import GooglePlayStore, PaginationCursor
from .client import ReviewClient, create_client

__all__ = [
    "AppStoreStore",
    "GooglePlayStore",
    "PaginationCursor",
    "ReviewClient",
    "ReviewStore",
    "ReviewStoreError",
    "StoreParseError",
    "StoreRequestError",
    "StoreTransport",
    "create_client",
]
