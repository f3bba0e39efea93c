"""
Review Client - Single Entry Point to Whichever Store Is Configured
====================================================================

The session only ever talks to ReviewClient. Which backend sits behind it is
decided once, from Settings, by create_client().

USAGE:
    client = create_client(settings)
    reviews = client.get_reviews()
    if client.has_more_reviews():
        reviews += client.load_more_reviews()
    response = client.get_review_response(reviews[0].id)   # None if no reply yet
"""

import logging
from typing import List, Optional

import requests

from .app_store import AppStoreStore
from .base import ReviewStore, StoreTransport
from .google_play import GooglePlayStore
from ..auth import AppStoreTokenManager, GooglePlayTokenManager
from ..config import Platform, Settings
from ...domain import Review, ReviewResponse

logger = logging.getLogger(__name__)


class ReviewClient:
    """Uniform review verbs over one ReviewStore backend."""

    def __init__(
        self,
        store: ReviewStore,
        response_char_limit: Optional[int] = None,
    ):
        self._store = store
        self._response_char_limit = response_char_limit

    @property
    def response_char_limit(self) -> Optional[int]:
        """Maximum reply length the active store accepts, if any."""
        return self._response_char_limit

    def get_reviews(self) -> List[Review]:
        return self._store.list_reviews()

    def load_more_reviews(self) -> List[Review]:
        if not self._store.has_more_reviews():
            return []
        return self._store.load_next_page()

    def has_more_reviews(self) -> bool:
        return self._store.has_more_reviews()

    def refresh_all_reviews(self) -> List[Review]:
        return self._store.refresh_all()

    def submit_response(self, review_id: str, text: str) -> None:
        self._store.submit_response(review_id, text)

    def get_review_response(self, review_id: str) -> Optional[ReviewResponse]:
        return self._store.get_response(review_id)


def create_client(settings: Settings, session: Optional[requests.Session] = None) -> ReviewClient:
    """Build the ReviewClient for the configured platform."""
    session = session or requests.Session()

    if settings.platform is Platform.ANDROID:
        play = settings.google_play
        tokens = GooglePlayTokenManager(play.service_account_path, session=session)
        transport = StoreTransport(tokens, session=session, timeout=settings.http_timeout_seconds)
        store = GooglePlayStore(play.package_name, transport, page_size=play.page_size)
    else:
        apple = settings.app_store
        tokens = AppStoreTokenManager(apple.key_id, apple.issuer_id, apple.private_key_path)
        transport = StoreTransport(tokens, session=session, timeout=settings.http_timeout_seconds)
        store = AppStoreStore(apple.app_id, transport, page_size=apple.page_size)

    logger.info(f"Review client ready for {settings.platform.label} app {settings.app_id}")
    return ReviewClient(
        store,
        response_char_limit=settings.response_char_limit,
    )
