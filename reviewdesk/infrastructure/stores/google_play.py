"""
Google Play Store
=================

Reads reviews and posts replies through the Google Play Developer API
(androidpublisher v3).

- Reviews are paged with an opaque continuation token. The cursor lives here;
  has_more_reviews() only inspects it.
- Replies are published immediately, so every reply reads back as PUBLISHED.
- Looking up a reply never fails loudly: any non-success status means
  "no reply".
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from .base import ReviewStore, StoreParseError, StoreTransport, parse_document
from .schemas import PlayReview, PlayReviewsPage
from ...domain import Review, ReviewResponse

logger = logging.getLogger(__name__)

ANDROID_PUBLISHER_API_BASE = "https://androidpublisher.googleapis.com/androidpublisher/v3"


@dataclass
class PaginationCursor:
    """Continuation state for the next page of reviews."""
    token: Optional[str] = None
    has_more: bool = True

    def reset(self) -> None:
        self.token = None
        self.has_more = True

    def advance(self, next_token: Optional[str]) -> None:
        self.token = next_token
        self.has_more = next_token is not None


class GooglePlayStore(ReviewStore):
    """Google Play Developer API backend."""

    def __init__(
        self,
        package_name: str,
        transport: StoreTransport,
        page_size: int = 100,
        base_url: str = ANDROID_PUBLISHER_API_BASE,
    ):
        self._package_name = package_name
        self._http = transport
        self._page_size = page_size
        self._base_url = f"{base_url.rstrip('/')}/applications/{package_name}"
        self._cursor = PaginationCursor()

    @property
    def cursor(self) -> PaginationCursor:
        return self._cursor

    def list_reviews(self) -> List[Review]:
        self._cursor.reset()
        return self.load_next_page()

    def load_next_page(self) -> List[Review]:
        if not self._cursor.has_more:
            return []

        action = "Fetch reviews"
        params = {"maxResults": str(self._page_size)}
        if self._cursor.token:
            params["token"] = self._cursor.token

        response = self._http.send(action, "GET", f"{self._base_url}/reviews", params=params)
        page = parse_document(action, response, PlayReviewsPage)

        try:
            reviews = [item.to_review() for item in page.reviews]
        except ValueError as e:
            raise StoreParseError(action, str(e), response.text) from e
        self._cursor.advance(page.next_page_token)
        logger.info(
            f"Fetched {len(reviews)} Google Play reviews for {self._package_name} "
            f"(more: {self._cursor.has_more})"
        )
        return reviews

    def has_more_reviews(self) -> bool:
        return self._cursor.has_more

    def refresh_all(self) -> List[Review]:
        reviews = self.list_reviews()
        while self._cursor.has_more:
            reviews.extend(self.load_next_page())
        return reviews

    def submit_response(self, review_id: str, text: str) -> None:
        self._http.send(
            "Submit response", "POST", f"{self._base_url}/reviews/{review_id}:reply",
            json={"replyText": text},
        )
        logger.info(f"Submitted Google Play reply for review {review_id}")

    def get_response(self, review_id: str) -> Optional[ReviewResponse]:
        action = "Fetch response"
        response = self._http.request(action, "GET", f"{self._base_url}/reviews/{review_id}")
        if not response.ok:
            logger.debug(f"No reply found for review {review_id} (status {response.status_code})")
            return None
        review = parse_document(action, response, PlayReview)
        return review.to_response()
