"""
App Store Connect Store
=======================

Reads customer reviews and manages developer responses through the
App Store Connect API.

- Reviews come back in one bulk request (newest first, up to 200).
- A review's response is found through its `response` relationship, then
  fetched by ID. A missing relationship means "no response yet".
"""

import logging
from typing import List, Optional

from .base import ReviewStore, StoreTransport, parse_document
from .schemas import (
    CustomerReviewsDocument,
    RelationshipDocument,
    ReviewResponseDocument,
)
from ...domain import Review, ReviewResponse

logger = logging.getLogger(__name__)

APP_STORE_CONNECT_API_BASE = "https://api.appstoreconnect.apple.com/v1"


class AppStoreStore(ReviewStore):
    """
    App Store Connect backend.

    Apple does not page reviews from this tool's point of view, so
    load_next_page() is always empty and has_more_reviews() always False.
    """

    def __init__(
        self,
        app_id: str,
        transport: StoreTransport,
        page_size: int = 200,
        base_url: str = APP_STORE_CONNECT_API_BASE,
    ):
        self._app_id = app_id
        self._http = transport
        self._page_size = page_size
        self._base_url = base_url.rstrip("/")

    def list_reviews(self) -> List[Review]:
        action = "Fetch reviews"
        url = f"{self._base_url}/apps/{self._app_id}/customerReviews"
        response = self._http.send(
            action, "GET", url,
            params={"limit": str(self._page_size), "sort": "-createdDate"},
        )
        document = parse_document(action, response, CustomerReviewsDocument)
        reviews = [resource.to_review() for resource in document.data]
        logger.info(f"Fetched {len(reviews)} App Store reviews for app {self._app_id}")
        return reviews

    def load_next_page(self) -> List[Review]:
        return []

    def has_more_reviews(self) -> bool:
        return False

    def refresh_all(self) -> List[Review]:
        return self.list_reviews()

    def submit_response(self, review_id: str, text: str) -> None:
        body = {
            "data": {
                "type": "customerReviewResponses",
                "attributes": {"responseBody": text},
                "relationships": {
                    "review": {
                        "data": {"type": "customerReviews", "id": review_id}
                    }
                },
            }
        }
        self._http.send(
            "Submit response", "POST", f"{self._base_url}/customerReviewResponses",
            json=body,
        )
        logger.info(f"Submitted App Store response for review {review_id}")

    def get_response(self, review_id: str) -> Optional[ReviewResponse]:
        action = "Fetch response"
        url = f"{self._base_url}/customerReviews/{review_id}/relationships/response"
        response = self._http.request(action, "GET", url)

        if response.status_code == 404:
            logger.debug(f"No response exists for review {review_id} (404)")
            return None
        self._http.raise_for_status(action, response)

        linkage = parse_document(action, response, RelationshipDocument)
        if linkage.data is None:
            logger.debug(f"Relationship data is null for review {review_id}")
            return None

        return self._get_response_details(linkage.data.id)

    def _get_response_details(self, response_id: str) -> ReviewResponse:
        action = "Fetch response details"
        url = f"{self._base_url}/customerReviewResponses/{response_id}"
        response = self._http.send(action, "GET", url)
        document = parse_document(action, response, ReviewResponseDocument)
        return document.data.to_response()
