"""
Review Store - Abstraction Layer for Store APIs
================================================

Provides a unified interface for reading reviews and posting developer replies.
Two backends implement it: App Store Connect and Google Play.

USAGE:
    transport = StoreTransport(GooglePlayTokenManager(service_account_path))
    store = GooglePlayStore("com.example.app", transport)
    reviews = store.list_reviews()
    while store.has_more_reviews():
        reviews += store.load_next_page()
    store.submit_response(reviews[0].id, "Thanks for the feedback!")
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, List, Optional, Type, TypeVar

import requests
from pydantic import BaseModel, ValidationError

from ..auth import TokenManager
from ...domain import Review, ReviewResponse

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class ReviewStoreError(Exception):
    """Base exception for store API errors."""
    pass


class StoreRequestError(ReviewStoreError):
    """
    The store answered with a non-success status, or could not be reached.

    `status` is None for transport failures; `body` holds the raw response text.
    """

    def __init__(self, action: str, status: Optional[int], body: str):
        self.action = action
        self.status = status
        self.body = body
        if status is None:
            super().__init__(f"{action} failed: {body}")
        else:
            super().__init__(f"{action} failed with status {status}: {body}")


class StoreParseError(ReviewStoreError):
    """The store answered with JSON we could not understand."""

    def __init__(self, action: str, detail: str, payload: str):
        self.action = action
        self.payload = payload
        super().__init__(f"Failed to parse {action} response: {detail}. Response was: {payload}")


class ReviewStore(ABC):
    """
    Abstract interface for a store backend.
    Implement this interface to add new stores.
    """

    @abstractmethod
    def list_reviews(self) -> List[Review]:
        """Fetch the first (or only) batch of reviews, resetting any paging state."""
        ...

    @abstractmethod
    def load_next_page(self) -> List[Review]:
        """Fetch the next batch. Returns [] once nothing is left."""
        ...

    @abstractmethod
    def has_more_reviews(self) -> bool:
        """Whether load_next_page() can return anything. Never touches the network."""
        ...

    @abstractmethod
    def refresh_all(self) -> List[Review]:
        """Fetch every available review from the beginning."""
        ...

    @abstractmethod
    def submit_response(self, review_id: str, text: str) -> None:
        """Post a developer reply to a review."""
        ...

    @abstractmethod
    def get_response(self, review_id: str) -> Optional[ReviewResponse]:
        """Fetch the developer reply of a review, or None if there is none."""
        ...


class StoreTransport:
    """
    Authenticated HTTP access shared by the store backends.

    Attaches a fresh bearer token to every request and turns transport failures
    and non-success statuses into StoreRequestError. A 401 drops the cached
    credential so the next request signs a new one.
    """

    def __init__(
        self,
        tokens: TokenManager,
        session: Optional[requests.Session] = None,
        timeout: int = 30,
    ):
        self._tokens = tokens
        self._session = session or requests.Session()
        self._timeout = timeout

    def request(self, action: str, method: str, url: str, **kwargs) -> requests.Response:
        """Send a request; the response may have any status."""
        credential = self._tokens.ensure_valid()
        headers = kwargs.pop("headers", {})
        headers["Authorization"] = f"Bearer {credential.token}"
        logger.debug(f"{action}: {method} {url}")
        try:
            response = self._session.request(
                method, url, headers=headers, timeout=self._timeout, **kwargs
            )
        except requests.RequestException as e:
            raise StoreRequestError(action, None, str(e)) from e
        logger.debug(f"{action}: status {response.status_code}")
        if response.status_code == 401:
            # Rejected credential: sign a new one on the next request
            logger.warning(f"{action}: credential rejected, will regenerate")
            self._tokens.invalidate()
        return response

    def send(self, action: str, method: str, url: str, **kwargs) -> requests.Response:
        """Send a request and require a success status."""
        response = self.request(action, method, url, **kwargs)
        self.raise_for_status(action, response)
        return response

    @staticmethod
    def raise_for_status(action: str, response: requests.Response) -> None:
        if not response.ok:
            raise StoreRequestError(action, response.status_code, response.text)

    @staticmethod
    def decode(action: str, response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise StoreParseError(action, str(e), response.text) from e


def parse_document(action: str, response: requests.Response, model: Type[ModelT]) -> ModelT:
    """Decode a response body into a schema model or raise StoreParseError."""
    payload = StoreTransport.decode(action, response)
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise StoreParseError(action, str(e), response.text) from e
