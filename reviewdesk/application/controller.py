"""
Session Controller - Runs the State Machine Against the Real World
==================================================================

Owns the review collection and the current SessionState. Feeds inputs through
transition(), performs the effects it asks for (store and LLM calls), and feeds
each outcome back in. Every failure becomes a status message; nothing here
ends the session.
"""

import logging
from collections import deque
from typing import List, Optional

from .collection import ReviewCollection
from .session import (
    DraftReady,
    DraftResponse,
    Effect,
    FetchResponse,
    Input,
    LoadMoreReviews,
    OperationFailed,
    Quit,
    RefreshReviews,
    ResponseLoaded,
    ReviewsLoaded,
    SessionState,
    SubmissionFinished,
    SubmitResponse,
    transition,
)
from ..domain import Review, TextBuffer
from ..infrastructure.auth import CredentialUnavailableError
from ..infrastructure.llm import ResponseGenerator
from ..infrastructure.stores import ReviewClient, ReviewStoreError

logger = logging.getLogger(__name__)

# Failures the session recovers from by showing a message
RECOVERABLE_ERRORS = (ReviewStoreError, CredentialUnavailableError)


class SessionController:
    """
    USAGE:
        controller = SessionController(client, generator)
        controller.feed(Startup())               # loads the first reviews
        controller.feed(KeyPress("enter"))       # opens the selected review
        print(controller.state.mode)
    """

    def __init__(self, client: ReviewClient, generator: Optional[ResponseGenerator] = None):
        self.client = client
        self.generator = generator
        self.reviews = ReviewCollection()
        self.state = SessionState(buffer=TextBuffer(limit=client.response_char_limit))
        self.should_quit = False

    @property
    def selected_review(self) -> Optional[Review]:
        return self.reviews.get(self.state.selected_id)

    def dispatch(self, event: Input) -> List[Effect]:
        """Apply one input and return the effects still to be performed."""
        self.state, effects = transition(self.state, event)
        pending = []
        for effect in effects:
            if isinstance(effect, Quit):
                self.should_quit = True
            else:
                pending.append(effect)
        return pending

    def feed(self, event: Input) -> None:
        """Apply an input and run every effect it leads to, to completion."""
        queue = deque(self.dispatch(event))
        while queue:
            outcome = self.perform(queue.popleft())
            queue.extend(self.dispatch(outcome))

    def perform(self, effect: Effect) -> Input:
        """Carry out one effect and describe its outcome as a session input."""
        if isinstance(effect, RefreshReviews):
            return self._guard("Failed to refresh reviews", self._refresh, effect)
        if isinstance(effect, LoadMoreReviews):
            return self._guard("Failed to load more reviews", self._load_more, effect)
        if isinstance(effect, FetchResponse):
            return self._guard("Failed to fetch response data", self._fetch_response, effect)
        if isinstance(effect, DraftResponse):
            return self._draft(effect)
        if isinstance(effect, SubmitResponse):
            return self._guard("Failed to submit response", self._submit, effect)
        raise TypeError(f"Unknown session effect: {effect!r}")

    def _guard(self, failure: str, operation, effect: Effect) -> Input:
        try:
            return operation(effect)
        except RECOVERABLE_ERRORS as e:
            logger.error(f"{failure}: {e}")
            return OperationFailed(f"{failure}: {e}")

    def _refresh(self, effect: RefreshReviews) -> Input:
        if effect.exhaustive:
            reviews = self.client.refresh_all_reviews()
        else:
            reviews = self.client.get_reviews()
        self.reviews.replace(reviews)
        logger.info(f"Loaded {len(self.reviews)} reviews")
        return ReviewsLoaded(self.reviews.ids, self.client.has_more_reviews(), reset_selection=True)

    def _load_more(self, effect: LoadMoreReviews) -> Input:
        added = self.reviews.extend(self.client.load_more_reviews())
        logger.info(f"Loaded {added} more reviews ({len(self.reviews)} total)")
        return ReviewsLoaded(self.reviews.ids, self.client.has_more_reviews(), reset_selection=False)

    def _fetch_response(self, effect: FetchResponse) -> Input:
        response = self.client.get_review_response(effect.review_id)
        self.reviews.attach_response(effect.review_id, response)
        logger.debug(f"Review {effect.review_id} has response: {response is not None}")
        return ResponseLoaded(effect.review_id, then_draft=effect.then_draft)

    def _draft(self, effect: DraftResponse) -> Input:
        review = self.reviews.get(effect.review_id)
        if review is None:
            return DraftReady("Thank you for your feedback!")
        if self.generator is None:
            return DraftReady(ResponseGenerator.fallback_response(review))
        return DraftReady(self.generator.draft(review))

    def _submit(self, effect: SubmitResponse) -> Input:
        self.client.submit_response(effect.review_id, effect.text)
        return SubmissionFinished(effect.review_id)
