"""
Review Collection - The Session's In-Memory Review Set
=======================================================

Reviews keyed by ID, kept in newest-first order. Lives only as long as the
process; nothing is persisted.
"""

from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from ..domain import Review, ReviewResponse


class ReviewCollection:
    """
    Identifier-keyed review cache with newest-first ordering.

    Usage:
        reviews = ReviewCollection()
        reviews.replace(client.get_reviews())
        reviews.extend(client.load_more_reviews())
        reviews.attach_response(review_id, client.get_review_response(review_id))
    """

    def __init__(self, reviews: Iterable[Review] = ()):
        self._by_id: Dict[str, Review] = {}
        self._order: List[str] = []
        self.replace(reviews)

    def replace(self, reviews: Iterable[Review]) -> None:
        """Drop the current set and keep `reviews` instead."""
        self._by_id = {}
        for review in reviews:
            self._by_id[review.id] = review
        self._resort()

    def extend(self, reviews: Iterable[Review]) -> int:
        """
        Merge in another batch. A review seen again replaces the older copy but
        keeps a response that was already loaded. Returns the number of new IDs.
        """
        added = 0
        for review in reviews:
            existing = self._by_id.get(review.id)
            if existing is None:
                added += 1
            elif review.response is None:
                review.response = existing.response
            self._by_id[review.id] = review
        self._resort()
        return added

    def attach_response(self, review_id: str, response: Optional[ReviewResponse]) -> None:
        """Store the latest known response (or its absence) for a review."""
        review = self._by_id.get(review_id)
        if review is not None:
            review.response = response

    def get(self, review_id: Optional[str]) -> Optional[Review]:
        if review_id is None:
            return None
        return self._by_id.get(review_id)

    @property
    def ids(self) -> Tuple[str, ...]:
        return tuple(self._order)

    def __len__(self) -> int:
        return len(self._order)

    def __iter__(self) -> Iterator[Review]:
        return (self._by_id[review_id] for review_id in self._order)

    def _resort(self) -> None:
        # Stable sort: reviews created at the same instant keep arrival order
        ordered = sorted(self._by_id.values(), key=lambda r: r.created_date, reverse=True)
        self._order = [review.id for review in ordered]
