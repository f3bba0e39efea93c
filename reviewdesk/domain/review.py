"""
Review Records - Store-Agnostic Review Data
===========================================

Every review, no matter which store it comes from, is converted into these shapes.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class ResponseState(Enum):
    """Publication state of a developer response."""
    PENDING = "Pending"
    PUBLISHED = "Published"


@dataclass
class ReviewResponse:
    """Developer response attached to a review."""
    id: str
    body: str
    last_modified: datetime
    state: ResponseState = ResponseState.PENDING

    @property
    def is_published(self) -> bool:
        return self.state is ResponseState.PUBLISHED


@dataclass
class Review:
    """A single user review from either store."""
    id: str
    rating: int                          # 1 to 5 stars
    reviewer_nickname: str
    created_date: datetime               # always timezone-aware UTC
    territory: str                       # storefront, or locale/device info on Google Play
    title: Optional[str] = None
    body: Optional[str] = None
    version: Optional[str] = None
    response: Optional[ReviewResponse] = None   # loaded on demand

    @property
    def stars(self) -> str:
        return "★" * max(0, min(self.rating, 5))

    @property
    def has_response(self) -> bool:
        return self.response is not None
