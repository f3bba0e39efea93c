"""
Wire Schemas - Store API Payload Shapes
=======================================

Pydantic models for the parts of the App Store Connect (JSON:API) and Google
Play Developer API payloads this tool reads. Unknown fields are ignored; missing
required fields raise ValidationError, which the stores report as StoreParseError.
"""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ...domain import Review, ReviewResponse, ResponseState

UNKNOWN_TERRITORY = "Unknown"
ANONYMOUS_REVIEWER = "Anonymous"


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# ── App Store Connect ──────────────────────────────────────────────

class ResourceIdentifier(_Payload):
    id: str
    type: str


class CustomerReviewAttributes(_Payload):
    rating: int
    title: Optional[str] = None
    body: Optional[str] = None
    reviewer_nickname: Optional[str] = Field(default=None, alias="reviewerNickname")
    created_date: datetime = Field(alias="createdDate")
    territory: Optional[str] = None


class CustomerReviewResource(_Payload):
    id: str
    type: str = "customerReviews"
    attributes: CustomerReviewAttributes

    def to_review(self) -> Review:
        attrs = self.attributes
        return Review(
            id=self.id,
            rating=attrs.rating,
            reviewer_nickname=attrs.reviewer_nickname or ANONYMOUS_REVIEWER,
            created_date=_as_utc(attrs.created_date),
            territory=attrs.territory or UNKNOWN_TERRITORY,
            title=attrs.title,
            body=attrs.body,
        )


class PagedDocumentLinks(_Payload):
    self_link: Optional[str] = Field(default=None, alias="self")
    next: Optional[str] = None


class CustomerReviewsDocument(_Payload):
    data: List[CustomerReviewResource]
    links: Optional[PagedDocumentLinks] = None


class RelationshipDocument(_Payload):
    """Linkage document: `data` is null when the review has no response."""
    data: Optional[ResourceIdentifier] = None


class ReviewResponseAttributes(_Payload):
    response_body: str = Field(default="", alias="responseBody")
    last_modified_date: datetime = Field(alias="lastModifiedDate")
    state: str = "PENDING_PUBLISH"


class ReviewResponseResource(_Payload):
    id: str
    attributes: ReviewResponseAttributes

    def to_response(self) -> ReviewResponse:
        attrs = self.attributes
        return ReviewResponse(
            id=self.id,
            body=attrs.response_body,
            last_modified=_as_utc(attrs.last_modified_date),
            state=ResponseState.PUBLISHED if attrs.state == "PUBLISHED" else ResponseState.PENDING,
        )


class ReviewResponseDocument(_Payload):
    data: ReviewResponseResource


# ── Google Play ────────────────────────────────────────────────────

class Timestamp(_Payload):
    seconds: int = 0
    nanos: int = 0

    def to_datetime(self) -> datetime:
        return datetime.fromtimestamp(self.seconds + self.nanos / 1e9, tz=timezone.utc)


class UserComment(_Payload):
    text: str = ""
    last_modified: Timestamp = Field(default_factory=Timestamp, alias="lastModified")
    star_rating: int = Field(alias="starRating", ge=1, le=5)
    reviewer_language: Optional[str] = Field(default=None, alias="reviewerLanguage")
    device: Optional[str] = None
    android_os_version: Optional[int] = Field(default=None, alias="androidOsVersion")
    app_version_name: Optional[str] = Field(default=None, alias="appVersionName")

    def device_info(self) -> str:
        """Join whichever locale/device details are present."""
        parts = [self.reviewer_language, self.device]
        if self.android_os_version is not None:
            parts.append(f"Android API {self.android_os_version}")
        present = [part for part in parts if part]
        return " · ".join(present) if present else UNKNOWN_TERRITORY


class DeveloperComment(_Payload):
    text: str = ""
    last_modified: Timestamp = Field(default_factory=Timestamp, alias="lastModified")


class Comment(_Payload):
    user_comment: Optional[UserComment] = Field(default=None, alias="userComment")
    developer_comment: Optional[DeveloperComment] = Field(default=None, alias="developerComment")


class PlayReview(_Payload):
    review_id: str = Field(alias="reviewId")
    author_name: Optional[str] = Field(default=None, alias="authorName")
    comments: List[Comment] = Field(default_factory=list)

    @property
    def user_comment(self) -> Optional[UserComment]:
        return next((c.user_comment for c in self.comments if c.user_comment), None)

    @property
    def developer_comment(self) -> Optional[DeveloperComment]:
        return next((c.developer_comment for c in self.comments if c.developer_comment), None)

    def to_review(self) -> Review:
        comment = self.user_comment
        if comment is None:
            raise ValueError(f"review {self.review_id} has no user comment")
        return Review(
            id=self.review_id,
            rating=comment.star_rating,
            reviewer_nickname=self.author_name or ANONYMOUS_REVIEWER,
            created_date=comment.last_modified.to_datetime(),
            territory=comment.device_info(),
            title=None,
            body=comment.text.strip() or None,
            version=comment.app_version_name,
        )

    def to_response(self) -> Optional[ReviewResponse]:
        reply = self.developer_comment
        if reply is None:
            return None
        # Developer replies on Google Play go live immediately
        return ReviewResponse(
            id=self.review_id,
            body=reply.text,
            last_modified=reply.last_modified.to_datetime(),
            state=ResponseState.PUBLISHED,
        )


class TokenPagination(_Payload):
    next_page_token: Optional[str] = Field(default=None, alias="nextPageToken")


class PlayReviewsPage(_Payload):
    reviews: List[PlayReview] = Field(default_factory=list)
    token_pagination: Optional[TokenPagination] = Field(default=None, alias="tokenPagination")

    @property
    def next_page_token(self) -> Optional[str]:
        if self.token_pagination is None:
            return None
        return self.token_pagination.next_page_token or None


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
