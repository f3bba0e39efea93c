"""Shared fixtures: canned HTTP responses, a recording session and review factories."""

import json
from datetime import datetime, timedelta, timezone

import pytest

from reviewdesk.domain import Review
from reviewdesk.infrastructure.auth import Credential, TokenManager
from reviewdesk.infrastructure.stores import StoreTransport

T0 = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class FakeResponse:
    """Just enough of requests.Response for the stores."""

    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        if text is None:
            text = json.dumps(payload) if payload is not None else ""
        self.text = text

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        return json.loads(self.text)


class FakeSession:
    """Returns queued responses in order and records every request."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def queue(self, *responses):
        self.responses.extend(responses)

    def request(self, method, url, headers=None, timeout=None, **kwargs):
        self.calls.append({
            "method": method,
            "url": url,
            "headers": headers or {},
            "timeout": timeout,
            **kwargs,
        })
        if not self.responses:
            raise AssertionError(f"Unexpected request: {method} {url}")
        return self.responses.pop(0)


class StaticTokenManager(TokenManager):
    def __init__(self):
        super().__init__(clock=lambda: T0)
        self.generated = 0

    def _generate(self, now):
        self.generated += 1
        return Credential(token=f"token-{self.generated}", expires_at=now + timedelta(hours=1))


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def transport(session):
    return StoreTransport(StaticTokenManager(), session=session, timeout=30)


def make_review(review_id="r1", rating=4, minutes=0, **overrides):
    fields = dict(
        id=review_id,
        rating=rating,
        reviewer_nickname="alice",
        created_date=T0 + timedelta(minutes=minutes),
        territory="USA",
        title="Nice",
        body="Works well",
    )
    fields.update(overrides)
    return Review(**fields)


@pytest.fixture
def review_factory():
    return make_review
