"""Tests for the App Store Connect backend against canned JSON:API documents."""

from datetime import datetime, timezone

import pytest
import requests

from conftest import FakeResponse, StaticTokenManager
from reviewdesk.domain import ResponseState
from reviewdesk.infrastructure.stores import (
    AppStoreStore,
    StoreParseError,
    StoreRequestError,
    StoreTransport,
)

BASE = "https://api.appstoreconnect.apple.com/v1"


def review_resource(review_id, created, **attributes):
    attrs = {
        "rating": 5,
        "title": "Love it",
        "body": "Best app ever",
        "reviewerNickname": "bob",
        "createdDate": created,
        "territory": "GBR",
    }
    attrs.update(attributes)
    return {"type": "customerReviews", "id": review_id, "attributes": attrs}


@pytest.fixture
def store(transport):
    return AppStoreStore("123456789", transport)


def test_list_reviews(store, session):
    session.queue(FakeResponse(200, {
        "data": [
            review_resource("r1", "2024-05-01T10:00:00-07:00"),
            review_resource("r2", "2024-04-30T09:00:00Z", title=None, territory=None),
        ],
        "links": {"self": f"{BASE}/apps/123456789/customerReviews"},
    }))

    reviews = store.list_reviews()

    call = session.calls[0]
    assert call["method"] == "GET"
    assert call["url"] == f"{BASE}/apps/123456789/customerReviews"
    assert call["params"] == {"limit": "200", "sort": "-createdDate"}
    assert call["headers"]["Authorization"] == "Bearer token-1"
    assert call["timeout"] == 30

    assert [review.id for review in reviews] == ["r1", "r2"]
    assert reviews[0].created_date == datetime(2024, 5, 1, 17, 0, tzinfo=timezone.utc)
    assert reviews[0].territory == "GBR"
    assert reviews[1].title is None


def test_missing_territory_defaults_to_unknown(store, session):
    resource = review_resource("r1", "2024-05-01T10:00:00Z")
    del resource["attributes"]["territory"]
    session.queue(FakeResponse(200, {"data": [resource]}))
    assert store.list_reviews()[0].territory == "Unknown"


def test_app_store_never_pages(store):
    assert not store.has_more_reviews()
    assert store.load_next_page() == []


def test_list_reviews_http_error(store, session):
    session.queue(FakeResponse(401, text='{"errors": [{"status": "401"}]}'))
    with pytest.raises(StoreRequestError) as excinfo:
        store.list_reviews()
    assert excinfo.value.status == 401
    assert "401" in excinfo.value.body


def test_rejected_credential_is_regenerated(store, session):
    session.queue(FakeResponse(401, text="unauthorized"), FakeResponse(200, {"data": []}))
    with pytest.raises(StoreRequestError):
        store.list_reviews()
    assert store.list_reviews() == []
    assert session.calls[0]["headers"]["Authorization"] == "Bearer token-1"
    assert session.calls[1]["headers"]["Authorization"] == "Bearer token-2"


def test_list_reviews_malformed_payload(store, session):
    session.queue(FakeResponse(200, {"data": [{"id": "r1"}]}))
    with pytest.raises(StoreParseError) as excinfo:
        store.list_reviews()
    assert '"r1"' in excinfo.value.payload


def test_list_reviews_not_json(store, session):
    session.queue(FakeResponse(200, text="<html>"))
    with pytest.raises(StoreParseError):
        store.list_reviews()


def test_transport_failure():
    class BrokenSession:
        def request(self, *args, **kwargs):
            raise requests.ConnectionError("no route to host")

    transport = StoreTransport(StaticTokenManager(), session=BrokenSession())
    store = AppStoreStore("123456789", transport)
    with pytest.raises(StoreRequestError) as excinfo:
        store.list_reviews()
    assert excinfo.value.status is None


def test_submit_response(store, session):
    session.queue(FakeResponse(201, {"data": {"id": "resp-1"}}))
    store.submit_response("r1", "Thank you!")

    call = session.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == f"{BASE}/customerReviewResponses"
    assert call["json"] == {
        "data": {
            "type": "customerReviewResponses",
            "attributes": {"responseBody": "Thank you!"},
            "relationships": {
                "review": {"data": {"type": "customerReviews", "id": "r1"}}
            },
        }
    }


def test_submit_response_rejected(store, session):
    session.queue(FakeResponse(409, text="conflict"))
    with pytest.raises(StoreRequestError, match="409"):
        store.submit_response("r1", "Thank you!")


class TestGetResponse:

    def test_not_found_means_no_response(self, store, session):
        session.queue(FakeResponse(404, text="not found"))
        assert store.get_response("r1") is None

    def test_missing_response_is_none_every_time(self, store, session):
        session.queue(FakeResponse(404, text="not found"), FakeResponse(200, {"data": None}))
        assert store.get_response("r1") is None
        assert store.get_response("r1") is None
        assert len(session.calls) == 2

    def test_null_linkage_means_no_response(self, store, session):
        session.queue(FakeResponse(200, {"data": None}))
        assert store.get_response("r1") is None
        assert len(session.calls) == 1

    def test_fetches_response_details(self, store, session):
        session.queue(
            FakeResponse(200, {"data": {"type": "customerReviewResponses", "id": "resp-1"}}),
            FakeResponse(200, {"data": {
                "type": "customerReviewResponses",
                "id": "resp-1",
                "attributes": {
                    "responseBody": "Thanks!",
                    "lastModifiedDate": "2024-05-02T08:00:00Z",
                    "state": "PUBLISHED",
                },
            }}),
        )

        response = store.get_response("r1")

        assert session.calls[0]["url"] == f"{BASE}/customerReviews/r1/relationships/response"
        assert session.calls[1]["url"] == f"{BASE}/customerReviewResponses/resp-1"
        assert response.id == "resp-1"
        assert response.body == "Thanks!"
        assert response.state is ResponseState.PUBLISHED

    def test_unpublished_state_is_pending(self, store, session):
        session.queue(
            FakeResponse(200, {"data": {"type": "customerReviewResponses", "id": "resp-1"}}),
            FakeResponse(200, {"data": {
                "id": "resp-1",
                "attributes": {
                    "responseBody": "Thanks!",
                    "lastModifiedDate": "2024-05-02T08:00:00Z",
                    "state": "PENDING_PUBLISH",
                },
            }}),
        )
        assert store.get_response("r1").state is ResponseState.PENDING

    def test_server_error_raises(self, store, session):
        session.queue(FakeResponse(500, text="boom"))
        with pytest.raises(StoreRequestError):
            store.get_response("r1")
