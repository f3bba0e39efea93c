"""Tests for the ReviewClient facade and backend selection."""

from reviewdesk.infrastructure.config import Platform, build_settings
from reviewdesk.infrastructure.stores import (
    AppStoreStore,
    GooglePlayStore,
    ReviewClient,
    ReviewStore,
    create_client,
)


class RecordingStore(ReviewStore):

    def __init__(self, more=False):
        self.more = more
        self.calls = []

    def list_reviews(self):
        self.calls.append("list_reviews")
        return []

    def load_next_page(self):
        self.calls.append("load_next_page")
        return []

    def has_more_reviews(self):
        return self.more

    def refresh_all(self):
        self.calls.append("refresh_all")
        return []

    def submit_response(self, review_id, text):
        self.calls.append(("submit_response", review_id, text))

    def get_response(self, review_id):
        self.calls.append(("get_response", review_id))
        return None


def test_verbs_delegate_to_store():
    store = RecordingStore()
    client = ReviewClient(store)
    client.get_reviews()
    client.refresh_all_reviews()
    client.submit_response("r1", "Thanks")
    assert client.get_review_response("r1") is None
    assert store.calls == [
        "list_reviews",
        "refresh_all",
        ("submit_response", "r1", "Thanks"),
        ("get_response", "r1"),
    ]


def test_load_more_skips_store_when_exhausted():
    store = RecordingStore(more=False)
    assert ReviewClient(store).load_more_reviews() == []
    assert store.calls == []


def test_load_more_when_pages_remain():
    store = RecordingStore(more=True)
    client = ReviewClient(store)
    client.load_more_reviews()
    assert client.has_more_reviews()
    assert store.calls == ["load_next_page"]


def test_create_client_for_android(tmp_path):
    settings = build_settings(
        Platform.ANDROID,
        app_id="com.example.app",
        service_account_path=str(tmp_path / "sa.json"),
    )
    client = create_client(settings)
    assert isinstance(client._store, GooglePlayStore)
    assert not hasattr(client, "platform")
    assert client.response_char_limit == 350


def test_create_client_for_ios(tmp_path):
    settings = build_settings(
        Platform.IOS,
        app_id="123",
        key_id="KEY",
        issuer_id="ISS",
        private_key_path=str(tmp_path / "key.p8"),
    )
    client = create_client(settings)
    assert isinstance(client._store, AppStoreStore)
    assert client.response_char_limit is None
