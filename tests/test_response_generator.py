"""Tests for LLM reply drafting; the HTTP call is patched out."""

import pytest
import requests

from reviewdesk.infrastructure.config import LLMSettings
from reviewdesk.infrastructure.llm import ResponseGenerationError, ResponseGenerator
from reviewdesk.infrastructure.llm import response_generator


class CompletionResponse:

    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self.payload


def settings(**overrides):
    values = dict(
        api_key="sk-test",
        api_url="https://llm.example/v1/chat/completions",
        model="gpt-4.1-nano",
        keywords=(),
        support_email="",
        custom_instructions="",
        app_context="",
    )
    values.update(overrides)
    return LLMSettings(**values)


@pytest.fixture
def posted(monkeypatch):
    calls = []
    replies = []

    def fake_post(url, **kwargs):
        calls.append((url, kwargs))
        reply = replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply

    monkeypatch.setattr(response_generator.requests, "post", fake_post)
    return calls, replies


def completion(text):
    return CompletionResponse({"choices": [{"message": {"role": "assistant", "content": text}}]})


def test_generate_sends_chat_completion(posted, review_factory):
    calls, replies = posted
    replies.append(completion("  Thanks so much!  "))

    text = ResponseGenerator(settings()).generate(review_factory(rating=5))

    assert text == "Thanks so much!"
    url, kwargs = calls[0]
    assert url == "https://llm.example/v1/chat/completions"
    assert kwargs["headers"]["Authorization"] == "Bearer sk-test"
    assert kwargs["json"]["model"] == "gpt-4.1-nano"
    assert kwargs["json"]["temperature"] == 0.7
    assert kwargs["json"]["max_tokens"] == 500
    assert [m["role"] for m in kwargs["json"]["messages"]] == ["system", "user"]


@pytest.mark.parametrize("failure", [
    requests.Timeout("slow"),
    requests.ConnectionError("down"),
    CompletionResponse({}, status_code=429),
    completion(""),
    CompletionResponse({"choices": []}),
])
def test_generate_failures_raise(posted, review_factory, failure):
    _, replies = posted
    replies.append(failure)
    with pytest.raises(ResponseGenerationError):
        ResponseGenerator(settings()).generate(review_factory())


def test_generate_without_key_raises(review_factory):
    with pytest.raises(ResponseGenerationError):
        ResponseGenerator(settings(api_key="")).generate(review_factory())


def test_draft_falls_back_on_failure(posted, review_factory):
    _, replies = posted
    replies.append(requests.ConnectionError("down"))
    review = review_factory(rating=2, title="Crashes")
    assert ResponseGenerator(settings()).draft(review) == (
        'Thank you for your 2-star review about "Crashes"! '
        "We appreciate your feedback and are constantly working to improve our app."
    )


def test_draft_without_key_makes_no_request(posted, review_factory):
    calls, _ = posted
    text = ResponseGenerator(settings(api_key="")).draft(review_factory(title=None))
    assert text.startswith("Thank you for your 4-star review!")
    assert calls == []


def test_system_prompt_customisation():
    generator = ResponseGenerator(
        settings(
            keywords=("offline", "sync"),
            support_email="help@example.com",
            custom_instructions="Sign off as the Team",
            app_context="A hiking app",
        ),
        max_length=350,
    )
    prompt = generator.build_system_prompt()
    assert "Keep responses under 350 characters" in prompt
    assert "offline, sync" in prompt
    assert "help@example.com" in prompt
    assert "Sign off as the Team" in prompt
    assert "A hiking app" in prompt


def test_user_prompt_describes_review(review_factory):
    prompt = ResponseGenerator(settings()).build_user_prompt(
        review_factory(rating=1, title=None, body="Broken")
    )
    assert "1-star very negative review" in prompt
    assert '"(No title)"' in prompt
    assert '"Broken"' in prompt
