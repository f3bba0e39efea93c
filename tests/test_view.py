"""Rendering tests: draw each screen to a recording console and inspect the text."""

from dataclasses import replace

from rich.console import Console

from reviewdesk.application import AppState, InputMode, ReviewCollection, SessionState
from reviewdesk.domain import ReviewResponse, TextBuffer
from reviewdesk.presentation import render_session


def render(renderable):
    console = Console(record=True, width=140, color_system=None)
    console.print(renderable)
    return console.export_text()


def session_for(reviews, **kw):
    return SessionState(review_ids=reviews.ids, selected=0 if len(reviews) else None, **kw)


def test_browser_lists_reviews(review_factory):
    reviews = ReviewCollection([
        review_factory("a", rating=5, reviewer_nickname="alice", minutes=5),
        review_factory("b", rating=2, reviewer_nickname="bob"),
    ])
    text = render(render_session(session_for(reviews, has_more=True), reviews, "Google Play"))

    assert "Google Play Reviews (2) - more available" in text
    assert ">> ★★★★★ alice" in text
    assert "★★ bob" in text
    assert "Territory: USA" in text
    assert "'q' - Quit" in text


def test_empty_browser(review_factory):
    reviews = ReviewCollection()
    text = render(render_session(session_for(reviews), reviews))
    assert "No reviews" in text


def test_status_message_shown_above_screen(review_factory):
    reviews = ReviewCollection([review_factory("a")])
    state = session_for(reviews, status="Failed to refresh reviews: boom")
    text = render(render_session(state, reviews))
    assert text.index("Failed to refresh reviews: boom") < text.index("Review Details")


def test_composer_shows_limit_and_cursor(review_factory):
    reviews = ReviewCollection([review_factory("a")])
    state = session_for(
        reviews,
        mode=AppState.WRITING_RESPONSE,
        buffer=TextBuffer("Thanks", cursor=6, limit=350),
    )
    text = render(render_session(state, reviews))
    assert "Write Response (6/350 chars)" in text
    assert "Thanks█" in text
    assert "No existing response" in text


def test_composer_warns_about_existing_response(review_factory):
    review = review_factory("a")
    review.response = ReviewResponse("x", "Old reply", review.created_date)
    reviews = ReviewCollection([review])
    state = session_for(reviews, mode=AppState.WRITING_RESPONSE, input_mode=InputMode.AI)
    text = render(render_session(state, reviews))
    assert "ALREADY RESPONDED" in text
    assert "Old reply" in text
    assert "Update/Replace Response" in text


def test_confirmation_and_generating_screens(review_factory):
    reviews = ReviewCollection([review_factory("a")])
    state = session_for(
        reviews, mode=AppState.CONFIRMING_RESPONSE, buffer=TextBuffer.prefilled("Thanks!")
    )
    assert "Submit this response? (y/n)" in render(render_session(state, reviews))

    generating = replace(state, mode=AppState.GENERATING_AI)
    assert "Generating AI response..." in render(render_session(generating, reviews))
