"""
Session State Machine - Browsing, Composing, Confirming
=======================================================

States:
    VIEWING_REVIEWS ──Enter──────────────► WRITING_RESPONSE ◄──n/Esc── CONFIRMING_RESPONSE
          │                                   │      ▲                       ▲
          └──'a'──► GENERATING_AI ──draft─────┘      └────────Ctrl+S─────────┘

transition() is a pure function: it takes the current SessionState and one
input, and returns the next SessionState plus the effects (network work) the
controller must carry out. The outcome of each effect comes back in as another
input (ReviewsLoaded, ResponseLoaded, DraftReady, SubmissionFinished,
OperationFailed). Rendering only reads SessionState.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Dict, Optional, Tuple, Union

from ..domain import TextBuffer


class AppState(Enum):
    VIEWING_REVIEWS = "viewing_reviews"
    WRITING_RESPONSE = "writing_response"
    CONFIRMING_RESPONSE = "confirming_response"
    GENERATING_AI = "generating_ai"


class InputMode(Enum):
    """How the text in the buffer got started."""
    MANUAL = "manual"
    AI = "ai"


SUBMIT_SUCCESS_MESSAGE = "Response submitted successfully!"


@dataclass(frozen=True)
class SessionState:
    mode: AppState = AppState.VIEWING_REVIEWS
    review_ids: Tuple[str, ...] = ()
    selected: Optional[int] = None
    buffer: TextBuffer = field(default_factory=TextBuffer)
    input_mode: InputMode = InputMode.MANUAL
    has_more: bool = False
    loading: bool = False
    status: Optional[str] = None

    @property
    def selected_id(self) -> Optional[str]:
        if self.selected is None:
            return None
        return self.review_ids[self.selected]


# ── Inputs ─────────────────────────────────────────────────────────

@dataclass(frozen=True)
class KeyPress:
    """
    A key from the terminal.

    `key` uses lowercase names with modifiers ("up", "enter", "ctrl+s", "alt+left");
    `char` is set for printable characters.
    """
    key: str
    char: Optional[str] = None


@dataclass(frozen=True)
class Startup:
    """Issued once when the UI comes up."""


@dataclass(frozen=True)
class ReviewsLoaded:
    review_ids: Tuple[str, ...]
    has_more: bool
    reset_selection: bool = True


@dataclass(frozen=True)
class ResponseLoaded:
    review_id: str
    then_draft: bool = False


@dataclass(frozen=True)
class DraftReady:
    text: str


@dataclass(frozen=True)
class SubmissionFinished:
    review_id: str


@dataclass(frozen=True)
class OperationFailed:
    message: str


Input = Union[
    KeyPress, Startup, ReviewsLoaded, ResponseLoaded,
    DraftReady, SubmissionFinished, OperationFailed,
]


# ── Effects ────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Quit:
    pass


@dataclass(frozen=True)
class RefreshReviews:
    """Reload the review set. `exhaustive` walks every page."""
    exhaustive: bool = True


@dataclass(frozen=True)
class LoadMoreReviews:
    pass


@dataclass(frozen=True)
class FetchResponse:
    review_id: str
    then_draft: bool = False


@dataclass(frozen=True)
class DraftResponse:
    review_id: str


@dataclass(frozen=True)
class SubmitResponse:
    review_id: str
    text: str


Effect = Union[Quit, RefreshReviews, LoadMoreReviews, FetchResponse, DraftResponse, SubmitResponse]
Transition = Tuple[SessionState, Tuple[Effect, ...]]

NO_EFFECTS: Tuple[Effect, ...] = ()


# ── Editing keys ───────────────────────────────────────────────────

EDIT_KEYS: Dict[str, Callable[[TextBuffer], TextBuffer]] = {
    "enter": TextBuffer.insert_newline,
    "backspace": TextBuffer.backspace,
    "delete": TextBuffer.delete,
    "left": TextBuffer.move_left,
    "right": TextBuffer.move_right,
    "home": TextBuffer.move_home,
    "end": TextBuffer.move_end,
    # Cmd+Left / Cmd+Right arrive as ctrl on most terminals
    "ctrl+left": TextBuffer.move_home,
    "ctrl+right": TextBuffer.move_end,
    "ctrl+a": TextBuffer.move_home,
    "ctrl+e": TextBuffer.move_end,
    # Option+Arrow arrives as alt+arrow, or as readline's alt+b / alt+f
    "alt+left": TextBuffer.move_word_backward,
    "alt+b": TextBuffer.move_word_backward,
    "alt+right": TextBuffer.move_word_forward,
    "alt+f": TextBuffer.move_word_forward,
    # Option+Backspace
    "alt+backspace": TextBuffer.delete_word_backward,
    "ctrl+w": TextBuffer.delete_word_backward,
    "ctrl+backspace": TextBuffer.delete_word_backward,
    "alt+w": TextBuffer.delete_word_backward,
    "alt+d": TextBuffer.delete_word_forward,
}

SUBMIT_KEYS = frozenset({"ctrl+s"})


# ── Transition function ────────────────────────────────────────────

def transition(state: SessionState, event: Input) -> Transition:
    """Compute the next state and the effects to run for one input."""
    if isinstance(event, KeyPress):
        if state.loading:
            return state, NO_EFFECTS
        # Any key dismisses the status message
        if state.status is not None:
            state = replace(state, status=None)
        handler = _KEY_HANDLERS[state.mode]
        return handler(state, event)

    if isinstance(event, Startup):
        return replace(state, loading=True), (RefreshReviews(exhaustive=False),)

    if isinstance(event, ReviewsLoaded):
        return _on_reviews_loaded(state, event), NO_EFFECTS

    if isinstance(event, ResponseLoaded):
        return _on_response_loaded(state, event)

    if isinstance(event, DraftReady):
        if state.mode is not AppState.GENERATING_AI:
            return state, NO_EFFECTS
        buffer = TextBuffer.prefilled(event.text, state.buffer.limit)
        return replace(
            state, mode=AppState.WRITING_RESPONSE, buffer=buffer, loading=False
        ), NO_EFFECTS

    if isinstance(event, SubmissionFinished):
        return replace(state, loading=False, status=SUBMIT_SUCCESS_MESSAGE), NO_EFFECTS

    if isinstance(event, OperationFailed):
        mode = state.mode
        if mode is AppState.GENERATING_AI:
            mode = AppState.VIEWING_REVIEWS
        return replace(state, mode=mode, loading=False, status=event.message), NO_EFFECTS

    raise TypeError(f"Unknown session input: {event!r}")


def _on_viewing_key(state: SessionState, event: KeyPress) -> Transition:
    if event.char == "q":
        return state, (Quit(),)

    if event.char == "r":
        return replace(state, loading=True), (RefreshReviews(exhaustive=True),)

    if event.char == "l":
        if not state.has_more:
            return state, NO_EFFECTS
        return replace(state, loading=True), (LoadMoreReviews(),)

    if event.key == "up":
        if state.selected is not None and state.selected > 0:
            return replace(state, selected=state.selected - 1), NO_EFFECTS
        return state, NO_EFFECTS

    if event.key == "down":
        if state.selected is not None and state.selected + 1 < len(state.review_ids):
            return replace(state, selected=state.selected + 1), NO_EFFECTS
        return state, NO_EFFECTS

    review_id = state.selected_id
    if review_id is None:
        return state, NO_EFFECTS

    if event.key == "enter":
        return replace(state, loading=True), (FetchResponse(review_id),)

    if event.char == "a":
        return replace(state, loading=True), (FetchResponse(review_id, then_draft=True),)

    return state, NO_EFFECTS


def _on_writing_key(state: SessionState, event: KeyPress) -> Transition:
    if event.key == "escape":
        return replace(
            state, mode=AppState.VIEWING_REVIEWS, buffer=state.buffer.cleared()
        ), NO_EFFECTS

    if event.key in SUBMIT_KEYS:
        if state.buffer.is_blank:
            return state, NO_EFFECTS
        return replace(state, mode=AppState.CONFIRMING_RESPONSE), NO_EFFECTS

    edit = EDIT_KEYS.get(event.key)
    if edit is not None:
        return replace(state, buffer=edit(state.buffer)), NO_EFFECTS

    if event.char is not None and len(event.char) == 1 and event.char.isprintable():
        return replace(state, buffer=state.buffer.insert(event.char)), NO_EFFECTS

    return state, NO_EFFECTS


def _on_confirming_key(state: SessionState, event: KeyPress) -> Transition:
    if event.char in ("y", "Y"):
        review_id = state.selected_id
        text = state.buffer.text
        state = replace(
            state,
            mode=AppState.VIEWING_REVIEWS,
            buffer=state.buffer.cleared(),
        )
        if review_id is None:
            return state, NO_EFFECTS
        return replace(state, loading=True), (SubmitResponse(review_id, text),)

    if event.char in ("n", "N") or event.key == "escape":
        return replace(state, mode=AppState.WRITING_RESPONSE), NO_EFFECTS

    return state, NO_EFFECTS


def _on_generating_key(state: SessionState, event: KeyPress) -> Transition:
    return state, NO_EFFECTS


_KEY_HANDLERS = {
    AppState.VIEWING_REVIEWS: _on_viewing_key,
    AppState.WRITING_RESPONSE: _on_writing_key,
    AppState.CONFIRMING_RESPONSE: _on_confirming_key,
    AppState.GENERATING_AI: _on_generating_key,
}


def _on_reviews_loaded(state: SessionState, event: ReviewsLoaded) -> SessionState:
    ids = tuple(event.review_ids)
    if not ids:
        selected = None
    elif event.reset_selection or state.selected_id not in ids:
        selected = 0
    else:
        selected = ids.index(state.selected_id)
    return replace(
        state,
        review_ids=ids,
        selected=selected,
        has_more=event.has_more,
        loading=False,
    )


def _on_response_loaded(state: SessionState, event: ResponseLoaded) -> Transition:
    if state.mode is not AppState.VIEWING_REVIEWS:
        return replace(state, loading=False), NO_EFFECTS

    buffer = state.buffer.cleared()
    if event.then_draft:
        return replace(
            state,
            mode=AppState.GENERATING_AI,
            input_mode=InputMode.AI,
            buffer=buffer,
        ), (DraftResponse(event.review_id),)

    return replace(
        state,
        mode=AppState.WRITING_RESPONSE,
        input_mode=InputMode.MANUAL,
        buffer=buffer,
        loading=False,
    ), NO_EFFECTS
