"""
Session View - Read-Only Rendering of the Session State
=======================================================

Turns a SessionState (plus the reviews it points at) into rich renderables.
Nothing here changes state; the terminal app calls render_session() on every tick.
"""

from typing import List, Optional

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..application.collection import ReviewCollection
from ..application.session import AppState, InputMode, SessionState
from ..domain import Review, TextBuffer

CURSOR = "█"
DATE_FORMAT = "%Y-%m-%d"
DATETIME_FORMAT = "%Y-%m-%d %H:%M"

HELP_LINES = [
    "↑/↓ - Navigate reviews",
    "Enter - Write manual response",
    "'a' - Generate AI response",
    "'r' - Refresh reviews",
    "'l' - Load more reviews (Google Play)",
    "'q' - Quit",
]

EDIT_HELP = (
    "Ctrl+S submit · Esc cancel · Alt+←/→ word jump · "
    "Ctrl+W / Alt+Backspace delete word · Home/End"
)


def render_session(
    state: SessionState,
    reviews: ReviewCollection,
    platform_label: str = "",
    height: int = 40,
) -> RenderableType:
    """Render the whole screen for the current state."""
    selected = reviews.get(state.selected_id)

    if state.mode is AppState.WRITING_RESPONSE:
        body = render_composer(state, selected)
    elif state.mode is AppState.CONFIRMING_RESPONSE:
        body = render_confirmation(state.buffer)
    elif state.mode is AppState.GENERATING_AI:
        body = Panel(
            Text("Generating AI response...", style="bold"),
            title="Please Wait",
        )
    else:
        body = render_browser(state, reviews, selected, platform_label, height)

    if state.status:
        return Group(render_status(state.status), body)
    return body


def render_status(message: str) -> RenderableType:
    style = "green" if "success" in message.lower() else "red"
    return Panel(
        Text(message, style=style),
        title="Message",
        subtitle="press any key",
        border_style=style,
    )


# ── Browsing ───────────────────────────────────────────────────────

def render_browser(
    state: SessionState,
    reviews: ReviewCollection,
    selected: Optional[Review],
    platform_label: str,
    height: int,
) -> RenderableType:
    title = f"Reviews ({len(reviews)})"
    if platform_label:
        title = f"{platform_label} {title}"
    if state.loading:
        title += " - loading..."
    elif state.has_more:
        title += " - more available"

    visible_rows = max(5, height - len(HELP_LINES) - 6)
    review_list = Panel(
        render_review_list(reviews, state.selected, visible_rows),
        title=title,
    )
    details = Panel(
        render_review_details(selected) if selected else Text("No reviews loaded", style="dim"),
        title="Review Details",
    )

    columns = Table.grid(expand=True, padding=(0, 1))
    columns.add_column(ratio=1)
    columns.add_column(ratio=1)
    columns.add_row(review_list, details)

    help_panel = Panel(Text("\n".join(HELP_LINES), style="grey62"), title="Help")
    return Group(columns, help_panel)


def render_review_list(reviews: ReviewCollection, selected: Optional[int], rows: int) -> Text:
    """One line per review, scrolled so the selection stays visible."""
    items = list(reviews)
    if not items:
        return Text("No reviews", style="dim")

    start = 0
    if selected is not None and selected >= rows:
        start = selected - rows + 1

    lines = Text()
    for index in range(start, min(len(items), start + rows)):
        review = items[index]
        marker = ">> " if index == selected else "   "
        line = (
            f"{marker}{review.stars} {review.reviewer_nickname} - "
            f"{review.created_date.strftime(DATE_FORMAT)}"
        )
        if review.has_response:
            line += " ✓"
        lines.append(line + "\n", style="reverse" if index == selected else "")
    return lines


def render_review_details(review: Review) -> RenderableType:
    lines: List[RenderableType] = [
        Text(f"Rating: {review.stars}", style="yellow"),
        Text(f"Reviewer: {review.reviewer_nickname}"),
        Text(f"Date: {review.created_date.strftime(DATETIME_FORMAT)}"),
        Text(f"Territory: {review.territory}"),
    ]
    if review.version:
        lines.append(Text(f"Version: {review.version}"))
    lines.append(Text(""))

    if review.title:
        lines.append(Text(f"Title: {review.title}", style="bold"))
    if review.body:
        lines.append(Text(""))
        lines.append(Text("Review:", style="bold"))
        lines.append(Text(review.body))

    lines.append(Text(""))
    if review.response is not None:
        lines.append(Text(f"✅ Developer Response ({review.response.state.value}):", style="bold green"))
        lines.append(Text(review.response.body, style="green"))
        lines.append(Text(
            f"Responded: {review.response.last_modified.strftime(DATETIME_FORMAT)}",
            style="grey62",
        ))
    else:
        lines.append(Text("Press Enter to respond or 'a' for AI response", style="yellow"))

    return Group(*lines)


# ── Composing ──────────────────────────────────────────────────────

def text_with_cursor(buffer: TextBuffer) -> str:
    return buffer.text[:buffer.cursor] + CURSOR + buffer.text[buffer.cursor:]


def composer_title(state: SessionState, replacing: bool) -> str:
    buffer = state.buffer
    if replacing:
        label = "⚠️  Update/Replace Response"
    elif state.input_mode is InputMode.AI:
        label = "AI Generated Response (edit if needed)"
    else:
        label = "Write Response"

    if buffer.limit is not None:
        return f"{label} ({len(buffer)}/{buffer.limit} chars)"
    return f"{label} ({len(buffer)} chars)"


def render_composer(state: SessionState, review: Optional[Review]) -> RenderableType:
    if review is None:
        return Panel(Text(text_with_cursor(state.buffer)), title=composer_title(state, False))

    original = Group(
        Text(f"Responding to: {review.stars} - {review.reviewer_nickname}", style="bold"),
        Text(""),
        Text(review.title or "(No title)", style="bold"),
        Text(review.body or "(No review text)"),
    )

    if review.response is not None:
        existing = Panel(
            Group(
                Text("⚠️  ALREADY RESPONDED:", style="bold red"),
                Text(review.response.body, style="yellow"),
                Text(
                    f"Sent: {review.response.last_modified.strftime(DATETIME_FORMAT)}",
                    style="grey62",
                ),
            ),
            title="Existing Developer Response",
        )
    else:
        existing = Panel(
            Text("✅ No existing response - you can write a new one", style="green"),
            title="Response Status",
        )

    editor = Panel(
        Text(text_with_cursor(state.buffer)),
        title=composer_title(state, replacing=review.response is not None),
        subtitle=EDIT_HELP,
    )
    return Group(Panel(original, title="Original Review"), existing, editor)


def render_confirmation(buffer: TextBuffer) -> RenderableType:
    return Group(
        Panel(Text("Submit this response? (y/n)", style="bold"), title="Confirm Response"),
        Panel(Text(buffer.text), title="Response Preview"),
        Panel(Text("Press 'y' to submit, 'n' or Esc to go back", style="grey62")),
    )
