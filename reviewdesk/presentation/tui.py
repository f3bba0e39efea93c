"""
Terminal App - Textual Front End for a Review Session
=====================================================

Redraws the session view on a fixed tick and turns key events into session
inputs. Store and LLM calls run one at a time on the UI loop; each one is
started only after the screen has been repainted, so the loading / "Generating
AI response" view is visible while the call blocks.
"""

import logging
from collections import deque
from typing import Iterable

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Static

from .view import render_session
from ..application import KeyPress, SessionController, Startup

logger = logging.getLogger(__name__)

# Terminal spellings that mean the same key
KEY_ALIASES = {
    "ctrl+h": "backspace",
    "ctrl+j": "enter",
    "ctrl+m": "enter",
    "ctrl+i": "tab",
    "escape+backspace": "alt+backspace",
    "meta+left": "alt+left",
    "meta+right": "alt+right",
    "meta+b": "alt+b",
    "meta+f": "alt+f",
    "meta+d": "alt+d",
}


def to_key_press(event: events.Key) -> KeyPress:
    """Translate a Textual key event into a session KeyPress."""
    key = KEY_ALIASES.get(event.key, event.key)
    char = event.character if event.is_printable else None
    return KeyPress(key=key, char=char)


class ReviewDeskApp(App):
    """Textual application driving one SessionController."""

    ENABLE_COMMAND_PALETTE = False
    CSS = """
    #screen {
        height: 100%;
        overflow-y: auto;
    }
    """
    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit", show=False, priority=True),
    ]

    def __init__(
        self,
        controller: SessionController,
        platform_label: str = "",
        tick_seconds: float = 0.25,
    ):
        super().__init__()
        self.controller = controller
        self.platform_label = platform_label
        self.tick_seconds = tick_seconds
        self._pending = deque()

    def compose(self) -> ComposeResult:
        yield Static(id="screen")

    def on_mount(self) -> None:
        self.title = f"reviewdesk - {self.platform_label}" if self.platform_label else "reviewdesk"
        self.set_interval(self.tick_seconds, self.redraw)
        self._schedule(self.controller.dispatch(Startup()))

    def on_key(self, event: events.Key) -> None:
        event.stop()
        effects = self.controller.dispatch(to_key_press(event))
        if self.controller.should_quit:
            self.exit()
            return
        self._schedule(effects)

    def redraw(self) -> None:
        self.query_one("#screen", Static).update(render_session(
            self.controller.state,
            self.controller.reviews,
            platform_label=self.platform_label,
            height=self.size.height,
        ))

    def _schedule(self, effects: Iterable) -> None:
        self._pending.extend(effects)
        self.redraw()
        if self._pending:
            self.call_after_refresh(self._run_next_effect)

    def _run_next_effect(self) -> None:
        if not self._pending:
            return
        effect = self._pending.popleft()
        logger.debug(f"Running {effect!r}")
        outcome = self.controller.perform(effect)
        self._schedule(self.controller.dispatch(outcome))
