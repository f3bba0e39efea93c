"""
Text Buffer - Cursor-Addressed Response Editing
================================================

The response being composed, plus the cursor position inside it.

DESIGN:
- Immutable: every edit returns a new TextBuffer, so the session state machine
  can stay a pure function of (state, input).
- Offsets count characters (Python string indices), never bytes, so multi-byte
  text is never split mid-character.
- The optional character limit is checked *before* an insertion; an insertion
  that would exceed it is dropped, nothing is truncated.

USAGE:
    buf = TextBuffer(limit=350)
    buf = buf.insert("H").insert("i")
    buf = buf.move_home().delete()
    print(buf.text, buf.cursor)  # "i" 0
"""

from dataclasses import dataclass, replace
from typing import Optional


@dataclass(frozen=True)
class TextBuffer:
    """Response text under edit and its cursor offset."""

    text: str = ""
    cursor: int = 0
    limit: Optional[int] = None

    def __post_init__(self):
        if not 0 <= self.cursor <= len(self.text):
            raise ValueError(
                f"Cursor {self.cursor} outside buffer of length {len(self.text)}"
            )

    @classmethod
    def prefilled(cls, text: str, limit: Optional[int] = None) -> "TextBuffer":
        """Buffer holding `text` with the cursor at the end, cut to `limit`."""
        if limit is not None and len(text) > limit:
            text = text[:limit]
        return cls(text=text, cursor=len(text), limit=limit)

    def __len__(self) -> int:
        return len(self.text)

    @property
    def is_blank(self) -> bool:
        return not self.text.strip()

    @property
    def remaining(self) -> Optional[int]:
        """Characters left before the limit, or None when unlimited."""
        if self.limit is None:
            return None
        return max(0, self.limit - len(self.text))

    def cleared(self) -> "TextBuffer":
        return replace(self, text="", cursor=0)

    # ── Insertion ──────────────────────────────────────────────────

    def can_insert(self) -> bool:
        return self.limit is None or len(self.text) < self.limit

    def insert(self, char: str) -> "TextBuffer":
        """Insert a single character at the cursor and advance past it."""
        if len(char) != 1:
            raise ValueError(f"insert() takes one character, got {char!r}")
        if not self.can_insert():
            return self
        text = self.text[:self.cursor] + char + self.text[self.cursor:]
        return replace(self, text=text, cursor=self.cursor + 1)

    def insert_newline(self) -> "TextBuffer":
        return self.insert("\n")

    # ── Deletion ───────────────────────────────────────────────────

    def backspace(self) -> "TextBuffer":
        """Delete the character before the cursor."""
        if self.cursor == 0:
            return self
        text = self.text[:self.cursor - 1] + self.text[self.cursor:]
        return replace(self, text=text, cursor=self.cursor - 1)

    def delete(self) -> "TextBuffer":
        """Delete the character under the cursor."""
        if self.cursor >= len(self.text):
            return self
        text = self.text[:self.cursor] + self.text[self.cursor + 1:]
        return replace(self, text=text)

    def delete_word_backward(self) -> "TextBuffer":
        start = self.prev_word_boundary()
        if start >= self.cursor:
            return self
        text = self.text[:start] + self.text[self.cursor:]
        return replace(self, text=text, cursor=start)

    def delete_word_forward(self) -> "TextBuffer":
        end = self.next_word_boundary()
        if end <= self.cursor:
            return self
        return replace(self, text=self.text[:self.cursor] + self.text[end:])

    # ── Motion ─────────────────────────────────────────────────────

    def next_word_boundary(self) -> int:
        """Start of the next word: skip the rest of this word, then whitespace."""
        text, pos = self.text, self.cursor
        while pos < len(text) and not text[pos].isspace():
            pos += 1
        while pos < len(text) and text[pos].isspace():
            pos += 1
        return pos

    def prev_word_boundary(self) -> int:
        """Start of the previous word: skip whitespace, then the word itself."""
        text, pos = self.text, self.cursor
        while pos > 0 and text[pos - 1].isspace():
            pos -= 1
        while pos > 0 and not text[pos - 1].isspace():
            pos -= 1
        return pos

    def move_to(self, offset: int) -> "TextBuffer":
        return replace(self, cursor=max(0, min(offset, len(self.text))))

    def move_left(self) -> "TextBuffer":
        return self.move_to(self.cursor - 1)

    def move_right(self) -> "TextBuffer":
        return self.move_to(self.cursor + 1)

    def move_word_forward(self) -> "TextBuffer":
        return self.move_to(self.next_word_boundary())

    def move_word_backward(self) -> "TextBuffer":
        return self.move_to(self.prev_word_boundary())

    def move_home(self) -> "TextBuffer":
        return self.move_to(0)

    def move_end(self) -> "TextBuffer":
        return self.move_to(len(self.text))
