"""A single-line editable text field for the search query."""

from __future__ import annotations

import enum
from dataclasses import dataclass

_TAB_LENGTH = 4


class Key(enum.Enum):
    """Keys the input field understands."""

    CHAR = "char"
    BACKSPACE = "backspace"
    ENTER = "enter"
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"
    TAB = "tab"
    DELETE = "delete"
    HOME = "home"
    END = "end"
    ESC = "esc"


@dataclass(frozen=True)
class KeyInput:
    """A key press with its modifiers; ``char`` is set for ``Key.CHAR``."""

    key: Key
    char: str = ""
    ctrl: bool = False
    alt: bool = False
    shift: bool = False


def _single_line(text: str) -> str:
    return text.replace("\n", " ").replace("\r", " ")


class SearchInput:
    """Single-line text input with a cursor and common editing keys."""

    def __init__(self, initial_text: str = "") -> None:
        self._text = _single_line(initial_text)
        self._cursor = 0

    @property
    def text(self) -> str:
        return self._text

    @property
    def cursor(self) -> int:
        return self._cursor

    def input(self, event: KeyInput) -> bool:
        """Apply a key press; True when the trimmed query text changed."""
        if event.key is Key.ENTER:
            return False
        if event.key is Key.CHAR and event.char == "m" and event.ctrl and not event.alt:
            return False

        before = self._text.strip()
        if not self._edit(event):
            return False
        return before != self._text.strip()

    def set_text(self, text: str) -> None:
        """Replace the text and move the cursor to the start."""
        self._text = _single_line(text)
        self._cursor = 0

    def clear(self) -> None:
        self.set_text("")

    def _edit(self, event: KeyInput) -> bool:
        key = event.key
        if key is Key.CHAR:
            if event.ctrl:
                return self._ctrl_char(event.char.lower())
            if event.alt:
                return self._alt_char(event.char.lower())
            return self._insert(_single_line(event.char))
        if key is Key.BACKSPACE:
            if event.alt or event.ctrl:
                return self._delete(self._word_start_before(), self._cursor)
            return self._delete(self._cursor - 1, self._cursor)
        if key is Key.DELETE:
            if event.alt or event.ctrl:
                return self._delete(self._cursor, self._word_end_after())
            return self._delete(self._cursor, self._cursor + 1)
        if key is Key.TAB:
            if event.ctrl or event.alt:
                return False
            return self._insert(" " * (_TAB_LENGTH - self._cursor % _TAB_LENGTH))
        if key is Key.LEFT:
            return self._move(
                self._word_start_before() if event.ctrl or event.alt else self._cursor - 1
            )
        if key is Key.RIGHT:
            return self._move(
                self._word_end_after() if event.ctrl or event.alt else self._cursor + 1
            )
        if key is Key.HOME:
            return self._move(0)
        if key is Key.END:
            return self._move(len(self._text))
        return False

    def _ctrl_char(self, ch: str) -> bool:
        actions = {
            "h": lambda: self._delete(self._cursor - 1, self._cursor),
            "d": lambda: self._delete(self._cursor, self._cursor + 1),
            "k": lambda: self._delete(self._cursor, len(self._text)),
            "j": lambda: self._delete(0, self._cursor),
            "w": lambda: self._delete(self._word_start_before(), self._cursor),
            "b": lambda: self._move(self._cursor - 1),
            "f": lambda: self._move(self._cursor + 1),
            "a": lambda: self._move(0),
            "e": lambda: self._move(len(self._text)),
        }
        action = actions.get(ch)
        return action() if action is not None else False

    def _alt_char(self, ch: str) -> bool:
        if ch == "d":
            return self._delete(self._cursor, self._word_end_after())
        if ch == "b":
            return self._move(self._word_start_before())
        if ch == "f":
            return self._move(self._word_end_after())
        return False

    def _insert(self, chunk: str) -> bool:
        if not chunk:
            return False
        self._text = self._text[: self._cursor] + chunk + self._text[self._cursor :]
        self._cursor += len(chunk)
        return True

    def _delete(self, start: int, end: int) -> bool:
        start = max(start, 0)
        end = min(end, len(self._text))
        if start >= end:
            return False
        self._text = self._text[:start] + self._text[end:]
        self._cursor = start
        return True

    def _move(self, position: int) -> bool:
        self._cursor = min(max(position, 0), len(self._text))
        return False

    def _word_start_before(self) -> int:
        position = self._cursor
        while position > 0 and self._text[position - 1].isspace():
            position -= 1
        while position > 0 and not self._text[position - 1].isspace():
            position -= 1
        return position

    def _word_end_after(self) -> int:
        position = self._cursor
        length = len(self._text)
        while position < length and self._text[position].isspace():
            position += 1
        while position < length and not self._text[position].isspace():
            position += 1
        return position