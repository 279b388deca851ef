"""Position tracking for tokenizer error messages."""

from __future__ import annotations

from collections import deque


class PositionTracker:
    """Tracks the 0-based line/column of the character being processed.

    Also keeps a bounded window of the most recent characters so that an
    error can show what the tokenizer was looking at.
    """

    def __init__(self, window_size: int = 20) -> None:
        self.line = 0
        self.column = 0
        self._next_line = 0
        self._next_column = 0
        self._window: deque[str] = deque(maxlen=max(window_size, 0))

    def advance(self, char: str) -> None:
        self.line = self._next_line
        self.column = self._next_column
        self._window.append(char)
        if char == "\n":
            self._next_line += 1
            self._next_column = 0
        else:
            self._next_column += 1

    @property
    def context(self) -> str:
        return "".join(self._window)
