"""
A scan position over an immutable text buffer.

:author: Doug Skrypa
"""

from __future__ import annotations

from bisect import bisect_right
from typing import NamedTuple, Optional, Pattern

__all__ = ['Cursor', 'Position']


class Position(NamedTuple):
    line: int
    column: int
    offset: int

    def __str__(self) -> str:
        return f'line {self.line}, column {self.column}'


class Cursor:
    """
    Wraps the text being parsed along with the current offset.  Lines and columns are 1-based; offsets are 0-based.

    Nothing is ever partially consumed - callers determine whether something matches first, then :meth:`advance`.
    """

    __slots__ = ('text', 'offset', '_length', '_line_starts')

    def __init__(self, text: str):
        self.text = text
        self.offset = 0
        self._length = len(text)
        self._line_starts = None

    def __repr__(self) -> str:
        line, column, offset = self.position()
        return f'<{self.__class__.__name__}[{line}:{column} @ {offset}/{self._length}]>'

    def position(self, offset: int = None) -> Position:
        if offset is None:
            offset = self.offset
        if (line_starts := self._line_starts) is None:
            line_starts = self._line_starts = [0] + [i + 1 for i, c in enumerate(self.text) if c == '\n']
        line = bisect_right(line_starts, offset)
        column = offset - line_starts[line - 1] + 1
        return Position(line, column, offset)

    # region Backtracking

    def save(self) -> int:
        return self.offset

    def restore(self, mark: int):
        self.offset = mark

    # endregion

    def at_end(self) -> bool:
        return self.offset >= self._length

    def peek_from(self, offset: int = None, length: int = 1) -> str:
        if offset is None:
            offset = self.offset
        return self.text[offset:offset + length]

    def startswith(self, literal: str) -> bool:
        return self.text.startswith(literal, self.offset)

    def advance(self, length: int) -> str:
        start = self.offset
        self.offset = end = min(start + length, self._length)
        return self.text[start:end]

    def match(self, pattern: Pattern) -> Optional[str]:
        """Consume and return the text matched by the given compiled pattern at the current offset, if it matches."""
        if m := pattern.match(self.text, self.offset):
            self.offset = m.end()
            return m.group()
        return None

    def find(self, pattern: Pattern) -> int:
        """:return: The offset of the next match of the given pattern, or the end offset if there is no match"""
        if m := pattern.search(self.text, self.offset):
            return m.start()
        return self._length

    def current_line(self, offset: int = None) -> str:
        """:return: The full text of the line that contains the given (or current) offset"""
        if offset is None:
            offset = self.offset
        start = self.text.rfind('\n', 0, offset) + 1
        end = self.text.find('\n', offset)
        return self.text[start:] if end == -1 else self.text[start:end]
