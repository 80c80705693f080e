"""
:author: Doug Skrypa
"""

from __future__ import annotations

from shutil import get_terminal_size

from rich.pretty import pretty_repr
from rich.text import Text

__all__ = ['short_repr', 'rich_repr', 'nearby_text']

_MAX_WIDTH = None


def rich_repr(obj, max_width: int = None) -> str:
    """Render a non-highlighted (symmetrical) pretty repr of the given object using rich."""
    if max_width is None:
        global _MAX_WIDTH
        if _MAX_WIDTH is None:
            max_width = _MAX_WIDTH = get_terminal_size()[0]
        else:
            max_width = _MAX_WIDTH

    text = pretty_repr(obj, max_width=max_width)
    return str(Text(text, style='pretty'))


def short_repr(text) -> str:
    text = str(text)
    if len(text) <= 50:
        return repr(text)
    else:
        return repr(f'{text[:24]}...{text[-23:]}')


def nearby_text(line: str, column: int, span: int = 40) -> str:
    """
    :param line: The full text of the line containing the position of interest
    :param column: The 1-based column of the position of interest within the given line
    :param span: The max number of characters to include on either side of the position
    :return: The text surrounding the given column, with a caret on the next line below that column
    """
    pos = column - 1
    before = line[max(pos - span, 0):pos]
    after = line[pos:pos + span]
    return before + after + '\n' + ' ' * len(before.expandtabs()) + '^'
