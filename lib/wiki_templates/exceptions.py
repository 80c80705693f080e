"""
:author: Doug Skrypa
"""

__all__ = ['WikiTemplatesError', 'ParseError', 'NestingDepthError']


class WikiTemplatesError(Exception):
    """Base exception for other wiki_templates exceptions"""


class ParseError(WikiTemplatesError):
    """Exception to be raised when the given text could not be fully matched by the page grammar"""

    def __init__(self, reason: str, line: int, column: int, offset: int, context: str):
        self.reason = reason
        self.line = line
        self.column = column
        self.offset = offset
        self.context = context

    def __str__(self) -> str:
        return f'{self.reason} at line {self.line}, column {self.column}:\n{self.context}'


class NestingDepthError(ParseError):
    """Templates were nested more deeply than the parser's max_depth allows"""
