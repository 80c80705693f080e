"""
Backtracking recursive-descent parsing primitives.

Every rule and combinator returns either a :class:`Match` (truthy) or a :class:`Failure` (falsy).  Failures are the
ordinary signal consumed by :meth:`Parser.any_of`, :meth:`Parser.maybe`, and the repetition combinators - they are
never raised.  Only :meth:`Parser.run` converts an unrecovered failure into a :class:`.ParseError`.

:author: Doug Skrypa
"""

from __future__ import annotations

import logging
from functools import lru_cache, wraps
from typing import Callable, Generic, Optional, Pattern, TypeVar, Union, Type

import regex

from ..exceptions import ParseError, NestingDepthError
from ..utils import nearby_text, short_repr
from .cursor import Cursor, Position

__all__ = ['Match', 'Failure', 'Result', 'Rule', 'Tracer', 'Parser', 'rule']
log = logging.getLogger(__name__)

T = TypeVar('T')
E = TypeVar('E', bound=ParseError)
Tracer = Callable[[str, int, int, str], None]


class Match(Generic[T]):
    __slots__ = ('value',)

    def __init__(self, value: T):
        self.value = value

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__}({self.value!r})>'

    def __bool__(self) -> bool:
        return True

    def __eq__(self, other) -> bool:
        return other.__class__ is self.__class__ and self.value == other.value


class Failure:
    __slots__ = ('position', 'reason')

    def __init__(self, position: Position, reason: str):
        self.position = position
        self.reason = reason

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__}({self.reason!r} @ {self.position})>'

    def __bool__(self) -> bool:
        return False


Result = Union[Match[T], Failure]
Rule = Callable[[], Result]


def rule(func):
    """Marks a grammar rule; reports the rule name and position to the parser's tracer on entry when tracing."""
    name = func.__name__

    @wraps(func)
    def traced(self: Parser, *args, **kwargs):
        if self.trace:
            self.trace_rule(name)
        return func(self, *args, **kwargs)

    return traced


@lru_cache(50)
def _alternation(sources: tuple[str, ...]) -> Pattern:
    return regex.compile('|'.join(sources))


class Parser:
    """
    Holds a :class:`.Cursor` over the text to parse, and provides generic combinators that operate on it.  Grammars
    are defined by subclasses as methods that combine these combinators.

    A single parser instance handles a single parse of a single text.
    """

    DEFAULT_MAX_DEPTH: int = 40
    ws_pattern: Pattern = regex.compile(r'\s+')

    def __init__(self, text: str, trace: bool = False, tracer: Tracer = None, max_depth: int = None):
        """
        :param text: The text to parse
        :param trace: Whether the tracer should be called with each rule name + the current position on rule entry
        :param tracer: A callable that accepts ``(rule_name, line, column, nearby_text)``.  Defaults to logging each
          entry at debug level.
        :param max_depth: The maximum number of nested scopes that are allowed before parsing is aborted
        """
        if max_depth is None:
            max_depth = self.DEFAULT_MAX_DEPTH
        elif max_depth < 1:
            raise ValueError(f'Invalid {max_depth=} - it must be a positive integer')
        self.cursor = Cursor(text)
        self.trace = trace
        self.tracer = tracer or _log_trace
        self.max_depth = max_depth
        self._scope_ends: list[str] = []
        self._furthest: Optional[Failure] = None

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__}[{self.cursor!r}]>'

    def trace_rule(self, name: str):
        line, column, _ = self.cursor.position()
        self.tracer(name, line, column, self.cursor.current_line())

    # region Results & Errors

    def fail(self, reason: str = 'Failed to match') -> Failure:
        """
        :param reason: Why the current rule was rejected
        :return: A :class:`Failure` at the current position.  The furthest failure is remembered for error reporting.
        """
        failure = Failure(self.cursor.position(), reason)
        if (furthest := self._furthest) is None or failure.position.offset >= furthest.position.offset:
            self._furthest = failure
        return failure

    def error(self, failure: Failure, exc_cls: Type[E] = ParseError) -> E:
        line, column, offset = failure.position
        context = nearby_text(self.cursor.current_line(offset), column)
        return exc_cls(failure.reason, line, column, offset, context)

    def run(self, start: Rule[T]) -> T:
        """
        Apply the given rule, which must consume the entire input.

        :param start: The top-level rule
        :return: The value produced by the given rule
        :raises: :class:`.ParseError` positioned at the furthest failure if the input could not be fully matched
        """
        result = start()
        if result and not self.cursor.at_end():
            result = self.fail('Expected end of input')
        if not result:
            failure = result if self._furthest is None else self._furthest
            log.debug(f'Parsing failed: {failure.reason} at {failure.position}')
            raise self.error(failure)
        return result.value

    # endregion

    # region Whitespace & Scopes

    def skip_ws(self):
        self.cursor.match(self.ws_pattern)

    def at_eos(self) -> bool:
        """
        :return: True if the end of input was reached, or if the closing literal for the innermost scope is next
          (optionally following whitespace)
        """
        if self.cursor.at_end():
            return True
        elif not self._scope_ends:
            return False
        mark = self.cursor.save()
        self.skip_ws()
        at_end = self.cursor.startswith(self._scope_ends[-1])
        self.cursor.restore(mark)
        return at_end

    # endregion

    # region Combinators

    def any_of(self, *alternatives: Rule[T]) -> Result[T]:
        """
        Try each alternative in order, rolling back after each failure.

        :param alternatives: Rules to try; earlier alternatives take priority
        :return: The first successful match, or the last alternative's failure if none matched
        """
        if not alternatives:
            raise ValueError('At least one alternative is required')
        mark = self.cursor.save()
        for alternative in alternatives:
            if result := alternative():
                return result
            self.cursor.restore(mark)
        return result  # noqa

    def sequence_of(self, rule_: Rule[T]) -> Match[list[T]]:
        """
        Apply the given rule repeatedly until it fails or the end of the current scope is reached.  Never fails - zero
        repetitions results in an empty list.
        """
        values = []
        while not self.at_eos():
            mark = self.cursor.save()
            if not (result := rule_()):
                self.cursor.restore(mark)
                break
            values.append(result.value)
            if self.cursor.offset == mark:  # a match that consumed nothing would repeat forever
                break
        return Match(values)

    def scope_of(self, open_: str, inner: Rule[T], close: str) -> Result[T]:
        """
        Expect the ``open_`` literal, then apply ``inner``, then expect the ``close`` literal.  While ``inner`` runs,
        the ``close`` literal marks the end of the scope for the repetition combinators and :meth:`substring_before`.

        :raises: :class:`.NestingDepthError` if opening this scope would exceed :attr:`max_depth` nested scopes
        """
        mark = self.cursor.save()
        if not (result := self.expect(open_)):
            return result

        if len(self._scope_ends) >= self.max_depth:
            failure = Failure(self.cursor.position(), f'Exceeded max nesting depth={self.max_depth}')
            raise self.error(failure, NestingDepthError)

        self._scope_ends.append(close)
        try:
            result = inner()
        finally:
            self._scope_ends.pop()

        if result and not (closed := self.expect(close)):
            result = closed
        if not result:
            self.cursor.restore(mark)
        return result

    def list_of(self, separator: str, rule_: Rule[T]) -> Result[list[T]]:
        """
        Apply the given rule, then repeatedly expect the separator followed by the rule again.  Stops when the
        separator is not found or the end of the current scope is reached.  A failure of the rule is propagated.
        """
        mark = self.cursor.save()
        values = []
        while not self.at_eos():
            if not (result := rule_()):
                self.cursor.restore(mark)
                return result
            values.append(result.value)
            if not self.expect(separator):
                break
        return Match(values)

    def maybe(self, rule_: Rule[T]) -> Match[Optional[T]]:
        mark = self.cursor.save()
        if result := rule_():
            return result
        self.cursor.restore(mark)
        return Match(None)

    # endregion

    # region Tokens

    def expect(self, literal: str) -> Result[str]:
        """Consume exactly the given literal (after any leading whitespace), or fail without consuming anything."""
        mark = self.cursor.save()
        self.skip_ws()
        if self.cursor.startswith(literal):
            return Match(self.cursor.advance(len(literal)))
        failure = self.fail(f'Expected {literal!r}')
        self.cursor.restore(mark)
        return failure

    def expect_pattern(self, pattern: Pattern, description: str = 'token') -> Result[str]:
        """Consume the non-empty text matching the given pattern (after any leading whitespace), or fail."""
        mark = self.cursor.save()
        self.skip_ws()
        if text := self.cursor.match(pattern):
            return Match(text)
        failure = self.fail(f'Expected {description}')
        self.cursor.restore(mark)
        return failure

    def substring_before(self, *delimiters: Union[str, Pattern]) -> Match[str]:
        """
        Consume and return everything before the first occurrence of any of the given delimiters (or the end of the
        current scope).  Literal strings are matched literally; compiled patterns may be used for anything else.  If
        none of the delimiters occur, everything up to the end of the input is consumed.

        Never fails, but the returned text will be empty if a delimiter occurs immediately.  Callers that repeat this
        must reject empty results.
        """
        sources = [regex.escape(d) if isinstance(d, str) else d.pattern for d in delimiters]
        if self._scope_ends:
            sources.append(regex.escape(self._scope_ends[-1]))
        end = self.cursor.find(_alternation(tuple(sources)))
        return Match(self.cursor.advance(end - self.cursor.offset))

    # endregion


def _log_trace(name: str, line: int, column: int, text: str):
    log.debug(f'{name}\t{line}\t{column}\t{short_repr(text)}')
