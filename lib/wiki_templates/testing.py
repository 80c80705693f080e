"""
Helpers for unit tests

:author: Doug Skrypa
"""

from __future__ import annotations

import sys
from contextlib import AbstractContextManager
from difflib import unified_diff
from io import StringIO
from unittest import TestCase

from .utils import rich_repr

__all__ = ['WikiTemplatesTest', 'format_diff', 'RedirectStreams', 'TraceRecorder']


class WikiTemplatesTest(TestCase):
    def assert_equal(self, expected, actual, msg: str = None):
        if expected != actual:
            diff_str = format_diff(rich_repr(expected), rich_repr(actual))
            if not diff_str.strip():
                self.assertEqual(expected, actual, msg)  # Provides a generic diff / message
            else:
                suffix = f'\n{msg}' if msg else ''
                self.fail(f'Objects did not match:\n{diff_str}{suffix}')

    def assert_strings_equal(
        self, expected: str, actual: str, message: str = None, diff_lines: int = 3, trim: bool = False
    ):
        if trim:
            expected = expected.rstrip()
            actual = '\n'.join(line.rstrip() for line in actual.splitlines())
        if message:
            self.assertEqual(expected, actual, message)
        elif expected != actual:
            diff = format_diff(expected, actual, n=diff_lines)
            if not diff.strip():
                self.assertEqual(expected, actual)
            else:
                self.fail('Strings did not match:\n' + diff)


def _colored(text: str, color: int, end: str = '\n'):
    return f'\x1b[38;5;{color}m{text}\x1b[0m{end}'


def format_diff(a: str, b: str, name_a: str = 'expected', name_b: str = '  actual', n: int = 3) -> str:
    sio = StringIO()
    a = a.splitlines()
    b = b.splitlines()
    for i, line in enumerate(unified_diff(a, b, name_a, name_b, n=n, lineterm='')):
        if line.startswith('+') and i > 1:
            sio.write(_colored(line, 2))
        elif line.startswith('-') and i > 1:
            sio.write(_colored(line, 1))
        elif line.startswith('@@ '):
            sio.write(_colored(line, 6, '\n\n'))
        else:
            sio.write(line + '\n')

    return sio.getvalue()


class RedirectStreams(AbstractContextManager):
    def __init__(self):
        self._old = {}
        self._stdout = StringIO()
        self._stderr = StringIO()

    @property
    def stdout(self) -> str:
        return self._stdout.getvalue()

    @property
    def stderr(self) -> str:
        return self._stderr.getvalue()

    def __enter__(self) -> RedirectStreams:
        streams = {'stdout': self._stdout, 'stderr': self._stderr}
        for name, io in streams.items():
            self._old[name] = getattr(sys, name)
            setattr(sys, name, io)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        while self._old:
            name, orig = self._old.popitem()
            setattr(sys, name, orig)


class TraceRecorder:
    """A tracer that stores each ``(rule_name, line, column, nearby_text)`` entry that it receives."""

    def __init__(self):
        self.entries = []

    def __call__(self, name: str, line: int, column: int, text: str):
        self.entries.append((name, line, column, text))

    @property
    def rule_names(self) -> list[str]:
        return [entry[0] for entry in self.entries]
