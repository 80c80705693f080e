"""
The MediaWiki template grammar.  A page is a sequence of templates and the wikitext between them::

    page        := ( "{{" template "}}" | wikitext )+
    template    := title "|"? ( field ( "|" field )* )?
    field       := key_value | positional
    key_value   := title "=" value
    positional  := value
    value       := ( "{{" template "}}" | token )*
    title       := identifier+

The identifier pattern covers the characters that MediaWiki allows in titles: letters, digits (after a leading letter),
hyphen, comma, period, apostrophe, parentheses, and colon.  Other characters end the identifier early, so unusual titles
are truncated rather than rejected.

:author: Doug Skrypa
"""

from __future__ import annotations

import logging
from typing import Optional, Union, Iterable

import regex

from ..nodes import Page, Template, Field, Value, make_page, make_template, make_field, make_value
from .engine import Parser, Match, Result, Tracer, rule

__all__ = ['TemplateParser', 'parse']
log = logging.getLogger(__name__)


class TemplateParser(Parser):
    ident_pattern = regex.compile(r"[[:alpha:]/\-,.'():]+\w*")

    def parse(self) -> Page:
        """
        :return: The :class:`.Page` that represents the full text that was provided to this parser
        :raises: :class:`.ParseError` if the text could not be parsed
        """
        page = self.run(self.page)
        log.debug(f'Parsed page with {len(page)} elements')
        return page

    # region Node Builders

    def make_page(self, elements: Iterable[Union[str, Template]]) -> Page:
        return make_page(elements)

    def make_template(self, title: str, fields: Iterable[Field]) -> Template:
        return make_template(title, fields)

    def make_field(self, value: Value, key: Optional[str] = None) -> Field:
        return make_field(value, key)

    def make_value(self, parts: Iterable[Union[str, Template]]) -> Value:
        return make_value(parts)

    # endregion

    # region Rules

    @rule
    def page(self) -> Result[Page]:
        elements = self.sequence_of(lambda: self.any_of(self._template_scope, self.wikitext)).value
        if not elements:
            return self.fail('Expected wikitext or a template')
        return Match(self.make_page(elements))

    def _template_scope(self) -> Result[Template]:
        return self.scope_of('{{', self.template, '}}')

    @rule
    def wikitext(self) -> Result[str]:
        """Everything up to the next template or the end of the page"""
        if text := self.substring_before('{{').value:
            return Match(text)
        return self.fail('Expected wikitext')

    @rule
    def template(self) -> Result[Template]:
        if not (title := self.title()):
            return title

        self.maybe(lambda: self.expect('|'))
        if not (fields := self.list_of('|', self.field)):
            return fields

        return Match(self.make_template(title.value, fields.value))

    @rule
    def title(self) -> Result[str]:
        tokens = self.sequence_of(lambda: self.expect_pattern(self.ident_pattern, 'an identifier')).value
        if not tokens:
            return self.fail('Expected a title')
        return Match(' '.join(tokens))

    @rule
    def field(self) -> Result[Field]:
        return self.any_of(self.key_value, self.positional)

    @rule
    def key_value(self) -> Result[Field]:
        if not (key := self.title()):
            return key
        if not (separator := self.expect('=')):  # the caller falls back to a positional field
            return separator

        value = self.value()
        return Match(self.make_field(value.value, key.value))

    @rule
    def positional(self) -> Result[Field]:
        value = self.value()
        return Match(self.make_field(value.value))

    @rule
    def value(self) -> Result[Value]:
        parts = self.sequence_of(lambda: self.any_of(self._template_scope, self.token)).value
        return Match(self.make_value(parts))

    @rule
    def token(self) -> Result[str]:
        if text := self.substring_before('}}', '{{', '|').value:
            return Match(text)
        return self.fail('Expected text')

    # endregion


def parse(text: str, trace: bool = False, tracer: Tracer = None, max_depth: int = None) -> Page:
    """
    :param text: The wikitext of a page
    :param trace: Whether each grammar rule entry should be reported to the tracer
    :param tracer: A callable that accepts ``(rule_name, line, column, nearby_text)``.  Defaults to debug logging.
    :param max_depth: The maximum template nesting depth (default: :attr:`TemplateParser.DEFAULT_MAX_DEPTH`)
    :return: The parsed :class:`.Page`
    :raises: :class:`.ParseError` if the text could not be parsed
    """
    return TemplateParser(text, trace=trace, tracer=tracer, max_depth=max_depth).parse()
