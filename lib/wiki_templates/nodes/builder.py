"""
Assembles fragments matched by the grammar into nodes.  No parsing or validation happens here.

:author: Doug Skrypa
"""

from __future__ import annotations

from typing import Iterable, Union, Optional

from .nodes import Page, Template, Field, KeyValueField, PositionalField, Value, WikitextRun, TextToken

__all__ = ['make_page', 'make_template', 'make_field', 'make_value']


def make_page(elements: Iterable[Union[str, Template]]) -> Page:
    """
    :param elements: Wikitext strings and templates, in the order that they appeared on the page
    :return: A new :class:`.Page`
    """
    return Page(WikitextRun(ele) if isinstance(ele, str) else ele for ele in elements)


def make_template(title: str, fields: Iterable[Field]) -> Template:
    return Template(title, fields)


def make_field(value: Value, key: Optional[str] = None) -> Field:
    if key is None:
        return PositionalField(value)
    return KeyValueField(key, value)


def make_value(parts: Iterable[Union[str, Template]]) -> Value:
    return Value(TextToken(part) if isinstance(part, str) else part for part in parts)
