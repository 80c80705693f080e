"""
Parse the template invocations in MediaWiki wikitext into a tree of nodes.

:author: Doug Skrypa
"""

from .exceptions import WikiTemplatesError, ParseError, NestingDepthError
from .nodes import Node, Page, WikitextRun, Template, Field, KeyValueField, PositionalField, Value, TextToken
from .parsing import TemplateParser, parse
