"""
Nodes that represent the structure of a parsed wiki page: the page contains wikitext runs and templates, templates
contain fields, fields contain values, and values contain text tokens and nested templates.

Nodes are built once, bottom-up, by the parser, and are not modified afterwards.

:author: Doug Skrypa
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, Optional, TypeVar, Type, Union, Generic

__all__ = [
    'Node', 'BasicNode', 'ContainerNode', 'WikitextRun', 'TextToken', 'Value', 'Field', 'KeyValueField',
    'PositionalField', 'Template', 'Page', 'Element', 'ValuePart', 'N',
]
log = logging.getLogger(__name__)

T = TypeVar('T')
N = TypeVar('N', bound='Node')
C = TypeVar('C', bound='Node')
Element = Union['WikitextRun', 'Template']
ValuePart = Union['TextToken', 'Template']

_NotSet = object()


class Node:
    __slots__ = ()

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__}()>'

    def strings(self, strip: bool = True) -> Iterator[str]:
        yield from ()

    # region Printing / Formatting Methods

    def pformat(self, indentation: int = 0) -> str:
        return (' ' * indentation) + repr(self)

    def pprint(self, indentation: int = 0):
        _print(self.pformat(indentation))

    # endregion

    def find_all(self, node_cls: Type[N], recurse: bool = False, **kwargs) -> Iterator[N]:
        yield from ()

    def find_one(self, node_cls: Type[N], *args, **kwargs) -> Optional[N]:
        """
        :param node_cls: The class of :class:`Node` to find
        :param args: Positional args to pass to :meth:`.find_all`
        :param kwargs: Keyword args to pass to :meth:`.find_all`
        :return: The first :class:`Node` object that matches the given criteria, or None if no matching nodes could be
          found.
        """
        return next(self.find_all(node_cls, *args, **kwargs), None)


class BasicNode(Node):
    """A node that wraps a non-empty string."""

    __slots__ = ('text',)

    def __init__(self, text: str):
        if not text:
            raise ValueError(f'Invalid {self.__class__.__name__} text={text!r} - it must be a non-empty string')
        self.text = text

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__}({self.text!r})>'

    def __str__(self) -> str:
        return self.text

    def __eq__(self, other: Union[Node, str]) -> bool:
        if isinstance(other, str):
            return self.text == other
        return other.__class__ is self.__class__ and self.text == other.text

    def __hash__(self) -> int:
        return hash(self.__class__) ^ hash(self.text)

    def strings(self, strip: bool = True) -> Iterator[str]:
        if text := (self.text.strip() if strip else self.text):
            yield text

    def __rich_repr__(self):
        yield self.text


class WikitextRun(BasicNode):
    """A stretch of page text that is not part of any template."""

    __slots__ = ()


class TextToken(BasicNode):
    """Plain text within a field value."""

    __slots__ = ()


class ContainerNode(Node, Generic[C]):
    __slots__ = ('children',)
    children: tuple[C, ...]

    def __init__(self, children: Iterable[C] = ()):
        self.children = tuple(children)

    # region Dunder Methods

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__}{list(self.children)!r}>'

    def __getitem__(self, item) -> C:
        return self.children[item]

    def __iter__(self) -> Iterator[C]:
        yield from self.children

    def __len__(self) -> int:
        return len(self.children)

    def __bool__(self) -> bool:
        return bool(self.children)

    def __eq__(self, other) -> bool:
        if other.__class__ is not self.__class__:
            return False
        return self.children == other.children

    def __hash__(self) -> int:
        return hash(self.__class__) ^ hash(self.children)

    def __rich_repr__(self):
        yield from self.children

    # endregion

    def pformat(self, indentation: int = 0) -> str:
        indent = ' ' * indentation
        if not self.children:
            return f'{indent}<{self.__class__.__name__}[]>'
        children = ',\n'.join(c.pformat(indentation + 4) for c in self.children)
        return f'{indent}<{self.__class__.__name__}[\n{children}\n{indent}]>'

    def find_all(self, node_cls: Type[N], recurse: bool = False, **kwargs) -> Iterator[N]:
        """
        Find all descendant nodes of the given type, optionally with additional matching criteria.

        :param node_cls: The class of :class:`Node` to find
        :param recurse: Whether descendant nodes should be searched recursively or just the direct children of this node
        :param kwargs: If specified, keys should be names of attributes of the discovered nodes, for which the value of
          the node's attribute must equal the provided value
        :return: Generator that yields :class:`Node` objects of the given type
        """
        for child in self.children:
            yield from _find_all(child, node_cls, recurse, recurse, **kwargs)

    def strings(self, strip: bool = True) -> Iterator[str]:
        for child in self.children:
            yield from child.strings(strip)


class Value(ContainerNode[ValuePart]):
    """The content of a field: text tokens interleaved with nested templates.  May be empty."""

    __slots__ = ()

    @property
    def parts(self) -> tuple[ValuePart, ...]:
        return self.children

    @property
    def text(self) -> Optional[str]:
        """The concatenated text of this value, or None if it contains any nested templates"""
        if any(isinstance(part, Template) for part in self.children):
            return None
        return ''.join(part.text for part in self.children)

    @property
    def templates(self) -> tuple[Template, ...]:
        return tuple(part for part in self.children if isinstance(part, Template))


class Field(Node):
    __slots__ = ('value',)
    key: Optional[str] = None

    def __init__(self, value: Value):
        self.value = value

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__}[{self.value!r}]>'

    def __eq__(self, other) -> bool:
        if other.__class__ is not self.__class__:
            return False
        return self.key == other.key and self.value == other.value

    def __hash__(self) -> int:
        return hash(self.__class__) ^ hash(self.key) ^ hash(self.value)

    def pformat(self, indentation: int = 0) -> str:
        indent = ' ' * indentation
        prefix = f'{indent}<{self.__class__.__name__}['
        if self.key is not None:
            prefix += f'{self.key!r}: '
        value = self.value.pformat(indentation)
        return f'{prefix}{value[indentation:]}]>'

    def strings(self, strip: bool = True) -> Iterator[str]:
        yield from self.value.strings(strip)

    def find_all(self, node_cls: Type[N], recurse: bool = False, **kwargs) -> Iterator[N]:
        yield from _find_all(self.value, node_cls, recurse, **kwargs)

    def __rich_repr__(self):
        yield self.value


class KeyValueField(Field):
    """A ``key = value`` template field."""

    __slots__ = ('key',)

    def __init__(self, key: str, value: Value):
        super().__init__(value)
        self.key = key

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__}[{self.key!r}: {self.value!r}]>'

    def strings(self, strip: bool = True) -> Iterator[str]:
        yield self.key
        yield from self.value.strings(strip)

    def __rich_repr__(self):
        yield self.key
        yield self.value


class PositionalField(Field):
    """A template field that has a value but no key."""

    __slots__ = ()


class Template(Node):
    __slots__ = ('title', 'lc_title', 'fields')
    title: str
    lc_title: str
    fields: tuple[Field, ...]

    def __init__(self, title: str, fields: Iterable[Field] = ()):
        self.title = title
        self.lc_title = title.lower()
        self.fields = tuple(fields)

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__}({self.title!r}: {list(self.fields)!r})>'

    def __eq__(self, other) -> bool:
        if other.__class__ is not self.__class__:
            return False
        return self.title == other.title and self.fields == other.fields

    def __hash__(self) -> int:
        return hash(self.__class__) ^ hash(self.title) ^ hash(self.fields)

    # region Field Access

    @property
    def mapping(self) -> dict[str, Value]:
        """Mapping of key to value for key/value fields.  When a key is repeated, the last value for it is used."""
        return {field.key: field.value for field in self.fields if field.key is not None}

    @property
    def positional(self) -> tuple[Value, ...]:
        return tuple(field.value for field in self.fields if field.key is None)

    def keys(self):
        return self.mapping.keys()

    def get(self, key: str, default: T = None, case_sensitive: bool = True) -> Union[Value, T]:
        mapping = self.mapping
        try:
            return mapping[key]
        except KeyError:
            if case_sensitive:
                return default

        ci_key = key.casefold()
        for name, val in mapping.items():
            if name.casefold() == ci_key:
                return val

        return default

    def __getitem__(self, item: Union[str, int]) -> Value:
        if isinstance(item, str):
            return self.mapping[item]
        elif isinstance(item, int):
            return self.positional[item]
        raise TypeError(f'Invalid key={item!r} for {self!r} - expected a field key or positional field index')

    def __contains__(self, key: str) -> bool:
        return key in self.mapping

    # endregion

    def pformat(self, indentation: int = 0) -> str:
        indent = ' ' * indentation
        if not self.fields:
            return f'{indent}<{self.__class__.__name__}[{self.title!r}][]>'
        fields = ',\n'.join(f.pformat(indentation + 4) for f in self.fields)
        return f'{indent}<{self.__class__.__name__}[{self.title!r}][\n{fields}\n{indent}]>'

    def strings(self, strip: bool = True) -> Iterator[str]:
        for field in self.fields:
            yield from field.strings(strip)

    def find_all(self, node_cls: Type[N], recurse: bool = False, **kwargs) -> Iterator[N]:
        for field in self.fields:
            yield from _find_all(field, node_cls, recurse, **kwargs)

    def __rich_repr__(self):
        yield self.title
        yield from self.fields


class Page(ContainerNode[Element]):
    """The root of a parsed wiki page."""

    __slots__ = ()

    @property
    def elements(self) -> tuple[Element, ...]:
        return self.children

    @property
    def templates(self) -> tuple[Template, ...]:
        """The top-level templates on this page.  Use ``find_all(Template, recurse=True)`` to include nested ones."""
        return tuple(ele for ele in self.children if isinstance(ele, Template))


# region Helper Functions


def _print(*args, _print_func=print, **kwargs):
    try:
        _print_func(*args, **kwargs)  # Note: print is passed as an arg to allow it to be testable
    except OSError as e:
        if e.errno != 22:  # occurs when writing to a closed pipe
            raise


def _find_all(node, node_cls: Type[N], recurse: bool = True, _recurse_first: bool = True, **kwargs) -> Iterator[N]:
    if isinstance(node, node_cls):
        if not kwargs or all(getattr(node, k, _NotSet) == v for k, v in kwargs.items()):
            yield node
        if recurse:
            yield from node.find_all(node_cls, recurse=recurse, **kwargs)
    elif _recurse_first:
        yield from node.find_all(node_cls, recurse=recurse, **kwargs)


# endregion
