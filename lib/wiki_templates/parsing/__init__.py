from .cursor import Cursor, Position
from .engine import Match, Failure, Parser, rule
from .grammar import TemplateParser, parse
