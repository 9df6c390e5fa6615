"""Categories, span data structures, and character classification helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class Category(Enum):
    # Keyword classes
    BUILTIN_TYPE = "builtin_type"
    CAREFUL = "careful"
    ATTRIBUTE = "attribute"  # @attr, $if
    DECLARATION = "declaration"
    PREPROCESSOR = "preprocessor"  # module, pub, const

    # Punctuation
    OPERATOR = "operator"
    SEPARATOR = "separator"  # , ; . and a lone :
    DELIMITER = "delimiter"  # ( ) [ ] { }

    # Literals and names
    NUMERIC_LITERAL = "numeric_literal"
    FUNCTION_NAME = "function_name"
    TYPE_NAME = "type_name"
    KEYWORD = "keyword"
    CHAR_LITERAL = "char_literal"
    CALL_REFERENCE = "call_reference"
    PARAMETER = "parameter"
    TUPLE_REFERENCE = "tuple_reference"  # ._0
    VARIABLE_REFERENCE = "variable_reference"

    # Delimited regions (decided by the syntax table)
    COMMENT = "comment"
    STRING = "string"


class CharClass(Enum):
    WHITESPACE = auto()
    WORD = auto()
    PUNCTUATION = auto()
    STRING_DELIMITER = auto()
    COMMENT_DELIMITER = auto()
    ESCAPE = auto()


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based offset."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True, slots=True)
class Span:
    """Half-open offset range [start, end) with its assigned category."""

    start: int
    end: int
    category: Category

    def text(self, source: str) -> str:
        return source[self.start : self.end]

    def as_tuple(self) -> tuple[int, int, str]:
        return (self.start, self.end, self.category.value)


def position_at(source: str, offset: int) -> Position:
    """Return the line/column Position of *offset* within *source*."""
    offset = max(0, min(offset, len(source)))
    line = source.count("\n", 0, offset) + 1
    line_start = source.rfind("\n", 0, offset) + 1
    return Position(line, offset - line_start + 1, offset)


def is_word_char(ch: str) -> bool:
    """Return True if ch may appear inside an identifier or keyword."""
    return ch.isalnum() or ch == "_"
