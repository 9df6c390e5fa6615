"""Keyword set registry: named word classes and the default V vocabulary."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, fields, replace
from typing import Any

from vhighlight.errors import ConfigError
from vhighlight.tokens import Category, is_word_char


@dataclass(frozen=True, slots=True)
class KeywordClass:
    """A named set of reserved words mapped to one display category."""

    name: str
    words: frozenset[str]
    category: Category


def define_class(name: str, words: Iterable[str], category: Category) -> KeywordClass:
    """Validate *words* and return an immutable KeywordClass."""
    if not isinstance(name, str) or not name:
        raise ConfigError("keyword class name must be a non-empty string")
    if isinstance(words, str):
        raise ConfigError("words must be a collection of strings, not a single string", name)

    collected: set[str] = set()
    for word in words:
        if not isinstance(word, str):
            raise ConfigError(f"keyword {word!r} is not a string", name)
        if not word:
            raise ConfigError("empty keyword", name)
        if not all(is_word_char(ch) for ch in word):
            raise ConfigError(f"keyword {word!r} contains non-word characters", name)
        collected.add(word)

    if not collected:
        raise ConfigError("keyword set is empty", name)
    return KeywordClass(name, frozenset(collected), category)


# ---------------------------------------------------------------------------
# Default V vocabulary
# ---------------------------------------------------------------------------

DECLARATION_KEYWORDS = ("type", "interface", "struct", "enum", "fn", "union")

PREPROCESSOR_KEYWORDS = ("module", "pub", "const", "__global", "import")

CAREFUL_KEYWORDS = (
    "break",
    "continue",
    "return",
    "goto",
    "defer",
    "panic",
    "error",
    "unsafe",
    "go",
    "spawn",
)

BUILTIN_KEYWORDS = (
    "bool",
    "string",
    "i8",
    "i16",
    "int",
    "i64",
    "i128",
    "isize",
    "u8",
    "u16",
    "u32",
    "u64",
    "u128",
    "usize",
    "byte",
    "rune",
    "f32",
    "f64",
    "byteptr",
    "voidptr",
    "charptr",
    "any",
    "map",
    "chan",
    "thread",
)

CONSTANTS = ("true", "false", "none", "nil")

OPERATOR_FUNCTIONS = (
    "len",
    "cap",
    "isnil",
    "free",
    "delete",
    "sizeof",
    "typeof",
    "isreftype",
    "__offsetof",
    "dump",
)

# Reserved words not covered by any class above
KEYWORDS = (
    "as",
    "asm",
    "assert",
    "atomic",
    "else",
    "for",
    "if",
    "in",
    "is",
    "lock",
    "match",
    "mut",
    "or",
    "rlock",
    "select",
    "shared",
    "static",
    "volatile",
)

_CATEGORIES: dict[str, Category] = {
    "builtin_keywords": Category.BUILTIN_TYPE,
    "careful_keywords": Category.CAREFUL,
    "declaration_keywords": Category.DECLARATION,
    "preprocessor_keywords": Category.PREPROCESSOR,
    "keywords": Category.KEYWORD,
    "constants": Category.KEYWORD,
    "operator_functions": Category.KEYWORD,
}


@dataclass(frozen=True, slots=True)
class KeywordConfig:
    """Immutable set of configurable word lists, one field per keyword class.

    Reconfiguration builds a new instance (``from_mapping``, ``with_words``
    or ``dataclasses.replace``); instances are never mutated.
    """

    declaration_keywords: tuple[str, ...] = DECLARATION_KEYWORDS
    preprocessor_keywords: tuple[str, ...] = PREPROCESSOR_KEYWORDS
    careful_keywords: tuple[str, ...] = CAREFUL_KEYWORDS
    builtin_keywords: tuple[str, ...] = BUILTIN_KEYWORDS
    constants: tuple[str, ...] = CONSTANTS
    operator_functions: tuple[str, ...] = OPERATOR_FUNCTIONS
    keywords: tuple[str, ...] = KEYWORDS

    @classmethod
    def set_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def classes(self) -> tuple[KeywordClass, ...]:
        """Build one validated KeywordClass per word list."""
        return tuple(
            define_class(name, getattr(self, name), _CATEGORIES[name])
            for name in self.set_names()
        )

    def with_words(self, name: str, words: Iterable[str]) -> KeywordConfig:
        """Return a copy with *words* appended to the set called *name*."""
        if name not in self.set_names():
            raise ConfigError(f"unknown keyword set '{name}'", name)
        current = getattr(self, name)
        extra = tuple(w for w in words if w not in current)
        return replace(self, **{name: current + extra})

    @classmethod
    def from_mapping(
        cls, mapping: Mapping[str, Any], base: KeywordConfig | None = None
    ) -> KeywordConfig:
        """Replace the sets named in *mapping* (a ``[keywords]`` table) wholesale."""
        known = cls.set_names()
        changes: dict[str, tuple[str, ...]] = {}
        for key, value in mapping.items():
            if key not in known:
                raise ConfigError(f"unknown keyword set '{key}'", str(key))
            if not isinstance(value, list):
                raise ConfigError(f"keyword set must be a list, got {type(value).__name__}", key)
            for word in value:
                if not isinstance(word, str):
                    raise ConfigError(f"keyword {word!r} is not a string", key)
            changes[key] = tuple(value)
        return replace(base if base is not None else cls(), **changes)
