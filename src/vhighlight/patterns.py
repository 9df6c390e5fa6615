"""Pattern compiler: turns keyword classes and structural shapes into a rule table."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from enum import Enum, auto

from vhighlight.errors import ConfigError, PatternError
from vhighlight.keywords import KeywordClass, KeywordConfig
from vhighlight.tokens import Category

logger = logging.getLogger(__name__)


class PatternKind(Enum):
    WORD_SET = auto()  # complete-word lookup in a frozenset
    REGEX = auto()  # compiled regex, classify one capture group


@dataclass(frozen=True, slots=True)
class Pattern:
    """One compiled rule. Which fields are meaningful depends on ``kind``."""

    kind: PatternKind
    name: str
    category: Category
    words: frozenset[str] = frozenset()
    regex: re.Pattern[str] | None = None
    group: int = 0


@dataclass(frozen=True, slots=True)
class StructuralPattern:
    """Uncompiled language-general lexical shape."""

    name: str
    regex: str
    group: int
    category: Category


@dataclass(frozen=True, slots=True)
class ClassSlot:
    """Placeholder in a layout where the named keyword classes are inserted.

    A slot with ``rest=True`` also receives every class no slot names.
    """

    names: tuple[str, ...]
    rest: bool = False


@dataclass(frozen=True, slots=True)
class RuleTable:
    """Fixed, ordered sequence of compiled patterns."""

    patterns: tuple[Pattern, ...] = field(default_factory=tuple)

    def __iter__(self) -> Iterator[Pattern]:
        return iter(self.patterns)

    def __len__(self) -> int:
        return len(self.patterns)

    def names(self) -> list[str]:
        return [p.name for p in self.patterns]


# Characters that make up operator runs
_OP = r"+\-*/%<>=!&|^~"

# Earlier entries win ties at the same offset.
STRUCTURAL_PATTERNS: tuple[StructuralPattern | ClassSlot, ...] = (
    ClassSlot(("builtin_keywords",)),
    ClassSlot(("careful_keywords",)),
    StructuralPattern("attribute", r"([@$][A-Za-z_]\w*)", 1, Category.ATTRIBUTE),
    ClassSlot(("declaration_keywords",)),
    ClassSlot(("preprocessor_keywords",)),
    StructuralPattern(
        "multi_char_operator",
        r"(<<=|>>=|\.\.\.|\.\.|:=|=>|<-|->|\|>|\+\+|--|[+\-*/%&|^]=)",
        1,
        Category.OPERATOR,
    ),
    StructuralPattern("separator", r"([,;]|\.(?!_\d))", 1, Category.SEPARATOR),
    StructuralPattern("arithmetic_operator", r"(!=|[+\-*/%<>=]+)", 1, Category.OPERATOR),
    StructuralPattern("logical_operator", r"([!&|^~?]+)", 1, Category.OPERATOR),
    StructuralPattern("colon", rf"(?<![:{_OP}])(:)(?![:{_OP}])", 1, Category.SEPARATOR),
    StructuralPattern("delimiter", r"([()\[\]{}])", 1, Category.DELIMITER),
    StructuralPattern(
        "numeric_literal",
        rf"(?:^|(?<=[\s{_OP}:(\[{{,]))"
        r"(0[xX][0-9a-fA-F_]+|0[bB][01_]+|0[oO][0-7_]+"
        r"|\d[\d_]*(?:\.\d[\d_]*)?(?:[eE][+-]?\d+)?)",
        1,
        Category.NUMERIC_LITERAL,
    ),
    StructuralPattern("function_name", r"(?<=\bfn\s)([A-Za-z_]\w*)", 1, Category.FUNCTION_NAME),
    StructuralPattern("type_name", r"(?<!\w)([A-Z]\w*)", 1, Category.TYPE_NAME),
    ClassSlot(("keywords", "constants", "operator_functions"), rest=True),
    StructuralPattern("char_literal", r"(`(?:\\.|[^`\\])`)", 1, Category.CHAR_LITERAL),
    StructuralPattern(
        "call_reference", r"(?<!\w)([A-Za-z_]\w*)(?=\()", 1, Category.CALL_REFERENCE
    ),
    StructuralPattern(
        "parameter", r"(?:(?<=[(,])|(?<=[(,]\s))([a-z_]\w*)", 1, Category.PARAMETER
    ),
    StructuralPattern("tuple_reference", r"\.(_\d+)(?!\w)", 1, Category.TUPLE_REFERENCE),
    StructuralPattern(
        "variable_reference", r"(?<!\w)([a-z_]\w*)", 1, Category.VARIABLE_REFERENCE
    ),
)


def _word_set(cls: KeywordClass) -> Pattern:
    return Pattern(PatternKind.WORD_SET, cls.name, cls.category, words=cls.words)


def compile_regex(name: str, source: str, flags: int = 0) -> re.Pattern[str]:
    """Compile *source*, converting ``re.error`` into PatternError."""
    try:
        return re.compile(source, flags)
    except re.error as exc:
        raise PatternError(exc.msg, source, name, exc.pos) from exc


def _compile_structural(entry: StructuralPattern) -> Pattern:
    regex = compile_regex(entry.name, entry.regex)
    if not 0 <= entry.group <= regex.groups:
        raise PatternError(
            f"capture group {entry.group} out of range (pattern has {regex.groups})",
            entry.regex,
            entry.name,
        )
    return Pattern(
        PatternKind.REGEX, entry.name, entry.category, regex=regex, group=entry.group
    )


def compile(
    classes: Iterable[KeywordClass],
    structural_patterns: Sequence[StructuralPattern | ClassSlot] = STRUCTURAL_PATTERNS,
) -> RuleTable:
    """Build a RuleTable from keyword classes laid out by *structural_patterns*.

    All-or-nothing: any failure raises before a table is returned.
    """
    classes = tuple(classes)
    slots = [e for e in structural_patterns if isinstance(e, ClassSlot)]
    claimed = {name for slot in slots for name in slot.names}
    unclaimed = [c for c in classes if c.name not in claimed]
    if unclaimed and not any(slot.rest for slot in slots):
        raise ConfigError("no rule slot for keyword class", unclaimed[0].name)

    rules: list[Pattern] = []
    for entry in structural_patterns:
        if isinstance(entry, ClassSlot):
            for name in entry.names:
                rules.extend(_word_set(c) for c in classes if c.name == name)
            if entry.rest:
                rules.extend(_word_set(c) for c in unclaimed)
        else:
            rules.append(_compile_structural(entry))

    logger.debug("compiled rule table with %d patterns", len(rules))
    return RuleTable(tuple(rules))


def compile_config(config: KeywordConfig) -> RuleTable:
    """Compile the default layout for the word lists in *config*."""
    return compile(config.classes())


DEFAULT_RULES = compile_config(KeywordConfig())
