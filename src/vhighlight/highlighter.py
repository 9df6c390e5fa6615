"""Highlighter façade: the entry point editor integrations call."""

from __future__ import annotations

import logging
import threading

from vhighlight.engine import classify
from vhighlight.keywords import KeywordConfig
from vhighlight.outline import OutlineEntry, extract_outline
from vhighlight.patterns import RuleTable, compile_config
from vhighlight.syntax import DEFAULT_SYNTAX, SyntaxTable
from vhighlight.tokens import Span

logger = logging.getLogger(__name__)


class Highlighter:
    """Holds the active rule and syntax tables and classifies buffers with them.

    Thread Safety:
        The tables are immutable. ``reconfigure`` compiles a replacement
        table first and swaps the reference under a lock, so every
        ``classify`` call reads one consistent table. A failed
        reconfiguration leaves the previous table active.
    """

    def __init__(
        self,
        config: KeywordConfig | None = None,
        syntax_table: SyntaxTable | None = None,
    ) -> None:
        self._lock = threading.Lock()
        self._config = config if config is not None else KeywordConfig()
        self._rules = compile_config(self._config)
        self._syntax = syntax_table if syntax_table is not None else DEFAULT_SYNTAX

    @property
    def config(self) -> KeywordConfig:
        return self._config

    @property
    def rule_table(self) -> RuleTable:
        return self._rules

    @property
    def syntax_table(self) -> SyntaxTable:
        return self._syntax

    def reconfigure(self, config: KeywordConfig) -> None:
        """Compile *config* and make it active. Raises ConfigError/PatternError on failure."""
        rules = compile_config(config)
        with self._lock:
            self._config = config
            self._rules = rules
        logger.info("keyword configuration replaced (%d rules)", len(rules))

    def classify(self, source: str, region: tuple[int, int] | None = None) -> list[Span]:
        """Classify *source* (or just *region*) with the active tables."""
        with self._lock:
            rules = self._rules
            syntax = self._syntax
        return classify(source, region, rules, syntax)

    def outline(self, source: str) -> list[OutlineEntry]:
        """Return declaration sites and TODO markers in *source*."""
        return extract_outline(source)
