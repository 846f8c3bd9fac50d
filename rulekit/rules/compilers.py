"""Compile rule patterns into case-insensitive matchers."""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from rulekit.rules.models import Rule


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PatternMatcher:
    """Compiled pattern for one rule.

    A matcher built from an invalid pattern carries ``error`` and never matches.
    """

    regex: Optional[re.Pattern[str]] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.regex is not None

    def search(self, text: str) -> bool:
        if self.regex is None:
            return False
        return self.regex.search(text) is not None

    def count(self, text: str) -> int:
        if self.regex is None:
            return 0
        return sum(1 for _ in self.regex.finditer(text))


class IRuleCompiler(ABC):
    @abstractmethod
    def compile(self, rule: Rule) -> PatternMatcher:
        """Return a matcher for ``rule``; must not raise on bad patterns."""


class PatternCompiler(IRuleCompiler):
    """Memoizes one matcher per rule id until :meth:`clear` is called."""

    def __init__(self, flags: int = re.IGNORECASE) -> None:
        self._flags = flags
        self._compiled: dict[str, PatternMatcher] = {}

    def compile(self, rule: Rule) -> PatternMatcher:
        cached = self._compiled.get(rule.id)
        if cached is not None:
            return cached
        matcher = self._build(rule)
        self._compiled[rule.id] = matcher
        return matcher

    def clear(self) -> None:
        self._compiled.clear()

    def __len__(self) -> int:
        return len(self._compiled)

    def _build(self, rule: Rule) -> PatternMatcher:
        if rule.pattern is None:
            logger.warning("Rule %s has no pattern, it will never match", rule.id)
            return PatternMatcher(error="missing pattern")
        try:
            return PatternMatcher(regex=re.compile(rule.pattern, self._flags))
        except re.error as exc:
            logger.warning("Invalid pattern for rule %s: %s", rule.id, exc)
            return PatternMatcher(error=str(exc))
