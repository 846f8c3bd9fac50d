"""Score text against a resolved rule set."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from rulekit.constants import CLASSIFY_THRESHOLD
from rulekit.rules.compilers import IRuleCompiler, PatternCompiler
from rulekit.rules.models import Rule


@dataclass(frozen=True)
class Classification:
    category: str
    confidence: float
    rule_id: str


@dataclass(frozen=True)
class ClassificationOutcome:
    result: Optional[Classification]
    ambiguous: bool


class RuleClassifier:
    def __init__(
        self,
        compiler: Optional[IRuleCompiler] = None,
        threshold: float = CLASSIFY_THRESHOLD,
    ) -> None:
        self.compiler = compiler if compiler is not None else PatternCompiler()
        self.threshold = threshold

    def classify(self, text: str, rules: Iterable[Rule]) -> list[Classification]:
        """Return the best match per category, highest confidence first.

        Confidence scales the rule weight by match density: half the weight for
        any match, the full weight once matches reach one per ten words.
        """
        word_count = len(text.split())
        best: dict[str, Classification] = {}
        for rule in rules:
            if rule.category is None or rule.weight is None:
                continue
            matches = self.compiler.compile(rule).count(text)
            if not matches:
                continue
            density = min(matches / max(word_count / 10, 1), 1)
            confidence = rule.weight * (0.5 + 0.5 * density)
            current = best.get(rule.category)
            if current is None or confidence > current.confidence:
                best[rule.category] = Classification(
                    category=rule.category, confidence=confidence, rule_id=rule.id
                )
        return sorted(best.values(), key=lambda item: item.confidence, reverse=True)

    def best(self, text: str, rules: Iterable[Rule]) -> ClassificationOutcome:
        return self.decide(self.classify(text, rules))

    def decide(self, results: list[Classification]) -> ClassificationOutcome:
        """Pick the top result; below the threshold it is left for a fallback classifier."""
        if not results:
            return ClassificationOutcome(result=None, ambiguous=True)
        top = results[0]
        return ClassificationOutcome(result=top, ambiguous=top.confidence < self.threshold)
