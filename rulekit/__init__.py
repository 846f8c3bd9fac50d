from rulekit.classify import Classification, ClassificationOutcome, RuleClassifier
from rulekit.config import RulekitSettings
from rulekit.rules import (
    Rule,
    RuleLoadOptions,
    RuleManager,
    create_rule_manager,
    filter_by_framework,
    merge_rules,
)

__all__ = [
    "Classification",
    "ClassificationOutcome",
    "Rule",
    "RuleClassifier",
    "RuleLoadOptions",
    "RuleManager",
    "RulekitSettings",
    "create_rule_manager",
    "filter_by_framework",
    "merge_rules",
]
