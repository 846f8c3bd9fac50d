from rulekit.rules.compilers import IRuleCompiler, PatternCompiler, PatternMatcher
from rulekit.rules.loader import RuleLoader
from rulekit.rules.manager import (
    RuleManager,
    create_rule_manager,
    filter_by_framework,
    merge_rules,
)
from rulekit.rules.models import (
    LoadResult,
    ResolvedRules,
    Rule,
    RuleDocument,
    RuleLoadOptions,
)
from rulekit.rules.resolver import RuleSource, RuleSourceResolver

__all__ = [
    "IRuleCompiler",
    "LoadResult",
    "PatternCompiler",
    "PatternMatcher",
    "ResolvedRules",
    "Rule",
    "RuleDocument",
    "RuleLoadOptions",
    "RuleLoader",
    "RuleManager",
    "RuleSource",
    "RuleSourceResolver",
    "create_rule_manager",
    "filter_by_framework",
    "merge_rules",
]
