"""Three-tier rule resolution: base -> project -> runtime."""

from __future__ import annotations

from typing import Iterable, Optional

from rulekit.config import RulekitSettings
from rulekit.constants import GENERAL_LANGUAGE
from rulekit.remote.cache import RemoteRuleCache
from rulekit.remote.store import SqliteRuleCacheStore
from rulekit.rules.compilers import PatternCompiler, PatternMatcher
from rulekit.rules.loader import RuleLoader
from rulekit.rules.models import LoadResult, ResolvedRules, Rule, RuleLoadOptions
from rulekit.rules.resolver import RuleSourceResolver


def merge_rules(
    base: Iterable[Rule], project: Iterable[Rule], runtime: Iterable[Rule]
) -> list[Rule]:
    """Merge tiers by rule id; later tiers overlay the fields they specify.

    Base rules seed the result in order (a repeated base id replaces the earlier
    rule in place). Project and runtime rules amend existing ids field by field
    or append new ids. Rules are never removed.
    """
    merged: dict[str, Rule] = {}
    for rule in base:
        merged[rule.id] = rule
    for tier in (project, runtime):
        for rule in tier:
            existing = merged.get(rule.id)
            merged[rule.id] = existing.overlay(rule) if existing is not None else rule
    return list(merged.values())


def filter_by_framework(
    rules: Iterable[Rule], project_framework: Optional[str]
) -> list[Rule]:
    kept: list[Rule] = []
    for rule in rules:
        if rule.frameworks is None:
            kept.append(rule)
        elif project_framework and project_framework in rule.frameworks:
            kept.append(rule)
    return kept


class RuleManager:
    def __init__(
        self, loader: RuleLoader, compiler: Optional[PatternCompiler] = None
    ) -> None:
        self.loader = loader
        self.compiler = compiler if compiler is not None else PatternCompiler()
        self._cache: dict[tuple[str, str, str], ResolvedRules] = {}

    def load_rules(self, options: Optional[RuleLoadOptions] = None) -> list[Rule]:
        return self.resolve(options).rules

    def resolve(self, options: Optional[RuleLoadOptions] = None) -> ResolvedRules:
        options = options or RuleLoadOptions()
        key = options.cache_key
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        base = self.loader.load_base_rules(
            options.language or GENERAL_LANGUAGE,
            options.framework,
            no_update=options.no_update,
        )
        project = LoadResult()
        if options.project_path:
            project = self.loader.load_project_rules(options.project_path)

        resolved = ResolvedRules(
            rules=merge_rules(base.rules, project.rules, options.override_rules or []),
            errors=[*base.errors, *project.errors],
            stale_sources=[*base.stale_sources, *project.stale_sources],
        )
        self._cache[key] = resolved
        return resolved

    def merge_rules(
        self, base: Iterable[Rule], project: Iterable[Rule], runtime: Iterable[Rule]
    ) -> list[Rule]:
        return merge_rules(base, project, runtime)

    def filter_by_framework(
        self, rules: Iterable[Rule], project_framework: Optional[str]
    ) -> list[Rule]:
        return filter_by_framework(rules, project_framework)

    def compile_pattern(self, rule: Rule) -> PatternMatcher:
        return self.compiler.compile(rule)

    def clear(self) -> None:
        self._cache.clear()
        self.compiler.clear()


def create_rule_manager(settings: Optional[RulekitSettings] = None) -> RuleManager:
    """Wire a manager against the sqlite cache and remote source from ``settings``."""
    settings = settings or RulekitSettings.from_env()
    remote = RemoteRuleCache(
        SqliteRuleCacheStore(settings.cache_db_path),
        base_url=settings.rules_url,
        ttl_seconds=settings.cache_ttl_seconds,
        timeout=settings.fetch_timeout,
    )
    loader = RuleLoader(RuleSourceResolver(base_url=settings.rules_url), remote)
    return RuleManager(loader)
