"""Tests for tier merging, framework filtering and the merged-rule cache."""

from http.client import IncompleteRead
from pathlib import Path

from rulekit.rules.compilers import PatternCompiler
from rulekit.rules.manager import RuleManager, filter_by_framework, merge_rules
from rulekit.rules.models import Rule, RuleLoadOptions


def _rule(rule_id: str, **fields) -> Rule:
    defaults = {"pattern": f"\\b{rule_id}\\b", "category": "bug/report", "weight": 0.8}
    defaults.update(fields)
    return Rule(id=rule_id, **defaults)


def test_project_override_keeps_unspecified_fields() -> None:
    base = [Rule(id="r1", pattern="fix", category="bug/fix", weight=1)]
    merged = merge_rules(base, [Rule(id="r1", weight=2)], [])
    assert merged == [Rule(id="r1", pattern="fix", category="bug/fix", weight=2)]


def test_project_full_replacement() -> None:
    base = [_rule("rule-1", weight=0.7), _rule("rule-2")]
    project = [Rule(id="rule-1", pattern="\\bcustom\\b", category="topic/learning", weight=0.9)]
    merged = merge_rules(base, project, [])
    by_id = {rule.id: rule for rule in merged}
    assert len(merged) == 2
    assert by_id["rule-1"].pattern == "\\bcustom\\b"
    assert by_id["rule-1"].weight == 0.9
    assert by_id["rule-2"].weight == 0.8


def test_runtime_wins_then_project_then_base() -> None:
    base = [_rule("r1", weight=0.5, description="base")]
    project = [Rule(id="r1", weight=0.7, category="bug/fix")]
    runtime = [Rule(id="r1", weight=0.95)]
    (merged,) = merge_rules(base, project, runtime)
    assert merged.weight == 0.95
    assert merged.category == "bug/fix"
    assert merged.pattern == "\\br1\\b"
    assert merged.description == "base"


def test_result_is_union_of_ids_in_insertion_order() -> None:
    base = [_rule("a"), _rule("b")]
    project = [_rule("c"), Rule(id="a", weight=0.1)]
    runtime = [_rule("d"), Rule(id="c", weight=0.2)]
    merged = merge_rules(base, project, runtime)
    assert [rule.id for rule in merged] == ["a", "b", "c", "d"]


def test_new_partial_rule_inserted_verbatim() -> None:
    merged = merge_rules([], [], [Rule(id="only-weight", weight=3)])
    assert merged == [Rule(id="only-weight", weight=3)]


def test_repeated_base_id_replaced_in_place() -> None:
    base = [_rule("shared", pattern="general"), _rule("other"), Rule(id="shared", weight=0.1)]
    merged = merge_rules(base, [], [])
    assert [rule.id for rule in merged] == ["shared", "other"]
    assert merged[0] == Rule(id="shared", weight=0.1)


def test_merge_is_idempotent_and_pure() -> None:
    base = [_rule("a"), _rule("b")]
    project = [Rule(id="a", weight=0.3)]
    runtime = [_rule("z")]
    first = merge_rules(base, project, runtime)
    second = merge_rules(base, project, runtime)
    assert first == second
    assert first is not second
    assert base == [_rule("a"), _rule("b")]


def test_filter_by_framework() -> None:
    rules = [
        _rule("global-rule"),
        _rule("nextjs-rule", frameworks=("nextjs",)),
        _rule("fastapi-rule", frameworks=("fastapi",)),
    ]
    assert [r.id for r in filter_by_framework(rules, "nextjs")] == ["global-rule", "nextjs-rule"]
    assert [r.id for r in filter_by_framework(rules, None)] == ["global-rule"]
    assert [r.id for r in filter_by_framework(rules, "fastapi")] == [
        "global-rule",
        "fastapi-rule",
    ]
    assert [r.id for r in filter_by_framework(rules, "other")] == ["global-rule"]


def test_load_rules_merges_all_tiers(
    manager: RuleManager, builtin_dir: Path, tmp_path: Path, write_yaml, fake_remote
) -> None:
    write_yaml(
        builtin_dir / "general.yml",
        {"rules": [{"id": "r1", "pattern": "fix", "category": "bug/fix", "weight": 1}]},
    )
    project = tmp_path / "project"
    write_yaml(project / ".rulekit" / "rules" / "custom.yml", {"rules": [{"id": "r1", "weight": 2}]})

    rules = manager.load_rules(
        RuleLoadOptions(project_path=project, override_rules=[Rule(id="extra", pattern="x")])
    )

    assert rules == [
        Rule(id="r1", pattern="fix", category="bug/fix", weight=2),
        Rule(id="extra", pattern="x"),
    ]
    assert fake_remote.calls == []


def test_load_rules_returns_cached_reference(
    manager: RuleManager, builtin_dir: Path, write_yaml, fake_remote
) -> None:
    path = write_yaml(builtin_dir / "general.yml", {"rules": [{"id": "r1", "pattern": "a"}]})
    first = manager.load_rules(RuleLoadOptions())
    path.write_text("rules:\n  - id: changed\n", encoding="utf-8")
    second = manager.load_rules(RuleLoadOptions(language="general"))
    assert second is first

    manager.clear()
    third = manager.load_rules(RuleLoadOptions())
    assert third is not first
    assert [rule.id for rule in third] == ["changed"]


def test_resolve_reports_degraded_loads(
    manager: RuleManager, builtin_dir: Path, write_yaml, fake_remote
) -> None:
    write_yaml(builtin_dir / "general.yml", {"rules": [{"id": "r1", "pattern": "a"}]})
    resolved = manager.resolve(RuleLoadOptions(language="go"))
    assert [rule.id for rule in resolved.rules] == ["r1"]
    assert resolved.degraded is True
    assert len(resolved.errors) == 1


def test_clear_drops_compiled_patterns(manager: RuleManager) -> None:
    rule = _rule("test-rule")
    first = manager.compile_pattern(rule)
    assert manager.compile_pattern(rule) is first
    manager.clear()
    again = manager.compile_pattern(rule)
    assert again is not first
    assert again.search("test-rule")


def test_resolve_survives_truncated_remote_body(
    manager: RuleManager, builtin_dir: Path, write_yaml, fake_remote
) -> None:
    write_yaml(builtin_dir / "general.yml", {"rules": [{"id": "r1", "pattern": "a"}]})
    fake_remote.fail_with = IncompleteRead(b"partial")
    resolved = manager.resolve(RuleLoadOptions(language="go"))
    assert [rule.id for rule in resolved.rules] == ["r1"]
    assert len(resolved.errors) == 1


def test_injected_compiler_is_kept_and_cleared(loader) -> None:
    compiler = PatternCompiler()
    manager = RuleManager(loader, compiler=compiler)
    assert manager.compiler is compiler

    manager.compile_pattern(_rule("alpha"))
    assert len(compiler) == 1
    manager.clear()
    assert len(compiler) == 0
