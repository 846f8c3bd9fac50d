from collections import Counter
from typing import Optional

from rich.markup import escape
from rich.table import Column, Table

from rulekit.classify import Classification
from rulekit.rules.compilers import PatternMatcher
from rulekit.rules.models import Rule
from rulekit.tui.enums import RULE_STATUS_STYLE, RuleStatus, UIStyle
from rulekit.utils import format_frameworks, format_weight


def rule_status(rule: Rule, matcher: PatternMatcher) -> RuleStatus:
    if rule.pattern is not None and not matcher.ok:
        return RuleStatus.INVALID
    if not rule.is_complete:
        return RuleStatus.INCOMPLETE
    return RuleStatus.ACTIVE


class RulesTable:
    @staticmethod
    def summary_block(
        rules: list[Rule],
        statuses: list[RuleStatus],
        context: str,
        framework: Optional[str],
    ) -> Table:
        counts = Counter(status.value for status in statuses)
        chips = [f"{key}={value}" for key, value in sorted(counts.items()) if value > 0]
        if not chips:
            chips = ["none"]

        table = Table.grid(padding=(0, 2))
        table.add_column(style="bold")
        table.add_column()
        table.add_row("Context", escape(context))
        table.add_row("Framework", escape(framework or "none"))
        table.add_row("Rules", str(len(rules)))
        table.add_row("Statuses", "  ".join(chips))
        return table

    @staticmethod
    def rules_table(rules: list[Rule], statuses: list[RuleStatus]) -> Table:
        table = Table(
            Column(header="Id", overflow="ellipsis", max_width=28),
            Column(header="Category", width=24),
            Column(header="Weight", width=7, justify="right"),
            Column(header="Frameworks", overflow="ellipsis", max_width=20),
            Column(header="Status", width=11),
            Column(header="Pattern", overflow="ellipsis"),
            expand=True,
            header_style="bold",
        )
        for rule, status in zip(rules, statuses):
            style = RULE_STATUS_STYLE.get(status, UIStyle.WHITE.value)
            table.add_row(
                escape(rule.id),
                escape(rule.category or ""),
                format_weight(rule.weight),
                escape(format_frameworks(rule.frameworks)),
                f"[{style}]{status.value}[/{style}]",
                escape(rule.pattern or ""),
            )
        return table


class ClassificationTable:
    @staticmethod
    def results_table(results: list[Classification], threshold: float) -> Table:
        table = Table(
            Column(header="Category", width=24),
            Column(header="Confidence", width=11, justify="right"),
            Column(header="Rule", overflow="ellipsis"),
            expand=True,
            header_style="bold",
        )
        for item in results:
            style = UIStyle.GREEN.value if item.confidence >= threshold else UIStyle.YELLOW.value
            table.add_row(
                escape(item.category),
                f"[{style}]{item.confidence:.2f}[/{style}]",
                escape(item.rule_id),
            )
        return table
