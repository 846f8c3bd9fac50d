from typing import Optional

from rich.console import Console
from rich.markup import escape

from rulekit.classify import Classification, ClassificationOutcome
from rulekit.remote.versioning import UpdateCheck
from rulekit.rules.models import ResolvedRules, Rule
from rulekit.tui.enums import RuleStatus, UIStyle
from rulekit.tui.sections import UISection
from rulekit.tui.tables import ClassificationTable, RulesTable


class RulesConsoleUI:
    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def render_rules(
        self,
        rules: list[Rule],
        statuses: list[RuleStatus],
        context: str,
        framework: Optional[str],
    ) -> None:
        self.console.print(
            UISection.wrap(
                "rules overview",
                RulesTable.summary_block(rules, statuses, context, framework),
                style=UIStyle.BLUE.value,
            )
        )
        if not rules:
            self.console.print(UISection.note("rules", "No rules resolved."))
            return
        self.console.print(
            UISection.wrap(
                "rules", RulesTable.rules_table(rules, statuses), style=UIStyle.CYAN.value
            )
        )

    def render_degradation(self, resolved: ResolvedRules) -> None:
        if resolved.errors:
            self.console.print(
                UISection.bullets("errors", resolved.errors, style=UIStyle.RED.value)
            )
        if resolved.stale_sources:
            self.console.print(
                UISection.bullets(
                    "stale cache", resolved.stale_sources, style=UIStyle.YELLOW.value
                )
            )

    def render_classification(
        self,
        results: list[Classification],
        outcome: ClassificationOutcome,
        threshold: float,
    ) -> None:
        if not results:
            self.console.print(
                UISection.note(
                    "classification", "No rules matched.", style=UIStyle.YELLOW.value
                )
            )
            return
        self.console.print(
            UISection.wrap(
                "classification",
                ClassificationTable.results_table(results, threshold),
                style=UIStyle.BLUE.value,
            )
        )
        verdict = "ambiguous" if outcome.ambiguous else "confident"
        style = UIStyle.YELLOW.value if outcome.ambiguous else UIStyle.GREEN.value
        best = escape(outcome.result.category) if outcome.result else "none"
        self.console.print(
            UISection.note(
                "verdict",
                f"Best: [bold]{best}[/bold] ({verdict}, threshold {threshold:g})",
                style=style,
            )
        )

    def render_update_check(self, current: str, check: UpdateCheck) -> None:
        if check.new_version is None:
            self.console.print(
                UISection.note(
                    "rules version",
                    f"Current: {escape(current)}\nLatest version unavailable.",
                    style=UIStyle.YELLOW.value,
                )
            )
            return
        if check.has_update:
            body = (
                f"Update available: {escape(current)} -> "
                f"[bold]{escape(check.new_version)}[/bold]"
            )
            style = UIStyle.GREEN.value
        else:
            body = (
                f"Rules are up to date ({escape(current)}, "
                f"latest {escape(check.new_version)})."
            )
            style = UIStyle.DIM.value
        self.console.print(UISection.note("rules version", body, style=style))
