import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import click
from rich.console import Console
from rich.logging import RichHandler

from rulekit.classify import RuleClassifier
from rulekit.config import RulekitSettings
from rulekit.constants import GENERAL_LANGUAGE
from rulekit.remote.versioning import RuleVersionChecker, parse_version
from rulekit.rules.manager import RuleManager, create_rule_manager
from rulekit.rules.models import ResolvedRules, RuleDocument, RuleLoadOptions
from rulekit.rules.parser import serialize_rule_document
from rulekit.tui import RulesConsoleUI
from rulekit.tui.tables import rule_status


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


LOAD_OPTIONS = (
    click.option(
        "--language", "-l", default=GENERAL_LANGUAGE, show_default=True, help="Rule language."
    ),
    click.option("--framework", "-f", default=None, help="Project framework."),
    click.option(
        "--project",
        "-p",
        type=click.Path(path_type=Path, file_okay=False),
        default=None,
        help="Project root holding .rulekit/rules/custom.yml.",
    ),
    click.option("--no-update", is_flag=True, help="Use cached remote rules only."),
)


def _load_options(func: Callable) -> Callable:
    for option in reversed(LOAD_OPTIONS):
        func = option(func)
    return func


def _manager_from_obj(obj: Dict[str, Any]) -> RuleManager:
    manager = obj.get("manager")
    if manager is None:
        manager = create_rule_manager(obj["settings"])
        obj["manager"] = manager
    return manager


def _resolve(
    obj: Dict[str, Any],
    language: str,
    framework: Optional[str],
    project: Optional[Path],
    no_update: bool,
) -> ResolvedRules:
    options = RuleLoadOptions(
        project_path=project.expanduser().resolve() if project else None,
        language=language,
        framework=framework,
        no_update=no_update,
    )
    try:
        return _manager_from_obj(obj).resolve(options)
    except Exception as exc:
        raise click.ClickException(f"Fatal: {exc}")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Tiered classification rule resolution."""
    _setup_logging(verbose)
    ctx.obj = {"settings": RulekitSettings.from_env()}


@cli.group(help="Resolve and inspect classification rules.")
def rules() -> None:
    pass


@rules.command("list", help="List the merged rules for a language/framework context.")
@_load_options
@click.option("--all", "show_all", is_flag=True, help="Skip framework filtering.")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "yaml"], case_sensitive=False),
    default="table",
    show_default=True,
)
@click.pass_obj
def rules_list(
    obj: Dict[str, Any],
    language: str,
    framework: Optional[str],
    project: Optional[Path],
    no_update: bool,
    show_all: bool,
    output_format: str,
) -> None:
    resolved = _resolve(obj, language, framework, project, no_update)
    manager = _manager_from_obj(obj)
    selected = (
        resolved.rules if show_all else manager.filter_by_framework(resolved.rules, framework)
    )

    if output_format.lower() == "yaml":
        document = RuleDocument(
            origin="resolved",
            language=language,
            framework=framework,
            rules=tuple(selected),
        )
        click.echo(serialize_rule_document(document), nl=False)
        return

    ui = RulesConsoleUI(Console())
    statuses = [rule_status(rule, manager.compile_pattern(rule)) for rule in selected]
    ui.render_rules(selected, statuses, context=language, framework=framework)
    ui.render_degradation(resolved)


@rules.command("classify", help="Classify TEXT against the merged rules.")
@click.argument("text")
@_load_options
@click.pass_obj
def rules_classify(
    obj: Dict[str, Any],
    text: str,
    language: str,
    framework: Optional[str],
    project: Optional[Path],
    no_update: bool,
) -> None:
    settings: RulekitSettings = obj["settings"]
    resolved = _resolve(obj, language, framework, project, no_update)
    manager = _manager_from_obj(obj)
    applicable = manager.filter_by_framework(resolved.rules, framework)

    classifier = RuleClassifier(manager.compiler, threshold=settings.classify_threshold)
    results = classifier.classify(text, applicable)
    outcome = classifier.decide(results)

    ui = RulesConsoleUI(Console())
    ui.render_classification(results, outcome, threshold=settings.classify_threshold)
    ui.render_degradation(resolved)


@rules.command("check-update", help="Check whether newer published rules exist.")
@click.argument("current_version")
@click.pass_obj
def rules_check_update(obj: Dict[str, Any], current_version: str) -> None:
    if parse_version(current_version) is None:
        raise click.ClickException(
            f"Invalid version (expected major.minor.patch): {current_version}"
        )
    settings: RulekitSettings = obj["settings"]
    checker = RuleVersionChecker(settings.tags_url, timeout=settings.fetch_timeout)
    RulesConsoleUI(Console()).render_update_check(
        current_version, checker.check(current_version)
    )


def main() -> int:
    try:
        cli(standalone_mode=False)
    except click.exceptions.Exit as exc:
        code = exc.exit_code
        return code if isinstance(code, int) else 1
    except click.ClickException as exc:
        exc.show()
        return 2
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
