"""Read rule documents and flatten inheritance chains into rule lists."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from rulekit.constants import (
    CONFIG_DIRNAME,
    CUSTOM_RULES_FILENAME,
    GENERAL_LANGUAGE,
    RULES_DIRNAME,
)
from rulekit.errors import RuleFetchError, RuleLoadError
from rulekit.remote.cache import RemoteRuleCache
from rulekit.rules.models import LoadResult, RuleDocument
from rulekit.rules.parser import parse_rule_document
from rulekit.rules.resolver import RuleSource, RuleSourceResolver


logger = logging.getLogger(__name__)


def project_rules_path(project_path: Path) -> Path:
    return Path(project_path) / CONFIG_DIRNAME / RULES_DIRNAME / CUSTOM_RULES_FILENAME


def read_rule_file(path: Path) -> RuleDocument:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise RuleLoadError(str(path), f"Unreadable rule file ({exc})") from exc
    return parse_rule_document(text, origin=str(path))


class RuleLoader:
    def __init__(self, resolver: RuleSourceResolver, remote: RemoteRuleCache) -> None:
        self.resolver = resolver
        self.remote = remote

    def load_base_rules(
        self,
        language: str = GENERAL_LANGUAGE,
        framework: Optional[str] = None,
        *,
        no_update: bool = False,
    ) -> LoadResult:
        result = LoadResult()
        for source in self.resolver.resolve_chain(language, framework):
            try:
                document, stale = self.load_document(source, no_update=no_update)
            except RuleLoadError as exc:
                logger.warning("Failed to load rules from %s: %s", source.location, exc)
                result.errors.append(exc)
                continue
            if stale:
                result.stale_sources.append(source.location)
            result.rules.extend(document.rules)
        return result

    def load_project_rules(self, project_path: Path) -> LoadResult:
        result = LoadResult()
        path = project_rules_path(project_path)
        if not path.exists():
            return result
        try:
            document = read_rule_file(path)
        except RuleLoadError as exc:
            logger.warning("Failed to load project rules from %s: %s", path, exc)
            result.errors.append(exc)
            return result
        result.rules.extend(document.rules)
        return result

    def load_document(
        self, source: RuleSource, *, no_update: bool = False
    ) -> tuple[RuleDocument, bool]:
        """Return the parsed document and whether it came from a stale cache entry."""
        if source.local_path is not None:
            return read_rule_file(source.local_path), False

        try:
            fetched = self.remote.fetch(source.remote_path, allow_network=not no_update)
        except RuleFetchError as exc:
            raise RuleLoadError(source.url, str(exc)) from exc
        return parse_rule_document(fetched.content, origin=source.url), fetched.stale
