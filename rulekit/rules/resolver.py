"""Resolve the general -> language -> framework rule document chain."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from rulekit.constants import (
    DEFAULT_RULES_URL,
    FRAMEWORKS_PREFIX,
    GENERAL_LANGUAGE,
    RULE_FILE_SUFFIX,
)

BUILTIN_RULES_DIR = Path(__file__).resolve().parent / "builtin"


@dataclass(frozen=True)
class RuleSource:
    name: str
    remote_path: str
    url: str
    local_path: Optional[Path] = None

    @property
    def is_local(self) -> bool:
        return self.local_path is not None

    @property
    def location(self) -> str:
        return str(self.local_path) if self.local_path is not None else self.url


class RuleSourceResolver:
    def __init__(
        self,
        builtin_dir: Path = BUILTIN_RULES_DIR,
        base_url: str = DEFAULT_RULES_URL,
    ) -> None:
        self.builtin_dir = builtin_dir
        self.base_url = base_url.rstrip("/")

    def resolve_chain(
        self, language: str = GENERAL_LANGUAGE, framework: Optional[str] = None
    ) -> list[RuleSource]:
        names: list[str] = []
        if language != GENERAL_LANGUAGE:
            names.append(GENERAL_LANGUAGE)
        names.append(language)
        if framework:
            names.append(f"{FRAMEWORKS_PREFIX}/{framework}")
        return [self.resolve(name) for name in names]

    def resolve(self, name: str) -> RuleSource:
        remote_path = f"{name}{RULE_FILE_SUFFIX}"
        local = self.builtin_dir / remote_path
        return RuleSource(
            name=name,
            remote_path=remote_path,
            url=f"{self.base_url}/{remote_path}",
            local_path=local if local.is_file() else None,
        )
