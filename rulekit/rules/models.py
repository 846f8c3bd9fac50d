"""Rule data models."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence

from rulekit.constants import GENERAL_LANGUAGE
from rulekit.errors import RuleLoadError


@dataclass(frozen=True)
class Rule:
    """A single classification rule.

    Every field except ``id`` may be left unset (``None``) so that project and
    runtime tiers can amend a lower-tier rule with only the fields they care
    about.
    """

    id: str
    pattern: Optional[str] = None
    category: Optional[str] = None
    weight: Optional[float] = None
    frameworks: Optional[tuple[str, ...]] = None
    description: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return (
            self.pattern is not None
            and self.category is not None
            and self.weight is not None
        )

    @property
    def is_global(self) -> bool:
        return self.frameworks is None

    def overlay(self, other: Rule) -> Rule:
        """Return a copy with every field ``other`` specifies replacing ours."""
        changes = {
            item.name: getattr(other, item.name)
            for item in fields(other)
            if getattr(other, item.name) is not None
        }
        return replace(self, **changes)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> Rule:
        frameworks = raw.get("frameworks")
        weight = raw.get("weight")
        return cls(
            id=str(raw["id"]),
            pattern=_optional_str(raw.get("pattern")),
            category=_optional_str(raw.get("category")),
            weight=float(weight) if weight is not None else None,
            frameworks=tuple(str(item) for item in frameworks)
            if frameworks is not None
            else None,
            description=_optional_str(raw.get("description")),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"id": self.id}
        for item in fields(self):
            value = getattr(self, item.name)
            if item.name == "id" or value is None:
                continue
            out[item.name] = list(value) if item.name == "frameworks" else value
        return out


def _optional_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


@dataclass(frozen=True)
class RuleDocument:
    origin: str
    version: str = ""
    language: str = GENERAL_LANGUAGE
    framework: Optional[str] = None
    extends: tuple[str, ...] = ()
    rules: tuple[Rule, ...] = ()


@dataclass(frozen=True)
class RuleLoadOptions:
    project_path: Optional[Path] = None
    language: Optional[str] = None
    framework: Optional[str] = None
    no_update: bool = False
    override_rules: Optional[Sequence[Rule]] = None

    @property
    def cache_key(self) -> tuple[str, str, str]:
        project = str(self.project_path) if self.project_path else ""
        return (self.language or GENERAL_LANGUAGE, self.framework or "none", project)


@dataclass
class LoadResult:
    rules: list[Rule] = field(default_factory=list)
    errors: list[RuleLoadError] = field(default_factory=list)
    stale_sources: list[str] = field(default_factory=list)

    @property
    def degraded(self) -> bool:
        return bool(self.errors or self.stale_sources)


@dataclass
class ResolvedRules:
    rules: list[Rule]
    errors: list[RuleLoadError] = field(default_factory=list)
    stale_sources: list[str] = field(default_factory=list)

    @property
    def degraded(self) -> bool:
        return bool(self.errors or self.stale_sources)
