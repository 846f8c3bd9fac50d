import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from rulekit.constants import (
    CACHE_TTL_SECONDS,
    CLASSIFY_THRESHOLD,
    DEFAULT_RULES_URL,
    DEFAULT_TAGS_URL,
    FETCH_TIMEOUT_SECONDS,
)


logger = logging.getLogger(__name__)


def default_cache_db_path() -> Path:
    return Path.home() / ".cache" / "rulekit" / "rules.sqlite"


def _env_number(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %s", name, raw, default)
        return default


@dataclass(frozen=True)
class RulekitSettings:
    cache_db_path: Path = field(default_factory=default_cache_db_path)
    rules_url: str = DEFAULT_RULES_URL
    tags_url: str = DEFAULT_TAGS_URL
    cache_ttl_seconds: float = CACHE_TTL_SECONDS
    fetch_timeout: float = FETCH_TIMEOUT_SECONDS
    classify_threshold: float = CLASSIFY_THRESHOLD

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "RulekitSettings":
        """Build settings from ``RULEKIT_*`` environment variables."""
        env = os.environ if env is None else env
        cache_db = env.get("RULEKIT_CACHE_DB")
        return cls(
            cache_db_path=Path(cache_db).expanduser() if cache_db else default_cache_db_path(),
            rules_url=(env.get("RULEKIT_RULES_URL") or DEFAULT_RULES_URL).rstrip("/"),
            tags_url=env.get("RULEKIT_TAGS_URL") or DEFAULT_TAGS_URL,
            cache_ttl_seconds=_env_number(env, "RULEKIT_CACHE_TTL_SECONDS", CACHE_TTL_SECONDS),
            fetch_timeout=_env_number(env, "RULEKIT_FETCH_TIMEOUT", FETCH_TIMEOUT_SECONDS),
            classify_threshold=_env_number(
                env, "RULEKIT_CLASSIFY_THRESHOLD", CLASSIFY_THRESHOLD
            ),
        )
