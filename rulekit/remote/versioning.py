import json
import logging
from dataclasses import dataclass
from typing import Optional

from rulekit.constants import DEFAULT_TAGS_URL, FETCH_TIMEOUT_SECONDS
from rulekit.errors import RuleFetchError
from rulekit.remote.cache import download_text


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UpdateCheck:
    has_update: bool
    new_version: Optional[str]


def parse_version(text: str) -> Optional[tuple[int, int, int]]:
    parts = text.strip().lstrip("v").split(".")
    if len(parts) != 3:
        return None
    try:
        major, minor, patch = (int(part) for part in parts)
    except ValueError:
        return None
    return major, minor, patch


def is_newer(candidate: str, current: str) -> bool:
    new = parse_version(candidate)
    cur = parse_version(current)
    if new is None or cur is None:
        return False
    return new > cur


class RuleVersionChecker:
    """Advisory check against the newest published rules tag."""

    def __init__(
        self, tags_url: str = DEFAULT_TAGS_URL, timeout: float = FETCH_TIMEOUT_SECONDS
    ) -> None:
        self.tags_url = tags_url
        self.timeout = timeout

    def latest_version(self) -> Optional[str]:
        try:
            tags = json.loads(download_text(self.tags_url, timeout=self.timeout))
        except (RuleFetchError, ValueError) as exc:
            logger.debug("Latest rules version unavailable: %s", exc)
            return None
        if not isinstance(tags, list) or not tags:
            return None
        first = tags[0]
        name = first.get("name") if isinstance(first, dict) else None
        if not isinstance(name, str) or not name:
            return None
        return name[1:] if name.startswith("v") else name

    def check(self, current_version: str) -> UpdateCheck:
        latest = self.latest_version()
        if latest is None:
            return UpdateCheck(has_update=False, new_version=None)
        return UpdateCheck(has_update=is_newer(latest, current_version), new_version=latest)
