from typing import Final


CONFIG_DIRNAME: Final[str] = ".rulekit"
RULES_DIRNAME: Final[str] = "rules"
CUSTOM_RULES_FILENAME: Final[str] = "custom.yml"
RULE_FILE_SUFFIX: Final[str] = ".yml"

GENERAL_LANGUAGE: Final[str] = "general"
FRAMEWORKS_PREFIX: Final[str] = "frameworks"

DEFAULT_RULES_URL: Final[str] = (
    "https://raw.githubusercontent.com/zero8dotdev/smriti-rules/main"
)
DEFAULT_TAGS_URL: Final[str] = (
    "https://api.github.com/repos/zero8dotdev/smriti-rules/tags?per_page=1"
)
LATEST_VERSION: Final[str] = "latest"

CACHE_TTL_SECONDS: Final[int] = 7 * 24 * 60 * 60
FETCH_TIMEOUT_SECONDS: Final[float] = 20.0
USER_AGENT: Final[str] = "rulekit"

CLASSIFY_THRESHOLD: Final[float] = 0.5
