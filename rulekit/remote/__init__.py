from rulekit.remote.cache import FetchOrigin, FetchResult, RemoteRuleCache, cache_key_for_path
from rulekit.remote.store import (
    CacheEntry,
    CacheKey,
    IRuleCacheStore,
    MemoryRuleCacheStore,
    SqliteRuleCacheStore,
)
from rulekit.remote.versioning import RuleVersionChecker, UpdateCheck

__all__ = [
    "CacheEntry",
    "CacheKey",
    "FetchOrigin",
    "FetchResult",
    "IRuleCacheStore",
    "MemoryRuleCacheStore",
    "RemoteRuleCache",
    "RuleVersionChecker",
    "SqliteRuleCacheStore",
    "UpdateCheck",
    "cache_key_for_path",
]
