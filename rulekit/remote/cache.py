import http.client
import logging
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePosixPath
from typing import Callable, Optional
from urllib.request import Request, urlopen

from rulekit.constants import (
    CACHE_TTL_SECONDS,
    DEFAULT_RULES_URL,
    FETCH_TIMEOUT_SECONDS,
    FRAMEWORKS_PREFIX,
    LATEST_VERSION,
    USER_AGENT,
)
from rulekit.errors import CacheStoreError, RuleFetchError
from rulekit.remote.store import CacheEntry, CacheKey, IRuleCacheStore


logger = logging.getLogger(__name__)


class FetchOrigin(str, Enum):
    CACHE = "cache"
    NETWORK = "network"
    STALE = "stale"


@dataclass(frozen=True)
class FetchResult:
    content: str
    origin: FetchOrigin

    @property
    def stale(self) -> bool:
        return self.origin == FetchOrigin.STALE


def cache_key_for_path(path: str, version: str = LATEST_VERSION) -> CacheKey:
    """Derive the cache key for a remote rule path such as ``frameworks/next.yml``."""
    parts = PurePosixPath(path.strip("/")).parts
    topic = PurePosixPath(parts[-1]).stem if parts else "general"
    framework = topic if FRAMEWORKS_PREFIX in parts[:-1] else ""
    return CacheKey(topic=topic, version=version, framework=framework)


def download_text(url: str, timeout: float = FETCH_TIMEOUT_SECONDS) -> str:
    try:
        request = Request(url, headers={"User-Agent": USER_AGENT})
        with urlopen(request, timeout=timeout) as response:
            status = getattr(response, "status", 200)
            if not 200 <= status < 300:
                raise RuleFetchError(url, f"HTTP {status}")
            return response.read().decode("utf-8")
    except RuleFetchError:
        raise
    except (OSError, ValueError, http.client.HTTPException) as exc:
        raise RuleFetchError(url, str(exc) or type(exc).__name__) from exc


class RemoteRuleCache:
    """Serve fresh cached rules, else fetch, else fall back to stale cache."""

    def __init__(
        self,
        store: IRuleCacheStore,
        *,
        base_url: str = DEFAULT_RULES_URL,
        ttl_seconds: float = CACHE_TTL_SECONDS,
        timeout: float = FETCH_TIMEOUT_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.store = store
        self.base_url = base_url.rstrip("/")
        self.ttl_seconds = ttl_seconds
        self.timeout = timeout
        self._clock = clock

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def fetch(self, path: str, *, allow_network: bool = True) -> FetchResult:
        key = cache_key_for_path(path)
        entry = self._lookup(key)
        now = self._clock()

        if entry is not None and entry.age(now) <= self.ttl_seconds:
            logger.debug("Rule cache hit for %s", path)
            return FetchResult(content=entry.content, origin=FetchOrigin.CACHE)

        url = self.url_for(path)
        if not allow_network:
            if entry is not None:
                logger.warning("Updates disabled, using stale cached rules for %s", path)
                return FetchResult(content=entry.content, origin=FetchOrigin.STALE)
            raise RuleFetchError(url, "updates disabled and nothing cached")

        try:
            logger.debug("Fetching rules from %s", url)
            content = download_text(url, timeout=self.timeout)
        except RuleFetchError as exc:
            logger.error("%s", exc)
            if entry is not None:
                logger.warning("Using stale cached rules for %s", key.topic)
                return FetchResult(content=entry.content, origin=FetchOrigin.STALE)
            raise

        self._save(key, CacheEntry(content=content, fetched_at=now))
        return FetchResult(content=content, origin=FetchOrigin.NETWORK)

    def _lookup(self, key: CacheKey) -> Optional[CacheEntry]:
        try:
            return self.store.get(key)
        except CacheStoreError as exc:
            logger.warning("%s; treating as cache miss", exc)
            return None

    def _save(self, key: CacheKey, entry: CacheEntry) -> None:
        try:
            self.store.upsert(key, entry)
        except CacheStoreError as exc:
            logger.warning("Failed to cache rules for %s: %s", key.topic, exc)
