import sqlite3
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

from rulekit.constants import LATEST_VERSION
from rulekit.errors import CacheStoreError


@dataclass(frozen=True)
class CacheKey:
    topic: str
    version: str = LATEST_VERSION
    framework: str = ""


@dataclass(frozen=True)
class CacheEntry:
    content: str
    fetched_at: float

    def age(self, now: float) -> float:
        return now - self.fetched_at


class IRuleCacheStore(ABC):
    @abstractmethod
    def get(self, key: CacheKey) -> Optional[CacheEntry]:
        raise NotImplementedError

    @abstractmethod
    def upsert(self, key: CacheKey, entry: CacheEntry) -> None:
        raise NotImplementedError


class MemoryRuleCacheStore(IRuleCacheStore):
    def __init__(self) -> None:
        self._entries: dict[CacheKey, CacheEntry] = {}

    def get(self, key: CacheKey) -> Optional[CacheEntry]:
        return self._entries.get(key)

    def upsert(self, key: CacheKey, entry: CacheEntry) -> None:
        self._entries[key] = entry

    def __len__(self) -> int:
        return len(self._entries)


class SqliteRuleCacheStore(IRuleCacheStore):
    """Rule documents cached in a sqlite table keyed by (topic, version, framework)."""

    TABLE_NAME = "rule_cache"

    def __init__(self, db_path: Path) -> None:
        self._db_path = db_path
        self._initialized = False

    @property
    def db_path(self) -> Path:
        return self._db_path

    def get(self, key: CacheKey) -> Optional[CacheEntry]:
        try:
            with self._connect() as conn:
                row = conn.execute(
                    f"""
                    SELECT content, fetched_at FROM {self.TABLE_NAME}
                    WHERE topic = ? AND version = ? AND framework = ?
                    """,
                    (key.topic, key.version, key.framework),
                ).fetchone()
        except (sqlite3.Error, OSError) as exc:
            raise CacheStoreError(str(exc)) from exc
        if row is None:
            return None
        return CacheEntry(content=row[0], fetched_at=float(row[1]))

    def upsert(self, key: CacheKey, entry: CacheEntry) -> None:
        try:
            with self._connect() as conn:
                conn.execute(
                    f"""
                    INSERT INTO {self.TABLE_NAME}
                        (topic, version, framework, fetched_at, content)
                    VALUES (?, ?, ?, ?, ?)
                    ON CONFLICT (topic, version, framework) DO UPDATE SET
                        fetched_at = excluded.fetched_at,
                        content = excluded.content
                    """,
                    (key.topic, key.version, key.framework, entry.fetched_at, entry.content),
                )
        except (sqlite3.Error, OSError) as exc:
            raise CacheStoreError(str(exc)) from exc

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self._db_path, timeout=30)
        try:
            if not self._initialized:
                self._create_table(conn)
                self._initialized = True
            yield conn
            conn.commit()
        finally:
            conn.close()

    def _create_table(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            f"""
            CREATE TABLE IF NOT EXISTS {self.TABLE_NAME} (
                topic TEXT NOT NULL,
                version TEXT NOT NULL,
                framework TEXT NOT NULL DEFAULT '',
                fetched_at REAL NOT NULL,
                content TEXT NOT NULL,
                PRIMARY KEY (topic, version, framework)
            )
            """
        )
        conn.commit()
