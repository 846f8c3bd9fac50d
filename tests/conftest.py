import sys
from pathlib import Path
from typing import Any, Callable, Optional

import pytest
import yaml
from click.testing import CliRunner


def _ensure_repo_on_path() -> None:
    repo_root = Path(__file__).resolve().parent.parent
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))


_ensure_repo_on_path()

from rulekit.errors import CacheStoreError  # noqa: E402
from rulekit.remote.cache import RemoteRuleCache  # noqa: E402
from rulekit.remote.store import CacheEntry, CacheKey, IRuleCacheStore, MemoryRuleCacheStore  # noqa: E402
from rulekit.rules.loader import RuleLoader  # noqa: E402
from rulekit.rules.manager import RuleManager  # noqa: E402
from rulekit.rules.resolver import RuleSourceResolver  # noqa: E402

BASE_URL = "https://rules.example.test/main"


class FakeResponse:
    def __init__(self, payload: str, status: int = 200) -> None:
        self._payload = payload
        self.status = status

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return None

    def read(self) -> bytes:
        return self._payload.encode("utf-8")


class FakeRemote:
    """Stands in for ``urlopen``: serves payloads by URL and counts calls."""

    def __init__(self) -> None:
        self.payloads: dict[str, str] = {}
        self.calls: list[str] = []
        self.fail_with: Optional[Exception] = None

    def __call__(self, request: Any, timeout: float = 0) -> FakeResponse:
        url = request.full_url if hasattr(request, "full_url") else str(request)
        self.calls.append(url)
        if self.fail_with is not None:
            raise self.fail_with
        if url not in self.payloads:
            raise OSError(f"no route to {url}")
        return FakeResponse(self.payloads[url])


class FailingStore(IRuleCacheStore):
    def get(self, key: CacheKey) -> Optional[CacheEntry]:
        raise CacheStoreError("disk unavailable")

    def upsert(self, key: CacheKey, entry: CacheEntry) -> None:
        raise CacheStoreError("disk unavailable")


class FakeClock:
    def __init__(self, now: float = 1_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setattr(Path, "home", lambda: tmp_path)
    for name in (
        "RULEKIT_CACHE_DB",
        "RULEKIT_RULES_URL",
        "RULEKIT_TAGS_URL",
        "RULEKIT_CACHE_TTL_SECONDS",
        "RULEKIT_FETCH_TIMEOUT",
        "RULEKIT_CLASSIFY_THRESHOLD",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def write_yaml() -> Callable[[Path, Any], Path]:
    def _write(path: Path, payload: Any) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        text = payload if isinstance(payload, str) else yaml.safe_dump(payload, sort_keys=False)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def fake_remote(monkeypatch) -> FakeRemote:
    remote = FakeRemote()
    monkeypatch.setattr("rulekit.remote.cache.urlopen", remote)
    return remote


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def memory_store() -> MemoryRuleCacheStore:
    return MemoryRuleCacheStore()


@pytest.fixture
def builtin_dir(tmp_path: Path) -> Path:
    path = tmp_path / "builtin"
    path.mkdir()
    return path


@pytest.fixture
def remote_cache(memory_store: MemoryRuleCacheStore, clock: FakeClock) -> RemoteRuleCache:
    return RemoteRuleCache(memory_store, base_url=BASE_URL, clock=clock)


@pytest.fixture
def loader(builtin_dir: Path, remote_cache: RemoteRuleCache) -> RuleLoader:
    return RuleLoader(RuleSourceResolver(builtin_dir, base_url=BASE_URL), remote_cache)


@pytest.fixture
def manager(loader: RuleLoader) -> RuleManager:
    return RuleManager(loader)


@pytest.fixture
def cli_runner(tmp_path: Path) -> CliRunner:
    class HomeCliRunner(CliRunner):
        def invoke(self, cli: Any, args: Any = None, **kwargs: Any):  # type: ignore[override]
            env = dict(kwargs.pop("env", {}) or {})
            env.setdefault("HOME", str(tmp_path))
            env.setdefault("RULEKIT_CACHE_DB", str(tmp_path / "cache" / "rules.sqlite"))
            env.setdefault("RULEKIT_RULES_URL", BASE_URL)
            env.setdefault("COLUMNS", "200")
            kwargs["env"] = env
            return super().invoke(cli, args=args, **kwargs)

    return HomeCliRunner()


@pytest.fixture
def failing_store() -> FailingStore:
    return FailingStore()
