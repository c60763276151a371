"""Shared fixtures: in-memory redis double, sources and upstream fakes."""

import asyncio
import json
from functools import partial
from pathlib import Path

import httpx
import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from app.models import Badge, CacheKeys, SourceDescriptor, SourceKind
from app.repositories import CacheRepository, LockRepository
from app.services import CacheMetrics, QueryService, RefreshOrchestrator
from app.services.normalizers import build_registry
from badge_client import BaseClient


class FakePipeline:
    """Buffers SETs and applies them on execute, like MULTI/EXEC."""

    def __init__(self, store: "FakeRedis"):
        self._store = store
        self._ops: list[tuple[str, str, int | None]] = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, *_):
        self._ops.clear()

    def set(self, key, value, ex=None):
        self._ops.append((key, value, ex))
        return self

    async def execute(self):
        self._store.check()
        return [await self._store.set(k, v, ex=ex) for k, v, ex in self._ops]


class FakeRedis:
    """Subset of ``redis.asyncio.Redis`` used by the repositories."""

    def __init__(self):
        self.data: dict[str, str] = {}
        self.ttls: dict[str, int] = {}
        self.fail = False

    def check(self):
        if self.fail:
            raise RedisConnectionError("connection refused")

    async def ping(self):
        self.check()
        return True

    async def get(self, key):
        self.check()
        return self.data.get(key)

    async def mget(self, keys):
        self.check()
        return [self.data.get(k) for k in keys]

    async def set(self, key, value, ex=None, nx=False):
        self.check()
        if nx and key in self.data:
            return None
        self.data[key] = str(value)
        if ex is not None:
            self.ttls[key] = ex
        return True

    async def delete(self, *keys):
        self.check()
        deleted = 0
        for key in keys:
            if self.data.pop(key, None) is not None:
                deleted += 1
            self.ttls.pop(key, None)
        return deleted

    def pipeline(self, transaction=True):
        return FakePipeline(self)

    async def aclose(self):
        pass


class FakeSyncer:
    """Stands in for RepoSyncer: writes a fixed tree instead of running git."""

    def __init__(self, files: dict[str, object] | None = None, error: Exception | None = None, delay: float = 0):
        self.files = files or {}
        self.error = error
        self.delay = delay
        self.calls = 0

    async def sync(self, local_path: Path, remote_url: str, token: str | None = None, name: str = "") -> None:
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        (local_path / ".git").mkdir(parents=True, exist_ok=True)
        (local_path / ".git" / "config").write_text("[core]\n")
        for rel, content in self.files.items():
            target = local_path / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content if isinstance(content, str) else json.dumps(content))


class Upstream:
    """URL -> (status, body) routes served through httpx.MockTransport."""

    def __init__(self, routes: dict[str, tuple[int, object]] | None = None):
        self.routes = routes or {}
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status, body = self.routes.get(str(request.url), (404, {"message": "Not Found"}))
        if isinstance(body, Exception):
            raise body
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, json=body)

    def hits(self, url: str) -> int:
        return sum(1 for r in self.requests if str(r.url) == url)


class Clock:
    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


NEKOCORD_URL = "https://up.test/nekocord.json"
VENCORD_URL = "https://up.test/vencord/badges.json"
VENCORD_PLUGINS_URL = "https://up.test/vencord/plugins.json"
AERO_URL = "https://up.test/aero.json"

TEST_SOURCES = (
    SourceDescriptor(
        name="vencord",
        kind=SourceKind.HTTP_JSON_MANIFEST,
        normalizer="contributor_map",
        url=VENCORD_URL,
        manifest_url=VENCORD_PLUGINS_URL,
        contributor_badge=Badge(tooltip="Vencord Contributor", badge="/public/badges/vencord.png"),
        local_icons=True,
    ),
    SourceDescriptor(name="nekocord", kind=SourceKind.HTTP_JSON, normalizer="id_join", url=NEKOCORD_URL),
    SourceDescriptor(
        name="aero",
        kind=SourceKind.HTTP_JSON,
        normalizer="keyword",
        url=AERO_URL,
        icon_base="/public/badges/aero",
        local_icons=True,
    ),
    SourceDescriptor(
        name="enmity",
        kind=SourceKind.GIT_TREE,
        normalizer="enmity",
        repo_url="https://github.test/enmity/badges.git",
        badges_dir="data",
        icon_base="/public/badges/enmity",
        local_icons=True,
    ),
    SourceDescriptor(
        name="replugged",
        kind=SourceKind.EXTERNAL,
        normalizer="replugged",
        url="https://up.test/replugged/{user_id}",
        icon_base="/public/badges/replugged",
        local_icons=True,
    ),
)

NEKOCORD_PAYLOAD = {
    "users": {"42": {"badges": ["b1"]}},
    "badges": {"b1": {"name": "Tester", "image": "/i.png"}},
}

ENMITY_FILES = {
    "42.json": ["dev-badge", "missing"],
    "data/dev.json": {"id": "dev-badge", "name": "Enmity Developer", "url": {"dark": "https://x.test/d.png"}},
}


def default_routes() -> dict[str, tuple[int, object]]:
    return {
        VENCORD_URL: (200, {"1": [{"tooltip": "Donor", "badge": "https://x.test/donor.png"}]}),
        VENCORD_PLUGINS_URL: (200, [{"name": "A", "authors": [{"name": "dev", "id": "2"}]}]),
        NEKOCORD_URL: (200, NEKOCORD_PAYLOAD),
        AERO_URL: (200, {"7": [{"text": "Aero Tester", "image": "t.png", "color": "#fff"}]}),
    }


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def keys() -> CacheKeys:
    return CacheKeys("test")


@pytest.fixture
def cache(fake_redis, keys) -> CacheRepository:
    return CacheRepository(fake_redis, keys)


@pytest.fixture
def lock(fake_redis) -> LockRepository:
    return LockRepository(fake_redis, ttl=300)


@pytest.fixture
def metrics() -> CacheMetrics:
    return CacheMetrics()


@pytest.fixture
def query(cache, metrics) -> QueryService:
    return QueryService(cache, metrics)


@pytest.fixture
def sleeps():
    """Recorded backoff delays plus a sleep that returns immediately."""
    recorded: list[float] = []

    async def sleep(seconds: float) -> None:
        recorded.append(seconds)

    return recorded, sleep


@pytest.fixture
def upstream() -> Upstream:
    return Upstream(default_routes())


@pytest.fixture
def client_factory(upstream, sleeps):
    _, sleep = sleeps
    return partial(BaseClient, max_retries=0, transport=httpx.MockTransport(upstream.handler), sleep=sleep)


@pytest.fixture
def clock() -> Clock:
    return Clock()


@pytest.fixture
def syncer() -> FakeSyncer:
    return FakeSyncer(ENMITY_FILES)


@pytest.fixture
def orchestrator(cache, lock, client_factory, syncer, clock, tmp_path) -> RefreshOrchestrator:
    return RefreshOrchestrator(
        cache=cache,
        lock=lock,
        sources=TEST_SOURCES,
        registry=build_registry(),
        client_factory=client_factory,
        syncer=syncer,
        cache_dir=tmp_path,
        refresh_interval_ms=60 * 60 * 1000,
        cache_ttl=7200,
        clock=clock,
    )
