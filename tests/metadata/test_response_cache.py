"""Tests for the SQLite-backed response cache decorator."""

import asyncio

import pytest

from opendouban.metadata import cache as response_cache
from opendouban.metadata.cache import cache
from opendouban.utils import config as cfg


class DummyApi:
    """Dummy API whose payload changes on every real call."""

    call_count: int = 0

    @cache(ttl=1)
    async def get_payload(self, key: str) -> dict:
        self.call_count += 1
        return {"key": key, "value": f"result-{self.call_count}"}

    @cache(ttl=lambda: 60)
    async def maybe_missing(self, key: str) -> dict | None:
        self.call_count += 1
        return None


@pytest.fixture
def cache_enabled(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.setattr(response_cache, "BYPASS_CACHE", False)
    monkeypatch.setattr(response_cache, "CACHE_DB_PATH", str(tmp_path / "cache.db"))
    response_cache.clear_memory_cache()


@pytest.mark.asyncio
async def test_cache_stores_and_retrieves(cache_enabled: None) -> None:
    api = DummyApi()
    first = await api.get_payload("foo")
    second = await api.get_payload("foo")
    assert first == second
    assert api.call_count == 1


@pytest.mark.asyncio
async def test_cache_survives_memory_clear(cache_enabled: None) -> None:
    """Expected: a fresh process (empty memory layer) still hits SQLite."""
    api = DummyApi()
    first = await api.get_payload("persisted")
    response_cache.clear_memory_cache()
    second = await api.get_payload("persisted")
    assert first == second
    assert api.call_count == 1


@pytest.mark.asyncio
async def test_cache_expiry(cache_enabled: None) -> None:
    api = DummyApi()
    first = await api.get_payload("bar")
    await asyncio.sleep(1.1)
    second = await api.get_payload("bar")
    assert api.call_count == 2
    assert first != second


@pytest.mark.asyncio
async def test_cache_bypass_flag(cache_enabled: None, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(response_cache, "BYPASS_CACHE", True)
    api = DummyApi()
    await api.get_payload("baz")
    await api.get_payload("baz")
    assert api.call_count == 2


@pytest.mark.asyncio
async def test_cache_bypass_from_config(cache_enabled: None) -> None:
    cfg.set_config_value("cache.bypass", True)
    api = DummyApi()
    await api.get_payload("qux")
    await api.get_payload("qux")
    assert api.call_count == 2


@pytest.mark.asyncio
async def test_none_results_are_not_cached(cache_enabled: None) -> None:
    api = DummyApi()
    assert await api.maybe_missing("gone") is None
    assert await api.maybe_missing("gone") is None
    assert api.call_count == 2


def test_cache_rejects_sync_functions() -> None:
    with pytest.raises(TypeError):

        @cache()
        def not_async() -> None:  # pragma: no cover
            return None


@pytest.mark.asyncio
async def test_expired_memory_entry_is_evicted(cache_enabled: None) -> None:
    """Edge: a stale in-memory entry is dropped on access; SQLite still serves."""
    api = DummyApi()
    await api.get_payload("stale")
    [mem_key] = list(response_cache._MEM_CACHE)
    _, value = response_cache._MEM_CACHE[mem_key]
    response_cache._MEM_CACHE[mem_key] = (0.0, value)

    assert await api.get_payload("stale") == value
    assert mem_key not in response_cache._MEM_CACHE
    assert api.call_count == 1
