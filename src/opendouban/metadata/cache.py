"""SQLite-backed cache for raw Douban API responses.

Only JSON-serializable return values are cached (the raw payloads, before they
are parsed into models). Failed calls are never cached.
"""

import asyncio
import hashlib
import inspect
import json
import sqlite3
import time
from functools import wraps
from typing import Awaitable, Callable, Optional, TypeVar, Union, cast

from opendouban.utils.config import resolve_setting

CACHE_DB_PATH: Optional[str] = None  # Can be monkeypatched in tests
BYPASS_CACHE: bool = False  # Can be monkeypatched for --no-cache

# In-process layer in front of SQLite; the default DB is ":memory:", which does
# not survive between connections.
_MEM_CACHE: dict[tuple[str, str], tuple[float, object]] = {}

CREATE_TABLE_SQL = """
    CREATE TABLE IF NOT EXISTS responses (
        namespace TEXT NOT NULL,
        key_hash TEXT NOT NULL,
        json_blob TEXT NOT NULL,
        expires_ts REAL NOT NULL,
        PRIMARY KEY (namespace, key_hash)
    );
    """

T = TypeVar("T")
TTL = Union[int, Callable[[], int]]


def _get_db_path() -> str:
    """Return the path to the cache database, defaulting to in-memory."""
    return CACHE_DB_PATH or ":memory:"


def cache_bypassed() -> bool:
    """Return True when caching is disabled by flag, env or config file."""
    return BYPASS_CACHE or resolve_setting("cache.bypass", default=False)


def clear_memory_cache() -> None:
    _MEM_CACHE.clear()


def _make_key(
    func: Callable[..., Awaitable[T]],
    args: tuple[object, ...],
    kwargs: dict[str, object],
) -> tuple[str, str]:
    """Generate a namespace and hash key for the cache entry."""
    namespace = f"{func.__module__}.{func.__qualname__}"
    key_data = json.dumps({"args": args, "kwargs": kwargs}, sort_keys=True, default=str)
    key_hash = hashlib.sha1((namespace + key_data).encode()).hexdigest()
    return namespace, key_hash


def _read(db_path: str, namespace: str, key_hash: str, now: float) -> Optional[object]:
    conn = sqlite3.connect(db_path)
    try:
        conn.execute(CREATE_TABLE_SQL)
        row = conn.execute(
            "SELECT json_blob, expires_ts FROM responses "
            "WHERE namespace=? AND key_hash=?",
            (namespace, key_hash),
        ).fetchone()
        if row and float(row[1]) >= now:
            return json.loads(row[0])
        return None
    finally:
        conn.close()


def _write(
    db_path: str, namespace: str, key_hash: str, value: object, expires_ts: float
) -> None:
    conn = sqlite3.connect(db_path)
    try:
        conn.execute(CREATE_TABLE_SQL)
        conn.execute(
            "REPLACE INTO responses (namespace, key_hash, json_blob, expires_ts) "
            "VALUES (?, ?, ?, ?)",
            (namespace, key_hash, json.dumps(value, default=str), expires_ts),
        )
        conn.commit()
    finally:
        conn.close()


async def _get_or_set_cache(
    func: Callable[..., Awaitable[T]],
    args: tuple[object, ...],
    kwargs: dict[str, object],
    ttl: int,
) -> T:
    """Get a value from cache or call the function and cache the result."""
    namespace, key_hash = _make_key(func, args, kwargs)
    now = time.time()
    mem_key = (namespace, key_hash)

    if mem_key in _MEM_CACHE:
        exp_ts, cached_val = _MEM_CACHE[mem_key]
        if exp_ts > now:
            return cast(T, cached_val)
        del _MEM_CACHE[mem_key]

    db_path = _get_db_path()
    cached = await asyncio.to_thread(_read, db_path, namespace, key_hash, now)
    if cached is not None:
        return cast(T, cached)

    result = await func(*args, **kwargs)
    if result is None:
        return result

    await asyncio.to_thread(_write, db_path, namespace, key_hash, result, now + ttl)
    _MEM_CACHE[mem_key] = (now + ttl, result)
    return result


def cache(
    ttl: TTL = 86400,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Decorator caching async function results in SQLite for a given TTL.

    Args:
        ttl: Time-to-live in seconds, or a zero-argument callable returning it
            (evaluated on every call so configuration changes apply).

    Returns:
        Decorator for async functions.
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        if not inspect.iscoroutinefunction(func):
            raise TypeError("@cache can only be applied to async functions")

        @wraps(func)
        async def wrapper(*args: object, **kwargs: object) -> T:
            if cache_bypassed():
                return await func(*args, **kwargs)
            seconds = ttl() if callable(ttl) else ttl
            return await _get_or_set_cache(func, args, kwargs, seconds)

        return wrapper

    return decorator
