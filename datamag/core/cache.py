from __future__ import annotations
import asyncio
import hashlib
import json
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Generic, Optional, TypeVar

from fastapi import Request
from fastapi.responses import JSONResponse, Response

from datamag.core.config import settings
from datamag.core.logging import get_logger

T = TypeVar("T")

cache_logger = get_logger("cache")

# ---------------------------------------------------------------------------
# Result cache (TTL, in process)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    payload: T
    created_at: float


def normalize_key(key: str) -> str:
    return " ".join(key.split()).casefold()


class ResultCache(Generic[T]):
    """
    TTL cache for computed analytics payloads.

    Entries are checked lazily on access: a fresh one is served as is, a stale
    one is recomputed and overwritten. Concurrent misses on the same key share
    a single computation. Meant to be used from one event loop.
    """

    def __init__(
        self,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = settings.ANALYTICS_CACHE_TTL_SECONDS if ttl_seconds is None else ttl_seconds
        self._clock = clock
        self._entries: Dict[str, CacheEntry[T]] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def _fresh(self, key: str, ttl: float) -> Optional[CacheEntry[T]]:
        entry = self._entries.get(key)
        if entry is not None and self._clock() - entry.created_at < ttl:
            return entry
        return None

    def peek(self, key: str, ttl_seconds: Optional[float] = None) -> Optional[T]:
        """Return the fresh payload for *key* without computing anything."""
        ttl = self.ttl_seconds if ttl_seconds is None else ttl_seconds
        entry = self._fresh(normalize_key(key), ttl)
        return entry.payload if entry else None

    async def get_or_compute(
        self,
        key: str,
        compute: Callable[[], Awaitable[T]],
        ttl_seconds: Optional[float] = None,
    ) -> T:
        ttl = self.ttl_seconds if ttl_seconds is None else ttl_seconds
        key = normalize_key(key)

        entry = self._fresh(key, ttl)
        if entry is not None:
            cache_logger.debug("Cache hit", key=key)
            return entry.payload

        lock = self._locks.setdefault(key, asyncio.Lock())
        try:
            async with lock:
                # another waiter may have filled the entry while we were queued
                entry = self._fresh(key, ttl)
                if entry is not None:
                    cache_logger.debug("Cache hit after wait", key=key)
                    return entry.payload

                cache_logger.debug("Cache miss", key=key)
                payload = await compute()
                self._entries[key] = CacheEntry(payload=payload, created_at=self._clock())
                return payload
        finally:
            # queued waiters keep their reference; new callers get a fresh lock
            if not lock.locked() and self._locks.get(key) is lock:
                del self._locks[key]

    @property
    def pending_locks(self) -> int:
        return len(self._locks)

    def invalidate(self, key: str) -> bool:
        return self._entries.pop(normalize_key(key), None) is not None

    def clear(self) -> None:
        self._entries.clear()
        self._locks.clear()


# ---------------------------------------------------------------------------
# ETag helpers
# ---------------------------------------------------------------------------

def make_etag_from_bytes(body: bytes) -> str:
    return hashlib.md5(body).hexdigest()


def dumps_deterministic(obj: Any) -> bytes:
    return json.dumps(
        obj,
        ensure_ascii=False,
        separators=(",", ":"),
        sort_keys=True,
    ).encode("utf-8")


def _cache_control_value(max_age: Optional[int], swr: Optional[int]) -> str:
    max_age = settings.CACHE_MAX_AGE if max_age is None else max_age
    swr = settings.CACHE_SWR if swr is None else swr
    return f"max-age={int(max_age)}, stale-while-revalidate={int(swr)}"


def apply_cache_headers(
    response: Response,
    etag: str,
    *,
    max_age: Optional[int] = None,
    swr: Optional[int] = None,
) -> None:
    """Set ETag and Cache-Control on the response."""
    response.headers["ETag"] = etag
    response.headers["Cache-Control"] = _cache_control_value(max_age, swr)


def etag_json(
    request: Request,
    payload: Any,
    *,
    status_code: int = 200,
    max_age: Optional[int] = None,
    swr: Optional[int] = None,
) -> Response:
    """JSON response with an ETag; answers 304 when If-None-Match matches."""
    body = dumps_deterministic(payload)
    etag = make_etag_from_bytes(body)

    inm = request.headers.get("If-None-Match")
    if inm and inm == etag:
        resp = Response(status_code=304)
        apply_cache_headers(resp, etag, max_age=max_age, swr=swr)
        return resp

    resp = JSONResponse(status_code=status_code, content=payload)
    apply_cache_headers(resp, etag, max_age=max_age, swr=swr)
    return resp
