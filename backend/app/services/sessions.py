"""Storage for refresh-token sessions.

A session is an opaque JSON record keyed by its token id. Sessions are also
indexed per user so that every session of an account can be dropped at once,
for example when an administrator deactivates it.
"""

from __future__ import annotations

import threading
import time
from functools import lru_cache
from typing import Protocol

from redis import Redis

from app.config import get_settings


class SessionStore(Protocol):
    def save(self, token_id: str, record: str, ttl_seconds: int, *, user_id: str) -> None:
        """Persist ``record`` for ``ttl_seconds``."""

    def take(self, token_id: str) -> str | None:
        """Return the record, or ``None`` when unknown or expired, and remove it."""

    def discard(self, token_id: str) -> None:
        """Forget one session. Unknown ids are ignored."""

    def discard_user(self, user_id: str) -> int:
        """Forget every session of ``user_id`` and return how many were live."""


class InMemorySessionStore:
    """Process-local store used when ``AUTH_CACHE_URL`` is not configured."""

    def __init__(self) -> None:
        self._records: dict[str, tuple[str, float, str]] = {}
        self._lock = threading.Lock()

    def _live(self, token_id: str) -> tuple[str, float, str] | None:
        entry = self._records.get(token_id)
        if entry is not None and entry[1] <= time.time():
            del self._records[token_id]
            return None
        return entry

    def save(self, token_id: str, record: str, ttl_seconds: int, *, user_id: str) -> None:
        with self._lock:
            self._records[token_id] = (record, time.time() + max(ttl_seconds, 1), user_id)

    def take(self, token_id: str) -> str | None:
        with self._lock:
            entry = self._live(token_id)
            if entry is None:
                return None
            del self._records[token_id]
            return entry[0]

    def discard(self, token_id: str) -> None:
        with self._lock:
            self._records.pop(token_id, None)

    def discard_user(self, user_id: str) -> int:
        with self._lock:
            doomed = [key for key, (_, _, owner) in self._records.items() if owner == user_id]
            live = sum(1 for key in doomed if self._live(key) is not None)
            for key in doomed:
                self._records.pop(key, None)
            return live


class RedisSessionStore:
    """Sessions kept in Redis with native expiry; a set per user indexes them."""

    def __init__(self, url: str, *, namespace: str = "tether") -> None:
        self._client = Redis.from_url(url, decode_responses=True)
        self._namespace = namespace

    def _key(self, token_id: str) -> str:
        return f"{self._namespace}:refresh:{token_id}"

    def _user_key(self, user_id: str) -> str:
        return f"{self._namespace}:refresh-user:{user_id}"

    def save(self, token_id: str, record: str, ttl_seconds: int, *, user_id: str) -> None:
        ttl = max(ttl_seconds, 1)
        pipe = self._client.pipeline()
        pipe.set(self._key(token_id), record, ex=ttl)
        pipe.sadd(self._user_key(user_id), token_id)
        pipe.expire(self._user_key(user_id), ttl, nx=True)
        pipe.expire(self._user_key(user_id), ttl, gt=True)
        pipe.execute()

    def take(self, token_id: str) -> str | None:
        return self._client.getdel(self._key(token_id))

    def discard(self, token_id: str) -> None:
        self._client.delete(self._key(token_id))

    def discard_user(self, user_id: str) -> int:
        token_ids = self._client.smembers(self._user_key(user_id))
        keys = [self._key(token_id) for token_id in token_ids]
        removed = self._client.delete(*keys) if keys else 0
        self._client.delete(self._user_key(user_id))
        return int(removed)


@lru_cache(maxsize=1)
def get_session_store() -> SessionStore:
    settings = get_settings()
    if settings.auth_cache_url:
        return RedisSessionStore(settings.auth_cache_url)
    return InMemorySessionStore()
