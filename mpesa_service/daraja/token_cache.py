"""
Bearer token caches

One cache instance is created per application and handed to the
TokenManager. Entries are keyed by credential-set id and always hold the
token together with its expiry, so a reader never sees one without the
other. Concurrent refreshes are allowed; the last write wins.
"""

import json
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional

from mpesa_service.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CachedToken:
    token: str
    expires_at: datetime

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return (now or datetime.now()) > self.expires_at


class TokenCache:
    """In-process token cache guarded by a lock."""

    def __init__(self):
        self._entries: Dict[str, CachedToken] = {}
        self._lock = threading.Lock()

    def get(self, key: str, now: Optional[datetime] = None) -> Optional[CachedToken]:
        """Return the live entry for key, evicting it if it has expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.is_expired(now):
                del self._entries[key]
                return None
            return entry

    def put(self, key: str, token: str, expires_at: datetime,
            now: Optional[datetime] = None) -> CachedToken:
        # now is only needed by caches that derive a TTL
        entry = CachedToken(token=token, expires_at=expires_at)
        with self._lock:
            self._entries[key] = entry
        return entry

    def invalidate(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self):
        with self._lock:
            return len(self._entries)


class RedisTokenCache:
    """
    Token cache shared across worker processes through Redis.

    The token and its expiry are written as one JSON value, and the key
    carries a matching TTL so Redis drops it on its own.
    """

    KEY_PREFIX = 'daraja:token:'

    def __init__(self, client, key_prefix: Optional[str] = None):
        self.client = client
        self.key_prefix = key_prefix or self.KEY_PREFIX

    def _key(self, key: str) -> str:
        return f'{self.key_prefix}{key}'

    def get(self, key: str, now: Optional[datetime] = None) -> Optional[CachedToken]:
        raw = self.client.get(self._key(key))
        if raw is None:
            return None

        try:
            data = json.loads(raw)
            entry = CachedToken(
                token=data['token'],
                expires_at=datetime.fromisoformat(data['expires_at'])
            )
        except (ValueError, KeyError, TypeError):
            logger.warning("Discarding unreadable cached token for key %s", key)
            self.invalidate(key)
            return None

        if entry.is_expired(now):
            self.invalidate(key)
            return None
        return entry

    def put(self, key: str, token: str, expires_at: datetime,
            now: Optional[datetime] = None) -> CachedToken:
        entry = CachedToken(token=token, expires_at=expires_at)
        ttl = int((expires_at - (now or datetime.now())).total_seconds())
        value = json.dumps({'token': token, 'expires_at': expires_at.isoformat()})
        self.client.set(self._key(key), value, ex=max(ttl, 1))
        return entry

    def invalidate(self, key: str) -> None:
        self.client.delete(self._key(key))
