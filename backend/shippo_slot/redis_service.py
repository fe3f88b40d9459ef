"""Redis service for session round state and per-session locking."""
import json
import uuid
from contextlib import asynccontextmanager
from typing import Any

import redis.asyncio as redis

from shippo_slot.config import settings
from shippo_slot.errors import ErrorCode, GameError


class RedisService:
    """Redis client for session state and command locking."""

    # Key prefixes
    LOCK_PREFIX = "lock:session:"
    STATE_PREFIX = "state:session:"

    # TTLs in seconds
    LOCK_TTL = settings.lock_ttl_seconds
    STATE_TTL = settings.session_ttl_seconds

    # Lua script for token-safe lock release (compare-and-delete)
    # Only deletes if current value matches token; prevents releasing another's lock
    RELEASE_LOCK_SCRIPT = """
    if redis.call("get", KEYS[1]) == ARGV[1] then
        return redis.call("del", KEYS[1])
    else
        return 0
    end
    """

    def __init__(self, redis_url: str | None = None):
        self._url = redis_url or settings.redis_url
        self._client: redis.Redis | None = None

    async def connect(self) -> None:
        """Connect to Redis."""
        if self._client is None:
            self._client = redis.from_url(self._url, decode_responses=True)

    async def close(self) -> None:
        """Close Redis connection."""
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> redis.Redis:
        """Get Redis client, raise if not connected."""
        if self._client is None:
            raise RuntimeError("Redis not connected")
        return self._client

    async def acquire_session_lock(self, session_id: str) -> str | None:
        """
        Attempt to acquire per-session lock with unique token.

        Returns token string if lock acquired, None if already locked.
        """
        key = f"{self.LOCK_PREFIX}{session_id}"
        token = str(uuid.uuid4())
        # SET NX EX returns True if key was set (lock acquired)
        acquired = await self.client.set(key, token, nx=True, ex=self.LOCK_TTL)
        return token if acquired is True else None

    async def release_session_lock(self, session_id: str, token: str) -> bool:
        """
        Release per-session lock only if token matches.

        Returns True if lock was released, False if token didn't match.
        """
        key = f"{self.LOCK_PREFIX}{session_id}"
        result = await self.client.eval(self.RELEASE_LOCK_SCRIPT, 1, key, token)
        return result == 1

    @asynccontextmanager
    async def session_lock(self, session_id: str):
        """
        Context manager for session lock.

        Raises SESSION_BUSY if lock cannot be acquired.
        Automatically releases lock on exit (token-safe).
        """
        token = await self.acquire_session_lock(session_id)
        if token is None:
            raise GameError(
                ErrorCode.SESSION_BUSY,
                "Another command is in progress for this session.",
            )
        try:
            yield
        finally:
            await self.release_session_lock(session_id, token)

    async def get_session_state(self, session_id: str) -> dict[str, Any] | None:
        """
        Load round state of a session.

        Returns None if no state exists (new or expired session).
        """
        key = f"{self.STATE_PREFIX}{session_id}"
        cached = await self.client.get(key)
        if cached is None:
            return None
        return json.loads(cached)

    async def save_session_state(self, session_id: str, state: dict[str, Any]) -> None:
        """Save round state of a session with TTL."""
        key = f"{self.STATE_PREFIX}{session_id}"
        await self.client.setex(key, self.STATE_TTL, json.dumps(state, ensure_ascii=False))

    async def clear_session_state(self, session_id: str) -> None:
        """Drop a session's round state."""
        key = f"{self.STATE_PREFIX}{session_id}"
        await self.client.delete(key)


# Global instance
redis_service = RedisService()
