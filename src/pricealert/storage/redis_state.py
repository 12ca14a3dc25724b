# src/pricealert/storage/redis_state.py
from __future__ import annotations

import structlog
from redis.asyncio import Redis
from redis.exceptions import RedisError

from pricealert.alerts.state import StateDocument
from pricealert.errors import StateStoreError
from pricealert.storage.json_state import dumps_state, loads_state

log = structlog.get_logger("state_store")

DEFAULT_STATE_KEY = "pricealert:state"


class RedisStateStore:
    """
    Same JSON document as JsonStateStore, kept under a single Redis string key.
    Useful when the job runs on ephemeral runners with no persistent workspace.
    """
    def __init__(self, redis: Redis, key: str = DEFAULT_STATE_KEY):
        self.redis = redis
        self.key = key

    @classmethod
    def from_url(cls, url: str, key: str = DEFAULT_STATE_KEY) -> "RedisStateStore":
        return cls(Redis.from_url(url, decode_responses=True), key=key)

    async def load(self) -> StateDocument:
        try:
            raw = await self.redis.get(self.key)
        except RedisError as e:
            log.warning("state_load_failed", key=self.key, err=str(e))
            return StateDocument()
        if raw is None:
            log.info("state_missing", key=self.key)
            return StateDocument()
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8", errors="replace")
        try:
            return loads_state(raw)
        except ValueError as e:
            log.warning("state_load_failed", key=self.key, err=str(e))
            return StateDocument()

    async def save(self, doc: StateDocument) -> None:
        try:
            await self.redis.set(self.key, dumps_state(doc))
        except RedisError as e:
            raise StateStoreError(f"Failed to write state to redis key {self.key}: {e}") from e
        log.info("state_saved", key=self.key, targets=len(doc.targets))

    async def close(self) -> None:
        await self.redis.aclose()
