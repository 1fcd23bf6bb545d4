"""Process-wide Redis handle, for ad-hoc use by the rest of the backend."""

import logging
import socket
from typing import Any, Mapping

from redis.asyncio import Redis
from redis.asyncio.connection import Connection
from redis.exceptions import RedisError

from src.core.config import Settings

logger = logging.getLogger(__name__)


class IPv4Connection(Connection):
    """TCP connection that only resolves the host to IPv4 addresses."""

    def _connection_arguments(self) -> Mapping[str, Any]:
        return {**super()._connection_arguments(), "family": socket.AF_INET}


def create_redis_client(url: str) -> Redis:
    """Client for `url`, resolving hosts to IPv4 only. No connection is made until first use."""
    return Redis.from_url(url, connection_class=IPv4Connection, decode_responses=True)


class CacheHandle:
    """Single long-lived connection to the key-value store. Transport errors are logged, never fatal."""

    def __init__(self, client: Redis) -> None:
        self.client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "CacheHandle":
        return cls(create_redis_client(settings.cache_url))

    async def connect(self) -> bool:
        """Ping once. Returns whether Redis answered; the client reconnects on its own afterwards."""
        try:
            await self.client.ping()
        except RedisError as exc:
            logger.error("Redis error: %s", exc)
            return False
        logger.info("Connected to Redis")
        return True

    async def close(self) -> None:
        await self.client.aclose()
