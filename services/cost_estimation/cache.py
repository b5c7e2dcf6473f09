"""
Estimation Cache
================

Memoization for extracted cost drivers and computed estimates.

Backends:
- InMemoryCache: per-instance dict, never expires
- RedisCache: shared store for multi-instance deployments

Two callers racing on the same key may both miss and both compute; the
computations are idempotent, so the second write simply replaces an
equal value.

Version: 0.1.0
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from pydantic import TypeAdapter, ValidationError
from redis.asyncio import Redis

from shared.config import CacheBackend, settings
from shared.logging import get_logger


logger = get_logger(__name__)

T = TypeVar("T")

FINGERPRINT_PREFIX_CHARS = 100


def make_cache_key(text: str, suffix: str = "") -> str:
    """
    Build a cheap fingerprint for a text input.

    First 100 characters, the full length and a context suffix. Inputs of
    equal length sharing a prefix collide.
    """
    return f"{text[:FINGERPRINT_PREFIX_CHARS]}_{len(text)}_{suffix}"


class EstimationCache(ABC, Generic[T]):
    """Key-value cache interface used by the estimation pipeline."""

    @abstractmethod
    async def get(self, key: str) -> T | None:
        """Return the cached value or None on a miss."""
        ...

    @abstractmethod
    async def set(self, key: str, value: T) -> None:
        """Store a value."""
        ...

    @abstractmethod
    async def clear(self) -> None:
        """Remove every entry owned by this cache."""
        ...

    @abstractmethod
    async def size(self) -> int:
        """Number of cached entries."""
        ...


class InMemoryCache(EstimationCache[T]):
    """Dict-backed cache scoped to one instance."""

    def __init__(self) -> None:
        self._store: dict[str, T] = {}

    async def get(self, key: str) -> T | None:
        return self._store.get(key)

    async def set(self, key: str, value: T) -> None:
        self._store[key] = value

    async def clear(self) -> None:
        self._store.clear()

    async def size(self) -> int:
        return len(self._store)


class RedisCache(EstimationCache[T]):
    """
    Redis-backed cache.

    Values are serialised to JSON through a pydantic TypeAdapter so that
    models come back as models. Keys are namespaced; ``clear`` only
    touches this namespace.
    """

    def __init__(
        self,
        client: Redis,  # type: ignore[type-arg]
        adapter: TypeAdapter[T],
        namespace: str,
        ttl_seconds: int | None = None,
    ) -> None:
        self._client = client
        self._adapter = adapter
        self._namespace = namespace
        self._ttl_seconds = ttl_seconds

    def _key(self, key: str) -> str:
        return f"{self._namespace}:{key}"

    async def get(self, key: str) -> T | None:
        raw = await self._client.get(self._key(key))
        if raw is None:
            return None
        try:
            return self._adapter.validate_json(raw)
        except ValidationError as e:
            # Entry written by an incompatible version; treat as a miss
            logger.warning("cache_entry_invalid", namespace=self._namespace, error=str(e))
            return None

    async def set(self, key: str, value: T) -> None:
        payload = self._adapter.dump_json(value)
        await self._client.set(self._key(key), payload, ex=self._ttl_seconds)

    async def clear(self) -> None:
        keys = [k async for k in self._client.scan_iter(match=f"{self._namespace}:*")]
        if keys:
            await self._client.delete(*keys)
        logger.info("cache_cleared", namespace=self._namespace, entries=len(keys))

    async def size(self) -> int:
        count = 0
        async for _ in self._client.scan_iter(match=f"{self._namespace}:*"):
            count += 1
        return count


def build_cache(adapter: TypeAdapter[T], name: str) -> EstimationCache[T]:
    """
    Create a cache for the configured backend.

    Args:
        adapter: Serialiser for the cached value type (Redis only)
        name: Logical cache name, appended to the configured namespace

    Returns:
        EstimationCache instance
    """
    config = settings.cost_estimation
    if config.cache_backend == CacheBackend.REDIS:
        client = Redis.from_url(settings.redis.url, decode_responses=True)
        logger.info("redis_cache_created", host=settings.redis.host, cache=name)
        return RedisCache(
            client,
            adapter,
            namespace=f"{config.cache_namespace}:{name}",
            ttl_seconds=config.cache_ttl_seconds,
        )
    return InMemoryCache()
