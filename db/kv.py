from typing import Dict, Optional, Protocol
from redis.asyncio import Redis


class KeyValueStore(Protocol):
    """String key-value backend the local data layer persists into."""

    async def get(self, key: str) -> Optional[str]: ...

    async def set(self, key: str, value: str) -> None: ...

    async def delete(self, *keys: str) -> None: ...

    async def incr(self, key: str) -> int: ...


class RedisKeyValueStore:
    """Persistent backend. Expects a client created with decode_responses=True."""

    def __init__(self, redis: Redis):
        self.redis = redis

    @classmethod
    def from_url(cls, url: str) -> "RedisKeyValueStore":
        return cls(Redis.from_url(url, decode_responses=True))

    async def get(self, key: str) -> Optional[str]:
        return await self.redis.get(key)

    async def set(self, key: str, value: str) -> None:
        await self.redis.set(key, value)

    async def delete(self, *keys: str) -> None:
        if keys:
            await self.redis.delete(*keys)

    async def incr(self, key: str) -> int:
        return int(await self.redis.incr(key))

    async def close(self):
        await self.redis.aclose()


class MemoryKeyValueStore:
    """Process-local backend; each instance is an isolated store."""

    def __init__(self, data: Dict[str, str] = None):
        self.data: Dict[str, str] = dict(data or {})

    async def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.data[key] = value

    async def delete(self, *keys: str) -> None:
        for key in keys:
            self.data.pop(key, None)

    async def incr(self, key: str) -> int:
        value = int(self.data.get(key, "0")) + 1
        self.data[key] = str(value)
        return value

    async def close(self):
        pass
