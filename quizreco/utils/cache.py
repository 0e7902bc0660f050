import hashlib
import json
from redis.asyncio import Redis

def cache_key(prefix: str, *parts) -> str:
    """Short, stable key: '<prefix>:<sha1 of the json-encoded parts>'."""
    s = json.dumps(parts, sort_keys=True, separators=(",", ":"), ensure_ascii=False, default=str)
    return f"{prefix}:{hashlib.sha1(s.encode()).hexdigest()[:16]}"

async def cache_get(redis: Redis, key: str):
    if val := await redis.get(key):
        return json.loads(val)
    return None

async def cache_set(redis: Redis, key: str, value, ex: int = 60):
    await redis.set(key, json.dumps(value, ensure_ascii=False), ex=ex)
