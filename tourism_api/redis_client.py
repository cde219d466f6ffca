from fastapi import Request
from redis import asyncio as aioredis


def make_redis(url: str) -> aioredis.Redis:
    return aioredis.from_url(url, encoding="utf-8", decode_responses=True)


async def redis_health(redis: aioredis.Redis) -> bool:
    try:
        pong = await redis.ping()
        return bool(pong)
    except Exception:
        return False


def get_redis(request: Request) -> aioredis.Redis:
    return request.app.state.resources.redis
