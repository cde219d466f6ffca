from __future__ import annotations
from fastapi import HTTPException, Request, status
from redis.asyncio import Redis
from ..config import get_settings

S = get_settings()

# ---- generic token counter (fixed window) ----
async def _hit(redis: Redis, key: str, window_sec: int, limit: int) -> None:
    count = await redis.incr(key)
    if count == 1:
        await redis.expire(key, window_sec)
    if count > limit:
        ttl = await redis.ttl(key)
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="rate limit exceeded",
            headers={"Retry-After": str(max(ttl, 1)) if ttl and ttl > 0 else "10"},
        )

def client_ip(req: Request) -> str:
    # prefer X-Forwarded-For (first hop), fallback to the socket peer
    h = req.headers.get("x-forwarded-for")
    if h:
        return h.split(",")[0].strip()
    return req.client.host if req.client else "unknown"

# ---- public helpers ----
async def limit_otp_request(redis: Redis, req: Request) -> None:
    await _hit(redis, f"rl:otp:req:ip:{client_ip(req)}", window_sec=10, limit=S.RL_OTP_REQ_PER_IP_10S)

async def limit_otp_verify(redis: Redis, req: Request) -> None:
    await _hit(redis, f"rl:otp:verify:ip:{client_ip(req)}", window_sec=10, limit=S.RL_OTP_VERIFY_PER_IP_10S)

async def limit_login(redis: Redis, req: Request) -> None:
    await _hit(redis, f"rl:login:ip:{client_ip(req)}", window_sec=10, limit=S.RL_LOGIN_PER_IP_10S)
