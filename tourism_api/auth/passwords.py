from __future__ import annotations
import asyncio

import bcrypt

from ..config import get_settings

S = get_settings()


def _hash(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=S.BCRYPT_ROUNDS)).decode("utf-8")


def _check(password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))


# bcrypt runs in the default executor
async def hash_password(password: str) -> str:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, _hash, password)


async def check_password(password: str, password_hash: str) -> bool:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, _check, password, password_hash)
