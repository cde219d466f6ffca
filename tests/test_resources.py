import pytest
from sqlalchemy.ext.asyncio import AsyncEngine

import tourism_api.resources as resources_module
from tourism_api.config import get_settings
from tourism_api.resources import Resources

pytestmark = pytest.mark.asyncio


async def test_failed_startup_disposes_engine(monkeypatch):
    disposed = []
    real_dispose = AsyncEngine.dispose

    async def _dispose(self, close=True):
        disposed.append(self)
        await real_dispose(self, close)

    def _unreachable(url):
        raise ConnectionError("redis is down")

    monkeypatch.setattr(AsyncEngine, "dispose", _dispose)
    monkeypatch.setattr(resources_module, "make_redis", _unreachable)

    with pytest.raises(ConnectionError):
        await Resources.open(get_settings())

    assert len(disposed) == 1


async def test_failed_mail_check_closes_redis_too(monkeypatch):
    closed = []

    class _Redis:
        async def aclose(self):
            closed.append(True)

    async def _broken_verify(self):
        raise RuntimeError("mail check crashed")

    monkeypatch.setattr(resources_module, "make_redis", lambda url: _Redis())
    monkeypatch.setattr(resources_module.SMTPMailer, "verify", _broken_verify)

    with pytest.raises(RuntimeError):
        await Resources.open(get_settings())

    assert closed == [True]
