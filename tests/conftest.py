import os

# settings are read once at import time; pin them before anything imports the package
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/0")
os.environ.setdefault("ENV", "test")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET", "test-secret-with-enough-length-for-hs256")
os.environ.setdefault("ADMIN_EMAIL", "admin@example.com")
os.environ.setdefault("FRONTEND_ORIGIN", "http://localhost:3000")

import fakeredis
import httpx
import pytest_asyncio
from sqlalchemy.pool import StaticPool

from tourism_api.db import make_engine, make_sessionmaker
from tourism_api.errors import DeliveryError, GatewayError
from tourism_api.models import Base
from tourism_api.resources import Resources
from tourism_api.services.payments import RefundRecord


# ---------- fakes for the outbound channels ----------
class FakeMailer:
    enabled = True

    def __init__(self):
        self.sent = []
        self.fail_for = set()

    async def send_email(self, *, to, subject, html, sender_name=None):
        if not to or to in self.fail_for:
            raise DeliveryError(f"could not deliver to {to}")
        self.sent.append({"to": to, "subject": subject, "html": html, "sender_name": sender_name})

    def to(self, address):
        return [m for m in self.sent if m["to"] == address]


class FakeVoice:
    enabled = True

    def __init__(self):
        self.calls = []
        self.fail = False

    async def place_call(self, *, to, callback_url):
        if self.fail:
            raise DeliveryError("Call failed")
        self.calls.append({"to": to, "callback_url": callback_url})
        return f"CA{len(self.calls):032d}"


class FakeGateway:
    enabled = True

    def __init__(self):
        self.refunds = []
        self.fail = False

    async def refund(self, *, payment_id, amount_minor, reason):
        if self.fail:
            raise GatewayError("The payment has been fully refunded already")
        self.refunds.append({"payment_id": payment_id, "amount_minor": amount_minor, "reason": reason})
        return RefundRecord(
            id=f"rfnd_{len(self.refunds)}", payment_id=payment_id, amount_minor=amount_minor, status="processed"
        )


# ---------- infrastructure ----------
@pytest_asyncio.fixture(loop_scope="function")
async def engine():
    # one shared in-memory connection per test
    eng = make_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def sessionmaker(engine):
    return make_sessionmaker(engine)


@pytest_asyncio.fixture
async def db(sessionmaker):
    async with sessionmaker() as s:
        yield s


@pytest_asyncio.fixture
async def redis():
    client = fakeredis.FakeAsyncRedis(server=fakeredis.FakeServer(), decode_responses=True)
    yield client
    await client.aclose()


@pytest_asyncio.fixture
async def mailer():
    return FakeMailer()


@pytest_asyncio.fixture
async def voice():
    return FakeVoice()


@pytest_asyncio.fixture
async def gateway():
    return FakeGateway()


@pytest_asyncio.fixture
async def resources(engine, sessionmaker, redis, mailer, voice, gateway):
    return Resources(
        engine=engine,
        sessionmaker=sessionmaker,
        redis=redis,
        mailer=mailer,
        voice=voice,
        payments=gateway,
    )


@pytest_asyncio.fixture
async def client(resources):
    from tourism_api.main import create_app

    app = create_app(resources)
    # localhost keeps the session cookie non-secure so httpx sends it back
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://localhost") as c:
        yield c


# ---------- helpers ----------
async def verified_signup(client, redis, *, email="asha@example.com", name="Asha", password="s3cret-pass"):
    """Drive send-otp -> verify-otp -> signup through the API; returns the signup response."""
    from tourism_api.services.otp import get_otp

    r = await client.post("/auth/send-otp", json={"email": email})
    assert r.status_code == 200, r.text
    record = await get_otp(redis, email)
    r = await client.post("/auth/verify-otp", json={"email": email, "otp": record.code})
    assert r.status_code == 200, r.text
    return await client.post("/auth/signup", json={"name": name, "email": email, "password": password})


def booking_payload(booking_id="BK-1001", *, user_id="user-42", email="ravi@example.com", payment_id="pay_ABC123"):
    return {
        "booking_id": booking_id,
        "user_id": user_id,
        "destination": "Goa",
        "start_date": "2026-12-20",
        "end_date": "2026-12-27",
        "package_type": "premium",
        "duration": 7,
        "travelers": 2,
        "traveler_info": {"name": "Ravi Kumar", "email": email, "phone": "+919876543210"},
        "addons": {"flight": True, "hotel": True},
        "items": [
            {
                "category": "flight",
                "origin": "DEL",
                "destination": "GOI",
                "departure_at": "2026-12-20T06:10:00+05:30",
                "arrival_at": "2026-12-20T08:45:00+05:30",
                "airline": "IndiGo",
                "flight_number": "6E-211",
                "price": "8400.00",
            },
            {
                "category": "hotel",
                "hotel_name": "Sea Breeze Resort",
                "city": "Calangute",
                "check_in": "2026-12-20",
                "check_out": "2026-12-27",
                "rooms": 1,
                "meal_plan": "breakfast",
            },
        ],
        "payment": {
            "amount": "45999.50",
            "status": "paid",
            "razorpay_order_id": "order_XYZ",
            "razorpay_payment_id": payment_id,
            "razorpay_signature": "sig",
        },
    }
