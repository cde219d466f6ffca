import pytest

pytestmark = pytest.mark.asyncio


CONTACT = {
    "name": "Meera",
    "email": "meera@example.com",
    "phone": "+919800000000",
    "subject": "Group tour",
    "message": "Do you organise tours for 12 people?",
    "coordinates": [73.83, 15.49],
}


async def test_contact_is_stored_and_both_sides_mailed(client, mailer):
    r = await client.post("/contact", json=CONTACT, headers={"X-Forwarded-For": "203.0.113.9, 10.0.0.1"})

    assert r.status_code == 201, r.text
    data = r.json()["data"]
    assert data["emails_sent"] == {"admin": True, "client": True}
    assert data["contact"]["location"] == {"type": "Point", "coordinates": [73.83, 15.49]}
    assert data["contact"]["ip_address"] == "203.0.113.9"
    assert mailer.to("admin@example.com")[0]["subject"] == "New Contact: Group tour"
    assert mailer.to("meera@example.com")[0]["subject"] == "We Received Your Message!"


async def test_contact_saved_even_if_mail_fails(client, mailer):
    mailer.fail_for.update({"admin@example.com", "meera@example.com"})

    r = await client.post("/contact", json=CONTACT)

    assert r.status_code == 201
    assert r.json()["data"]["emails_sent"] == {"admin": False, "client": False}


async def test_contact_rejects_bad_coordinates(client):
    r = await client.post("/contact", json={**CONTACT, "coordinates": [200, 15.49]})
    assert r.status_code == 422


async def test_cancellation_requests(client):
    r = await client.post(
        "/cancellation-requests",
        json={"payment_id": "pay_ABC123", "destination": "Goa", "contact_number": "+919800000000"},
    )
    assert r.status_code == 201
    created = r.json()["data"]
    assert created["status"] == "pending"
    assert created["reason"] == "Not specified"

    await client.post(
        "/cancellation-requests",
        json={"payment_id": "pay_DEF", "destination": "Kerala", "contact_number": "98000", "reason": "illness"},
    )

    r = await client.get("/cancellation-requests")
    rows = r.json()["data"]
    assert [row["payment_id"] for row in rows] == ["pay_DEF", "pay_ABC123"]

    r = await client.get("/cancellation-requests", params={"limit": 1})
    assert len(r.json()["data"]) == 1


async def test_cancellation_request_accepts_camel_case_body(client):
    r = await client.post(
        "/cancellation-requests",
        json={"paymentId": "pay_CAMEL", "destination": "Ooty", "contactNumber": "+919811111111", "reason": "weather"},
    )
    assert r.status_code == 201, r.text
    created = r.json()["data"]
    assert created["payment_id"] == "pay_CAMEL"
    assert created["contact_number"] == "+919811111111"


async def test_cancellation_request_requires_fields(client):
    r = await client.post("/cancellation-requests", json={"payment_id": "pay_1"})
    assert r.status_code == 422
