import pytest

pytestmark = pytest.mark.asyncio


async def test_call_user_places_call_with_callback(client, voice):
    r = await client.post("/call-user", json={"phone_number": "+919876543210", "place_name": "Dudhsagar Falls"})

    assert r.status_code == 200, r.text
    assert r.json()["data"]["call_sid"].startswith("CA")
    (call,) = voice.calls
    assert call["to"] == "+919876543210"
    assert call["callback_url"] == "http://localhost/twiml/Dudhsagar%20Falls"


async def test_callback_url_serves_place_with_slash(client, voice):
    r = await client.post("/call-user", json={"phone_number": "+919876543210", "place_name": "Daman/Diu"})
    assert r.status_code == 200, r.text

    callback = voice.calls[0]["callback_url"]
    assert callback == "http://localhost/twiml/Daman%2FDiu"
    script = await client.get(callback)
    assert script.status_code == 200
    assert "Daman/Diu" in script.text


async def test_call_user_accepts_camel_case_body(client, voice):
    r = await client.post("/call-user", json={"phoneNumber": "+919876543210", "placeName": "Hampi"})
    assert r.status_code == 200, r.text
    assert voice.calls[0]["callback_url"].endswith("/twiml/Hampi")


async def test_call_failure_is_502(client, voice):
    voice.fail = True
    r = await client.post("/call-user", json={"phone_number": "+919876543210", "place_name": "Goa"})
    assert r.status_code == 502
    assert r.json() == {"success": False, "message": "Call failed"}


async def test_call_user_rejects_bad_number(client, voice):
    r = await client.post("/call-user", json={"phone_number": "not-a-number", "place_name": "Goa"})
    assert r.status_code == 422
    assert voice.calls == []


async def test_twiml_callback(client):
    for method in ("GET", "POST"):
        r = await client.request(method, "/twiml/Goa%20%26%20Kerala")
        assert r.status_code == 200
        assert r.headers["content-type"].startswith("text/xml")
        assert "Goa &amp; Kerala" in r.text


async def test_health_and_metrics(client):
    r = await client.get("/health")
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["data"]["status"] == "ok"
    assert body["data"]["dependencies"]["postgres"] is True
    assert body["data"]["dependencies"]["redis"] is True

    live = (await client.get("/health/liveness")).json()
    assert live["success"] is True
    assert live["data"] == {"alive": True}
    ready = (await client.get("/health/readiness")).json()
    assert ready["data"]["ready"] is True

    r = await client.get("/metrics")
    assert r.status_code == 200
    assert "http_requests_total" in r.text
