import smtplib

import pytest

from tourism_api.config import get_settings
from tourism_api.errors import DeliveryError, GatewayError
from tourism_api.services.emails import contact_admin_email
from tourism_api.services.mailer import SMTPMailer
from tourism_api.services.notify import fan_out
from tourism_api.services.payments import RazorpayGateway
from tourism_api.services.voice import TwilioVoiceService, place_script
from tourism_api.models import Contact

pytestmark = pytest.mark.asyncio


def _settings(**overrides):
    return get_settings().model_copy(update=overrides)


async def test_mailer_without_credentials_only_logs(caplog):
    mailer = SMTPMailer(_settings(MAIL_USERNAME=None, MAIL_PASSWORD=None))
    assert mailer.enabled is False

    with caplog.at_level("INFO", logger="tourism_api.services.mailer"):
        await mailer.send_email(to="a@example.com", subject="Hi", html="<p>hi</p>")
    assert "[DEV] email to a@example.com" in caplog.text


async def test_mailer_requires_recipient():
    mailer = SMTPMailer(_settings(MAIL_USERNAME=None, MAIL_PASSWORD=None))
    with pytest.raises(DeliveryError):
        await mailer.send_email(to=None, subject="Hi", html="<p>hi</p>")


async def test_mailer_wraps_smtp_errors(monkeypatch):
    mailer = SMTPMailer(_settings(MAIL_USERNAME="bot@example.com", MAIL_PASSWORD="app-password"))

    def _boom(msg):
        raise smtplib.SMTPAuthenticationError(535, b"bad credentials")

    monkeypatch.setattr(mailer, "_deliver", _boom)
    with pytest.raises(DeliveryError):
        await mailer.send_email(to="a@example.com", subject="Hi", html="<p>hi</p>")


class _RejectingSMTP:
    instances = []

    def __init__(self, host, port, timeout=None):
        self.closed = False
        _RejectingSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.closed = True

    def ehlo(self):
        pass

    def starttls(self):
        pass

    def login(self, username, password):
        raise smtplib.SMTPAuthenticationError(535, b"bad credentials")

    def send_message(self, msg):
        raise AssertionError("must not send after a failed login")


async def test_failed_login_closes_smtp_connection(monkeypatch):
    import tourism_api.services.mailer as mailer_module

    _RejectingSMTP.instances = []
    monkeypatch.setattr(mailer_module.smtplib, "SMTP", _RejectingSMTP)
    mailer = SMTPMailer(_settings(MAIL_USERNAME="bot@example.com", MAIL_PASSWORD="wrong"))

    with pytest.raises(DeliveryError):
        await mailer.send_email(to="a@example.com", subject="Hi", html="<p>hi</p>")
    assert await mailer.verify() is False

    assert len(_RejectingSMTP.instances) == 2
    assert all(conn.closed for conn in _RejectingSMTP.instances)


async def test_voice_without_credentials_refuses_to_call():
    voice = TwilioVoiceService(_settings(TWILIO_ACCOUNT_SID=None, TWILIO_AUTH_TOKEN=None, TWILIO_FROM_NUMBER=None))
    assert voice.enabled is False
    with pytest.raises(DeliveryError):
        await voice.place_call(to="+15550100", callback_url="http://localhost/twiml/Goa")


async def test_gateway_without_keys_refuses_to_refund():
    gateway = RazorpayGateway(_settings(RAZORPAY_KEY_ID=None, RAZORPAY_KEY_SECRET=None))
    assert gateway.enabled is False
    with pytest.raises(GatewayError):
        await gateway.refund(payment_id="pay_1", amount_minor=100, reason="test")


async def test_place_script_escapes_place_name():
    xml = place_script("Goa & <Kerala>")
    assert xml.startswith("<?xml")
    assert "<Say voice=\"alice\">" in xml
    assert "Goa &amp; &lt;Kerala&gt;" in xml


async def test_fan_out_reports_each_channel():
    async def ok():
        return None

    async def down():
        raise DeliveryError("smtp down")

    assert await fan_out({"admin": ok(), "user": down()}) == {"admin": True, "user": False}


async def test_fan_out_does_not_swallow_bugs():
    async def ok():
        return None

    async def bug():
        raise KeyError("traveler_info")

    with pytest.raises(KeyError):
        await fan_out({"admin": ok(), "user": bug()})


async def test_admin_contact_email_escapes_user_input():
    c = Contact(
        name="<script>x</script>", email="a@example.com", phone=None, subject="Hi",
        message="a & b", longitude=73.8, latitude=15.5, ip_address="10.0.0.1",
    )
    subject, html = contact_admin_email(c)
    assert subject == "New Contact: Hi"
    assert "<script>" not in html
    assert "a &amp; b" in html
    assert "Not provided" in html
