"""Subjects and HTML bodies for outgoing mail."""
from __future__ import annotations

from html import escape
from typing import Tuple

from ..models import Booking, Contact


def otp_email(code: str, ttl_minutes: int) -> Tuple[str, str]:
    return (
        "Your OTP Code",
        f"<h2>Verify your email</h2><p>Your OTP is <b>{code}</b></p>"
        f"<p>It will expire in {ttl_minutes} minutes.</p>",
    )


def password_reset_email(name: str, reset_link: str, ttl_minutes: int) -> Tuple[str, str]:
    link = escape(reset_link, quote=True)
    return (
        "Password Reset Request",
        f"<p>Hello {escape(name)},</p>"
        "<p>You requested to reset your password.</p>"
        f"<p>Click the link below to reset it. This link expires in {ttl_minutes} minutes:</p>"
        f'<a href="{link}" target="_blank">{link}</a>'
        "<p>If you did not request this, please ignore this email.</p>",
    )


def _rows(pairs) -> str:
    return "".join(
        f'<tr><td style="padding: 8px; border: 1px solid #ddd; width: 30%;"><strong>{escape(k)}:</strong></td>'
        f'<td style="padding: 8px; border: 1px solid #ddd;">{escape(str(v))}</td></tr>'
        for k, v in pairs
    )


def contact_admin_email(c: Contact) -> Tuple[str, str]:
    table = _rows([
        ("Name", c.name),
        ("Email", c.email),
        ("Phone", c.phone or "Not provided"),
        ("Subject", c.subject),
        ("Message", c.message),
        ("Location", f"{c.longitude}, {c.latitude}"),
        ("IP Address", c.ip_address or "unknown"),
    ])
    return (
        f"New Contact: {c.subject}",
        '<div style="font-family: Arial, sans-serif;"><h2>New Contact Submission</h2>'
        f'<table style="width: 100%; border-collapse: collapse;">{table}</table></div>',
    )


def contact_client_email(c: Contact) -> Tuple[str, str]:
    return (
        "We Received Your Message!",
        f'<div style="font-family: Arial, sans-serif;"><h1>Thank You, {escape(c.name)}!</h1>'
        "<p>We've received your message and will respond within 24 hours.</p>"
        f"<p><strong>Your Message:</strong></p><p>{escape(c.message)}</p>"
        "<p>Best regards,<br>The Tourism Team</p>"
        "<p><small>This is an automated message. Please do not reply directly to this email.</small></p></div>",
    )


def booking_admin_email(b: Booking) -> Tuple[str, str]:
    traveler = b.traveler_info or {}
    table = _rows([
        ("Booking ID", b.booking_id),
        ("Traveler", traveler.get("name", "")),
        ("Email", traveler.get("email", "")),
        ("Phone", traveler.get("phone") or "Not provided"),
        ("Amount Paid", f"₹{b.payment_amount}"),
        ("Payment ID", b.razorpay_payment_id or "n/a"),
        ("Items", ", ".join(i.get("category", "?") for i in (b.items or [])) or "none"),
    ])
    return (
        f"New Booking: {b.booking_id}",
        '<div style="font-family: Arial, sans-serif;"><h2>New Booking Received</h2>'
        f'<table style="width: 100%; border-collapse: collapse;">{table}</table>'
        "<p>Please check the admin dashboard for complete booking details.</p></div>",
    )


def booking_user_email(b: Booking) -> Tuple[str, str]:
    traveler = b.traveler_info or {}
    return (
        f"Your Booking Confirmation - {b.booking_id}",
        '<div style="font-family: Arial, sans-serif;"><h1>Booking Confirmed!</h1>'
        f"<p>Dear {escape(traveler.get('name', 'traveler'))},</p>"
        "<p>Thank you for booking with us. Here are your booking details:</p>"
        f"<p><strong>Booking ID:</strong> {escape(b.booking_id)}</p>"
        f"<p><strong>Amount Paid:</strong> ₹{b.payment_amount}</p>"
        f"<p><strong>Payment Status:</strong> {escape(b.payment_status)}</p>"
        "<p>Best regards,<br>The Tourism Team</p></div>",
    )
