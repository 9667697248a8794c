"""Email service using Resend API."""

from __future__ import annotations

import logging

from app.config import get_settings

logger = logging.getLogger(__name__)

_settings = get_settings()


def _send(to: str, subject: str, html: str) -> bool:
    """Send an email via Resend. Returns True on success."""
    if not _settings.email.resend_api_key:
        logger.warning("EMAIL_RESEND_API_KEY not set, email to %s not sent: %s", to, subject)
        return False

    import resend
    resend.api_key = _settings.email.resend_api_key

    try:
        resend.Emails.send({
            "from": _settings.email.sender,
            "to": [to],
            "subject": subject,
            "html": html,
        })
        return True
    except Exception:
        logger.exception("Failed to send email to %s", to)
        return False


def send_verification_code_email(email: str, code: str, valid_seconds: int) -> bool:
    """Send a verification code the member types back into the app."""
    minutes = max(valid_seconds // 60, 1)
    html = f"""
    <h2>Your verification code</h2>
    <p>Enter this code in Our Company Lunch to verify your email:</p>
    <p style="font-size:28px;font-weight:700;letter-spacing:6px;">{code}</p>
    <p>The code expires in {minutes} minute{'s' if minutes != 1 else ''}.</p>
    <p style="color:#888;font-size:12px;">If you didn't request this, you can ignore this email.</p>
    """
    return _send(email, "[Our Company Lunch] Verification code", html)
