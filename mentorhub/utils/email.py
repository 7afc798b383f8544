from __future__ import annotations

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from mentorhub.config import settings

logger = logging.getLogger(__name__)


def is_email_enabled() -> bool:
    """Return True when SMTP delivery is configured and enabled."""
    if not settings.EMAIL_NOTIFICATIONS_ENABLED:
        return False
    if not settings.SMTP_SERVER:
        return False
    if not settings.EMAIL_FROM:
        return False
    return True


def send_email(
    *,
    to_email: str,
    subject: str,
    body_text: str,
    body_html: Optional[str] = None,
) -> bool:
    """
    Send an email using SMTP settings.

    Returns True on success. Failures are logged and False is returned.
    """
    if not is_email_enabled():
        return False

    smtp_server = settings.SMTP_SERVER
    from_email = settings.EMAIL_FROM

    msg = MIMEMultipart("alternative")
    msg["From"] = from_email
    msg["To"] = to_email
    msg["Subject"] = subject
    msg.attach(MIMEText(body_text, "plain", "utf-8"))
    if body_html:
        msg.attach(MIMEText(body_html, "html", "utf-8"))

    username = settings.SMTP_USERNAME or from_email
    password = settings.EMAIL_PASSWORD or ""

    try:
        if settings.SMTP_USE_SSL:
            server = smtplib.SMTP_SSL(
                smtp_server,
                settings.SMTP_PORT,
                timeout=settings.SMTP_TIMEOUT_SECONDS,
            )
        else:
            server = smtplib.SMTP(
                smtp_server,
                settings.SMTP_PORT,
                timeout=settings.SMTP_TIMEOUT_SECONDS,
            )

        with server:
            if settings.SMTP_USE_TLS and not settings.SMTP_USE_SSL:
                server.starttls()
            if password:
                server.login(username, password)
            server.sendmail(from_email, [to_email], msg.as_string())
        return True
    except (smtplib.SMTPException, OSError) as exc:
        logger.warning("Email send failed for '%s': %s", to_email, exc)
        return False


def send_otp_email(to_email: str, code: str) -> bool:
    """Deliver a verification code. Returns False when mail is off or fails."""
    minutes = settings.OTP_EXPIRE_MINUTES
    body_text = (
        f"Your verification code is {code}.\n\n"
        f"This code will expire in {minutes} minutes.\n"
        "If you didn't request this, please ignore this email."
    )
    body_html = (
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
        "<h2>Email Verification</h2>"
        "<p>Your verification code is:</p>"
        f'<h1 style="color: #4F46E5; letter-spacing: 5px;">{code}</h1>'
        f"<p>This code will expire in {minutes} minutes.</p>"
        "<p>If you didn't request this, please ignore this email.</p>"
        "</div>"
    )
    return send_email(
        to_email=to_email,
        subject="Your Verification Code",
        body_text=body_text,
        body_html=body_html,
    )
