"""
Outbound notification channels: SMTP email and JSON webhooks.

Every send is bounded by NOTIFICATION_TIMEOUT and reports failure by
raising ExternalDependencyError; callers decide whether that fails the
request (settings test endpoints) or is only reported (invitations).
"""
import logging
import smtplib
import ssl
from dataclasses import dataclass
from datetime import datetime, timezone
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

import httpx
from flask import current_app

from noodlenook.domain.exceptions import ExternalDependencyError, ValidationError
from noodlenook.utils.network import resolve_public_url

logger = logging.getLogger(__name__)

APP_NAME = "NoodleNook"


@dataclass
class SmtpSettings:
    host: str
    port: int = 587
    secure: bool = False
    user: Optional[str] = None
    password: Optional[str] = None
    sender: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: dict) -> "SmtpSettings":
        host = data.get("host")
        if not host:
            raise ValidationError("SMTP host is required")
        try:
            port = int(data.get("port") or 587)
        except (TypeError, ValueError):
            raise ValidationError("SMTP port must be a number")
        secure = data.get("secure")
        return cls(
            host=host,
            port=port,
            secure=secure is True or secure == "true",
            user=data.get("user") or None,
            password=data.get("pass") or data.get("password") or None,
            sender=data.get("from") or data.get("sender") or None,
        )


@dataclass
class NotificationResult:
    sent: bool
    error: Optional[str] = None


def _timeout() -> float:
    return float(current_app.config.get("NOTIFICATION_TIMEOUT", 5))


# ---------------------------------
# SMTP
# ---------------------------------
def _open_smtp(settings: SmtpSettings) -> smtplib.SMTP:
    timeout = _timeout()
    if settings.secure:
        server = smtplib.SMTP_SSL(
            settings.host, settings.port, timeout=timeout, context=ssl.create_default_context()
        )
    else:
        server = smtplib.SMTP(settings.host, settings.port, timeout=timeout)

    try:
        server.ehlo()
        if not settings.secure and server.has_extn("starttls"):
            server.starttls(context=ssl.create_default_context())
        if settings.user and settings.password:
            server.login(settings.user, settings.password)
    except BaseException:
        server.close()
        raise
    return server


def verify_smtp(settings: SmtpSettings) -> None:
    try:
        with _open_smtp(settings) as server:
            server.noop()
    except (smtplib.SMTPException, OSError) as exc:
        logger.warning("SMTP test against %s:%s failed: %s", settings.host, settings.port, exc)
        raise ExternalDependencyError(f"SMTP connection failed: {exc}") from exc


def send_email(settings: SmtpSettings, *, to: str, subject: str, text: str, html: str) -> None:
    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = settings.sender or settings.user or f"no-reply@{settings.host}"
    msg["To"] = to
    msg.attach(MIMEText(text, "plain"))
    msg.attach(MIMEText(html, "html"))

    try:
        with _open_smtp(settings) as server:
            server.send_message(msg)
    except (smtplib.SMTPException, OSError) as exc:
        logger.warning("SMTP send to %s failed: %s", to, exc)
        raise ExternalDependencyError(f"Email delivery failed: {exc}") from exc

    logger.info("Email sent to %s: %s", to, subject)


# ---------------------------------
# Webhooks
# ---------------------------------
def validate_headers(headers) -> dict:
    """Header maps are stored as JSON; only str -> str pairs can be sent."""
    if not isinstance(headers, dict) or not all(
        isinstance(name, str) and name and isinstance(value, str)
        for name, value in headers.items()
    ):
        raise ValidationError("Webhook headers must map header names to string values")
    return headers


def _client() -> httpx.Client:
    return httpx.Client(timeout=_timeout(), follow_redirects=False)


def post_webhook(url: str, payload: dict, headers: Optional[dict] = None) -> int:
    """
    POST JSON without following redirects; any non-2xx is a failure.

    The request goes to the address vetted by resolve_public_url, with the
    original host carried in the Host header and TLS server name.
    """
    target = resolve_public_url(url)
    headers = {
        name: value
        for name, value in validate_headers(headers or {}).items()
        if name.lower() != "host"
    }
    headers["Host"] = target.host

    try:
        with _client() as client:
            response = client.post(
                target.url,
                json=payload,
                headers=headers,
                extensions={"sni_hostname": target.server_name},
            )
    except (httpx.HTTPError, TypeError, ValueError) as exc:
        logger.warning("Webhook POST to %s failed: %s", url, exc)
        raise ExternalDependencyError(f"Webhook request failed: {exc}") from exc

    if not response.is_success:
        logger.warning("Webhook POST to %s returned %s", url, response.status_code)
        raise ExternalDependencyError(f"Webhook returned HTTP {response.status_code}")

    return response.status_code


def ping_webhook(url: str, headers: Optional[dict] = None) -> int:
    payload = {
        "test": True,
        "message": f"This is a test webhook from {APP_NAME}",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    return post_webhook(url, payload, headers)


# ---------------------------------
# Invitations
# ---------------------------------
def send_invitation_email(settings: SmtpSettings, *, email: str, role: str, link: str, expires_at) -> None:
    subject = f"You're invited to {APP_NAME}"
    text = (
        f"You have been invited to join {APP_NAME} as {role}.\n\n"
        f"Create your account: {link}\n\n"
        f"This invitation expires on {expires_at:%Y-%m-%d %H:%M} UTC."
    )
    html = (
        f"<p>You have been invited to join <strong>{APP_NAME}</strong> as {role}.</p>"
        f'<p><a href="{link}">Create your account</a></p>'
        f"<p>This invitation expires on {expires_at:%Y-%m-%d %H:%M} UTC.</p>"
    )
    send_email(settings, to=email, subject=subject, text=text, html=html)


def send_invitation_webhook(url: str, headers: Optional[dict], *, email: str, role: str, link: str, expires_at) -> None:
    payload = {
        "event": "invitation.created",
        "email": email,
        "role": role,
        "invitation_link": link,
        "expires_at": expires_at.isoformat(),
    }
    post_webhook(url, payload, headers)
