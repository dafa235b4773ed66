import logging
import secrets
from dataclasses import dataclass, field
from datetime import timedelta

from flask import current_app
from sqlalchemy.exc import IntegrityError

from noodlenook.extensions import db
from noodlenook.models.base import utc_now
from noodlenook.models.invitation import Invitation
from noodlenook.models.user import User
from noodlenook.domain.exceptions import ConflictError, DomainError, ValidationError
from noodlenook.domain.invariants.user import assert_role, normalize_email
from noodlenook.services import notifications
from noodlenook.services.notifications import NotificationResult, SmtpSettings
from noodlenook.services.settings import settings_service
from noodlenook.utils.audit import log_action
from noodlenook.utils.transaction import transactional

logger = logging.getLogger(__name__)

METHODS = ("link", "smtp", "webhook")

# 32 random bytes, hex encoded
TOKEN_BYTES = 32


@dataclass
class InvitationResult:
    invitation: Invitation
    link: str
    method: str
    notification: NotificationResult = field(default_factory=lambda: NotificationResult(sent=False))


def _dispatch(method, *, invitation, link) -> NotificationResult:
    """Send the invitation over its side channel. Never raises."""
    if method == "link":
        return NotificationResult(sent=False)

    try:
        if method == "smtp":
            smtp = SmtpSettings.from_mapping(settings_service.smtp_config())
            notifications.send_invitation_email(
                smtp,
                email=invitation.email,
                role=invitation.role,
                link=link,
                expires_at=invitation.expires_at,
            )
        else:
            webhook = settings_service.webhook_config()
            if not webhook["url"]:
                raise ValidationError("Webhook URL is not configured")
            notifications.send_invitation_webhook(
                webhook["url"],
                webhook["headers"],
                email=invitation.email,
                role=invitation.role,
                link=link,
                expires_at=invitation.expires_at,
            )
    except DomainError as exc:
        logger.warning(
            "Invitation %s created but %s notification failed: %s",
            invitation.id, method, exc.message,
        )
        return NotificationResult(sent=False, error=exc.message)

    return NotificationResult(sent=True)


def create_invitation(
    *,
    actor,
    email,
    role,
    method: str = "link",
    base_url: str,
) -> InvitationResult:
    """
    Issue a single-use invitation binding `email` to `role`.

    The invitation is committed before any notification is attempted;
    a failing side channel is reported on the result and leaves the
    invitation in place so an admin can share the link manually.
    """
    email = normalize_email(email)
    assert_role(role)
    method = method or "link"
    if method not in METHODS:
        raise ValidationError(f"Invalid method, expected one of: {', '.join(METHODS)}")

    if User.query.filter(db.func.lower(User.email) == email).first():
        raise ConflictError("User with this email already exists")

    now = utc_now()
    ttl = timedelta(days=current_app.config.get("INVITATION_TTL_DAYS", 7))

    invitation = Invitation()
    invitation.email = email
    invitation.role = role
    invitation.token = secrets.token_hex(TOKEN_BYTES)
    invitation.invited_by = actor.id
    invitation.created_at = now
    invitation.expires_at = now + ttl
    invitation.used = False

    try:
        with transactional():
            existing = Invitation.query.filter_by(email=email, used=False).first()
            if existing is not None:
                if existing.expires_at > now:
                    raise ConflictError("An active invitation for this email already exists")
                # Expired and never used: replace it
                db.session.delete(existing)
                db.session.flush()

            db.session.add(invitation)
            db.session.flush()

            log_action(
                action="invitation.create",
                entity_type="invitation",
                entity_id=invitation.id,
                payload={"email": email, "role": role, "method": method},
            )
    except IntegrityError as exc:
        raise ConflictError("An active invitation for this email already exists") from exc

    logger.info("Invitation %s issued for role %s", invitation.id, role)

    link = f"{base_url.rstrip('/')}/register?token={invitation.token}"
    result = InvitationResult(invitation=invitation, link=link, method=method)
    result.notification = _dispatch(method, invitation=invitation, link=link)
    return result
