import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError

from noodlenook.models.user import User
from noodlenook.domain.exceptions import ConflictError, ValidationError
from noodlenook.domain.invariants.user import normalize_email
from noodlenook.domain.roles import ADMIN
from noodlenook.application.invitations.redeem_invitation import redeem_invitation
from noodlenook.utils.transaction import transactional
from .create_user import build_user

logger = logging.getLogger(__name__)


def register_user(
    *,
    username,
    email,
    password,
    token: Optional[str] = None,
) -> User:
    """
    Self-registration.

    Requires an invitation token, which is consumed in the same
    transaction that creates the account; the role comes from the
    invitation. The very first account on an empty system needs no
    token and becomes the admin.
    """
    try:
        with transactional():
            if token:
                invitation = redeem_invitation(token=token)
                if email and normalize_email(email) != invitation.email:
                    raise ValidationError("Email does not match the invitation")
                user = build_user(
                    username=username,
                    email=invitation.email,
                    password=password,
                    role=invitation.role,
                )
            elif User.query.first() is None:
                user = build_user(
                    username=username,
                    email=email,
                    password=password,
                    role=ADMIN,
                )
            else:
                raise ValidationError("An invitation is required to register")
    except IntegrityError as exc:
        raise ConflictError("Username or email already exists") from exc

    logger.info("User %s registered with role %s", user.id, user.role)
    return user
