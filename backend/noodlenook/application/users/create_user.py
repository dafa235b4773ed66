import logging

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError

from noodlenook.extensions import db
from noodlenook.models.user import User
from noodlenook.domain.exceptions import ConflictError
from noodlenook.domain.invariants.user import assert_credentials, assert_role, normalize_email
from noodlenook.domain.roles import VIEWER
from noodlenook.utils.audit import log_action
from noodlenook.utils.transaction import transactional

logger = logging.getLogger(__name__)


def build_user(*, username, email, password, role=VIEWER) -> User:
    """
    Validate and stage a new user in the current session.

    Does not commit; callers wrap it in their own transaction.
    """
    assert_credentials(username=username, password=password)
    email = normalize_email(email)
    assert_role(role)

    existing = User.query.filter(
        or_(func.lower(User.username) == username.lower(), func.lower(User.email) == email)
    ).first()
    if existing:
        raise ConflictError("Username or email already exists")

    user = User()
    user.username = username
    user.email = email
    user.role = role
    user.set_password(password)

    db.session.add(user)
    db.session.flush()

    log_action(
        action="user.create",
        entity_type="user",
        entity_id=user.id,
        payload={"username": username, "role": role},
    )
    return user


def create_user(*, actor, username, email, password, role=None) -> User:
    """Admin-side manual account creation."""
    try:
        with transactional():
            user = build_user(
                username=username,
                email=email,
                password=password,
                role=role or VIEWER,
            )
    except IntegrityError as exc:
        raise ConflictError("Username or email already exists") from exc

    logger.info("User %s created by %s with role %s", user.id, actor.id, user.role)
    return user
