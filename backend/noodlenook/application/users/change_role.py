import logging

from sqlalchemy import select

from noodlenook.extensions import db
from noodlenook.models.base import utc_now
from noodlenook.models.user import User
from noodlenook.domain.exceptions import AuthorizationError, NotFoundError
from noodlenook.domain.invariants.user import assert_role
from noodlenook.domain.roles import ADMIN
from noodlenook.utils.audit import log_action
from noodlenook.utils.transaction import transactional

logger = logging.getLogger(__name__)


def change_role(
    *,
    actor,
    user_id: str,
    role: str,
) -> User:
    """
    Change a user's role.

    - nobody changes their own role
    - the last admin cannot be demoted; admin rows are locked while
      counting so two concurrent demotions cannot both pass
    """
    assert_role(role)

    if user_id == actor.id:
        raise AuthorizationError("Cannot change your own role")

    with transactional():
        admins = (
            db.session.execute(
                select(User)
                .where(User.role == ADMIN)
                .with_for_update()
            )
            .scalars()
            .all()
        )

        target = (
            db.session.execute(
                select(User)
                .where(User.id == user_id)
                .with_for_update()
            )
            .scalar_one_or_none()
        )

        if not target:
            raise NotFoundError("User not found")

        if target.role == ADMIN and role != ADMIN and len(admins) <= 1:
            raise AuthorizationError("Cannot change role of the last admin")

        previous = target.role
        target.role = role
        target.updated_at = utc_now()

        log_action(
            action="user.role_change",
            entity_type="user",
            entity_id=target.id,
            payload={"from": previous, "to": role},
        )

    logger.info("User %s role changed %s -> %s by %s", user_id, previous, role, actor.id)
    return target
