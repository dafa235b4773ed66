from datetime import datetime
from typing import Optional

from sqlalchemy import select, update

from noodlenook.extensions import db
from noodlenook.models.base import utc_now
from noodlenook.models.invitation import Invitation
from noodlenook.domain.exceptions import NotFoundError


def redeem_invitation(
    *,
    token: str,
    now: Optional[datetime] = None,
) -> Invitation:
    """
    Consume an invitation with a single conditional UPDATE.

    Must run inside the caller's transaction (the one that creates the
    user). Of several concurrent redemptions only one sees rowcount == 1;
    the rest fail and roll back.
    """
    now = now or utc_now()

    result = db.session.execute(
        update(Invitation)
        .where(
            Invitation.token == token,
            Invitation.used.is_(False),
            Invitation.expires_at > now,
        )
        .values(used=True, updated_at=now)
        .execution_options(synchronize_session=False)
    )

    if result.rowcount != 1:
        raise NotFoundError("Invalid or expired invitation")

    return (
        db.session.execute(
            select(Invitation)
            .where(Invitation.token == token)
            .execution_options(populate_existing=True)
        )
        .scalar_one()
    )
