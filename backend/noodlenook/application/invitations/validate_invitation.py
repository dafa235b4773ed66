from datetime import datetime
from typing import Dict, Optional

from noodlenook.models.base import utc_now
from noodlenook.models.invitation import Invitation
from noodlenook.domain.exceptions import NotFoundError


def validate_invitation(
    *,
    token: str,
    now: Optional[datetime] = None,
) -> Dict[str, str]:
    """
    Look up an unused, unexpired invitation. Does not consume it.

    Safe to call any number of times; consumption happens in
    `redeem_invitation` at registration.
    """
    now = now or utc_now()

    invitation = Invitation.query.filter(
        Invitation.token == token,
        Invitation.used.is_(False),
        Invitation.expires_at > now,
    ).first()

    if not invitation:
        raise NotFoundError("Invalid or expired invitation")

    return {"email": invitation.email, "role": invitation.role}
