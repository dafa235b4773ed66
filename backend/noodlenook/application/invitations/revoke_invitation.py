from noodlenook.extensions import db
from noodlenook.models.invitation import Invitation
from noodlenook.domain.exceptions import NotFoundError
from noodlenook.utils.audit import log_action
from noodlenook.utils.transaction import transactional


def revoke_invitation(
    *,
    actor,
    invitation_id: str,
) -> None:
    invitation = db.session.get(Invitation, invitation_id)

    if not invitation:
        raise NotFoundError("Invitation not found")

    with transactional():
        db.session.delete(invitation)

        log_action(
            action="invitation.revoke",
            entity_type="invitation",
            entity_id=invitation_id,
            payload={"email": invitation.email, "used": invitation.used},
        )
