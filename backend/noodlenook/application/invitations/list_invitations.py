from noodlenook.models.invitation import Invitation


def list_invitations():
    return Invitation.query.order_by(Invitation.created_at.desc()).all()
