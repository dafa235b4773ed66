from noodlenook.extensions import db
from noodlenook.models.pending_page_edit import PendingPageEdit, PENDING
from noodlenook.domain.exceptions import AuthorizationError, NotFoundError
from noodlenook.domain.roles import is_admin


def list_pending_edits(*, actor):
    """Admins see every open proposal, editors only their own."""
    query = PendingPageEdit.query.filter(PendingPageEdit.status == PENDING)

    if not is_admin(actor):
        query = query.filter(PendingPageEdit.editor_id == actor.id)

    return query.order_by(PendingPageEdit.created_at.desc()).all()


def get_pending_edit(*, actor, edit_id: str) -> PendingPageEdit:
    edit = db.session.get(PendingPageEdit, edit_id)

    if not edit:
        raise NotFoundError("Pending edit not found")

    if not is_admin(actor) and edit.editor_id != actor.id:
        raise AuthorizationError("Insufficient permissions")

    return edit
