from noodlenook.extensions import db
from noodlenook.models.pending_page_edit import PendingPageEdit, PENDING
from noodlenook.domain.exceptions import AuthorizationError, ConflictError, NotFoundError
from noodlenook.domain.roles import is_admin
from noodlenook.utils.audit import log_action
from noodlenook.utils.transaction import transactional


def delete_pending_edit(
    *,
    actor,
    edit_id: str,
) -> None:
    """Editors withdraw their own proposals; admins may delete any open one."""
    edit = db.session.get(PendingPageEdit, edit_id)

    if not edit:
        raise NotFoundError("Pending edit not found")

    if not is_admin(actor) and edit.editor_id != actor.id:
        raise AuthorizationError("Insufficient permissions")

    if edit.status != PENDING:
        raise ConflictError("Reviewed edits are kept as history")

    with transactional():
        db.session.delete(edit)

        log_action(
            action="pending_edit.delete",
            entity_type="pending_edit",
            entity_id=edit_id,
            payload={"page_id": edit.page_id},
        )
