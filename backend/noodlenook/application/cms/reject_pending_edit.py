import logging
from typing import Optional

from sqlalchemy import select

from noodlenook.extensions import db
from noodlenook.models.base import utc_now
from noodlenook.models.pending_page_edit import PendingPageEdit, REJECTED
from noodlenook.domain.exceptions import NotFoundError
from noodlenook.domain.lifecycle.page import assert_edit_transition
from noodlenook.utils.audit import log_action
from noodlenook.utils.transaction import transactional

logger = logging.getLogger(__name__)


def reject_pending_edit(
    *,
    actor,
    edit_id: str,
    reason: Optional[str] = None,
) -> PendingPageEdit:
    """Mark a pending edit rejected. The page is not touched."""
    with transactional():
        edit = (
            db.session.execute(
                select(PendingPageEdit)
                .where(PendingPageEdit.id == edit_id)
                .with_for_update()
            )
            .scalar_one_or_none()
        )

        if not edit:
            raise NotFoundError("Pending edit not found")

        assert_edit_transition(from_status=edit.status, to_status=REJECTED)

        edit.status = REJECTED
        edit.reviewed_by = actor.id
        edit.reviewed_at = utc_now()
        edit.rejection_reason = reason or ""

        log_action(
            action="pending_edit.reject",
            entity_type="pending_edit",
            entity_id=edit.id,
            payload={
                "page_id": edit.page_id,
                "editor_id": edit.editor_id,
                "reason": reason or "",
            },
        )

    logger.info("Pending edit %s rejected by %s", edit_id, actor.id)
    return edit
