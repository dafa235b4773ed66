import logging

from sqlalchemy import select

from noodlenook.extensions import db
from noodlenook.models.base import utc_now
from noodlenook.models.page import Page
from noodlenook.models.pending_page_edit import PendingPageEdit, APPROVED
from noodlenook.domain.exceptions import NotFoundError
from noodlenook.domain.invariants.page import assert_page
from noodlenook.domain.lifecycle.page import assert_edit_transition
from noodlenook.utils.audit import log_action
from noodlenook.utils.transaction import transactional
from noodlenook.utils.versioning import apply_page_fields, snapshot_page

logger = logging.getLogger(__name__)


def approve_pending_edit(
    *,
    actor,
    edit_id: str,
) -> PendingPageEdit:
    """
    Apply a pending edit to its page.

    Responsibilities:
    - snapshot the current page content (attributed to the editor)
    - copy the proposed fields onto the page
    - mark the edit approved with reviewer and timestamp
    All in one transaction.
    """
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

        assert_edit_transition(from_status=edit.status, to_status=APPROVED)

        page = (
            db.session.execute(
                select(Page)
                .where(Page.id == edit.page_id)
                .with_for_update()
            )
            .scalar_one()
        )

        snapshot_page(page, author_id=edit.editor_id)

        changed_fields = apply_page_fields(
            page,
            {
                "title": edit.title,
                "content": edit.content,
                "content_type": edit.content_type,
                "category": edit.category,
                "is_public": edit.is_public,
            },
        )
        page.updated_at = utc_now()
        assert_page(page)

        edit.status = APPROVED
        edit.reviewed_by = actor.id
        edit.reviewed_at = utc_now()

        log_action(
            action="pending_edit.approve",
            entity_type="pending_edit",
            entity_id=edit.id,
            payload={
                "page_id": page.id,
                "editor_id": edit.editor_id,
                "fields": changed_fields,
            },
        )

    logger.info("Pending edit %s approved by %s", edit_id, actor.id)
    return edit
