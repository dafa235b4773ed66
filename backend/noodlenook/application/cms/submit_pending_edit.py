import logging
from typing import Any, Dict

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from noodlenook.extensions import db
from noodlenook.models.base import utc_now
from noodlenook.models.pending_page_edit import PendingPageEdit, PENDING
from noodlenook.domain.exceptions import ConflictError
from noodlenook.utils.audit import log_action
from noodlenook.utils.transaction import transactional

logger = logging.getLogger(__name__)


def _upsert(*, actor, page, fields) -> PendingPageEdit:
    with transactional():
        edit = (
            db.session.execute(
                select(PendingPageEdit)
                .where(
                    PendingPageEdit.page_id == page.id,
                    PendingPageEdit.editor_id == actor.id,
                    PendingPageEdit.status == PENDING,
                )
                .with_for_update()
            )
            .scalar_one_or_none()
        )

        created = edit is None
        if created:
            edit = PendingPageEdit()
            edit.page_id = page.id
            edit.editor_id = actor.id
            edit.status = PENDING
            db.session.add(edit)

        edit.title = fields["title"]
        edit.content = fields["content"]
        edit.content_type = fields["content_type"]
        edit.category = fields["category"]
        edit.is_public = fields["is_public"]
        edit.created_at = utc_now()

        db.session.flush()

        log_action(
            action="pending_edit.submit" if created else "pending_edit.resubmit",
            entity_type="pending_edit",
            entity_id=edit.id,
            payload={"page_id": page.id, "slug": page.slug},
        )

    return edit


def submit_pending_edit(
    *,
    actor,
    page,
    fields: Dict[str, Any],
) -> PendingPageEdit:
    """
    Store an editor's proposed change to `page`.

    At most one pending edit exists per (page, editor): a resubmission
    replaces the open proposal's fields and refreshes its timestamp.
    """
    try:
        edit = _upsert(actor=actor, page=page, fields=fields)
    except IntegrityError:
        # A concurrent first submission won the partial unique index;
        # the retry finds that row and updates it.
        try:
            edit = _upsert(actor=actor, page=page, fields=fields)
        except IntegrityError as exc:
            raise ConflictError("Could not store pending edit, please retry") from exc

    logger.info("Pending edit %s stored for page %s by %s", edit.id, page.slug, actor.id)
    return edit
