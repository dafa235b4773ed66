import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from sqlalchemy import select

from noodlenook.extensions import db
from noodlenook.models.base import utc_now
from noodlenook.models.page import Page
from noodlenook.models.pending_page_edit import PendingPageEdit
from noodlenook.domain.approval import requires_approval
from noodlenook.domain.exceptions import NotFoundError, ValidationError
from noodlenook.domain.invariants.page import assert_page
from noodlenook.domain.visibility import can_view
from noodlenook.services.settings import settings_service
from noodlenook.utils.audit import log_action
from noodlenook.utils.transaction import transactional
from noodlenook.utils.versioning import apply_page_fields, snapshot_page
from .fields import page_fields
from .submit_pending_edit import submit_pending_edit

logger = logging.getLogger(__name__)


@dataclass
class UpdateResult:
    page: Page
    pending_edit: Optional[PendingPageEdit] = None

    @property
    def requires_approval(self) -> bool:
        return self.pending_edit is not None


def update_page(
    *,
    actor,
    slug: str,
    data: Dict[str, Any],
) -> UpdateResult:
    """
    Update a page, directly or through the approval workflow.

    Direct path (admins, or editors with the workflow off): the current
    content is snapshotted into a PageRevision and the page is
    overwritten, both in one transaction.

    Gated path (editors with the workflow on): the page row is left
    untouched and the change is stored as the editor's pending edit.
    """
    if "slug" in data and data["slug"] != slug:
        raise ValidationError("Slug cannot be changed")

    page = Page.query.filter_by(slug=slug).first()

    if not page or not can_view(page, actor):
        raise NotFoundError("Page not found")

    fields = page_fields(data, current=page)

    gated = requires_approval(
        actor, gating_active=settings_service.approval_workflow_enabled()
    )

    if gated:
        edit = submit_pending_edit(actor=actor, page=page, fields=fields)
        return UpdateResult(page=page, pending_edit=edit)

    with transactional():
        # Re-read under a row lock so the snapshot matches what gets overwritten
        page = (
            db.session.execute(
                select(Page)
                .where(Page.id == page.id)
                .with_for_update()
                .execution_options(populate_existing=True)
            )
            .scalar_one_or_none()
        )

        if not page:
            raise NotFoundError("Page not found")

        revision = snapshot_page(page, author_id=actor.id)

        changed_fields = apply_page_fields(page, fields)
        page.updated_at = utc_now()

        assert_page(page)

        db.session.flush()

        log_action(
            action="page.update",
            entity_type="page",
            entity_id=page.id,
            payload={
                "fields": changed_fields,
                "revision_id": revision.id,
            },
        )

    logger.info("Page %s updated by %s", slug, actor.id)
    return UpdateResult(page=page)
