# noodlenook/application/cms/reject_page.py
import logging
from typing import Optional

from sqlalchemy import select

from noodlenook.extensions import db
from noodlenook.models.page import Page
from noodlenook.domain.exceptions import NotFoundError
from noodlenook.domain.lifecycle.page import REJECTED_PAGE, assert_page_transition, page_state
from noodlenook.utils.audit import log_action
from noodlenook.utils.transaction import transactional

logger = logging.getLogger(__name__)


def reject_page(
    *,
    actor,
    slug: str,
    reason: Optional[str] = None,
) -> None:
    """
    Reject an unpublished page by deleting it.

    The page row is gone afterwards; the reason, title and author are
    kept in the audit log entry.
    """
    with transactional():
        page = (
            db.session.execute(
                select(Page)
                .where(Page.slug == slug)
                .with_for_update()
            )
            .scalar_one_or_none()
        )

        if not page:
            raise NotFoundError("Page not found")

        assert_page_transition(from_state=page_state(page), to_state=REJECTED_PAGE)

        log_action(
            action="page.reject",
            entity_type="page",
            entity_id=page.id,
            payload={
                "slug": page.slug,
                "title": page.title,
                "author_id": page.author_id,
                "reason": reason or "",
            },
        )

        db.session.delete(page)

    logger.info("Page %s rejected by %s", slug, actor.id)
