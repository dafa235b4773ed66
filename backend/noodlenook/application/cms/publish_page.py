# noodlenook/application/cms/publish_page.py
import logging

from sqlalchemy import select

from noodlenook.extensions import db
from noodlenook.models.page import Page
from noodlenook.domain.exceptions import NotFoundError
from noodlenook.domain.lifecycle.page import PUBLISHED, assert_page_transition, page_state
from noodlenook.utils.audit import log_action
from noodlenook.utils.transaction import transactional

logger = logging.getLogger(__name__)


def publish_page(
    *,
    actor,
    slug: str,
) -> Page:
    """
    Publish a page that was created under the approval workflow.

    Responsibilities:
    - transactional boundary
    - lifecycle transition enforcement
    - audit logging
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

        assert_page_transition(from_state=page_state(page), to_state=PUBLISHED)

        page.is_published = True

        log_action(
            action="page.publish",
            entity_type="page",
            entity_id=page.id,
            payload={"slug": page.slug, "author_id": page.author_id},
        )

    logger.info("Page %s published by %s", slug, actor.id)
    return page
