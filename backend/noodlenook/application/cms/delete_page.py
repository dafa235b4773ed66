import logging

from noodlenook.extensions import db
from noodlenook.models.page import Page
from noodlenook.domain.exceptions import NotFoundError
from noodlenook.utils.audit import log_action
from noodlenook.utils.transaction import transactional

logger = logging.getLogger(__name__)


def delete_page(
    *,
    actor,
    slug: str,
) -> None:
    """
    Hard-delete a page.

    Revisions and pending edits go with it (ORM cascade plus
    ON DELETE CASCADE on their foreign keys).
    """
    page = Page.query.filter_by(slug=slug).first()

    if not page:
        raise NotFoundError("Page not found")

    page_id = page.id

    with transactional():
        db.session.delete(page)

        log_action(
            action="page.delete",
            entity_type="page",
            entity_id=page_id,
            payload={"slug": slug, "title": page.title},
        )

    logger.info("Page %s deleted by %s", slug, actor.id)
