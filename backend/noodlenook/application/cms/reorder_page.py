from sqlalchemy import select

from noodlenook.extensions import db
from noodlenook.models.page import Page
from noodlenook.domain.exceptions import NotFoundError
from noodlenook.domain.invariants.page import assert_display_order
from noodlenook.utils.audit import log_action
from noodlenook.utils.transaction import transactional


def reorder_page(
    *,
    actor,
    slug: str,
    display_order,
) -> Page:
    """Set a page's position for the `custom` sort order. No revision is taken."""
    assert_display_order(display_order)

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

        previous = page.display_order
        page.display_order = display_order

        log_action(
            action="page.reorder",
            entity_type="page",
            entity_id=page.id,
            payload={"from": previous, "to": display_order},
        )

    return page
