import logging
from typing import Any, Dict, Tuple

from sqlalchemy.exc import IntegrityError

from noodlenook.extensions import db
from noodlenook.models.page import Page
from noodlenook.domain.approval import requires_approval
from noodlenook.domain.exceptions import ConflictError
from noodlenook.domain.invariants.page import assert_page, assert_slug
from noodlenook.services.settings import settings_service
from noodlenook.utils.audit import log_action
from noodlenook.utils.transaction import transactional
from .fields import page_fields

logger = logging.getLogger(__name__)


def create_page(
    *,
    actor,
    data: Dict[str, Any],
) -> Tuple[Page, bool]:
    """
    Create a new page.

    Admins, and editors while the approval workflow is off, publish
    directly. Editors under the approval workflow create an unpublished
    page that waits for an admin to publish or reject it.

    Returns the page and whether it awaits approval.
    """
    slug = data.get("slug")
    assert_slug(slug)
    fields = page_fields(data)

    if Page.query.filter_by(slug=slug).first():
        raise ConflictError("Slug already exists")

    gated = requires_approval(
        actor, gating_active=settings_service.approval_workflow_enabled()
    )

    page = Page()
    page.slug = slug
    page.title = fields["title"]
    page.content = fields["content"]
    page.content_type = fields["content_type"]
    page.category = fields["category"]
    page.is_public = fields["is_public"]
    page.display_order = 0
    page.author_id = actor.id
    page.is_published = not gated

    try:
        with transactional():
            db.session.add(page)
            db.session.flush()  # ensures page.id is available

            assert_page(page)

            log_action(
                action="page.create",
                entity_type="page",
                entity_id=page.id,
                payload={
                    "slug": page.slug,
                    "is_published": page.is_published,
                    "requires_approval": gated,
                },
            )
    except IntegrityError as exc:
        # Lost a race with a concurrent create of the same slug
        raise ConflictError("Slug already exists") from exc

    logger.info("Page %s created by %s (published=%s)", page.slug, actor.id, page.is_published)
    return page, gated
