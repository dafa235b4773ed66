from noodlenook.models.page_revision import PageRevision
from noodlenook.domain.visibility import get_visible_page


def list_revisions(*, user, slug: str):
    """Revision history of a page the caller can see, newest first."""
    page = get_visible_page(slug, user)

    return (
        PageRevision.query
        .filter_by(page_id=page.id)
        .order_by(PageRevision.created_at.desc(), PageRevision.id.desc())
        .all()
    )
