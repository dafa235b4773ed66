from noodlenook.extensions import db
from noodlenook.models.page_revision import PageRevision
from noodlenook.domain.invariants.page import EDITABLE_FIELDS


def snapshot_page(page, *, author_id):
    """
    Stage a PageRevision holding the page's current title and content.

    Must be called before the page is overwritten and inside the same
    transaction as the overwrite.
    """
    revision = PageRevision()
    revision.page_id = page.id
    revision.title = page.title
    revision.content = page.content
    revision.author_id = author_id

    db.session.add(revision)
    return revision


def apply_page_fields(page, fields):
    """Overwrite the editable fields of `page` and return the names that changed."""
    changed = []
    for field in EDITABLE_FIELDS:
        if field in fields and getattr(page, field) != fields[field]:
            setattr(page, field, fields[field])
            changed.append(field)
    return changed
