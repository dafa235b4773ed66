"""
Role-scoped page visibility.

Every read path that returns pages goes through this module, so the
rules live in one place:

- anonymous: published and public
- viewer:    published
- editor:    published, or authored by the requester
- admin:     everything
"""
from sqlalchemy import and_, or_, true

from noodlenook.domain.exceptions import NotFoundError, ValidationError
from noodlenook.domain.roles import ADMIN, EDITOR
from noodlenook.models.page import Page
from noodlenook.models.user import User

SORT_ORDERS = ("alphabetical", "category", "recent", "creator", "custom")


def visibility_clause(user):
    """SQL filter selecting the pages `user` may retrieve (None = anonymous)."""
    if user is None:
        return and_(Page.is_published.is_(True), Page.is_public.is_(True))

    if user.role == ADMIN:
        return true()

    if user.role == EDITOR:
        return or_(Page.is_published.is_(True), Page.author_id == user.id)

    return Page.is_published.is_(True)


def can_view(page, user) -> bool:
    if user is None:
        return bool(page.is_published and page.is_public)

    if user.role == ADMIN:
        return True

    if user.role == EDITOR:
        return bool(page.is_published or page.author_id == user.id)

    return bool(page.is_published)


def apply_sort(query, sort):
    if sort not in SORT_ORDERS:
        raise ValidationError(f"Unknown sort order: {sort}")

    if sort == "alphabetical":
        return query.order_by(Page.title.asc(), Page.id.asc())

    if sort == "category":
        return query.order_by(
            Page.category.is_(None),
            Page.category.asc(),
            Page.title.asc(),
        )

    if sort == "recent":
        return query.order_by(Page.created_at.desc(), Page.id.desc())

    if sort == "creator":
        return (
            query.outerjoin(User, Page.author_id == User.id)
            .order_by(User.username.is_(None), User.username.asc(), Page.title.asc())
        )

    return query.order_by(Page.display_order.asc(), Page.title.asc())


def list_visible_pages(user, *, sort="alphabetical"):
    query = Page.query.filter(visibility_clause(user))
    return apply_sort(query, sort).all()


def get_visible_page(slug, user):
    page = Page.query.filter(Page.slug == slug, visibility_clause(user)).first()

    if not page:
        raise NotFoundError("Page not found")

    return page
