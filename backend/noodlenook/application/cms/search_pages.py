from sqlalchemy import and_, func, literal

from noodlenook.extensions import db
from noodlenook.models.page import Page
from noodlenook.domain.exceptions import ValidationError
from noodlenook.domain.visibility import visibility_clause

MAX_RESULTS = 50
MAX_QUERY_LENGTH = 200


def search_pages(*, user, q):
    """
    Full-text search over published pages the caller may see.

    PostgreSQL ranks with ts_rank over the same expression the GIN index
    is built on; other databases fall back to a case-insensitive LIKE.
    """
    if not isinstance(q, str) or not q.strip():
        raise ValidationError("Search query required")
    q = q.strip()[:MAX_QUERY_LENGTH]

    scope = and_(Page.is_published.is_(True), visibility_clause(user))

    if db.engine.dialect.name == "postgresql":
        document = func.to_tsvector("english", Page.title + literal(" ") + Page.content)
        query = func.plainto_tsquery("english", q)
        rank = func.ts_rank(document, query)
        return (
            Page.query
            .filter(scope, document.op("@@")(query))
            .order_by(rank.desc())
            .limit(MAX_RESULTS)
            .all()
        )

    escaped = q.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    pattern = f"%{escaped}%"
    return (
        Page.query
        .filter(scope, Page.title.ilike(pattern, escape="\\") | Page.content.ilike(pattern, escape="\\"))
        .order_by(Page.title.asc())
        .limit(MAX_RESULTS)
        .all()
    )
