from noodlenook.extensions import db
from sqlalchemy import DDL, event
from .base import BaseModel


class Page(BaseModel):
    __tablename__ = "pages"

    title = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(255), nullable=False, unique=True, index=True)
    content = db.Column(db.Text, nullable=False)
    content_type = db.Column(db.String(20), nullable=False, default="markdown")
    category = db.Column(db.String(100), nullable=True)
    display_order = db.Column(db.Integer, nullable=False, default=0)

    author_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=True, index=True)
    is_published = db.Column(db.Boolean, nullable=False, default=True, index=True)
    is_public = db.Column(db.Boolean, nullable=False, default=False)

    author = db.relationship("User", lazy="joined")

    # Owned history, removed together with the page
    revisions = db.relationship(
        "PageRevision",
        back_populates="page",
        order_by="PageRevision.created_at.desc()",
        cascade="all, delete-orphan",
    )
    pending_edits = db.relationship(
        "PendingPageEdit",
        back_populates="page",
        cascade="all, delete-orphan",
    )

    @property
    def author_name(self):
        return self.author.username if self.author else None


# Full-text index backing /search; PostgreSQL only
event.listen(
    Page.__table__,
    "after_create",
    DDL(
        "CREATE INDEX IF NOT EXISTS pages_search_idx ON pages "
        "USING gin(to_tsvector('english', title || ' ' || content))"
    ).execute_if(dialect="postgresql"),
)
