from noodlenook.extensions import db
from .base import BaseModel


class PageRevision(BaseModel):
    """Pre-change snapshot of a page, taken right before its content is overwritten."""

    __tablename__ = "page_revisions"

    page_id = db.Column(
        db.String(36),
        db.ForeignKey("pages.id", ondelete="CASCADE"),
        nullable=False
    )

    title = db.Column(db.String(255), nullable=True)
    content = db.Column(db.Text, nullable=False)

    author_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=True)

    page = db.relationship("Page", back_populates="revisions")
    author = db.relationship("User")

    __table_args__ = (
        db.Index("idx_page_revision_page", "page_id", "created_at"),
    )
