from noodlenook.extensions import db
from .base import BaseModel

PENDING = "pending"
APPROVED = "approved"
REJECTED = "rejected"


class PendingPageEdit(BaseModel):
    __tablename__ = "pending_page_edits"

    page_id = db.Column(
        db.String(36),
        db.ForeignKey("pages.id", ondelete="CASCADE"),
        nullable=False
    )

    # Proposed page fields
    title = db.Column(db.String(255), nullable=False)
    content = db.Column(db.Text, nullable=False)
    content_type = db.Column(db.String(20), nullable=False, default="markdown")
    category = db.Column(db.String(100), nullable=True)
    is_public = db.Column(db.Boolean, nullable=False, default=False)

    editor_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)
    status = db.Column(db.String(20), nullable=False, default=PENDING, index=True)
    # pending | approved | rejected

    reviewed_by = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=True)
    reviewed_at = db.Column(db.DateTime, nullable=True)
    rejection_reason = db.Column(db.Text, nullable=True)

    page = db.relationship("Page", back_populates="pending_edits")
    editor = db.relationship("User", foreign_keys=[editor_id])

    __table_args__ = (
        # one open proposal per editor per page
        db.Index(
            "uq_pending_edit_page_editor",
            "page_id",
            "editor_id",
            unique=True,
            postgresql_where=db.text("status = 'pending'"),
            sqlite_where=db.text("status = 'pending'"),
        ),
    )

    @property
    def editor_name(self):
        return self.editor.username if self.editor else None
