from noodlenook.extensions import db
from noodlenook.domain.roles import VIEWER
from .base import BaseModel


class Invitation(BaseModel):
    __tablename__ = "invitations"

    email = db.Column(db.String(255), nullable=False, index=True)
    token = db.Column(db.String(128), nullable=False, unique=True)
    role = db.Column(db.String(20), nullable=False, default=VIEWER)

    invited_by = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=True)
    expires_at = db.Column(db.DateTime, nullable=False)
    used = db.Column(db.Boolean, nullable=False, default=False)

    inviter = db.relationship("User")

    __table_args__ = (
        db.Index(
            "uq_invitation_unused_email",
            "email",
            unique=True,
            postgresql_where=db.text("used = false"),
            sqlite_where=db.text("used = 0"),
        ),
    )

    @property
    def invited_by_name(self):
        return self.inviter.username if self.inviter else None
