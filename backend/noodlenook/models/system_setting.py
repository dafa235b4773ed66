from noodlenook.extensions import db
from .base import BaseModel


class SystemSetting(BaseModel):
    __tablename__ = "system_settings"

    key = db.Column(db.String(100), unique=True, nullable=False, index=True)
    value = db.Column(db.Text, nullable=True)
    encrypted = db.Column(db.Boolean, nullable=False, default=False)
    updated_by = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=True)
