from .user import User
from .page import Page
from .page_revision import PageRevision
from .pending_page_edit import PendingPageEdit
from .invitation import Invitation
from .system_setting import SystemSetting
from .audit_log import AuditLog

__all__ = [
    "User",
    "Page",
    "PageRevision",
    "PendingPageEdit",
    "Invitation",
    "SystemSetting",
    "AuditLog",
]
