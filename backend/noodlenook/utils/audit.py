from flask import g, has_request_context
from noodlenook.extensions import db
from noodlenook.models.audit_log import AuditLog
from typing import Optional


def log_action(
    *,
    action: str,
    entity_type: str,
    entity_id: Optional[str],
    payload: dict | None = None,
    actor_id: Optional[str] = None,
):
    """Stage an audit row in the current session; the caller's transaction commits it."""
    if actor_id is None and has_request_context():
        current_user = getattr(g, "current_user", None)
        actor_id = current_user.id if current_user else None

    log = AuditLog()

    log.actor_id = actor_id
    log.action = action
    log.entity_type = entity_type
    log.entity_id = entity_id or "*"
    log.payload = payload or {}

    db.session.add(log)
