# noodlenook/normalizers/audit.py
from __future__ import annotations

from typing import Dict, Any
from noodlenook.models.audit_log import AuditLog


def normalize_audit_log(log: AuditLog) -> Dict[str, Any]:
    """
    Audit entries are returned verbatim; rejection reasons live in
    `payload["reason"]` for page.reject and pending_edit.reject.
    """
    return {
        "id": log.id,
        "actor_id": log.actor_id,
        "action": log.action,
        "entity_type": log.entity_type,
        "entity_id": log.entity_id,
        "payload": log.payload or {},
        "created_at": log.created_at.isoformat(),
    }
