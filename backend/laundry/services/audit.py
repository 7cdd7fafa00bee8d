from __future__ import annotations
from typing import Any, Dict, Optional
from laundry.models.audit import AuditLog


def add_audit(session, action: str, actor_id: int, entity: Optional[str] = None, entity_id: Optional[Any] = None, meta: Optional[Dict[str, Any]] = None):
    """Persist an audit log entry within the given DB session.

    Parameters:
      action: short action code e.g. ORDER.CREATE, ORDER.APPROVE, ORDER.CLAIM
      actor_id: profile id of the acting user
      entity: optional entity name (Order, LaundryHub, etc.)
      entity_id: optional primary key (stored as string)
      meta: additional JSON-safe dictionary (will be shallow copied)
    """
    log = AuditLog(
        actor_id=actor_id,
        action=action,
        entity=entity,
        entity_id=str(entity_id) if entity_id is not None else None,
        meta=dict(meta or {}),
    )
    session.add(log)
    # No commit here; caller's transaction boundary controls durability.
    return log
