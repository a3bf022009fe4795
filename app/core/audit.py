import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from loguru import logger
from sqlmodel import Session

from app.db.schema import SystemAuditLog, AuditAction
from app.db.core import engine


def _perform_audit_log(
    user_id: uuid.UUID,
    entity_type: str,
    entity_id: uuid.UUID,
    action: AuditAction,
    changes: Dict[str, Any],
    ip_address: Optional[str] = None
):
    """
    Background worker.
    Creates its OWN session using the global engine, because the
    request session is already closed when BackgroundTasks run.
    """
    try:
        with Session(engine) as session:
            log_entry = SystemAuditLog(
                actor_user_id=user_id,
                entity_type=entity_type,
                entity_id=entity_id,
                action=action,
                changes=changes,
                ip_address=ip_address,
                timestamp=datetime.utcnow()
            )
            session.add(log_entry)
            session.commit()

    except Exception as e:
        # An audit failure must never fail the admin action it records
        logger.error(f"AUDIT LOG FAILED for {entity_type} {entity_id}: {e}")
