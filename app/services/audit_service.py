import uuid
import logging
from app.db.gateway import DataService
from app.models.audit_log import AuditLog

logger = logging.getLogger(__name__)

def log_audit(data: DataService, actor_profile_id: str, action: str, entity_type: str, entity_id: str, details: dict | None = None) -> None:
    data.insert(AuditLog(
        id=str(uuid.uuid4()),
        actor_profile_id=actor_profile_id or "",
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        details=details or {},
    ))
    logger.info("audit %s %s/%s by %s", action, entity_type, entity_id, actor_profile_id)
