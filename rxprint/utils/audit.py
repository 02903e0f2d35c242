"""
Audit logging for prescription exports and prints.
"""
import json
import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from rxprint.extensions import db
from rxprint.models import AuditLog

logger = logging.getLogger(__name__)

EXPORT_PDF = 'export_pdf'
EXPORT_CAPTURE = 'export_capture'
PRINT = 'print'


def log_audit(
    entity_type: str,
    action: str,
    entity_id: Optional[str] = None,
    details: Optional[dict] = None,
) -> Optional[AuditLog]:
    """Append an audit log entry. A failed write is logged and rolled back, never raised."""
    try:
        entry = AuditLog(
            entity_type=entity_type,
            entity_id=str(entity_id) if entity_id is not None else None,
            action=action,
            details=json.dumps(details, default=str) if details else None,
        )
        db.session.add(entry)
        db.session.commit()
        return entry
    except SQLAlchemyError as e:
        logger.warning("Audit log failed: %s", e)
        db.session.rollback()
        return None


def log_visit_document(visit_id, action, filename=None, **details):
    """Record that a visit's prescription left the system (download or print)."""
    if filename:
        details['filename'] = filename
    return log_audit('visit', action, entity_id=visit_id, details=details or None)
