"""
Audit trail of prescription documents leaving the system.
"""
import json
from datetime import datetime

from rxprint.extensions import db


class AuditLog(db.Model):
    __tablename__ = "audit_logs"

    id = db.Column(db.Integer, primary_key=True)
    entity_type = db.Column(db.String(64), nullable=False, index=True)  # visit
    entity_id = db.Column(db.String(64), nullable=True, index=True)
    action = db.Column(db.String(32), nullable=False, index=True)  # export_pdf, export_capture, print
    details = db.Column(db.Text, nullable=True)  # JSON: filename, pages, mode
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    @property
    def detail_dict(self):
        return json.loads(self.details) if self.details else {}

    def to_dict(self):
        return {
            "id": self.id,
            "visit_id": self.entity_id,
            "action": self.action,
            "details": self.detail_dict,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
