from datetime import datetime

from rxprint.extensions import db


class TimestampMixin:
    """created_at / updated_at columns shared by all tables."""
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
