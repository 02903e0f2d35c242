from .audit import log_audit, log_visit_document

__all__ = [
    "log_audit",
    "log_visit_document",
]
