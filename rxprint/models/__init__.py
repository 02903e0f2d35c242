from .patient import Patient
from .product import Product
from .visit import Visit
from .prescription import Prescription
from .audit_log import AuditLog

__all__ = ["Patient", "Product", "Visit", "Prescription", "AuditLog"]
