from .document_service import (
    get_visit,
    load_visit_record,
    generate_prescription_pdf,
    capture_prescription_pdf,
    print_prescription,
)

__all__ = [
    "get_visit",
    "load_visit_record",
    "generate_prescription_pdf",
    "capture_prescription_pdf",
    "print_prescription",
]
