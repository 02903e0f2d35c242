"""
Display rules for the prescription document.

Every value printed by either backend goes through these helpers, so the
vector PDF and the raster capture always show the same text.
"""
import math
from datetime import date, datetime

NA = 'N/A'
CURRENCY = '₹'
DATE_FORMAT = '%d/%m/%Y'
ADDRESS_MAX_CHARS = 40


def _present(value):
    if value is None:
        return False
    return bool(str(value).strip())


def text(value, placeholder=NA):
    """Upper-cased display text, or the placeholder when missing."""
    if not _present(value):
        return placeholder
    return str(value).strip().upper()


def cell(value):
    """Table cell text: upper-cased, empty when missing."""
    return text(value, placeholder='')


def fmt_date(value):
    """DD/MM/YYYY; missing dates print as an empty string, not N/A."""
    if not value:
        return ''
    if isinstance(value, (date, datetime)):
        return value.strftime(DATE_FORMAT)
    return str(value)


def fmt_number(value):
    """Drop a trailing .0 so quantities print as 2, not 2.0."""
    if value is None or value == '':
        return ''
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def fmt_money(value):
    return f"{CURRENCY}{value:.2f}"


def final_amount(record):
    """amount - discount; a discount larger than the amount gives a negative total."""
    return (record.amount or 0) - (record.discount or 0)


def units_remaining(record, line):
    """Stock minus dispensed quantity. An unknown product counts as zero stock."""
    product = record.product_for(line)
    stock = product.stock_units if product is not None else 0
    return (stock or 0) - (line.quantity or 0)


def total_units_remaining(record):
    return sum(units_remaining(record, line) for line in record.lines)


def _as_datetime(value):
    if isinstance(value, datetime):
        return value
    return datetime(value.year, value.month, value.day)


def days_until_next_visit(record):
    if not record.date or not record.next_visit:
        return 0
    delta = _as_datetime(record.next_visit) - _as_datetime(record.date)
    return math.ceil(delta.total_seconds() / 86400)


def medicine_name(record, line):
    """Product name, else the line's treatment-plan text, else empty."""
    product = record.product_for(line)
    if product is not None and _present(product.name):
        return cell(product.name)
    return cell(line.treatment_plan)


def patient_name(patient):
    return f"{patient.first_name or ''} {patient.last_name or ''}".strip().upper()


def pulse_diagnosis(record):
    readings = [r.strip() for r in (record.pulse_diagnosis, record.pulse_diagnosis2) if _present(r)]
    return text(', '.join(readings))


def age(record):
    value = record.age if _present(record.age) else record.patient.age
    return f"{text(value)} YR"


def weight(record):
    return f"{fmt_number(record.weight)} KG" if _present(record.weight) else NA


def height(record):
    return f"{fmt_number(record.height)} CM" if _present(record.height) else NA


def address(patient, limit=ADDRESS_MAX_CHARS):
    return text(patient.address)[:limit]


def visit_number(record):
    return str(record.visit_number or 1)


def opd_no(record):
    """The visit's own OPD number; header grid and filename."""
    return record.opd_no


def summary_opd_no(record):
    """Identity summary prefers the patient's register number."""
    return record.patient.opd_no or record.opd_no


def filename(record):
    """Download name: "{first} {last} {opd no or id}.pdf"."""
    name = f"{record.patient.first_name or ''} {record.patient.last_name or ''}".strip() or 'Patient'
    number = opd_no(record) or record.id or 'Unknown'
    return f"{name} {number}.pdf".strip()
