"""Display rules shared by both rendering backends."""
from datetime import date, datetime

from conftest import PRODUCTS, visit_source

from rxprint.rendering import formatting as fmt
from rxprint.rendering.records import PatientRef, PrescriptionLine, VisitRecord


def test_final_amount_renders_with_currency(record):
    assert fmt.final_amount(record) == 850
    assert fmt.fmt_money(fmt.final_amount(record)) == '₹850.00'


def test_final_amount_is_not_clamped():
    record = VisitRecord(amount=100, discount=250)
    assert fmt.fmt_money(fmt.final_amount(record)) == '₹-150.00'


def test_days_until_next_visit(record):
    assert fmt.days_until_next_visit(record) == 14


def test_days_until_next_visit_rounds_partial_days_up():
    record = VisitRecord(date=datetime(2024, 1, 1, 18, 0), next_visit=datetime(2024, 1, 3, 9, 0))
    assert fmt.days_until_next_visit(record) == 2


def test_days_until_next_visit_missing_date_is_zero():
    assert fmt.days_until_next_visit(VisitRecord(date=date(2024, 1, 1))) == 0
    assert fmt.days_until_next_visit(VisitRecord(next_visit=date(2024, 1, 1))) == 0


def test_units_remaining_uses_product_stock(record):
    first, second, third = record.lines
    assert fmt.units_remaining(record, first) == 8
    assert fmt.units_remaining(record, second) == 0
    # no product: stock counts as zero
    assert fmt.units_remaining(record, third) == 0
    assert fmt.total_units_remaining(record) == 8


def test_units_remaining_unknown_product_goes_negative():
    line = PrescriptionLine(product_id=99, quantity=4)
    record = VisitRecord(lines=[line])
    assert fmt.units_remaining(record, line) == -4


def test_product_ids_match_across_types():
    record = VisitRecord.from_source(
        visit_source(prescriptions=[{'product_id': '1', 'quantity': 1}]), products=PRODUCTS)
    assert fmt.medicine_name(record, record.lines[0]) == 'ARNICA 30'


def test_medicine_name_falls_back_to_treatment_plan(record):
    assert fmt.medicine_name(record, record.lines[2]) == 'STEAM INHALATION'
    assert fmt.medicine_name(record, PrescriptionLine()) == ''


def test_missing_text_placeholders():
    assert fmt.text(None) == 'N/A'
    assert fmt.text('   ') == 'N/A'
    assert fmt.text(' kapha ') == 'KAPHA'
    assert fmt.cell(None) == ''


def test_missing_date_is_empty_not_placeholder():
    assert fmt.fmt_date(None) == ''
    assert fmt.fmt_date(date(2024, 3, 9)) == '09/03/2024'


def test_pulse_readings_are_joined(record):
    assert fmt.pulse_diagnosis(record) == 'VATA, PITTA'
    assert fmt.pulse_diagnosis(VisitRecord()) == 'N/A'


def test_vitals_carry_units(record):
    assert fmt.weight(record) == '64 KG'
    assert fmt.height(record) == '170.5 CM'
    assert fmt.age(record) == '34 YR'
    assert fmt.weight(VisitRecord()) == 'N/A'


def test_age_falls_back_to_patient():
    record = VisitRecord(patient=PatientRef(age=51))
    assert fmt.age(record) == '51 YR'


def test_address_is_truncated(record):
    assert len(fmt.address(record.patient)) == 40
    assert fmt.address(record.patient).startswith('12 LAKE ROAD')


def test_visit_number_defaults_to_one():
    assert fmt.visit_number(VisitRecord()) == '1'


def test_filename(record):
    assert fmt.filename(record) == 'Asha Verma V-7.pdf'


def test_filename_fallbacks():
    assert fmt.filename(VisitRecord(id=12)) == 'Patient 12.pdf'
    assert fmt.filename(VisitRecord()) == 'Patient Unknown.pdf'


def test_record_reads_string_dates():
    record = VisitRecord.from_source({'date': '15/01/2024', 'next_visit': '2024-01-20'})
    assert fmt.fmt_date(record.date) == '15/01/2024'
    assert fmt.days_until_next_visit(record) == 5


def test_filename_ignores_patient_register_number(record):
    record.opd_no = None
    assert record.patient.opd_no == 'OPD-101'
    assert fmt.filename(record) == 'Asha Verma 7.pdf'
