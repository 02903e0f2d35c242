import json
from datetime import datetime

from rxprint.extensions import db
from rxprint.models import AuditLog
from rxprint.rendering import vector
from rxprint.services import document_service


def test_health(client):
    response = client.get('/health')
    assert response.status_code == 200
    assert response.get_json()['status'] == 'healthy'


def test_ready_reports_database(client):
    response = client.get('/health/ready')
    body = response.get_json()
    assert response.status_code == 200
    assert body['database'] == 'connected'
    assert body['rendering']['unicode_font'] is False


def test_download_pdf(client, seeded_visit):
    response = client.get('/api/visits/7/prescription.pdf')

    assert response.status_code == 200
    assert response.mimetype == 'application/pdf'
    assert response.data.startswith(b'%PDF')
    disposition = response.headers['Content-Disposition']
    assert disposition.startswith('attachment')
    assert 'Asha Verma 7.pdf' in disposition


def test_download_pdf_inline(client, seeded_visit):
    response = client.get('/api/visits/7/prescription.pdf?inline=1')
    assert response.headers['Content-Disposition'].startswith('inline')


def test_download_records_audit_entry(client, seeded_visit):
    client.get('/api/visits/7/prescription.pdf')

    entry = AuditLog.query.filter_by(entity_type='visit', entity_id='7').one()
    assert entry.action == 'export_pdf'
    details = json.loads(entry.details)
    assert details['pages'] == 2
    assert details['filename'] == 'Asha Verma 7.pdf'


def test_audit_entry_serializes_visit_and_details(client, seeded_visit):
    client.get('/api/visits/7/prescription/print?mode=plain')

    body = AuditLog.query.filter_by(action='print').one().to_dict()
    assert body['visit_id'] == '7'
    assert body['details'] == {'mode': 'plain'}
    assert 'user_id' not in body
    assert body['created_at']


def test_unknown_visit(client, app):
    response = client.get('/api/visits/999/prescription.pdf')
    assert response.status_code == 404
    assert response.get_json()['success'] is False


def test_soft_deleted_visit_is_not_found(client, seeded_visit):
    seeded_visit.deleted_at = datetime(2024, 2, 1)
    db.session.commit()
    assert client.get('/api/visits/7/prescription.pdf').status_code == 404


def test_generation_failure_returns_alert_message(client, seeded_visit, monkeypatch):
    def broken_compose(*args, **kwargs):
        raise RuntimeError('boom')

    monkeypatch.setattr(vector, 'compose', broken_compose)
    response = client.get('/api/visits/7/prescription.pdf')

    assert response.status_code == 500
    assert response.get_json() == {'success': False, 'error': 'Failed to generate PDF. Please try again.'}
    assert AuditLog.query.count() == 0


def test_record_keeps_line_order(app, seeded_visit):
    record = document_service.load_visit_record(7)
    assert [line.treatment_plan for line in record.lines][2] == 'Steam inhalation'
    assert [str(line.product_id) for line in record.lines[:2]] == ['1', '2']
    assert record.patient.age is not None


def test_product_lookup_failure_degrades(app, seeded_visit, monkeypatch):
    from sqlalchemy.exc import OperationalError

    class FailingQuery:
        def all(self):
            raise OperationalError('SELECT * FROM products', {}, Exception('database is locked'))

    class UnavailableProduct:
        query = FailingQuery()

    monkeypatch.setattr(document_service, 'Product', UnavailableProduct)
    record = document_service.load_visit_record(7)

    assert record.products == []
    assert len(record.lines) == 3
    assert record.lines[0].product_id == 1


def test_capture_pdf(client, seeded_visit):
    response = client.get('/api/visits/7/prescription/capture.pdf')

    assert response.status_code == 200
    assert response.data.startswith(b'%PDF')
    assert AuditLog.query.filter_by(action='export_capture').count() == 1


def test_print_page(client, seeded_visit):
    response = client.get('/api/visits/7/prescription/print?mode=letterhead')

    assert response.status_code == 200
    assert response.mimetype == 'text/html'
    assert b'window.print()' in response.data
    entry = AuditLog.query.filter_by(action='print').one()
    assert json.loads(entry.details) == {'mode': 'letterhead'}


def test_print_defaults_to_plain(client, seeded_visit):
    assert client.get('/api/visits/7/prescription/print').status_code == 200


def test_print_rejects_unknown_mode(client, seeded_visit):
    response = client.get('/api/visits/7/prescription/print?mode=duplex')
    assert response.status_code == 400
    assert 'letterhead' in response.get_json()['error']


def test_print_failure_is_unavailable(client, seeded_visit, monkeypatch):
    from rxprint.rendering import raster

    def failing_capture(*args, **kwargs):
        raise RuntimeError('capture failed')

    monkeypatch.setattr(raster, 'capture', failing_capture)
    response = client.get('/api/visits/7/prescription/print?mode=letterhead')
    assert response.status_code == 503
    assert response.get_json()['success'] is False


def test_cors_exposes_download_filename(client, seeded_visit):
    response = client.get('/api/visits/7/prescription.pdf', headers={'Origin': 'http://localhost:3000'})
    assert 'Content-Disposition' in response.headers.get('Access-Control-Expose-Headers', '')
