import base64
from datetime import date, datetime
from io import BytesIO

import pytest
import requests
from PIL import Image

from rxprint import create_app
from rxprint.extensions import db as _db
from rxprint.models import Patient, Prescription, Product, Visit
from rxprint.rendering import VisitRecord


def png_bytes(color=(200, 30, 30, 255), size=(40, 20)):
    buffer = BytesIO()
    Image.new('RGBA', size, color).save(buffer, format='PNG')
    return buffer.getvalue()


def png_data_uri(color=(200, 30, 30, 255), size=(40, 20)):
    return 'data:image/png;base64,' + base64.b64encode(png_bytes(color, size)).decode('ascii')


class FakeResponse:
    def __init__(self, content=b'', status_code=200):
        self.content = content
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


class FakeSession:
    """Stands in for `requests`: maps URL to bytes, status code or exception."""

    def __init__(self, routes=None):
        self.routes = routes or {}
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append((url, timeout))
        result = self.routes.get(url)
        if result is None:
            raise requests.ConnectionError(f"no route to {url}")
        if isinstance(result, Exception):
            raise result
        if isinstance(result, int):
            return FakeResponse(status_code=result)
        return FakeResponse(result)


@pytest.fixture
def fake_session():
    return FakeSession()


def visit_source(**overrides):
    source = {
        'id': 7,
        'opd_no': 'V-7',
        'visit_date': datetime(2024, 1, 1),
        'next_visit': datetime(2024, 1, 15),
        'visit_number': 3,
        'weight': 64.0,
        'height': 170.5,
        'age': '34',
        'temperament': 'Phlegmatic',
        'pulse_diagnosis': 'vata',
        'pulse_diagnosis2': 'pitta',
        'history_reports': 'Seasonal allergies since childhood',
        'major_complaints': 'Sneezing',
        'improvements': 'Better sleep',
        'investigations': 'CBC',
        'provisional_diagnosis': 'Allergic rhinitis',
        'amount': 1000,
        'discount': 150,
        'patient': {
            'id': 'P001',
            'first_name': 'Asha',
            'last_name': 'Verma',
            'guardian_name': 'Ravi Verma',
            'address': '12 Lake Road, Sector 4, Near Old Temple, Bhopal, Madhya Pradesh',
            'phone': '9876543210',
            'birth_date': date(1990, 5, 17),
            'gender': 'female',
            'opd_no': 'OPD-101',
            'image_url': None,
        },
        'prescriptions': [
            {'product_id': 1, 'comp1': 'a', 'comp2': 'b', 'comp3': 'c', 'timing': 'morning',
             'dosage': '5 drops', 'quantity': 2},
            {'product_id': 2, 'comp1': 'd', 'comp4': 'X', 'timing': 'night',
             'dosage': '2 pills', 'quantity': 3, 'patient_has_medicine': True},
            {'product_id': None, 'treatment_plan': 'Steam inhalation', 'procedure': 'daily'},
        ],
    }
    source.update(overrides)
    return source


PRODUCTS = [
    {'id': 1, 'name': 'Arnica 30', 'units': 10},
    {'id': 2, 'name': 'Belladonna 200', 'units': 3},
]


@pytest.fixture
def record():
    return VisitRecord.from_source(visit_source(), products=PRODUCTS)


@pytest.fixture
def app():
    app = create_app('testing')
    with app.app_context():
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def seeded_visit(app):
    """A stored visit with three lines, one of them using comp4."""
    patient = Patient(
        id='P001',
        opd_no='OPD-101',
        first_name='Asha',
        last_name='Verma',
        guardian_name='Ravi Verma',
        gender='female',
        birth_date=date(1990, 5, 17),
        phone='9876543210',
        address='12 Lake Road, Bhopal',
    )
    arnica = Product(id=1, name='Arnica 30', units=10)
    belladonna = Product(id=2, name='Belladonna 200', units=3)
    visit = Visit(
        id=7,
        patient_id='P001',
        visit_date=datetime(2024, 1, 1),
        next_visit=datetime(2024, 1, 15),
        visit_number=3,
        amount=1000,
        discount=150,
        provisional_diagnosis='Allergic rhinitis',
    )
    # stored out of order; position decides the printed order
    visit.prescriptions = [
        Prescription(position=2, treatment_plan='Steam inhalation'),
        Prescription(position=0, product_id=1, comp1='a', timing='morning', quantity=2),
        Prescription(position=1, product_id=2, comp4='X', timing='night', quantity=3),
    ]
    _db.session.add_all([patient, arnica, belladonna, visit])
    _db.session.commit()
    return visit
