"""
Visit Model
One consultation: clinical notes, billing and the ordered prescription lines.
"""
from rxprint.extensions import db
from .base import TimestampMixin


class Visit(db.Model, TimestampMixin):
    __tablename__ = 'visits'

    id = db.Column(db.Integer, primary_key=True)
    patient_id = db.Column(db.String(20), db.ForeignKey('patients.id'), nullable=False, index=True)
    opd_no = db.Column(db.String(30), nullable=True)

    # Visit metadata
    visit_date = db.Column(db.DateTime, nullable=True, index=True)
    visit_number = db.Column(db.Integer, default=1)
    next_visit = db.Column(db.DateTime, nullable=True)

    # Vitals
    weight = db.Column(db.Float)  # kg
    height = db.Column(db.Float)  # cm
    age = db.Column(db.String(10))  # as recorded at the visit

    # Clinical notes
    temperament = db.Column(db.String(100))
    pulse_diagnosis = db.Column(db.String(255))
    pulse_diagnosis2 = db.Column(db.String(255))
    history_reports = db.Column(db.Text)
    major_complaints = db.Column(db.Text)
    improvements = db.Column(db.Text)
    investigations = db.Column(db.Text)
    provisional_diagnosis = db.Column(db.Text)

    # Billing
    amount = db.Column(db.Float, default=0)
    discount = db.Column(db.Float, default=0)

    # Soft delete
    deleted_at = db.Column(db.DateTime, nullable=True, index=True)

    # Relationships
    patient = db.relationship('Patient', backref='visits', lazy=True)
    prescriptions = db.relationship(
        'Prescription',
        backref='visit',
        order_by='Prescription.position',
        cascade='all, delete-orphan',
        lazy=True,
    )

    def __repr__(self):
        return f"<Visit {self.id} - Patient: {self.patient_id}>"

    def to_dict(self):
        """Convert to dictionary for API responses"""
        return {
            'id': self.id,
            'patient_id': self.patient_id,
            'opd_no': self.opd_no,
            'visit_date': self.visit_date.isoformat() if self.visit_date else None,
            'visit_number': self.visit_number,
            'next_visit': self.next_visit.isoformat() if self.next_visit else None,
            'weight': self.weight,
            'height': self.height,
            'age': self.age,
            'amount': self.amount,
            'discount': self.discount,
            'prescriptions': [p.to_dict() for p in self.prescriptions],
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None
        }
