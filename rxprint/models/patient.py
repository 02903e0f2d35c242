from rxprint.extensions import db
from .base import TimestampMixin
from datetime import date


class Patient(db.Model, TimestampMixin):
    __tablename__ = 'patients'

    id = db.Column(db.String(20), primary_key=True)  # e.g., P001
    opd_no = db.Column(db.String(30), index=True)  # outpatient register number

    # Personal
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=True)
    guardian_name = db.Column(db.String(150))  # father / husband / guardian
    gender = db.Column(db.String(20))
    birth_date = db.Column(db.Date)  # DOB
    phone = db.Column(db.String(20))
    address = db.Column(db.String(255))

    # Photo shown in the prescription header; path under static/ or full URL
    image_url = db.Column(db.String(500))

    def __repr__(self):
        return f"<Patient {self.first_name} {self.last_name} ({self.id})>"

    @property
    def age(self):
        """Whole years since birth_date, or None when DOB is unknown."""
        if not self.birth_date:
            return None
        today = date.today()
        years = today.year - self.birth_date.year
        if (today.month, today.day) < (self.birth_date.month, self.birth_date.day):
            years -= 1
        return years

    def to_dict(self):
        return {
            'id': self.id,
            'opd_no': self.opd_no,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'guardian_name': self.guardian_name,
            'gender': self.gender,
            'birth_date': self.birth_date.isoformat() if self.birth_date else None,
            'age': self.age,
            'phone': self.phone,
            'address': self.address,
            'image_url': self.image_url,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None
        }
