from rxprint.extensions import db
from .base import TimestampMixin


class Prescription(db.Model, TimestampMixin):
    """
    One prescription line of a visit.

    `position` fixes the printed row number; lines are always read back in
    that order.
    """

    __tablename__ = "prescriptions"

    id = db.Column(db.Integer, primary_key=True)
    visit_id = db.Column(
        db.Integer, db.ForeignKey("visits.id"), nullable=False, index=True
    )
    position = db.Column(db.Integer, nullable=False, default=0)

    # Medicine (nullable: a line can be a procedure with no stocked product)
    product_id = db.Column(
        db.Integer, db.ForeignKey("products.id"), nullable=True, index=True
    )
    treatment_plan = db.Column(db.String(255), nullable=True)

    # Up to five free-text component slots
    comp1 = db.Column(db.String(100))
    comp2 = db.Column(db.String(100))
    comp3 = db.Column(db.String(100))
    comp4 = db.Column(db.String(100))
    comp5 = db.Column(db.String(100))

    timing = db.Column(db.String(50))
    dosage = db.Column(db.String(50))  # e.g., "1-0-1"
    additions = db.Column(db.String(100))
    procedure = db.Column(db.String(100))
    presentation = db.Column(db.String(100))
    droppers_today = db.Column(db.String(20))
    quantity = db.Column(db.Float, default=0)
    patient_has_medicine = db.Column(db.Boolean, default=False)

    product = db.relationship("Product", lazy=True)

    def __repr__(self):
        return f"<Prescription {self.id} - Visit: {self.visit_id} #{self.position}>"

    def to_dict(self):
        """Convert to dictionary for API responses."""
        return {
            "id": self.id,
            "visit_id": self.visit_id,
            "position": self.position,
            "product_id": self.product_id,
            "treatment_plan": self.treatment_plan,
            "comp1": self.comp1,
            "comp2": self.comp2,
            "comp3": self.comp3,
            "comp4": self.comp4,
            "comp5": self.comp5,
            "timing": self.timing,
            "dosage": self.dosage,
            "additions": self.additions,
            "procedure": self.procedure,
            "presentation": self.presentation,
            "droppers_today": self.droppers_today,
            "quantity": self.quantity,
            "patient_has_medicine": self.patient_has_medicine,
        }
