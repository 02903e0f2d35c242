from rxprint.extensions import db
from .base import TimestampMixin


class Product(db.Model, TimestampMixin):
    """Stocked medicine. Rendering reads `units`; it never writes it back."""

    __tablename__ = "products"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    units = db.Column(db.Float, default=0)  # units in stock

    def __repr__(self):
        return f"<Product {self.id} {self.name}>"

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "units": self.units,
        }
