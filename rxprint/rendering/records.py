"""
Render records

Read-only snapshots of a visit, its patient, its prescription lines and the
products they reference. Every optional field is explicit so the
formatting rules can apply one fallback per field.
"""
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, List, Optional, Union

DateLike = Optional[Union[date, datetime]]


def _get(obj: Any, key: str, default: Any = None) -> Any:
    if obj is None:
        return default
    if isinstance(obj, dict):
        return obj.get(key, default)
    return getattr(obj, key, default)


def _to_date(value: Any) -> DateLike:
    if not value:
        return None
    if isinstance(value, (date, datetime)):
        return value
    s = str(value).strip()
    if not s:
        return None
    try:
        return datetime.fromisoformat(s.replace('Z', ''))
    except ValueError:
        pass
    for fmt in ('%d/%m/%Y', '%d-%m-%Y', '%Y-%m-%d'):
        try:
            return datetime.strptime(s[:10], fmt)
        except ValueError:
            continue
    return None


def _to_number(value: Any) -> float:
    if value is None or value == '':
        return 0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0


@dataclass
class ProductRef:
    id: Any
    name: Optional[str] = None
    stock_units: float = 0

    @classmethod
    def from_source(cls, obj):
        return cls(
            id=_get(obj, 'id'),
            name=_get(obj, 'name'),
            stock_units=_to_number(_get(obj, 'units', _get(obj, 'stock_units'))),
        )


@dataclass
class PatientRef:
    id: Any = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    guardian_name: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    date_of_birth: DateLike = None
    gender: Optional[str] = None
    age: Optional[str] = None
    photo_url: Optional[str] = None
    opd_no: Optional[str] = None

    @classmethod
    def from_source(cls, obj):
        if obj is None:
            return cls()
        return cls(
            id=_get(obj, 'id'),
            first_name=_get(obj, 'first_name'),
            last_name=_get(obj, 'last_name'),
            guardian_name=_get(obj, 'guardian_name'),
            address=_get(obj, 'address'),
            phone=_get(obj, 'phone'),
            date_of_birth=_to_date(_get(obj, 'birth_date', _get(obj, 'date_of_birth'))),
            gender=_get(obj, 'gender'),
            age=_get(obj, 'age'),
            photo_url=_get(obj, 'image_url', _get(obj, 'photo_url')),
            opd_no=_get(obj, 'opd_no'),
        )


@dataclass
class PrescriptionLine:
    product_id: Any = None
    comp1: Optional[str] = None
    comp2: Optional[str] = None
    comp3: Optional[str] = None
    comp4: Optional[str] = None
    comp5: Optional[str] = None
    timing: Optional[str] = None
    dosage: Optional[str] = None
    additions: Optional[str] = None
    procedure: Optional[str] = None
    presentation: Optional[str] = None
    droppers_today: Optional[str] = None
    quantity: float = 0
    treatment_plan: Optional[str] = None
    patient_has_medicine: bool = False

    @classmethod
    def from_source(cls, obj):
        droppers = _get(obj, 'droppers_today')
        return cls(
            product_id=_get(obj, 'product_id'),
            comp1=_get(obj, 'comp1'),
            comp2=_get(obj, 'comp2'),
            comp3=_get(obj, 'comp3'),
            comp4=_get(obj, 'comp4'),
            comp5=_get(obj, 'comp5'),
            timing=_get(obj, 'timing'),
            dosage=_get(obj, 'dosage'),
            additions=_get(obj, 'additions'),
            procedure=_get(obj, 'procedure'),
            presentation=_get(obj, 'presentation'),
            droppers_today=None if droppers is None else str(droppers),
            quantity=_to_number(_get(obj, 'quantity')),
            treatment_plan=_get(obj, 'treatment_plan'),
            patient_has_medicine=bool(_get(obj, 'patient_has_medicine', False)),
        )


@dataclass
class VisitRecord:
    id: Any = None
    opd_no: Optional[str] = None
    date: DateLike = None
    visit_number: Optional[int] = None
    next_visit: DateLike = None
    weight: Optional[float] = None
    height: Optional[float] = None
    age: Optional[str] = None
    temperament: Optional[str] = None
    pulse_diagnosis: Optional[str] = None
    pulse_diagnosis2: Optional[str] = None
    history_reports: Optional[str] = None
    major_complaints: Optional[str] = None
    improvements: Optional[str] = None
    investigations: Optional[str] = None
    provisional_diagnosis: Optional[str] = None
    amount: float = 0
    discount: float = 0
    patient: PatientRef = field(default_factory=PatientRef)
    lines: List[PrescriptionLine] = field(default_factory=list)
    products: List[ProductRef] = field(default_factory=list)

    def product_for(self, line: PrescriptionLine) -> Optional[ProductRef]:
        """Match a line to its product by id, compared as strings."""
        if line.product_id is None:
            return None
        wanted = str(line.product_id)
        for product in self.products:
            if str(product.id) == wanted:
                return product
        return None

    @classmethod
    def from_source(cls, visit, products=None):
        """
        Build a record from a Visit model (or an equivalent dict).

        Args:
            visit: Visit model instance or dict with the same keys
            products: iterable of Product models/dicts for name and stock lookup

        Returns:
            VisitRecord
        """
        lines = [PrescriptionLine.from_source(p) for p in (_get(visit, 'prescriptions') or [])]
        return cls(
            id=_get(visit, 'id'),
            opd_no=_get(visit, 'opd_no'),
            date=_to_date(_get(visit, 'visit_date', _get(visit, 'date'))),
            visit_number=_get(visit, 'visit_number'),
            next_visit=_to_date(_get(visit, 'next_visit')),
            weight=_get(visit, 'weight'),
            height=_get(visit, 'height'),
            age=_get(visit, 'age'),
            temperament=_get(visit, 'temperament'),
            pulse_diagnosis=_get(visit, 'pulse_diagnosis'),
            pulse_diagnosis2=_get(visit, 'pulse_diagnosis2'),
            history_reports=_get(visit, 'history_reports'),
            major_complaints=_get(visit, 'major_complaints'),
            improvements=_get(visit, 'improvements'),
            investigations=_get(visit, 'investigations'),
            provisional_diagnosis=_get(visit, 'provisional_diagnosis'),
            amount=_to_number(_get(visit, 'amount')),
            discount=_to_number(_get(visit, 'discount')),
            patient=PatientRef.from_source(_get(visit, 'patient')),
            lines=lines,
            products=[ProductRef.from_source(p) for p in (products or [])],
        )
