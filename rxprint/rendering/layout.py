"""
Prescription Layout Composer

Turns one VisitRecord into an ordered list of draw instructions on an A4
page (millimetres, origin top-left, text y is the baseline). The vector and
raster backends only execute these instructions; every position, colour and
string is decided here.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase.pdfmetrics import stringWidth

from . import formatting as fmt
from .assets import AssetBundle
from .column_schema import ColumnSchema

RGB = Tuple[int, int, int]

PAGE_WIDTH = 210
PAGE_HEIGHT = 297

BLACK = (0, 0, 0)
BLUE = (0, 0, 255)
RED = (255, 0, 0)
DARK_RED = (200, 0, 0)
GREEN = (0, 128, 0)
PURPLE = (128, 0, 128)
ORANGE = (255, 140, 0)
AMBER = (255, 165, 0)
TEAL = (0, 128, 128)
MAROON = (139, 0, 0)
GREY = (150, 150, 150)
HEADER_GREY = (100, 100, 100)
LIGHT_GREEN = (144, 238, 144)

SANS = 'Helvetica'
SANS_BOLD = 'Helvetica-Bold'
MONO_OBLIQUE = 'Courier-Oblique'

PATIENT = 'PATIENT'
OFFICE = 'OFFICE'
COPY_LABELS = (PATIENT, OFFICE)
LABEL_COLORS = {PATIENT: (0, 128, 255), OFFICE: RED}

# Image roles hidden on pre-printed letterhead stock.
LETTERHEAD_ROLES = ('header', 'separator', 'watermark')

NO_MEDICATIONS = 'NO MEDICATIONS'
NO_IMAGE = 'NO IMAGE'

HEADER_HEIGHT = 25
SEPARATOR_BAND_HEIGHT = 12
WATERMARK_SIZE = 80
WATERMARK_LIFT = 20
WATERMARK_OPACITY = 0.4
PHOTO_W = 12
PHOTO_H = 16
TABLE_X = 14


@dataclass
class TextOp:
    x: float
    y: float
    text: str
    size: float = 8
    color: RGB = BLACK
    font: str = SANS
    align: str = 'left'
    role: str = ''


@dataclass
class RectOp:
    x: float
    y: float
    w: float
    h: float
    fill: Optional[RGB] = None
    stroke: Optional[RGB] = None
    role: str = ''


@dataclass
class LineOp:
    x1: float
    y1: float
    x2: float
    y2: float
    color: RGB = BLACK
    width: float = 0.5
    role: str = ''


@dataclass
class ImageOp:
    x: float
    y: float
    w: float
    h: float
    image: object = None
    role: str = ''
    opacity: float = 1.0
    fallback_label: Optional[str] = None


@dataclass
class Layout:
    label: Optional[str]
    ops: list = field(default_factory=list)
    width: float = PAGE_WIDTH
    height: float = PAGE_HEIGHT

    def add(self, op):
        self.ops.append(op)
        return op

    def find(self, role) -> list:
        return [op for op in self.ops if op.role == role]

    def texts(self, prefix='') -> List[TextOp]:
        return [op for op in self.ops if isinstance(op, TextOp) and op.role.startswith(prefix)]

    def images(self, role=None) -> List[ImageOp]:
        return [op for op in self.ops if isinstance(op, ImageOp) and (role is None or op.role == role)]


@dataclass
class Column:
    key: str
    title: str
    width: float
    color: RGB = BLACK
    align: str = 'center'
    bold: bool = False


def _text_width(text, font, size):
    return stringWidth(text, font, size) / mm


def fit(text, width, font=SANS, size=8):
    """Truncate text so it fits in `width` millimetres."""
    if not text or _text_width(text, font, size) <= width:
        return text
    while text and _text_width(text, font, size) > width:
        text = text[:-1]
    return text


def wrap(text, width, font=SANS, size=8):
    return simpleSplit(text, font, size, width * mm) or ['']


def line_columns(schema: ColumnSchema, medicine_width=30):
    """Columns shared by both tables; comp4/comp5 follow the document schema."""
    columns = [
        Column('index', '#', 8),
        Column('medicine', 'MEDICINE NAME', medicine_width, BLUE, 'left', bold=True),
        Column('comp1', 'C1', 10, GREEN),
        Column('comp2', 'C2', 10, GREEN),
        Column('comp3', 'C3', 10, GREEN),
    ]
    if schema.has_comp4:
        columns.append(Column('comp4', 'C4', 10, GREEN))
    if schema.has_comp5:
        columns.append(Column('comp5', 'C5', 10, GREEN))
    columns += [
        Column('timing', 'TIMING', 15, DARK_RED, bold=True),
        Column('dose', 'DOSE', 12, PURPLE),
        Column('additions', 'ADDITIONS', 12),
        Column('procedure', 'PROCEDURE', 12),
        Column('presentation', 'PRESENTATION', 14),
        Column('droppers', 'DROPPERS TODAY', 12, ORANGE),
        Column('quantity', 'QUANTITY', 10, bold=True),
    ]
    return columns


def line_cells(record, line, index, schema: ColumnSchema):
    cells = {
        'index': str(index + 1),
        'medicine': fmt.medicine_name(record, line),
        'comp1': fmt.cell(line.comp1),
        'comp2': fmt.cell(line.comp2),
        'comp3': fmt.cell(line.comp3),
        'timing': fmt.cell(line.timing),
        'dose': fmt.cell(line.dosage),
        'additions': fmt.cell(line.additions),
        'procedure': fmt.cell(line.procedure),
        'presentation': fmt.cell(line.presentation),
        'droppers': fmt.cell(line.droppers_today),
        'quantity': fmt.fmt_number(line.quantity) if line.quantity else '',
    }
    if schema.has_comp4:
        cells['comp4'] = fmt.cell(line.comp4)
    if schema.has_comp5:
        cells['comp5'] = fmt.cell(line.comp5)
    return cells


class LayoutComposer:
    """
    Compose one copy of the prescription sheet.

    `label` is PATIENT or OFFICE for the vector backend and None for the
    on-screen view that the raster backend captures.
    """

    def __init__(self, record, schema: ColumnSchema, assets: AssetBundle = None,
                 label=None, footer_caption=''):
        self.record = record
        self.schema = schema
        self.assets = assets or AssetBundle()
        self.label = label
        self.footer_caption = footer_caption
        self.layout = Layout(label=label)

    def compose(self) -> Layout:
        y = self._header_band()
        self._watermark()
        y = self._patient_grid(y)
        y = self._separator(y, 'rule.after_grid') + 4
        y = self._clinical_block(y)
        y = self._separator(y, 'rule.after_clinical') + 4
        y = self._diagnosis(y)
        y = self._table(y, 'primary', line_columns(self.schema), row_h=4, size=7,
                        show_header=False)
        y = self._separator(y + 3, 'rule.after_primary')
        y = self._separator_band(y)
        y = self._summary_block(y)
        y = self._separator(y, 'rule.before_secondary', color=AMBER) + 3
        columns = [Column('units', 'UNITS', 12)] + line_columns(self.schema, medicine_width=25)
        y = self._table(y, 'secondary', columns, row_h=3.5, size=6, show_header=True)
        self._totals(y + 8)
        self._footer()
        return self.layout

    # -- blocks ---------------------------------------------------------

    def _header_band(self):
        self.layout.add(ImageOp(0, 0, PAGE_WIDTH, HEADER_HEIGHT, self.assets.header, role='header'))
        return HEADER_HEIGHT + 6

    def _watermark(self):
        x = (PAGE_WIDTH - WATERMARK_SIZE) / 2
        y = (PAGE_HEIGHT - WATERMARK_SIZE) / 2 - WATERMARK_LIFT
        self.layout.add(ImageOp(x, y, WATERMARK_SIZE, WATERMARK_SIZE, self.assets.watermark,
                                role='watermark', opacity=WATERMARK_OPACITY))

    def _field(self, x, y, label, value, color, value_dx, max_x, role,
               size=9, value_font=SANS):
        self.layout.add(TextOp(x, y, label, size, BLACK, SANS_BOLD, role=f"{role}.label"))
        vx = x + value_dx
        self.layout.add(TextOp(vx, y, fit(value, max_x - vx, value_font, size), size, color,
                               value_font, role=role))

    def _patient_grid(self, y):
        record, patient = self.record, self.record.patient
        c1, c2, c3, c4 = 15, 85, 140, 185

        self.layout.add(RectOp(c1 - 2, y - 4, 13, 6, fill=LIGHT_GREEN, role='grid.opd_badge'))
        self._field(c1, y, 'OPDN:', fmt.text(fmt.opd_no(record)), BLUE, 15, c2 - 1, 'grid.opd_no',
                    value_font=SANS_BOLD)
        self._field(c2, y, 'Patient Name:', fmt.text(fmt.patient_name(patient)), RED, 25, c3 - 1,
                    'grid.name', value_font=SANS_BOLD)
        self._field(c3, y, 'Age/DOB:', fmt.age(record), GREEN, 18, c4 - 1, 'grid.age',
                    value_font=SANS_BOLD)
        self._photo(c4, y - 3, 'photo.grid')
        y += 5

        self._field(c1, y, 'Date:', fmt.fmt_date(record.date), BLUE, 15, c2 - 1, 'grid.date')
        self._field(c2, y, 'F/H/G Name:', fmt.text(patient.guardian_name), PURPLE, 25, c3 - 1,
                    'grid.guardian')
        self._field(c3, y, 'Gender:', fmt.text(patient.gender), ORANGE, 18, c4 - 1, 'grid.gender')
        y += 6

        self._field(c1, y, 'Phone:', fmt.text(patient.phone), GREEN, 15, c2 - 1, 'grid.phone')
        self._field(c2, y, 'Address:', fmt.address(patient), PURPLE, 25, c3 - 1, 'grid.address')
        self._field(c3, y, 'Visit No.:', fmt.visit_number(record), BLUE, 18, c4 - 1, 'grid.visit_no')
        y += 6

        self._field(c1, y, 'Weight:', fmt.weight(record), DARK_RED, 15, c2 - 1, 'grid.weight')
        self._field(c3, y, 'Height:', fmt.height(record), DARK_RED, 18, c4 - 1, 'grid.height')
        return y + 6

    def _photo(self, x, y, role):
        self.layout.add(ImageOp(x, y, PHOTO_W, PHOTO_H, self.assets.photo, role=role,
                                fallback_label=NO_IMAGE))

    def _separator(self, y, role, color=ORANGE):
        self.layout.add(LineOp(10, y, PAGE_WIDTH - 10, y, color, 0.5, role=role))
        return y

    def _clinical_block(self, y):
        record = self.record
        left, right = 15, 140
        size = 8

        self._field(left, y, 'Temperament:', fmt.text(record.temperament), BLUE, 25, right - 1,
                    'clinical.temperament', size, MONO_OBLIQUE)
        y += 5
        self._field(left, y, 'Pulse Diagnosis:', fmt.pulse_diagnosis(record), GREEN, 28, right - 1,
                    'clinical.pulse', size, MONO_OBLIQUE)
        y += 5

        history_y = y
        self.layout.add(TextOp(left, y, 'History/Reports:', size, BLACK, SANS_BOLD,
                               role='clinical.history.label'))
        lines = wrap(fmt.text(record.history_reports), 85, MONO_OBLIQUE, size)
        for i, line in enumerate(lines):
            self.layout.add(TextOp(left + 28, y + i * 4, line, size, DARK_RED, MONO_OBLIQUE,
                                   role='clinical.history'))
        y += max(5, len(lines) * 4)

        self._field(left, y, 'Major Complaints:', fmt.text(record.major_complaints), PURPLE, 30,
                    right - 1, 'clinical.complaints', size, MONO_OBLIQUE)
        y += 5
        self._field(left, y, 'Improvement:', fmt.text(record.improvements), ORANGE, 25, right - 1,
                    'clinical.improvement', size, MONO_OBLIQUE)

        # right column sits level with history and complaints
        self._field(right, history_y, 'Investigation:', fmt.text(record.investigations), TEAL, 25,
                    PAGE_WIDTH - 10, 'clinical.investigation', size, MONO_OBLIQUE)
        self._field(right, history_y + 5, 'Prov. Diagnosis:', fmt.text(record.provisional_diagnosis),
                    MAROON, 28, PAGE_WIDTH - 10, 'clinical.provisional', size, MONO_OBLIQUE)
        return y + 5

    def _diagnosis(self, y):
        self.layout.add(TextOp(15, y, 'DISC:', 9, DARK_RED, SANS_BOLD, role='diagnosis.label'))
        value = fit(fmt.text(self.record.provisional_diagnosis), PAGE_WIDTH - 40, MONO_OBLIQUE, 9)
        self.layout.add(TextOp(30, y, value, 9, BLUE, MONO_OBLIQUE, role='diagnosis'))
        return y + 6

    def _table(self, y, name, columns, row_h, size, show_header):
        record = self.record
        total_w = sum(c.width for c in columns)

        if show_header:
            x = TABLE_X
            for col in columns:
                self.layout.add(TextOp(x + col.width / 2, y + row_h - 1,
                                       fit(col.title, col.width - 0.5, SANS_BOLD, size - 1),
                                       size - 1, HEADER_GREY, SANS_BOLD, 'center',
                                       role=f"{name}.header.{col.key}"))
                x += col.width
            y += row_h

        if not record.lines:
            self.layout.add(TextOp(TABLE_X + total_w / 2, y + row_h - 1, NO_MEDICATIONS, size, GREY,
                                   SANS_BOLD, 'center', role=f"{name}.empty"))
            return y + row_h

        for index, line in enumerate(record.lines):
            cells = line_cells(record, line, index, self.schema)
            if name == 'secondary':
                cells['units'] = fmt.fmt_number(fmt.units_remaining(record, line))
            else:
                # component cells stay blank here for handwritten notes
                for key in ('comp1', 'comp2', 'comp3', 'comp4', 'comp5'):
                    if key in cells:
                        cells[key] = ''
            x = TABLE_X
            for col in columns:
                font = SANS_BOLD if (col.bold or name == 'primary') else SANS
                value = fit(cells.get(col.key, ''), col.width - 1, font, size)
                color = self._cell_color(name, col, line)
                if col.align == 'left':
                    tx = x + 0.5
                else:
                    tx = x + col.width / 2
                self.layout.add(TextOp(tx, y + row_h - 1, value, size, color, font, col.align,
                                       role=f"{name}.{col.key}"))
                x += col.width
            y += row_h
        return y

    def _cell_color(self, table, col, line):
        if col.key == 'units':
            # out of stock
            return RED if fmt.units_remaining(self.record, line) <= 0 else BLACK
        if table == 'secondary' and col.key.startswith('comp'):
            return RED if line.patient_has_medicine else GREEN
        return col.color

    def _separator_band(self, y):
        self.layout.add(ImageOp(0, y + 1, PAGE_WIDTH, SEPARATOR_BAND_HEIGHT, self.assets.separator,
                                role='separator'))
        y += SEPARATOR_BAND_HEIGHT + 2
        self.layout.add(LineOp(0, y, PAGE_WIDTH, y, BLUE, 0.5, role='rule.accent'))
        return y + 5

    def _summary_field(self, x, y, label, value, color, width, role):
        self.layout.add(TextOp(x, y - 2, label, 6, BLACK, SANS_BOLD, role=f"{role}.label"))
        self.layout.add(TextOp(x, y + 2, fit(value, width, SANS_BOLD, 9), 9, color, SANS_BOLD,
                               role=role))

    def _summary_block(self, y):
        """Second identity summary; duplicates part of the header grid on purpose."""
        record, patient = self.record, self.record.patient
        top = y

        self.layout.add(RectOp(12, y - 4, 13, 4, fill=LIGHT_GREEN, role='summary.opd_badge'))
        row1 = [
            (14, 'OPDN:', fmt.cell(fmt.summary_opd_no(record)), BLUE, 'summary.opd_no'),
            (45, 'Patient Name:', fmt.text(fmt.patient_name(patient)), RED, 'summary.name'),
            (88, 'Visit No.:', fmt.visit_number(record), GREEN, 'summary.visit_no'),
            (108, 'Phone:', fmt.text(patient.phone), PURPLE, 'summary.phone'),
            (135, 'Father:', fmt.text(patient.guardian_name), ORANGE, 'summary.guardian'),
            (160, 'Address:', fmt.text(patient.address), BLUE, 'summary.address'),
        ]
        self._summary_row(y, row1, last_edge=183)
        y += 7

        self._summary_row(y, [
            (14, 'Temperament:', fmt.text(record.temperament), PURPLE, 'summary.temperament'),
            (80, 'DOB:', fmt.fmt_date(patient.date_of_birth), GREEN, 'summary.dob'),
            (145, 'Age:', fmt.age(record), GREEN, 'summary.age'),
        ], last_edge=183)
        y += 7
        self._summary_row(y, [
            (14, 'Pulse:', fmt.pulse_diagnosis(record), BLUE, 'summary.pulse'),
            (80, 'Date:', fmt.fmt_date(record.date), DARK_RED, 'summary.date'),
            (145, 'History:', fmt.text(record.history_reports), GREEN, 'summary.history'),
        ], last_edge=183)
        y += 7
        self._summary_row(y, [
            (14, 'Gender:', fmt.text(patient.gender), ORANGE, 'summary.gender'),
            (80, 'Next Visit:', fmt.fmt_date(record.next_visit), DARK_RED, 'summary.next_visit'),
            (145, 'Complaints:', fmt.text(record.major_complaints), BLUE, 'summary.complaints'),
        ], last_edge=PAGE_WIDTH - 10)
        y += 7
        self._summary_row(y, [
            (14, 'Improvements:', fmt.text(record.improvements), GREEN, 'summary.improvements'),
            (110, 'Prov. Diagnosis:', fmt.text(record.provisional_diagnosis), BLUE,
             'summary.provisional'),
        ], last_edge=PAGE_WIDTH - 10)

        self._photo(185, top - 2, 'photo.summary')
        return y + 4

    def _summary_row(self, y, fields, last_edge):
        for i, (x, label, value, color, role) in enumerate(fields):
            edge = fields[i + 1][0] if i + 1 < len(fields) else last_edge
            self._summary_field(x, y, label, value, color, edge - x - 1, role)

    def _totals(self, y):
        record = self.record
        self.layout.add(RectOp(TABLE_X - 2, y - 5, PAGE_WIDTH - 28, 7, fill=LIGHT_GREEN,
                               role='totals.band'))
        self.layout.add(TextOp(TABLE_X + 5, y, fmt.fmt_number(fmt.total_units_remaining(record)),
                               7, BLACK, SANS_BOLD, 'center', role='totals.units'))
        self.layout.add(TextOp(TABLE_X + 20, y, str(len(record.lines)), 7, BLACK, SANS_BOLD,
                               'center', role='totals.count'))
        self.layout.add(TextOp(TABLE_X + 70, y, f"{fmt.days_until_next_visit(record)} DAYS", 7,
                               BLACK, SANS_BOLD, role='totals.days'))
        self.layout.add(TextOp(PAGE_WIDTH - 14, y, fmt.fmt_money(fmt.final_amount(record)), 7,
                               BLACK, SANS_BOLD, 'right', role='totals.amount'))

    def _footer(self):
        if self.footer_caption:
            self.layout.add(TextOp(PAGE_WIDTH / 2, PAGE_HEIGHT - 10, self.footer_caption, 6, GREY,
                                   SANS, 'center', role='footer'))
        if self.label is None:
            return
        y = 10 if self.label == PATIENT else PAGE_HEIGHT - 5
        self.layout.add(TextOp(PAGE_WIDTH / 2, y, f"{self.label} COPY", 14,
                               LABEL_COLORS[self.label], SANS_BOLD, 'center', role='copy_label'))


def compose(record, schema, assets=None, label=None, footer_caption='') -> Layout:
    return LayoutComposer(record, schema, assets, label, footer_caption).compose()
