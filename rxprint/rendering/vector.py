"""
Vector PDF backend (ReportLab canvas).

Draws the composed layout twice into one A4 document: PATIENT copy on
page 1, OFFICE copy on page 2, both from the same column schema.
"""
import logging
from io import BytesIO

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont
from reportlab.pdfgen import canvas

from . import formatting as fmt
from .assets import AssetLoader, faded
from .column_schema import resolve
from .document import DocumentGenerationError, GeneratedDocument, RenderSettings
from .layout import COPY_LABELS, ImageOp, LineOp, RectOp, TextOp, compose

logger = logging.getLogger(__name__)

UNICODE_FONT = 'RxUnicode'


def _rgb(color):
    return tuple(c / 255 for c in color)


def register_unicode_font(font_path):
    """Register a TTF for strings outside Latin-1 (the rupee sign). Returns its name or None."""
    if not font_path:
        return None
    if UNICODE_FONT in pdfmetrics.getRegisteredFontNames():
        return UNICODE_FONT
    try:
        pdfmetrics.registerFont(TTFont(UNICODE_FONT, font_path))
        return UNICODE_FONT
    except (OSError, TTFError) as e:
        logger.warning(f"Could not register PDF font {font_path}: {e}")
        return None


class CanvasRenderer:
    """Executes layout instructions on a ReportLab canvas."""

    def __init__(self, pdf, unicode_font=None):
        self.pdf = pdf
        self.unicode_font = unicode_font
        self.page_height = A4[1]

    def _y(self, y_mm):
        return self.page_height - y_mm * mm

    def draw(self, layout):
        for op in layout.ops:
            if isinstance(op, ImageOp):
                self._image(op)
            elif isinstance(op, RectOp):
                self._rect(op)
            elif isinstance(op, LineOp):
                self._line(op)
            elif isinstance(op, TextOp):
                self._text(op)

    def _image(self, op):
        # A missing asset leaves its space empty; the vector path draws no placeholder.
        if op.image is None:
            return
        image = faded(op.image, op.opacity)
        self.pdf.drawImage(ImageReader(image), op.x * mm, self._y(op.y + op.h),
                           width=op.w * mm, height=op.h * mm, mask='auto')

    def _rect(self, op):
        if op.fill:
            self.pdf.setFillColorRGB(*_rgb(op.fill))
        if op.stroke:
            self.pdf.setStrokeColorRGB(*_rgb(op.stroke))
        self.pdf.rect(op.x * mm, self._y(op.y + op.h), op.w * mm, op.h * mm,
                      fill=1 if op.fill else 0, stroke=1 if op.stroke else 0)

    def _line(self, op):
        self.pdf.setStrokeColorRGB(*_rgb(op.color))
        self.pdf.setLineWidth(op.width * mm)
        self.pdf.line(op.x1 * mm, self._y(op.y1), op.x2 * mm, self._y(op.y2))

    def _font(self, op):
        if self.unicode_font and any(ord(ch) > 255 for ch in op.text):
            return self.unicode_font
        return op.font

    def _text(self, op):
        if not op.text:
            return
        self.pdf.setFont(self._font(op), op.size)
        self.pdf.setFillColorRGB(*_rgb(op.color))
        x, y = op.x * mm, self._y(op.y)
        if op.align == 'center':
            self.pdf.drawCentredString(x, y, op.text)
        elif op.align == 'right':
            self.pdf.drawRightString(x, y, op.text)
        else:
            self.pdf.drawString(x, y, op.text)


def generate(record, loader: AssetLoader, settings: RenderSettings) -> GeneratedDocument:
    """
    Build the two-copy prescription PDF for a visit.

    Args:
        record: VisitRecord
        loader: AssetLoader used for header, watermark, separator and photo
        settings: RenderSettings

    Returns:
        GeneratedDocument with the download filename and PDF bytes

    Raises:
        DocumentGenerationError: composition failed; no partial file is returned
    """
    try:
        schema = resolve(record.lines)
        assets = loader.load_bundle(
            header_url=settings.header_url,
            watermark_url=settings.watermark_url,
            separator_url=settings.separator_url,
            photo_url=record.patient.photo_url,
            default_photo_url=settings.default_photo_url,
        )

        buffer = BytesIO()
        pdf = canvas.Canvas(buffer, pagesize=A4)
        pdf.setTitle(fmt.filename(record)[:-len('.pdf')])
        renderer = CanvasRenderer(pdf, register_unicode_font(settings.font_path))

        for label in COPY_LABELS:
            layout = compose(record, schema, assets, label, settings.footer_caption)
            renderer.draw(layout)
            pdf.showPage()
        pdf.save()

        logger.info(f"Prescription PDF generated for visit {record.id} ({len(record.lines)} lines)")
        return GeneratedDocument(fmt.filename(record), buffer.getvalue(), page_count=len(COPY_LABELS))
    except Exception as e:
        logger.error(f"Error generating PDF for visit {record.id}: {e}", exc_info=True)
        raise DocumentGenerationError() from e
