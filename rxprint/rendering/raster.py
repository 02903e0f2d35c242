"""
Raster backend

Paints one composed copy (the on-screen prescription view) onto a Pillow
bitmap and wraps that bitmap in a single-page PDF. Unlike the vector
backend it emits one unlabeled copy only.
"""
import logging
from io import BytesIO

from PIL import Image, ImageDraw, ImageFont
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from . import formatting as fmt
from .assets import AssetLoader, faded
from .column_schema import resolve
from .document import DocumentGenerationError, GeneratedDocument, RenderSettings
from .layout import LETTERHEAD_ROLES, ImageOp, LineOp, RectOp, TextOp, compose

logger = logging.getLogger(__name__)

# 96 dpi screen pixels per millimetre: an A4 page is 794 px wide at scale 1.
PX_PER_MM = 96 / 25.4
PT_PER_MM = 72 / 25.4
BACKGROUND = (255, 255, 255)
PLACEHOLDER_BORDER = (204, 204, 204)
PLACEHOLDER_TEXT = (153, 153, 153)

_ANCHORS = {'left': 'ls', 'center': 'ms', 'right': 'rs'}


class PrescriptionView:
    """
    The rendered prescription sheet as shown on screen.

    Setting `letterhead` hides the header, separator and watermark images
    at capture time; their boxes keep their place so nothing else moves.
    """

    def __init__(self, layout):
        self.layout = layout
        self.letterhead = False

    def visible(self, op):
        return not (self.letterhead and isinstance(op, ImageOp) and op.role in LETTERHEAD_ROLES)


def build_view(record, loader: AssetLoader, settings: RenderSettings) -> PrescriptionView:
    schema = resolve(record.lines)
    assets = loader.load_bundle(
        header_url=settings.header_url,
        watermark_url=settings.watermark_url,
        separator_url=settings.separator_url,
        photo_url=record.patient.photo_url,
        default_photo_url=settings.default_photo_url,
    )
    return PrescriptionView(compose(record, schema, assets, None, settings.footer_caption))


class _Painter:
    def __init__(self, view, scale, font_path):
        self.view = view
        self.k = PX_PER_MM * scale
        self.font_path = font_path
        self._fonts = {}
        layout = view.layout
        self.bitmap = Image.new('RGB', (self.px(layout.width), self.px(layout.height)), BACKGROUND)
        self.draw = ImageDraw.Draw(self.bitmap)

    def px(self, value_mm):
        return int(round(value_mm * self.k))

    def font(self, size_pt):
        size_px = max(1, int(round(size_pt / PT_PER_MM * self.k)))
        if size_px not in self._fonts:
            if self.font_path:
                try:
                    self._fonts[size_px] = ImageFont.truetype(self.font_path, size_px)
                except OSError as e:
                    logger.warning(f"Could not load raster font {self.font_path}: {e}")
                    self.font_path = None
            if size_px not in self._fonts:
                self._fonts[size_px] = ImageFont.load_default(size=size_px)
        return self._fonts[size_px]

    def paint(self):
        for op in self.view.layout.ops:
            if not self.view.visible(op):
                continue
            if isinstance(op, ImageOp):
                self._image(op)
            elif isinstance(op, RectOp):
                self.draw.rectangle(self._box(op.x, op.y, op.w, op.h), fill=op.fill, outline=op.stroke)
            elif isinstance(op, LineOp):
                self.draw.line([(self.px(op.x1), self.px(op.y1)), (self.px(op.x2), self.px(op.y2))],
                               fill=op.color, width=max(1, self.px(op.width)))
            elif isinstance(op, TextOp) and op.text:
                self.draw.text((self.px(op.x), self.px(op.y)), op.text, fill=op.color,
                               font=self.font(op.size), anchor=_ANCHORS.get(op.align, 'ls'))
        return self.bitmap

    def _box(self, x, y, w, h):
        return [self.px(x), self.px(y), self.px(x + w) - 1, self.px(y + h) - 1]

    def _image(self, op):
        if op.image is None:
            if op.fallback_label:
                self.draw.rectangle(self._box(op.x, op.y, op.w, op.h), fill=BACKGROUND,
                                    outline=PLACEHOLDER_BORDER)
                self.draw.text((self.px(op.x + op.w / 2), self.px(op.y + op.h / 2)), op.fallback_label,
                               fill=PLACEHOLDER_TEXT, font=self.font(4), anchor='mm')
            return
        size = (max(1, self.px(op.w)), max(1, self.px(op.h)))
        tile = faded(op.image.convert('RGBA').resize(size), op.opacity)
        self.bitmap.paste(tile, (self.px(op.x), self.px(op.y)), tile)


def capture(view: PrescriptionView, scale=2, font_path=None) -> Image.Image:
    """Capture the view to an opaque RGB bitmap at `scale` x screen density."""
    return _Painter(view, scale, font_path).paint()


def capture_and_save(view: PrescriptionView, record, settings: RenderSettings) -> GeneratedDocument:
    """
    Capture the view and embed it in a one-page A4 PDF.

    The bitmap fills the page width; anything taller than the page is cut.

    Raises:
        DocumentGenerationError: capture or PDF assembly failed
    """
    try:
        bitmap = capture(view, scale=settings.raster_scale, font_path=settings.font_path)
        page_w, page_h = A4
        image_h = bitmap.height * page_w / bitmap.width
        if image_h > page_h:
            bitmap = bitmap.crop((0, 0, bitmap.width, int(bitmap.width * page_h / page_w)))
            image_h = page_h

        buffer = BytesIO()
        pdf = canvas.Canvas(buffer, pagesize=A4)
        pdf.drawImage(ImageReader(bitmap), 0, page_h - image_h, width=page_w, height=image_h)
        pdf.showPage()
        pdf.save()
        return GeneratedDocument(fmt.filename(record), buffer.getvalue(), page_count=1)
    except Exception as e:
        logger.error(f"Error generating PDF from preview for visit {record.id}: {e}", exc_info=True)
        raise DocumentGenerationError() from e
