from .assets import AssetBundle, AssetLoader
from .column_schema import ColumnSchema, resolve
from .document import DocumentGenerationError, GeneratedDocument, RenderSettings
from .layout import COPY_LABELS, OFFICE, PATIENT, Layout, compose
from .printing import LETTERHEAD, PLAIN, PRINT_MODES, HtmlPrintSurface, print_captured
from .raster import PrescriptionView, build_view, capture, capture_and_save
from .records import PatientRef, PrescriptionLine, ProductRef, VisitRecord
from .vector import generate

__all__ = [
    'AssetBundle', 'AssetLoader',
    'ColumnSchema', 'resolve',
    'DocumentGenerationError', 'GeneratedDocument', 'RenderSettings',
    'COPY_LABELS', 'OFFICE', 'PATIENT', 'Layout', 'compose',
    'LETTERHEAD', 'PLAIN', 'PRINT_MODES', 'HtmlPrintSurface', 'print_captured',
    'PrescriptionView', 'build_view', 'capture', 'capture_and_save',
    'PatientRef', 'PrescriptionLine', 'ProductRef', 'VisitRecord',
    'generate',
]
