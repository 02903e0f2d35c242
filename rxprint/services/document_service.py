"""
Document Service
Loads a visit and drives the rendering backends for the HTTP layer
"""
import logging
from typing import List, Optional

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from rxprint.models import Product, Visit
from rxprint.rendering import (
    AssetLoader,
    GeneratedDocument,
    HtmlPrintSurface,
    RenderSettings,
    VisitRecord,
    build_view,
    capture_and_save,
    generate,
    print_captured,
)
from rxprint.utils.audit import EXPORT_CAPTURE, EXPORT_PDF, PRINT, log_visit_document

logger = logging.getLogger(__name__)


def get_visit(visit_id: int) -> Optional[Visit]:
    """Get a visit that has not been soft-deleted"""
    return Visit.query.filter_by(id=visit_id, deleted_at=None).first()


def _load_products() -> List[Product]:
    """
    All products, for medicine names and stock units.

    A failing lookup degrades to an empty list: names fall back to the
    treatment plan and stock counts as zero.
    """
    try:
        return Product.query.all()
    except SQLAlchemyError as e:
        logger.warning(f"Product lookup failed, rendering without products: {e}")
        return []


def load_visit_record(visit_id: int) -> Optional[VisitRecord]:
    """
    Snapshot a visit for rendering

    Args:
        visit_id: Visit ID

    Returns:
        VisitRecord, or None when the visit does not exist
    """
    visit = get_visit(visit_id)
    if visit is None:
        return None
    return VisitRecord.from_source(visit, products=_load_products())


def render_settings() -> RenderSettings:
    return RenderSettings.from_config(current_app.config)


def asset_loader(settings: RenderSettings) -> AssetLoader:
    return AssetLoader(static_folder=current_app.static_folder, timeout=settings.asset_timeout)


def generate_prescription_pdf(record: VisitRecord) -> GeneratedDocument:
    """
    Two-page vector prescription (PATIENT copy, then OFFICE copy).

    Raises:
        DocumentGenerationError: rendering failed
    """
    settings = render_settings()
    document = generate(record, asset_loader(settings), settings)
    log_visit_document(record.id, EXPORT_PDF, document.filename, pages=document.page_count)
    return document


def capture_prescription_pdf(record: VisitRecord) -> GeneratedDocument:
    """
    One-page PDF captured from the on-screen prescription view.

    Raises:
        DocumentGenerationError: rendering failed
    """
    settings = render_settings()
    view = build_view(record, asset_loader(settings), settings)
    document = capture_and_save(view, record, settings)
    log_visit_document(record.id, EXPORT_CAPTURE, document.filename, pages=document.page_count)
    return document


def print_prescription(record: VisitRecord, mode: str,
                       surface: Optional[HtmlPrintSurface] = None) -> Optional[HtmlPrintSurface]:
    """
    Capture the prescription view into a print surface.

    Returns:
        The written surface, or None when capture or the surface failed

    Raises:
        ValueError: unknown print mode
    """
    settings = render_settings()
    view = build_view(record, asset_loader(settings), settings)
    surface = print_captured(
        view,
        mode,
        surface if surface is not None else HtmlPrintSurface(),
        scale=settings.raster_scale,
        page_size=settings.print_page_size,
        font_path=settings.font_path,
    )
    if surface is not None:
        log_visit_document(record.id, PRINT, mode=mode)
    return surface
