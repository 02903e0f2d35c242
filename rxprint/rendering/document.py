"""
Output types shared by the rendering backends.
"""
from dataclasses import dataclass
from typing import Optional

GENERATION_FAILED = 'Failed to generate PDF. Please try again.'


class DocumentGenerationError(Exception):
    """A document could not be composed; nothing was emitted."""

    def __init__(self, message=GENERATION_FAILED):
        super().__init__(message)
        self.message = message


@dataclass
class GeneratedDocument:
    filename: str
    content: bytes
    mimetype: str = 'application/pdf'
    page_count: int = 1


@dataclass
class RenderSettings:
    """Asset locations and output tuning, usually built from the Flask config."""
    header_url: Optional[str] = None
    watermark_url: Optional[str] = None
    separator_url: Optional[str] = None
    default_photo_url: Optional[str] = None
    footer_caption: str = ''
    font_path: Optional[str] = None
    raster_scale: float = 2
    print_page_size: str = 'A4'
    asset_timeout: float = 5

    @classmethod
    def from_config(cls, config):
        return cls(
            header_url=config.get('HEADER_IMAGE_URL'),
            watermark_url=config.get('WATERMARK_IMAGE_URL'),
            separator_url=config.get('SEPARATOR_IMAGE_URL'),
            default_photo_url=config.get('DEFAULT_PATIENT_IMAGE_URL'),
            footer_caption=config.get('FOOTER_CAPTION', ''),
            font_path=config.get('PDF_FONT_PATH'),
            raster_scale=config.get('RASTER_SCALE', 2),
            print_page_size=config.get('PRINT_PAGE_SIZE', 'A4'),
            asset_timeout=config.get('ASSET_TIMEOUT', 5),
        )
