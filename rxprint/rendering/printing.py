"""
Print dispatcher

Captures the prescription view and hands the bitmap to a throwaway print
surface: a bare HTML page holding one full-bleed image that opens the
browser print dialog when the image loads and closes itself afterwards.
"""
import base64
import logging
from io import BytesIO

from . import raster

logger = logging.getLogger(__name__)

LETTERHEAD = 'letterhead'
PLAIN = 'plain'
PRINT_MODES = (LETTERHEAD, PLAIN)

PAGE_SIZES = {
    'A4': ('210mm', '297mm'),
    'LETTER': ('8.5in', '11in'),
}


class HtmlPrintSurface:
    """
    An unmanaged output window. `open()` returns False when the host refuses
    a new surface (the popup-blocked case).

    `close()` ends writing to the document; it does not dismiss the window.
    The written page does that itself from its onload handler, after the
    print dialog returns.
    """

    def __init__(self, allow_open=True):
        self.allow_open = allow_open
        self._chunks = []
        self.opened = False
        self.closed = False

    def open(self):
        if not self.allow_open:
            return False
        self.opened = True
        return True

    def write(self, html):
        if not self.opened or self.closed:
            raise RuntimeError('print surface is not open')
        self._chunks.append(html)

    def close(self):
        self.closed = True

    @property
    def document(self):
        return ''.join(self._chunks)


def print_page_html(bitmap, page_size='A4'):
    """HTML for one physical page showing `bitmap` edge to edge."""
    width, height = PAGE_SIZES.get(str(page_size).upper(), PAGE_SIZES['A4'])
    buffer = BytesIO()
    bitmap.save(buffer, format='PNG')
    data = base64.b64encode(buffer.getvalue()).decode('ascii')
    return (
        '<!DOCTYPE html>\n'
        '<html><head><title>Prescription</title>\n'
        '<style>\n'
        f'@page {{ size: {width} {height}; margin: 0; }}\n'
        'html, body { margin: 0; padding: 0; }\n'
        f'img {{ display: block; width: {width}; height: {height}; }}\n'
        '</style></head>\n'
        '<body>\n'
        f'<img src="data:image/png;base64,{data}" onload="window.print(); window.close();" />\n'
        '</body></html>\n'
    )


def print_captured(view, mode, surface, scale=2, page_size='A4', font_path=None):
    """
    Capture `view` and send it to `surface` for printing.

    In letterhead mode the header, separator and watermark are hidden for
    the capture only. The hide flag and the surface are released on every
    path out of this function.

    Returns:
        The surface on success, None if capture or the surface failed.

    Raises:
        ValueError: mode is not one of PRINT_MODES
    """
    if mode not in PRINT_MODES:
        raise ValueError(f"Unknown print mode: {mode}")

    try:
        try:
            view.letterhead = mode == LETTERHEAD
            bitmap = raster.capture(view, scale=scale, font_path=font_path)
        finally:
            view.letterhead = False

        if not surface.open():
            logger.warning("Print surface could not be opened (blocked)")
            return None
        try:
            surface.write(print_page_html(bitmap, page_size))
        finally:
            surface.close()
        logger.info(f"Prescription sent to print surface ({mode})")
        return surface
    except Exception as e:
        logger.error(f"Error printing prescription ({mode}): {e}", exc_info=True)
        return None
