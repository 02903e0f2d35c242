import re

import pytest
from PIL import Image

from rxprint.rendering import raster
from rxprint.rendering.assets import AssetBundle, AssetLoader
from rxprint.rendering.column_schema import resolve
from rxprint.rendering.document import DocumentGenerationError, RenderSettings
from rxprint.rendering.layout import compose

RED = (255, 0, 0, 255)


def _view(record, **assets):
    return raster.PrescriptionView(compose(record, resolve(record.lines), AssetBundle(**assets)))


def _px(value_mm, scale=1):
    return int(round(value_mm * raster.PX_PER_MM * scale))


def test_capture_size_scales_with_density(record):
    view = _view(record)
    single = raster.capture(view, scale=1)
    double = raster.capture(view, scale=2)

    assert single.mode == 'RGB'
    assert single.size == (_px(210), _px(297))
    assert double.size == (_px(210, 2), _px(297, 2))


def test_background_is_opaque_white(record):
    bitmap = raster.capture(_view(record), scale=1)
    assert bitmap.getpixel((2, bitmap.height // 2)) == (255, 255, 255)


def test_header_is_painted(record):
    bitmap = raster.capture(_view(record, header=Image.new('RGBA', (50, 10), RED)), scale=1)
    assert bitmap.getpixel((_px(100), _px(10))) == (255, 0, 0)


def test_letterhead_flag_hides_header_but_keeps_layout(record):
    view = _view(record, header=Image.new('RGBA', (50, 10), RED))
    plain = raster.capture(view, scale=1)
    view.letterhead = True
    letterhead = raster.capture(view, scale=1)

    assert letterhead.getpixel((_px(100), _px(10))) == (255, 255, 255)
    # everything below the header band is unchanged
    band = (0, _px(40), plain.width, plain.height)
    assert plain.crop(band).tobytes() == letterhead.crop(band).tobytes()


def test_letterhead_keeps_patient_photo(record):
    view = _view(record, photo=Image.new('RGBA', (12, 16), RED))
    view.letterhead = True
    photo = view.layout.images('photo.summary')[0]
    bitmap = raster.capture(view, scale=1)
    assert bitmap.getpixel((_px(photo.x + photo.w / 2), _px(photo.y + photo.h / 2))) == (255, 0, 0)


def test_missing_photo_draws_placeholder_box(record):
    view = _view(record)
    photo = view.layout.images('photo.grid')[0]
    bitmap = raster.capture(view, scale=1)
    assert bitmap.getpixel((_px(photo.x), _px(photo.y + photo.h / 3))) == raster.PLACEHOLDER_BORDER


def test_capture_and_save_single_page(record):
    document = raster.capture_and_save(_view(record), record, RenderSettings(raster_scale=1))

    assert document.content.startswith(b'%PDF')
    assert document.page_count == 1
    assert len(re.findall(rb'/Type /Page(?!s)', document.content)) == 1
    assert document.filename == 'Asha Verma V-7.pdf'


def test_capture_and_save_failure(record, monkeypatch):
    def broken_capture(*args, **kwargs):
        raise OSError('no memory for bitmap')

    monkeypatch.setattr(raster, 'capture', broken_capture)
    with pytest.raises(DocumentGenerationError):
        raster.capture_and_save(_view(record), record, RenderSettings())


def test_build_view_has_no_copy_label(record, fake_session):
    view = raster.build_view(record, AssetLoader(session=fake_session), RenderSettings())
    assert view.layout.label is None
    assert view.layout.find('copy_label') == []
    assert view.letterhead is False
