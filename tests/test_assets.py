"""Asset loading never raises; failures leave the slot empty."""
import requests
from PIL import Image

from conftest import png_bytes, png_data_uri

from rxprint.rendering.assets import AssetLoader, faded


def test_remote_image_is_loaded(fake_session):
    fake_session.routes['https://cdn.example/header.png'] = png_bytes()
    loader = AssetLoader(timeout=3, session=fake_session)

    image = loader.load('https://cdn.example/header.png')

    assert image.mode == 'RGBA'
    assert image.size == (40, 20)
    assert fake_session.calls == [('https://cdn.example/header.png', 3)]


def test_http_error_gives_none(fake_session):
    fake_session.routes['https://cdn.example/missing.png'] = 404
    assert AssetLoader(session=fake_session).load('https://cdn.example/missing.png') is None


def test_timeout_gives_none(fake_session):
    fake_session.routes['https://cdn.example/slow.png'] = requests.Timeout('read timed out')
    assert AssetLoader(session=fake_session).load('https://cdn.example/slow.png') is None


def test_decode_error_gives_none(fake_session):
    fake_session.routes['https://cdn.example/broken.png'] = b'not an image'
    assert AssetLoader(session=fake_session).load('https://cdn.example/broken.png') is None


def test_data_uri():
    image = AssetLoader().load(png_data_uri(size=(8, 6)))
    assert image.size == (8, 6)


def test_non_base64_data_uri_gives_none():
    assert AssetLoader().load('data:text/plain,hello') is None


def test_static_path(tmp_path):
    (tmp_path / 'images').mkdir()
    Image.new('RGB', (5, 5), 'blue').save(tmp_path / 'images' / 'header.png')
    loader = AssetLoader(static_folder=str(tmp_path))

    assert loader.load('images/header.png').size == (5, 5)
    assert loader.load('/images/header.png').size == (5, 5)
    assert loader.load('images/nope.png') is None


def test_empty_url_gives_none(fake_session):
    assert AssetLoader(session=fake_session).load(None) is None
    assert AssetLoader(session=fake_session).load('') is None
    assert fake_session.calls == []


def test_photo_falls_back_to_default(fake_session):
    fake_session.routes['https://cdn.example/photo.jpg'] = b'garbage'
    fake_session.routes['https://cdn.example/default.png'] = png_bytes(size=(3, 4))
    loader = AssetLoader(session=fake_session)

    photo = loader.load_photo('https://cdn.example/photo.jpg', 'https://cdn.example/default.png')

    assert photo.size == (3, 4)


def test_photo_without_any_source(fake_session):
    loader = AssetLoader(session=fake_session)
    assert loader.load_photo('https://cdn.example/a.png', 'https://cdn.example/b.png') is None


def test_one_failure_does_not_affect_other_assets(fake_session):
    fake_session.routes['https://cdn.example/header.png'] = 500
    fake_session.routes['https://cdn.example/wm.png'] = png_bytes()
    loader = AssetLoader(session=fake_session)

    bundle = loader.load_bundle(header_url='https://cdn.example/header.png',
                                watermark_url='https://cdn.example/wm.png')

    assert bundle.header is None
    assert bundle.watermark is not None
    assert bundle.separator is None
    assert bundle.photo is None


def test_faded_scales_alpha():
    image = Image.new('RGBA', (2, 2), (10, 20, 30, 200))
    assert faded(image, 0.5).getpixel((0, 0)) == (10, 20, 30, 100)
    assert image.getpixel((0, 0))[3] == 200
    assert faded(image, 1) is image


def test_oversized_image_gives_none(fake_session, monkeypatch):
    # 40x20 is over twice this limit, which Pillow treats as a decompression bomb
    monkeypatch.setattr(Image, 'MAX_IMAGE_PIXELS', 100)
    fake_session.routes['https://cdn.example/huge.png'] = png_bytes()
    loader = AssetLoader(session=fake_session)

    assert loader.load('https://cdn.example/huge.png') is None


def test_oversized_photo_falls_back_to_default(fake_session, monkeypatch):
    monkeypatch.setattr(Image, 'MAX_IMAGE_PIXELS', 100)
    fake_session.routes['https://cdn.example/photo.png'] = png_bytes(size=(40, 20))
    fake_session.routes['https://cdn.example/default.png'] = png_bytes(size=(5, 5))
    loader = AssetLoader(session=fake_session)

    photo = loader.load_photo('https://cdn.example/photo.png', 'https://cdn.example/default.png')

    assert photo.size == (5, 5)
