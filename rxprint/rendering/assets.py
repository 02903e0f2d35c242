"""
Bitmap asset loading for the prescription document.

A failed asset never aborts a document: every failure is logged and the
caller receives None, leaving that asset's space blank.
"""
import base64
import logging
import os
from dataclasses import dataclass
from io import BytesIO
from typing import Optional

import requests
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5


@dataclass
class AssetBundle:
    """The images one document needs. Any of them may be None."""
    header: Optional[Image.Image] = None
    watermark: Optional[Image.Image] = None
    separator: Optional[Image.Image] = None
    photo: Optional[Image.Image] = None


def faded(image, opacity):
    """Copy of an RGBA image with its alpha channel scaled by opacity."""
    if opacity >= 1:
        return image
    image = image.convert('RGBA')
    alpha = image.getchannel('A').point(lambda a: int(a * opacity))
    image.putalpha(alpha)
    return image


class AssetLoader:
    """
    Load images from http(s) URLs, data: URIs or paths under static_folder.

    Remote fetches go out without credentials, like an anonymous
    cross-origin image load in a browser.
    """

    def __init__(self, static_folder=None, timeout=DEFAULT_TIMEOUT, session=None):
        self.static_folder = static_folder
        self.timeout = timeout
        self.session = session or requests

    def load(self, url) -> Optional[Image.Image]:
        if not url:
            return None
        try:
            raw = self._read(url)
            image = Image.open(BytesIO(raw))
            image.load()
            return image.convert('RGBA')
        except (requests.RequestException, OSError, UnidentifiedImageError,
                Image.DecompressionBombError, ValueError) as e:
            logger.warning(f"Asset load failed for {self._describe(url)}: {e}")
            return None

    def load_photo(self, url, default_url) -> Optional[Image.Image]:
        """Patient photo: primary URL, then the default placeholder, then None."""
        image = self.load(url)
        if image is None and default_url and default_url != url:
            image = self.load(default_url)
        return image

    def load_bundle(self, header_url=None, watermark_url=None, separator_url=None,
                    photo_url=None, default_photo_url=None) -> AssetBundle:
        # One at a time, in block order.
        return AssetBundle(
            header=self.load(header_url),
            watermark=self.load(watermark_url),
            separator=self.load(separator_url),
            photo=self.load_photo(photo_url, default_photo_url),
        )

    def _read(self, url):
        if url.startswith(('http://', 'https://')):
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            return response.content
        if url.startswith('data:'):
            header, _, payload = url.partition(',')
            if ';base64' not in header:
                raise ValueError('only base64 data URIs are supported')
            return base64.b64decode(payload)
        path = url
        if self.static_folder and (not os.path.isabs(url) or not os.path.exists(url)):
            path = os.path.join(self.static_folder, url.lstrip('/'))
        with open(path, 'rb') as f:
            return f.read()

    @staticmethod
    def _describe(url):
        return url if not url.startswith('data:') else 'data URI'
