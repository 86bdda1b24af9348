"""Pytest fixtures: synthetic pixel buffers and encoded uploads."""
import io

import numpy as np
import pytest
from PIL import Image

from sharpener.models.image_model import UploadedImage
from sharpener.services.errors import CanvasUnavailableError, DecodeError, EncodeError


def rgba(h, w, value=(128, 128, 128, 255)):
    pixels = np.empty((h, w, 4), dtype=np.uint8)
    pixels[...] = value
    return pixels


def encode_png(pixels):
    buf = io.BytesIO()
    Image.fromarray(pixels).save(buf, format="PNG")
    return buf.getvalue()


def make_upload(name, data, upload_id=None):
    return UploadedImage(
        id=upload_id or name[:9],
        source_bytes=data,
        display_name=name,
        size_bytes=len(data),
    )


@pytest.fixture
def spot_image():
    """5x5 gray 100 with a single bright pixel 200 in the centre."""
    pixels = rgba(5, 5, (100, 100, 100, 255))
    pixels[2, 2, :3] = 200
    return pixels


@pytest.fixture
def noisy_image():
    rng = np.random.default_rng(1234)
    pixels = rng.integers(0, 256, size=(12, 9, 4), dtype=np.uint8)
    return pixels


@pytest.fixture
def png_upload():
    def factory(name, pixels=None):
        if pixels is None:
            pixels = rgba(6, 8, (90, 120, 150, 255))
            pixels[3, 4, :3] = (250, 10, 40)
        return make_upload(name, encode_png(pixels))
    return factory


@pytest.fixture
def broken_upload():
    return make_upload("broken.png", b"this is not an image at all")


class FakeCodec:
    """Codec stand-in: the upload bytes name the failure to simulate."""

    def __init__(self):
        self.decoded = []

    def decode(self, data):
        self.decoded.append(data)
        if data == b"bad":
            raise DecodeError("bad bytes")
        return data

    def rasterize(self, bitmap):
        if bitmap == b"huge":
            raise CanvasUnavailableError("too big")
        return rgba(2, 3, (len(bitmap), 0, 0, 255))

    def encode(self, pixels):
        if pixels[0, 0, 0] == len(b"unencodable"):
            raise EncodeError("nope")
        return b"encoded-%d" % int(pixels[0, 0, 0])


def rotated_jpeg(size=(8, 4), orientation=6):
    """JPEG whose EXIF says the stored pixels must be rotated for display."""
    exif = Image.Exif()
    exif[0x0112] = orientation
    buf = io.BytesIO()
    Image.new("RGB", size, (200, 30, 30)).save(buf, format="JPEG", exif=exif)
    return buf.getvalue()
