import io

import numpy as np
import pytest
from PIL import Image

from conftest import FakeCodec, make_upload, rotated_jpeg
from sharpener.models.image_model import FilterSettings, ToneSettings
from sharpener.services.errors import CanvasUnavailableError, DecodeError, EncodeError
from sharpener.services.image_processor import ImageProcessor, grayscale_processor, sharpening_processor


ERRORS = [(b"bad", DecodeError), (b"huge", CanvasUnavailableError), (b"unencodable", EncodeError)]


def identity(pixels, _settings):
    return pixels


@pytest.fixture
def processor():
    return ImageProcessor(FakeCodec(), identity, "out-")


def test_process_names_output_with_prefix(processor):
    result = processor.process(make_upload("a.png", b"abcd"), FilterSettings())
    assert result.output_name == "out-a.png"
    assert result.output_bytes == b"encoded-4"


@pytest.mark.parametrize("data,error", ERRORS)
def test_process_raises_typed_errors_with_file_name(processor, data, error):
    with pytest.raises(error) as info:
        processor.process(make_upload("x.png", data), FilterSettings())
    assert info.value.file_name == "x.png"
    assert "x.png" in str(info.value)


@pytest.mark.parametrize("data,error", ERRORS)
def test_try_process_turns_every_file_error_into_failed_outcome(processor, data, error):
    outcome = processor.try_process(make_upload("x.png", data), FilterSettings())
    assert not outcome.ok
    assert outcome.result is None
    assert isinstance(outcome.error, error)
    assert outcome.error.file_name == "x.png"


def test_try_process_success(processor):
    outcome = processor.try_process(make_upload("y.png", b"fine"), FilterSettings())
    assert outcome.ok
    assert outcome.error is None
    assert outcome.result.output_name == "out-y.png"


def test_try_process_propagates_unexpected_errors():
    def boom(_pixels, _settings):
        raise RuntimeError("bug")

    processor = ImageProcessor(FakeCodec(), boom, "out-")
    with pytest.raises(RuntimeError):
        processor.try_process(make_upload("a.png", b"ok"), FilterSettings())


def test_filter_receives_settings():
    seen = []

    def record(pixels, settings):
        seen.append(settings)
        return pixels

    settings = FilterSettings(strength=10, radius=2, threshold=1)
    ImageProcessor(FakeCodec(), record, "p-").process(make_upload("a.png", b"ok"), settings)
    assert seen == [settings]


def test_preview_processes_only_first_file():
    codec = FakeCodec()
    processor = ImageProcessor(codec, identity, "out-")
    uploads = [make_upload("first.png", b"one"), make_upload("second.png", b"two")]
    result = processor.preview(uploads, FilterSettings())
    assert result.output_name == "out-first.png"
    assert codec.decoded == [b"one"]


def test_preview_empty_list(processor):
    assert processor.preview([], FilterSettings()) is None


def test_sharpening_processor_end_to_end(png_upload):
    result = sharpening_processor().process(png_upload("photo.png"), FilterSettings(strength=80, radius=1))
    assert result.output_name == "sharpened-photo.png"
    with Image.open(io.BytesIO(result.output_bytes)) as decoded:
        assert decoded.format == "JPEG"
        assert decoded.size == (8, 6)


def test_grayscale_processor_end_to_end(png_upload):
    result = grayscale_processor().process(png_upload("photo.png"), ToneSettings("standard", 100))
    assert result.output_name == "grayscale-photo.png"
    with Image.open(io.BytesIO(result.output_bytes)) as decoded:
        assert decoded.format == "PNG"
        pixels = np.array(decoded.convert("RGBA"))
    assert (pixels[..., 0] == pixels[..., 1]).all()
    assert (pixels[..., 1] == pixels[..., 2]).all()


def test_sharpening_processor_applies_exif_orientation():
    result = sharpening_processor().process(make_upload("phone.jpg", rotated_jpeg()), FilterSettings())
    with Image.open(io.BytesIO(result.output_bytes)) as decoded:
        assert decoded.size == (4, 8)
