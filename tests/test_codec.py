"""Tests for the Pillow image codec."""

import base64
import io

import pytest
from PIL import Image

from canvasintent.codecs import PillowImageCodec
from canvasintent.errors import ImageCodecError
from canvasintent.models import Document, Mode
from canvasintent.pipeline import IntentResolver
from canvasintent.protocols import ImageCodec

from tests.factories import MemoryStore, file


def _png(width: int, height: int, mode: str = "RGB") -> bytes:
    buffer = io.BytesIO()
    Image.new(mode, (width, height), color=(200, 30, 30) if mode == "RGB" else None).save(buffer, format="PNG")
    return buffer.getvalue()


def _decode(payload: str) -> Image.Image:
    return Image.open(io.BytesIO(base64.b64decode(payload)))


@pytest.fixture
def codec() -> PillowImageCodec:
    return PillowImageCodec()


def test_satisfies_protocol(codec):
    assert isinstance(codec, ImageCodec)


def test_large_image_is_downscaled_to_webp(codec):
    data, mime_type = codec.resize_and_encode(_png(400, 200), quality=80, max_dimension=100, path="a.png")

    assert mime_type == "image/webp"
    with _decode(data) as img:
        assert img.format == "WEBP"
        assert img.size == (100, 50)


def test_small_image_is_not_upscaled(codec):
    data, _ = codec.resize_and_encode(_png(40, 30), quality=80, max_dimension=100)
    with _decode(data) as img:
        assert img.size == (40, 30)


def test_palette_image_is_converted(codec):
    data, _ = codec.resize_and_encode(_png(20, 20, mode="P"), quality=50, max_dimension=100)
    with _decode(data) as img:
        assert img.mode in ("RGB", "RGBA")


def test_svg_passes_through(codec):
    svg = b'<svg xmlns="http://www.w3.org/2000/svg"/>'
    data, mime_type = codec.resize_and_encode(svg, quality=80, max_dimension=10, path="icons/logo.svg")

    assert mime_type == "image/svg+xml"
    assert base64.b64decode(data) == svg


@pytest.mark.parametrize("payload", [b"", b"definitely not an image"])
def test_garbage_raises(codec, payload):
    with pytest.raises(ImageCodecError):
        codec.resize_and_encode(payload, quality=80, max_dimension=100, path="bad.png")


@pytest.mark.parametrize(
    "size,limit,expected",
    [
        ((4000, 1000), 2048, (2048, 512)),
        ((1000, 4000), 2048, (512, 2048)),
        ((2048, 2048), 2048, (2048, 2048)),
        ((5000, 1), 100, (100, 1)),
    ],
)
def test_target_size(size, limit, expected):
    assert PillowImageCodec.target_size(*size, limit) == expected


def test_oversized_image_raises_codec_error(codec, monkeypatch):
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)
    with pytest.raises(ImageCodecError):
        codec.resize_and_encode(_png(100, 100), quality=80, max_dimension=100, path="huge.png")


def test_oversized_image_does_not_abort_resolution(codec, monkeypatch, settings):
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)
    store = MemoryStore({"img/huge.png": _png(100, 100), "img/ok.png": _png(10, 10)})
    doc = Document(nodes=[file("huge", "img/huge.png"), file("ok", "img/ok.png", x=300)])

    intent = IntentResolver(store, codec, settings).resolve(doc, ["huge", "ok"], "", Mode.IMAGE)

    assert [image.node_id for image in intent.images] == ["ok"]
    assert any("huge.png" in w for w in intent.warnings)
