from pathlib import Path

import numpy as np
import pytest
from PIL import Image

import image_codec
from filter_errors import DecodeError, EncodeError, InvalidParameter
from mean_filter import apply_mean_filter, filter_file
from pixels import PixelBuffer


def _gradient(width=8, height=6):
    arr = np.zeros((height, width, 3), dtype=np.uint8)
    arr[..., 0] = np.arange(width, dtype=np.uint8)[None, :] * 30
    arr[..., 1] = np.arange(height, dtype=np.uint8)[:, None] * 40
    arr[..., 2] = 90
    return arr


def test_png_round_trip_is_lossless(tmp_path: Path):
    path = tmp_path / "gradient.png"
    image_codec.encode(PixelBuffer.from_array(_gradient()), path)

    decoded = image_codec.decode(path)

    assert decoded.read_only
    np.testing.assert_array_equal(decoded.pixels, _gradient())


def test_jpeg_decode_keeps_dimensions(tmp_path: Path):
    path = tmp_path / "gradient.jpg"
    image_codec.encode(PixelBuffer.from_array(_gradient(8, 7)), path)

    decoded = image_codec.decode(path)

    assert (decoded.width, decoded.height) == (8, 7)
    with Image.open(path) as im:
        assert im.format == "JPEG"


def test_decode_drops_alpha(tmp_path: Path):
    path = tmp_path / "alpha.png"
    Image.new("RGBA", (3, 2), (10, 20, 30, 40)).save(path)

    decoded = image_codec.decode(path)

    assert decoded.pixels.shape == (2, 3, 3)
    assert decoded.get(2, 1) == (10, 20, 30)


def test_decode_missing_file(tmp_path: Path):
    with pytest.raises(DecodeError):
        image_codec.decode(tmp_path / "nope.png")


def test_decode_garbage(tmp_path: Path):
    path = tmp_path / "garbage.png"
    path.write_bytes(b"definitely not an image")
    with pytest.raises(DecodeError):
        image_codec.decode(path)


def test_decode_unsupported_format(tmp_path: Path):
    path = tmp_path / "image.bmp"
    Image.new("RGB", (2, 2)).save(path)
    with pytest.raises(DecodeError):
        image_codec.decode(path)


def test_explicit_format_overrides_extension(tmp_path: Path):
    path = tmp_path / "output.bin"
    image_codec.encode(PixelBuffer.blank(2, 2), path, format="png")
    with Image.open(path) as im:
        assert im.format == "PNG"


def test_jpg_alias():
    assert image_codec.resolve_format("x.png", "jpg") == "JPEG"


@pytest.mark.parametrize("name,fmt", [("out.gif", None), ("out", None), ("out.png", "TIFF")])
def test_encode_rejects_unsupported_formats(tmp_path: Path, name, fmt):
    with pytest.raises(EncodeError):
        image_codec.encode(PixelBuffer.blank(2, 2), tmp_path / name, format=fmt)


def test_encode_into_missing_directory(tmp_path: Path):
    with pytest.raises(EncodeError):
        image_codec.encode(PixelBuffer.blank(2, 2), tmp_path / "missing" / "out.png")


def test_filter_file(tmp_path: Path):
    src = tmp_path / "in.png"
    dst = tmp_path / "out.png"
    Image.fromarray(_gradient()).save(src)

    returned = filter_file(src, dst, 3, 2)

    expected = apply_mean_filter(_gradient(), 3, 1)
    assert returned == expected
    np.testing.assert_array_equal(image_codec.decode(dst).pixels, expected.pixels)


def test_filter_file_surfaces_decode_error(tmp_path: Path):
    with pytest.raises(DecodeError):
        filter_file(tmp_path / "missing.png", tmp_path / "out.png", 3, 2)
    assert not (tmp_path / "out.png").exists()


def test_decode_oversized_image(tmp_path: Path, monkeypatch):
    path = tmp_path / "large.png"
    Image.new("RGB", (200, 200)).save(path)
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)

    with pytest.raises(DecodeError):
        image_codec.decode(path)


def test_filter_file_checks_parameters_before_decoding(tmp_path: Path):
    with pytest.raises(InvalidParameter):
        filter_file(tmp_path / "missing.png", tmp_path / "out.png", 3, 0)
