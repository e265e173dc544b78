"""Pillow <-> PixelBuffer conversion for reading and writing image files.

Filtering works on in-memory buffers only; this module is the single place
where files are touched.
"""
from pathlib import Path

import numpy as np
from PIL import Image

from filter_errors import DecodeError, EncodeError
from pixels import PixelBuffer

# lossy and lossless
SUPPORTED_FORMATS = ("JPEG", "PNG")

_EXTENSIONS = {
    ".jpg": "JPEG",
    ".jpeg": "JPEG",
    ".png": "PNG",
}


def decode(path):
    """Load an image file as a read-only RGB PixelBuffer.

    Alpha is dropped and palette or greyscale images are expanded to RGB.
    Raises DecodeError if the file is missing, unreadable or not an image.
    """
    p = Path(path)
    try:
        with Image.open(p) as im:
            fmt = im.format
            arr = np.array(im.convert("RGB"), dtype=np.uint8)
    except (OSError, Image.DecompressionBombError) as exc:
        raise DecodeError(f"{p}: cannot decode image: {exc}") from exc
    if fmt not in SUPPORTED_FORMATS:
        raise DecodeError(f"{p}: unsupported image format {fmt}")
    return PixelBuffer.from_array(arr)


def resolve_format(path, format=None):
    if format is None:
        format = _EXTENSIONS.get(Path(path).suffix.lower())
        if format is None:
            raise EncodeError(f"{path}: cannot infer image format from extension")
    format = format.upper()
    if format == "JPG":
        format = "JPEG"
    if format not in SUPPORTED_FORMATS:
        raise EncodeError(f"unsupported output format {format}, expected one of {', '.join(SUPPORTED_FORMATS)}")
    return format


def encode(image, path, format=None):
    """Write ``image`` to ``path``; the format defaults to the file extension."""
    p = Path(path)
    format = resolve_format(p, format)
    im = Image.fromarray(np.ascontiguousarray(image.pixels))
    try:
        im.save(p, format=format)
    except OSError as exc:
        raise EncodeError(f"{p}: cannot write {format} image: {exc}") from exc
