import numpy as np

from filter_errors import InvalidParameter


class PixelBuffer:
    """RGB pixels stored row-major as a (height, width, 3) uint8 array.

    Buffers built with ``from_array`` are read-only views of their source;
    ``blank`` allocates a writable buffer for filter output.
    """

    def __init__(self, pixels):
        if not isinstance(pixels, np.ndarray):
            raise InvalidParameter("pixels must be a NumPy array")
        if pixels.ndim != 3 or pixels.shape[2] != 3:
            raise InvalidParameter(f"pixels must have shape (H, W, 3), got {pixels.shape}")
        if pixels.dtype != np.uint8:
            raise InvalidParameter(f"pixels must have dtype uint8, got {pixels.dtype}")
        if pixels.shape[0] < 1 or pixels.shape[1] < 1:
            raise InvalidParameter(f"image dimensions must be positive, got {pixels.shape[1]}x{pixels.shape[0]}")
        self.pixels = pixels
        self.height, self.width = pixels.shape[:2]

    @classmethod
    def from_array(cls, arr):
        view = np.asarray(arr).view()
        view.flags.writeable = False
        return cls(view)

    @classmethod
    def blank(cls, width, height):
        if width < 1 or height < 1:
            raise InvalidParameter(f"image dimensions must be positive, got {width}x{height}")
        return cls(np.zeros((height, width, 3), dtype=np.uint8))

    @property
    def read_only(self):
        return not self.pixels.flags.writeable

    def in_bounds(self, x, y):
        return 0 <= x < self.width and 0 <= y < self.height

    def _check(self, x, y):
        if not self.in_bounds(x, y):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} image")

    def get(self, x, y):
        self._check(x, y)
        r, g, b = self.pixels[y, x]
        return int(r), int(g), int(b)

    def set(self, x, y, rgb):
        self._check(x, y)
        self.pixels[y, x] = rgb

    def rows(self, band):
        """Writable view of the rows [band.start, band.end)."""
        if not (0 <= band.start < band.end <= self.height):
            raise IndexError(f"rows {band.start}-{band.end} outside image of height {self.height}")
        return self.pixels[band.start:band.end]

    def __eq__(self, other):
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return np.array_equal(self.pixels, other.pixels)

    def __repr__(self):
        return f"PixelBuffer({self.width}x{self.height})"
