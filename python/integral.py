import numpy as np


class IntegralImage:
    """Summed-area table over the RGB channels of a PixelBuffer.

    ``sum[y, x]`` holds the channel totals of every pixel above and to the
    left of (x, y), exclusive, so the table is padded by one row and column.
    """

    def __init__(self, image):
        h, w = image.height, image.width
        self.sum = np.zeros((h + 1, w + 1, 3), dtype=np.int64)
        self.sum[1:, 1:] = image.pixels.astype(np.int64).cumsum(axis=0).cumsum(axis=1)
        self.sum.flags.writeable = False

        self.height = h
        self.width = w

    def _clamp_window(self, lo, hi, limit):
        # [lo, hi] inclusive pixel coordinates -> [lo, hi) table indices
        return np.maximum(lo, 0), np.minimum(hi + 1, limit)

    def get_region_stats(self, x1, y1, x2, y2):
        """Channel sums and in-bounds sample count over [x1, x2] x [y1, y2]."""
        xa, xb = self._clamp_window(x1, x2, self.width)
        ya, yb = self._clamp_window(y1, y2, self.height)
        if xb <= xa or yb <= ya:
            return np.zeros(3, dtype=np.int64), 0
        s = self.sum
        total = s[yb, xb] - s[yb, xa] - s[ya, xb] + s[ya, xa]
        return total, int((xb - xa) * (yb - ya))

    def mean_rows(self, start_y, end_y, radius):
        """Box means for rows [start_y, end_y) as a uint8 array."""
        ys = np.arange(start_y, end_y)
        xs = np.arange(self.width)
        ya, yb = self._clamp_window(ys - radius, ys + radius, self.height)
        xa, xb = self._clamp_window(xs - radius, xs + radius, self.width)

        ya, yb = ya[:, None], yb[:, None]
        xa, xb = xa[None, :], xb[None, :]
        s = self.sum
        totals = s[yb, xb] - s[yb, xa] - s[ya, xb] + s[ya, xa]
        counts = (yb - ya) * (xb - xa)
        return (totals // counts[..., None]).astype(np.uint8)
