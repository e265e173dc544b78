import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional

import numpy as np

import image_codec
from bands import RowBand, partition
from filter_errors import InvalidParameter, WorkerFailure
from integral import IntegralImage
from pixels import PixelBuffer

logger = logging.getLogger(__name__)

METHODS = ("direct", "integral")


def average(image, x, y, radius):
    """Mean R, G, B over the in-bounds part of the window centred on (x, y).

    Positions outside the image are left out of both the sum and the count,
    and the centre pixel is always inside, so the count is at least one.
    """
    if radius < 0:
        raise InvalidParameter(f"radius must be >= 0, got {radius}")
    if not image.in_bounds(x, y):
        raise InvalidParameter(f"pixel ({x}, {y}) outside {image.width}x{image.height} image")

    window = image.pixels[max(0, y - radius):y + radius + 1, max(0, x - radius):x + radius + 1]
    count = window.shape[0] * window.shape[1]
    totals = window.sum(axis=(0, 1), dtype=np.int64)
    return tuple(int(total) // count for total in totals)


@dataclass(frozen=True)
class BandTask:
    band: RowBand
    source: PixelBuffer
    out_rows: np.ndarray
    radius: int
    integral: Optional[IntegralImage] = None


def filter_band(task):
    start_y, end_y = task.band
    if task.integral is not None:
        task.out_rows[:] = task.integral.mean_rows(start_y, end_y, task.radius)
        return task.band

    width = task.source.width
    for y in range(start_y, end_y):
        for x in range(width):
            task.out_rows[y - start_y, x] = average(task.source, x, y, task.radius)
    return task.band


def _collect_failures(results):
    failures = []
    for band, exc in results:
        if exc is not None:
            logger.error("Band rows %d-%d failed: %r", band.start, band.end, exc)
            failures.append((band, exc))
    if failures:
        raise WorkerFailure(failures) from failures[0][1]


def run(source, radius, worker_count, method="direct"):
    """Filter ``source`` with a box of half-width ``radius`` using row-band workers.

    Every band is joined before this returns. If any band failed, a single
    WorkerFailure is raised and the partially written output is dropped.
    """
    if radius < 0:
        raise InvalidParameter(f"radius must be >= 0, got {radius}")
    if worker_count < 1:
        raise InvalidParameter(f"worker count must be >= 1, got {worker_count}")
    if method not in METHODS:
        raise InvalidParameter(f"unknown method {method!r}, expected one of {', '.join(METHODS)}")

    output = PixelBuffer.blank(source.width, source.height)
    bands = partition(source.height, worker_count)
    integral = IntegralImage(source) if method == "integral" else None
    tasks = [BandTask(band, source, output.rows(band), radius, integral) for band in bands]

    logger.debug(
        "Dispatching %d band(s) over %dx%d image, radius %d, method %s",
        len(tasks), source.width, source.height, radius, method,
    )

    if len(tasks) == 1:
        try:
            filter_band(tasks[0])
        except Exception as exc:
            _collect_failures([(tasks[0].band, exc)])
        return output

    with ThreadPoolExecutor(max_workers=len(tasks)) as executor:
        futures = []
        for task in tasks:
            future = executor.submit(filter_band, task)
            futures.append((task.band, future))

    # the executor has joined every worker by now
    _collect_failures((band, future.exception()) for band, future in futures)
    return output


def check_parameters(kernel_size, worker_count):
    if kernel_size < 0:
        raise InvalidParameter(f"kernel size must be >= 0, got {kernel_size}")
    if worker_count < 1:
        raise InvalidParameter(f"worker count must be >= 1, got {worker_count}")


def apply_mean_filter(image, kernel_size, worker_count, method="direct"):
    """Return a new PixelBuffer holding the mean-filtered ``image``.

    ``image`` may be a PixelBuffer or a (H, W, 3) uint8 array. The kernel
    radius is ``kernel_size // 2``, so sizes 0 and 1 leave the image unchanged.
    """
    check_parameters(kernel_size, worker_count)
    pixels = image.pixels if isinstance(image, PixelBuffer) else image
    source = PixelBuffer.from_array(pixels)
    return run(source, kernel_size // 2, worker_count, method=method)


def filter_file(input_path, output_path, kernel_size, worker_count, format=None, method="direct"):
    check_parameters(kernel_size, worker_count)
    image = image_codec.decode(input_path)
    filtered = apply_mean_filter(image, kernel_size, worker_count, method=method)
    image_codec.encode(filtered, output_path, format=format)
    return filtered
