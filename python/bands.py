from typing import NamedTuple

from filter_errors import InvalidParameter


class RowBand(NamedTuple):
    start: int
    end: int

    @property
    def size(self):
        return self.end - self.start

    def rows(self):
        return range(self.start, self.end)


def partition(height, worker_count):
    """Split [0, height) into contiguous row bands, one per worker.

    The effective worker count never exceeds the height, so no band is empty.
    The last band absorbs the rows left over by the integer division.
    """
    if height < 1:
        raise InvalidParameter(f"height must be >= 1, got {height}")
    if worker_count < 1:
        raise InvalidParameter(f"worker count must be >= 1, got {worker_count}")

    num_workers = min(worker_count, height)
    rows_per_worker = height // num_workers
    remainder = height - rows_per_worker * num_workers

    bands = []
    for i in range(num_workers):
        start_y = i * rows_per_worker
        end_y = start_y + rows_per_worker
        if i == num_workers - 1:
            end_y += remainder
        bands.append(RowBand(start_y, end_y))
    return bands
