class MeanFilterError(Exception):
    pass


class InvalidParameter(MeanFilterError, ValueError):
    pass


class WorkerFailure(MeanFilterError):
    """One or more bands failed; raised once every worker has been joined."""

    def __init__(self, failures):
        self.failures = list(failures)
        rows = ", ".join(f"rows {band.start}-{band.end}: {exc!r}" for band, exc in self.failures)
        super().__init__(f"{len(self.failures)} worker(s) failed ({rows})")


class DecodeError(MeanFilterError, OSError):
    pass


class EncodeError(MeanFilterError, OSError):
    pass
