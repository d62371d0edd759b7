# trackgeo/domain/errors.py


class TrackGeoError(Exception):
    """Base class for every error raised by the topology engine."""


class DataError(TrackGeoError):
    """Infrastructure data the engine relies on is missing or malformed."""

    def __init__(self, msg: str, *, record_id: str | None = None, field: str | None = None):
        super().__init__(msg)
        self.record_id = record_id
        self.field = field


class TraversalLimitExceeded(TrackGeoError):
    def __init__(self, operation: str, *, kind: str, limit: int):
        super().__init__(f"{operation}: {kind} limit of {limit} exceeded")
        self.operation = operation
        self.kind = kind  # "hops" | "results"
        self.limit = limit
