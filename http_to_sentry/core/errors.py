class IngestError(Exception):
    """Base class for failures while acquiring or handling an ingest request."""


class BodyReadError(IngestError):
    """Raised when the request body stream fails before it is fully read."""
