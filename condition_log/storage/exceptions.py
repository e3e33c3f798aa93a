class StorageError(Exception):
    """Base exception for all sink-related errors."""


class PersistenceError(StorageError):
    """Raised when a sink cannot open, read, write or replace its file."""

    def __init__(self, sink: str, path: str, detail: str):
        self.sink = sink
        self.path = path
        self.detail = detail
        super().__init__(f"{sink} write to {path} failed: {detail}")


class FormatError(StorageError):
    """Raised when existing file content is not in the expected format."""


class CsvFormatError(FormatError):
    """Raised when a CSV log has an unexpected header or row width."""


class JsonFormatError(FormatError):
    """Raised when a JSON document is not an array of objects."""
