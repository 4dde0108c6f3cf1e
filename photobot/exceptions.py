"""Exception hierarchy for photo imports.

Every error carries a ``kind`` used in per-item diagnostics. Only
``StoreInitError`` aborts a run; the rest are scoped to a single photo.
"""


class PhotobotError(Exception):
    """Base exception for all photobot errors."""

    kind = "PhotobotError"


class PhotoIOError(PhotobotError):
    """Raised when a photo cannot be read, copied, or its directory created."""

    kind = "IOError"


class MetadataUnavailable(PhotobotError):
    """Raised when the metadata tool fails or returns no record."""

    kind = "MetadataUnavailable"


class MissingTimestamp(PhotobotError):
    """Raised when a record has neither an original nor a create date."""

    kind = "MissingTimestamp"


class PathEncodingError(PhotobotError):
    """Raised when a path cannot be encoded or falls outside the output root."""

    kind = "PathEncodingError"


class MetadataWriteError(PhotobotError):
    """Raised when tags cannot be written to an imported photo."""

    kind = "MetadataWriteError"


class StoreInitError(PhotobotError):
    """Raised when the checksum index cannot be opened or created."""

    kind = "StoreInitError"


class StoreWriteError(PhotobotError):
    """Raised when the checksum index cannot be persisted."""

    kind = "StoreWriteError"
