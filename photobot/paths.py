"""Destination path derivation from photo metadata."""

from datetime import datetime
from typing import Optional

from .exceptions import MissingTimestamp
from .models import MetadataRecord

MONTH_ABBREVIATIONS = (
    'Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun',
    'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec',
)

UNKNOWN_CAMERA = "unknown camera"


def safe_component(text: Optional[str]) -> str:
    """
    Make metadata text usable as a single directory name.

    Path separators become ``_``; empty, ``.`` and ``..`` names become ``_``.
    """
    name = (text or "").replace('/', '_').replace('\\', '_').strip()
    if name in ('', '.', '..'):
        return '_'
    return name


def timeline_bucket(timestamp: datetime) -> str:
    """Return e.g. ``timeline/2023-07-Jul``."""
    month = MONTH_ABBREVIATIONS[timestamp.month - 1]
    return f"timeline/{timestamp.year:04d}-{timestamp.month:02d}-{month}"


def camera_folder(record: MetadataRecord) -> str:
    if record.make and record.model:
        return safe_component(f"{record.make} {record.model}")
    return UNKNOWN_CAMERA


def filename_stem(timestamp: datetime) -> str:
    return (
        f"{timestamp.year:04d}-{timestamp.month:02d}-{timestamp.day:02d}_"
        f"{timestamp.hour:02d}-{timestamp.minute:02d}-{timestamp.second:02d}"
    )


def derive_fragment(record: MetadataRecord, extension: str) -> str:
    """
    Derive the destination of a photo relative to the output root.

    Args:
        record: Metadata read from the photo (album possibly amended)
        extension: Source file extension without the dot, kept verbatim

    Returns:
        ``<bucket>/<camera>/<stem>.<ext>`` joined with forward slashes

    Raises:
        MissingTimestamp: If the record carries no capture date
    """
    timestamp = record.timestamp
    if timestamp is None:
        raise MissingTimestamp("Metadata is missing both DateTimeOriginal and CreateDate")

    if record.album:
        bucket = f"albums/{safe_component(record.album)}"
    else:
        bucket = timeline_bucket(timestamp)

    filename = filename_stem(timestamp)
    if extension:
        filename = f"{filename}.{safe_component(extension)}"

    return f"{bucket}/{camera_folder(record)}/{filename}"
