"""Data types shared by the import pipeline."""

import dataclasses
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

EXIFTOOL_DATE_FORMAT = "%Y:%m:%d %H:%M:%S"


def parse_exif_date(value: Any) -> Optional[datetime]:
    """Parse an exiftool ``YYYY:MM:DD HH:MM:SS`` date, None if absent or invalid."""
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    try:
        return datetime.strptime(text[:19], EXIFTOOL_DATE_FORMAT)
    except ValueError:
        logger.debug(f"Ignoring unparsable date: {text!r}")
        return None


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class MetadataRecord:
    """Metadata read from a photo.

    The capture timestamp resolves to ``date_time_original`` and falls back
    to ``create_date``.
    """
    date_time_original: Optional[datetime] = None
    create_date: Optional[datetime] = None
    album: Optional[str] = None
    original_filename: Optional[str] = None
    make: Optional[str] = None
    model: Optional[str] = None
    gps_latitude: Optional[str] = None
    gps_longitude: Optional[str] = None

    @property
    def timestamp(self) -> Optional[datetime]:
        """Capture timestamp, or None when neither date is known."""
        return self.date_time_original or self.create_date

    def with_album(self, album: Optional[str]) -> "MetadataRecord":
        """Return a copy of this record with ``album`` replaced."""
        return dataclasses.replace(self, album=album)

    @classmethod
    def from_exiftool(cls, data: Dict[str, Any]) -> "MetadataRecord":
        """Build a record from one object of ``exiftool -json -G`` output."""
        return cls(
            date_time_original=parse_exif_date(data.get("EXIF:DateTimeOriginal")),
            create_date=parse_exif_date(data.get("EXIF:CreateDate")),
            album=_optional_text(data.get("XMP:Album")),
            original_filename=_optional_text(data.get("XMP:OriginalFileName")),
            make=_optional_text(data.get("EXIF:Make")),
            model=_optional_text(data.get("EXIF:Model")),
            gps_latitude=_optional_text(data.get("EXIF:GPSLatitude")),
            gps_longitude=_optional_text(data.get("EXIF:GPSLongitude")),
        )


@dataclass(frozen=True)
class SourceItem:
    """A discovered photo and the root directory it was found under."""
    path: Path
    root: Path

    @property
    def depth(self) -> int:
        """Number of directories between ``root`` and the photo."""
        try:
            relative = self.path.relative_to(self.root)
        except ValueError:
            return 0
        return len(relative.parts) - 1

    @property
    def parent_name(self) -> str:
        return self.path.parent.name

    @property
    def extension(self) -> str:
        """Extension without the dot, case preserved."""
        return self.path.suffix[1:]


@dataclass(frozen=True)
class ImportedPhoto:
    """A photo ready to be copied to its destination."""
    source: SourceItem
    record: MetadataRecord
    fragment: str
    checksum: int
    original_basename: str

    def destination(self, output_dir: Path) -> Path:
        return Path(output_dir).joinpath(*self.fragment.split("/"))


class ImportState(Enum):
    """Steps a photo goes through during an import."""
    DISCOVERED = "discovered"
    HASHED = "hashed"
    METADATA_READ = "metadata_read"
    PATH_DERIVED = "path_derived"
    DEDUP_CHECKED = "dedup_checked"
    SKIPPED = "skipped"
    COPIED = "copied"
    METADATA_WRITTEN = "metadata_written"
    INDEXED = "indexed"
    DONE = "done"
    FAILED = "failed"


@dataclass
class ItemResult:
    """Outcome of importing a single photo."""
    source: Path
    state: ImportState = ImportState.DISCOVERED
    last_state: ImportState = ImportState.DISCOVERED
    destination: Optional[Path] = None
    error_kind: Optional[str] = None
    message: str = ""
    reason: str = ""
    warnings: List[str] = field(default_factory=list)
    size: int = 0

    @property
    def succeeded(self) -> bool:
        return self.state in (ImportState.DONE, ImportState.SKIPPED)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'source': str(self.source),
            'state': self.state.value,
            'last_state': self.last_state.value,
            'destination': str(self.destination) if self.destination else None,
            'error_kind': self.error_kind,
            'message': self.message,
            'reason': self.reason,
            'warnings': list(self.warnings),
        }


@dataclass
class ImportStats:
    """Counters for an import run."""
    total: int = 0
    copied: int = 0
    skipped: int = 0
    failed: int = 0
    warnings: int = 0
    copied_size: int = 0
    errors: List[str] = field(default_factory=list)

    def add(self, result: ItemResult) -> None:
        self.total += 1
        if result.state is ImportState.DONE:
            self.copied += 1
            self.copied_size += result.size
        elif result.state is ImportState.SKIPPED:
            self.skipped += 1
        else:
            self.failed += 1
            self.errors.append(f"{result.error_kind}: {result.source}: {result.message}")
        self.warnings += len(result.warnings)

    def to_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)
