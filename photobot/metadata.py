"""Reading and writing photo metadata through exiftool."""

import json
import logging
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List

from .exceptions import MetadataUnavailable, MetadataWriteError
from .models import MetadataRecord
from .utils import path_to_text

logger = logging.getLogger(__name__)


class MetadataProvider(ABC):
    """Reads metadata records from photos and writes selected tags back."""

    @abstractmethod
    def read(self, path: Path) -> MetadataRecord:
        """Return the metadata of ``path``; raises MetadataUnavailable."""

    @abstractmethod
    def write(self, path: Path, record: MetadataRecord, original_basename: str) -> None:
        """Tag ``path`` with the record's album and its pre-import filename."""


class ExifToolProvider(MetadataProvider):
    """Metadata provider backed by the ``exiftool`` command line utility.

    exiftool must be installed and on the PATH (or given as ``executable``).
    """

    def __init__(self, executable: str = "exiftool", timeout: float = 30):
        self.executable = executable
        self.timeout = timeout

    def _run(self, args: List[str]) -> subprocess.CompletedProcess:
        return subprocess.run(
            [self.executable] + args,
            capture_output=True, text=True, timeout=self.timeout
        )

    def read(self, path: Path) -> MetadataRecord:
        # -json = JSON output, -G = group prefixes (EXIF:, XMP:)
        target = path_to_text(path)
        try:
            result = self._run(['-json', '-G', target])
        except FileNotFoundError as e:
            raise MetadataUnavailable(f"{self.executable} not found: {e}") from e
        except subprocess.TimeoutExpired as e:
            raise MetadataUnavailable(f"{self.executable} timed out reading {path}") from e
        except OSError as e:
            raise MetadataUnavailable(f"Failed to run {self.executable}: {e}") from e

        if not result.stdout.strip():
            detail = result.stderr.strip() or f"exit code {result.returncode}"
            raise MetadataUnavailable(f"No metadata for {path}: {detail}")

        try:
            data = json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise MetadataUnavailable(f"Unreadable exiftool output for {path}: {e}") from e

        if not isinstance(data, list) or not data or not isinstance(data[0], dict):
            raise MetadataUnavailable(f"No metadata record returned for {path}")

        record = MetadataRecord.from_exiftool(data[0])
        logger.debug(f"Read metadata for {path}: {record}")
        return record

    def write(self, path: Path, record: MetadataRecord, original_basename: str) -> None:
        args = ['-overwrite_original']

        if original_basename:
            args.append(f'-OriginalFileName={original_basename}')
            logger.debug(f"Adding tag 'OriginalFileName' to {path}: {original_basename}")

        if record.album:
            args.append(f'-Album={record.album}')
            logger.debug(f"Adding tag 'Album' to {path}: {record.album}")

        if len(args) == 1:
            return

        args.append(path_to_text(path))
        try:
            result = self._run(args)
        except (OSError, subprocess.TimeoutExpired) as e:
            raise MetadataWriteError(f"Failed to run {self.executable} on {path}: {e}") from e

        if result.returncode != 0:
            detail = result.stderr.strip() or f"exit code {result.returncode}"
            raise MetadataWriteError(f"Failed to write metadata to {path}: {detail}")
