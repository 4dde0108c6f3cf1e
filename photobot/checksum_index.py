"""Persistent index of imported content checksums."""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Iterator, Optional, Tuple

from .exceptions import StoreInitError, StoreWriteError
from .utils import path_to_text

logger = logging.getLogger(__name__)

INDEX_FILENAME = "photohash.db"


class ChecksumIndex:
    """Maps content checksums to the destination they were imported to.

    The mapping is a JSON object on disk, rewritten on every new entry.
    Entries are never updated or removed: the first path recorded for a
    checksum wins. Without a path the index lives in memory only.
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path is not None else None
        self._entries: Dict[str, str] = {}
        if self.path is not None:
            self._load()

    @classmethod
    def load(cls, output_dir: Path, create: bool = True) -> "ChecksumIndex":
        """
        Open the index stored in an output directory.

        Args:
            output_dir: Output root holding ``photohash.db``
            create: Create the output root if it does not exist yet

        Raises:
            StoreInitError: If the store cannot be opened or created
        """
        output_dir = Path(output_dir)
        if output_dir.exists() and not output_dir.is_dir():
            raise StoreInitError(f"Output root is not a directory: {output_dir}")
        if create:
            try:
                output_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise StoreInitError(f"Cannot create output root {output_dir}: {e}") from e
        return cls(output_dir / INDEX_FILENAME)

    def _load(self) -> None:
        if self.path.is_dir():
            raise StoreInitError(f"Checksum index path is a directory: {self.path}")

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except FileNotFoundError:
            logger.info(f"No checksum index at {self.path}, starting empty")
            return
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(f"Checksum index {self.path} is corrupt, starting empty: {e}")
            return
        except OSError as e:
            raise StoreInitError(f"Cannot read checksum index {self.path}: {e}") from e

        if not isinstance(data, dict):
            logger.warning(f"Checksum index {self.path} is not a JSON object, starting empty")
            return

        self._entries = {str(k): str(v) for k, v in data.items()}
        logger.info(f"Loaded {len(self._entries):,} checksums from {self.path}")

    def lookup(self, checksum: int) -> Optional[str]:
        """Return the destination recorded for ``checksum``, if any."""
        return self._entries.get(str(checksum))

    def record(self, checksum: int, destination: str) -> str:
        """
        Record that content with ``checksum`` was imported to ``destination``.

        Returns:
            The destination now mapped to the checksum. When the checksum
            was already recorded this is the earlier destination.

        Raises:
            PathEncodingError: If the destination cannot be stored as text
            StoreWriteError: If the index cannot be written to disk
        """
        key = str(checksum)
        destination = path_to_text(destination)
        existing = self._entries.get(key)
        if existing is not None:
            if existing != destination:
                logger.warning(
                    f"Checksum {key} already recorded for {existing}; "
                    f"keeping it over {destination}"
                )
            return existing

        self._entries[key] = destination
        self._dump()
        return destination

    def _dump(self) -> None:
        if self.path is None:
            return

        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{INDEX_FILENAME}.", dir=str(self.path.parent)
            )
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(self._entries, f, indent=2, sort_keys=True)
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StoreWriteError(f"Failed to write checksum index {self.path}: {e}") from e

    def items(self) -> Iterator[Tuple[str, str]]:
        return iter(self._entries.items())

    def __contains__(self, checksum) -> bool:
        return str(checksum) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __str__(self) -> str:
        location = self.path if self.path is not None else "memory"
        return f"ChecksumIndex(path={location}, entries={len(self)})"
