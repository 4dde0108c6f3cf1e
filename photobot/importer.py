"""Import pipeline: checksum, metadata, destination, copy, tag, index."""

import logging
import shutil
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Set

from tqdm import tqdm

from .checksum_index import ChecksumIndex
from .config import Config
from .discovery import discover
from .exceptions import PathEncodingError, PhotobotError, PhotoIOError
from .metadata import ExifToolProvider, MetadataProvider
from .models import ImportedPhoto, ImportState, ImportStats, ItemResult, SourceItem
from .paths import derive_fragment
from .utils import (
    calculate_checksum,
    ensure_directory,
    format_bytes,
    get_available_space,
    get_current_timestamp,
    get_file_size,
)

logger = logging.getLogger(__name__)


class PhotoImporter:
    """Imports photos into the output root one at a time.

    A photo whose destination already exists is skipped, which makes
    repeated imports of the same sources idempotent. Every copied photo
    is recorded in the checksum index.
    """

    def __init__(
        self,
        config: Config,
        index: ChecksumIndex,
        metadata_provider: Optional[MetadataProvider] = None,
    ):
        """
        Initialize importer.

        Args:
            config: Configuration instance, must name an output directory
            index: Checksum index shared by the whole run
            metadata_provider: Defaults to exiftool as configured
        """
        if config.output_dir is None:
            raise ValueError("Output directory not configured")

        self.config = config
        self.index = index
        self.output_dir = config.output_dir
        self.metadata = metadata_provider or ExifToolProvider(
            config.get_exiftool_path(), config.get_exiftool_timeout()
        )
        self.min_free_space_bytes = config.get_min_free_space_mb() * 1024 * 1024
        # Destinations and checksums a dry run would have taken so far
        self._planned_fragments: Set[str] = set()
        self._planned_checksums: Dict[int, str] = {}

    def import_paths(
        self,
        paths: Iterable[Path],
        dry_run: bool = False,
        show_progress: bool = False,
    ) -> Dict[str, Any]:
        """Discover photos under each path and import them in order.

        Returns dict with per-photo results and run statistics.
        """
        stats = ImportStats()
        results: List[ItemResult] = []
        items: List[SourceItem] = []
        self._planned_fragments.clear()
        self._planned_checksums.clear()

        for root in paths:
            root = Path(root)
            if not root.exists():
                msg = f"Input path does not exist: {root}"
                logger.warning(msg)
                stats.errors.append(msg)
                continue
            items.extend(discover(root, self.config.get_extensions()))

        logger.info(
            f"{'DRY RUN: ' if dry_run else ''}Found {len(items):,} photos, "
            f"importing into {self.output_dir}"
        )

        with tqdm(items, desc="Importing", unit="photos", disable=not show_progress) as pbar:
            for item in pbar:
                result = self.import_item(item, dry_run=dry_run)
                stats.add(result)
                results.append(result)

        logger.info(
            f"{'DRY RUN: ' if dry_run else ''}Import complete: "
            f"{stats.copied:,} {'to copy' if dry_run else 'copied'}, "
            f"{stats.skipped:,} skipped, {stats.failed:,} failed, "
            f"{format_bytes(stats.copied_size)}"
        )

        return {
            'dry_run': dry_run,
            'timestamp': get_current_timestamp(),
            'output_dir': str(self.output_dir),
            'results': results,
            'statistics': stats.to_dict(),
            'errors': list(stats.errors),
        }

    def import_item(self, item: SourceItem, dry_run: bool = False) -> ItemResult:
        """Run one photo through the pipeline. Never raises for per-photo errors."""
        result = ItemResult(source=item.path)
        try:
            self._import(item, result, dry_run)
        except PhotobotError as e:
            self._fail(result, e.kind, str(e))
        except Exception as e:
            logger.exception(f"Unexpected error importing {item.path}")
            self._fail(result, type(e).__name__, str(e))
        return result

    def prepare(self, item: SourceItem, result: Optional[ItemResult] = None) -> ImportedPhoto:
        """Hash a photo, read its metadata and derive its destination."""
        result = result or ItemResult(source=item.path)

        checksum = calculate_checksum(item.path)
        self._advance(result, ImportState.HASHED)

        record = self.metadata.read(item.path)
        self._advance(result, ImportState.METADATA_READ)

        if self.config.album_from_folder and item.depth > 0:
            album = item.parent_name
            if record.album and record.album != album:
                logger.debug(f"Folder album '{album}' replaces '{record.album}' for {item.path}")
            record = record.with_album(album)

        fragment = derive_fragment(record, item.extension)
        self._advance(result, ImportState.PATH_DERIVED)

        return ImportedPhoto(
            source=item,
            record=record,
            fragment=fragment,
            checksum=checksum,
            original_basename=item.path.name,
        )

    def _import(self, item: SourceItem, result: ItemResult, dry_run: bool) -> None:
        photo = self.prepare(item, result)
        destination = photo.destination(self.output_dir)
        self._check_inside_output(destination)
        result.destination = destination

        skip_reason = self._duplicate_reason(photo, destination)
        self._advance(result, ImportState.DEDUP_CHECKED)
        if skip_reason:
            result.reason = skip_reason
            self._advance(result, ImportState.SKIPPED)
            logger.info(f"Skipping {item.path}: {skip_reason}")
            return

        result.size = get_file_size(item.path)

        if dry_run:
            result.reason = "would copy"
            self._planned_fragments.add(photo.fragment)
            self._planned_checksums.setdefault(photo.checksum, photo.fragment)
            self._advance(result, ImportState.DONE)
            logger.info(f"DRY RUN: would copy {item.path} -> {destination}")
            return

        self._copy(item.path, destination, result.size)
        self._advance(result, ImportState.COPIED)
        logger.info(f"Copied {item.path} -> {destination}")

        try:
            self.metadata.write(destination, photo.record, photo.original_basename)
            self._advance(result, ImportState.METADATA_WRITTEN)
        except PhotobotError as e:
            self._warn(result, e)

        try:
            self.index.record(photo.checksum, photo.fragment)
            self._advance(result, ImportState.INDEXED)
        except PhotobotError as e:
            self._warn(result, e)

        self._advance(result, ImportState.DONE)

    def _duplicate_reason(self, photo: ImportedPhoto, destination: Path) -> str:
        """Return why ``photo`` must not be copied, or an empty string."""
        if destination.exists():
            return f"destination already exists: {destination}"
        if photo.fragment in self._planned_fragments:
            return f"destination already taken by an earlier photo in this run: {destination}"

        if self.config.dedupe_by_checksum:
            if photo.checksum in self.index:
                existing = self.index.lookup(photo.checksum)
            else:
                existing = self._planned_checksums.get(photo.checksum)
            if existing is not None and existing != photo.fragment:
                return f"identical content already imported as {existing}"

        return ""

    def _check_inside_output(self, destination: Path) -> None:
        root = self.output_dir.resolve()
        if root not in destination.resolve().parents:
            raise PathEncodingError(f"Destination {destination} is outside the output root {root}")

    def _copy(self, source: Path, destination: Path, size: int) -> None:
        """Copy ``source`` to a destination that must not exist yet."""
        available = get_available_space(self.output_dir)
        needed = size + self.min_free_space_bytes
        if needed > available:
            raise PhotoIOError(
                f"Insufficient space for {source}: "
                f"need {format_bytes(needed)}, have {format_bytes(available)}"
            )

        ensure_directory(destination.parent)

        created = False
        try:
            with open(source, 'rb') as fsrc, open(destination, 'xb') as fdst:
                created = True
                shutil.copyfileobj(fsrc, fdst)
            shutil.copystat(source, destination)
        except OSError as e:
            if created:
                destination.unlink(missing_ok=True)
            raise PhotoIOError(f"Failed to copy {source} -> {destination}: {e}") from e

    @staticmethod
    def _advance(result: ItemResult, state: ImportState) -> None:
        result.state = state
        result.last_state = state
        logger.debug(f"{result.source}: {state.value}")

    @staticmethod
    def _fail(result: ItemResult, kind: str, message: str) -> None:
        result.state = ImportState.FAILED
        result.error_kind = kind
        result.message = message
        logger.error(f"{kind}: {result.source}: {message}")

    @staticmethod
    def _warn(result: ItemResult, error: PhotobotError) -> None:
        msg = f"{error.kind}: {error}"
        result.warnings.append(msg)
        logger.warning(f"{result.source}: {msg}")
