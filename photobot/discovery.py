"""Discovery of photos to import."""

import logging
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

from .models import SourceItem

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = ['jpg', 'jpeg']


def is_photo_file(file_path: Path, extensions: Iterable[str]) -> bool:
    """
    Check if file is a photo with one of the given extensions.

    Args:
        file_path: Path to file
        extensions: Extensions without dots, compared case-insensitively

    Returns:
        True if file exists and has a matching extension
    """
    if not file_path.is_file():
        return False

    extension = file_path.suffix.lower().lstrip('.')
    return extension in {ext.lower().lstrip('.') for ext in extensions}


def discover(root: Path, extensions: Optional[List[str]] = None) -> Iterator[SourceItem]:
    """
    Recursively find photos below a root.

    A file root yields itself, with its parent as the discovery root, when
    its extension matches. Directories are walked in sorted order.

    Args:
        root: File or directory to search
        extensions: Extensions to match, defaults to jpg and jpeg

    Yields:
        SourceItem for each photo found
    """
    extensions = extensions or DEFAULT_EXTENSIONS
    root = Path(root)

    if root.is_file():
        if is_photo_file(root, extensions):
            logger.debug(f"Found {root}")
            yield SourceItem(path=root, root=root.parent)
        return

    if not root.is_dir():
        logger.warning(f"Path does not exist or is not a directory: {root}")
        return

    try:
        for file_path in sorted(root.rglob('*')):
            if is_photo_file(file_path, extensions):
                logger.debug(f"Found {file_path}")
                yield SourceItem(path=file_path, root=root)
    except OSError as e:
        logger.error(f"Error scanning directory {root}: {e}")
