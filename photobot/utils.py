"""Utility functions for photo imports."""

import zlib
from datetime import datetime
from pathlib import Path
from typing import Union
import logging

import psutil

from .exceptions import PathEncodingError, PhotoIOError

logger = logging.getLogger(__name__)


def calculate_checksum(file_path: Path, chunk_size: int = 64 * 1024) -> int:
    """
    Calculate the Adler-32 checksum of a file.

    Args:
        file_path: Path to file
        chunk_size: Size of chunks to read at a time

    Returns:
        Checksum as an unsigned 32-bit integer

    Raises:
        PhotoIOError: If the file cannot be opened or read
    """
    checksum = 1
    try:
        with open(file_path, 'rb') as f:
            while chunk := f.read(chunk_size):
                checksum = zlib.adler32(chunk, checksum)
    except OSError as e:
        raise PhotoIOError(f"Failed to read {file_path}: {e}") from e
    return checksum & 0xFFFFFFFF


def get_file_size(file_path: Path) -> int:
    """
    Get file size in bytes.

    Args:
        file_path: Path to file

    Returns:
        File size in bytes, 0 if error
    """
    try:
        return file_path.stat().st_size
    except OSError as e:
        logger.error(f"Failed to get size for {file_path}: {e}")
        return 0


def format_bytes(bytes_value: int) -> str:
    """
    Format bytes as human-readable string.

    Args:
        bytes_value: Size in bytes

    Returns:
        Formatted string like "1.2GB"
    """
    if bytes_value == 0:
        return "0B"

    units = ['B', 'KB', 'MB', 'GB', 'TB']
    unit_index = 0
    size = float(bytes_value)

    while size >= 1024.0 and unit_index < len(units) - 1:
        size /= 1024.0
        unit_index += 1

    return f"{size:.1f}{units[unit_index]}"


def get_available_space(path: Path) -> int:
    """
    Get available disk space for a path in bytes.

    The nearest existing ancestor is queried, so the path itself need not
    exist yet.
    """
    existing = Path(path)
    while not existing.exists() and existing != existing.parent:
        existing = existing.parent
    try:
        return psutil.disk_usage(str(existing)).free
    except OSError as e:
        logger.error(f"Failed to get disk space for {path}: {e}")
        return 0


def ensure_directory(path: Path) -> None:
    """
    Ensure directory exists, creating parents as needed.

    Raises:
        PhotoIOError: If the directory cannot be created
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise PhotoIOError(f"Failed to create directory {path}: {e}") from e


def path_to_text(path: Union[str, Path]) -> str:
    """
    Return ``path`` as a string that survives UTF-8 encoding.

    Raises:
        PathEncodingError: If the path holds undecodable bytes
    """
    text = str(path)
    try:
        text.encode('utf-8')
    except UnicodeEncodeError as e:
        raise PathEncodingError(f"Path is not valid UTF-8: {text!r}") from e
    return text


def get_current_timestamp():
    """Get current timestamp as ISO string."""
    return datetime.now().isoformat()
