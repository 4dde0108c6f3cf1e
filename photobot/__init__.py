"""
photobot

Imports photos into a library organized by album, capture month and camera,
using a persistent checksum index to keep repeated imports idempotent.
"""

__version__ = "1.0.0"

from .config import Config
from .checksum_index import ChecksumIndex
from .metadata import MetadataProvider, ExifToolProvider
from .importer import PhotoImporter
from .paths import derive_fragment
from .reporter import ImportReporter

__all__ = [
    'Config',
    'ChecksumIndex',
    'MetadataProvider',
    'ExifToolProvider',
    'PhotoImporter',
    'derive_fragment',
    'ImportReporter',
]
