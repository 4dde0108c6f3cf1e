"""Shared fixtures for photobot tests."""

from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest
import yaml

from photobot.checksum_index import ChecksumIndex
from photobot.config import Config
from photobot.exceptions import MetadataUnavailable, MetadataWriteError
from photobot.metadata import MetadataProvider
from photobot.models import MetadataRecord


CANON_RECORD = MetadataRecord(
    date_time_original=datetime(2023, 7, 4, 10, 15, 30),
    make="Canon",
    model="EOS R5",
)


class FakeMetadataProvider(MetadataProvider):
    """In-memory metadata provider.

    Records are looked up by file name, then ``default``. Writes are kept
    in ``written`` instead of touching the file.
    """

    def __init__(self, records: Optional[Dict[str, MetadataRecord]] = None,
                 default: Optional[MetadataRecord] = CANON_RECORD,
                 fail_write: bool = False):
        self.records = records or {}
        self.default = default
        self.fail_write = fail_write
        self.read_calls: List[Path] = []
        self.written: List[Tuple[Path, MetadataRecord, str]] = []

    def read(self, path: Path) -> MetadataRecord:
        self.read_calls.append(Path(path))
        record = self.records.get(Path(path).name, self.default)
        if record is None:
            raise MetadataUnavailable(f"No metadata for {path}")
        return record

    def write(self, path: Path, record: MetadataRecord, original_basename: str) -> None:
        if self.fail_write:
            raise MetadataWriteError(f"Failed to write metadata to {path}")
        self.written.append((Path(path), record, original_basename))


@pytest.fixture
def output_dir(tmp_path):
    """Output root of the photo library (not created)."""
    return tmp_path / 'library'


@pytest.fixture
def source_dir(tmp_path):
    path = tmp_path / 'camera_roll'
    path.mkdir()
    return path


@pytest.fixture
def write_config(tmp_path):
    """Factory fixture: write a YAML config file and return a Config for it."""

    def _write(data, **overrides):
        config_path = tmp_path / 'photobot.yml'
        with open(config_path, 'w') as f:
            yaml.dump(data, f)
        return Config(str(config_path), **overrides)

    return _write


@pytest.fixture
def sample_config(write_config, output_dir):
    """Config backed by a temp config file pointing at ``output_dir``."""
    return write_config({
        'photobot': {
            'output_dir': str(output_dir),
            'album_from_folder': False,
            'extensions': ['jpg', 'jpeg'],
            'safety': {'min_free_space_mb': 0},
        },
        'logging': {'level': 'DEBUG'},
    })


@pytest.fixture
def album_config(write_config, output_dir):
    return write_config({
        'photobot': {
            'output_dir': str(output_dir),
            'album_from_folder': True,
        },
    })


@pytest.fixture
def fake_metadata():
    return FakeMetadataProvider()


@pytest.fixture
def memory_index():
    return ChecksumIndex()


@pytest.fixture
def create_photo(source_dir):
    """Factory fixture: create a photo file below ``source_dir``."""

    def _create(relative_path='IMG_0001.jpg', content=b'\xff\xd8\xff\xe0 jpeg test content'):
        full_path = source_dir / relative_path
        full_path.parent.mkdir(parents=True, exist_ok=True)
        full_path.write_bytes(content)
        return full_path

    return _create
