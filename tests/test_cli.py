"""Tests for the photobot command line."""

import logging
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from conftest import FakeMetadataProvider
from photobot import cli as cli_module
from photobot.checksum_index import INDEX_FILENAME
from photobot.cli import cli

CANON_FRAGMENT = "timeline/2023-07-Jul/Canon EOS R5/2023-07-04_10-15-30.jpg"


@pytest.fixture(autouse=True)
def reset_logging_handlers():
    """Drop handlers bound to the runner's streams after each invocation."""
    yield
    root_logger = logging.getLogger()
    for name in ('_console_handler', '_file_handler'):
        handler = getattr(cli_module, name)
        if handler is not None:
            root_logger.removeHandler(handler)
            handler.close()
            setattr(cli_module, name, None)


@pytest.fixture
def runner(tmp_path, monkeypatch):
    # Keep config discovery away from real config files
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv('HOME', str(tmp_path))
    return CliRunner()


@pytest.fixture
def fake_exiftool():
    provider = FakeMetadataProvider()
    with patch('photobot.importer.ExifToolProvider', return_value=provider):
        yield provider


class TestImportCommand:

    def test_import_copies_and_reports(self, runner, fake_exiftool, create_photo, source_dir,
                                       output_dir):
        create_photo('IMG_0001.jpg')

        result = runner.invoke(cli, ['import', '-o', str(output_dir), str(source_dir)])

        assert result.exit_code == 0, result.output
        assert (output_dir / CANON_FRAGMENT).exists()
        assert (output_dir / INDEX_FILENAME).exists()
        assert "IMPORTED" in result.output
        assert (output_dir / 'logs' / 'import.log').exists()

    def test_second_import_reports_skipped(self, runner, fake_exiftool, create_photo, source_dir,
                                           output_dir):
        create_photo('IMG_0001.jpg')
        args = ['import', '--output', str(output_dir), str(source_dir)]

        runner.invoke(cli, args)
        result = runner.invoke(cli, args)

        assert result.exit_code == 0
        assert "SKIPPED" in result.output
        assert len(list(output_dir.rglob('*.jpg'))) == 1

    def test_album_flag(self, runner, fake_exiftool, create_photo, source_dir, output_dir):
        create_photo('Beach/IMG_0001.jpg')

        result = runner.invoke(cli, ['import', '-o', str(output_dir), '-a', str(source_dir)])

        assert result.exit_code == 0, result.output
        assert (output_dir / 'albums/Beach/Canon EOS R5/2023-07-04_10-15-30.jpg').exists()

    def test_item_failures_keep_exit_code_zero(self, runner, create_photo, source_dir,
                                               output_dir):
        create_photo('IMG_0001.jpg')
        with patch('photobot.importer.ExifToolProvider',
                   return_value=FakeMetadataProvider(default=None)):
            result = runner.invoke(cli, ['import', '-o', str(output_dir), str(source_dir)])

        assert result.exit_code == 0
        assert "FAILED MetadataUnavailable" in result.output

    def test_store_init_error_exits_nonzero(self, runner, fake_exiftool, create_photo,
                                            source_dir, output_dir):
        create_photo('IMG_0001.jpg')
        (output_dir / INDEX_FILENAME).mkdir(parents=True)

        result = runner.invoke(cli, ['import', '-o', str(output_dir), str(source_dir)])

        assert result.exit_code == 1
        assert "Cannot open checksum index" in result.output
        assert not list(output_dir.rglob('*.jpg'))

    def test_missing_output_is_config_error(self, runner, source_dir):
        result = runner.invoke(cli, ['import', str(source_dir)])

        assert result.exit_code == 1
        assert "Output directory not configured" in result.output


class TestTestCommand:
    """``photobot test`` is a dry run."""

    def test_dry_run_leaves_output_untouched(self, runner, fake_exiftool, create_photo,
                                             source_dir, output_dir):
        create_photo('IMG_0001.jpg')

        result = runner.invoke(cli, ['test', '-o', str(output_dir), str(source_dir)])

        assert result.exit_code == 0, result.output
        assert "WOULD COPY" in result.output
        assert "DRY RUN" in result.output
        assert not output_dir.exists()
        assert fake_exiftool.written == []


def test_config_file_supplies_output(runner, fake_exiftool, create_photo, source_dir,
                                     output_dir, tmp_path):
    create_photo('IMG_0001.jpg')
    config_path = tmp_path / 'custom.yml'
    config_path.write_text(f"photobot:\n  output_dir: {output_dir}\n", encoding='utf-8')

    result = runner.invoke(cli, ['-c', str(config_path), '-l', 'DEBUG', 'import', str(source_dir)])

    assert result.exit_code == 0, result.output
    assert (output_dir / CANON_FRAGMENT).exists()
