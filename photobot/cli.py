"""
photobot command line interface

Imports photos into a library laid out by album, capture month and camera,
skipping photos that were already imported.
"""

import sys
import logging
from pathlib import Path
from typing import Optional, Tuple

import click
from colorama import init, Fore, Style

from .checksum_index import ChecksumIndex
from .config import Config
from .exceptions import StoreInitError
from .importer import PhotoImporter
from .reporter import ImportReporter

init()

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

_console_handler = None
_file_handler = None


def setup_logging(level: str = 'INFO'):
    """Set up console logging, replacing any handler installed earlier."""
    global _console_handler
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    if _console_handler is not None:
        root_logger.removeHandler(_console_handler)

    _console_handler = logging.StreamHandler(sys.stdout)
    _console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    root_logger.addHandler(_console_handler)


def setup_file_logging(log_dir: Path, log_name: str = 'photobot'):
    """Add file handler to root logger."""
    global _file_handler
    root_logger = logging.getLogger()
    log_dir.mkdir(parents=True, exist_ok=True)

    if _file_handler is not None:
        root_logger.removeHandler(_file_handler)
        _file_handler.close()

    _file_handler = logging.FileHandler(log_dir / f'{log_name}.log', encoding='utf-8')
    _file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    root_logger.addHandler(_file_handler)


def print_header(title: str):
    """Print a formatted header."""
    click.echo(f"\n{Fore.CYAN}{'=' * 60}{Style.RESET_ALL}")
    click.echo(f"{Fore.CYAN}{title.center(60)}{Style.RESET_ALL}")
    click.echo(f"{Fore.CYAN}{'=' * 60}{Style.RESET_ALL}\n")


def print_success(message: str):
    click.echo(f"{Fore.GREEN}OK: {message}{Style.RESET_ALL}")


def print_warning(message: str):
    click.echo(f"{Fore.YELLOW}WARN: {message}{Style.RESET_ALL}")


def print_error(message: str):
    click.echo(f"{Fore.RED}ERROR: {message}{Style.RESET_ALL}")


def print_info(message: str):
    click.echo(f"{Fore.BLUE}INFO: {message}{Style.RESET_ALL}")


def _load_config(ctx, output: Optional[Path], album_from_filename: bool) -> Config:
    try:
        config = Config(
            ctx.obj.get('config_path'),
            output_dir=str(output) if output else None,
            album_from_folder=True if album_from_filename else None,
        )
    except Exception as e:
        print_error(f"Failed to load configuration: {e}")
        sys.exit(1)

    errors = config.validate_config()
    if errors:
        print_error("Configuration validation failed:")
        for error in errors:
            click.echo(f"  - {error}")
        sys.exit(1)

    if ctx.obj.get('log_level') is None:
        setup_logging(config.get_log_level())
    return config


def _run_import(ctx, output: Optional[Path], album_from_filename: bool,
                paths: Tuple[Path, ...], dry_run: bool):
    config = _load_config(ctx, output, album_from_filename)

    try:
        index = ChecksumIndex.load(config.output_dir, create=not dry_run)
    except StoreInitError as e:
        print_error(f"Cannot open checksum index: {e}")
        sys.exit(1)

    if not dry_run:
        setup_file_logging(config.output_dir / "logs", ctx.info_name or 'photobot')

    if not paths:
        print_warning("No input paths given, nothing to import")
        return

    importer = PhotoImporter(config, index)
    reporter = ImportReporter(config.output_dir)

    results = importer.import_paths(paths, dry_run=dry_run, show_progress=sys.stderr.isatty())

    for result in results['results']:
        line = reporter.format_item(result)
        if result.succeeded and not result.warnings:
            print_success(line)
        elif result.succeeded:
            print_warning(line)
        else:
            print_error(line)

    if not dry_run:
        try:
            report_file = reporter.save_report(results)
            print_info(f"Report saved: {report_file}")
        except OSError as e:
            print_warning(f"Could not save report: {e}")

    click.echo("\n" + reporter.generate_summary_report(results))


@click.group()
@click.option('--config', '-c', 'config_path', help='Path to configuration file')
@click.option('--log-level', '-l', default=None,
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR']),
              help='Logging level (overrides config)')
@click.pass_context
def cli(ctx, config_path, log_level):
    """photobot - organize photos by album, date and camera."""
    setup_logging(log_level or 'INFO')
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config_path
    ctx.obj['log_level'] = log_level


@cli.command('import')
@click.option('--output', '-o', type=click.Path(path_type=Path), help='Output directory for photos')
@click.option('--album-from-filename', '-a', is_flag=True,
              help='Use the enclosing folder name as album')
@click.argument('paths', nargs=-1, type=click.Path(path_type=Path))
@click.pass_context
def import_photos(ctx, output, album_from_filename, paths):
    """Import photos from files or directories."""
    print_header("PHOTO IMPORT")
    _run_import(ctx, output, album_from_filename, paths, dry_run=False)


@cli.command('test')
@click.option('--output', '-o', type=click.Path(path_type=Path), help='Output directory for photos')
@click.option('--album-from-filename', '-a', is_flag=True,
              help='Use the enclosing folder name as album')
@click.argument('paths', nargs=-1, type=click.Path(path_type=Path))
@click.pass_context
def dry_run_import(ctx, output, album_from_filename, paths):
    """Show what an import would do without copying anything."""
    print_header("PHOTO IMPORT (DRY RUN)")
    _run_import(ctx, output, album_from_filename, paths, dry_run=True)


if __name__ == '__main__':
    cli()
