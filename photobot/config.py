"""Configuration management for photo imports."""

import copy
import yaml
from pathlib import Path
from typing import Dict, List, Any, Optional
import logging

logger = logging.getLogger(__name__)

DEFAULTS: Dict[str, Any] = {
    'photobot': {
        'output_dir': None,
        'album_from_folder': False,
        'dedupe_by_checksum': False,
        'extensions': ['jpg', 'jpeg'],
        'exiftool': {
            'path': 'exiftool',
            'timeout': 30,
        },
        'safety': {
            'min_free_space_mb': 0,
        },
    },
    'logging': {
        'level': 'INFO',
    },
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class Config:
    """Read-only run configuration from an optional YAML file plus overrides."""

    def __init__(
        self,
        config_path: Optional[str] = None,
        output_dir: Optional[str] = None,
        album_from_folder: Optional[bool] = None,
    ):
        """
        Initialize configuration.

        Args:
            config_path: Path to config file. If None, searches for config files.
            output_dir: Output root, overrides the file
            album_from_folder: Album-from-folder flag, overrides the file
        """
        self.config_path = config_path or self._find_config_file()
        self.config: Dict[str, Any] = copy.deepcopy(DEFAULTS)
        if self.config_path:
            self._load_config()

        if output_dir is not None:
            self.config['photobot']['output_dir'] = str(output_dir)
        if album_from_folder is not None:
            self.config['photobot']['album_from_folder'] = bool(album_from_folder)

    def _find_config_file(self) -> Optional[str]:
        """Find configuration file in standard locations."""
        possible_paths = [
            Path.cwd() / "photobot.local.yml",
            Path.cwd() / "photobot.yml",
            Path.home() / ".config" / "photobot" / "config.yml",
        ]

        for config_file in possible_paths:
            if config_file.exists():
                logger.info(f"Found config file: {config_file}")
                return str(config_file.resolve())

        logger.debug("No configuration file found, using defaults")
        return None

    def _load_config(self) -> None:
        """Load configuration from YAML file."""
        try:
            with open(self.config_path, 'r') as f:
                loaded = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load config from {self.config_path}: {e}")
            raise
        if not isinstance(loaded, dict):
            raise ValueError(f"Config file {self.config_path} must contain a mapping")
        self.config = _merge(self.config, loaded)
        logger.info(f"Loaded configuration from {self.config_path}")

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.

        Args:
            key_path: Dot-separated path like 'photobot.exiftool.path'
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key_path.split('.')
        value = self.config

        try:
            for key in keys:
                value = value[key]
            return value
        except (KeyError, TypeError):
            return default

    @property
    def output_dir(self) -> Optional[Path]:
        value = self.get('photobot.output_dir')
        return Path(value) if value else None

    @property
    def album_from_folder(self) -> bool:
        return bool(self.get('photobot.album_from_folder', False))

    @property
    def dedupe_by_checksum(self) -> bool:
        return bool(self.get('photobot.dedupe_by_checksum', False))

    def get_extensions(self) -> List[str]:
        """Get photo file extensions (without dots) to import."""
        return [str(ext) for ext in self.get('photobot.extensions', []) or []]

    def get_exiftool_path(self) -> str:
        return str(self.get('photobot.exiftool.path', 'exiftool'))

    def get_exiftool_timeout(self) -> float:
        return float(self.get('photobot.exiftool.timeout', 30))

    def get_min_free_space_mb(self) -> int:
        """Get free space to keep on the output volume, in MB."""
        return int(self.get('photobot.safety.min_free_space_mb', 0))

    def get_log_level(self) -> str:
        """Get logging level."""
        return str(self.get('logging.level', 'INFO'))

    def validate_config(self) -> List[str]:
        """
        Validate configuration and return list of errors.

        Returns:
            List of validation error messages
        """
        errors = []

        output_dir = self.output_dir
        if output_dir is None:
            errors.append("Output directory not configured")
        elif output_dir.exists() and not output_dir.is_dir():
            errors.append(f"Output directory is not a directory: {output_dir}")

        if not self.get_extensions():
            errors.append("No photo extensions configured")

        try:
            if self.get_exiftool_timeout() <= 0:
                errors.append("exiftool timeout must be positive")
        except (TypeError, ValueError):
            errors.append(f"Invalid exiftool timeout: {self.get('photobot.exiftool.timeout')}")

        try:
            if self.get_min_free_space_mb() < 0:
                errors.append("min_free_space_mb must not be negative")
        except (TypeError, ValueError):
            errors.append(
                f"Invalid min_free_space_mb: {self.get('photobot.safety.min_free_space_mb')}"
            )

        return errors

    def __str__(self) -> str:
        """String representation of configuration."""
        return f"Config(path={self.config_path}, output={self.output_dir})"
