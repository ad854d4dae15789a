"""SOPS configuration service for reading and writing ``.sops.yaml`` files."""

import logging
from pathlib import Path

import yaml

from age_key_manager.exceptions import InvalidOperationError, SOPSConfigError, ValidationError
from age_key_manager.file_manager import FileManager
from age_key_manager.models import SOPSConfig

logger = logging.getLogger(__name__)


class SOPSConfigService:
    """Service for SOPS configuration documents, read and written whole."""

    def __init__(self, file_manager: FileManager):
        """Initialize the SOPS config service.

        Args:
            file_manager: File manager instance
        """
        self._file_manager = file_manager

    def read_config(self, config_path: Path) -> SOPSConfig:
        """Read a SOPS configuration file.

        Args:
            config_path: Path to the configuration file

        Returns:
            SOPSConfig object

        Raises:
            SOPSConfigError: If the document is not valid YAML or does not
                match the configuration schema
            OSError: If the file cannot be read
        """
        raw = self._file_manager.read_text(config_path, missing_ok=False)
        try:
            data = yaml.safe_load(raw)
        except yaml.YAMLError as e:
            raise SOPSConfigError(f"Failed to parse SOPS config {config_path}: {e}") from e

        if data is None:
            data = {}
        config = SOPSConfig.from_dict(data)
        logger.debug(f"Read SOPS config with {len(config.creation_rules)} creation rules from {config_path}")
        return config

    def write_config(
        self,
        config_path: Path,
        config: SOPSConfig,
        *,
        overwrite: bool = False
    ) -> None:
        """Write a SOPS configuration file.

        Args:
            config_path: Path to the configuration file
            config: Configuration to write
            overwrite: Replace an existing file

        Raises:
            ValidationError: If config is None
            InvalidOperationError: If the file exists and overwrite is False
            OSError: If the file cannot be written
        """
        if config is None:
            raise ValidationError("SOPS config cannot be None")

        config_path = Path(config_path)
        if not overwrite and config_path.exists():
            raise InvalidOperationError("The file already exists and overwrite is set to false.")

        raw = yaml.safe_dump(config.to_dict(), sort_keys=False, allow_unicode=True)
        self._file_manager.write_text_atomic(config_path, raw, secure=False)
        logger.info(f"Wrote SOPS config to {config_path}")
