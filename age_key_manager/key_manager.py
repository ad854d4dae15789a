"""Local age key manager for SOPS key files and configuration."""

import asyncio
import logging
from pathlib import Path
from typing import Union

from age_key_manager.age_keygen import AgeKeygen
from age_key_manager.config import DEFAULT_CONFIG, KeyManagerConfig
from age_key_manager.exceptions import ValidationError
from age_key_manager.file_manager import FileManager
from age_key_manager.models import AgeKey, SOPSConfig
from age_key_manager.paths import get_sops_age_key_file_path
from age_key_manager.services import KeyFileService, SOPSConfigService

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class LocalAgeKeyManager:
    """Manage age keys in a local key file using the service layer.

    Every operation is a coroutine. File access runs in a worker thread, so
    an operation only yields to the event loop around its own I/O. When a
    key path is omitted the manager's default key file is used.

    The manager takes no locks. Concurrent mutations of the same key file,
    from this process or another, may lose updates; use one writer per file.
    Cancelling an operation while its write is in progress leaves the file
    either unchanged or fully updated, since the write is an atomic replace.
    """

    def __init__(
        self,
        key_file: PathLike | None = None,
        *,
        config: KeyManagerConfig = DEFAULT_CONFIG
    ) -> None:
        """Initialize the key manager.

        Args:
            key_file: Default key file (default: SOPS_AGE_KEY_FILE or the
                platform's sops/age/keys.txt)
            config: File handling configuration

        Raises:
            ValidationError: If SOPS_AGE_KEY_FILE is set to a file that does
                not exist, or key_file is empty
        """
        if key_file is None:
            self._key_file = get_sops_age_key_file_path()
        else:
            self._key_file = self._to_path(key_file)

        self._file_manager = FileManager(config)
        self._key_file_service = KeyFileService(self._file_manager)
        self._sops_config_service = SOPSConfigService(self._file_manager)
        logger.debug(f"Using default key file {self._key_file}")

    @staticmethod
    def _to_path(path: PathLike) -> Path:
        if str(path).strip() == "":
            raise ValidationError("Key path cannot be empty")
        return Path(path)

    def _resolve(self, key_path: PathLike | None) -> Path:
        return self._key_file if key_path is None else self._to_path(key_path)

    async def create_key(self, key_path: PathLike | None = None) -> AgeKey:
        """Create a new key and add it to a key file.

        Args:
            key_path: Key file to add the key to (optional)

        Returns:
            The new key
        """
        path = self._resolve(key_path)
        key = await AgeKeygen.in_memory()
        await asyncio.to_thread(self._key_file_service.append_key, key, path)
        return key

    async def delete_key(self, key: AgeKey, key_path: PathLike | None = None) -> AgeKey:
        """Delete a key from a key file.

        Deleting a key that is not in the file does nothing.

        Args:
            key: Key to delete
            key_path: Key file to delete from (optional)

        Returns:
            The given key

        Raises:
            ValidationError: If key is None
        """
        if key is None:
            raise ValidationError("Key cannot be None")

        path = self._resolve(key_path)
        await asyncio.to_thread(self._key_file_service.delete_key, key, path)
        return key

    async def delete_key_by_public_key(self, public_key: str, key_path: PathLike | None = None) -> AgeKey:
        """Delete a key from a key file by its public key.

        Raises:
            KeyNotFoundError: If the key file has no such key
        """
        path = self._resolve(key_path)
        return await asyncio.to_thread(self._key_file_service.delete_key_by_public_key, public_key, path)

    async def get_key(self, public_key: str, key_path: PathLike | None = None) -> AgeKey:
        """Get a key from a key file by its public key.

        Raises:
            KeyNotFoundError: If the key file has no such key
        """
        path = self._resolve(key_path)
        return await asyncio.to_thread(self._key_file_service.get_key, public_key, path)

    async def key_exists(self, public_key: str, key_path: PathLike | None = None) -> bool:
        """Check if a key exists in a key file."""
        path = self._resolve(key_path)
        return await asyncio.to_thread(self._key_file_service.key_exists, public_key, path)

    async def list_keys(self, key_path: PathLike | None = None) -> list[AgeKey]:
        """List all keys in a key file, oldest first."""
        path = self._resolve(key_path)
        return await asyncio.to_thread(self._key_file_service.list_keys, path)

    async def import_key(self, key: AgeKey, key_path: PathLike | None = None) -> AgeKey:
        """Import a key object into a key file.

        Args:
            key: Key to import
            key_path: Key file to import into (optional)

        Returns:
            The given key

        Raises:
            ValidationError: If key is None
        """
        if key is None:
            raise ValidationError("Key cannot be None")

        path = self._resolve(key_path)
        await asyncio.to_thread(self._key_file_service.append_key, key, path)
        return key

    async def import_key_from_file(
        self,
        in_key_path: PathLike,
        key_path: PathLike | None = None,
        public_key: str | None = None
    ) -> AgeKey:
        """Import a key from another key file.

        Args:
            in_key_path: Key file to import from
            key_path: Key file to import into (optional)
            public_key: Public key to import; required when the source holds
                more than one key

        Returns:
            The imported key

        Raises:
            InvalidOperationError: If public_key is omitted and the source
                holds more than one key
            KeyNotFoundError: If the source has no such key
        """
        source = self._to_path(in_key_path)
        path = self._resolve(key_path)
        key = await asyncio.to_thread(self._key_file_service.read_single_key, source, public_key)
        await asyncio.to_thread(self._key_file_service.append_key, key, path)
        return key

    async def get_sops_config(self, config_path: PathLike) -> SOPSConfig:
        """Read a SOPS configuration file.

        Raises:
            SOPSConfigError: If the file is not a valid SOPS configuration
        """
        return await asyncio.to_thread(self._sops_config_service.read_config, self._to_path(config_path))

    async def create_sops_config(
        self,
        config_path: PathLike,
        config: SOPSConfig,
        *,
        overwrite: bool = False
    ) -> None:
        """Write a SOPS configuration file.

        Raises:
            InvalidOperationError: If the file exists and overwrite is False
        """
        await asyncio.to_thread(
            self._sops_config_service.write_config,
            self._to_path(config_path),
            config,
            overwrite=overwrite,
        )

    @property
    def key_file(self) -> Path:
        """Get the default key file path."""
        return self._key_file
