"""Key file service for record operations on a single key file."""

import logging
from pathlib import Path

from age_key_manager.constants import Constants
from age_key_manager.exceptions import (
    InvalidOperationError,
    KeyNotFoundError,
    MalformedKeyError,
    ValidationError,
)
from age_key_manager.file_manager import FileManager
from age_key_manager.key_codec import AgeKeyCodec
from age_key_manager.key_file import KeyFileContent
from age_key_manager.models import AgeKey

logger = logging.getLogger(__name__)


class KeyFileService:
    """Service for reading and mutating the records of a key file.

    Every operation reads the whole file, works on the text in memory and,
    for mutations, writes the whole file back in one atomic replace. There
    is no locking: two writers on the same path may lose each other's
    updates, so callers must keep to a single writer per file.
    """

    def __init__(self, file_manager: FileManager):
        """Initialize the key file service.

        Args:
            file_manager: File manager instance
        """
        self._file_manager = file_manager

    @staticmethod
    def _validate_public_key(public_key: str) -> None:
        if public_key is None:
            raise ValidationError("Public key cannot be None")
        if public_key.strip() == "":
            raise ValidationError("Public key cannot be empty")

    def _load(self, key_path: Path) -> KeyFileContent:
        return KeyFileContent(self._file_manager.read_text(key_path))

    def _save(self, key_path: Path, content: KeyFileContent) -> None:
        self._file_manager.write_text_atomic(key_path, content.serialize())

    def append_key(self, key: AgeKey, key_path: Path) -> bool:
        """Append a key to a key file unless its exact text is already there.

        The directory and file are created if they do not exist.

        Args:
            key: Key to append
            key_path: Path to the key file

        Returns:
            True if the key was written, False if it was already present

        Raises:
            ValidationError: If key is None
            OSError: If the file cannot be read or written
        """
        if key is None:
            raise ValidationError("Key cannot be None")

        self._file_manager.ensure_file(key_path)
        content = self._load(key_path)
        if not content.append(AgeKeyCodec.encode(key)):
            logger.debug(f"Key {key.public_key} already present in {key_path}")
            return False

        self._save(key_path, content)
        logger.info(f"Added key {key.public_key} to {key_path}")
        return True

    def delete_key(self, key: AgeKey, key_path: Path) -> int:
        """Remove the exact text of a key from a key file.

        A key that is not in the file is not an error.

        Args:
            key: Key to remove
            key_path: Path to the key file

        Returns:
            Number of copies removed

        Raises:
            ValidationError: If key is None
            OSError: If the file cannot be read or written
        """
        if key is None:
            raise ValidationError("Key cannot be None")

        content = self._load(key_path)
        removed = content.remove(AgeKeyCodec.encode(key))
        if not removed:
            logger.debug(f"Key {key.public_key} not present in {key_path}, nothing to delete")
            return 0

        self._save(key_path, content)
        logger.info(f"Deleted key {key.public_key} from {key_path}")
        return removed

    def delete_key_by_public_key(self, public_key: str, key_path: Path) -> AgeKey:
        """Remove the record for a public key from a key file.

        Args:
            public_key: Public key of the record to remove
            key_path: Path to the key file

        Returns:
            The removed key

        Raises:
            ValidationError: If public_key is None or empty
            KeyNotFoundError: If no record has this public key
            MalformedKeyError: If the record cannot be parsed
            OSError: If the file cannot be read or written
        """
        self._validate_public_key(public_key)

        content = self._load(key_path)
        block = content.find_block(public_key)
        if block is None:
            raise KeyNotFoundError(f"Key {public_key} does not exist in the key file {key_path}")

        key = AgeKeyCodec.decode(block)
        content.remove(block)
        self._save(key_path, content)
        logger.info(f"Deleted key {public_key} from {key_path}")
        return key

    def get_key(self, public_key: str, key_path: Path) -> AgeKey:
        """Read the record for a public key.

        Args:
            public_key: Public key to look up
            key_path: Path to the key file

        Returns:
            The matching key

        Raises:
            ValidationError: If public_key is None or empty
            KeyNotFoundError: If no record has this public key
            MalformedKeyError: If the record cannot be parsed
        """
        self._validate_public_key(public_key)

        key = self._load(key_path).find_key(public_key)
        if key is None:
            raise KeyNotFoundError(f"Key {public_key} does not exist in the key file {key_path}")
        return key

    def key_exists(self, public_key: str, key_path: Path) -> bool:
        """Check whether a key file has a record for a public key.

        A missing file has no records.
        """
        self._validate_public_key(public_key)
        return self._load(key_path).has_public_key(public_key)

    def list_keys(self, key_path: Path) -> list[AgeKey]:
        """List all keys of a key file in file order.

        Args:
            key_path: Path to the key file

        Returns:
            Keys, or an empty list if the file does not exist

        Raises:
            MalformedKeyError: If a record cannot be parsed
        """
        keys = self._load(key_path).keys()
        logger.debug(f"Found {len(keys)} keys in {key_path}")
        return keys

    def read_single_key(self, in_key_path: Path, public_key: str | None = None) -> AgeKey:
        """Read one key from a source key file for import.

        Without a public key the source must hold exactly one record, and the
        public key is taken from its second line.

        Args:
            in_key_path: Path to the source key file
            public_key: Public key of the record to read (optional)

        Returns:
            The selected key

        Raises:
            InvalidOperationError: If no public key is given and the source
                holds more than one key
            KeyNotFoundError: If the source holds no matching key
            MalformedKeyError: If the record cannot be parsed
            OSError: If the source cannot be read
        """
        content = KeyFileContent(self._file_manager.read_text(in_key_path, missing_ok=False))

        if public_key is None or public_key.strip() == "":
            line_count = content.line_count()
            if line_count > Constants.RECORD_LINE_COUNT():
                raise InvalidOperationError(
                    "The public key must be provided if the key file contains more than one key."
                )
            if line_count == 0:
                raise KeyNotFoundError(f"The key file {in_key_path} contains no keys")
            if line_count < Constants.RECORD_LINE_COUNT():
                raise MalformedKeyError(f"The key file {in_key_path} contains an incomplete key")

            public_key_line = content.lines[1]
            if not public_key_line.startswith(Constants.PUBLIC_KEY_PREFIX()):
                raise MalformedKeyError(f"The key file {in_key_path} has no public key line")
            public_key = public_key_line.removeprefix(Constants.PUBLIC_KEY_PREFIX())

        key = content.find_key(public_key)
        if key is None:
            raise KeyNotFoundError(f"Key {public_key} does not exist in the key file {in_key_path}")
        return key
