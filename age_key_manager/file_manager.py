"""File management utilities for key files and SOPS configuration files."""

import logging
import os
from pathlib import Path

from age_key_manager.config import DEFAULT_CONFIG, KeyManagerConfig
from age_key_manager.constants import Constants

logger = logging.getLogger(__name__)


class FileManager:
    """Whole-file text reads and atomic overwrites.

    OS errors are not translated; they reach the caller as raised.
    """

    def __init__(self, config: KeyManagerConfig = DEFAULT_CONFIG):
        """Initialize the file manager.

        Args:
            config: Encoding, line terminator and permission settings
        """
        self._config = config

    def read_text(self, file_path: Path, *, missing_ok: bool = True) -> str:
        """Read a text file.

        Args:
            file_path: Path to the file to read
            missing_ok: Treat a missing file as empty instead of failing

        Returns:
            File content with ``\\n`` line terminators, or an empty string if
            the file doesn't exist and missing_ok is set

        Raises:
            OSError: If the file cannot be read
        """
        file_path = Path(file_path)
        if missing_ok and not file_path.exists():
            return ""

        with file_path.open(encoding=self._config.encoding) as f:
            return f.read()

    def ensure_file(self, file_path: Path, *, secure: bool = True) -> None:
        """Create the parent directory and an empty file if they are absent.

        Args:
            file_path: Path to the file
            secure: Restrict a newly created file to its owner
        """
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        if not file_path.exists():
            file_path.touch()
            if secure:
                self._set_secure_permissions(file_path)
            logger.debug(f"Created empty file {file_path}")

    def write_text_atomic(self, file_path: Path, text: str, *, secure: bool = True) -> None:
        """Write text atomically using a temporary file.

        The target is replaced in one step, so readers see either the old or
        the new content.

        Args:
            file_path: Path to the target file
            text: Content with ``\\n`` line terminators
            secure: Restrict the written file to its owner

        Raises:
            OSError: If the write or replace fails
        """
        file_path = Path(file_path)
        temp_file = file_path.with_name(f"{file_path.name}.temp")

        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)

            with temp_file.open("w", encoding=self._config.encoding, newline=self._config.newline) as f:
                f.write(text)

            if secure:
                self._set_secure_permissions(temp_file)

            os.replace(temp_file, file_path)
        except BaseException:
            # Clean up temporary file if it exists
            if temp_file.exists():
                temp_file.unlink()
            raise

    def _set_secure_permissions(self, file_path: Path) -> None:
        """Set secure file permissions (owner read/write only).

        Args:
            file_path: Path to the file to secure
        """
        if not self._config.secure_permissions:
            return
        try:
            os.chmod(file_path, Constants.KEY_FILE_MODE())
        except OSError as e:
            # Not critical, e.g. on file systems without POSIX modes
            logger.warning(f"Could not restrict permissions on {file_path}: {e}")
