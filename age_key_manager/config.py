"""Configuration management for the age key manager."""

from dataclasses import dataclass


@dataclass
class KeyManagerConfig:
    """Configuration for LocalAgeKeyManager instances."""

    # File settings
    newline: str = "\n"  # line terminator used when writing key files
    encoding: str = "utf-8"
    secure_permissions: bool = True

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.newline not in ("\n", "\r\n"):
            raise ValueError("newline must be '\\n' or '\\r\\n'")
        if not self.encoding:
            raise ValueError("encoding cannot be empty")


# Default configuration instance
DEFAULT_CONFIG = KeyManagerConfig()
