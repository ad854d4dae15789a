"""Age Key Manager - local age key management for SOPS.

This package manages age key pairs in the plain-text key file SOPS reads
(``sops/age/keys.txt``) and reads and writes ``.sops.yaml`` configuration
files.
"""

from age_key_manager.age_keygen import AgeKeygen
from age_key_manager.bech32 import Bech32
from age_key_manager.exceptions import (
    InvalidOperationError,
    KeyManagerError,
    KeyNotFoundError,
    MalformedKeyError,
    SOPSConfigError,
    ValidationError,
)
from age_key_manager.key_codec import AgeKeyCodec
from age_key_manager.key_manager import LocalAgeKeyManager
from age_key_manager.models import AgeKey, SOPSConfig, SOPSCreationRule

try:
    from importlib.metadata import version
    __version__ = version("age-key-manager")
except ImportError:
    __version__ = "unknown"

__all__ = [
    "AgeKey",
    "AgeKeyCodec",
    "AgeKeygen",
    "Bech32",
    "InvalidOperationError",
    "KeyManagerError",
    "KeyNotFoundError",
    "LocalAgeKeyManager",
    "MalformedKeyError",
    "SOPSConfig",
    "SOPSConfigError",
    "SOPSCreationRule",
    "ValidationError",
]
