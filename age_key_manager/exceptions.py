"""Custom exceptions for the age key manager."""


class KeyManagerError(Exception):
    """Base exception for all key manager errors."""


class KeyNotFoundError(KeyManagerError):
    """Raised when a requested key is not in the key file."""


class MalformedKeyError(KeyManagerError):
    """Raised when a key record block cannot be parsed."""


class ValidationError(KeyManagerError):
    """Raised when a caller supplies an invalid argument."""


class InvalidOperationError(KeyManagerError):
    """Raised when an operation is not allowed in the current state."""


class SOPSConfigError(KeyManagerError):
    """Raised when a SOPS configuration document cannot be deserialized."""
