"""Data models for the age key manager."""

from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any, Optional

from age_key_manager.exceptions import SOPSConfigError


def _has_line_break(value: str) -> bool:
    """Check for any line boundary ``str.splitlines`` recognizes."""
    return "".join(value.splitlines()) != value


@dataclass(frozen=True)
class AgeKey:
    """An age key pair as stored in a key file.

    The canonical text form, returned by ``str(key)``, is the three-line
    block written to key files. Timestamps are kept at second precision,
    which is all the text form can carry.

    ``created_text`` holds the creation timestamp exactly as it was read
    from a key file, so the key encodes back to the same text even when
    another tool wrote fractional seconds or a ``+00:00`` offset. It takes
    no part in equality.
    """

    created_at: datetime
    public_key: str
    private_key: str = field(repr=False)
    created_text: Optional[str] = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Validate and process fields after initialization."""
        if not isinstance(self.created_at, datetime):
            raise ValueError("created_at must be a datetime")
        if not isinstance(self.public_key, str) or not self.public_key:
            raise ValueError("public_key cannot be empty")
        if not isinstance(self.private_key, str) or not self.private_key:
            raise ValueError("private_key cannot be empty")
        if _has_line_break(self.public_key):
            raise ValueError("public_key cannot contain line breaks")
        if _has_line_break(self.private_key):
            raise ValueError("private_key cannot contain line breaks")
        if self.created_text is not None and (not self.created_text or _has_line_break(self.created_text)):
            raise ValueError("created_text must be a single non-empty line")
        if self.created_at.microsecond:
            object.__setattr__(self, "created_at", self.created_at.replace(microsecond=0))

    def __str__(self) -> str:
        from age_key_manager.key_codec import AgeKeyCodec

        return AgeKeyCodec.encode(self)

    @classmethod
    def from_string(cls, text: str) -> "AgeKey":
        """Parse a key from its three-line text block."""
        from age_key_manager.key_codec import AgeKeyCodec

        return AgeKeyCodec.decode(text)


@dataclass
class SOPSCreationRule:
    """A single entry of ``creation_rules`` in a SOPS configuration."""

    path_regex: Optional[str] = None
    encrypted_regex: Optional[str] = None
    unencrypted_regex: Optional[str] = None
    age: Optional[str] = None
    pgp: Optional[str] = None
    kms: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, leaving out unset fields."""
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SOPSCreationRule":
        """Create SOPSCreationRule from dictionary."""
        if not isinstance(data, dict):
            raise SOPSConfigError("Each creation rule must be a mapping")

        known = {f.name for f in fields(cls)}
        unknown = sorted(str(k) for k in data if k not in known)
        if unknown:
            raise SOPSConfigError(f"Unknown creation rule keys: {', '.join(unknown)}")

        for key, value in data.items():
            if value is not None and not isinstance(value, str):
                raise SOPSConfigError(f"Creation rule key '{key}' must be a string")

        return cls(**data)


@dataclass
class SOPSConfig:
    """A SOPS configuration document (``.sops.yaml``)."""

    creation_rules: list[SOPSCreationRule] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "creation_rules": [rule.to_dict() for rule in self.creation_rules],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SOPSConfig":
        """Create SOPSConfig from dictionary."""
        if not isinstance(data, dict):
            raise SOPSConfigError("SOPS configuration must be a mapping")

        unknown = sorted(str(k) for k in data if k != "creation_rules")
        if unknown:
            raise SOPSConfigError(f"Unknown SOPS configuration keys: {', '.join(unknown)}")

        rules = data.get("creation_rules") or []
        if not isinstance(rules, list):
            raise SOPSConfigError("creation_rules must be a list")

        return cls(creation_rules=[SOPSCreationRule.from_dict(rule) for rule in rules])
