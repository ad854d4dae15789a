"""Conversion between AgeKey objects and their key file text blocks."""

import re
from datetime import datetime

from age_key_manager.constants import Constants
from age_key_manager.exceptions import MalformedKeyError
from age_key_manager.models import AgeKey


class AgeKeyCodec:
    """Encode and decode the three-line key file record.

    A record looks like::

        # created: 2024-05-01T10:00:00+02:00
        # public key: age1...
        AGE-SECRET-KEY-1...
    """

    _TIMESTAMP_PATTERN = re.compile(
        r"^(?P<base>\d{4}-\d{2}-\d{2}[Tt ]\d{2}:\d{2}:\d{2})"
        r"(?:\.(?P<fraction>\d+))?"
        r"(?P<offset>[Zz]|[+-]\d{2}:\d{2})?$"
    )

    @staticmethod
    def format_timestamp(value: datetime) -> str:
        """Render a timestamp as RFC 3339 with second precision.

        UTC is written with the ``Z`` suffix, matching age-keygen.
        """
        text = value.isoformat(timespec="seconds")
        if text.endswith("+00:00"):
            text = text[:-6] + "Z"
        return text

    @classmethod
    def parse_timestamp(cls, value: str) -> datetime:
        """Parse an RFC 3339 timestamp.

        Fractional seconds of any length are accepted and cut to
        microseconds.

        Raises:
            ValueError: If the value is not a valid timestamp
        """
        match = cls._TIMESTAMP_PATTERN.match(value)
        if match is None:
            raise ValueError(f"Not an RFC 3339 timestamp: {value}")

        text = match["base"]
        if match["fraction"]:
            text += "." + match["fraction"][:6].ljust(6, "0")
        offset = match["offset"]
        if offset:
            text += "+00:00" if offset in ("Z", "z") else offset
        return datetime.fromisoformat(text)

    @classmethod
    def encode(cls, key: AgeKey) -> str:
        """Encode a key as its three-line block, without a trailing terminator.

        A key read from a key file keeps the creation timestamp text it was
        read with.

        Args:
            key: Key to encode

        Returns:
            Text block
        """
        created = key.created_text if key.created_text is not None else cls.format_timestamp(key.created_at)
        return "\n".join([
            f"{Constants.CREATED_PREFIX()}{created}",
            Constants.public_key_marker(key.public_key),
            key.private_key,
        ])

    @classmethod
    def decode(cls, text: str) -> AgeKey:
        """Decode a three-line block into a key.

        Lines end at ``\\n`` or ``\\r\\n`` only. A single trailing line
        terminator is accepted.

        Args:
            text: Text block

        Returns:
            Decoded key

        Raises:
            MalformedKeyError: If a line is missing, empty or lacks its prefix,
                a value contains other line breaks, or the timestamp cannot
                be parsed
        """
        if text is None:
            raise MalformedKeyError("Key record cannot be None")

        lines = text.replace("\r\n", "\n").removesuffix("\n").split("\n")
        if len(lines) != Constants.RECORD_LINE_COUNT():
            raise MalformedKeyError(
                f"Key record must have {Constants.RECORD_LINE_COUNT()} lines, found {len(lines)}"
            )

        created_line, public_key_line, private_key = lines
        created_at_text = cls._strip_prefix(created_line, Constants.CREATED_PREFIX(), "created")
        public_key = cls._strip_prefix(public_key_line, Constants.PUBLIC_KEY_PREFIX(), "public key")

        if not private_key:
            raise MalformedKeyError("Key record has an empty private key line")

        try:
            created_at = cls.parse_timestamp(created_at_text)
        except ValueError as e:
            raise MalformedKeyError(f"Invalid creation timestamp '{created_at_text}'") from e

        try:
            return AgeKey(
                created_at=created_at,
                public_key=public_key,
                private_key=private_key,
                created_text=created_at_text,
            )
        except ValueError as e:
            raise MalformedKeyError(f"Invalid key record: {e}") from e

    @staticmethod
    def _strip_prefix(line: str, prefix: str, label: str) -> str:
        if not line:
            raise MalformedKeyError(f"Key record has an empty {label} line")
        if not line.startswith(prefix):
            raise MalformedKeyError(f"Key record {label} line must start with '{prefix}'")
        value = line[len(prefix):]
        if not value:
            raise MalformedKeyError(f"Key record {label} line has no value")
        return value
