"""Bech32 encoding and decoding utilities."""

from age_key_manager.exceptions import ValidationError


class Bech32Error(ValidationError):
    """Raised when bech32 validation fails."""


class Bech32:
    """
    A class for bech32 encoding and decoding operations.

    Bech32 (BIP 173) encodes binary data as a human-readable prefix, the
    separator "1", the data in a 32-character alphabet and a six character
    checksum. age uses it for both halves of an X25519 key pair:
    "age1..." for recipients and "AGE-SECRET-KEY-1..." for identities.

    age does not apply the 90 character limit of BIP 173, so neither does
    this implementation.
    """

    _CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
    _GENERATOR = (0x3B6A57B2, 0x26508E6D, 0x1EA119FA, 0x3D4233DD, 0x2A1462B3)
    _CHECKSUM_LENGTH = 6

    @classmethod
    def _polymod(cls, values: list[int]) -> int:
        chk = 1
        for value in values:
            top = chk >> 25
            chk = (chk & 0x1FFFFFF) << 5 ^ value
            for i in range(5):
                if (top >> i) & 1:
                    chk ^= cls._GENERATOR[i]
        return chk

    @staticmethod
    def _hrp_expand(hrp: str) -> list[int]:
        return [ord(c) >> 5 for c in hrp] + [0] + [ord(c) & 31 for c in hrp]

    @classmethod
    def _create_checksum(cls, hrp: str, data: list[int]) -> list[int]:
        values = cls._hrp_expand(hrp) + data
        polymod = cls._polymod(values + [0] * cls._CHECKSUM_LENGTH) ^ 1
        return [(polymod >> 5 * (5 - i)) & 31 for i in range(cls._CHECKSUM_LENGTH)]

    @staticmethod
    def _convert_bits(data: bytes | list[int], from_bits: int, to_bits: int, *, pad: bool) -> list[int]:
        """Regroup a sequence of from_bits-wide values into to_bits-wide values."""
        acc = 0
        bits = 0
        result = []
        max_value = (1 << to_bits) - 1
        for value in data:
            if value < 0 or value >> from_bits:
                raise Bech32Error("Invalid data value for bit conversion")
            acc = (acc << from_bits) | value
            bits += from_bits
            while bits >= to_bits:
                bits -= to_bits
                result.append((acc >> bits) & max_value)
        if pad:
            if bits:
                result.append((acc << (to_bits - bits)) & max_value)
        elif bits >= from_bits or ((acc << (to_bits - bits)) & max_value):
            raise Bech32Error("Invalid padding in bech32 data")
        return result

    @classmethod
    def encode(cls, hrp: str, data: bytes) -> str:
        """
        Encode binary data to a lower-case bech32 string.

        Args:
            hrp: Human-readable prefix, e.g. "age"
            data: Binary data to encode

        Returns:
            Bech32 encoded string

        Raises:
            Bech32Error: If the prefix or data is empty
        """
        if not hrp:
            raise Bech32Error("Human-readable prefix cannot be empty")
        if not data:
            raise Bech32Error("Cannot encode empty data")

        hrp = hrp.lower()
        words = cls._convert_bits(data, 8, 5, pad=True)
        checksum = cls._create_checksum(hrp, words)
        return hrp + "1" + "".join(cls._CHARSET[w] for w in words + checksum)

    @classmethod
    def decode(cls, bech32_data: str) -> tuple[str, bytes]:
        """
        Decode a bech32 string.

        Args:
            bech32_data: Bech32 encoded string, all lower or all upper case

        Returns:
            Tuple of (lower-case human-readable prefix, decoded bytes)

        Raises:
            TypeError: If input is not a string
            Bech32Error: If the string is malformed or the checksum fails
        """
        if not isinstance(bech32_data, str):
            if bech32_data is None:
                raise Bech32Error("Input cannot be None")
            raise TypeError("Input must be a string")

        if not bech32_data:
            raise Bech32Error("Cannot decode empty string")

        if bech32_data.lower() != bech32_data and bech32_data.upper() != bech32_data:
            raise Bech32Error("Bech32 string cannot mix upper and lower case")

        if any(ord(c) < 33 or ord(c) > 126 for c in bech32_data):
            raise Bech32Error("Bech32 string contains invalid characters")

        bech32_data = bech32_data.lower()
        separator = bech32_data.rfind("1")
        if separator < 1 or separator + cls._CHECKSUM_LENGTH + 1 > len(bech32_data):
            raise Bech32Error("Bech32 separator is missing or misplaced")

        hrp = bech32_data[:separator]
        try:
            words = [cls._CHARSET.index(c) for c in bech32_data[separator + 1:]]
        except ValueError as e:
            raise Bech32Error("Bech32 string contains invalid characters") from e

        if cls._polymod(cls._hrp_expand(hrp) + words) != 1:
            raise Bech32Error("Bech32 checksum mismatch")

        data = cls._convert_bits(words[:-cls._CHECKSUM_LENGTH], 5, 8, pad=False)
        return hrp, bytes(data)

    @classmethod
    def is_valid(cls, bech32_data: str, *, hrp: str | None = None) -> bool:
        """
        Check if a string is valid bech32, optionally with an expected prefix.

        Args:
            bech32_data: String to validate
            hrp: Expected human-readable prefix (case-insensitive)

        Returns:
            True if valid bech32, False otherwise
        """
        try:
            decoded_hrp, _ = cls.decode(bech32_data)
        except (Bech32Error, TypeError):
            return False
        return hrp is None or decoded_hrp == hrp.lower()
