"""In-memory age key generation."""

import asyncio
from datetime import datetime

from cryptography.hazmat.primitives.asymmetric.x25519 import X25519PrivateKey
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    NoEncryption,
    PrivateFormat,
    PublicFormat,
)

from age_key_manager.bech32 import Bech32
from age_key_manager.constants import Constants
from age_key_manager.exceptions import ValidationError
from age_key_manager.models import AgeKey


class AgeKeygen:
    """Generate age X25519 key pairs without touching the file system."""

    @classmethod
    def generate(cls) -> AgeKey:
        """Generate a new key pair.

        The creation time is the current local time, as age-keygen records it.

        Returns:
            New AgeKey
        """
        private_key = X25519PrivateKey.generate()
        secret = private_key.private_bytes(Encoding.Raw, PrivateFormat.Raw, NoEncryption())
        public = private_key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)

        return AgeKey(
            created_at=datetime.now().astimezone().replace(microsecond=0),
            public_key=Bech32.encode(Constants.PUBLIC_KEY_HRP(), public),
            private_key=Bech32.encode(Constants.SECRET_KEY_HRP(), secret).upper(),
        )

    @classmethod
    async def in_memory(cls) -> AgeKey:
        """Generate a new key pair from a coroutine.

        Returns:
            New AgeKey
        """
        return await asyncio.to_thread(cls.generate)

    @classmethod
    def public_key_for(cls, private_key: str) -> str:
        """Derive the age recipient string for an age identity string.

        Args:
            private_key: ``AGE-SECRET-KEY-1...`` string

        Returns:
            ``age1...`` public key

        Raises:
            ValidationError: If the string is not an age secret key
        """
        hrp, secret = Bech32.decode(private_key)
        if hrp != Constants.SECRET_KEY_HRP():
            raise ValidationError(f"Not an age secret key: unexpected prefix '{hrp}'")
        if len(secret) != Constants.X25519_KEY_SIZE_BYTES():
            raise ValidationError(
                f"age secret key must be {Constants.X25519_KEY_SIZE_BYTES()} bytes, got {len(secret)}"
            )

        public = X25519PrivateKey.from_private_bytes(secret).public_key().public_bytes(
            Encoding.Raw, PublicFormat.Raw
        )
        return Bech32.encode(Constants.PUBLIC_KEY_HRP(), public)

    @classmethod
    def verify(cls, key: AgeKey) -> bool:
        """Check that a key's private half derives its public half.

        Args:
            key: Key to check

        Returns:
            True if both halves are valid age keys of the same pair
        """
        if not Bech32.is_valid(key.private_key, hrp=Constants.SECRET_KEY_HRP()):
            return False
        if not Bech32.is_valid(key.public_key, hrp=Constants.PUBLIC_KEY_HRP()):
            return False
        try:
            return cls.public_key_for(key.private_key) == key.public_key
        except ValidationError:
            return False
