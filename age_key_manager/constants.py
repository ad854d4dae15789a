"""Library-wide constants.

These constants centralize the literal values of the key file format and
the SOPS path conventions so every module agrees on them.
"""


class Constants:

    # Key file record format
    _CREATED_PREFIX: str = "# created: "
    _PUBLIC_KEY_PREFIX: str = "# public key: "
    _RECORD_LINE_COUNT: int = 3

    # age key encoding
    _PUBLIC_KEY_HRP: str = "age"
    _SECRET_KEY_HRP: str = "age-secret-key-"
    _X25519_KEY_SIZE_BYTES: int = 32

    # Default key file location
    _KEY_FILE_ENV_VARIABLE: str = "SOPS_AGE_KEY_FILE"
    _XDG_CONFIG_HOME_ENV_VARIABLE: str = "XDG_CONFIG_HOME"
    _APPDATA_ENV_VARIABLE: str = "APPDATA"
    _KEY_FILE_RELATIVE_PATH: tuple[str, ...] = ("sops", "age", "keys.txt")

    # Written key files are owner read/write only
    _KEY_FILE_MODE: int = 0o600

    @classmethod
    def CREATED_PREFIX(cls) -> str:
        return cls._CREATED_PREFIX

    @classmethod
    def PUBLIC_KEY_PREFIX(cls) -> str:
        return cls._PUBLIC_KEY_PREFIX

    @classmethod
    def RECORD_LINE_COUNT(cls) -> int:
        return cls._RECORD_LINE_COUNT

    @classmethod
    def PUBLIC_KEY_HRP(cls) -> str:
        return cls._PUBLIC_KEY_HRP

    @classmethod
    def SECRET_KEY_HRP(cls) -> str:
        return cls._SECRET_KEY_HRP

    @classmethod
    def X25519_KEY_SIZE_BYTES(cls) -> int:
        return cls._X25519_KEY_SIZE_BYTES

    @classmethod
    def KEY_FILE_ENV_VARIABLE(cls) -> str:
        return cls._KEY_FILE_ENV_VARIABLE

    @classmethod
    def XDG_CONFIG_HOME_ENV_VARIABLE(cls) -> str:
        return cls._XDG_CONFIG_HOME_ENV_VARIABLE

    @classmethod
    def APPDATA_ENV_VARIABLE(cls) -> str:
        return cls._APPDATA_ENV_VARIABLE

    @classmethod
    def KEY_FILE_RELATIVE_PATH(cls) -> tuple[str, ...]:
        return cls._KEY_FILE_RELATIVE_PATH

    @classmethod
    def KEY_FILE_MODE(cls) -> int:
        return cls._KEY_FILE_MODE

    @classmethod
    def public_key_marker(cls, public_key: str) -> str:
        """Return the marker line that anchors a record in the key file."""
        return f"{cls._PUBLIC_KEY_PREFIX}{public_key}"
