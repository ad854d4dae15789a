"""Tests for the config module."""

import unittest

from age_key_manager.config import DEFAULT_CONFIG, KeyManagerConfig


class TestKeyManagerConfig(unittest.TestCase):
    """Test cases for KeyManagerConfig."""

    def test_defaults(self) -> None:
        self.assertEqual(DEFAULT_CONFIG.newline, "\n")
        self.assertEqual(DEFAULT_CONFIG.encoding, "utf-8")
        self.assertTrue(DEFAULT_CONFIG.secure_permissions)

    def test_windows_newline_allowed(self) -> None:
        config = KeyManagerConfig(newline="\r\n")
        self.assertEqual(config.newline, "\r\n")

    def test_invalid_newline(self) -> None:
        with self.assertRaises(ValueError):
            KeyManagerConfig(newline="\r")

    def test_empty_encoding(self) -> None:
        with self.assertRaises(ValueError):
            KeyManagerConfig(encoding="")


if __name__ == "__main__":
    unittest.main()
