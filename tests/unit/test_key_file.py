"""Tests for the key_file module."""

import unittest

from age_key_manager.exceptions import MalformedKeyError
from age_key_manager.key_file import KeyFileContent
from tests.test_utility import TestDataHelper


class TestKeyFileContent(unittest.TestCase):
    """Test cases for KeyFileContent."""

    def setUp(self):
        self.key1 = TestDataHelper.create_test_key(1)
        self.key2 = TestDataHelper.create_test_key(2)
        self.key3 = TestDataHelper.create_test_key(3)
        self.text = TestDataHelper.create_key_file_text([self.key1, self.key2, self.key3])

    def test_empty_content(self):
        content = KeyFileContent("")

        self.assertEqual(content.lines, [])
        self.assertEqual(content.keys(), [])
        self.assertEqual(content.line_count(), 0)
        self.assertEqual(content.serialize(), "")
        self.assertIsNone(content.find_key(self.key1.public_key))

    def test_lines(self):
        content = KeyFileContent(self.text)

        self.assertEqual(len(content.lines), 9)
        self.assertEqual(content.lines[1], "# public key: age1testpublickey001")

    def test_crlf_is_normalized(self):
        content = KeyFileContent(self.text.replace("\n", "\r\n"))

        self.assertEqual(content.keys(), [self.key1, self.key2, self.key3])
        self.assertNotIn("\r", content.serialize())

    def test_keys_in_file_order(self):
        self.assertEqual(KeyFileContent(self.text).keys(), [self.key1, self.key2, self.key3])

    def test_keys_ignores_other_comment_lines(self):
        text = "# imported from laptop\n" + self.text

        self.assertEqual(KeyFileContent(text).keys(), [self.key1, self.key2, self.key3])

    def test_keys_incomplete_record(self):
        text = self.text + "# created: 2024-05-01T12:00:00Z\n# public key: age1dangling\n"

        with self.assertRaises(MalformedKeyError):
            KeyFileContent(text).keys()

    def test_find_block(self):
        content = KeyFileContent(self.text)

        self.assertEqual(content.find_block(self.key2.public_key), str(self.key2))
        self.assertIsNone(content.find_block("age1absent"))

    def test_find_key(self):
        self.assertEqual(KeyFileContent(self.text).find_key(self.key3.public_key), self.key3)

    def test_find_block_does_not_match_prefix_of_longer_key(self):
        content = KeyFileContent(self.text)

        self.assertIsNone(content.find_block("age1testpublickey00"))
        self.assertFalse(content.has_public_key("age1testpublickey00"))

    def test_find_block_marker_without_neighbours(self):
        with self.assertRaises(MalformedKeyError):
            KeyFileContent("# public key: age1abc\nAGE-SECRET-KEY-1ABC\n").find_block("age1abc")
        with self.assertRaises(MalformedKeyError):
            KeyFileContent("# created: 2024-05-01T10:00:00Z\n# public key: age1abc\n").find_block("age1abc")

    def test_has_public_key(self):
        content = KeyFileContent(self.text)

        self.assertTrue(content.has_public_key(self.key1.public_key))
        self.assertFalse(content.has_public_key("age1absent"))

    def test_contains(self):
        content = KeyFileContent(self.text)

        self.assertTrue(content.contains(str(self.key2)))
        self.assertTrue(content.contains(str(self.key2) + "\n"))
        self.assertFalse(content.contains(str(TestDataHelper.create_test_key(4))))
        self.assertFalse(content.contains(""))

    def test_contains_requires_line_boundaries(self):
        content = KeyFileContent("prefix" + str(self.key1) + "\n")

        self.assertFalse(content.contains(str(self.key1)))

    def test_remove_skips_longer_private_key(self):
        text = f"{self.key1}C\n"
        content = KeyFileContent(text)

        self.assertEqual(content.remove(str(self.key1)), 0)
        self.assertEqual(content.serialize(), text)

    def test_append_to_empty(self):
        content = KeyFileContent("")

        self.assertTrue(content.append(str(self.key1)))
        self.assertEqual(content.serialize(), str(self.key1) + "\n")

    def test_append_adds_missing_terminator(self):
        content = KeyFileContent(str(self.key1))

        content.append(str(self.key2))

        self.assertEqual(content.serialize(), f"{self.key1}\n{self.key2}\n")

    def test_append_is_idempotent(self):
        content = KeyFileContent("")

        self.assertTrue(content.append(str(self.key1)))
        self.assertFalse(content.append(str(self.key1)))
        self.assertFalse(content.append(str(self.key1) + "\n"))
        self.assertEqual(content.serialize().count(str(self.key1)), 1)

    def test_remove_first(self):
        content = KeyFileContent(self.text)

        self.assertEqual(content.remove(str(self.key1)), 1)
        self.assertEqual(content.serialize(), f"{self.key2}\n{self.key3}\n")

    def test_remove_middle(self):
        content = KeyFileContent(self.text)

        content.remove(str(self.key2))

        self.assertEqual(content.serialize(), f"{self.key1}\n{self.key3}\n")

    def test_remove_last_without_terminator(self):
        content = KeyFileContent(f"{self.key1}\n{self.key2}")

        content.remove(str(self.key2))

        self.assertEqual(content.serialize(), f"{self.key1}\n")

    def test_remove_only_key_leaves_empty(self):
        content = KeyFileContent(str(self.key1) + "\n")

        content.remove(str(self.key1))

        self.assertEqual(content.serialize(), "")

    def test_remove_all_copies(self):
        content = KeyFileContent(f"{self.key1}\n{self.key2}\n{self.key1}\n")

        self.assertEqual(content.remove(str(self.key1)), 2)
        self.assertEqual(content.serialize(), f"{self.key2}\n")

    def test_remove_absent(self):
        content = KeyFileContent(self.text)

        self.assertEqual(content.remove(str(TestDataHelper.create_test_key(9))), 0)
        self.assertEqual(content.remove(""), 0)
        self.assertEqual(content.serialize(), self.text)

    def test_serialize_strips_trailing_blank_lines(self):
        content = KeyFileContent(str(self.key1) + "\n\n\n")

        self.assertEqual(content.serialize(), str(self.key1) + "\n")

    def test_line_count_ignores_trailing_blank_lines(self):
        self.assertEqual(KeyFileContent(str(self.key1) + "\n\n").line_count(), 3)


if __name__ == "__main__":
    unittest.main()
