"""Unit tests for the CLI module using real implementations."""

import json
import os
import unittest
from io import StringIO
from pathlib import Path
from unittest.mock import patch

from age_key_manager.cli import AgeKeyManagerCLI
from tests.test_utility import TestDataHelper, TestUtilities


class TestAgeKeyManagerCLIUnit(unittest.TestCase):
    """Unit tests for AgeKeyManagerCLI using real implementations."""

    def setUp(self):
        self.cli = AgeKeyManagerCLI()
        self.temp_dir = TestUtilities.create_temp_data_dir()
        self.key_file = str(Path(self.temp_dir) / "keys.txt")

    def tearDown(self):
        TestUtilities.cleanup_temp_dir(self.temp_dir)

    def _run(self, args: list) -> dict:
        with patch("sys.stdout", new=StringIO()) as mock_stdout:
            self.cli.run(args)
        return json.loads(mock_stdout.getvalue())

    def _run_error(self, args: list) -> dict:
        with patch("sys.stderr", new=StringIO()) as mock_stderr:
            with patch("sys.exit") as mock_exit:
                self.cli.run(args)
        mock_exit.assert_called_once_with(1)
        return json.loads(mock_stderr.getvalue())

    def test_create(self):
        result = self._run(["-f", self.key_file, "create"])

        self.assertTrue(result["success"])
        self.assertEqual(result["command"], "create")
        self.assertTrue(result["key"]["public_key"].startswith("age1"))
        self.assertNotIn("private_key", result["key"])
        self.assertEqual(result["key_file"], self.key_file)

    def test_create_show_private(self):
        result = self._run(["-f", self.key_file, "create", "--show-private"])

        self.assertTrue(result["key"]["private_key"].startswith("AGE-SECRET-KEY-1"))

    def test_get(self):
        created = self._run(["-f", self.key_file, "create"])
        public_key = created["key"]["public_key"]

        result = self._run(["-f", self.key_file, "get", "-k", public_key])

        self.assertEqual(result["key"]["public_key"], public_key)
        self.assertEqual(result["key"]["created_at"], created["key"]["created_at"])

    def test_get_absent(self):
        result = self._run_error(["-f", self.key_file, "get", "-k", "age1absent"])

        self.assertFalse(result["success"])
        self.assertEqual(result["error_code"], "key_not_found")

    def test_exists_and_delete(self):
        public_key = self._run(["-f", self.key_file, "create"])["key"]["public_key"]

        self.assertTrue(self._run(["-f", self.key_file, "exists", "-k", public_key])["exists"])
        deleted = self._run(["-f", self.key_file, "delete", "-k", public_key])
        self.assertEqual(deleted["key"]["public_key"], public_key)
        self.assertFalse(self._run(["-f", self.key_file, "exists", "-k", public_key])["exists"])

    def test_verify(self):
        public_key = self._run(["-f", self.key_file, "create"])["key"]["public_key"]

        result = self._run(["-f", self.key_file, "verify", "-k", public_key])

        self.assertEqual(result["command"], "verify")
        self.assertTrue(result["valid"])

    def test_verify_placeholder_key(self):
        TestDataHelper.write_key_file(Path(self.key_file), [TestDataHelper.create_test_key(1)])

        result = self._run(["-f", self.key_file, "verify", "-k", "age1testpublickey001"])

        self.assertFalse(result["valid"])

    def test_list(self):
        TestDataHelper.write_key_file(
            Path(self.key_file),
            [TestDataHelper.create_test_key(1), TestDataHelper.create_test_key(2)],
        )

        result = self._run(["-f", self.key_file, "list"])

        self.assertEqual(result["count"], 2)
        self.assertEqual(
            [key["public_key"] for key in result["keys"]],
            ["age1testpublickey001", "age1testpublickey002"],
        )
        self.assertEqual(result["keys"][0]["created_at"], "2024-05-01T10:01:00Z")

    def test_import_ambiguous(self):
        source = TestDataHelper.write_key_file(
            Path(self.temp_dir) / "source.txt",
            [TestDataHelper.create_test_key(1), TestDataHelper.create_test_key(2)],
        )

        result = self._run_error(["-f", self.key_file, "import", "-i", str(source)])

        self.assertEqual(result["error_code"], "invalid_operation")
        self.assertFalse(Path(self.key_file).exists())

    def test_import_with_public_key(self):
        source = TestDataHelper.write_key_file(
            Path(self.temp_dir) / "source.txt",
            [TestDataHelper.create_test_key(1), TestDataHelper.create_test_key(2)],
        )

        result = self._run(["-f", self.key_file, "import", "-i", str(source), "-k", "age1testpublickey002"])

        self.assertEqual(result["key"]["public_key"], "age1testpublickey002")

    def test_import_missing_source(self):
        result = self._run_error(["-f", self.key_file, "import", "-i", os.path.join(self.temp_dir, "nope.txt")])

        self.assertEqual(result["error_code"], "file_error")

    def test_path_from_environment(self):
        Path(self.key_file).write_text("")

        with patch.dict(os.environ, {"SOPS_AGE_KEY_FILE": self.key_file}):
            result = self._run(["path"])

        self.assertEqual(result["key_file"], self.key_file)

    def test_path_environment_points_nowhere(self):
        with patch.dict(os.environ, {"SOPS_AGE_KEY_FILE": self.key_file}):
            result = self._run_error(["path"])

        self.assertEqual(result["error_code"], "validation_error")

    def test_config_init_and_show(self):
        config_path = os.path.join(self.temp_dir, ".sops.yaml")

        self._run([
            "-f", self.key_file, "config-init",
            "-c", config_path,
            "-a", "age1abc",
            "-r", r"\.enc\.yaml$",
        ])
        result = self._run(["-f", self.key_file, "config-show", "-c", config_path])

        self.assertEqual(result["config"], {
            "creation_rules": [{"path_regex": r"\.enc\.yaml$", "age": "age1abc"}],
        })

    def test_config_init_existing(self):
        config_path = os.path.join(self.temp_dir, ".sops.yaml")
        Path(config_path).write_text("creation_rules: []\n")

        result = self._run_error(["-f", self.key_file, "config-init", "-c", config_path, "-a", "age1abc"])

        self.assertEqual(result["error_code"], "invalid_operation")

    def test_config_show_invalid(self):
        config_path = os.path.join(self.temp_dir, ".sops.yaml")
        Path(config_path).write_text("creation_rules: [\n")

        result = self._run_error(["-f", self.key_file, "config-show", "-c", config_path])

        self.assertEqual(result["error_code"], "config_error")

    def test_no_command(self):
        result = self._run_error(["-f", self.key_file])

        self.assertEqual(result["error_code"], "missing_command")

    def test_pretty_output(self):
        with patch("sys.stdout", new=StringIO()) as mock_stdout:
            self.cli.run(["-f", self.key_file, "--pretty", "list"])

        self.assertIn("\n  ", mock_stdout.getvalue())


if __name__ == "__main__":
    unittest.main()
