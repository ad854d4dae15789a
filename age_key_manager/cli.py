#!/usr/bin/env python3
"""Command-line interface for the age key manager."""

import argparse
import asyncio
import json
import sys
from typing import Any, Optional

from age_key_manager.age_keygen import AgeKeygen
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


class AgeKeyManagerCLI:
    """Command-line interface for managing SOPS age keys."""

    _ERROR_CODES: dict[type, str] = {
        ValidationError: "validation_error",
        KeyNotFoundError: "key_not_found",
        MalformedKeyError: "malformed_key",
        InvalidOperationError: "invalid_operation",
        SOPSConfigError: "config_error",
    }

    def __init__(self) -> None:
        """Initialize the CLI."""
        self._parser = self._create_parser()
        self._pretty = False

    def _create_parser(self) -> argparse.ArgumentParser:
        """Create the argument parser.

        Returns:
            Configured argument parser
        """
        parser = argparse.ArgumentParser(
            description="Manage age keys for SOPS in a local key file",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # Create a key in the default key file (SOPS_AGE_KEY_FILE or sops/age/keys.txt)
  age-key-manager create

  # Create a key in a specific key file
  age-key-manager -f ./keys.txt create

  # List, look up and delete keys
  age-key-manager list
  age-key-manager get -k age1...
  age-key-manager delete -k age1...
  age-key-manager verify -k age1...

  # Import a key from another key file
  age-key-manager import -i ./other-keys.txt -k age1...

  # Write a .sops.yaml with one creation rule
  age-key-manager config-init -c .sops.yaml -a age1... -r '\\.enc\\.yaml$'
            """,
        )

        # Global arguments
        parser.add_argument(
            "-f",
            "--key-file",
            help="Key file to operate on (default: SOPS_AGE_KEY_FILE or platform config dir)",
        )
        parser.add_argument(
            "--pretty",
            action="store_true",
            help="Pretty-print JSON outputs",
        )

        subparsers = parser.add_subparsers(
            dest="command",
            help="Available commands",
        )

        create_parser = subparsers.add_parser(
            "create",
            help="Create a new key",
        )
        create_parser.add_argument(
            "--show-private",
            action="store_true",
            help="Include the private key in the output",
        )

        get_parser = subparsers.add_parser(
            "get",
            help="Show a key by public key",
        )
        get_parser.add_argument(
            "-k",
            "--public-key",
            required=True,
            help="Public key of the key to show",
        )
        get_parser.add_argument(
            "--show-private",
            action="store_true",
            help="Include the private key in the output",
        )

        delete_parser = subparsers.add_parser(
            "delete",
            help="Delete a key by public key",
        )
        delete_parser.add_argument(
            "-k",
            "--public-key",
            required=True,
            help="Public key of the key to delete",
        )

        exists_parser = subparsers.add_parser(
            "exists",
            help="Check whether a key exists",
        )
        exists_parser.add_argument(
            "-k",
            "--public-key",
            required=True,
            help="Public key to look for",
        )

        verify_parser = subparsers.add_parser(
            "verify",
            help="Check that a key's private key matches its public key",
        )
        verify_parser.add_argument(
            "-k",
            "--public-key",
            required=True,
            help="Public key of the key to check",
        )

        subparsers.add_parser(
            "list",
            help="List all keys",
        )

        import_parser = subparsers.add_parser(
            "import",
            help="Import a key from another key file",
        )
        import_parser.add_argument(
            "-i",
            "--in-key-file",
            required=True,
            help="Key file to import from",
        )
        import_parser.add_argument(
            "-k",
            "--public-key",
            help="Public key to import (required if the source holds more than one key)",
        )

        subparsers.add_parser(
            "path",
            help="Show the key file in use",
        )

        config_show_parser = subparsers.add_parser(
            "config-show",
            help="Show a SOPS configuration file",
        )
        config_show_parser.add_argument(
            "-c",
            "--config",
            required=True,
            help="Path to the SOPS configuration file",
        )

        config_init_parser = subparsers.add_parser(
            "config-init",
            help="Write a SOPS configuration file with one creation rule",
        )
        config_init_parser.add_argument(
            "-c",
            "--config",
            required=True,
            help="Path to the SOPS configuration file",
        )
        config_init_parser.add_argument(
            "-a",
            "--age",
            required=True,
            help="age recipients (comma separated public keys)",
        )
        config_init_parser.add_argument(
            "-r",
            "--path-regex",
            help="Regular expression for the files the rule applies to",
        )
        config_init_parser.add_argument(
            "-e",
            "--encrypted-regex",
            help="Regular expression for the keys to encrypt",
        )
        config_init_parser.add_argument(
            "--overwrite",
            action="store_true",
            help="Replace an existing configuration file",
        )

        return parser

    def _key_to_dict(self, key: AgeKey, *, show_private: bool = False) -> dict[str, Any]:
        """Convert a key to a JSON-friendly dictionary."""
        result = {
            "public_key": key.public_key,
            "created_at": AgeKeyCodec.format_timestamp(key.created_at),
        }
        if show_private:
            result["private_key"] = key.private_key
        return result

    def _print_json(self, payload: dict[str, Any]) -> None:
        """Print a JSON payload to stdout."""
        print(json.dumps(payload, indent=2 if self._pretty else None))

    def _print_error(self, *, message: str, code: str = "error") -> None:
        """Print a JSON error to stderr and exit non-zero."""
        error_obj = {
            "success": False,
            "error_code": code,
            "message": message,
        }
        print(json.dumps(error_obj, indent=2), file=sys.stderr)
        sys.exit(1)

    def _error_code(self, error: KeyManagerError) -> str:
        for error_type, code in self._ERROR_CODES.items():
            if isinstance(error, error_type):
                return code
        return "key_manager_error"

    def _handle_create(self, manager: LocalAgeKeyManager, args: argparse.Namespace) -> None:
        """Handle create command."""
        key = asyncio.run(manager.create_key())
        self._print_json({
            "success": True,
            "command": "create",
            "key_file": str(manager.key_file),
            "key": self._key_to_dict(key, show_private=args.show_private),
        })

    def _handle_get(self, manager: LocalAgeKeyManager, args: argparse.Namespace) -> None:
        """Handle get command."""
        key = asyncio.run(manager.get_key(args.public_key))
        self._print_json({
            "success": True,
            "command": "get",
            "key": self._key_to_dict(key, show_private=args.show_private),
        })

    def _handle_delete(self, manager: LocalAgeKeyManager, args: argparse.Namespace) -> None:
        """Handle delete command."""
        key = asyncio.run(manager.delete_key_by_public_key(args.public_key))
        self._print_json({
            "success": True,
            "command": "delete",
            "key": self._key_to_dict(key),
        })

    def _handle_exists(self, manager: LocalAgeKeyManager, args: argparse.Namespace) -> None:
        """Handle exists command."""
        exists = asyncio.run(manager.key_exists(args.public_key))
        self._print_json({
            "success": True,
            "command": "exists",
            "public_key": args.public_key,
            "exists": exists,
        })

    def _handle_verify(self, manager: LocalAgeKeyManager, args: argparse.Namespace) -> None:
        """Handle verify command."""
        key = asyncio.run(manager.get_key(args.public_key))
        self._print_json({
            "success": True,
            "command": "verify",
            "public_key": key.public_key,
            "valid": AgeKeygen.verify(key),
        })

    def _handle_list(self, manager: LocalAgeKeyManager, args: argparse.Namespace) -> None:
        """Handle list command."""
        keys = asyncio.run(manager.list_keys())
        self._print_json({
            "success": True,
            "command": "list",
            "count": len(keys),
            "keys": [self._key_to_dict(key) for key in keys],
        })

    def _handle_import(self, manager: LocalAgeKeyManager, args: argparse.Namespace) -> None:
        """Handle import command."""
        key = asyncio.run(manager.import_key_from_file(args.in_key_file, public_key=args.public_key))
        self._print_json({
            "success": True,
            "command": "import",
            "key_file": str(manager.key_file),
            "key": self._key_to_dict(key),
        })

    def _handle_config_show(self, manager: LocalAgeKeyManager, args: argparse.Namespace) -> None:
        """Handle config-show command."""
        config = asyncio.run(manager.get_sops_config(args.config))
        self._print_json({
            "success": True,
            "command": "config-show",
            "config": config.to_dict(),
        })

    def _handle_config_init(self, manager: LocalAgeKeyManager, args: argparse.Namespace) -> None:
        """Handle config-init command."""
        config = SOPSConfig(creation_rules=[
            SOPSCreationRule(
                path_regex=args.path_regex,
                encrypted_regex=args.encrypted_regex,
                age=args.age,
            )
        ])
        asyncio.run(manager.create_sops_config(args.config, config, overwrite=args.overwrite))
        self._print_json({
            "success": True,
            "command": "config-init",
            "config_path": args.config,
        })

    def run(self, args: Optional[list[str]] = None) -> None:
        """Run the CLI with given arguments."""
        handlers = {
            "create": self._handle_create,
            "get": self._handle_get,
            "delete": self._handle_delete,
            "exists": self._handle_exists,
            "verify": self._handle_verify,
            "list": self._handle_list,
            "import": self._handle_import,
            "config-show": self._handle_config_show,
            "config-init": self._handle_config_init,
        }

        try:
            parsed_args = self._parser.parse_args(args)
            self._pretty = bool(getattr(parsed_args, "pretty", False))

            if not parsed_args.command:
                self._print_error(message="No command specified", code="missing_command")
                return

            manager = LocalAgeKeyManager(parsed_args.key_file)

            if parsed_args.command == "path":
                self._print_json({
                    "success": True,
                    "command": "path",
                    "key_file": str(manager.key_file),
                })
                return

            handlers[parsed_args.command](manager, parsed_args)

        except KeyManagerError as e:
            self._print_error(message=str(e), code=self._error_code(e))
        except OSError as e:
            self._print_error(message=str(e), code="file_error")
        except KeyboardInterrupt:
            self._print_error(message="Operation cancelled by user", code="cancelled")
        except Exception as e:
            self._print_error(message=str(e), code="unexpected_error")


def main() -> None:
    """Main entry point for the CLI."""
    cli = AgeKeyManagerCLI()
    cli.run()


if __name__ == "__main__":
    main()
