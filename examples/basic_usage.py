#!/usr/bin/env python3
"""Example usage of the local age key manager with a throwaway key file."""

import asyncio
import tempfile
from pathlib import Path

from age_key_manager import LocalAgeKeyManager, SOPSConfig, SOPSCreationRule


async def main():
    """Demonstrate key file and SOPS configuration operations."""

    # Create a temporary directory for this example
    with tempfile.TemporaryDirectory() as temp_dir:
        key_file = Path(temp_dir) / "sops" / "age" / "keys.txt"
        manager = LocalAgeKeyManager(key_file)
        print(f"Key file: {manager.key_file}")
        print()

        print("Creating keys...")
        first = await manager.create_key()
        second = await manager.create_key()
        print(f"Created {first.public_key}")
        print(f"Created {second.public_key}")
        print()

        print("Key file content:")
        print(key_file.read_text())

        keys = await manager.list_keys()
        print(f"Listed {len(keys)} keys")
        print(f"Lookup matches: {await manager.get_key(first.public_key) == first}")
        print()

        # Move the second key into a separate key file
        other_file = Path(temp_dir) / "other-keys.txt"
        await manager.import_key(second, other_file)
        await manager.delete_key(second)
        print(f"Second key still in main file: {await manager.key_exists(second.public_key)}")
        print(f"Second key in other file: {await manager.key_exists(second.public_key, other_file)}")
        print()

        # Write a .sops.yaml encrypting secrets for the first key
        config_path = Path(temp_dir) / ".sops.yaml"
        config = SOPSConfig(creation_rules=[
            SOPSCreationRule(
                path_regex=r"secrets/.*\.yaml$",
                encrypted_regex="^(data|stringData)$",
                age=first.public_key,
            )
        ])
        await manager.create_sops_config(config_path, config)
        print("SOPS configuration:")
        print(config_path.read_text())

        loaded = await manager.get_sops_config(config_path)
        print(f"Creation rules: {len(loaded.creation_rules)}")


if __name__ == "__main__":
    asyncio.run(main())
