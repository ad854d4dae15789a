"""Default SOPS age key file location."""

import os
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Optional

from age_key_manager.constants import Constants
from age_key_manager.exceptions import ValidationError


def get_sops_age_key_file_path(
    *,
    environ: Optional[Mapping[str, str]] = None,
    platform: Optional[str] = None,
    home: Optional[Path] = None
) -> Path:
    """Resolve the key file SOPS reads age identities from.

    ``SOPS_AGE_KEY_FILE`` wins when set. Otherwise the per-user config
    directory of the platform is used:

    - macOS: ``~/Library/Application Support/sops/age/keys.txt``
    - Windows: ``%APPDATA%/sops/age/keys.txt``
    - Linux and other POSIX: ``${XDG_CONFIG_HOME:-~/.config}/sops/age/keys.txt``

    Args:
        environ: Environment mapping (default: ``os.environ``)
        platform: Platform string as in ``sys.platform`` (default: current)
        home: Home directory (default: ``Path.home()``)

    Returns:
        Path to the key file

    Raises:
        ValidationError: If SOPS_AGE_KEY_FILE points to a file that does not exist
    """
    environ = os.environ if environ is None else environ
    platform = sys.platform if platform is None else platform

    override = environ.get(Constants.KEY_FILE_ENV_VARIABLE())
    if override and override.strip():
        override_path = Path(override)
        if not override_path.is_file():
            raise ValidationError(
                f"The {Constants.KEY_FILE_ENV_VARIABLE()} environment variable points to "
                f"a file that does not exist: {override}"
            )
        return override_path

    home = Path.home() if home is None else home

    if platform == "darwin":
        base = home / "Library" / "Application Support"
    elif platform in ("win32", "cygwin"):
        appdata = environ.get(Constants.APPDATA_ENV_VARIABLE())
        base = Path(appdata) if appdata else home / "AppData" / "Roaming"
    else:
        xdg_config_home = environ.get(Constants.XDG_CONFIG_HOME_ENV_VARIABLE())
        base = Path(xdg_config_home) if xdg_config_home else home / ".config"

    return base.joinpath(*Constants.KEY_FILE_RELATIVE_PATH())
