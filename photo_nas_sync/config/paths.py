"""Path constants for photo-nas-sync configuration.

Follows the XDG Base Directory layout:
- Config: ~/.config/photo-nas-sync/config.toml

The location can be overridden with the PHOTO_NAS_SYNC_CONFIG environment
variable.
"""

import os
from pathlib import Path


CONFIG_DIR = Path.home() / ".config" / "photo-nas-sync"
CONFIG_FILE = CONFIG_DIR / "config.toml"

CONFIG_ENV_VAR = "PHOTO_NAS_SYNC_CONFIG"

# Relative to the directory the script is run from
DEFAULT_PASSWORD_FILE = "./password-file"


def config_file_path() -> Path:
    """Return the defaults file location, honouring the environment override."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return CONFIG_FILE
