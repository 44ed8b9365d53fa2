"""Configuration management module.

Turns command-line options into the SyncConfig a sync runs with.
Defaults come from, in order of precedence:

1. Command-line flags
2. The [defaults] table of ~/.config/photo-nas-sync/config.toml
3. Built-in defaults (port 22, ./password-file, current directory)

Usage:
    from photo_nas_sync.config import load_config, resolve_config

    config = resolve_config(options, load_config().get("defaults"))
"""

import os
import tomllib
from pathlib import Path

from photo_nas_sync.console import Logger

from .paths import DEFAULT_PASSWORD_FILE, config_file_path
from .schema import FileDefaults, PhotoNasSyncConfig, SyncConfig, SyncOptions

__all__ = [
    "ConfigError",
    "MissingOutputLocationError",
    "load_config",
    "resolve_config",
    "DEFAULT_PORT",
    "DEFAULT_RSYNC_PATH",
]

DEFAULT_PORT = 22
DEFAULT_RSYNC_PATH = "/bin/rsync"

# Expected type of every key allowed in [defaults]
_DEFAULT_TYPES: dict[str, type] = {
    "port": int,
    "password_file": str,
    "input": str,
    "rsync_path": str,
}


class ConfigError(Exception):
    """Invalid or incomplete configuration."""

    pass


class MissingOutputLocationError(ConfigError):
    """No output location was given."""

    def __init__(self) -> None:
        super().__init__("Output location is not provided!")


# Module-level cache for the loaded defaults file.
# The file is read at most once per invocation.
_cached_config: PhotoNasSyncConfig | None = None


def load_config(*, force_reload: bool = False) -> PhotoNasSyncConfig:
    """Load the defaults file from disk.

    Returns an empty dict if the file doesn't exist.

    Args:
        force_reload: Bypass the cache and read from disk.

    Returns:
        The parsed configuration dictionary.

    Raises:
        ConfigError: If the file is not valid TOML or has wrongly typed values.
    """
    global _cached_config

    if _cached_config is not None and not force_reload:
        return _cached_config

    path = config_file_path()

    if not path.exists():
        _cached_config = {}
        return _cached_config

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid config file {path}: {e}") from e

    _check_defaults(data.get("defaults", {}), path)

    _cached_config = data
    return _cached_config


def _check_defaults(defaults: dict, path: Path) -> None:
    """Reject [defaults] values of the wrong type."""
    if not isinstance(defaults, dict):
        raise ConfigError(f"Invalid config file {path}: [defaults] must be a table")

    for key, value in defaults.items():
        expected = _DEFAULT_TYPES.get(key)
        if expected is None:
            raise ConfigError(f"Invalid config file {path}: unknown key '{key}'")
        # bool is a subclass of int, but `port = true` is still a mistake
        if not isinstance(value, expected) or isinstance(value, bool):
            raise ConfigError(
                f"Invalid config file {path}: '{key}' must be {expected.__name__}"
            )

    port = defaults.get("port")
    if port is not None and not 1 <= port <= 65535:
        raise ConfigError(f"Invalid config file {path}: port {port} is out of range")


def resolve_config(
    options: SyncOptions,
    defaults: FileDefaults | None = None,
    log: Logger | None = None,
) -> SyncConfig:
    """Apply defaults to command-line options and validate the result.

    The output location is the only required value.

    Args:
        options: Options parsed from the command line.
        defaults: The [defaults] table from the config file, if any.
        log: Logger used to echo the resolved values in debug mode.

    Returns:
        Immutable configuration for a single sync run.

    Raises:
        MissingOutputLocationError: If no output location was given.
    """
    defaults = defaults or {}

    if not options.output:
        raise MissingOutputLocationError()

    port = options.port
    if port is None:
        port = defaults.get("port", DEFAULT_PORT)

    password_file = options.password_file
    if password_file is None and "password_file" in defaults:
        password_file = os.path.expanduser(defaults["password_file"])
    elif password_file is None:
        password_file = DEFAULT_PASSWORD_FILE

    input_location = options.input
    if not input_location and "input" in defaults:
        input_location = str(Path(defaults["input"]).expanduser())
    elif not input_location:
        input_location = str(Path.cwd())

    config = SyncConfig(
        port=port,
        password_file=password_file,
        input=input_location,
        output=options.output,
        test=options.test,
        debug=options.debug,
        rsync_path=defaults.get("rsync_path", DEFAULT_RSYNC_PATH),
    )

    if log is not None:
        log.debug(f"INPUT_LOCATION: {config.input}")
        log.debug(f"OUTPUT_LOCATION: {config.output}")
        log.debug(f"PASSWORD_FILE: {config.password_file}")
        log.debug(f"SSH_PORT: {config.port}")

    return config
