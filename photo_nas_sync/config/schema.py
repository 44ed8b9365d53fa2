"""Configuration schema definitions.

FileDefaults uses TypedDict to describe the optional config.toml.
SyncOptions and SyncConfig are the in-memory records built from the
command line: options are what the user typed, config is what the sync
runs with.
"""

from dataclasses import dataclass
from typing import TypedDict


class FileDefaults(TypedDict, total=False):
    """Values from the [defaults] table of config.toml.

    Attributes:
        port: SSH port on the NAS.
        password_file: File holding the SSH password for sshpass.
        input: Local directory to copy media from.
        rsync_path: Location of the rsync binary on the NAS.
    """

    port: int
    password_file: str
    input: str
    rsync_path: str


class PhotoNasSyncConfig(TypedDict, total=False):
    """Root structure of config.toml."""

    defaults: FileDefaults


@dataclass(frozen=True)
class SyncOptions:
    """Options as given on the command line, before defaults are applied.

    None means the flag was not passed.
    """

    port: int | None = None
    password_file: str | None = None
    input: str | None = None
    output: str | None = None
    test: bool = False
    debug: bool = False


@dataclass(frozen=True)
class SyncConfig:
    """Fully resolved settings for a single sync run.

    Attributes:
        port: SSH port used by rsync's ssh transport.
        password_file: Password file handed to sshpass if it exists.
        input: Source location.
        output: Destination location, usually host:/path on the NAS.
        test: Dry-run; rsync only reports planned changes.
        debug: Print debug log lines.
        rsync_path: rsync binary on the remote side.
    """

    port: int
    password_file: str
    input: str
    output: str
    test: bool = False
    debug: bool = False
    rsync_path: str = "/bin/rsync"
