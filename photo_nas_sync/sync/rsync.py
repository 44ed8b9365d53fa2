"""rsync wrapper for pushing media to the NAS.

Runs a single rsync over SSH. When a password file is present the whole
command is run under sshpass, which feeds the file's contents to ssh's
password prompt. We call the binaries through subprocess; rsync does all
of the actual comparison and copying.
"""

import os
import shlex
import shutil
import subprocess
from pathlib import Path

from photo_nas_sync.config.schema import SyncConfig
from photo_nas_sync.console import Logger

from .models import SyncResult

# Files never copied to the NAS
EXCLUDED_FILES = ("Thumbs.db",)


class SyncToolError(Exception):
    """A binary needed for the sync is unavailable."""

    pass


class RsyncNotFoundError(SyncToolError):
    """rsync binary not found."""

    pass


class SshpassNotFoundError(SyncToolError):
    """sshpass binary not found."""

    pass


def password_file_usable(path: str) -> bool:
    """Return True if path is an existing, readable regular file."""
    return Path(path).is_file() and os.access(path, os.R_OK)


def check_tools_available(*, sshpass: bool) -> None:
    """Check that the binaries for the sync are on PATH.

    Args:
        sshpass: Also require sshpass.

    Raises:
        RsyncNotFoundError: If rsync is not installed.
        SshpassNotFoundError: If sshpass is required but not installed.
    """
    if not shutil.which("rsync"):
        raise RsyncNotFoundError("rsync not found. Install with: apt install rsync")

    if sshpass and not shutil.which("sshpass"):
        raise SshpassNotFoundError(
            "sshpass not found. Install with: apt install sshpass"
        )


def build_command(
    config: SyncConfig, *, use_password_file: bool | None = None
) -> list[str]:
    """Build the rsync argument list for a sync run.

    Produces the equivalent of:

        [sshpass -f FILE] rsync -avz -e "ssh -p PORT -T" --rsync-path=PATH
            --human-readable --update --progress --recursive
            --exclude=Thumbs.db [--dry-run] INPUT OUTPUT

    Args:
        config: Resolved sync configuration.
        use_password_file: Wrap the command in sshpass. If None, decided by
                           whether config.password_file is a readable file.

    Returns:
        Argument list suitable for subprocess.run.
    """
    if use_password_file is None:
        use_password_file = password_file_usable(config.password_file)

    command: list[str] = []

    if use_password_file:
        command += ["sshpass", "-f", config.password_file]

    command += [
        "rsync",
        "-avz",
        "-e",
        f"ssh -p {config.port} -T",
        f"--rsync-path={config.rsync_path}",
        "--human-readable",
        "--update",
        "--progress",
        "--recursive",
    ]
    command += [f"--exclude={name}" for name in EXCLUDED_FILES]

    if config.test:
        command.append("--dry-run")

    command += [config.input, config.output]
    return command


def run_sync(config: SyncConfig, log: Logger) -> SyncResult:
    """Run rsync and wait for it to finish.

    rsync's progress output goes straight to the terminal. No timeout is
    applied and nothing is retried.

    Args:
        config: Resolved sync configuration.
        log: Logger for status lines.

    Returns:
        SyncResult carrying the process exit status.

    Raises:
        SyncToolError: If rsync, or sshpass when needed, is not installed.
    """
    use_password_file = password_file_usable(config.password_file)
    check_tools_available(sshpass=use_password_file)

    if use_password_file:
        log.info(f"Using password file: {config.password_file}")

    command = build_command(config, use_password_file=use_password_file)
    log.debug(f"Running: {shlex.join(command)}")

    completed = subprocess.run(command)

    log.debug(f"rsync exited with status {completed.returncode}")
    return SyncResult(command=command, returncode=completed.returncode)
