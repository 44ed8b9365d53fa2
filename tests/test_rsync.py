"""Tests for building and running the rsync command.

subprocess.run and shutil.which are patched, so rsync never runs.
"""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from photo_nas_sync.config.schema import SyncConfig
from photo_nas_sync.console import Logger
from photo_nas_sync.sync import (
    RsyncNotFoundError,
    SshpassNotFoundError,
    SyncResult,
    SyncToolError,
    build_command,
    run_sync,
)


def make_config(**overrides) -> SyncConfig:
    values = {
        "port": 22,
        "password_file": "./password-file",
        "input": "/photos",
        "output": "nas:/volume1/photos",
    }
    values.update(overrides)
    return SyncConfig(**values)


@pytest.fixture
def lines() -> list[str]:
    return []


@pytest.fixture
def log(lines: list[str]) -> Logger:
    return Logger(writer=lines.append, err_writer=lines.append, color=False)


@pytest.fixture
def password_file(tmp_path: Path) -> Path:
    path = tmp_path / "password-file"
    path.write_text("secret\n")
    return path


class TestBuildCommand:
    """Tests for build_command."""

    def test_fixed_flags(self):
        """The command carries the full rsync flag set."""
        command = build_command(make_config())

        assert command == [
            "rsync",
            "-avz",
            "-e",
            "ssh -p 22 -T",
            "--rsync-path=/bin/rsync",
            "--human-readable",
            "--update",
            "--progress",
            "--recursive",
            "--exclude=Thumbs.db",
            "/photos",
            "nas:/volume1/photos",
        ]

    def test_port_in_ssh_command(self):
        command = build_command(make_config(port=2222))

        assert command[command.index("-e") + 1] == "ssh -p 2222 -T"

    def test_custom_remote_rsync_path(self):
        command = build_command(make_config(rsync_path="/usr/bin/rsync"))

        assert "--rsync-path=/usr/bin/rsync" in command

    def test_dry_run_in_test_mode(self):
        """Test mode adds --dry-run before the locations."""
        command = build_command(make_config(test=True))

        assert "--dry-run" in command
        assert command[-3:] == ["--dry-run", "/photos", "nas:/volume1/photos"]

    def test_no_dry_run_by_default(self):
        assert "--dry-run" not in build_command(make_config())

    def test_sshpass_when_password_file_exists(self, password_file: Path):
        """An existing password file wraps the command in sshpass."""
        command = build_command(make_config(password_file=str(password_file)))

        assert command[:4] == ["sshpass", "-f", str(password_file), "rsync"]

    def test_password_file_path_kept_as_given(self):
        """The default ./password-file reaches sshpass unchanged."""
        Path("password-file").write_text("secret\n")

        command = build_command(make_config())

        assert command[:3] == ["sshpass", "-f", "./password-file"]

    def test_no_sshpass_without_password_file(self, tmp_path: Path):
        command = build_command(make_config(password_file=str(tmp_path / "missing")))

        assert "sshpass" not in command
        assert command[0] == "rsync"

    def test_directory_is_not_a_password_file(self, tmp_path: Path):
        """A directory at the password file path is ignored."""
        command = build_command(make_config(password_file=str(tmp_path)))

        assert command[0] == "rsync"

    def test_explicit_override(self, tmp_path: Path):
        """use_password_file skips the filesystem check."""
        config = make_config(password_file=str(tmp_path / "missing"))

        command = build_command(config, use_password_file=True)

        assert command[:3] == ["sshpass", "-f", str(tmp_path / "missing")]


class TestRunSync:
    """Tests for run_sync."""

    def test_returns_success(self, log: Logger):
        """Exit status 0 is a successful sync."""
        with (
            patch("photo_nas_sync.sync.rsync.shutil.which", return_value="/usr/bin/rsync"),
            patch(
                "photo_nas_sync.sync.rsync.subprocess.run",
                return_value=MagicMock(returncode=0),
            ) as mock_run,
        ):
            result = run_sync(make_config(), log)

        assert result.succeeded
        mock_run.assert_called_once_with(result.command)
        assert result.command[0] == "rsync"

    def test_returns_failure(self, log: Logger):
        """Any non-zero exit status is a failure."""
        with (
            patch("photo_nas_sync.sync.rsync.shutil.which", return_value="/usr/bin/rsync"),
            patch(
                "photo_nas_sync.sync.rsync.subprocess.run",
                return_value=MagicMock(returncode=23),
            ),
        ):
            result = run_sync(make_config(), log)

        assert not result.succeeded
        assert result.returncode == 23

    def test_logs_password_file(self, log: Logger, lines: list[str], password_file: Path):
        with (
            patch("photo_nas_sync.sync.rsync.shutil.which", return_value="/usr/bin/x"),
            patch(
                "photo_nas_sync.sync.rsync.subprocess.run",
                return_value=MagicMock(returncode=0),
            ),
        ):
            result = run_sync(make_config(password_file=str(password_file)), log)

        assert result.command[0] == "sshpass"
        assert any(f"I Using password file: {password_file}" in line for line in lines)

    def test_missing_rsync(self, log: Logger):
        """A missing rsync raises before anything runs."""
        with (
            patch("photo_nas_sync.sync.rsync.shutil.which", return_value=None),
            patch("photo_nas_sync.sync.rsync.subprocess.run") as mock_run,
        ):
            with pytest.raises(RsyncNotFoundError):
                run_sync(make_config(), log)

        mock_run.assert_not_called()

    def test_missing_sshpass_with_password_file(self, log: Logger, password_file: Path):
        """sshpass is required only when a password file is used."""

        def which(name: str) -> str | None:
            return None if name == "sshpass" else f"/usr/bin/{name}"

        with (
            patch("photo_nas_sync.sync.rsync.shutil.which", side_effect=which),
            patch("photo_nas_sync.sync.rsync.subprocess.run") as mock_run,
        ):
            with pytest.raises(SshpassNotFoundError):
                run_sync(make_config(password_file=str(password_file)), log)

        mock_run.assert_not_called()

    def test_sshpass_not_needed_without_password_file(self, log: Logger):
        def which(name: str) -> str | None:
            return None if name == "sshpass" else f"/usr/bin/{name}"

        with (
            patch("photo_nas_sync.sync.rsync.shutil.which", side_effect=which),
            patch(
                "photo_nas_sync.sync.rsync.subprocess.run",
                return_value=MagicMock(returncode=0),
            ),
        ):
            result = run_sync(make_config(), log)

        assert result.succeeded

    def test_tool_errors_share_base(self):
        assert issubclass(RsyncNotFoundError, SyncToolError)
        assert issubclass(SshpassNotFoundError, SyncToolError)


class TestSyncResult:
    """Tests for SyncResult."""

    def test_succeeded(self):
        assert SyncResult(command=["rsync"], returncode=0).succeeded
        assert not SyncResult(command=["rsync"], returncode=1).succeeded
