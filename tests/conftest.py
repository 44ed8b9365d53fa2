"""Shared fixtures.

Every test runs in an empty temporary directory with the defaults file
pointed at a path that doesn't exist, so neither ./password-file nor a
real ~/.config/photo-nas-sync/config.toml can leak in.
"""

from pathlib import Path

import pytest

import photo_nas_sync.config as config_module
from photo_nas_sync.config.paths import CONFIG_ENV_VAR


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run each test from a clean working directory."""
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "missing-config.toml"))
    monkeypatch.setattr(config_module, "_cached_config", None)
    return workdir
