"""Shared fixtures for credential-directory tests."""

import os
from pathlib import Path

import pytest

from sshperms.isolation.probe import PlatformProbe


def mode_of(path: Path) -> int:
    return path.lstat().st_mode & 0o7777


def make_file(directory: Path, name: str, mode: int, content: str = "data") -> Path:
    path = directory / name
    path.write_text(content)
    os.chmod(path, mode)
    return path


@pytest.fixture
def plain_probe() -> PlatformProbe:
    return PlatformProbe(environ={}, kernel_release="6.8.0-45-generic")


@pytest.fixture
def wsl_probe() -> PlatformProbe:
    return PlatformProbe(environ={"WSL_DISTRO_NAME": "Ubuntu"}, kernel_release="5.15.0-microsoft")


@pytest.fixture
def ssh_dir(tmp_path: Path) -> Path:
    d = tmp_path / ".ssh"
    d.mkdir()
    os.chmod(d, 0o755)
    return d


@pytest.fixture
def messy_dir(ssh_dir: Path) -> Path:
    """A directory with every category at a wrong mode, plus unclassified entries."""
    make_file(ssh_dir, "id_ed25519", 0o644)
    make_file(ssh_dir, "id_ed25519.pub", 0o600)
    make_file(ssh_dir, "authorized_keys", 0o664)
    make_file(ssh_dir, "config", 0o644)
    make_file(ssh_dir, "known_hosts", 0o666)
    make_file(ssh_dir, "notes.txt", 0o666)
    (ssh_dir / "sockets").mkdir(mode=0o755)
    os.chmod(ssh_dir / "sockets", 0o755)
    return ssh_dir
