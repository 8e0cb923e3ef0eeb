"""File permission primitives — read, create, chmod and chown credential paths."""

import os
import stat
from collections.abc import Iterator
from pathlib import Path

from sshperms.policy.table import target_dir_mode


def current_mode(st: os.stat_result) -> int:
    """Permission bits (including setuid/setgid/sticky) from a stat result."""
    return stat.S_IMODE(st.st_mode)


class PermissionManager:
    """Every filesystem mutation the engine performs goes through here."""

    def __init__(self, uid: int | None = None, gid: int | None = None) -> None:
        self.uid = os.getuid() if uid is None else uid
        self.gid = os.getgid() if gid is None else gid

    def stat_dir(self, directory: Path) -> os.stat_result | None:
        """stat the credential directory (following a symlinked ~/.ssh), or None."""
        try:
            return directory.stat()
        except (FileNotFoundError, NotADirectoryError):
            # Absent, or a path component is a regular file; mkdir reports which.
            return None

    def scan(self, directory: Path) -> Iterator[tuple[Path, os.stat_result]]:
        """Yield direct children with their lstat results, sorted by name.

        Entries that vanish between listing and stat are skipped.
        """
        for path in sorted(directory.iterdir()):
            try:
                yield path, path.lstat()
            except FileNotFoundError:
                continue

    def create_dir(self, directory: Path) -> None:
        """Create the credential directory (and parents) with the policy mode."""
        directory.mkdir(mode=target_dir_mode(), parents=True, exist_ok=True)

    def set_mode(self, path: Path, mode: int) -> None:
        os.chmod(path, mode)

    def set_owner(self, path: Path, follow_symlinks: bool = False) -> None:
        """Chown to the invoking user; symlinks are not followed unless asked."""
        os.chown(path, self.uid, self.gid, follow_symlinks=follow_symlinks)

    def readable(self, directory: Path) -> bool:
        return os.access(directory, os.R_OK)
