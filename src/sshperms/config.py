"""Default locations and path resolution for the credential directory."""

import os
from pathlib import Path

SSH_DIR = Path.home() / ".ssh"
SSH_DIR_ENV = "SSHPERMS_DIR"


def resolve_ssh_dir(path: str | os.PathLike | None = None) -> Path:
    """Expand ``~`` and environment variables; fall back to ~/.ssh."""
    if path is None or str(path) == "":
        return SSH_DIR
    return Path(os.path.expandvars(os.path.expanduser(str(path))))
