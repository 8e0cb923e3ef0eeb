"""Platform probe — detect environments where ownership metadata is unreliable."""

import os
import platform
from collections.abc import Mapping

from pydantic import BaseModel

QUIRK_ENV_VARS = ("WSL_DISTRO_NAME", "WSLENV")
QUIRK_KERNEL_MARKER = "microsoft"


class AgentStatus(BaseModel):
    running: bool
    pid: int | None = None
    socket: str | None = None


class PlatformProbe:
    """Pure detection of platform quirks.

    The environment and kernel release default to the live process values but
    can be supplied explicitly so tests never depend on the host.
    """

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        kernel_release: str | None = None,
    ) -> None:
        self.environ = os.environ if environ is None else environ
        self.kernel_release = platform.release() if kernel_release is None else kernel_release

    def is_quirky_platform(self) -> bool:
        """True when running inside a compatibility-layer guest (WSL)."""
        if any(self.environ.get(name) for name in QUIRK_ENV_VARS):
            return True
        return QUIRK_KERNEL_MARKER in self.kernel_release.lower()

    def agent_status(self) -> AgentStatus:
        """Report whether an SSH agent is reachable from this environment."""
        pid_str = self.environ.get("SSH_AGENT_PID")
        socket = self.environ.get("SSH_AUTH_SOCK") or None
        pid = int(pid_str) if pid_str and pid_str.isdigit() else None
        return AgentStatus(running=pid is not None or socket is not None, pid=pid, socket=socket)
