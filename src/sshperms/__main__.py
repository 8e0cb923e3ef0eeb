"""CLI entrypoint for sshperms."""

import sshperms.cli.audit_cmd  # noqa: F401
import sshperms.cli.fix_cmd  # noqa: F401
import sshperms.cli.status_cmd  # noqa: F401
from sshperms.cli.main import cli


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
