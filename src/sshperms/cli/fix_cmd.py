"""sshperms fix — converge a credential directory and audit the result."""

import click

from sshperms.cli.main import cli, exit_code
from sshperms.config import SSH_DIR_ENV, resolve_ssh_dir
from sshperms.report.render import FORMATS, echo_report


@cli.command()
@click.argument("ssh_dir", required=False, envvar=SSH_DIR_ENV)
@click.option("--dry-run", is_flag=True, default=False, help="Show what would change without changing it")
@click.option("--strict", is_flag=True, default=False, help="Exit with status 2 if audit findings remain")
@click.option("--format", "fmt", default="text", type=click.Choice(FORMATS))
def fix(ssh_dir: str | None, dry_run: bool, strict: bool, fmt: str) -> None:
    """Fix permissions in SSH_DIR (default: ~/.ssh)."""
    from sshperms.runner import run_fix

    report = run_fix(resolve_ssh_dir(ssh_dir), dry_run=dry_run)
    echo_report(report, fmt)

    code = exit_code(report.outcome, strict)
    if code:
        raise SystemExit(code)
