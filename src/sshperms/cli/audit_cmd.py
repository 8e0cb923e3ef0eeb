"""sshperms audit — read-only check of a credential directory."""

import click

from sshperms.cli.main import cli, exit_code
from sshperms.config import SSH_DIR_ENV, resolve_ssh_dir
from sshperms.report.models import Outcome
from sshperms.report.render import FORMATS, render_findings


@cli.command()
@click.argument("ssh_dir", required=False, envvar=SSH_DIR_ENV)
@click.option("--strict", is_flag=True, default=False, help="Exit with status 2 if any finding is reported")
@click.option("--format", "fmt", default="text", type=click.Choice(FORMATS))
def audit(ssh_dir: str | None, strict: bool, fmt: str) -> None:
    """Report exposed credentials in SSH_DIR without changing anything."""
    from sshperms.audit.auditor import Auditor

    directory = resolve_ssh_dir(ssh_dir)
    try:
        findings = Auditor().audit(directory)
    except OSError as e:
        click.echo(f"Credential directory: {directory}")
        click.echo(f"  ✗ FATAL: {directory}: {e.strerror or e}")
        raise SystemExit(exit_code(Outcome.FATAL))

    click.echo(render_findings(str(directory), findings, fmt))

    code = exit_code(Outcome.FINDINGS if findings else Outcome.CLEAN, strict)
    if code:
        raise SystemExit(code)
