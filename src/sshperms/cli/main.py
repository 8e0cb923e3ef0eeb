"""Click CLI group for sshperms."""

import logging

import click

from sshperms.report.models import Outcome

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_FINDINGS = 2


@click.group()
@click.version_option(package_name="sshperms")
@click.option("-v", "--verbose", count=True, help="Log decisions (-v) or everything (-vv) to stderr")
def cli(verbose: int) -> None:
    """sshperms — normalize and verify SSH credential directory permissions."""
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="[%(levelname)s] %(name)s: %(message)s")


def exit_code(outcome: Outcome, strict: bool = False) -> int:
    """Fatal runs fail; findings only fail the run under --strict."""
    if outcome == Outcome.FATAL:
        return EXIT_FATAL
    if outcome == Outcome.FINDINGS and strict:
        return EXIT_FINDINGS
    return EXIT_OK
