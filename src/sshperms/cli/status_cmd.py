"""sshperms status / policy — inspect the directory and the compiled-in policy."""

import click

from sshperms.cli.main import EXIT_FATAL, cli
from sshperms.config import SSH_DIR_ENV, resolve_ssh_dir
from sshperms.policy.categories import Category
from sshperms.policy.table import format_mode, target_dir_mode, target_mode


@cli.command()
@click.argument("ssh_dir", required=False, envvar=SSH_DIR_ENV)
def status(ssh_dir: str | None) -> None:
    """List SSH_DIR entries with their category and permissions."""
    from sshperms.isolation.lockdown import ConvergenceEngine
    from sshperms.isolation.permissions import PermissionManager, current_mode
    from sshperms.isolation.probe import PlatformProbe

    directory = resolve_ssh_dir(ssh_dir)
    manager = PermissionManager()
    st = manager.stat_dir(directory)
    if st is None:
        click.echo(f"SSH directory does not exist: {directory}")
        click.echo("Run 'sshperms fix' to create it.")
        raise SystemExit(EXIT_FATAL)

    click.echo(f"Current SSH directory status: {directory}")
    dir_mode = current_mode(st)
    flag = "  " if dir_mode == target_dir_mode() else " *"
    click.echo(
        f"{flag}{'.':<28} {'directory':<16} "
        f"{format_mode(dir_mode)}  (want {format_mode(target_dir_mode())})"
    )

    files, _ = ConvergenceEngine(manager=manager).plan(directory)
    for entry in files:
        flag = "  " if not entry.needs_change else " *"
        click.echo(
            f"{flag}{entry.name:<28} {entry.category.value:<16} "
            f"{format_mode(entry.current_mode)}  (want {format_mode(entry.target_mode)})"
        )

    probe = PlatformProbe()
    if probe.is_quirky_platform():
        click.echo("WSL detected - ownership will be normalized on fix")

    agent = probe.agent_status()
    click.echo()
    if agent.pid is not None:
        click.echo(f"SSH agent is running (PID: {agent.pid})")
    elif agent.running:
        click.echo(f"SSH agent socket: {agent.socket}")
    else:
        click.echo('SSH agent is not running. Consider starting it with: eval "$(ssh-agent -s)"')


@cli.command()
def policy() -> None:
    """Print the compiled-in permission policy."""
    click.echo(f"  {'directory':<16} {format_mode(target_dir_mode())}")
    for category in Category:
        click.echo(f"  {category.value:<16} {format_mode(target_mode(category))}")
