"""Render a Report as text, JSON or YAML."""

import json

import click
import yaml

from sshperms.policy.categories import Category
from sshperms.policy.table import format_mode, target_dir_mode
from sshperms.audit.models import AuditFinding
from sshperms.report.models import Outcome, Report

FORMATS = ("text", "json", "yaml")

CATEGORY_LABELS = {
    Category.PRIVATE_KEY: "private keys",
    Category.PUBLIC_KEY: "public keys",
    Category.AUTHORIZED_KEYS: "authorized_keys files",
    Category.CLIENT_CONFIG: "config files",
    Category.KNOWN_HOSTS: "known_hosts files",
    Category.UNCLASSIFIED: "unclassified entries",
}


def render(report: Report, fmt: str = "text") -> str:
    if fmt == "json":
        return json.dumps(report.model_dump(mode="json"), indent=2)
    if fmt == "yaml":
        return yaml.safe_dump(report.model_dump(mode="json"), sort_keys=False, default_flow_style=False)
    return render_text(report)


def render_text(report: Report) -> str:
    """Human-readable summary using the same markers as the rest of the CLI."""
    lines: list[str] = []

    if report.dry_run:
        lines.append("DRY RUN MODE - no changes will be made")
    lines.append(f"Credential directory: {report.directory}")

    if report.fatal is not None:
        lines.append(f"  ✗ FATAL: {report.fatal.path}: {report.fatal.detail}")
        return "\n".join(lines)

    if report.created:
        action = "Would create" if report.dry_run else "Created"
        lines.append(f"  ✓ {action} directory with permissions {format_mode(target_dir_mode())}")
    elif report.directory_corrected:
        action = "Would set" if report.dry_run else "Set"
        lines.append(f"  ✓ {action} directory permissions to {format_mode(target_dir_mode())}")

    counts = ", ".join(
        f"{report.category_counts.get(category, 0)} {label}"
        for category, label in CATEGORY_LABELS.items()
    )
    lines.append(f"  Scanned {report.files_scanned} entries: {counts}")

    for change in report.changes:
        lines.append(
            f"  ✓ {change.name} ({change.category.value}): "
            f"{format_mode(change.from_mode)} -> {format_mode(change.to_mode)}"
        )
    if report.dry_run:
        lines.append(f"  Corrections planned: {len(report.changes)}")
    else:
        lines.append(f"  Corrections applied: {report.corrected}")

    if report.quirky_platform:
        if report.dry_run:
            lines.append("  ⚠ WSL detected - would normalize ownership")
        elif report.ownership_normalized:
            lines.append("  ✓ WSL detected - ownership normalized")

    for warning in report.warnings:
        lines.append(f"  ⚠ {warning.kind.value}: {warning.path}: {warning.detail}")

    lines.extend(_finding_lines(report.findings))

    pending = report.dry_run and (report.changes or report.directory_corrected or report.created)
    if pending:
        lines.append("Run without --dry-run to apply these changes.")
    elif report.outcome == Outcome.CLEAN:
        lines.append("All SSH permissions are correctly set!")
    elif report.outcome == Outcome.FINDINGS:
        lines.append(
            f"Found {len(report.findings)} permission issues. "
            "You may need to address them manually."
        )
    return "\n".join(lines)


def _finding_lines(findings: list[AuditFinding]) -> list[str]:
    return [f"  {'✗' if f.critical else '⚠'} {f.path}: {f.detail}" for f in findings]


def render_findings(directory: str, findings: list[AuditFinding], fmt: str = "text") -> str:
    """Render a standalone audit (no convergence) in the same formats as a report."""
    data = [f.model_dump(mode="json") for f in findings]
    if fmt == "json":
        return json.dumps(data, indent=2)
    if fmt == "yaml":
        return yaml.safe_dump(data, sort_keys=False, default_flow_style=False)

    lines = [f"Credential directory: {directory}", *_finding_lines(findings)]
    if findings:
        lines.append(f"Found {len(findings)} permission issues. Run 'sshperms fix' to correct them.")
    else:
        lines.append("All SSH permissions are correctly set!")
    return "\n".join(lines)


def echo_report(report: Report, fmt: str = "text") -> None:
    click.echo(render(report, fmt))
