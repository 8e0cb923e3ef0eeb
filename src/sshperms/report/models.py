"""Run report — pure aggregation of convergence and audit results."""

from enum import Enum

from pydantic import BaseModel, Field

from sshperms.audit.models import AuditFinding
from sshperms.isolation.models import ConvergenceResult, Failure, PlannedChange
from sshperms.policy.categories import Category


class Outcome(str, Enum):
    CLEAN = "clean"
    FINDINGS = "findings"
    FATAL = "fatal"


class Report(BaseModel):
    directory: str
    dry_run: bool
    outcome: Outcome
    created: bool = False
    directory_corrected: bool = False
    files_scanned: int = 0
    category_counts: dict[Category, int] = Field(default_factory=dict)
    corrected: int = 0
    changes: list[PlannedChange] = Field(default_factory=list)
    quirky_platform: bool = False
    ownership_normalized: bool = False
    warnings: list[Failure] = Field(default_factory=list)
    fatal: Failure | None = None
    findings: list[AuditFinding] = Field(default_factory=list)


def build_report(result: ConvergenceResult, findings: list[AuditFinding]) -> Report:
    """Aggregate one run's convergence result and audit findings."""
    counts = {category: 0 for category in Category}
    for f in result.files:
        counts[f.category] += 1

    fatal = result.fatal
    if fatal is not None:
        outcome = Outcome.FATAL
    elif findings:
        outcome = Outcome.FINDINGS
    else:
        outcome = Outcome.CLEAN

    # A dry-run reports what it would change; a live run only what it did.
    if result.dry_run:
        changes = list(result.changes)
    else:
        applied = {f.name for f in result.files if f.corrected}
        changes = [c for c in result.changes if c.name in applied]

    return Report(
        directory=result.directory,
        dry_run=result.dry_run,
        outcome=outcome,
        created=result.created,
        directory_corrected=result.directory_corrected,
        files_scanned=len(result.files),
        category_counts=counts,
        corrected=result.corrected_count,
        changes=changes,
        quirky_platform=result.quirky_platform,
        ownership_normalized=result.ownership_normalized,
        warnings=result.warnings,
        fatal=fatal,
        findings=findings,
    )
