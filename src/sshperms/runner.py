"""Run orchestration — converge, re-audit and aggregate a report."""

import logging
from pathlib import Path

from sshperms.audit.auditor import Auditor
from sshperms.isolation.lockdown import ConvergenceEngine
from sshperms.isolation.models import Failure, FailureKind
from sshperms.isolation.permissions import PermissionManager
from sshperms.isolation.probe import PlatformProbe
from sshperms.report.models import Report, build_report

logger = logging.getLogger(__name__)


def run_fix(
    directory: Path,
    dry_run: bool = False,
    probe: PlatformProbe | None = None,
    manager: PermissionManager | None = None,
) -> Report:
    """Bring ``directory`` to policy (or preview it) and audit the outcome.

    The audit always re-reads the filesystem. On a fatal directory failure no
    further step runs.
    """
    manager = manager or PermissionManager()
    engine = ConvergenceEngine(probe=probe, manager=manager)

    if dry_run:
        logger.info("DRY RUN MODE - no changes will be made")
    result = engine.converge(directory, dry_run=dry_run)

    if result.fatal is not None:
        return build_report(result, [])

    # Nothing on disk to audit yet.
    if dry_run and result.created:
        return build_report(result, [])

    try:
        findings = Auditor(manager).audit(directory)
    except OSError as e:
        logger.error("Cannot audit credential directory %s: %s", directory, e)
        result.failures.append(
            Failure(kind=FailureKind.DIRECTORY_SCAN, path=str(directory), detail=str(e))
        )
        return build_report(result, [])

    return build_report(result, findings)
