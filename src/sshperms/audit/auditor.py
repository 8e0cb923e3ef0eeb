"""Auditor — re-observe a credential directory and report residual exposure."""

import logging
import stat
from pathlib import Path

from sshperms.audit.models import AuditFinding
from sshperms.isolation.permissions import PermissionManager, current_mode
from sshperms.policy.categories import Category, classify, classify_entry
from sshperms.policy.table import (
    GROUP_OTHER_BITS,
    PRIVATE_CATEGORIES,
    format_mode,
    target_dir_mode,
    target_mode,
)

logger = logging.getLogger(__name__)


def excess_access(mode: int, category: Category) -> int:
    """Group/other bits present in ``mode`` that the category's policy does not grant.

    Private roles get no group/other access at all, so any such bit counts.
    """
    allowed = target_mode(category) or 0
    if category in PRIVATE_CATEGORIES:
        allowed = 0
    return mode & GROUP_OTHER_BITS & ~allowed


def describe_bits(bits: int) -> str:
    """Human-readable list of group/other permission bits, e.g. ``group read, other write``."""
    parts = []
    for who, shift in (("group", 3), ("other", 0)):
        for what, bit in (("read", 0o4), ("write", 0o2), ("execute", 0o1)):
            if bits & (bit << shift):
                parts.append(f"{who} {what}")
    return ", ".join(parts)


class Auditor:
    """Scan the directory from scratch; never trust what convergence reported."""

    def __init__(self, manager: PermissionManager | None = None) -> None:
        self.manager = manager or PermissionManager()

    def audit(self, directory: Path) -> list[AuditFinding]:
        """Return findings for the directory and every classified child.

        Checks:
        1. The directory exists and its mode is exactly the directory policy mode
        2. No classified file grants group/other access beyond its policy
        3. Credential-named symlinks are reported, since their targets are not checked
        """
        findings: list[AuditFinding] = []
        dir_mode = target_dir_mode()

        st = self.manager.stat_dir(directory)
        if st is None or not stat.S_ISDIR(st.st_mode):
            findings.append(AuditFinding(
                path=str(directory),
                expected_mode=dir_mode,
                detail=(
                    "credential directory is missing"
                    if st is None
                    else "credential directory path exists but is not a directory"
                ),
                critical=True,
            ))
            return findings

        mode = current_mode(st)
        if mode != dir_mode:
            findings.append(AuditFinding(
                path=str(directory),
                mode=mode,
                expected_mode=dir_mode,
                excess_bits=mode & GROUP_OTHER_BITS,
                detail=f"directory permissions {format_mode(mode)}, expected {format_mode(dir_mode)}",
                critical=bool(mode & GROUP_OTHER_BITS),
            ))

        for path, entry_st in self.manager.scan(directory):
            if stat.S_ISLNK(entry_st.st_mode) and classify(path.name) != Category.UNCLASSIFIED:
                findings.append(AuditFinding(
                    path=str(path),
                    category=classify(path.name),
                    detail="symlink named like a credential file; its target was not audited",
                ))
                continue
            category = classify_entry(path, entry_st)
            if category == Category.UNCLASSIFIED:
                continue
            mode = current_mode(entry_st)
            excess = excess_access(mode, category)
            if not excess:
                continue
            findings.append(AuditFinding(
                path=str(path),
                category=category,
                mode=mode,
                expected_mode=target_mode(category),
                excess_bits=excess,
                detail=(
                    f"{category.value} grants {describe_bits(excess)} "
                    f"(permissions {format_mode(mode)}, expected {format_mode(target_mode(category))})"
                ),
                critical=category in PRIVATE_CATEGORIES,
            ))

        for finding in findings:
            logger.warning("Audit: %s: %s", finding.path, finding.detail)
        if not findings:
            logger.info("Audit: all credential permissions are correctly set")
        return findings
