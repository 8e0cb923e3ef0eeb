"""Convergence engine — bring a credential directory to the permission policy."""

import logging
import stat
from pathlib import Path

from sshperms.isolation.models import (
    ConvergenceResult,
    CredentialFile,
    Failure,
    FailureKind,
    PlannedChange,
)
from sshperms.isolation.permissions import PermissionManager, current_mode
from sshperms.isolation.probe import PlatformProbe
from sshperms.policy.categories import Category, classify_entry
from sshperms.policy.table import format_mode, target_dir_mode, target_mode

logger = logging.getLogger(__name__)


def _describe(err: OSError) -> str:
    return err.strerror or str(err)


class ConvergenceEngine:
    """Classify, decide and (unless dry-run) apply the policy in one pass.

    Dry-run and live runs share the same planning code; the only difference is
    whether the decided mutations are issued.
    """

    def __init__(
        self,
        probe: PlatformProbe | None = None,
        manager: PermissionManager | None = None,
    ) -> None:
        self.probe = probe or PlatformProbe()
        self.manager = manager or PermissionManager()

    def converge(self, directory: Path, dry_run: bool = False) -> ConvergenceResult:
        result = ConvergenceResult(directory=str(directory), dry_run=dry_run)
        dir_mode = target_dir_mode()

        try:
            st = self.manager.stat_dir(directory)
        except OSError as e:
            logger.error("Cannot stat credential directory %s: %s", directory, e)
            result.failures.append(
                Failure(kind=FailureKind.DIRECTORY_SCAN, path=str(directory), detail=_describe(e))
            )
            return result

        if st is None:
            result.created = True
            if dry_run:
                logger.info("Would create %s with mode %s", directory, format_mode(dir_mode))
                return result
            logger.info("Creating credential directory %s", directory)
            try:
                self.manager.create_dir(directory)
            except OSError as e:
                logger.error("Cannot create credential directory %s: %s", directory, e)
                result.created = False
                result.failures.append(
                    Failure(kind=FailureKind.DIRECTORY_CREATE, path=str(directory), detail=_describe(e))
                )
                return result
        elif not stat.S_ISDIR(st.st_mode):
            logger.error("%s exists and is not a directory", directory)
            result.failures.append(
                Failure(
                    kind=FailureKind.DIRECTORY_CREATE,
                    path=str(directory),
                    detail="exists and is not a directory",
                )
            )
            return result
        else:
            result.directory_mode_before = current_mode(st)
            result.directory_corrected = result.directory_mode_before != dir_mode

        # Applied on every live run, whatever the current mode.
        if not dry_run:
            try:
                self.manager.set_mode(directory, dir_mode)
            except OSError as e:
                logger.warning("Could not set %s on %s: %s", format_mode(dir_mode), directory, e)
                result.directory_corrected = False
                result.failures.append(
                    Failure(kind=FailureKind.MODE_CHANGE, path=str(directory), detail=_describe(e))
                )
        elif result.directory_corrected:
            logger.info(
                "Would change %s from %s to %s",
                directory,
                format_mode(result.directory_mode_before),
                format_mode(dir_mode),
            )

        try:
            result.files, result.changes = self.plan(directory)
        except OSError as e:
            logger.error("Cannot read credential directory %s: %s", directory, e)
            result.failures.append(
                Failure(kind=FailureKind.DIRECTORY_SCAN, path=str(directory), detail=_describe(e))
            )
            return result

        if not dry_run:
            self._apply(directory, result)

        result.quirky_platform = self.probe.is_quirky_platform()
        if result.quirky_platform:
            self._normalize_ownership(directory, result)
            if not self.manager.readable(directory):
                logger.warning(
                    "SSH directory %s is not readable. This may be a WSL filesystem issue.", directory
                )
                result.failures.append(
                    Failure(
                        kind=FailureKind.DIRECTORY_ACCESS,
                        path=str(directory),
                        detail="directory is not readable (WSL filesystem issue?)",
                    )
                )

        return result

    def plan(self, directory: Path) -> tuple[list[CredentialFile], list[PlannedChange]]:
        """Scan direct children once and decide the mode change for each."""
        files: list[CredentialFile] = []
        changes: list[PlannedChange] = []

        for path, st in self.manager.scan(directory):
            category = classify_entry(path, st)
            entry = CredentialFile(
                name=path.name,
                category=category,
                current_mode=current_mode(st),
                target_mode=target_mode(category),
            )
            files.append(entry)
            if category == Category.UNCLASSIFIED:
                logger.debug("Leaving unclassified entry %s untouched", path.name)
                continue
            if entry.needs_change:
                logger.info(
                    "%s (%s): %s -> %s",
                    path.name,
                    category.value,
                    format_mode(entry.current_mode),
                    format_mode(entry.target_mode),
                )
                changes.append(
                    PlannedChange(
                        name=path.name,
                        category=category,
                        from_mode=entry.current_mode,
                        to_mode=entry.target_mode,
                    )
                )

        _log_counts(files)
        return files, changes

    def _apply(self, directory: Path, result: ConvergenceResult) -> None:
        by_name = {f.name: f for f in result.files}
        for change in result.changes:
            path = directory / change.name
            try:
                self.manager.set_mode(path, change.to_mode)
            except OSError as e:
                # Each file stands alone; one failure never stops the others.
                logger.warning("Could not set %s on %s: %s", format_mode(change.to_mode), path, e)
                result.failures.append(
                    Failure(kind=FailureKind.MODE_CHANGE, path=str(path), detail=_describe(e))
                )
                continue
            by_name[change.name].corrected = True

    def _normalize_ownership(self, directory: Path, result: ConvergenceResult) -> None:
        """Best-effort chown of the directory and its children to the invoking user.

        Runs after all mode changes. Failures are warnings only.
        """
        if result.dry_run:
            logger.info("Quirky platform detected: would normalize ownership under %s", directory)
            return

        logger.info("Quirky platform detected: normalizing ownership under %s", directory)
        failed = False
        # The directory itself is followed so a symlinked ~/.ssh changes its target.
        targets = [(directory, True)] + [(directory / f.name, False) for f in result.files]
        for path, follow in targets:
            try:
                self.manager.set_owner(path, follow_symlinks=follow)
            except OSError as e:
                failed = True
                logger.warning(
                    "Could not set ownership on %s (normal on some WSL setups): %s", path, e
                )
                result.failures.append(
                    Failure(kind=FailureKind.OWNERSHIP_CHANGE, path=str(path), detail=_describe(e))
                )
        result.ownership_normalized = not failed


def _log_counts(files: list[CredentialFile]) -> None:
    counts = {category: 0 for category in Category}
    for f in files:
        counts[f.category] += 1
    logger.info(
        "Found %d private keys, %d public keys",
        counts[Category.PRIVATE_KEY],
        counts[Category.PUBLIC_KEY],
    )
    logger.info(
        "Found %d authorized_keys files, %d config files, %d known_hosts files",
        counts[Category.AUTHORIZED_KEYS],
        counts[Category.CLIENT_CONFIG],
        counts[Category.KNOWN_HOSTS],
    )
