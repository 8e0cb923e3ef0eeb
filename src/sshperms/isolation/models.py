"""Pydantic models for convergence decisions and results."""

from enum import Enum

from pydantic import BaseModel, Field

from sshperms.policy.categories import Category


class FailureKind(str, Enum):
    DIRECTORY_CREATE = "directory_create"
    MODE_CHANGE = "mode_change"
    OWNERSHIP_CHANGE = "ownership_change"
    DIRECTORY_SCAN = "directory_scan"
    DIRECTORY_ACCESS = "directory_access"


class Failure(BaseModel):
    kind: FailureKind
    path: str
    detail: str

    @property
    def fatal(self) -> bool:
        return self.kind in (FailureKind.DIRECTORY_CREATE, FailureKind.DIRECTORY_SCAN)


class CredentialFile(BaseModel):
    name: str
    category: Category
    current_mode: int
    target_mode: int | None = None
    corrected: bool = False

    @property
    def needs_change(self) -> bool:
        return self.target_mode is not None and self.current_mode != self.target_mode


class PlannedChange(BaseModel):
    """One mode change decided during planning (applied or previewed)."""

    name: str
    category: Category
    from_mode: int
    to_mode: int


class ConvergenceResult(BaseModel):
    directory: str
    dry_run: bool = False
    created: bool = False
    directory_mode_before: int | None = None
    directory_corrected: bool = False
    files: list[CredentialFile] = Field(default_factory=list)
    changes: list[PlannedChange] = Field(default_factory=list)
    quirky_platform: bool = False
    ownership_normalized: bool = False
    failures: list[Failure] = Field(default_factory=list)

    @property
    def fatal(self) -> Failure | None:
        return next((f for f in self.failures if f.fatal), None)

    @property
    def corrected_count(self) -> int:
        return sum(1 for f in self.files if f.corrected)

    @property
    def warnings(self) -> list[Failure]:
        return [f for f in self.failures if not f.fatal]
