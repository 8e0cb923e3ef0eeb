"""Pydantic models for post-convergence audit findings."""

from pydantic import BaseModel

from sshperms.policy.categories import Category


class AuditFinding(BaseModel):
    """A residual exposure observed on the live filesystem."""

    path: str
    category: Category | None = None  # None for the credential directory itself
    mode: int | None = None
    expected_mode: int | None = None
    excess_bits: int = 0
    detail: str
    critical: bool = False
