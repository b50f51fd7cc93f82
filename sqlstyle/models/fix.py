from pathlib import Path

from pydantic import BaseModel, Field

from sqlstyle.models.violation import LintResult


class Edit(BaseModel):
    """Replace ``source[start:end]`` with ``replacement``."""

    start: int = Field(..., ge=0)
    end: int = Field(..., ge=0)
    replacement: str = ""


class FixPlan(BaseModel):
    """Edits proposed by one rule's fixer plus the number of targets it declined."""

    edits: list[Edit] = Field(default_factory=list)
    declined: int = Field(default=0, ge=0)


class FixResult(BaseModel):
    """Outcome of running the fixer over one file."""

    path: Path = Field(..., description="Path of the fixed file")
    original: str = Field(..., description="Source text before fixing")
    fixed: str = Field(..., description="Source text after fixing")
    applied: dict[str, int] = Field(
        default_factory=dict, description="Number of rewrites per rule id"
    )
    remaining: LintResult = Field(..., description="Violations left in the fixed text")

    @property
    def changed(self) -> bool:
        return self.fixed != self.original
