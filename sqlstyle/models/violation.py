from enum import StrEnum
from pathlib import Path
from typing import Final

from pydantic import BaseModel, ConfigDict, Field

MALFORMED_LITERAL_ID: Final[str] = "malformed-literal"
RULE_INTERNAL_ERROR_ID: Final[str] = "rule-internal-error"


class Severity(StrEnum):
    """Severity levels for violations."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class Violation(BaseModel):
    """A single style violation reported by a rule."""

    model_config = ConfigDict(frozen=True)

    rule_id: str = Field(..., description="Identifier of the triggered rule")
    line: int = Field(..., ge=1, description="Line where the violation occurs")
    column: int = Field(..., ge=1, description="Column where the violation occurs")
    message: str = Field(..., description="Human-readable description of the issue")
    severity: Severity = Field(default=Severity.ERROR, description="Reported severity")


class LintResult(BaseModel):
    """Violations found in one file, ordered by location."""

    path: Path = Field(..., description="Path of the checked file")
    violations: list[Violation] = Field(default_factory=list)

    @property
    def fatal(self) -> bool:
        return any(v.rule_id == MALFORMED_LITERAL_ID for v in self.violations)


class LintReport(BaseModel):
    """Run-level aggregation of per-file results, in input order."""

    results: list[LintResult] = Field(default_factory=list)

    @property
    def files_checked(self) -> int:
        return len(self.results)

    @property
    def violation_count(self) -> int:
        return sum(len(r.violations) for r in self.results)

    @property
    def exit_code(self) -> int:
        """0 when clean, 1 when violations exist, 2 when a file could not be tokenized."""

        if any(r.fatal for r in self.results):
            return 2
        return 1 if self.violation_count else 0
