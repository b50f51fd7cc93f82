from .config import (
    CasingPolicy,
    CommaPosition,
    Dialect,
    LinterConfig,
    RuleSettings,
)
from .fix import FixResult
from .token import Token, TokenKind
from .violation import LintReport, LintResult, Severity, Violation

__all__ = [
    "CasingPolicy",
    "CommaPosition",
    "Dialect",
    "FixResult",
    "LinterConfig",
    "LintReport",
    "LintResult",
    "RuleSettings",
    "Severity",
    "Token",
    "TokenKind",
    "Violation",
]
