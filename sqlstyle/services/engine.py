from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Final, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from sqlstyle.errors import MalformedLiteral, RuleInternalError
from sqlstyle.models.config import LinterConfig
from sqlstyle.models.token import Token
from sqlstyle.models.violation import (
    MALFORMED_LITERAL_ID,
    RULE_INTERNAL_ERROR_ID,
    LintReport,
    LintResult,
    Severity,
    Violation,
)
from sqlstyle.rules import RULES, RuleDefinition
from sqlstyle.services.reporter import sort_violations
from sqlstyle.services.tokenizer import tokenize

logger = logging.getLogger(__name__)

T = TypeVar("T")

SQL_SUFFIXES: Final[frozenset[str]] = frozenset({".sql"})
DEFAULT_EXCLUDE_DIRS: Final[frozenset[str]] = frozenset(
    {
        ".git",
        ".hg",
        ".svn",
        ".mypy_cache",
        ".pytest_cache",
        ".ruff_cache",
        ".tox",
        ".venv",
        "venv",
        "__pycache__",
        "node_modules",
    }
)


def discover_sql_files(paths: Iterable[Path]) -> list[Path]:
    """Expand directories to the ``*.sql`` files below them.

    Files named explicitly are kept whatever their suffix. Order follows the
    input, directories contribute their files in sorted order, duplicates are
    dropped.
    """
    seen: set[Path] = set()
    files: list[Path] = []

    def _add(path: Path) -> None:
        key = path.resolve()
        if key not in seen:
            seen.add(key)
            files.append(path)

    for path in paths:
        if path.is_dir():
            for candidate in sorted(path.rglob("*")):
                if not candidate.is_file() or candidate.suffix.lower() not in SQL_SUFFIXES:
                    continue
                if any(part in DEFAULT_EXCLUDE_DIRS for part in candidate.parts):
                    continue
                _add(candidate)
        elif path.is_file():
            _add(path)
        else:
            logger.warning("Skipping missing path: %s", path)
    return files


def read_source(path: Path) -> str:
    """Read a file as UTF-8 keeping its line endings untouched."""

    with path.open("r", encoding="utf-8", newline="") as f:
        return f.read()


class LintEngine(BaseModel):
    """Applies every enabled rule to a file's token sequence.

    Rules are independent pure functions over an immutable token tuple, so
    files are processed concurrently on a thread pool. One failing rule is
    reported as a ``rule-internal-error`` violation and never stops the
    others.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    config: LinterConfig = Field(default_factory=LinterConfig)
    jobs: int = Field(default=1, ge=1, description="Files linted in parallel")

    @property
    def enabled_rules(self) -> list[RuleDefinition]:
        return [rule for rule in RULES.values() if rule.settings(self.config).enabled]

    def check_rule(self, rule: RuleDefinition, tokens: Sequence[Token]) -> list[Violation]:
        """Run one rule, turning any exception into a single violation."""

        try:
            return list(rule.check(tokens, rule.settings(self.config)))
        except Exception as e:
            error = RuleInternalError(rule.rule_id, e)
            logger.exception("Rule %s failed", rule.rule_id)
            return [
                Violation(
                    rule_id=RULE_INTERNAL_ERROR_ID,
                    line=1,
                    column=1,
                    message=str(error),
                    severity=Severity.ERROR,
                )
            ]

    def lint_tokens(self, tokens: Sequence[Token], path: Path) -> LintResult:
        violations: list[Violation] = []
        for rule in self.enabled_rules:
            violations.extend(self.check_rule(rule, tokens))
        return LintResult(path=path, violations=sort_violations(violations))

    def lint_source(self, source: str, path: Path | str = "<string>") -> LintResult:
        """Lint SQL text.

        Args:
            source: SQL text to check.
            path: Path reported in the result.

        Returns:
            LintResult: Sorted violations; a single ``malformed-literal``
            violation when the text cannot be tokenized.
        """
        path = Path(path)
        try:
            tokens = tokenize(source)
        except MalformedLiteral as e:
            logger.warning("Cannot tokenize %s: %s", path, e)
            return LintResult(
                path=path,
                violations=[
                    Violation(
                        rule_id=MALFORMED_LITERAL_ID,
                        line=e.line,
                        column=e.column,
                        message=e.message,
                        severity=Severity.ERROR,
                    )
                ],
            )
        return self.lint_tokens(tokens, path)

    def lint_file(self, path: Path) -> LintResult:
        logger.debug("Linting %s", path)
        try:
            source = read_source(path)
        except UnicodeDecodeError as e:
            logger.warning("Cannot decode %s as UTF-8: %s", path, e)
            return LintResult(
                path=path,
                violations=[
                    Violation(
                        rule_id=MALFORMED_LITERAL_ID,
                        line=1,
                        column=1,
                        message=f"file is not valid UTF-8: {e.reason}",
                        severity=Severity.ERROR,
                    )
                ],
            )
        return self.lint_source(source, path)

    def map_files(self, func: Callable[[Path], T], files: list[Path]) -> list[T]:
        """Apply ``func`` to every file, in parallel when ``jobs`` > 1, keeping input order."""

        if self.jobs == 1 or len(files) < 2:
            return [func(path) for path in files]
        with ThreadPoolExecutor(max_workers=self.jobs) as executor:
            return list(executor.map(func, files))

    def lint_paths(self, paths: Iterable[Path]) -> LintReport:
        files = discover_sql_files(paths)
        return LintReport(results=self.map_files(self.lint_file, files))
