from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from sqlstyle.errors import FixerError, MalformedLiteral
from sqlstyle.models.config import LinterConfig
from sqlstyle.models.fix import Edit, FixResult
from sqlstyle.models.violation import RULE_INTERNAL_ERROR_ID, LintResult, Severity, Violation
from sqlstyle.rules import FIX_ORDER, RULES, RuleDefinition
from sqlstyle.services.engine import LintEngine, read_source
from sqlstyle.services.reporter import sort_violations
from sqlstyle.services.tokenizer import tokenize

logger = logging.getLogger(__name__)


def apply_edits(source: str, edits: list[Edit]) -> tuple[str, int]:
    """Apply non-overlapping edits to ``source``.

    Edits overlapping an earlier one are dropped; the caller's re-check
    reports whatever they would have fixed.

    Returns:
        The rewritten text and the number of edits applied.
    """
    accepted: list[Edit] = []
    last_end = -1
    for edit in sorted(edits, key=lambda e: (e.start, e.end)):
        if edit.start < last_end:
            continue
        accepted.append(edit)
        last_end = max(edit.end, edit.start)

    out = source
    for edit in reversed(accepted):
        out = out[: edit.start] + edit.replacement + out[edit.end :]
    return out, len(accepted)


def write_atomic(path: Path, content: str) -> None:
    """Write the whole content to a sibling temp file, then rename it over ``path``."""

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        os.replace(tmp_name, path)
    except OSError:
        logger.exception("Failed to write fixed content to %s", path)
        Path(tmp_name).unlink(missing_ok=True)
        raise


class FixService(BaseModel):
    """Rewrites auto-fixable violations, one rule at a time.

    After each rule's edits the text is re-tokenized and that rule is checked
    again; if more violations remain than the rule's fixer declined, the fix
    did not converge and the file is left as it was.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    config: LinterConfig = Field(default_factory=LinterConfig)
    jobs: int = Field(default=1, ge=1)

    @property
    def engine(self) -> LintEngine:
        return LintEngine(config=self.config, jobs=self.jobs)

    @property
    def fixable_rules(self) -> list[RuleDefinition]:
        rules = [RULES[rule_id] for rule_id in FIX_ORDER]
        return [r for r in rules if r.fix is not None and r.settings(self.config).enabled]

    def _fix_rule(self, rule: RuleDefinition, source: str) -> tuple[str, int]:
        assert rule.fix is not None
        settings = rule.settings(self.config)
        tokens = tokenize(source)
        plan = rule.fix(tokens, settings, self.config)
        if not plan.edits:
            return source, 0

        fixed, applied = apply_edits(source, plan.edits)
        remaining = rule.check(tokenize(fixed), settings)
        skipped = len(plan.edits) - applied
        if len(remaining) > plan.declined + skipped:
            raise FixerError(rule.rule_id, len(remaining), plan.declined + skipped)
        return fixed, applied

    def fix_source(self, source: str, path: Path | str = "<string>") -> FixResult:
        """Fix SQL text without touching the filesystem.

        Args:
            source: SQL text to fix.
            path: Path reported in the result.

        Returns:
            FixResult: Fixed text, rewrites per rule and what is left to report.
        """
        path = Path(path)
        engine = self.engine
        fixed = source
        applied: dict[str, int] = {}

        try:
            for rule in self.fixable_rules:
                fixed, count = self._fix_rule(rule, fixed)
                if count:
                    applied[rule.rule_id] = count
                    logger.debug("Applied %d %s fix(es) to %s", count, rule.rule_id, path)
        except MalformedLiteral:
            return FixResult(
                path=path,
                original=source,
                fixed=source,
                remaining=engine.lint_source(source, path),
            )
        except FixerError as e:
            logger.error("Leaving %s unchanged: %s", path, e)
            remaining = engine.lint_source(source, path)
            failure = Violation(
                rule_id=RULE_INTERNAL_ERROR_ID,
                line=1,
                column=1,
                message=str(e),
                severity=Severity.ERROR,
            )
            return FixResult(
                path=path,
                original=source,
                fixed=source,
                remaining=LintResult(
                    path=path, violations=sort_violations([*remaining.violations, failure])
                ),
            )

        return FixResult(
            path=path,
            original=source,
            fixed=fixed,
            applied=applied,
            remaining=engine.lint_source(fixed, path),
        )

    def fix_file(self, path: Path, write: bool = True) -> FixResult:
        """Fix one file, writing it back only when its content changed."""

        try:
            source = read_source(path)
        except UnicodeDecodeError:
            return FixResult(
                path=path, original="", fixed="", remaining=self.engine.lint_file(path)
            )

        result = self.fix_source(source, path)
        if write and result.changed:
            write_atomic(path, result.fixed)
            summary = ", ".join(f"{k}: {v}" for k, v in result.applied.items())
            logger.info("Fixed %s (%s)", path, summary)
        return result

    def fix_files(self, files: list[Path], write: bool = True) -> list[FixResult]:
        return self.engine.map_files(lambda p: self.fix_file(p, write=write), files)
