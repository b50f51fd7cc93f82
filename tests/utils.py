from typing import Any

from sqlstyle.loaders.config_loader import build_config
from sqlstyle.models.config import LinterConfig
from sqlstyle.models.violation import LintResult, Violation
from sqlstyle.services.engine import LintEngine


def config_with(rules: dict[str, Any] | None = None, **options: Any) -> LinterConfig:
    """Build a validated config with rule overrides."""

    return build_config({"rules": rules or {}, **options})


def lint(source: str, config: LinterConfig | None = None) -> LintResult:
    return LintEngine(config=config or build_config()).lint_source(source, "query.sql")


def violations_for(
    source: str, rule_id: str, config: LinterConfig | None = None
) -> list[Violation]:
    return [v for v in lint(source, config).violations if v.rule_id == rule_id]


def locations(violations: list[Violation]) -> list[tuple[int, int]]:
    return [(v.line, v.column) for v in violations]
