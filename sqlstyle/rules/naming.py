from collections.abc import Sequence
from typing import Final

from sqlstyle.models.config import NamingPrefixSettings
from sqlstyle.models.token import Token
from sqlstyle.models.violation import Violation
from sqlstyle.rules.base import make_violation
from sqlstyle.services.structure import (
    SqlStructure,
    iter_create_statements,
    iter_cte_names,
    normalize_name,
)

NAMING_PREFIX_ID: Final[str] = "naming-prefix"

_LABELS: Final[dict[str, str]] = {
    "view": "view",
    "materialized_view": "materialized view",
    "function": "function",
    "temporary_table": "temporary table",
    "cte": "CTE",
}


def _prefix_for(kind: str, settings: NamingPrefixSettings) -> str:
    return getattr(settings, kind)


def check_naming_prefix(
    tokens: Sequence[Token], settings: NamingPrefixSettings
) -> list[Violation]:
    structure = SqlStructure(tokens)
    definitions: list[tuple[str, int]] = []
    for statement in iter_create_statements(tokens, structure):
        if statement.kind == "table":
            if not statement.temporary:
                continue
            definitions.append(("temporary_table", statement.name))
        else:
            definitions.append((statement.kind, statement.name))
    definitions.extend(("cte", index) for index in iter_cte_names(tokens, structure))

    violations: list[Violation] = []
    for kind, index in sorted(definitions, key=lambda d: d[1]):
        prefix = _prefix_for(kind, settings)
        name = tokens[index]
        if normalize_name(name).startswith(prefix):
            continue
        violations.append(
            make_violation(
                NAMING_PREFIX_ID,
                name,
                f"{_LABELS[kind]} name '{name.text}' must start with '{prefix}'",
                settings,
            )
        )
    return violations
