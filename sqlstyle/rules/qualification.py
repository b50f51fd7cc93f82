from collections.abc import Sequence
from typing import Final

from sqlstyle.models.config import QualificationSettings
from sqlstyle.models.token import Token, TokenKind
from sqlstyle.models.violation import Violation
from sqlstyle.rules.aliases import bare_aliases
from sqlstyle.rules.base import make_violation
from sqlstyle.services.structure import Clause, SqlStructure, normalize_name

QUALIFICATION_ID: Final[str] = "qualification"

_COLUMN_CLAUSES: Final[frozenset[Clause]] = frozenset(
    {
        Clause.SELECT,
        Clause.ON,
        Clause.WHERE,
        Clause.GROUP_BY,
        Clause.HAVING,
        Clause.ORDER_BY,
    }
)


def check_qualification(
    tokens: Sequence[Token], settings: QualificationSettings
) -> list[Violation]:
    """Flag unqualified column references in query blocks joining several tables.

    Each SELECT block is judged on its own FROM/JOIN sources, so a
    single-table CTE body or subquery inside a join query is not flagged.
    """
    structure = SqlStructure(tokens)
    aliases = set(bare_aliases(tokens, structure))
    violations: list[Violation] = []

    for i in structure.significant:
        token = tokens[i]
        if token.kind != TokenKind.IDENTIFIER or i in aliases:
            continue
        ctx = structure.contexts[i]
        if ctx.scope is None or ctx.clause not in _COLUMN_CLAUSES:
            continue
        scope = structure.scopes[ctx.scope]
        if len(scope.sources) < 2:
            continue

        prev = structure.prev_significant(i)
        nxt = structure.next_significant(i)
        if prev is not None and tokens[prev].is_punct(".", "::"):
            continue
        if prev is not None and tokens[prev].is_keyword("AS"):
            continue
        if nxt is not None and tokens[nxt].is_punct(".", "("):
            continue
        if normalize_name(token) in scope.aliases:
            continue

        violations.append(
            make_violation(
                QUALIFICATION_ID,
                token,
                f"column '{token.text}' must be qualified with a table alias "
                f"when the query references {len(scope.sources)} tables",
                settings,
            )
        )
    return violations
