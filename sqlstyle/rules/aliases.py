from collections.abc import Iterator, Sequence
from typing import Final

from sqlstyle.models.config import (
    CasingPolicy,
    ExplicitAliasSettings,
    KeywordCasingSettings,
    LinterConfig,
)
from sqlstyle.models.fix import Edit, FixPlan
from sqlstyle.models.token import Token, TokenKind
from sqlstyle.models.violation import Violation
from sqlstyle.rules.base import make_violation, token_offsets
from sqlstyle.rules.casing import KEYWORD_CASING_ID
from sqlstyle.services.structure import Clause, SqlStructure

EXPLICIT_ALIAS_ID: Final[str] = "explicit-alias"

# Keywords that carry an expression on past the word before them,
# e.g. ``created_at AT TIME ZONE`` or ``name COLLATE "C"``.
_EXPRESSION_CONTINUATIONS: Final[tuple[str, ...]] = (
    "AND", "AT", "BETWEEN", "COLLATE", "ILIKE", "IN", "IS", "ISNULL", "LIKE",
    "NOTNULL", "OR", "OVERLAPS", "SIMILAR", "TIME", "ZONE",
)


def _ends_expression(tokens: Sequence[Token], structure: SqlStructure, index: int) -> bool:
    token = tokens[index]
    if token.kind in (TokenKind.IDENTIFIER, TokenKind.LITERAL):
        return True
    if token.is_keyword("END"):
        return True
    if token.is_punct(")"):
        opener = structure.parens.get(index)
        if opener is None:
            return True
        before = structure.prev_significant(opener)
        # DISTINCT ON (...) is followed by the first select item, not an alias.
        return before is None or not tokens[before].is_keyword("ON")
    return False


def bare_aliases(tokens: Sequence[Token], structure: SqlStructure) -> Iterator[int]:
    """Identifiers in SELECT lists or FROM clauses that alias without ``AS``."""

    for i in structure.significant:
        if tokens[i].kind != TokenKind.IDENTIFIER:
            continue
        ctx = structure.contexts[i]
        if ctx.clause not in (Clause.SELECT, Clause.FROM):
            continue
        if not ctx.owns_scope and ctx.scope is not None:
            continue
        prev = structure.prev_significant(i)
        if prev is None or not _ends_expression(tokens, structure, prev):
            continue
        nxt = structure.next_significant(i)
        if nxt is None or not tokens[nxt].is_keyword(*_EXPRESSION_CONTINUATIONS):
            yield i


def check_explicit_alias(
    tokens: Sequence[Token], settings: ExplicitAliasSettings
) -> list[Violation]:
    structure = SqlStructure(tokens)
    return [
        make_violation(
            EXPLICIT_ALIAS_ID,
            tokens[i],
            f"alias '{tokens[i].text}' must be introduced with AS",
            settings,
        )
        for i in bare_aliases(tokens, structure)
    ]


def fix_explicit_alias(
    tokens: Sequence[Token], settings: ExplicitAliasSettings, config: LinterConfig
) -> FixPlan:
    keyword_settings = config.rules.get(KEYWORD_CASING_ID)
    policy = (
        keyword_settings.casing_policy
        if isinstance(keyword_settings, KeywordCasingSettings)
        else CasingPolicy.UPPER
    )
    keyword = "as" if policy == CasingPolicy.LOWER else "AS"

    structure = SqlStructure(tokens)
    offsets = token_offsets(tokens)
    plan = FixPlan()
    for i in bare_aliases(tokens, structure):
        spaced = i > 0 and tokens[i - 1].kind == TokenKind.WHITESPACE
        insert = f"{keyword} " if spaced else f" {keyword} "
        plan.edits.append(Edit(start=offsets[i], end=offsets[i], replacement=insert))
    return plan
