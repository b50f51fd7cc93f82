"""Comma-first list layout and trailing commas.

Only commas at the top level of a SELECT, GROUP BY or ORDER BY list are
considered. Commas inside parentheses (function arguments, window
definitions, parenthesized CASE expressions) belong to sub-expressions and
are never checked, so a multi-line expression is judged only by the comma
that follows it.
"""

from collections.abc import Iterator, Sequence
from typing import Final

from sqlstyle.models.config import (
    CommaPosition,
    CommaPositionSettings,
    LinterConfig,
    TrailingCommaSettings,
)
from sqlstyle.models.fix import Edit, FixPlan
from sqlstyle.models.token import Token, TokenKind
from sqlstyle.models.violation import Violation
from sqlstyle.rules.base import detect_newline, make_violation, token_offsets
from sqlstyle.services.structure import (
    SqlStructure,
    is_line_leading,
    is_line_trailing,
    line_indent,
)

COMMA_POSITION_ID: Final[str] = "comma-position"
TRAILING_COMMA_ID: Final[str] = "trailing-comma"


def _misplaced(
    tokens: Sequence[Token], structure: SqlStructure, settings: CommaPositionSettings
) -> Iterator[int]:
    for i in structure.list_commas():
        leading = is_line_leading(tokens, i)
        if settings.comma_position == CommaPosition.LEADING and not leading:
            yield i
        elif settings.comma_position == CommaPosition.TRAILING and leading:
            yield i


def _has_comment(tokens: Sequence[Token], start: int, end: int) -> bool:
    return any(tokens[j].kind == TokenKind.COMMENT for j in range(start, end))


def check_comma_position(
    tokens: Sequence[Token], settings: CommaPositionSettings
) -> list[Violation]:
    structure = SqlStructure(tokens)
    violations: list[Violation] = []
    for i in _misplaced(tokens, structure, settings):
        if settings.comma_position == CommaPosition.TRAILING:
            message = "comma at start of line; move it to the end of the previous line"
        elif is_line_trailing(tokens, i):
            message = "comma at end of line; move it to the start of the next item's line"
        else:
            message = "comma should be the first character of its line (comma-first style)"
        violations.append(make_violation(COMMA_POSITION_ID, tokens[i], message, settings))
    return violations


def _leading_column(
    tokens: Sequence[Token], structure: SqlStructure, comma: int, config: LinterConfig
) -> int:
    half = config.indent_width // 2
    clause_id = structure.contexts[comma].clause_id
    item = structure.first_list_item(clause_id)
    if item is not None and is_line_leading(tokens, item):
        return max(tokens[item].column - 1 - half, 0)
    keyword = structure.clause_keywords[clause_id]
    return line_indent(tokens, keyword) + half


def _trailing_indent(tokens: Sequence[Token], structure: SqlStructure, comma: int) -> int:
    # Items line up under the first one, even when it shares the keyword's line.
    item = structure.first_list_item(structure.contexts[comma].clause_id)
    if item is not None:
        return tokens[item].column - 1
    return line_indent(tokens, comma)


def fix_comma_position(
    tokens: Sequence[Token], settings: CommaPositionSettings, config: LinterConfig
) -> FixPlan:
    """Move misplaced list commas, rewriting only the gap between two items.

    Commas that end their list are left to ``trailing-comma``; gaps holding a
    comment are left untouched.
    """
    structure = SqlStructure(tokens)
    offsets = token_offsets(tokens)
    newline = detect_newline(tokens)
    plan = FixPlan()

    for i in _misplaced(tokens, structure, settings):
        prev = structure.prev_significant(i)
        nxt = structure.next_significant(i)
        if (
            prev is None
            or nxt is None
            or structure.ends_list(i)
            or _has_comment(tokens, prev + 1, nxt)
        ):
            plan.declined += 1
            continue

        if settings.comma_position == CommaPosition.LEADING:
            column = _leading_column(tokens, structure, i, config)
            replacement = f"{newline}{' ' * column}, "
        else:
            replacement = f",{newline}{' ' * _trailing_indent(tokens, structure, i)}"
        plan.edits.append(
            Edit(
                start=offsets[prev] + len(tokens[prev].text),
                end=offsets[nxt],
                replacement=replacement,
            )
        )
    return plan


def check_trailing_comma(
    tokens: Sequence[Token], settings: TrailingCommaSettings
) -> list[Violation]:
    structure = SqlStructure(tokens)
    return [
        make_violation(
            TRAILING_COMMA_ID,
            tokens[i],
            "trailing comma after the last item of the list",
            settings,
        )
        for i in structure.list_commas()
        if structure.ends_list(i)
    ]


def fix_trailing_comma(
    tokens: Sequence[Token], settings: TrailingCommaSettings, config: LinterConfig
) -> FixPlan:
    structure = SqlStructure(tokens)
    offsets = token_offsets(tokens)
    plan = FixPlan()
    for i in structure.list_commas():
        if not structure.ends_list(i):
            continue
        prev = structure.prev_significant(i)
        end = offsets[i] + len(tokens[i].text)
        if prev is None or _has_comment(tokens, prev + 1, i):
            start = offsets[i]
        else:
            start = offsets[prev] + len(tokens[prev].text)
        plan.edits.append(Edit(start=start, end=end))
    return plan
