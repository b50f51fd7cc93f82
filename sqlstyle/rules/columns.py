from collections.abc import Iterator, Sequence
from typing import Final

from sqlstyle.models.config import RequiredTimestampColumnsSettings
from sqlstyle.models.token import Token
from sqlstyle.models.violation import Violation
from sqlstyle.rules.base import make_violation
from sqlstyle.services.structure import SqlStructure, iter_create_statements, normalize_name

REQUIRED_TIMESTAMP_COLUMNS_ID: Final[str] = "required-timestamp-columns"

_TABLE_CONSTRAINTS: Final[frozenset[str]] = frozenset(
    {"CONSTRAINT", "PRIMARY", "FOREIGN", "UNIQUE", "CHECK", "EXCLUDE", "LIKE"}
)
_COLUMN_CONSTRAINTS: Final[frozenset[str]] = frozenset(
    {
        "NOT", "NULL", "DEFAULT", "PRIMARY", "REFERENCES", "UNIQUE", "CHECK",
        "CONSTRAINT", "GENERATED", "COLLATE", "DEFERRABLE",
    }
)
_TIMESTAMPTZ_SPELLINGS: Final[tuple[tuple[str, ...], ...]] = (
    ("TIMESTAMPTZ",),
    ("TIMESTAMP", "WITH", "TIME", "ZONE"),
)


def _column_definitions(
    tokens: Sequence[Token], structure: SqlStructure, opener: int
) -> Iterator[tuple[int, list[int]]]:
    """Yield (name index, type token indexes) for each column of a table body."""

    closer = structure.parens[opener]
    element: list[int] = []
    index = structure.next_significant(opener)
    while index is not None and index <= closer:
        at_top = structure.contexts[index].depth == structure.contexts[opener].depth + 1
        if index == closer or (at_top and tokens[index].is_punct(",")):
            if element and tokens[element[0]].upper not in _TABLE_CONSTRAINTS:
                yield element[0], element[1:]
            element = []
        else:
            element.append(index)
        index = structure.next_significant(index)


def _type_words(
    tokens: Sequence[Token], structure: SqlStructure, type_tokens: list[int]
) -> tuple[str, ...]:
    words: list[str] = []
    depth: int | None = None
    for index in type_tokens:
        token = tokens[index]
        ctx_depth = structure.contexts[index].depth
        if depth is None:
            depth = ctx_depth
        # Precision modifiers such as TIMESTAMP(3) do not change the type.
        if ctx_depth > depth or token.is_punct("(", ")"):
            continue
        if token.upper in _COLUMN_CONSTRAINTS:
            break
        words.append(token.upper)
    return tuple(words)


def check_required_timestamp_columns(
    tokens: Sequence[Token], settings: RequiredTimestampColumnsSettings
) -> list[Violation]:
    structure = SqlStructure(tokens)
    violations: list[Violation] = []

    for statement in iter_create_statements(tokens, structure):
        if statement.kind != "table":
            continue
        if statement.temporary and settings.ignore_temporary:
            continue
        opener = structure.next_significant(statement.name)
        if opener is None or not tokens[opener].is_punct("(") or opener not in structure.parens:
            continue

        columns = {
            normalize_name(tokens[name]): (name, type_tokens)
            for name, type_tokens in _column_definitions(tokens, structure, opener)
        }
        table = tokens[statement.name]
        for required in settings.columns:
            if required not in columns:
                violations.append(
                    make_violation(
                        REQUIRED_TIMESTAMP_COLUMNS_ID,
                        table,
                        f"table '{table.text}' is missing required column '{required}'",
                        settings,
                    )
                )
                continue
            name, type_tokens = columns[required]
            if _type_words(tokens, structure, type_tokens) not in _TIMESTAMPTZ_SPELLINGS:
                violations.append(
                    make_violation(
                        REQUIRED_TIMESTAMP_COLUMNS_ID,
                        tokens[name],
                        f"column '{tokens[name].text}' must be TIMESTAMPTZ "
                        "(timestamp with time zone)",
                        settings,
                    )
                )
    return violations
