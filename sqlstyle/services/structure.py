from __future__ import annotations

import itertools
from bisect import bisect_left, bisect_right
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Final

from sqlstyle.models.token import Token, TokenKind
from sqlstyle.services.keywords import FUNCTION_WORDS


class Clause(StrEnum):
    """Clause of a query a significant token belongs to."""

    NONE = "none"
    SELECT = "select"
    FROM = "from"
    ON = "on"
    USING = "using"
    WHERE = "where"
    GROUP_BY = "group_by"
    HAVING = "having"
    ORDER_BY = "order_by"
    OTHER = "other"


CLAUSE_KEYWORDS: Final[dict[str, Clause]] = {
    "FROM": Clause.FROM,
    "JOIN": Clause.FROM,
    "ON": Clause.ON,
    "USING": Clause.USING,
    "WHERE": Clause.WHERE,
    "GROUP": Clause.GROUP_BY,
    "HAVING": Clause.HAVING,
    "ORDER": Clause.ORDER_BY,
    "WINDOW": Clause.OTHER,
    "LIMIT": Clause.OTHER,
    "OFFSET": Clause.OTHER,
    "FETCH": Clause.OTHER,
    "FOR": Clause.OTHER,
    "INTO": Clause.OTHER,
    "VALUES": Clause.OTHER,
    "SET": Clause.OTHER,
    "RETURNING": Clause.OTHER,
    "UNION": Clause.OTHER,
    "INTERSECT": Clause.OTHER,
    "EXCEPT": Clause.OTHER,
}
LIST_CLAUSES: Final[frozenset[Clause]] = frozenset(
    {Clause.SELECT, Clause.GROUP_BY, Clause.ORDER_BY}
)
# (keyword, preceding keyword) pairs where the keyword does not open a clause,
# e.g. ``IS DISTINCT FROM`` or ``WITHIN GROUP``.
_EMBEDDED_KEYWORDS: Final[frozenset[tuple[str, str]]] = frozenset(
    {("FROM", "DISTINCT"), ("ON", "DISTINCT"), ("GROUP", "WITHIN")}
)


@dataclass(frozen=True)
class TokenContext:
    depth: int
    clause: Clause
    clause_id: int
    scope: int | None
    owns_scope: bool


@dataclass
class SelectScope:
    """One SELECT query block: its table sources and output aliases."""

    scope_id: int
    keyword: int
    sources: list[int] = field(default_factory=list)
    aliases: set[str] = field(default_factory=set)


@dataclass
class _Frame:
    clause: Clause
    clause_id: int
    scope: int | None
    owns_scope: bool
    expect_source: bool = False


def normalize_name(token: Token) -> str:
    """Case-fold unquoted names, strip quotes from quoted ones."""

    if token.is_quoted:
        return token.text[1:-1].replace('""', '"')
    return token.text.lower()


class SqlStructure:
    """Read-only structural view of a token sequence.

    A single pass over the significant tokens tracks parenthesis depth, the
    clause every token belongs to, and SELECT query blocks ("scopes") with
    the table sources named in their FROM/JOIN clauses. A frame "owns" its
    scope when the SELECT keyword appeared at that parenthesis level;
    parenthesized sub-expressions inherit the scope without owning it, so
    keywords such as ``FROM`` inside ``EXTRACT(... FROM ...)`` never open a
    clause.
    """

    def __init__(self, tokens: Sequence[Token]) -> None:
        self.tokens: Sequence[Token] = tokens
        self.significant: list[int] = [i for i, t in enumerate(tokens) if t.is_significant]
        self.contexts: dict[int, TokenContext] = {}
        self.scopes: dict[int, SelectScope] = {}
        self.clause_keywords: dict[int, int] = {}
        self.parens: dict[int, int] = {}
        self._ids = itertools.count(1)
        self._analyze()

    def prev_significant(self, index: int) -> int | None:
        pos = bisect_left(self.significant, index) - 1
        return self.significant[pos] if pos >= 0 else None

    def next_significant(self, index: int) -> int | None:
        pos = bisect_right(self.significant, index)
        return self.significant[pos] if pos < len(self.significant) else None

    def _analyze(self) -> None:
        stack: list[_Frame] = [_Frame(Clause.NONE, next(self._ids), None, False)]
        open_parens: list[int] = []

        for i in self.significant:
            token = self.tokens[i]
            frame = stack[-1]
            prev = self.prev_significant(i)
            prev_token = self.tokens[prev] if prev is not None else None

            if token.is_punct("("):
                self._register_source(frame, i)
                self._record(i, frame, len(stack) - 1)
                open_parens.append(i)
                stack.append(_Frame(frame.clause, frame.clause_id, frame.scope, False))
                continue

            if token.is_punct(")"):
                if len(stack) > 1:
                    stack.pop()
                    opener = open_parens.pop()
                    self.parens[opener] = i
                    self.parens[i] = opener
                self._record(i, stack[-1], len(stack) - 1)
                continue

            if token.is_punct(";"):
                stack = [_Frame(Clause.NONE, next(self._ids), None, False)]
                open_parens.clear()
                self._record(i, stack[-1], 0)
                continue

            if token.is_keyword("SELECT"):
                scope_id = next(self._ids)
                self.scopes[scope_id] = SelectScope(scope_id=scope_id, keyword=i)
                frame.scope = scope_id
                frame.owns_scope = True
                self._enter_clause(frame, Clause.SELECT, i)
            elif self._opens_clause(token, prev_token, frame):
                clause = CLAUSE_KEYWORDS[token.upper]
                self._enter_clause(frame, clause, i)
                if clause == Clause.FROM and frame.owns_scope:
                    frame.expect_source = True
            elif frame.owns_scope and frame.clause == Clause.FROM and token.is_punct(","):
                frame.expect_source = True
            else:
                self._register_source(frame, i)

            if (
                frame.clause == Clause.SELECT
                and frame.scope is not None
                and prev_token is not None
                and prev_token.is_keyword("AS")
                and token.kind == TokenKind.IDENTIFIER
            ):
                self.scopes[frame.scope].aliases.add(normalize_name(token))

            self._record(i, frame, len(stack) - 1)

    @staticmethod
    def _opens_clause(token: Token, prev_token: Token | None, frame: _Frame) -> bool:
        if token.kind != TokenKind.KEYWORD or token.upper not in CLAUSE_KEYWORDS:
            return False
        if not frame.owns_scope and frame.scope is not None:
            return False
        if prev_token is not None and (token.upper, prev_token.upper) in _EMBEDDED_KEYWORDS:
            return False
        return True

    def _enter_clause(self, frame: _Frame, clause: Clause, index: int) -> None:
        frame.clause = clause
        frame.clause_id = next(self._ids)
        frame.expect_source = False
        self.clause_keywords[frame.clause_id] = index

    def _register_source(self, frame: _Frame, index: int) -> None:
        if not frame.expect_source or frame.scope is None:
            return
        token = self.tokens[index]
        if token.is_keyword("LATERAL", "ONLY"):
            return
        # FROM generate_series(...) reads from a set-returning function.
        if (
            token.kind == TokenKind.IDENTIFIER
            or token.is_punct("(")
            or token.upper in FUNCTION_WORDS
        ):
            self.scopes[frame.scope].sources.append(index)
        frame.expect_source = False

    def _record(self, index: int, frame: _Frame, depth: int) -> None:
        self.contexts[index] = TokenContext(
            depth=depth,
            clause=frame.clause,
            clause_id=frame.clause_id,
            scope=frame.scope,
            owns_scope=frame.owns_scope,
        )

    def list_commas(self) -> Iterator[int]:
        """Commas separating top-level items of SELECT, GROUP BY and ORDER BY lists."""

        for i in self.significant:
            if not self.tokens[i].is_punct(","):
                continue
            ctx = self.contexts[i]
            if ctx.owns_scope and ctx.clause in LIST_CLAUSES:
                yield i

    def ends_list(self, comma: int) -> bool:
        """Whether the list comma is directly followed by its clause terminator."""

        nxt = self.next_significant(comma)
        if nxt is None:
            return True
        if self.tokens[nxt].is_punct(")", ";"):
            return True
        here = self.contexts[comma]
        there = self.contexts[nxt]
        return there.depth == here.depth and there.clause_id != here.clause_id

    def first_list_item(self, clause_id: int) -> int | None:
        """First significant token of the list opened by the clause ``clause_id``."""

        keyword = self.clause_keywords.get(clause_id)
        if keyword is None:
            return None
        index = self.next_significant(keyword)
        while index is not None:
            token = self.tokens[index]
            if token.is_keyword("BY", "ALL"):
                index = self.next_significant(index)
            elif token.is_keyword("DISTINCT"):
                index = self.next_significant(index)
                if index is not None and self.tokens[index].is_keyword("ON"):
                    opener = self.next_significant(index)
                    if opener is None or opener not in self.parens:
                        return None
                    index = self.next_significant(self.parens[opener])
            else:
                return index
        return None


@dataclass(frozen=True)
class CreateStatement:
    """Head of a ``CREATE`` statement for a view, function or table."""

    kind: str
    temporary: bool
    keyword: int
    name: int


_CREATE_MODIFIERS: Final[frozenset[str]] = frozenset(
    {"OR", "REPLACE", "TEMP", "TEMPORARY", "UNLOGGED", "RECURSIVE"}
)


def iter_create_statements(
    tokens: Sequence[Token], structure: SqlStructure
) -> Iterator[CreateStatement]:
    """Yield the CREATE VIEW / MATERIALIZED VIEW / FUNCTION / TABLE heads.

    ``name`` points at the last part of a possibly schema-qualified name.
    """
    for keyword in structure.significant:
        if not tokens[keyword].is_keyword("CREATE"):
            continue
        temporary = False
        index = structure.next_significant(keyword)
        while index is not None and tokens[index].upper in _CREATE_MODIFIERS:
            temporary = temporary or tokens[index].upper in ("TEMP", "TEMPORARY")
            index = structure.next_significant(index)
        if index is None:
            continue

        word = tokens[index].upper
        if word == "MATERIALIZED":
            index = structure.next_significant(index)
            if index is None or not tokens[index].is_keyword("VIEW"):
                continue
            kind = "materialized_view"
        elif word == "VIEW":
            kind = "view"
        elif word == "FUNCTION":
            kind = "function"
        elif word == "TABLE":
            kind = "table"
        else:
            continue

        index = structure.next_significant(index)
        while index is not None and tokens[index].is_keyword("IF", "NOT", "EXISTS"):
            index = structure.next_significant(index)
        if index is None or tokens[index].kind != TokenKind.IDENTIFIER:
            continue
        while True:
            dot = structure.next_significant(index)
            part = structure.next_significant(dot) if dot is not None else None
            if dot is None or part is None or not tokens[dot].is_punct("."):
                break
            index = part
        yield CreateStatement(kind=kind, temporary=temporary, keyword=keyword, name=index)


def iter_cte_names(tokens: Sequence[Token], structure: SqlStructure) -> Iterator[int]:
    """Yield the name token of every CTE defined by a ``WITH`` clause."""

    for keyword in structure.significant:
        if not tokens[keyword].is_keyword("WITH"):
            continue
        index = structure.next_significant(keyword)
        if index is not None and tokens[index].is_keyword("RECURSIVE"):
            index = structure.next_significant(index)
        while index is not None and tokens[index].kind == TokenKind.IDENTIFIER:
            body = _cte_body(tokens, structure, index)
            if body is None:
                break
            yield index
            closer = structure.parens.get(body)
            after = structure.next_significant(closer) if closer is not None else None
            if after is None or not tokens[after].is_punct(","):
                break
            index = structure.next_significant(after)


def _cte_body(tokens: Sequence[Token], structure: SqlStructure, name: int) -> int | None:
    """Opening parenthesis of the CTE body following ``name``, if it is one."""

    index = structure.next_significant(name)
    if index is not None and tokens[index].is_punct("("):
        closer = structure.parens.get(index)
        index = structure.next_significant(closer) if closer is not None else None
    if index is None or not tokens[index].is_keyword("AS"):
        return None
    index = structure.next_significant(index)
    while index is not None and tokens[index].upper in ("NOT", "MATERIALIZED"):
        index = structure.next_significant(index)
    if index is None or not tokens[index].is_punct("("):
        return None
    return index


def is_line_leading(tokens: Sequence[Token], index: int) -> bool:
    """True when only whitespace precedes ``tokens[index]`` on its line."""

    for j in range(index - 1, -1, -1):
        token = tokens[j]
        if token.kind != TokenKind.WHITESPACE:
            return False
        if "\n" in token.text:
            return True
    return True


def is_line_trailing(tokens: Sequence[Token], index: int) -> bool:
    """True when only whitespace or a line comment follows ``tokens[index]`` on its line."""

    for j in range(index + 1, len(tokens)):
        token = tokens[j]
        if token.kind == TokenKind.WHITESPACE:
            if "\n" in token.text:
                return True
            continue
        if token.kind == TokenKind.COMMENT and token.text.startswith("--"):
            continue
        return False
    return True


def line_indent(tokens: Sequence[Token], index: int) -> int:
    """Indentation width of the line ``tokens[index]`` starts on."""

    line = tokens[index].line
    first = index
    for j in range(index - 1, -1, -1):
        if tokens[j].line != line:
            break
        if tokens[j].kind != TokenKind.WHITESPACE:
            first = j
    return tokens[first].column - 1
