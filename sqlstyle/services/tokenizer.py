from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Final

from sqlstyle.errors import MalformedLiteral
from sqlstyle.models.token import Token, TokenKind
from sqlstyle.services.keywords import (
    AMBIGUOUS_TYPE_WORDS,
    CONTEXTUAL_WORDS,
    FIELD_WORDS,
    FUNCTION_WORDS,
    KEYWORDS,
    LITERAL_WORDS,
    MULTI_CHAR_OPERATORS,
)

logger = logging.getLogger(__name__)

_WHITESPACE_RE: Final[re.Pattern[str]] = re.compile(r"[ \t\r\n\f\v]+")
_WORD_RE: Final[re.Pattern[str]] = re.compile(r"[^\W\d][\w$]*")
_NUMBER_RE: Final[re.Pattern[str]] = re.compile(r"(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_DOLLAR_TAG_RE: Final[re.Pattern[str]] = re.compile(r"\$(?:[A-Za-z_][A-Za-z0-9_]*)?\$")
_PARAMETER_RE: Final[re.Pattern[str]] = re.compile(r"\$\d+")
_BLOCK_COMMENT_DELIMITER_RE: Final[re.Pattern[str]] = re.compile(r"/\*|\*/")

_STRING_PREFIXES: Final[str] = "bBxXnN"
_ESCAPE_STRING_PREFIXES: Final[str] = "eE"

_TYPE_LEADERS: Final[tuple[str, ...]] = ("RETURNS", "SETOF", "TYPE")
_DDL_CLAUSE_WORDS: Final[frozenset[str]] = frozenset({"OWNER", "TYPE"})
# A table or function name sits here even when it spells a built-in function.
_NAME_LEADERS: Final[tuple[str, ...]] = ("FUNCTION", "INTO", "PROCEDURE", "REFERENCES", "TABLE")


@dataclass
class _WordContext:
    """What the tokenizer remembers to classify words that depend on position."""

    previous: Token | None = None
    before_previous: Token | None = None
    cast_parens: list[bool] = field(default_factory=list)
    ddl: bool = False
    at_statement_start: bool = True

    def advance(self, token: Token) -> None:
        if self.at_statement_start:
            self.ddl = token.is_keyword("CREATE", "ALTER")
            self.at_statement_start = False
        if token.is_punct(";"):
            self.at_statement_start = True
            self.cast_parens.clear()
        elif token.is_punct("("):
            opens_cast = self.previous is not None and self.previous.is_keyword("CAST")
            self.cast_parens.append(opens_cast)
        elif token.is_punct(")") and self.cast_parens:
            self.cast_parens.pop()
        self.before_previous, self.previous = self.previous, token

    @property
    def after_ddl_name(self) -> bool:
        """True right after a column or object name inside CREATE or ALTER."""
        previous = self.previous
        return self.ddl and previous is not None and previous.kind == TokenKind.IDENTIFIER

    def expects_type(self) -> bool:
        previous = self.previous
        if previous is None:
            return False
        if previous.is_punct("::") or previous.is_keyword(*_TYPE_LEADERS):
            return True
        if previous.is_keyword("AS") and self.cast_parens and self.cast_parens[-1]:
            return True
        return self.after_ddl_name

    def expects_field(self) -> bool:
        previous, before = self.previous, self.before_previous
        if previous is None or before is None:
            return False
        if previous.is_punct("(") and before.is_keyword("EXTRACT"):
            return True
        if previous.kind == TokenKind.LITERAL and before.is_keyword("INTERVAL"):
            return True
        # INTERVAL '1' DAY TO SECOND
        return (
            previous.is_keyword("TO")
            and before.kind == TokenKind.KEYWORD
            and before.upper in FIELD_WORDS
        )


class Tokenizer:
    """Lossless, lazy tokenizer for PostgreSQL source text.

    Iterating yields tokens covering every character of ``source`` exactly
    once, comments and whitespace included. Each call to ``iter()`` starts
    over from the beginning of the text.

    Raises:
        MalformedLiteral: When a string, quoted identifier, block comment or
            dollar-quoted block is still open at end of input. Tokens before
            the offending literal have already been yielded by then.
    """

    def __init__(self, source: str) -> None:
        self.source: str = source

    def __iter__(self) -> Iterator[Token]:
        source = self.source
        length = len(source)
        pos = 0
        line = 1
        column = 1
        context = _WordContext()

        while pos < length:
            kind, end = self._scan(pos, line, column, context)
            text = source[pos:end]
            token = Token(kind=kind, text=text, line=line, column=column)
            yield token

            if token.is_significant:
                context.advance(token)
            newlines = text.count("\n")
            if newlines:
                line += newlines
                column = len(text) - text.rfind("\n")
            else:
                column += len(text)
            pos = end

    def _scan(
        self, pos: int, line: int, column: int, context: _WordContext
    ) -> tuple[TokenKind, int]:
        """Classify the token starting at ``pos`` and return its end offset."""

        source = self.source
        ch = source[pos]
        nxt = source[pos + 1] if pos + 1 < len(source) else ""

        if ch in " \t\r\n\f\v":
            match = _WHITESPACE_RE.match(source, pos)
            assert match is not None
            return TokenKind.WHITESPACE, match.end()

        if ch == "-" and nxt == "-":
            end = source.find("\n", pos)
            if end == -1:
                return TokenKind.COMMENT, len(source)
            if end > pos and source[end - 1] == "\r":
                end -= 1
            return TokenKind.COMMENT, end

        if ch == "/" and nxt == "*":
            return TokenKind.COMMENT, self._block_comment_end(pos, line, column)

        if ch == "'":
            return TokenKind.LITERAL, self._quoted_end(pos, "'", line, column, "string literal")

        if ch in _ESCAPE_STRING_PREFIXES and nxt == "'":
            return TokenKind.LITERAL, self._escape_string_end(pos + 1, line, column)

        if ch in _STRING_PREFIXES and nxt == "'":
            return TokenKind.LITERAL, self._quoted_end(pos + 1, "'", line, column, "string literal")

        if ch == '"':
            return TokenKind.IDENTIFIER, self._quoted_end(
                pos, '"', line, column, "quoted identifier"
            )

        if ch == "$":
            tag = _DOLLAR_TAG_RE.match(source, pos)
            if tag is not None:
                close = source.find(tag.group(), tag.end())
                if close == -1:
                    raise MalformedLiteral(
                        f"unterminated dollar-quoted block {tag.group()}", line, column
                    )
                return TokenKind.LITERAL, close + len(tag.group())
            param = _PARAMETER_RE.match(source, pos)
            if param is not None:
                return TokenKind.LITERAL, param.end()
            return TokenKind.PUNCTUATION, pos + 1

        number = _NUMBER_RE.match(source, pos)
        if number is not None:
            return TokenKind.LITERAL, number.end()

        word = _WORD_RE.match(source, pos)
        if word is not None:
            return self._classify_word(word.group(), word.end(), context), word.end()

        for op in MULTI_CHAR_OPERATORS:
            if source.startswith(op, pos):
                return TokenKind.PUNCTUATION, pos + len(op)
        return TokenKind.PUNCTUATION, pos + 1

    def _classify_word(self, word: str, end: int, context: _WordContext) -> TokenKind:
        """Decide whether a word is a keyword, a literal or a name.

        Reserved words and unambiguous type names are always keywords. Words
        that double as common column names (``date``, ``text``, ``year``,
        ``key``, built-in function names) are keywords only in a position
        where PostgreSQL reads them as such.
        """
        previous = context.previous
        # Anything after a dot is a name, even when it spells a keyword.
        if previous is not None and previous.is_punct("."):
            return TokenKind.IDENTIFIER
        upper = word.upper()
        if upper in LITERAL_WORDS:
            return TokenKind.LITERAL
        if upper in KEYWORDS:
            return TokenKind.KEYWORD
        if upper in FUNCTION_WORDS and self._is_call(end, previous):
            return TokenKind.KEYWORD
        if upper in AMBIGUOUS_TYPE_WORDS and (
            context.expects_type() or self._next_char(end) == "'"
        ):
            return TokenKind.KEYWORD
        if upper in FIELD_WORDS and context.expects_field():
            return TokenKind.KEYWORD
        if upper in _DDL_CLAUSE_WORDS and context.after_ddl_name:
            return TokenKind.KEYWORD
        leaders = CONTEXTUAL_WORDS.get(upper)
        if leaders is not None and previous is not None and previous.is_keyword(*leaders):
            return TokenKind.KEYWORD
        return TokenKind.IDENTIFIER

    def _is_call(self, end: int, previous: Token | None) -> bool:
        if previous is not None and previous.is_keyword(*_NAME_LEADERS):
            return False
        return self._next_char(end) == "("

    def _next_char(self, pos: int) -> str:
        """First character at or after ``pos`` that is not whitespace."""
        match = _WHITESPACE_RE.match(self.source, pos)
        if match is not None:
            pos = match.end()
        return self.source[pos : pos + 1]

    def _quoted_end(self, pos: int, quote: str, line: int, column: int, what: str) -> int:
        """Return the offset after the closing ``quote``; doubled quotes are escapes."""

        source = self.source
        i = pos + 1
        while True:
            j = source.find(quote, i)
            if j == -1:
                raise MalformedLiteral(f"unterminated {what}", line, column)
            if source.startswith(quote * 2, j):
                i = j + 2
                continue
            return j + 1

    def _escape_string_end(self, pos: int, line: int, column: int) -> int:
        source = self.source
        i = pos + 1
        while i < len(source):
            ch = source[i]
            if ch == "\\":
                i += 2
                continue
            if ch == "'":
                if source.startswith("''", i):
                    i += 2
                    continue
                return i + 1
            i += 1
        raise MalformedLiteral("unterminated escape string literal", line, column)

    def _block_comment_end(self, pos: int, line: int, column: int) -> int:
        depth = 0
        for match in _BLOCK_COMMENT_DELIMITER_RE.finditer(self.source, pos):
            depth += 1 if match.group() == "/*" else -1
            if depth == 0:
                return match.end()
        raise MalformedLiteral("unterminated block comment", line, column)


def tokenize(source: str) -> tuple[Token, ...]:
    """Tokenize ``source`` eagerly.

    Args:
        source: SQL text.

    Returns:
        Every token of the text, in source order.

    Raises:
        MalformedLiteral: On an unterminated quoted construct.
    """
    tokens = tuple(Tokenizer(source))
    logger.debug("Tokenized %d characters into %d tokens", len(source), len(tokens))
    return tokens
