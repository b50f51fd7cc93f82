from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class TokenKind(StrEnum):
    """Closed set of token categories produced by the tokenizer."""

    KEYWORD = "keyword"
    IDENTIFIER = "identifier"
    LITERAL = "literal"
    PUNCTUATION = "punctuation"
    COMMENT = "comment"
    WHITESPACE = "whitespace"


class Token(BaseModel):
    """A slice of SQL source text.

    Concatenating the text of every token of a file reproduces the file.
    """

    model_config = ConfigDict(frozen=True)

    kind: TokenKind = Field(..., description="Token category")
    text: str = Field(..., description="Exact source text of the token")
    line: int = Field(..., ge=1, description="1-based line of the first character")
    column: int = Field(..., ge=1, description="1-based column of the first character")

    @property
    def upper(self) -> str:
        return self.text.upper()

    @property
    def is_significant(self) -> bool:
        return self.kind not in (TokenKind.WHITESPACE, TokenKind.COMMENT)

    @property
    def is_quoted(self) -> bool:
        return self.kind == TokenKind.IDENTIFIER and self.text.startswith('"')

    def is_keyword(self, *words: str) -> bool:
        """Return True for a KEYWORD token whose text is one of ``words``."""

        return self.kind == TokenKind.KEYWORD and self.upper in words

    def is_punct(self, *symbols: str) -> bool:
        return self.kind == TokenKind.PUNCTUATION and self.text in symbols
