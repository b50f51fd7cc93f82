"""Casing rules for keywords, boolean/NULL literals and unquoted identifiers."""

import re
from collections.abc import Iterator, Sequence
from typing import Final

from sqlstyle.models.config import (
    CasingPolicy,
    IdentifierCasingSettings,
    KeywordCasingSettings,
    LinterConfig,
    LiteralCasingSettings,
)
from sqlstyle.models.fix import Edit, FixPlan
from sqlstyle.models.token import Token, TokenKind
from sqlstyle.models.violation import Violation
from sqlstyle.rules.base import apply_casing, make_violation, token_offsets
from sqlstyle.services.keywords import LITERAL_WORDS

KEYWORD_CASING_ID: Final[str] = "keyword-casing"
LITERAL_CASING_ID: Final[str] = "literal-casing"
IDENTIFIER_CASING_ID: Final[str] = "identifier-casing"


def _miscased(
    tokens: Sequence[Token], policy: CasingPolicy, kind: TokenKind
) -> Iterator[int]:
    if policy == CasingPolicy.NONE:
        return
    for i, token in enumerate(tokens):
        if token.kind != kind:
            continue
        if kind == TokenKind.LITERAL and token.upper not in LITERAL_WORDS:
            continue
        if token.text != apply_casing(token.text, policy):
            yield i


def _recase(tokens: Sequence[Token], indexes: Iterator[int], policy: CasingPolicy) -> FixPlan:
    offsets = token_offsets(tokens)
    edits = [
        Edit(
            start=offsets[i],
            end=offsets[i] + len(tokens[i].text),
            replacement=apply_casing(tokens[i].text, policy),
        )
        for i in indexes
    ]
    return FixPlan(edits=edits)


def check_keyword_casing(
    tokens: Sequence[Token], settings: KeywordCasingSettings
) -> list[Violation]:
    policy = settings.casing_policy
    return [
        make_violation(
            KEYWORD_CASING_ID,
            tokens[i],
            f"keyword '{tokens[i].text}' should be {policy.value} case",
            settings,
        )
        for i in _miscased(tokens, policy, TokenKind.KEYWORD)
    ]


def fix_keyword_casing(
    tokens: Sequence[Token], settings: KeywordCasingSettings, config: LinterConfig
) -> FixPlan:
    policy = settings.casing_policy
    return _recase(tokens, _miscased(tokens, policy, TokenKind.KEYWORD), policy)


def check_literal_casing(
    tokens: Sequence[Token], settings: LiteralCasingSettings
) -> list[Violation]:
    policy = settings.casing_policy
    return [
        make_violation(
            LITERAL_CASING_ID,
            tokens[i],
            f"literal '{tokens[i].text}' should be {policy.value} case",
            settings,
        )
        for i in _miscased(tokens, policy, TokenKind.LITERAL)
    ]


def fix_literal_casing(
    tokens: Sequence[Token], settings: LiteralCasingSettings, config: LinterConfig
) -> FixPlan:
    policy = settings.casing_policy
    return _recase(tokens, _miscased(tokens, policy, TokenKind.LITERAL), policy)


def _bad_identifiers(
    tokens: Sequence[Token], settings: IdentifierCasingSettings
) -> Iterator[int]:
    pattern = re.compile(settings.pattern)
    for i, token in enumerate(tokens):
        if token.kind == TokenKind.IDENTIFIER and not token.is_quoted:
            if not pattern.match(token.text):
                yield i


def check_identifier_casing(
    tokens: Sequence[Token], settings: IdentifierCasingSettings
) -> list[Violation]:
    return [
        make_violation(
            IDENTIFIER_CASING_ID,
            tokens[i],
            f"identifier '{tokens[i].text}' should be lower snake_case",
            settings,
        )
        for i in _bad_identifiers(tokens, settings)
    ]


def fix_identifier_casing(
    tokens: Sequence[Token], settings: IdentifierCasingSettings, config: LinterConfig
) -> FixPlan:
    """Lower-case offending identifiers.

    Unquoted names are case-insensitive in PostgreSQL, so lower-casing never
    changes which object a name refers to. Names that still fail the pattern
    once lower-cased are left alone.
    """
    pattern = re.compile(settings.pattern)
    offsets = token_offsets(tokens)
    plan = FixPlan()
    for i in _bad_identifiers(tokens, settings):
        lowered = tokens[i].text.lower()
        if not pattern.match(lowered):
            plan.declined += 1
            continue
        plan.edits.append(
            Edit(start=offsets[i], end=offsets[i] + len(tokens[i].text), replacement=lowered)
        )
    return plan
