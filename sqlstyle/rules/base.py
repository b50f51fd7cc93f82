from collections.abc import Callable, Sequence
from itertools import accumulate
from typing import Any

from pydantic import BaseModel, ConfigDict

from sqlstyle.models.config import CasingPolicy, LinterConfig, RuleSettings
from sqlstyle.models.fix import FixPlan
from sqlstyle.models.token import Token
from sqlstyle.models.violation import Violation

CheckFunction = Callable[[Sequence[Token], Any], list[Violation]]
FixFunction = Callable[[Sequence[Token], Any, LinterConfig], FixPlan]


class RuleDefinition(BaseModel):
    """A registered rule: a pure check function plus its settings model."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    rule_id: str
    description: str
    settings_model: type[RuleSettings]
    check: CheckFunction
    fix: FixFunction | None = None

    @property
    def auto_fixable(self) -> bool:
        return self.fix is not None

    def settings(self, config: LinterConfig) -> RuleSettings:
        """Settings for this rule from ``config``, falling back to defaults."""

        return config.rules.get(self.rule_id) or self.settings_model()


def make_violation(
    rule_id: str, token: Token, message: str, settings: RuleSettings
) -> Violation:
    return Violation(
        rule_id=rule_id,
        line=token.line,
        column=token.column,
        message=message,
        severity=settings.severity,
    )


def token_offsets(tokens: Sequence[Token]) -> list[int]:
    """Start offset of every token within the source text."""

    return [0, *accumulate(len(t.text) for t in tokens)][: len(tokens)]


def detect_newline(tokens: Sequence[Token]) -> str:
    """Line break style of the source, ``\\r\\n`` when any line uses it."""

    for token in tokens:
        if "\r\n" in token.text:
            return "\r\n"
    return "\n"


def apply_casing(text: str, policy: CasingPolicy) -> str:
    if policy == CasingPolicy.UPPER:
        return text.upper()
    if policy == CasingPolicy.LOWER:
        return text.lower()
    return text
