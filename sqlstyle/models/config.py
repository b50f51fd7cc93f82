import re
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, SerializeAsAny, field_validator

from sqlstyle.models.violation import Severity


class CasingPolicy(StrEnum):
    UPPER = "upper"
    LOWER = "lower"
    NONE = "none"


class CommaPosition(StrEnum):
    LEADING = "leading"
    TRAILING = "trailing"


class Dialect(StrEnum):
    POSTGRES = "postgres"


class RuleSettings(BaseModel):
    """Options shared by every rule."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    enabled: bool = Field(default=True, description="Whether the rule runs")
    severity: Severity = Field(default=Severity.ERROR, description="Severity of reported violations")


class KeywordCasingSettings(RuleSettings):
    casing_policy: CasingPolicy = CasingPolicy.UPPER


class LiteralCasingSettings(RuleSettings):
    casing_policy: CasingPolicy = CasingPolicy.UPPER


class IdentifierCasingSettings(RuleSettings):
    # The optional leading underscore admits audit columns such as _created_at.
    pattern: str = Field(
        default=r"^_?[a-z][a-z0-9_]*$",
        description="Regular expression unquoted identifiers must match",
    )

    @field_validator("pattern")
    @classmethod
    def validate_pattern(cls, value: str) -> str:
        """Reject patterns that do not compile."""

        try:
            re.compile(value)
        except re.error as e:
            raise ValueError(f"invalid regular expression: {e}") from e
        return value


class CommaPositionSettings(RuleSettings):
    comma_position: CommaPosition = CommaPosition.LEADING


class TrailingCommaSettings(RuleSettings):
    pass


class ExplicitAliasSettings(RuleSettings):
    pass


class QualificationSettings(RuleSettings):
    pass


class NamingPrefixSettings(RuleSettings):
    view: str = "vw_"
    materialized_view: str = "mvw_"
    function: str = "f_"
    temporary_table: str = "tmp_"
    cte: str = "tmp_"


class RequiredTimestampColumnsSettings(RuleSettings):
    columns: tuple[str, ...] = ("_created_at", "_updated_at")
    ignore_temporary: bool = Field(
        default=True, description="Skip CREATE TEMP TABLE statements"
    )


class LinterConfig(BaseModel):
    """Run-wide configuration, immutable once loaded."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    dialect: Dialect = Dialect.POSTGRES
    indent_width: int = Field(default=4, ge=1, le=16)
    rules: dict[str, SerializeAsAny[RuleSettings]] = Field(
        default_factory=dict, description="Settings keyed by rule id"
    )
