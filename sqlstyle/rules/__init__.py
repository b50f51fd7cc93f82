from typing import Final

from sqlstyle.models.config import (
    CommaPositionSettings,
    ExplicitAliasSettings,
    IdentifierCasingSettings,
    KeywordCasingSettings,
    LiteralCasingSettings,
    NamingPrefixSettings,
    QualificationSettings,
    RequiredTimestampColumnsSettings,
    TrailingCommaSettings,
)
from sqlstyle.rules.aliases import EXPLICIT_ALIAS_ID, check_explicit_alias, fix_explicit_alias
from sqlstyle.rules.base import RuleDefinition
from sqlstyle.rules.casing import (
    IDENTIFIER_CASING_ID,
    KEYWORD_CASING_ID,
    LITERAL_CASING_ID,
    check_identifier_casing,
    check_keyword_casing,
    check_literal_casing,
    fix_identifier_casing,
    fix_keyword_casing,
    fix_literal_casing,
)
from sqlstyle.rules.columns import (
    REQUIRED_TIMESTAMP_COLUMNS_ID,
    check_required_timestamp_columns,
)
from sqlstyle.rules.commas import (
    COMMA_POSITION_ID,
    TRAILING_COMMA_ID,
    check_comma_position,
    check_trailing_comma,
    fix_comma_position,
    fix_trailing_comma,
)
from sqlstyle.rules.naming import NAMING_PREFIX_ID, check_naming_prefix
from sqlstyle.rules.qualification import QUALIFICATION_ID, check_qualification

_DEFINITIONS: Final[tuple[RuleDefinition, ...]] = (
    RuleDefinition(
        rule_id=KEYWORD_CASING_ID,
        description="SQL keywords follow the configured case (upper by default).",
        settings_model=KeywordCasingSettings,
        check=check_keyword_casing,
        fix=fix_keyword_casing,
    ),
    RuleDefinition(
        rule_id=LITERAL_CASING_ID,
        description="TRUE, FALSE and NULL follow the configured case (upper by default).",
        settings_model=LiteralCasingSettings,
        check=check_literal_casing,
        fix=fix_literal_casing,
    ),
    RuleDefinition(
        rule_id=IDENTIFIER_CASING_ID,
        description="Unquoted identifiers are lower snake_case.",
        settings_model=IdentifierCasingSettings,
        check=check_identifier_casing,
        fix=fix_identifier_casing,
    ),
    RuleDefinition(
        rule_id=COMMA_POSITION_ID,
        description="Commas in SELECT, GROUP BY and ORDER BY lists lead their line.",
        settings_model=CommaPositionSettings,
        check=check_comma_position,
        fix=fix_comma_position,
    ),
    RuleDefinition(
        rule_id=TRAILING_COMMA_ID,
        description="No comma after the last item of a list.",
        settings_model=TrailingCommaSettings,
        check=check_trailing_comma,
        fix=fix_trailing_comma,
    ),
    RuleDefinition(
        rule_id=EXPLICIT_ALIAS_ID,
        description="Table and column aliases are introduced with AS.",
        settings_model=ExplicitAliasSettings,
        check=check_explicit_alias,
        fix=fix_explicit_alias,
    ),
    RuleDefinition(
        rule_id=QUALIFICATION_ID,
        description="Columns are qualified with a table alias in multi-table queries.",
        settings_model=QualificationSettings,
        check=check_qualification,
    ),
    RuleDefinition(
        rule_id=NAMING_PREFIX_ID,
        description="Views, materialized views, functions, temporary tables and CTEs "
        "carry their naming prefix.",
        settings_model=NamingPrefixSettings,
        check=check_naming_prefix,
    ),
    RuleDefinition(
        rule_id=REQUIRED_TIMESTAMP_COLUMNS_ID,
        description="Tables define _created_at and _updated_at as TIMESTAMPTZ.",
        settings_model=RequiredTimestampColumnsSettings,
        check=check_required_timestamp_columns,
    ),
)

RULES: Final[dict[str, RuleDefinition]] = {d.rule_id: d for d in _DEFINITIONS}

FIX_ORDER: Final[tuple[str, ...]] = (
    TRAILING_COMMA_ID,
    COMMA_POSITION_ID,
    EXPLICIT_ALIAS_ID,
    KEYWORD_CASING_ID,
    LITERAL_CASING_ID,
    IDENTIFIER_CASING_ID,
)

__all__ = ["FIX_ORDER", "RULES", "RuleDefinition"]
