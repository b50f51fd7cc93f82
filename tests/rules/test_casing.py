from sqlstyle.models.config import IdentifierCasingSettings, KeywordCasingSettings, LinterConfig
from sqlstyle.rules.casing import (
    IDENTIFIER_CASING_ID,
    KEYWORD_CASING_ID,
    LITERAL_CASING_ID,
    fix_identifier_casing,
    fix_keyword_casing,
)
from sqlstyle.services.fixer import apply_edits
from sqlstyle.services.tokenizer import tokenize
from tests.utils import config_with, locations, violations_for


def test_keyword_casing__on_lowercase_keywords__flags_each_keyword() -> None:
    violations = violations_for("select id from t;", KEYWORD_CASING_ID)

    assert locations(violations) == [(1, 1), (1, 11)]
    assert violations[0].message == "keyword 'select' should be upper case"


def test_keyword_casing__on_lower_policy__flags_uppercase_keywords() -> None:
    config = config_with({KEYWORD_CASING_ID: {"casing_policy": "lower"}})

    violations = violations_for("SELECT id FROM t;", KEYWORD_CASING_ID, config)

    assert len(violations) == 2


def test_keyword_casing__on_none_policy__returns_no_violations() -> None:
    config = config_with({KEYWORD_CASING_ID: {"casing_policy": "none"}})

    assert violations_for("select id FROM t;", KEYWORD_CASING_ID, config) == []


def test_keyword_casing__on_keywords_in_strings_and_comments__ignores_them() -> None:
    source = "SELECT 'select' AS word FROM t; -- from\n/* where */"

    assert violations_for(source, KEYWORD_CASING_ID) == []


def test_keyword_casing__on_severity_override__reports_configured_severity() -> None:
    config = config_with({KEYWORD_CASING_ID: {"severity": "warning"}})

    (violation,) = violations_for("select 1;", KEYWORD_CASING_ID, config)

    assert violation.severity == "warning"


def test_literal_casing__on_lowercase_literals__flags_them() -> None:
    violations = violations_for("SELECT true, Null FROM t;", LITERAL_CASING_ID)

    assert locations(violations) == [(1, 8), (1, 14)]


def test_literal_casing__on_string_and_number_literals__ignores_them() -> None:
    assert violations_for("SELECT 'true', 1e3 FROM t;", LITERAL_CASING_ID) == []


def test_identifier_casing__on_mixed_case_names__flags_unquoted_only() -> None:
    violations = violations_for('SELECT UserId, "MixedCase" FROM Accounts;', IDENTIFIER_CASING_ID)

    assert locations(violations) == [(1, 8), (1, 33)]
    assert violations[0].message == "identifier 'UserId' should be lower snake_case"


def test_identifier_casing__on_leading_underscore__accepts_name() -> None:
    assert violations_for("SELECT _created_at FROM t;", IDENTIFIER_CASING_ID) == []


def test_identifier_casing__on_custom_pattern__uses_configured_pattern() -> None:
    config = config_with({IDENTIFIER_CASING_ID: {"pattern": "^[a-z]+$"}})

    violations = violations_for("SELECT user_id FROM t;", IDENTIFIER_CASING_ID, config)

    assert [v.message for v in violations] == [
        "identifier 'user_id' should be lower snake_case"
    ]


def test_fix_keyword_casing__on_lowercase_keywords__uppercases_them() -> None:
    source = "select id from t;"
    plan = fix_keyword_casing(tokenize(source), KeywordCasingSettings(), LinterConfig())

    fixed, applied = apply_edits(source, plan.edits)

    assert fixed == "SELECT id FROM t;"
    assert applied == 2


def test_fix_identifier_casing__on_mixed_case__lowercases_names() -> None:
    source = "SELECT UserId FROM Accounts;"
    plan = fix_identifier_casing(tokenize(source), IdentifierCasingSettings(), LinterConfig())

    fixed, _ = apply_edits(source, plan.edits)

    assert fixed == "SELECT userid FROM accounts;"
    assert plan.declined == 0


def test_fix_identifier_casing__on_name_still_invalid_when_lowered__declines() -> None:
    source = "SELECT User_Id FROM t;"
    settings = IdentifierCasingSettings(pattern="^[a-z]+$")

    plan = fix_identifier_casing(tokenize(source), settings, LinterConfig())

    assert plan.edits == []
    assert plan.declined == 1


def test_keyword_casing__on_builtin_function_calls__flags_lowercase_names() -> None:
    source = "SELECT row_number() OVER (ORDER BY id) AS rn, string_agg(name, ',') AS names FROM t;"

    violations = violations_for(source, KEYWORD_CASING_ID)

    assert [v.message for v in violations] == [
        "keyword 'row_number' should be upper case",
        "keyword 'string_agg' should be upper case",
    ]


def test_identifier_casing__on_window_function__returns_no_violations() -> None:
    source = "SELECT ROW_NUMBER() OVER (ORDER BY u.id) AS rn FROM user_account AS u;"

    assert violations_for(source, IDENTIFIER_CASING_ID) == []
    assert violations_for(source, KEYWORD_CASING_ID) == []


def test_identifier_casing__on_extract_field__returns_no_violations() -> None:
    source = "SELECT EXTRACT(EPOCH FROM u._created_at) AS created_epoch FROM user_account AS u;"

    assert violations_for(source, IDENTIFIER_CASING_ID) == []


def test_fix_keyword_casing__on_column_named_like_a_type__leaves_it_alone() -> None:
    source = "select date, text from t where date > now() - interval '1' day;"
    plan = fix_keyword_casing(tokenize(source), KeywordCasingSettings(), LinterConfig())

    fixed, _ = apply_edits(source, plan.edits)

    assert fixed == "SELECT date, text FROM t WHERE date > NOW() - INTERVAL '1' DAY;"
