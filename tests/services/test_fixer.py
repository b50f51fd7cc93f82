from collections.abc import Sequence
from pathlib import Path

import pytest

from sqlstyle.models.config import KeywordCasingSettings, LinterConfig
from sqlstyle.models.fix import Edit, FixPlan
from sqlstyle.models.token import Token
from sqlstyle.models.violation import MALFORMED_LITERAL_ID, RULE_INTERNAL_ERROR_ID
from sqlstyle.rules import RULES
from sqlstyle.rules.casing import KEYWORD_CASING_ID
from sqlstyle.rules.qualification import QUALIFICATION_ID
from sqlstyle.services.fixer import FixService, apply_edits, write_atomic
from tests.consts import BAD_SELECT_FILE
from tests.utils import config_with


def _noop_fix(
    tokens: Sequence[Token], settings: KeywordCasingSettings, config: LinterConfig
) -> FixPlan:
    return FixPlan(edits=[Edit(start=0, end=0)])


def test_apply_edits__on_overlapping_edits__keeps_first_one() -> None:
    edits = [Edit(start=0, end=3, replacement="ABC"), Edit(start=2, end=4, replacement="zz")]

    assert apply_edits("abcdef", edits) == ("ABCdef", 1)


def test_fix_source__on_trailing_comma_layout__produces_comma_first(fixer: FixService) -> None:
    result = fixer.fix_source("SELECT\n    id,\n    name\nFROM t;")

    assert result.fixed == "SELECT\n    id\n  , name\nFROM t;"
    assert result.applied == {"comma-position": 1}
    assert result.remaining.violations == []


def test_fix_source__on_several_problems__applies_rules_in_order(fixer: FixService) -> None:
    source = BAD_SELECT_FILE.read_text(encoding="utf-8")

    result = fixer.fix_source(source)

    assert result.fixed == (
        "SELECT\n"
        "    u.id\n"
        "  , u.email\n"
        "FROM user_account AS u\n"
        "WHERE u.is_active = TRUE;\n"
    )
    assert result.applied == {
        "trailing-comma": 1,
        "comma-position": 1,
        "explicit-alias": 1,
        "keyword-casing": 3,
        "literal-casing": 1,
    }
    assert result.remaining.violations == []


def test_fix_source__on_fixed_output__is_idempotent(fixer: FixService) -> None:
    once = fixer.fix_source(BAD_SELECT_FILE.read_text(encoding="utf-8"))

    twice = fixer.fix_source(once.fixed)

    assert twice.fixed == once.fixed
    assert twice.applied == {}
    assert not twice.changed


def test_fix_source__on_unfixable_violation__reports_it_as_remaining(fixer: FixService) -> None:
    source = "SELECT id FROM a, b;"

    result = fixer.fix_source(source)

    assert not result.changed
    assert [v.rule_id for v in result.remaining.violations] == [QUALIFICATION_ID]


def test_fix_source__on_malformed_literal__leaves_text_unchanged(fixer: FixService) -> None:
    source = "select 'open"

    result = fixer.fix_source(source)

    assert result.fixed == source
    assert [v.rule_id for v in result.remaining.violations] == [MALFORMED_LITERAL_ID]


def test_fix_source__on_non_converging_fix__leaves_text_unchanged(
    fixer: FixService, monkeypatch: pytest.MonkeyPatch
) -> None:
    broken = RULES[KEYWORD_CASING_ID].model_copy(update={"fix": _noop_fix})
    monkeypatch.setitem(RULES, KEYWORD_CASING_ID, broken)
    source = "select id,\n    name from t;"

    result = fixer.fix_source(source)

    assert result.fixed == source
    assert result.applied == {}
    assert RULE_INTERNAL_ERROR_ID in {v.rule_id for v in result.remaining.violations}


def test_fix_source__on_crlf_source__preserves_line_endings(fixer: FixService) -> None:
    result = fixer.fix_source("select\r\n    id,\r\n    name\r\nfrom t;\r\n")

    assert result.fixed == "SELECT\r\n    id\r\n  , name\r\nFROM t;\r\n"


def test_fix_file__on_changed_content__rewrites_file(fixer: FixService, tmp_path: Path) -> None:
    path = tmp_path / "query.sql"
    path.write_text("select 1;\n", encoding="utf-8")

    result = fixer.fix_file(path)

    assert result.changed
    assert path.read_text(encoding="utf-8") == "SELECT 1;\n"
    assert [p.name for p in tmp_path.iterdir()] == ["query.sql"]


def test_fix_file__on_dry_run__leaves_file_untouched(fixer: FixService, tmp_path: Path) -> None:
    path = tmp_path / "query.sql"
    path.write_text("select 1;\n", encoding="utf-8")

    result = fixer.fix_file(path, write=False)

    assert result.fixed == "SELECT 1;\n"
    assert path.read_text(encoding="utf-8") == "select 1;\n"


def test_write_atomic__on_existing_file__replaces_whole_content(tmp_path: Path) -> None:
    path = tmp_path / "query.sql"
    path.write_text("old content that is longer", encoding="utf-8")

    write_atomic(path, "new\r\n")

    assert path.read_bytes() == b"new\r\n"


def test_fix_source__on_at_time_zone__leaves_text_unchanged(fixer: FixService) -> None:
    source = "SELECT\n    created_at AT TIME ZONE 'UTC' AS created_utc\nFROM t;"

    result = fixer.fix_source(source)

    assert result.fixed == source
    assert not result.changed
    assert result.remaining.violations == []


def test_fix_source__on_postgres_expression_forms__keeps_them_intact(fixer: FixService) -> None:
    source = (
        "select\n"
        "    u.id,\n"
        "    u.created_at at time zone 'UTC' as created_utc,\n"
        "    extract(epoch from u._created_at) as created_epoch,\n"
        "    row_number() over (partition by u.id order by l.login_at desc) as rn,\n"
        "    l.login_at + interval '1' day as next_login\n"
        "from user_account u\n"
        "join user_login l on l.user_id = u.id\n"
        "where u.is_active = true;\n"
    )

    result = fixer.fix_source(source)

    assert result.fixed == (
        "SELECT\n"
        "    u.id\n"
        "  , u.created_at AT TIME ZONE 'UTC' AS created_utc\n"
        "  , EXTRACT(EPOCH FROM u._created_at) AS created_epoch\n"
        "  , ROW_NUMBER() OVER (PARTITION BY u.id ORDER BY l.login_at DESC) AS rn\n"
        "  , l.login_at + INTERVAL '1' DAY AS next_login\n"
        "FROM user_account AS u\n"
        "JOIN user_login AS l ON l.user_id = u.id\n"
        "WHERE u.is_active = TRUE;\n"
    )
    assert result.remaining.violations == []
    assert fixer.fix_source(result.fixed).fixed == result.fixed


def test_fix_source__on_row_locking_clause__uppercases_every_word(fixer: FixService) -> None:
    source = (
        "select id, status\n"
        "from job_queue\n"
        "where status = 'pending'\n"
        "limit 10\n"
        "for update skip locked;"
    )

    result = fixer.fix_source(source)

    assert result.fixed == (
        "SELECT id\n"
        "  , status\n"
        "FROM job_queue\n"
        "WHERE status = 'pending'\n"
        "LIMIT 10\n"
        "FOR UPDATE SKIP LOCKED;"
    )
    assert result.remaining.violations == []


def test_fix_source__on_column_named_like_a_type__keeps_it_and_reports_qualification(
    fixer: FixService,
) -> None:
    source = (
        "SELECT\n"
        "    u.id\n"
        "FROM user_account AS u\n"
        "JOIN user_login AS l ON l.user_id = u.id\n"
        "WHERE date > NOW();"
    )

    result = fixer.fix_source(source)

    assert result.fixed == source
    assert [v.rule_id for v in result.remaining.violations] == [QUALIFICATION_ID]


def test_fix_source__on_trailing_comma_policy__is_idempotent() -> None:
    fixer = FixService(config=config_with({"comma-position": {"comma_position": "trailing"}}))

    once = fixer.fix_source("select id\n     , name\n     , email\nfrom t;")
    twice = fixer.fix_source(once.fixed)

    assert once.fixed == "SELECT id,\n       name,\n       email\nFROM t;"
    assert once.remaining.violations == []
    assert twice.fixed == once.fixed
    assert twice.applied == {}
