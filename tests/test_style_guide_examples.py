"""End-to-end checks of the style guide's worked examples."""

from sqlstyle.services.fixer import FixService
from tests.utils import lint, locations


def test_lint__on_inline_select_list__flags_only_comma_position() -> None:
    result = lint("SELECT id, name FROM user_account;")

    assert [(v.rule_id, v.line, v.column) for v in result.violations] == [
        ("comma-position", 1, 10)
    ]


def test_lint__on_lowercase_view__flags_keywords_and_prefix() -> None:
    result = lint("create view active_users as select id from user_account;")

    rule_ids = [v.rule_id for v in result.violations]
    assert rule_ids.count("keyword-casing") == 5
    assert rule_ids.count("naming-prefix") == 1
    assert len(rule_ids) == 6
    naming = next(v for v in result.violations if v.rule_id == "naming-prefix")
    assert (naming.line, naming.column) == (1, 13)


def test_lint__on_unprefixed_cte__flags_cte_name() -> None:
    source = (
        "WITH recent_users AS (\n"
        "    SELECT id FROM user_account\n"
        ")\n"
        "SELECT id FROM recent_users;"
    )

    result = lint(source)

    assert [(v.rule_id, v.line, v.column) for v in result.violations] == [
        ("naming-prefix", 1, 6)
    ]


def test_lint__on_join_with_bare_column__flags_qualification() -> None:
    joined = (
        "SELECT\n"
        "    id\n"
        "  , u.email\n"
        "FROM\n"
        "    user_account AS u\n"
        "JOIN\n"
        "    user_login AS l ON u.id = l.user_id;"
    )
    single = "SELECT\n    id\n  , email\nFROM\n    user_account AS u;"

    result = lint(joined)

    assert [v.rule_id for v in result.violations] == ["qualification"]
    assert locations(result.violations) == [(2, 5)]
    assert lint(single).violations == []


def test_fix__on_trailing_comma_layout__rewrites_to_comma_first() -> None:
    result = FixService().fix_source("SELECT\n    id,\n    name\nFROM t;")

    assert result.fixed == "SELECT\n    id\n  , name\nFROM t;"
    assert FixService().fix_source(result.fixed).fixed == result.fixed
