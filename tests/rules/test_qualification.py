from sqlstyle.rules.qualification import QUALIFICATION_ID
from tests.consts import GOOD_JOIN_FILE
from tests.utils import locations, violations_for


def test_qualification__on_single_table__returns_no_violations() -> None:
    source = "SELECT\n    id\n  , email\nFROM user_account;"

    assert violations_for(source, QUALIFICATION_ID) == []


def test_qualification__on_comma_join__flags_bare_column() -> None:
    violations = violations_for("SELECT id FROM a, b;", QUALIFICATION_ID)

    assert locations(violations) == [(1, 8)]
    assert violations[0].message == (
        "column 'id' must be qualified with a table alias when the query references 2 tables"
    )


def test_qualification__on_select_alias_in_order_by__does_not_flag_alias() -> None:
    source = (
        "SELECT\n"
        "    u.id AS user_id\n"
        "  , COUNT(l.id) AS logins\n"
        "FROM user_account AS u\n"
        "JOIN user_login AS l ON l.user_id = u.id\n"
        "GROUP BY u.id\n"
        "ORDER BY logins;"
    )

    assert violations_for(source, QUALIFICATION_ID) == []


def test_qualification__on_using_clause__does_not_flag_join_columns() -> None:
    source = "SELECT\n    a.x\nFROM a\nJOIN b USING (id);"

    assert violations_for(source, QUALIFICATION_ID) == []


def test_qualification__on_subquery_with_single_table__judges_it_separately() -> None:
    source = (
        "SELECT\n"
        "    u.id\n"
        "FROM user_account AS u\n"
        "JOIN user_login AS l ON l.user_id = u.id\n"
        "WHERE u.id IN (SELECT user_id FROM banned_user);"
    )

    assert violations_for(source, QUALIFICATION_ID) == []


def test_qualification__on_function_argument__flags_bare_column() -> None:
    source = (
        "SELECT COALESCE(name, u.email) AS label "
        "FROM user_account AS u JOIN profile AS p ON p.user_id = u.id;"
    )

    assert [v.message.split("'")[1] for v in violations_for(source, QUALIFICATION_ID)] == [
        "name"
    ]


def test_qualification__on_where_clause__flags_bare_column() -> None:
    source = (
        "SELECT u.id FROM user_account AS u JOIN user_login AS l ON l.user_id = u.id "
        "WHERE is_active = TRUE;"
    )

    assert len(violations_for(source, QUALIFICATION_ID)) == 1


def test_qualification__on_cte_join_file__returns_no_violations() -> None:
    source = GOOD_JOIN_FILE.read_text(encoding="utf-8")

    assert violations_for(source, QUALIFICATION_ID) == []


def test_qualification__on_extract_field__does_not_flag_field_name() -> None:
    source = (
        "SELECT EXTRACT(EPOCH FROM u._created_at) AS created_epoch "
        "FROM user_account AS u JOIN user_login AS l ON l.user_id = u.id;"
    )

    assert violations_for(source, QUALIFICATION_ID) == []


def test_qualification__on_column_named_like_a_type__flags_it() -> None:
    source = (
        "SELECT u.id FROM user_account AS u JOIN user_login AS l ON l.user_id = u.id "
        "WHERE date > NOW();"
    )

    violations = violations_for(source, QUALIFICATION_ID)

    assert [v.message.split("'")[1] for v in violations] == ["date"]


def test_qualification__on_set_returning_function_in_from__counts_it_as_table() -> None:
    source = "SELECT n FROM user_account AS u CROSS JOIN generate_series(1, 3) AS g;"

    assert [v.message.split("'")[1] for v in violations_for(source, QUALIFICATION_ID)] == ["n"]
