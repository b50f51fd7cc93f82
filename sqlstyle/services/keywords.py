from typing import Final

LITERAL_WORDS: Final[frozenset[str]] = frozenset({"TRUE", "FALSE", "NULL"})

RESERVED_WORDS: Final[frozenset[str]] = frozenset(
    {
        "ADD", "AFTER", "ALL", "ALTER", "ANALYZE", "AND", "ANY", "ARRAY", "AS",
        "ASC", "ASYMMETRIC", "AT", "BEFORE", "BEGIN", "BETWEEN", "BOTH", "BY",
        "CASCADE", "CASE", "CAST", "CHECK", "COLLATE", "COLUMN", "COMMIT",
        "CONCURRENTLY", "CONFLICT", "CONSTRAINT", "CREATE", "CROSS", "CURRENT",
        "CURRENT_DATE", "CURRENT_ROLE", "CURRENT_SCHEMA", "CURRENT_TIME",
        "CURRENT_TIMESTAMP", "CURRENT_USER", "DECLARE", "DEFAULT", "DEFERRABLE",
        "DEFERRED", "DEFINER", "DELETE", "DESC", "DISTINCT", "DO", "DROP",
        "EACH", "ELSE", "END", "ESCAPE", "EXCEPT", "EXCLUDE", "EXECUTE",
        "EXISTS", "EXTENSION", "FETCH", "FILTER", "FIRST", "FOLLOWING", "FOR",
        "FOREIGN", "FROM", "FULL", "FUNCTION", "GENERATED", "GRANT", "GROUP",
        "HAVING", "IDENTITY", "IF", "ILIKE", "IMMUTABLE", "IN", "INCLUDE",
        "INDEX", "INHERITS", "INITIALLY", "INNER", "INSERT", "INSTEAD",
        "INTERSECT", "INTERVAL", "INTO", "INVOKER", "IS", "ISNULL", "JOIN",
        "LANGUAGE", "LAST", "LATERAL", "LEADING", "LEFT", "LIKE", "LIMIT",
        "LOCALTIME", "LOCALTIMESTAMP", "LOCKED", "MATERIALIZED", "MERGE",
        "NATURAL", "NOT", "NOTHING", "NOTNULL", "NOWAIT", "NULLS", "OFFSET",
        "ON", "ONLY", "OR", "ORDER", "OUTER", "OVER", "OVERLAPS", "OWNED",
        "PARTITION", "PLACING", "PRECEDING", "PRIMARY", "PROCEDURE", "RANGE",
        "RECURSIVE", "REFERENCES", "REFRESH", "RENAME", "REPLACE", "RESTART",
        "RESTRICT", "RETURN", "RETURNING", "RETURNS", "REVOKE", "RIGHT",
        "ROLLBACK", "ROW", "ROWS", "SCHEMA", "SECURITY", "SELECT", "SEQUENCE",
        "SESSION_USER", "SET", "SETOF", "SHARE", "SIMILAR", "SKIP", "SOME",
        "STABLE", "STRICT", "SYMMETRIC", "TABLE", "TABLESAMPLE", "TEMP",
        "TEMPORARY", "THEN", "TO", "TRAILING", "TRANSACTION", "TRIGGER",
        "TRUNCATE", "UNBOUNDED", "UNION", "UNIQUE", "UNLOGGED", "UPDATE",
        "USING", "VACUUM", "VALUES", "VARIADIC", "VIEW", "VOLATILE", "WHEN",
        "WHERE", "WINDOW", "WITH", "WITHIN", "WITHOUT",
    }
)

# Type names nobody uses as a column name; always keywords.
TYPE_WORDS: Final[frozenset[str]] = frozenset(
    {
        "BIGINT", "BIGSERIAL", "BOOL", "BOOLEAN", "BYTEA", "CHARACTER", "CIDR",
        "DECIMAL", "DOUBLE", "FLOAT", "INET", "INT", "INT2", "INT4", "INT8",
        "INTEGER", "JSONB", "MACADDR", "NUMERIC", "PRECISION", "REAL", "SERIAL",
        "SMALLINT", "SMALLSERIAL", "TIMESTAMPTZ", "TIMETZ", "TSQUERY",
        "TSVECTOR", "VARCHAR", "VARYING",
    }
)

# Type names that are also ordinary column names. They are keywords only
# where a type is expected.
AMBIGUOUS_TYPE_WORDS: Final[frozenset[str]] = frozenset(
    {"CHAR", "DATE", "JSON", "TEXT", "TIME", "TIMESTAMP", "UUID", "XML"}
)

# Fields of EXTRACT(field FROM ...) and of INTERVAL '...' field.
FIELD_WORDS: Final[frozenset[str]] = frozenset(
    {
        "CENTURY", "DAY", "DECADE", "DOW", "DOY", "EPOCH", "HOUR", "ISODOW",
        "ISOYEAR", "JULIAN", "MICROSECONDS", "MILLENNIUM", "MILLISECONDS",
        "MINUTE", "MONTH", "QUARTER", "SECOND", "TIMEZONE", "TIMEZONE_HOUR",
        "TIMEZONE_MINUTE", "WEEK", "YEAR",
    }
)

# Words that are keywords only right after one of the listed keywords.
CONTEXTUAL_WORDS: Final[dict[str, frozenset[str]]] = {
    "KEY": frozenset({"PRIMARY", "FOREIGN"}),
    "TIME": frozenset({"AT", "WITH", "WITHOUT"}),
    "TYPE": frozenset({"ALTER", "CREATE", "DROP"}),
    "ZONE": frozenset({"TIME"}),
}

# Built-in functions; keywords only when called.
FUNCTION_WORDS: Final[frozenset[str]] = frozenset(
    {
        # aggregates
        "ARRAY_AGG", "AVG", "BIT_AND", "BIT_OR", "BOOL_AND", "BOOL_OR", "COUNT",
        "EVERY", "JSON_AGG", "JSON_OBJECT_AGG", "JSONB_AGG", "JSONB_OBJECT_AGG",
        "MAX", "MIN", "MODE", "PERCENTILE_CONT", "PERCENTILE_DISC", "STDDEV",
        "STRING_AGG", "SUM", "VARIANCE",
        # window
        "CUME_DIST", "DENSE_RANK", "FIRST_VALUE", "LAG", "LAST_VALUE", "LEAD",
        "NTH_VALUE", "NTILE", "PERCENT_RANK", "RANK", "ROW_NUMBER",
        # conditional
        "COALESCE", "GREATEST", "LEAST", "NULLIF",
        # string
        "BTRIM", "CHAR_LENGTH", "CONCAT", "CONCAT_WS", "FORMAT", "INITCAP",
        "LENGTH", "LOWER", "LPAD", "LTRIM", "MD5", "OVERLAY", "POSITION",
        "REGEXP_MATCH", "REGEXP_MATCHES", "REGEXP_REPLACE",
        "REGEXP_SPLIT_TO_ARRAY", "REPEAT", "REVERSE", "RPAD", "RTRIM",
        "SPLIT_PART", "STARTS_WITH", "STRPOS", "SUBSTR", "SUBSTRING",
        "TRANSLATE", "TRIM", "UPPER",
        # date and time
        "AGE", "CLOCK_TIMESTAMP", "DATE_BIN", "DATE_PART", "DATE_TRUNC",
        "EXTRACT", "MAKE_DATE", "MAKE_INTERVAL", "MAKE_TIMESTAMP",
        "MAKE_TIMESTAMPTZ", "NOW", "STATEMENT_TIMESTAMP", "TIMEOFDAY",
        "TO_CHAR", "TO_DATE", "TO_NUMBER", "TO_TIMESTAMP",
        "TRANSACTION_TIMESTAMP",
        # math
        "ABS", "CEIL", "CEILING", "FLOOR", "GEN_RANDOM_UUID", "MOD", "POWER",
        "RANDOM", "ROUND", "SQRT", "TRUNC",
        # arrays and json
        "ARRAY_LENGTH", "ARRAY_POSITION", "ARRAY_REMOVE", "ARRAY_TO_STRING",
        "CARDINALITY", "GENERATE_SERIES", "JSON_BUILD_ARRAY",
        "JSON_BUILD_OBJECT", "JSONB_BUILD_ARRAY", "JSONB_BUILD_OBJECT",
        "JSONB_SET", "TO_JSON", "TO_JSONB", "UNNEST",
    }
)

KEYWORDS: Final[frozenset[str]] = RESERVED_WORDS | TYPE_WORDS

# Longest operators first so prefixes never shadow them.
MULTI_CHAR_OPERATORS: Final[tuple[str, ...]] = (
    "->>", "#>>", "::", "<=", ">=", "<>", "!=", "||", "->", "#>", ":=", "=>",
)
