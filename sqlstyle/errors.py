class SqlStyleError(Exception):
    """Base class for every error raised by sqlstyle."""


class MalformedLiteral(SqlStyleError):
    """A quoted literal, identifier, comment or dollar block is unterminated.

    Fatal for the file being checked, never for the whole run.
    """

    def __init__(self, message: str, line: int, column: int) -> None:
        super().__init__(message)
        self.message: str = message
        self.line: int = line
        self.column: int = column

    def __str__(self) -> str:
        return f"{self.message} (opened at {self.line}:{self.column})"


class RuleInternalError(SqlStyleError):
    """A rule check failed with an unexpected exception."""

    def __init__(self, rule_id: str, cause: BaseException) -> None:
        super().__init__(f"rule '{rule_id}' failed: {cause!r}")
        self.rule_id: str = rule_id
        self.cause: BaseException = cause


class ConfigError(SqlStyleError):
    """Configuration is unreadable, names an unknown rule or holds an illegal value."""


class FixerError(SqlStyleError):
    """An auto-fix left behind violations it claimed to have fixed."""

    def __init__(self, rule_id: str, remaining: int, declined: int) -> None:
        super().__init__(
            f"auto-fix for rule '{rule_id}' did not converge "
            f"({remaining} violation(s) remain, {declined} declined)"
        )
        self.rule_id: str = rule_id
        self.remaining: int = remaining
        self.declined: int = declined
