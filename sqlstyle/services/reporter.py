from collections.abc import Iterable

from pydantic import BaseModel

from sqlstyle.models.violation import LintReport, LintResult, Violation


def sort_violations(violations: Iterable[Violation]) -> list[Violation]:
    """Stable sort by (line, column, rule_id)."""

    return sorted(violations, key=lambda v: (v.line, v.column, v.rule_id))


def format_violation(path: str, violation: Violation) -> str:
    return f"{path}:{violation.line}:{violation.column}: [{violation.rule_id}] {violation.message}"


class ReportService(BaseModel):
    """Renders lint results as text, one line per violation."""

    report: LintReport

    def lines(self) -> list[str]:
        rendered: list[str] = []
        for result in self.report.results:
            rendered.extend(self.result_lines(result))
        return rendered

    @staticmethod
    def result_lines(result: LintResult) -> list[str]:
        path = result.path.as_posix()
        return [format_violation(path, v) for v in sort_violations(result.violations)]

    def render(self) -> str:
        lines = self.lines()
        return "\n".join(lines) + "\n" if lines else ""

    def summary(self) -> str:
        count = self.report.violation_count
        files = self.report.files_checked
        if count == 0:
            return f"{files} file(s) checked, no violations"
        return f"{files} file(s) checked, {count} violation(s)"

    def as_dict(self) -> dict[str, object]:
        """Plain structure shared by the JSON and YAML renderings."""

        return {
            "files_checked": self.report.files_checked,
            "violation_count": self.report.violation_count,
            "exit_code": self.report.exit_code,
            "results": [
                {
                    "path": result.path.as_posix(),
                    "violations": [
                        v.model_dump(mode="json") for v in sort_violations(result.violations)
                    ],
                }
                for result in self.report.results
            ],
        }
