import json
from pathlib import Path

import pytest
import yaml

from sqlstyle.loaders.json_loader import JsonLoader
from sqlstyle.loaders.yaml_loader import YamlLoader
from sqlstyle.models.violation import LintReport, LintResult, Violation


@pytest.fixture
def report() -> LintReport:
    return LintReport(
        results=[
            LintResult(
                path=Path("q.sql"),
                violations=[
                    Violation(rule_id="keyword-casing", line=1, column=1, message="keyword 'select' should be upper case")
                ],
            )
        ]
    )


def test_json_loader__on_load__writes_report_file(report: LintReport, tmp_path: Path) -> None:
    out = tmp_path / "reports" / "lint.json"

    JsonLoader(out).load(report)

    payload = json.loads(out.read_text(encoding="utf-8"))
    assert payload["violation_count"] == 1
    assert payload["results"][0]["path"] == "q.sql"
    assert payload["results"][0]["violations"][0]["rule_id"] == "keyword-casing"


def test_yaml_loader__on_load__writes_same_schema_as_json(report: LintReport, tmp_path: Path) -> None:
    out = tmp_path / "lint.yaml"

    YamlLoader(out).load(report)

    assert yaml.safe_load(out.read_text(encoding="utf-8")) == json.loads(JsonLoader().render(report))


def test_loaders__on_missing_output_path__raise_value_error(report: LintReport) -> None:
    with pytest.raises(ValueError):
        JsonLoader().load(report)
    with pytest.raises(ValueError):
        YamlLoader().load(report)
