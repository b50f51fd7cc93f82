from __future__ import annotations

import logging
from pathlib import Path

import yaml

from sqlstyle.models.violation import LintReport
from sqlstyle.services.reporter import ReportService

logger = logging.getLogger(__name__)


class YamlLoader:
    """Persist a lint report as YAML.

    The output schema mirrors the JSON loader.
    """

    def __init__(self, output_path: str | Path | None = None, indent: int = 2) -> None:
        self.output_path: Path | None = Path(output_path) if output_path is not None else None
        self.indent: int = indent

    def render(self, report: LintReport) -> str:
        payload = ReportService(report=report).as_dict()
        return yaml.safe_dump(
            payload,
            allow_unicode=True,
            sort_keys=False,
            default_flow_style=False,
            indent=self.indent,
            width=4096,  # avoid line folding for readability
        )

    def load(self, report: LintReport) -> None:
        """Write the report to the configured YAML file."""

        if self.output_path is None:
            raise ValueError("YamlLoader.load requires an output_path")
        if self.output_path.parent and not self.output_path.parent.exists():
            self.output_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            with self.output_path.open("w", encoding="utf-8") as f:
                f.write(self.render(report))
        except OSError:
            logger.exception("Failed to write YAML report to %s", self.output_path)
            raise
