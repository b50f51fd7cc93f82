from __future__ import annotations

import json
import logging
from pathlib import Path

from sqlstyle.models.violation import LintReport
from sqlstyle.services.reporter import ReportService

logger = logging.getLogger(__name__)


class JsonLoader:
    """Persist a lint report as JSON.

    Schema: ``files_checked``, ``violation_count``, ``exit_code`` and a
    ``results`` list holding each file's ``path`` and sorted ``violations``.
    """

    def __init__(self, output_path: str | Path | None = None, indent: int = 2) -> None:
        """Create a JSON loader.

        Args:
            output_path: Target file; ``None`` only allows ``render``.
            indent: Indentation level for pretty-printing JSON.
        """
        self.output_path: Path | None = Path(output_path) if output_path is not None else None
        self.indent: int = indent

    def render(self, report: LintReport) -> str:
        payload = ReportService(report=report).as_dict()
        return json.dumps(payload, indent=self.indent, sort_keys=True) + "\n"

    def load(self, report: LintReport) -> None:
        """Write the report to the configured JSON file."""

        if self.output_path is None:
            raise ValueError("JsonLoader.load requires an output_path")
        if self.output_path.parent and not self.output_path.parent.exists():
            self.output_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            self.output_path.write_text(self.render(report), encoding="utf-8")
        except OSError:
            logger.exception("Failed to write JSON report to %s", self.output_path)
            raise
