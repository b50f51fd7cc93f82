from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Annotated, Optional

import typer

from sqlstyle.errors import ConfigError
from sqlstyle.loaders.config_loader import CONFIG_ENV_VAR, ConfigLoader
from sqlstyle.loaders.json_loader import JsonLoader
from sqlstyle.loaders.yaml_loader import YamlLoader
from sqlstyle.models.config import LinterConfig
from sqlstyle.models.violation import LintReport
from sqlstyle.rules import RULES
from sqlstyle.services.engine import LintEngine, discover_sql_files
from sqlstyle.services.fixer import FixService
from sqlstyle.services.reporter import ReportService

app = typer.Typer(
    name="sqlstyle",
    add_completion=False,
    no_args_is_help=True,
    help="Check and fix PostgreSQL files against the SQL style guide.",
)


class ReportFormat(Enum):
    TEXT = "text"
    JSON = "json"
    YAML = "yaml"


PathsArgument = Annotated[
    list[Path],
    typer.Argument(
        help="SQL files or directories (directories are scanned for *.sql).",
        exists=True,
        file_okay=True,
        dir_okay=True,
        readable=True,
    ),
]
ConfigOption = Annotated[
    Optional[Path],
    typer.Option(
        "--config",
        "-c",
        help="YAML configuration file (default: .sqlstyle.yaml in the working directory).",
        envvar=CONFIG_ENV_VAR,
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
]
DisableOption = Annotated[
    Optional[list[str]],
    typer.Option("--disable", help="Rule id to switch off; may be repeated."),
]
JobsOption = Annotated[
    int,
    typer.Option("--jobs", "-j", min=1, help="Number of files processed in parallel."),
]
VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Enable debug logging."),
]


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_config(config_path: Path | None, disable: list[str] | None) -> LinterConfig:
    """Load configuration, exiting with status 2 when it is invalid.

    Args:
        config_path: Explicit configuration file, if any.
        disable: Rule ids switched off on the command line.

    Returns:
        LinterConfig: Validated configuration for the run.
    """
    path = config_path if config_path is not None else ConfigLoader.discover()
    try:
        return ConfigLoader(path).load(disable=disable or ())
    except ConfigError as e:
        typer.secho(f"configuration error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2) from e


def _print_summary(report: LintReport) -> None:
    color = typer.colors.GREEN if report.violation_count == 0 else typer.colors.RED
    typer.secho(ReportService(report=report).summary(), fg=color, err=True)


@app.command("lint")
def lint(
    paths: PathsArgument,
    config_path: ConfigOption = None,
    disable: DisableOption = None,
    report_format: Annotated[
        ReportFormat,
        typer.Option(
            "--format",
            "-f",
            case_sensitive=False,
            help="Report format (text, json or yaml).",
        ),
    ] = ReportFormat.TEXT,
    output_path: Annotated[
        Optional[Path],
        typer.Option(
            "--output",
            "-o",
            help="Write the report to this file instead of standard output.",
            file_okay=True,
            dir_okay=False,
            writable=True,
        ),
    ] = None,
    jobs: JobsOption = 1,
    verbose: VerboseOption = False,
) -> None:
    """Report style violations.

    Exit status is 0 when clean, 1 when violations were found and 2 when a
    file could not be tokenized or the configuration is invalid.
    """
    _configure_logging(verbose)
    config = _load_config(config_path, disable)
    report = LintEngine(config=config, jobs=jobs).lint_paths(paths)

    if report_format == ReportFormat.TEXT:
        rendered = ReportService(report=report).render()
        if output_path is not None:
            output_path.write_text(rendered, encoding="utf-8")
        else:
            typer.echo(rendered, nl=False)
    else:
        loader: JsonLoader | YamlLoader = (
            JsonLoader(output_path)
            if report_format == ReportFormat.JSON
            else YamlLoader(output_path)
        )
        if output_path is not None:
            loader.load(report)
        else:
            typer.echo(loader.render(report), nl=False)

    _print_summary(report)
    raise typer.Exit(code=report.exit_code)


@app.command("fix")
def fix(
    paths: PathsArgument,
    config_path: ConfigOption = None,
    disable: DisableOption = None,
    to_stdout: Annotated[
        bool,
        typer.Option(
            "--stdout",
            help="Print the fixed SQL instead of rewriting the file (one file only).",
        ),
    ] = False,
    jobs: JobsOption = 1,
    verbose: VerboseOption = False,
) -> None:
    """Apply safe rewrites for auto-fixable rules, then report what is left."""

    _configure_logging(verbose)
    config = _load_config(config_path, disable)
    files = discover_sql_files(paths)
    if to_stdout and len(files) != 1:
        raise typer.BadParameter(
            f"--stdout needs exactly one SQL file, got {len(files)}", param_hint="PATHS"
        )

    results = FixService(config=config, jobs=jobs).fix_files(files, write=not to_stdout)
    report = LintReport(results=[r.remaining for r in results])

    if to_stdout:
        typer.echo(results[0].fixed, nl=False)
        for line in ReportService(report=report).lines():
            typer.echo(line, err=True)
    else:
        for result in results:
            if result.changed:
                typer.secho(f"fixed {result.path.as_posix()}", fg=typer.colors.GREEN, err=True)
        typer.echo(ReportService(report=report).render(), nl=False)

    _print_summary(report)
    raise typer.Exit(code=report.exit_code)


@app.command("rules")
def list_rules() -> None:
    """List every rule id, whether it is auto-fixable, and what it checks."""

    for rule in RULES.values():
        marker = "fixable" if rule.auto_fixable else "       "
        typer.echo(f"{rule.rule_id:<28} {marker}  {rule.description}")


def main() -> None:
    """Entry point for executing the Typer application."""
    app()


if __name__ == "__main__":
    main()
