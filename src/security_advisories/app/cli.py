from __future__ import annotations

import logging
from contextlib import contextmanager
from enum import Enum
from pathlib import Path
from typing import Any, Iterator, Optional, Sequence

import typer
from typing_extensions import Annotated

from .container import Container
from ..config.settings import AppConfig
from ..core.domain.errors import FatalError
from ..core.domain.models import ExportOutcome, ValidationReport


app = typer.Typer(add_completion=False, help="Validate the security advisories database and export it to OSV.")

# exit codes wrap around above 255 on POSIX
MAX_EXIT_CODE = 255


class LogLevel(str, Enum):
    OFF = "OFF"
    CRITICAL = "CRITICAL"
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"
    DEBUG = "DEBUG"


@contextmanager
def provide_container(**overrides: Any) -> Iterator[Container]:
    container = Container()
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if overrides:
        container.config.from_pydantic(AppConfig(**overrides))
    container.init_resources()
    container.wire(modules=[__name__])
    try:
        yield container
    finally:
        container.shutdown_resources()


@app.callback()
def main(
    log_level: Annotated[
        Optional[LogLevel],
        typer.Option(
            "--log-level",
            help="Set log level (OFF, CRITICAL, ERROR, WARNING, INFO, DEBUG). Default: OFF",
        ),
    ] = None,
) -> None:
    """Configure package logging when requested."""
    if log_level in (None, LogLevel.OFF):
        return

    level = logging.getLevelNamesMapping().get(log_level.value, logging.INFO)

    package_name = __package__.split(".", 1)[0] if __package__ else "security_advisories"
    logger = logging.getLogger(package_name)

    # avoid stacking handlers when invoked repeatedly in one process
    has_stream = any(isinstance(h, logging.StreamHandler) for h in logger.handlers)
    if not has_stream:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s | %(name)s | %(message)s"))
        logger.addHandler(handler)

    logger.propagate = False
    logger.setLevel(level)


@app.command(help="Validate every advisory. Exit code is the number of files with issues.")
def validate(
    root: Optional[Path] = typer.Option(None, "--root", help="Advisory database root (default: current directory)"),
    offline: bool = typer.Option(False, "--offline", help="Skip the Packagist existence check"),
    workers: Optional[int] = typer.Option(None, "--workers", min=1, help="Files validated concurrently"),
) -> None:
    try:
        with provide_container(root_dir=root, workers=workers) as container:
            if offline:
                uc = container.validate_uc(validator=container.offline_validator())
            else:
                uc = container.validate_uc()
            report = uc.execute()
    except FatalError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    _print_report(report)
    if not report.ok:
        raise typer.Exit(code=min(report.files_with_issues, MAX_EXIT_CODE))


@app.command(help="Export advisories in OSV format, one <id>.json per advisory.")
def export(
    target: Optional[Path] = typer.Argument(None, help="Target folder (default: packagist)"),
    root: Optional[Path] = typer.Option(None, "--root", help="Advisory database root (default: current directory)"),
    workers: Optional[int] = typer.Option(None, "--workers", min=1, help="Files exported concurrently"),
) -> None:
    try:
        with provide_container(root_dir=root, output_dir=target, workers=workers) as container:
            uc = container.export_uc()
            outcomes = uc.execute()
            output_dir = container.config.output_dir()
    except FatalError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    _print_export(outcomes, output_dir)


@app.command(help="Clear cached Packagist lookups.")
def clear() -> None:
    with provide_container() as container:
        uc = container.clear_cache_uc()
        uc.execute()
        typer.echo("Cache cleared")


def _print_report(report: ValidationReport) -> None:
    if report.ok:
        typer.echo(f"[OK] No issues found in {report.files_checked} files.")
        return

    grouped = report.by_file()
    issues = len(report.issues)
    files = len(grouped)
    typer.echo(
        f"[ERROR] Found {issues} issue{'' if issues == 1 else 's'} "
        f"in {files} file{'' if files == 1 else 's'}."
    )
    width = max(len(path) for path in grouped)
    for index, (path, file_issues) in enumerate(grouped.items()):
        if index:
            typer.echo("-" * (width + 2))
        for line, issue in enumerate(file_issues):
            label = path if line == 0 else ""
            typer.echo(f"{label:{width}}  {issue.message}")


def _print_export(outcomes: Sequence[ExportOutcome], output_dir: Path) -> None:
    skipped = [o for o in outcomes if o.skipped]
    for outcome in skipped:
        typer.echo(outcome.message)
    exported = len(outcomes) - len(skipped)
    typer.echo(f"Exported {exported} advisories to {output_dir} ({len(skipped)} skipped).")


if __name__ == "__main__":  # pragma: no cover
    app()
