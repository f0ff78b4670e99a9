"""CLI command implementations"""

import logging
from typing import Annotated, Optional

import typer

from mdpost.config import Settings, load_config
from mdpost.core.loader import LoadReport
from mdpost.core.pipeline import run_build, run_load


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling; applies the configured log level."""
    try:
        settings = load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))
    root = logging.getLogger()
    if root.level > logging.DEBUG:
        root.setLevel(settings.log_level)
    return settings


def _load(path: Optional[str], settings: Settings) -> LoadReport:
    try:
        return run_load(path or settings.content_dir, settings)
    except RuntimeError as e:
        _fail(str(e))


def _echo_report(report: LoadReport, show_warnings: bool = True) -> None:
    """Print failures and body findings, then a summary line."""
    for failure in report.failures:
        typer.echo(f"  FAILED {failure.source_path}: {failure.kind}: {failure.message}", err=True)
    if show_warnings:
        for source, issues in report.body_issues.items():
            for issue in issues:
                where = f"{source}:{issue.line}" if issue.line else source
                typer.echo(f"  {issue.severity.value} {where}: {issue.message} [{issue.code}]")
    typer.echo(
        f"Loaded {len(report.documents)} document(s), "
        f"{len(report.failures)} failed, "
        f"{report.body_error_count} body error(s)"
    )


def _exit_code(report: LoadReport, strict: bool) -> int:
    if report.failures or (strict and report.body_error_count):
        return 1
    return 0


def check_cmd(
    path: Annotated[Optional[str], typer.Argument(help="Post file or directory (default: content_dir)")] = None,
    strict: Annotated[Optional[bool], typer.Option("--strict/--no-strict", help="Fail on body errors")] = None,
    workers: Annotated[Optional[int], typer.Option("--workers", help="Parallel loader tasks")] = None,
    ):
    """Parse and validate posts, reporting every failure and body finding."""
    settings = _settings(overrides={"strict": strict, "workers": workers})
    report = _load(path, settings)
    _echo_report(report)
    raise typer.Exit(_exit_code(report, settings.strict))


def list_cmd(
    path: Annotated[Optional[str], typer.Argument(help="Post file or directory (default: content_dir)")] = None,
    ):
    """List loaded posts newest first as: date, slug, title."""
    settings = _settings()
    report = _load(path, settings)
    if not report.documents:
        typer.echo("No documents found.")
        raise typer.Exit(1)
    for doc in report.documents:
        typer.echo(f"{doc.date:%Y-%m-%d}  {doc.slug}  {doc.title}")
    if report.failures:
        _echo_report(report, show_warnings=False)
        raise typer.Exit(1)


def build_cmd(
    path: Annotated[Optional[str], typer.Argument(help="Post file or directory (default: content_dir)")] = None,
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    strict: Annotated[Optional[bool], typer.Option("--strict/--no-strict", help="Fail on body errors")] = None,
    ):
    """Load posts and write index.json for the site generator; failed files are excluded."""
    settings = _settings(overrides={"output_dir": out, "strict": strict})
    try:
        report, index_path = run_build(path or settings.content_dir, settings)
    except RuntimeError as e:
        _fail("Build failed", e)
    _echo_report(report)
    typer.echo(f"Wrote {len(report.documents)} document(s) to {index_path}")
    raise typer.Exit(_exit_code(report, settings.strict))
