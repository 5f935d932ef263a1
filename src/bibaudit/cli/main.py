"""Command-line interface for bibaudit.

Provides CLI commands for validating and canonicalizing BibTeX databases.
"""

import importlib.metadata
import sys
from collections.abc import Callable
from pathlib import Path

import click

from bibaudit.models import OutcomeStatus

__all__ = ["cli"]

try:
    __version__ = importlib.metadata.version("bibaudit")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.1.0"  # Fallback for development

_STATUS_COLORS: dict[OutcomeStatus, str] = {
    OutcomeStatus.OK: "green",
    OutcomeStatus.WARNING: "yellow",
    OutcomeStatus.ERROR: "red",
}


def _make_progress(quiet: bool) -> Callable[[str, OutcomeStatus | None], None]:
    def _progress(message: str, status: OutcomeStatus | None) -> None:
        if status is None:
            click.echo(message)
        elif not quiet:
            click.secho(message, fg=_STATUS_COLORS[status])

    return _progress


@click.group()
@click.version_option(version=__version__, prog_name="bibaudit")
def cli() -> None:
    """Schema validation and canonical rewriting for BibTeX databases.

    Use 'bibaudit COMMAND --help' for command-specific help.
    """


@cli.command()
@click.argument("input_path", type=click.Path(dir_okay=False))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    required=True,
    help="Output file for canonical records (overwritten)",
)
@click.option(
    "--audit-log",
    type=click.Path(dir_okay=False),
    default=None,
    help="Spreadsheet audit log (default: <output stem>_audit.xlsx)",
)
@click.option(
    "--events-log",
    type=click.Path(dir_okay=False),
    default=None,
    help="JSONL event log (default: <output stem>_events.jsonl)",
)
@click.option(
    "--no-events",
    is_flag=True,
    help="Do not write the JSONL event log",
)
@click.option(
    "--max-width",
    type=int,
    default=100,
    show_default=True,
    help="Maximum audit log column width",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    help="Only print the final summary",
)
def run(
    input_path: str,
    output: str,
    audit_log: str | None,
    events_log: str | None,
    no_events: bool,
    max_width: int,
    quiet: bool,
) -> None:
    """Validate INPUT_PATH and write canonical records plus an audit log.

    Every record is classified as ok, warning or error. Its canonical
    rewrite is written to OUTPUT regardless of outcome, and one row per
    record is appended to the audit spreadsheet, which is recreated on
    every run.

    Examples
    --------
        bibaudit run references.bib -o references.clean.bib
        bibaudit run refs.bib -o out/refs.bib --audit-log out/review.xlsx
    """
    from bibaudit.engine import BatchConfig, run_batch
    from bibaudit.errors import ConfigError

    try:
        config = BatchConfig(
            audit_log_path=Path(audit_log) if audit_log else None,
            events_log_path=Path(events_log) if events_log else None,
            write_events=not no_events,
            max_column_width=max_width,
        )
    except ConfigError as e:
        raise click.BadParameter(str(e)) from e

    result = run_batch(
        input_path,
        output,
        config=config,
        progress=_make_progress(quiet),
        command_argv=sys.argv,
    )

    if not result.success:
        sys.exit(1)

    if result.total_records:
        click.secho(
            f"✓ {result.ok} ok, {result.warnings} warnings, {result.errors} errors",
            fg="green" if result.errors == 0 else "yellow",
        )


@cli.command()
@click.argument("input_path", type=click.Path(dir_okay=False))
@click.option(
    "--strict",
    is_flag=True,
    help="Exit with status 1 if any record is an error",
)
def check(input_path: str, strict: bool) -> None:
    """Evaluate INPUT_PATH and print each outcome without writing files.

    Examples
    --------
        bibaudit check references.bib
        bibaudit check references.bib --strict
    """
    from bibaudit.api import ParseError, check_file
    from bibaudit.engine.runner import NO_RECORDS_MESSAGE, format_progress

    try:
        results = check_file(input_path)
    except ParseError as e:
        click.echo(f"Error: {e}")
        sys.exit(1)

    if not results:
        click.echo(NO_RECORDS_MESSAGE)
        return

    progress = _make_progress(quiet=False)
    total = len(results)
    for position, evaluation in enumerate(results, start=1):
        progress(format_progress(position, total, evaluation), evaluation.outcome.status)

    errors = sum(1 for evaluation in results if evaluation.outcome.is_error)
    click.echo(f"Found {total} records; {errors} errors")

    if strict and errors:
        sys.exit(1)


@cli.command()
def types() -> None:
    """List supported record types and their required fields."""
    from bibaudit.schema import default_registry

    registry = default_registry()
    for tag, rules in registry.rules().items():
        for rule in rules:
            line = f"{tag} [{rule.name}] -> @{rule.output_type}: {', '.join(rule.required)}"
            if rule.constraint is not None:
                line += f" ({rule.constraint.field}: {rule.constraint.description})"
            if rule.demote_reason:
                line += f" (warns: {rule.demote_reason})"
            click.echo(line)


if __name__ == "__main__":
    cli()
