"""Public API for validating bibliographic databases.

This module provides the main public API for bibaudit, enabling:
- Parsing a BibTeX file into RawRecord objects
- Evaluating records without writing any artifact
- Running the full batch (canonical output plus audit log)
"""

from pathlib import Path

import click

from bibaudit.engine import BatchConfig, BatchResult, run_batch
from bibaudit.errors import ParseError
from bibaudit.models import EvaluationResult, OutcomeStatus, RawRecord
from bibaudit.parse import parse_bibtex
from bibaudit.schema import SchemaRegistry
from bibaudit.validate import evaluate_all

__all__ = [
    "parse_file",
    "check_file",
    "run",
    "ParseError",
]


def parse_file(path: str | Path) -> list[RawRecord]:
    """Parse a BibTeX file.

    Parameters
    ----------
    path : str | Path
        Path to file to parse.

    Returns
    -------
    list[RawRecord]
        Parsed records, in input order.

    Raises
    ------
    ParseError
        If the file does not exist or cannot be parsed.

    Examples
    --------
        >>> from bibaudit import parse_file
        >>> records = parse_file("references.bib")
        >>> for record in records:
        ...     print(record.key, record.entry_type)
    """
    records, _ = parse_bibtex(path)
    return records


def check_file(
    path: str | Path,
    *,
    registry: SchemaRegistry | None = None,
) -> list[EvaluationResult]:
    """Evaluate every record of a BibTeX file without writing artifacts.

    Parameters
    ----------
    path : str | Path
        Path to file to check.
    registry : SchemaRegistry | None, optional
        Rule registry, by default the standard registry.

    Returns
    -------
    list[EvaluationResult]
        One result per record, in input order.

    Raises
    ------
    ParseError
        If the file does not exist or cannot be parsed.
    """
    return list(evaluate_all(parse_file(path), registry))


def _echo_progress(message: str, status: OutcomeStatus | None) -> None:
    click.echo(message)


def run(
    input_path: str | Path,
    output_path: str | Path,
    *,
    config: BatchConfig | None = None,
) -> BatchResult:
    """Validate a database, write its canonical rewrite and the audit log.

    Progress and the final summary are printed to standard output.

    Parameters
    ----------
    input_path : str | Path
        BibTeX database to validate.
    output_path : str | Path
        Consolidated canonical output, overwritten on every run.
    config : BatchConfig | None, optional
        Batch configuration. If None, uses defaults.

    Returns
    -------
    BatchResult
        Counters and artifact paths. A missing or malformed input yields
        ``success=False`` and writes nothing.

    Examples
    --------
        >>> from bibaudit import run
        >>> result = run("references.bib", "references.clean.bib")
        >>> result.output_files["audit_log"]
        'references.clean_audit.xlsx'
    """
    return run_batch(input_path, output_path, config=config, progress=_echo_progress)
