"""Batch driver: parse, evaluate, audit, and write canonical output.

Flow:
    1. Parse the input database into records (aborts on ParseError)
    2. Stop early with "no records found" when the input holds no entries
    3. Evaluate each record in input order, report progress, append an
       audit row, and buffer its canonical rendering
    4. Write all canonical renderings to the output artifact in one write

Per-record problems never abort the batch; they are recorded as outcomes.
"""

import sys
import time
import traceback
from collections.abc import Callable
from pathlib import Path

from bibaudit.audit.helpers import (
    generate_run_id,
    get_dependency_versions,
    get_package_version,
)
from bibaudit.audit.logger import AuditLogger
from bibaudit.audit.sink import AuditSink
from bibaudit.engine.config import BatchConfig, BatchResult
from bibaudit.errors import ParseError
from bibaudit.models import EvaluationResult, OutcomeStatus, RawRecord
from bibaudit.parse import parse_bibtex
from bibaudit.schema import SchemaRegistry, default_registry
from bibaudit.utils import calculate_file_sha256
from bibaudit.validate import evaluate, render_original

__all__ = [
    "ProgressFn",
    "NO_RECORDS_MESSAGE",
    "RECORD_SEPARATOR",
    "run_batch",
    "format_progress",
    "join_renderings",
]

ProgressFn = Callable[[str, OutcomeStatus | None], None]

NO_RECORDS_MESSAGE = "no records found"

# One blank line between canonical renderings
RECORD_SEPARATOR = "\n\n"

_DEPENDENCIES = ["bibtexparser", "openpyxl", "click"]


def _silent(message: str, status: OutcomeStatus | None) -> None:
    return None


def format_progress(position: int, total: int, result: EvaluationResult) -> str:
    """Format the console line reported for one evaluated record."""
    record = result.record
    return f"[{position}/{total}] {record.key} ({record.type_tag}): {result.outcome.describe()}"


def join_renderings(renderings: list[str]) -> str:
    """Join canonical renderings into the consolidated output text."""
    if not renderings:
        return ""
    return RECORD_SEPARATOR.join(renderings) + "\n"


def _process_records(
    records: list[RawRecord],
    registry: SchemaRegistry,
    sink: AuditSink,
    logger: AuditLogger | None,
    progress: ProgressFn,
    result: BatchResult,
) -> list[str]:
    """Evaluate records in order, feeding the sink; return canonical renderings."""
    renderings: list[str] = []
    total = len(records)

    for position, record in enumerate(records, start=1):
        evaluation = evaluate(record, registry)
        outcome = evaluation.outcome
        canonical_text = evaluation.canonical_text()

        progress(format_progress(position, total, evaluation), outcome.status)
        sink.record_result(render_original(record), canonical_text, outcome.describe())
        renderings.append(canonical_text)

        if outcome.is_ok:
            result.ok += 1
            continue

        if outcome.is_warning:
            result.warnings += 1
        else:
            result.errors += 1

        if logger:
            logger.record_flagged(
                rid=record.key,
                status=outcome.status.value,
                reason=outcome.reason or "",
                kind=outcome.kind.value if outcome.kind else None,
            )

    return renderings


def _log_artifact(logger: AuditLogger | None, path: Path, record_count: int) -> None:
    if logger is None or not path.exists():
        return
    logger.artifact_written(
        path=str(path),
        sha256=calculate_file_sha256(path),
        bytes_written=path.stat().st_size,
        record_count=record_count,
    )


def run_batch(
    input_path: Path | str,
    output_path: Path | str,
    config: BatchConfig | None = None,
    progress: ProgressFn | None = None,
    command_argv: list[str] | None = None,
) -> BatchResult:
    """Run a validation batch over a BibTeX database.

    Parameters
    ----------
    input_path : Path | str
        BibTeX database to validate.
    output_path : Path | str
        Consolidated canonical output; overwritten on every run.
    config : BatchConfig | None, optional
        Batch configuration. If None, uses defaults.
    progress : ProgressFn | None, optional
        Callback receiving each console line and the outcome status it
        reports (None for summary lines). If None, runs silently.
    command_argv : list[str] | None, optional
        Command recorded in the event log, uses sys.argv if None.

    Returns
    -------
    BatchResult
        Outcome counters and written artifacts. ``success`` is False only
        when the input could not be read or parsed, or an artifact could
        not be written.

    Examples
    --------
        >>> from bibaudit.engine import run_batch
        >>> result = run_batch("refs.bib", "refs.clean.bib")
        >>> print(result.ok, result.warnings, result.errors)
    """
    input_path = Path(input_path)
    output_path = Path(output_path)
    config = config if config is not None else BatchConfig()
    report = progress if progress is not None else _silent
    registry = config.registry if config.registry is not None else default_registry()

    try:
        records, source = parse_bibtex(input_path)
    except ParseError as e:
        report(f"Error: {e}", None)
        return BatchResult(success=False, error_message=str(e))

    if not records:
        report(NO_RECORDS_MESSAGE, None)
        return BatchResult(success=True)

    start_time = time.perf_counter()
    result = BatchResult(success=True, total_records=len(records))
    audit_log_path = config.resolve_audit_log_path(output_path)

    logger: AuditLogger | None = None

    try:
        if config.write_events:
            logger = AuditLogger(
                run_id=generate_run_id(),
                log_path=config.resolve_events_log_path(output_path),
                reset=True,
            )

        if logger:
            logger.run_started(
                command=command_argv or sys.argv,
                parameters={
                    "input_path": str(input_path),
                    "output_path": str(output_path),
                    "package_version": get_package_version(),
                    "dependencies": get_dependency_versions(_DEPENDENCIES),
                    **config.to_dict(),
                },
                input_file=source.to_dict(),
            )
            logger.stage_started("evaluate", expected_records=len(records))

        stage_start = time.perf_counter()
        with AuditSink(
            audit_log_path,
            max_column_width=config.max_column_width,
            autosave=config.autosave_audit,
        ) as sink:
            sink.reset()
            renderings = _process_records(records, registry, sink, logger, report, result)

        if logger:
            logger.stage_finished(
                "evaluate",
                duration_seconds=time.perf_counter() - stage_start,
                counters=result.counters,
            )
            logger.stage_started("write")

        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(join_renderings(renderings), encoding="utf-8", newline="\n")

        result.output_files = {
            "canonical_output": str(output_path),
            "audit_log": str(audit_log_path),
        }
        if logger:
            result.output_files["events_log"] = str(logger.log_path)
            _log_artifact(logger, output_path, len(renderings))
            _log_artifact(logger, audit_log_path, len(renderings))
            logger.set_stage(None)
            logger.run_finished(
                status="success",
                duration_seconds=time.perf_counter() - start_time,
                records_processed=len(records),
                counters=result.counters,
            )

        report(f"Found {len(records)} records; wrote {output_path}", None)
        return result

    except OSError as e:
        error_msg = f"{type(e).__name__}: {e}"
        if logger:
            logger.error(
                exception_class=type(e).__name__,
                message=str(e),
                traceback=traceback.format_exc(),
            )
            logger.set_stage(None)
            logger.run_finished(
                status="failed",
                duration_seconds=time.perf_counter() - start_time,
                counters=result.counters,
            )
        report(f"Error: {error_msg}", None)
        result.success = False
        result.error_message = error_msg
        return result

    finally:
        if logger:
            logger.close()
