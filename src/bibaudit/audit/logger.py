"""Run event log for validation batches.

The spreadsheet sink is meant for people reviewing records; this log is
its machine-readable counterpart. Each line is one JSON event: the run
starting with its input provenance, every flagged record, the artifacts
written and the final counters.
"""

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any

from bibaudit.audit.models import LogEvent
from bibaudit.utils import get_iso_timestamp

__all__ = ["AuditLogger"]


class AuditLogger:
    """Writer of one batch run's events, one JSON object per line.

    The file stays open for the whole run and is flushed after every
    event, so a run that dies midway still leaves its trace up to the
    failure. Batch runs open it with ``reset=True`` so the log only holds
    the latest run.

    Attributes
    ----------
    run_id : str
        Unique run identifier.
    log_path : Path
        Path to JSONL log file.
    current_stage : str | None
        Current stage name for context.
    """

    def __init__(self, run_id: str, log_path: Path, reset: bool = False) -> None:
        """Open the event log.

        Parameters
        ----------
        run_id : str
            Identifier stamped on every event of the run.
        log_path : Path
            JSONL file; parent directories are created.
        reset : bool, optional
            Truncate an existing log instead of appending to it, by default False.
        """
        self.run_id = run_id
        self.log_path = Path(log_path)
        self.current_stage: str | None = None

        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        self._file = self.log_path.open("w" if reset else "a", encoding="utf-8")

    def __enter__(self) -> "AuditLogger":
        """Enter context manager."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Exit context manager and close file."""
        self.close()

    def close(self) -> None:
        """Flush and close the log file handle."""
        if not self._file.closed:
            self._file.flush()
            self._file.close()

    def set_stage(self, stage: str | None) -> None:
        """Set the stage stamped on later events (``evaluate``, ``write`` or None)."""
        self.current_stage = stage

    def event(
        self,
        event_type: str,
        data: dict[str, Any] | None = None,
        level: str = "INFO",
        stage: str | None = None,
        rid: str | None = None,
    ) -> None:
        """Append one event line.

        Parameters
        ----------
        event_type : str
            Event name, e.g. "record_flagged".
        data : dict[str, Any] | None, optional
            Event-specific data payload.
        level : str, optional
            Log level ("DEBUG", "INFO", "WARN", "ERROR").
        stage : str | None, optional
            Stage, by default the current stage.
        rid : str | None, optional
            Citation key of the record the event is about.
        """
        if data is None:
            data = {}

        if stage is None:
            stage = self.current_stage

        log_event = LogEvent(
            ts=get_iso_timestamp(),
            run_id=self.run_id,
            level=level,
            event=event_type,
            data=data,
            stage=stage,
            rid=rid,
        )

        self._write_event(log_event)

    def _write_event(self, event: LogEvent) -> None:
        event_dict = asdict(event)
        json.dump(event_dict, self._file, ensure_ascii=False, separators=(",", ":"))
        self._file.write("\n")
        self._file.flush()

    def run_started(
        self,
        command: list[str],
        parameters: dict[str, Any],
        input_file: dict[str, Any] | None = None,
    ) -> None:
        """Log run_started event.

        Parameters
        ----------
        command : list[str]
            Command-line arguments.
        parameters : dict[str, Any]
            Batch parameters.
        input_file : dict[str, Any] | None, optional
            Provenance of the input database (path, sha256, bytes,
            encoding, mtime).
        """
        data: dict[str, Any] = {"command": command, "parameters": parameters}
        if input_file is not None:
            data["input_file"] = input_file

        self.event("run_started", data=data)

    def run_finished(
        self,
        status: str,
        duration_seconds: float,
        records_processed: int | None = None,
        counters: dict[str, int] | None = None,
    ) -> None:
        """Log run_finished event.

        Parameters
        ----------
        status : str
            "success", or "failed" when an artifact could not be written.
        duration_seconds : float
            Total execution time in seconds.
        records_processed : int | None, optional
            Total records processed.
        counters : dict[str, int] | None, optional
            Outcome counters (ok/warning/error).
        """
        data: dict[str, Any] = {
            "status": status,
            "duration_seconds": duration_seconds,
        }
        if records_processed is not None:
            data["records_processed"] = records_processed
        if counters:
            data["counters"] = counters

        self.event("run_finished", data=data, stage=None)

    def stage_started(self, stage: str, expected_records: int | None = None) -> None:
        """Log stage_started event and make it the current stage."""
        self.set_stage(stage)

        data: dict[str, Any] = {}
        if expected_records is not None:
            data["expected_records"] = expected_records

        self.event("stage_started", data=data, stage=stage)

    def stage_finished(
        self,
        stage: str,
        duration_seconds: float,
        counters: dict[str, int] | None = None,
    ) -> None:
        """Log stage_finished with its duration and, if given, outcome counters."""
        data: dict[str, Any] = {"duration_seconds": duration_seconds}
        if counters:
            data["counters"] = counters

        self.event("stage_finished", data=data, stage=stage)

    def record_flagged(
        self,
        rid: str,
        status: str,
        reason: str,
        kind: str | None = None,
        stage: str | None = None,
    ) -> None:
        """Log record_flagged event for a non-clean outcome.

        Parameters
        ----------
        rid : str
            Record citation key.
        status : str
            Outcome status ("warning" or "error").
        reason : str
            Outcome reason.
        kind : str | None, optional
            Schema error kind.
        stage : str | None, optional
            Stage identifier.
        """
        self.event(
            "record_flagged",
            data={"status": status, "reason": reason, "kind": kind},
            level="ERROR" if status == "error" else "WARN",
            stage=stage,
            rid=rid,
        )

    def artifact_written(
        self,
        path: str,
        sha256: str,
        stage: str | None = None,
        bytes_written: int | None = None,
        record_count: int | None = None,
    ) -> None:
        """Log artifact_written for the canonical output or the audit workbook.

        Parameters
        ----------
        path : str
            Path to artifact.
        sha256 : str
            SHA256 hash of artifact.
        stage : str | None, optional
            Stage that produced artifact.
        bytes_written : int | None, optional
            File size in bytes.
        record_count : int | None, optional
            Records rendered into the artifact.
        """
        data: dict[str, Any] = {"path": path, "sha256": sha256}
        if bytes_written is not None:
            data["bytes"] = bytes_written
        if record_count is not None:
            data["record_count"] = record_count

        self.event("artifact_written", data=data, stage=stage)

    def error(
        self,
        exception_class: str,
        message: str,
        stage: str | None = None,
        rid: str | None = None,
        traceback: str | None = None,
    ) -> None:
        """Log an error that stopped the run, such as a failed artifact write.

        Per-record problems are not errors here; they go through
        ``record_flagged``.
        """
        data: dict[str, Any] = {
            "exception_class": exception_class,
            "message": message,
        }
        if traceback is not None:
            data["traceback"] = traceback

        self.event("error", data=data, stage=stage, rid=rid, level="ERROR")
