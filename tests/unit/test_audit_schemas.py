"""Tests for schema validation of event logs."""

import json
from pathlib import Path

import jsonschema
import pytest

from bibaudit.audit import AuditLogger, generate_run_id
from bibaudit.engine import run_batch

_SCHEMAS_DIR = Path(__file__).parent.parent.parent / "schemas"


@pytest.fixture(scope="module")
def event_schema() -> dict:
    """Load log event JSON schema."""
    with (_SCHEMAS_DIR / "log_event.schema.json").open() as f:
        return json.load(f)


@pytest.mark.unit
def test_logger_events_validate(tmp_path: Path, event_schema: dict) -> None:
    """Test events written by every logger method validate against schema."""
    log_path = tmp_path / "events.jsonl"

    with AuditLogger(run_id=generate_run_id(), log_path=log_path) as logger:
        logger.run_started(command=["bibaudit", "run"], parameters={"max_column_width": 100})
        logger.stage_started("evaluate", expected_records=2)
        logger.record_flagged(rid="k1", status="warning", reason="pages format error")
        logger.stage_finished("evaluate", duration_seconds=0.01, counters={"ok": 1})
        logger.artifact_written(path="out.bib", sha256="sha256:00", bytes_written=10)
        logger.error(exception_class="OSError", message="disk full")
        logger.run_finished(status="failed", duration_seconds=0.02)

    with log_path.open() as f:
        lines = [json.loads(line) for line in f]

    assert len(lines) == 7
    for line in lines:
        jsonschema.validate(instance=line, schema=event_schema)


@pytest.mark.unit
def test_batch_events_validate(tmp_path: Path, sample_bib: Path, event_schema: dict) -> None:
    """Test the event log of a full batch validates line by line."""
    result = run_batch(sample_bib, tmp_path / "clean.bib")

    events_path = Path(result.output_files["events_log"])
    with events_path.open() as f:
        lines = [json.loads(line) for line in f]

    assert lines[0]["event"] == "run_started"
    assert lines[-1]["event"] == "run_finished"
    for line in lines:
        jsonschema.validate(instance=line, schema=event_schema)


@pytest.mark.unit
def test_schema_rejects_unknown_level(event_schema: dict) -> None:
    """Test the schema rejects levels outside the allowed set."""
    bad = {
        "ts": "2024-01-01T00:00:00.000000Z",
        "run_id": "r",
        "level": "TRACE",
        "event": "x",
        "data": {},
        "stage": None,
        "rid": None,
    }

    with pytest.raises(jsonschema.ValidationError):
        jsonschema.validate(instance=bad, schema=event_schema)
