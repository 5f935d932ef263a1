"""Batch configuration and result dataclasses."""

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from bibaudit.audit.sink import DEFAULT_MAX_COLUMN_WIDTH, MIN_COLUMN_WIDTH
from bibaudit.errors import ConfigError
from bibaudit.schema import SchemaRegistry

__all__ = ["BatchConfig", "BatchResult"]

AUDIT_LOG_SUFFIX = "_audit.xlsx"
EVENTS_LOG_SUFFIX = "_events.jsonl"


@dataclass
class BatchConfig:
    """Configuration for a validation batch.

    Attributes
    ----------
    audit_log_path : Path | None
        Spreadsheet audit log. If None, ``<output stem>_audit.xlsx`` next
        to the output artifact.
    events_log_path : Path | None
        JSONL event log. If None, ``<output stem>_events.jsonl`` next to
        the output artifact.
    write_events : bool
        Write the JSONL event log.
    max_column_width : int
        Upper bound for audit log column widths.
    autosave_audit : bool
        Save the audit workbook after every row instead of once at the end.
    registry : SchemaRegistry | None
        Rule registry. If None, the standard registry is used.
    """

    audit_log_path: Path | None = None
    events_log_path: Path | None = None
    write_events: bool = True
    max_column_width: int = DEFAULT_MAX_COLUMN_WIDTH
    autosave_audit: bool = False
    registry: SchemaRegistry | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        """Coerce paths and validate."""
        if self.audit_log_path is not None:
            self.audit_log_path = Path(self.audit_log_path)
        if self.events_log_path is not None:
            self.events_log_path = Path(self.events_log_path)

        if self.max_column_width < MIN_COLUMN_WIDTH:
            raise ConfigError(
                f"max_column_width must be >= {MIN_COLUMN_WIDTH}, got {self.max_column_width}"
            )

        if (
            self.audit_log_path is not None
            and self.events_log_path is not None
            and self.audit_log_path == self.events_log_path
        ):
            raise ConfigError("audit_log_path and events_log_path must differ")

    def resolve_audit_log_path(self, output_path: Path) -> Path:
        """Return the audit log location for a given output artifact."""
        if self.audit_log_path is not None:
            return self.audit_log_path
        return output_path.with_name(f"{output_path.stem}{AUDIT_LOG_SUFFIX}")

    def resolve_events_log_path(self, output_path: Path) -> Path:
        """Return the event log location for a given output artifact."""
        if self.events_log_path is not None:
            return self.events_log_path
        return output_path.with_name(f"{output_path.stem}{EVENTS_LOG_SUFFIX}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "audit_log_path": str(self.audit_log_path) if self.audit_log_path else None,
            "events_log_path": str(self.events_log_path) if self.events_log_path else None,
            "write_events": self.write_events,
            "max_column_width": self.max_column_width,
            "autosave_audit": self.autosave_audit,
            "registry_types": self.registry.types() if self.registry is not None else None,
        }


@dataclass
class BatchResult:
    """Results from a batch run.

    Attributes
    ----------
    success : bool
        Whether the batch ran. Individual record errors do not affect it.
    total_records : int
        Records parsed from the input.
    ok : int
        Records accepted without remarks.
    warnings : int
        Records accepted with a warning (format mismatch or rewritten type).
    errors : int
        Records rejected (missing fields or undefined type).
    output_files : dict[str, str]
        Map of artifact type to file path. Empty when nothing was written.
    error_message : str | None
        Error message if the run did not complete.
    """

    success: bool
    total_records: int = 0
    ok: int = 0
    warnings: int = 0
    errors: int = 0
    output_files: dict[str, str] = field(default_factory=dict)
    error_message: str | None = None

    @property
    def counters(self) -> dict[str, int]:
        return {"ok": self.ok, "warning": self.warnings, "error": self.errors}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)
