"""Shared data types for bibaudit.

This package contains the record, outcome and audit row dataclasses
consumed across the pipeline.
"""

from bibaudit.models.outcomes import (
    MALFORMED_ENTRY_REASON,
    UNDEFINED_TYPE_REASON,
    Outcome,
    OutcomeStatus,
    SchemaErrorKind,
)
from bibaudit.models.records import (
    DEFAULT_KEY,
    MISSING_VALUE,
    AuditFlag,
    AuditRow,
    CanonicalRecord,
    EvaluationResult,
    RawRecord,
    render_entry,
)

__all__ = [
    # Constants
    "DEFAULT_KEY",
    "MISSING_VALUE",
    "UNDEFINED_TYPE_REASON",
    "MALFORMED_ENTRY_REASON",
    # Record models
    "RawRecord",
    "CanonicalRecord",
    "EvaluationResult",
    "render_entry",
    # Outcomes
    "Outcome",
    "OutcomeStatus",
    "SchemaErrorKind",
    # Audit rows
    "AuditFlag",
    "AuditRow",
]
