"""Validation outcome types.

An outcome is a tagged variant: ``ok``, ``warning(reason)`` or
``error(reason)``. Exactly one outcome is produced per record.
"""

from dataclasses import dataclass
from enum import StrEnum

__all__ = [
    "OutcomeStatus",
    "SchemaErrorKind",
    "Outcome",
    "UNDEFINED_TYPE_REASON",
    "MALFORMED_ENTRY_REASON",
]

UNDEFINED_TYPE_REASON = "undefined type"
MALFORMED_ENTRY_REASON = "malformed entry"


class OutcomeStatus(StrEnum):
    """Severity of a validation outcome."""

    OK = "ok"
    WARNING = "warning"
    ERROR = "error"


class SchemaErrorKind(StrEnum):
    """Classification of a non-clean outcome.

    ``DEMOTED_OK`` is not a failure: the record is valid but its type
    was rewritten, so it is surfaced as a warning.
    """

    MISSING_FIELDS = "missing_fields"
    FORMAT_MISMATCH = "format_mismatch"
    UNKNOWN_TYPE = "unknown_type"
    DEMOTED_OK = "demoted_ok"
    MALFORMED_ENTRY = "malformed_entry"


@dataclass(frozen=True)
class Outcome:
    """Classified result of validating one record.

    Attributes
    ----------
    status : OutcomeStatus
        Outcome severity.
    reason : str | None
        Human-readable reason, None for ok outcomes.
    kind : SchemaErrorKind | None
        Machine-readable classification, None for ok outcomes.
    """

    status: OutcomeStatus
    reason: str | None = None
    kind: SchemaErrorKind | None = None

    @classmethod
    def ok(cls) -> "Outcome":
        """Build an ok outcome."""
        return cls(status=OutcomeStatus.OK)

    @classmethod
    def warning(cls, reason: str, kind: SchemaErrorKind | None = None) -> "Outcome":
        """Build a warning outcome."""
        return cls(status=OutcomeStatus.WARNING, reason=reason, kind=kind)

    @classmethod
    def error(cls, reason: str, kind: SchemaErrorKind | None = None) -> "Outcome":
        """Build an error outcome."""
        return cls(status=OutcomeStatus.ERROR, reason=reason, kind=kind)

    @property
    def is_ok(self) -> bool:
        return self.status is OutcomeStatus.OK

    @property
    def is_warning(self) -> bool:
        return self.status is OutcomeStatus.WARNING

    @property
    def is_error(self) -> bool:
        return self.status is OutcomeStatus.ERROR

    def describe(self) -> str:
        """Render the outcome description used in audit rows.

        Returns
        -------
        str
            ``"ok"``, ``"warning: <reason>"`` or ``"error: <reason>"``.
            Non-clean descriptions always start with their status marker.
        """
        if self.is_ok:
            return OutcomeStatus.OK.value
        return f"{self.status.value}: {self.reason}"
