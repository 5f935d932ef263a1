"""Record data models for bibaudit.

This module defines the in-memory representation of a bibliographic
record, both as parsed from the input database and as canonicalized
against its schema rule.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Any

from bibaudit.models.outcomes import Outcome, OutcomeStatus

__all__ = [
    "DEFAULT_KEY",
    "MISSING_VALUE",
    "RawRecord",
    "CanonicalRecord",
    "AuditFlag",
    "AuditRow",
    "EvaluationResult",
    "render_entry",
]

# Identifier used when an entry carries no citation key
DEFAULT_KEY = "unknown"

# Placeholder rendered for required fields that are absent
MISSING_VALUE = "null"


def render_entry(entry_type: str, key: str, pairs: Iterable[tuple[str, str]]) -> str:
    """Render an entry as a type header, one line per field, and a closer.

    Parameters
    ----------
    entry_type : str
        Entry type tag written in the header.
    key : str
        Citation key written in the header.
    pairs : Iterable[tuple[str, str]]
        Ordered (field name, value) pairs.

    Returns
    -------
    str
        Entry text. The last field line carries no trailing separator.
    """
    field_lines = [f"  {name} = {{{value}}}" for name, value in pairs]
    body = ",\n".join(field_lines)
    if body:
        return f"@{entry_type}{{{key},\n{body}\n}}"
    return f"@{entry_type}{{{key},\n}}"


@dataclass(frozen=True)
class RawRecord:
    """One bibliographic entry as parsed from the input.

    Attributes
    ----------
    entry_type : str
        Entry type tag as written in the source (compared case-insensitively).
    key : str
        Citation key, or ``DEFAULT_KEY`` when absent.
    fields : Mapping[str, str]
        Read-only mapping of lower-cased field name to raw value.
    index : int
        0-based position of the entry in the input.
    source_text : str | None
        Raw entry text, set only when the parser could not read the entry.
    """

    entry_type: str
    key: str = DEFAULT_KEY
    fields: Mapping[str, str] = field(default_factory=dict)
    index: int = 0
    source_text: str | None = None

    def __post_init__(self) -> None:
        key = (self.key or "").strip() or DEFAULT_KEY
        normalized = {str(name).strip().lower(): str(value) for name, value in self.fields.items()}
        object.__setattr__(self, "key", key)
        object.__setattr__(self, "fields", MappingProxyType(normalized))

    @property
    def type_tag(self) -> str:
        """Lower-cased entry type used for schema lookup."""
        return self.entry_type.strip().lower()

    def get(self, name: str) -> str | None:
        """Return the raw value of a field, or None if absent."""
        return self.fields.get(name.lower())

    @property
    def is_malformed(self) -> bool:
        return self.source_text is not None

    def has_value(self, name: str) -> bool:
        """Check whether a field is present with a non-blank value."""
        value = self.get(name)
        return value is not None and bool(value.strip())

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "entry_type": self.entry_type,
            "key": self.key,
            "fields": dict(self.fields),
            "index": self.index,
            "source_text": self.source_text,
        }


@dataclass(frozen=True)
class CanonicalRecord:
    """Schema-ordered rewrite of a record.

    Attributes
    ----------
    entry_type : str
        Output type tag (may differ from the source, e.g. ``misc`` -> ``www``).
    key : str
        Citation key.
    fields : tuple[tuple[str, str], ...]
        (name, value) pairs in the rule's required order. Absent values
        are ``MISSING_VALUE``.
    """

    entry_type: str
    key: str
    fields: tuple[tuple[str, str], ...]

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(name for name, _ in self.fields)

    def get(self, name: str) -> str | None:
        for field_name, value in self.fields:
            if field_name == name:
                return value
        return None

    def render(self) -> str:
        """Render canonical text: header line plus one line per required field."""
        return render_entry(self.entry_type, self.key, self.fields)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "entry_type": self.entry_type,
            "key": self.key,
            "fields": [list(pair) for pair in self.fields],
        }


class AuditFlag(StrEnum):
    """Visual severity flag of an audit row."""

    NONE = "none"
    WARNING = "warning"
    ERROR = "error"

    @classmethod
    def from_description(cls, description: str) -> "AuditFlag":
        """Derive the flag from the leading marker of an outcome description."""
        marker = description.strip().lower()
        if marker.startswith(OutcomeStatus.ERROR.value):
            return cls.ERROR
        if marker.startswith(OutcomeStatus.WARNING.value):
            return cls.WARNING
        return cls.NONE


@dataclass(frozen=True)
class AuditRow:
    """One logged audit entry.

    Attributes
    ----------
    original : str
        Textual rendering of the record as parsed.
    updated : str
        Canonical rendering of the record.
    record : str
        Outcome description.
    flag : AuditFlag
        Visual severity flag.
    """

    original: str
    updated: str
    record: str
    flag: AuditFlag = AuditFlag.NONE

    @classmethod
    def from_texts(cls, original: str, updated: str, description: str) -> "AuditRow":
        return cls(
            original=original,
            updated=updated,
            record=description,
            flag=AuditFlag.from_description(description),
        )

    def as_cells(self) -> tuple[str, str, str]:
        return (self.original, self.updated, self.record)


@dataclass(frozen=True)
class EvaluationResult:
    """Result of evaluating one record against the schema registry.

    Attributes
    ----------
    record : RawRecord
        Evaluated input record.
    outcome : Outcome
        Classified outcome.
    canonical : CanonicalRecord | None
        Canonical rewrite, None when the type is undefined.
    rule_name : str | None
        Name of the rule applied, None when the type is undefined.
    """

    record: RawRecord
    outcome: Outcome
    canonical: CanonicalRecord | None
    rule_name: str | None = None

    def canonical_text(self) -> str:
        """Render the canonical text, best-effort for undefined types.

        Records with an undefined type have no rule; they render as a bare
        header with the source type and key so every record still yields
        output.
        """
        if self.canonical is not None:
            return self.canonical.render()
        return render_entry(self.record.type_tag, self.record.key, ())
