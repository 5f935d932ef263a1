"""Declarative schema rules.

A rule fixes the output type of a record, the ordered list of fields it
must carry, an optional format constraint on one of those fields, and an
optional reason to demote an otherwise clean record to a warning.
"""

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from bibaudit.models import RawRecord

__all__ = [
    "FormatConstraint",
    "SchemaRule",
    "SubstringSwitch",
    "PARENTHESIZED_SUFFIX_RE",
    "ARXIV_JOURNAL_RE",
]

# Value ends with a parenthesized segment, e.g. "1--20 (2019)"
PARENTHESIZED_SUFFIX_RE = re.compile(r"\([^()]*\)\s*$")

# arXiv journal reference, e.g. "arXiv preprint arXiv:1706.03762"
ARXIV_JOURNAL_RE = re.compile(r"^arXiv preprint arXiv:\d{4}\.\d{5}")


@dataclass(frozen=True)
class FormatConstraint:
    """Pattern a single field's raw value must match.

    Attributes
    ----------
    field : str
        Name of the constrained field.
    pattern : re.Pattern[str]
        Compiled pattern, tested with ``search`` on the stripped value.
    description : str
        Short description for documentation and listings.
    """

    field: str
    pattern: re.Pattern[str]
    description: str = ""

    def check(self, value: str | None) -> bool:
        """Test a raw value against the pattern.

        Parameters
        ----------
        value : str | None
            Raw field value.

        Returns
        -------
        bool
            True if the value matches; absent values never match.
        """
        if value is None:
            return False
        return self.pattern.search(value.strip()) is not None

    @property
    def failure_reason(self) -> str:
        return f"{self.field} format error"


@dataclass(frozen=True)
class SchemaRule:
    """Validation and normalization rule for one record type.

    Attributes
    ----------
    name : str
        Rule identifier (e.g. ``article_arxiv``).
    output_type : str
        Type tag written in the canonical rendering.
    required : tuple[str, ...]
        Required field names, in canonical output order.
    constraint : FormatConstraint | None
        Optional format constraint on one required field.
    demote_reason : str | None
        If set, a record that passes all checks is reported as a warning
        with this reason.
    """

    name: str
    output_type: str
    required: tuple[str, ...]
    constraint: FormatConstraint | None = None
    demote_reason: str | None = None

    def __post_init__(self) -> None:
        if not self.required:
            raise ValueError(f"Rule {self.name!r} must require at least one field")
        if len(set(self.required)) != len(self.required):
            raise ValueError(f"Rule {self.name!r} lists a required field twice")
        if self.constraint is not None and self.constraint.field not in self.required:
            raise ValueError(
                f"Rule {self.name!r} constrains {self.constraint.field!r}, "
                "which is not a required field"
            )

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "output_type": self.output_type,
            "required": list(self.required),
            "constraint": (
                {
                    "field": self.constraint.field,
                    "pattern": self.constraint.pattern.pattern,
                    "description": self.constraint.description,
                }
                if self.constraint is not None
                else None
            ),
            "demote_reason": self.demote_reason,
        }


@dataclass(frozen=True)
class SubstringSwitch:
    """Choose between two rules on a substring of one field.

    The match is case-insensitive; an absent field never matches.

    Attributes
    ----------
    field : str
        Field inspected on the raw record.
    needle : str
        Substring that selects ``matched``.
    matched : SchemaRule
        Rule used when the field contains ``needle``.
    otherwise : SchemaRule
        Rule used in every other case.
    """

    field: str
    needle: str
    matched: SchemaRule
    otherwise: SchemaRule

    def __call__(self, record: "RawRecord") -> SchemaRule:
        value = record.get(self.field) or ""
        if self.needle.lower() in value.lower():
            return self.matched
        return self.otherwise

    @property
    def candidates(self) -> tuple[SchemaRule, ...]:
        return (self.otherwise, self.matched)
