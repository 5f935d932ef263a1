"""Schema-driven validation and normalization of records.

``evaluate`` applies the registry to one record and returns its outcome
together with the canonical rewrite. All functions are pure and
deterministic: the result depends only on the record and the registry.
"""

from collections.abc import Iterable, Iterator

from bibaudit.models import (
    MALFORMED_ENTRY_REASON,
    MISSING_VALUE,
    UNDEFINED_TYPE_REASON,
    CanonicalRecord,
    EvaluationResult,
    Outcome,
    RawRecord,
    SchemaErrorKind,
)
from bibaudit.schema import SchemaRegistry, SchemaRule, default_registry

__all__ = [
    "evaluate",
    "evaluate_all",
    "build_canonical",
    "find_missing_fields",
    "classify",
]

_DEFAULT_REGISTRY: SchemaRegistry | None = None


def _get_default_registry() -> SchemaRegistry:
    global _DEFAULT_REGISTRY
    if _DEFAULT_REGISTRY is None:
        _DEFAULT_REGISTRY = default_registry()
    return _DEFAULT_REGISTRY


def build_canonical(record: RawRecord, rule: SchemaRule) -> CanonicalRecord:
    """Build the canonical rewrite of a record under a rule.

    Every required field yields exactly one pair, in rule order. Absent
    fields are rendered with the ``null`` placeholder rather than omitted.

    Parameters
    ----------
    record : RawRecord
        Parsed record.
    rule : SchemaRule
        Rule selected for the record.

    Returns
    -------
    CanonicalRecord
        Fixed-shape canonical record.
    """
    pairs: list[tuple[str, str]] = []
    for name in rule.required:
        value = record.get(name)
        pairs.append((name, MISSING_VALUE if value is None else value))
    return CanonicalRecord(entry_type=rule.output_type, key=record.key, fields=tuple(pairs))


def find_missing_fields(record: RawRecord, rule: SchemaRule) -> list[str]:
    """List required fields that are absent or blank, in rule order."""
    return [name for name in rule.required if not record.has_value(name)]


def classify(record: RawRecord, rule: SchemaRule) -> Outcome:
    """Classify a record under a rule.

    Missing fields take priority over format mismatches, which take
    priority over demotion.

    Parameters
    ----------
    record : RawRecord
        Parsed record.
    rule : SchemaRule
        Rule selected for the record.

    Returns
    -------
    Outcome
        ``error`` for missing fields, ``warning`` for a format mismatch or
        a demoted rule, ``ok`` otherwise.
    """
    missing = find_missing_fields(record, rule)
    if missing:
        return Outcome.error(
            f"missing fields: {', '.join(missing)}",
            kind=SchemaErrorKind.MISSING_FIELDS,
        )

    constraint = rule.constraint
    if constraint is not None and not constraint.check(record.get(constraint.field)):
        return Outcome.warning(constraint.failure_reason, kind=SchemaErrorKind.FORMAT_MISMATCH)

    if rule.demote_reason:
        return Outcome.warning(rule.demote_reason, kind=SchemaErrorKind.DEMOTED_OK)

    return Outcome.ok()


def evaluate(record: RawRecord, registry: SchemaRegistry | None = None) -> EvaluationResult:
    """Validate a record and produce its canonical rewrite.

    Parameters
    ----------
    record : RawRecord
        Parsed record.
    registry : SchemaRegistry | None, optional
        Rule registry, by default the standard registry.

    Returns
    -------
    EvaluationResult
        Outcome, canonical record (None for malformed entries and undefined
        types) and rule name.

    Examples
    --------
        >>> rec = RawRecord("book", "knuth", {"author": "Knuth", "title": "TAOCP"})
        >>> evaluate(rec).outcome.describe()
        'error: missing fields: publisher, year, address, edition'
    """
    if record.is_malformed:
        return EvaluationResult(
            record=record,
            outcome=Outcome.error(MALFORMED_ENTRY_REASON, kind=SchemaErrorKind.MALFORMED_ENTRY),
            canonical=None,
        )

    if registry is None:
        registry = _get_default_registry()

    rule = registry.lookup(record.type_tag, record)
    if rule is None:
        return EvaluationResult(
            record=record,
            outcome=Outcome.error(UNDEFINED_TYPE_REASON, kind=SchemaErrorKind.UNKNOWN_TYPE),
            canonical=None,
        )

    return EvaluationResult(
        record=record,
        outcome=classify(record, rule),
        canonical=build_canonical(record, rule),
        rule_name=rule.name,
    )


def evaluate_all(
    records: Iterable[RawRecord],
    registry: SchemaRegistry | None = None,
) -> Iterator[EvaluationResult]:
    """Evaluate records lazily, in input order."""
    if registry is None:
        registry = _get_default_registry()
    for record in records:
        yield evaluate(record, registry)
