"""Validation and normalization of records against the schema registry."""

from bibaudit.validate.evaluator import (
    build_canonical,
    classify,
    evaluate,
    evaluate_all,
    find_missing_fields,
)
from bibaudit.validate.render import render_original

__all__ = [
    "evaluate",
    "evaluate_all",
    "build_canonical",
    "classify",
    "find_missing_fields",
    "render_original",
]
