"""Batch orchestration engine.

This package provides the entry point for running a validation batch,
including configuration and result types.
"""

from bibaudit.engine.config import BatchConfig, BatchResult
from bibaudit.engine.runner import NO_RECORDS_MESSAGE, run_batch

__all__ = [
    "BatchConfig",
    "BatchResult",
    "NO_RECORDS_MESSAGE",
    "run_batch",
]
