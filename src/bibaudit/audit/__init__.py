"""Audit trail for bibaudit runs.

Main Components
---------------
- AuditSink: Spreadsheet log with one flagged row per record
- AuditLogger: JSONL event logger
"""

from bibaudit.audit.helpers import generate_run_id
from bibaudit.audit.logger import AuditLogger
from bibaudit.audit.sink import HEADER, AuditSink

__all__ = [
    "AuditSink",
    "AuditLogger",
    "HEADER",
    "generate_run_id",
]
