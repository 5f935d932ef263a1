"""Schema-driven validation and canonical rewriting of BibTeX databases.

This package provides:
- Data models (bibaudit.models): records, outcomes, audit rows
- Schema registry (bibaudit.schema): per-type required fields and constraints
- Validation (bibaudit.validate): evaluation and canonical rendering
- Parsing (bibaudit.parse): BibTeX ingestion
- Audit (bibaudit.audit): spreadsheet audit log and JSONL event log
- Engine (bibaudit.engine): batch orchestration
- CLI (bibaudit.cli): command-line interface
- Public API (bibaudit.api): high-level convenience functions
"""

__version__ = "0.1.0"
__license__ = "MIT"

from bibaudit.api import ParseError, check_file, parse_file, run
from bibaudit.models import CanonicalRecord, Outcome, RawRecord
from bibaudit.validate import evaluate

__all__ = [
    "__version__",
    "__license__",
    "RawRecord",
    "CanonicalRecord",
    "Outcome",
    "parse_file",
    "check_file",
    "evaluate",
    "run",
    "ParseError",
]
