"""BibTeX database ingestion.

Main entry points:
- parse_bibtex: Read and parse a BibTeX file
- parse_bibtex_string: Parse BibTeX text already in memory
"""

from bibaudit.parse.base import FileContext, ParseResult
from bibaudit.parse.bibtex import (
    entry_to_record,
    malformed_record,
    parse_bibtex,
    parse_bibtex_string,
)

__all__ = [
    "FileContext",
    "ParseResult",
    "parse_bibtex",
    "parse_bibtex_string",
    "entry_to_record",
    "malformed_record",
]
