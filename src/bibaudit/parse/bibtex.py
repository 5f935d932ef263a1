"""BibTeX input adapter.

The markup itself is parsed by ``bibtexparser``; this module only maps
its entries to ``RawRecord`` objects and turns parser failures into
``ParseError``. bibtexparser drops entries it cannot read without
reporting them, so when fewer entries come back than the text declares,
each entry is parsed on its own and the unreadable ones are kept as
malformed records.
"""

import re
from pathlib import Path
from typing import Any

import bibtexparser
from bibtexparser.bparser import BibTexParser

from bibaudit.errors import ParseError
from bibaudit.models import DEFAULT_KEY, RawRecord
from bibaudit.parse.base import (
    ParseResult,
    count_entry_starts,
    read_source,
    split_entry_chunks,
)

__all__ = [
    "parse_bibtex",
    "parse_bibtex_string",
    "entry_to_record",
    "malformed_record",
]

# Keys bibtexparser adds to every entry dict
ENTRY_TYPE_KEY = "ENTRYTYPE"
ENTRY_ID_KEY = "ID"

# Type tag and citation key of an entry opener, e.g. "@book{knuth1984,"
ENTRY_HEADER_PATTERN = re.compile(r"@\s*(\w+)\s*[{(]\s*([^,\s{}()]*)")


def _make_parser() -> BibTexParser:
    # Keep non-standard types such as www; the registry decides which are defined
    return BibTexParser(common_strings=True, ignore_nonstandard_types=False)


def _load_entries(content: str, source: str | None) -> list[dict[str, Any]]:
    try:
        database = bibtexparser.loads(content, parser=_make_parser())
    except Exception as e:
        raise ParseError(f"Parser exception: {e}", file=source) from e
    return database.entries


def entry_to_record(entry: dict[str, Any], index: int) -> RawRecord:
    """Convert one bibtexparser entry dict to a RawRecord.

    Parameters
    ----------
    entry : dict[str, Any]
        Entry with ``ENTRYTYPE``, ``ID`` and field keys, as returned by
        bibtexparser.
    index : int
        0-based position of the entry in the input.

    Returns
    -------
    RawRecord
        Immutable record; a missing citation key becomes ``DEFAULT_KEY``.
    """
    # bibtexparser 1.x returns fields last-to-first
    fields = {
        name: str(value)
        for name, value in reversed(list(entry.items()))
        if name not in (ENTRY_TYPE_KEY, ENTRY_ID_KEY)
    }
    return RawRecord(
        entry_type=str(entry.get(ENTRY_TYPE_KEY, "")),
        key=str(entry.get(ENTRY_ID_KEY) or DEFAULT_KEY),
        fields=fields,
        index=index,
    )


def malformed_record(chunk: str, index: int) -> RawRecord:
    """Build a record for an entry the parser could not read.

    Type tag and citation key are taken from the entry opener when it
    has them; the raw text is kept for the audit log.
    """
    header = ENTRY_HEADER_PATTERN.search(chunk)
    entry_type = header.group(1) if header else ""
    key = header.group(2) if header else DEFAULT_KEY
    return RawRecord(entry_type=entry_type, key=key, index=index, source_text=chunk.strip())


def _parse_entry_by_entry(content: str, source: str | None) -> list[RawRecord]:
    prelude, chunks = split_entry_chunks(content)
    records: list[RawRecord] = []
    for chunk in chunks:
        try:
            entries = _load_entries(prelude + chunk, source)
        except ParseError:
            entries = []

        if not entries:
            records.append(malformed_record(chunk, len(records)))
            continue
        for entry in entries:
            records.append(entry_to_record(entry, len(records)))
    return records


def parse_bibtex_string(content: str, source: str | None = None) -> list[RawRecord]:
    """Parse BibTeX text into records.

    Parameters
    ----------
    content : str
        BibTeX text.
    source : str | None, optional
        Source name used in error messages.

    Returns
    -------
    list[RawRecord]
        Records in input order. Empty for blank input or input holding
        only comments, strings and preambles. Entries the parser skipped
        are returned as malformed records in their input position.

    Raises
    ------
    ParseError
        If the parser fails, or if the text declares entries but none of
        them could be parsed.
    """
    if not content.strip():
        return []

    entries = _load_entries(content, source)

    declared = count_entry_starts(content)
    if declared and not entries:
        raise ParseError(
            f"Malformed input: {declared} entries declared, none could be parsed",
            file=source,
        )

    if len(entries) < declared:
        return _parse_entry_by_entry(content, source)

    return [entry_to_record(entry, index) for index, entry in enumerate(entries)]


def parse_bibtex(file_path: Path | str) -> ParseResult:
    """Read and parse a BibTeX file.

    Parameters
    ----------
    file_path : Path | str
        Path to the BibTeX database.

    Returns
    -------
    ParseResult
        Records and source file metadata.

    Raises
    ------
    ParseError
        If the file is missing, unreadable or malformed.
    """
    path = Path(file_path)
    content, context = read_source(path)
    records = parse_bibtex_string(content, source=str(path))
    return ParseResult(records, context)
