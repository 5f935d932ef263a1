"""Base types and utilities for reading bibliographic input files."""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, NamedTuple

from bibaudit.errors import ParseError
from bibaudit.models import RawRecord
from bibaudit.utils import calculate_file_digest, get_file_mtime

__all__ = [
    "FileContext",
    "ParseResult",
    "ENTRY_START_PATTERN",
    "read_source",
    "detect_encoding",
    "normalize_line_endings",
    "count_entry_starts",
    "split_entry_chunks",
]

# Start of a data entry; @string, @preamble and @comment are not records
ENTRY_START_PATTERN = re.compile(
    r"^\s*@(?!(?:string|preamble|comment)\b)\w+\s*[{(]",
    re.IGNORECASE | re.MULTILINE,
)


@dataclass(frozen=True)
class FileContext:
    """Immutable context about the source file being parsed.

    Attributes
    ----------
    file_path : Path
        Path to the source file.
    file_digest : str
        SHA-256 digest of file bytes.
    file_mtime : str
        ISO8601 modification timestamp.
    file_size : int
        Size of file in bytes.
    encoding : str
        Encoding used to decode the file.
    """

    file_path: Path
    file_digest: str
    file_mtime: str
    file_size: int
    encoding: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for event logs."""
        return {
            "path": str(self.file_path),
            "sha256": self.file_digest,
            "bytes": self.file_size,
            "encoding": self.encoding,
            "mtime": self.file_mtime,
        }


class ParseResult(NamedTuple):
    """Result of parsing an input database.

    Supports tuple unpacking: ``records, context = parse_bibtex(...)``.

    Attributes
    ----------
    records : list[RawRecord]
        Parsed records, in input order.
    context : FileContext
        Source file metadata.
    """

    records: list[RawRecord]
    context: FileContext


def read_source(file_path: Path) -> tuple[str, FileContext]:
    """Read and decode an input file.

    Parameters
    ----------
    file_path : Path
        Path to the input file.

    Returns
    -------
    tuple[str, FileContext]
        Decoded text with LF line endings, and file metadata.

    Raises
    ------
    ParseError
        If the file does not exist, is not a regular file, or cannot be read.
    """
    if not file_path.exists():
        raise ParseError(f"File not found: {file_path}", file=str(file_path))
    if not file_path.is_file():
        raise ParseError(f"Not a file: {file_path}", file=str(file_path))

    try:
        file_bytes = file_path.read_bytes()
    except OSError as e:
        raise ParseError(f"Failed to read file: {e}", file=str(file_path)) from e

    encoding = detect_encoding(file_bytes)
    try:
        content = file_bytes.decode(encoding)
    except UnicodeDecodeError as e:
        raise ParseError(f"Failed to decode with {encoding}: {e}", file=str(file_path)) from e

    context = FileContext(
        file_path=file_path,
        file_digest=calculate_file_digest(file_bytes),
        file_mtime=get_file_mtime(file_path),
        file_size=len(file_bytes),
        encoding=encoding,
    )
    return normalize_line_endings(content), context


def detect_encoding(file_bytes: bytes) -> str:
    """Detect encoding of file bytes using deterministic strategy.

    Parameters
    ----------
    file_bytes : bytes
        Complete file content as bytes.

    Returns
    -------
    str
        Detected encoding (utf-8-sig, utf-8 or latin-1).
    """
    if file_bytes.startswith(b"\xef\xbb\xbf"):
        return "utf-8-sig"

    try:
        file_bytes.decode("utf-8")
        return "utf-8"
    except UnicodeDecodeError:
        pass

    return "latin-1"


def normalize_line_endings(content: str) -> str:
    """Normalize line endings to LF.

    Parameters
    ----------
    content : str
        Text content with potentially mixed line endings.

    Returns
    -------
    str
        Text with normalized line endings (\\n only).
    """
    content = content.replace("\r\n", "\n")
    return content.replace("\r", "\n")


def count_entry_starts(content: str) -> int:
    """Count data entry openers (``@type{``) in BibTeX text."""
    return len(ENTRY_START_PATTERN.findall(content))


def split_entry_chunks(content: str) -> tuple[str, list[str]]:
    """Split BibTeX text at data entry openers.

    Parameters
    ----------
    content : str
        BibTeX text.

    Returns
    -------
    tuple[str, list[str]]
        Text before the first entry (comments, ``@string`` definitions),
        and one chunk per entry running up to the next entry opener.
    """
    starts = [match.start() for match in ENTRY_START_PATTERN.finditer(content)]
    if not starts:
        return content, []
    ends = starts[1:] + [len(content)]
    return content[: starts[0]], [content[start:end] for start, end in zip(starts, ends)]
