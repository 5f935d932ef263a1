"""Common utility functions for bibaudit.

Hashing and timestamp helpers shared by the parser, audit and engine
packages.
"""

from bibaudit.utils.hashing import (
    calculate_file_digest,
    calculate_file_sha256,
    format_sha256,
)
from bibaudit.utils.timestamps import get_file_mtime, get_iso_timestamp

__all__ = [
    "get_iso_timestamp",
    "get_file_mtime",
    "calculate_file_sha256",
    "calculate_file_digest",
    "format_sha256",
]
