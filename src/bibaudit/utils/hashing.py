"""Hashing utilities for bibaudit."""

import hashlib
from pathlib import Path

__all__ = [
    "format_sha256",
    "calculate_file_sha256",
    "calculate_file_digest",
]


def format_sha256(hex_digest: str) -> str:
    """Format SHA256 hash with standard prefix.

    Parameters
    ----------
    hex_digest : str
        Raw hexadecimal digest.

    Returns
    -------
    str
        Formatted hash with "sha256:" prefix.
    """
    return f"sha256:{hex_digest}"


def calculate_file_sha256(path: Path) -> str:
    """Calculate SHA256 hash of a file, reading it in chunks.

    Parameters
    ----------
    path : Path
        Path to file.

    Returns
    -------
    str
        SHA256 hash with "sha256:" prefix.

    Raises
    ------
    FileNotFoundError
        If file does not exist.
    """
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    sha256_hash = hashlib.sha256()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(65536), b""):
            sha256_hash.update(chunk)
    return format_sha256(sha256_hash.hexdigest())


def calculate_file_digest(file_bytes: bytes) -> str:
    """Calculate SHA256 hash of file contents already in memory."""
    return format_sha256(hashlib.sha256(file_bytes).hexdigest())
