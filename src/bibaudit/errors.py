"""Exception hierarchy for bibaudit.

Per-record schema problems are reported as outcomes, not exceptions.
Only conditions that stop a whole run are raised.
"""

__all__ = ["BibauditError", "ParseError", "ConfigError"]


class BibauditError(Exception):
    """Base class for all bibaudit errors."""


class ParseError(BibauditError):
    """Raised when the input database is missing or cannot be parsed."""

    def __init__(
        self,
        message: str,
        file: str | None = None,
    ) -> None:
        """Initialize parse error.

        Parameters
        ----------
        message : str
            Error message.
        file : str | None, optional
            File where error occurred.
        """
        super().__init__(message)
        self.file = file


class ConfigError(BibauditError, ValueError):
    """Raised when a batch configuration is invalid."""
