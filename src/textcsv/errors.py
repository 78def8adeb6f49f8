"""
Exception hierarchy for text/CSV classification and parsing.

Every exception inherits from TextCSVError so callers can catch broadly or
narrowly.  Setup problems (configuration, unusable sources) are raised before
any output is produced; parse problems are raised after every open output
scope has been closed.
"""

from __future__ import annotations


class TextCSVError(Exception):
    """Base exception for all textcsv errors."""

    def __init__(self, message: str, *, details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message)


class ConfigurationError(TextCSVError):
    """The delimiter map or another setting is malformed."""
    pass


class UnsupportedSourceError(TextCSVError):
    """The source cannot mark and reset over the range the sniffer needs."""
    pass


class ParseError(TextCSVError):
    """Tabular parsing of the document failed."""

    def __init__(self, message: str, *, rows_emitted: int = 0, **kwargs) -> None:
        self.rows_emitted = rows_emitted
        super().__init__(message, **kwargs)


class EncapsulationParseError(ParseError):
    """A quoted field was opened but never closed.

    The output handed to the content handler is complete and well-formed when
    this is raised: the rows read so far, followed by a fallback text block.
    """
    pass


class OtherParseError(ParseError):
    """Any other tabular parse failure; no fallback output was attempted."""
    pass
