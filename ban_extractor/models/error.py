# Path: ban_extractor/models/error.py
"""
Error Handling System

Error classification for record extraction.

This module defines:
- Error severity levels (CRITICAL, ERROR, WARNING, INFO)
- Error categories
- The exception hierarchy raised by the extractor

Every exception here is fatal for the run: it is raised where the problem
is detected and propagates unchanged to the caller. A BAN that is not
present in the input is not an error; it is reported through
ExtractionResult.found.
"""

from enum import Enum
from typing import Optional


# ==============================================================================
# ERROR SEVERITY LEVELS
# ==============================================================================

class ErrorSeverity(Enum):
    """
    Error severity classification.

    Levels:
        CRITICAL: Cannot continue, fatal errors (e.g., file not found, corrupt XML)
        ERROR: Operation failed but the process may continue
        WARNING: Unusual pattern, worth reviewing
        INFO: Informational
    """
    CRITICAL = "CRITICAL"
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"

    def __str__(self) -> str:
        return self.value


# ==============================================================================
# ERROR CATEGORIES
# ==============================================================================

class ErrorCategory(Enum):
    """
    Error category classification for grouping related errors.
    """
    # Input
    INPUT_TOO_SMALL = "INPUT_TOO_SMALL"
    INPUT_UNAVAILABLE = "INPUT_UNAVAILABLE"

    # XML Structure
    XML_MALFORMED = "XML_MALFORMED"

    # Output
    OUTPUT_UNAVAILABLE = "OUTPUT_UNAVAILABLE"

    # Other
    UNKNOWN = "UNKNOWN"

    def __str__(self) -> str:
        return self.value


# ==============================================================================
# EXCEPTIONS
# ==============================================================================

class ExtractionError(Exception):
    """
    Base class for all extractor errors.

    Attributes:
        message: Human-readable description
        category: Error category
        severity: Error severity
        source: File name, remote path or URL the error relates to
    """

    category: ErrorCategory = ErrorCategory.UNKNOWN
    severity: ErrorSeverity = ErrorSeverity.CRITICAL

    def __init__(self, message: str, source: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.source = source

    def __str__(self) -> str:
        if self.source:
            return f"{self.message} [{self.source}]"
        return self.message

    def to_dict(self) -> dict:
        """Convert to dictionary for logging and reporting."""
        return {
            'category': str(self.category),
            'severity': str(self.severity),
            'message': self.message,
            'source': self.source,
        }


class InputTooSmallError(ExtractionError):
    """Fewer bytes than the gzip magic length are available for sniffing."""
    category = ErrorCategory.INPUT_TOO_SMALL


class MalformedXmlError(ExtractionError):
    """Input bytes are not well-formed XML."""
    category = ErrorCategory.XML_MALFORMED

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        line: Optional[int] = None,
        column: Optional[int] = None
    ):
        super().__init__(message, source)
        self.line = line
        self.column = column

    def to_dict(self) -> dict:
        result = super().to_dict()
        result['line'] = self.line
        result['column'] = self.column
        return result


class InputUnavailableError(ExtractionError):
    """Local file missing or unreadable, or remote fetch / authentication failed."""
    category = ErrorCategory.INPUT_UNAVAILABLE


class OutputUnavailableError(ExtractionError):
    """Destination cannot be opened for writing."""
    category = ErrorCategory.OUTPUT_UNAVAILABLE


__all__ = [
    'ErrorSeverity',
    'ErrorCategory',
    'ExtractionError',
    'InputTooSmallError',
    'MalformedXmlError',
    'InputUnavailableError',
    'OutputUnavailableError',
]
