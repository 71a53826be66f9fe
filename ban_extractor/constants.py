# Path: ban_extractor/constants.py
"""
System-Wide Constants for ban_extractor

Central repository for constant values used across the extractor.
NO HARDCODED VALUES in module code - all constants defined here.

Constants are organized by category:
- Record Structure
- Compression
- Output Formats
- Display Formatting
- Logging Categories
"""

from enum import Enum
from typing import Final


# ==============================================================================
# RECORD STRUCTURE
# ==============================================================================

# Element that opens one billing record in the extract
DEFAULT_RECORD_TAG: Final[str] = 'att:MixedBillService'

# Child element carrying the billing account number (BAN)
DEFAULT_IDENTIFIER_TAG: Final[str] = 'TITAN_BAN'

# Written once, in front of the matched record
XML_DECLARATION: Final[str] = '<?xml version="1.0" encoding="UTF-8"?>'

OUTPUT_ENCODING: Final[str] = 'utf-8'


# ==============================================================================
# COMPRESSION
# ==============================================================================

# gzip member header: ID1, ID2, CM (deflate)
GZIP_MAGIC: Final[bytes] = b'\x1f\x8b\x08'
GZIP_MAGIC_LENGTH: Final[int] = len(GZIP_MAGIC)

DEFAULT_READ_CHUNK_SIZE: Final[int] = 64 * 1024
DEFAULT_ZIP_COMPRESSION_LEVEL: Final[int] = 9

# Input extensions dropped when deriving an output file name
STRIPPED_INPUT_EXTENSIONS: Final[tuple[str, ...]] = ('gz', 'xml')


# ==============================================================================
# OUTPUT FORMATS
# ==============================================================================

class FileFormat(str, Enum):
    """
    Output file formats.

    XML writes the record as-is, ZIP and GZIP compress it on the fly.
    """
    XML = 'XML'
    ZIP = 'ZIP'
    GZIP = 'GZIP'

    @property
    def extension(self) -> str:
        """File extension appended to derived output names."""
        return FILE_FORMAT_EXTENSIONS[self]

    @classmethod
    def parse(cls, value: str) -> 'FileFormat':
        """
        Parse a format name, case-insensitive.

        Args:
            value: Format name such as 'xml', 'ZIP' or 'Gzip'

        Returns:
            FileFormat enum value

        Raises:
            ValueError: If the name is not a supported format
        """
        try:
            return cls(value.strip().upper())
        except ValueError:
            supported = ' '.join(f.value for f in cls)
            raise ValueError(
                f"Output file format must be one of the following: {supported}"
            ) from None


FILE_FORMAT_EXTENSIONS: Final[dict[FileFormat, str]] = {
    FileFormat.XML: '',
    FileFormat.ZIP: '.zip',
    FileFormat.GZIP: '.gz',
}


# ==============================================================================
# SSH DEFAULTS
# ==============================================================================

DEFAULT_SSH_PORT: Final[int] = 22
DEFAULT_SSH_TIMEOUT: Final[int] = 30
DEFAULT_SSH_MAX_RETRIES: Final[int] = 3


# ==============================================================================
# DISPLAY FORMATTING
# ==============================================================================

MENU_WIDTH: Final[int] = 60
MENU_HEADER: Final[str] = '=' * MENU_WIDTH

# Fallback when the terminal size cannot be detected
DEFAULT_TERMINAL_WIDTH: Final[int] = 80

# Status indicators (ASCII only - no emojis)
STATUS_OK: Final[str] = '[OK]'
STATUS_FAIL: Final[str] = '[FAIL]'


# ==============================================================================
# EXIT CODES
# ==============================================================================

EXIT_OK: Final[int] = 0
EXIT_FAILURE: Final[int] = 1
EXIT_INTERRUPTED: Final[int] = 130


# ==============================================================================
# LOGGING CATEGORIES
# ==============================================================================

class LogCategory(str, Enum):
    """
    IPO logging categories for ban_extractor.
    """
    INPUT = 'input'
    PROCESS = 'process'
    OUTPUT = 'output'


# ==============================================================================
# EXPORTS
# ==============================================================================

__all__ = [
    # Enums
    'FileFormat',
    'LogCategory',

    # Record structure
    'DEFAULT_RECORD_TAG',
    'DEFAULT_IDENTIFIER_TAG',
    'XML_DECLARATION',
    'OUTPUT_ENCODING',

    # Compression
    'GZIP_MAGIC',
    'GZIP_MAGIC_LENGTH',
    'DEFAULT_READ_CHUNK_SIZE',
    'DEFAULT_ZIP_COMPRESSION_LEVEL',
    'STRIPPED_INPUT_EXTENSIONS',
    'FILE_FORMAT_EXTENSIONS',

    # SSH
    'DEFAULT_SSH_PORT',
    'DEFAULT_SSH_TIMEOUT',
    'DEFAULT_SSH_MAX_RETRIES',

    # Display
    'MENU_WIDTH',
    'MENU_HEADER',
    'DEFAULT_TERMINAL_WIDTH',
    'STATUS_OK',
    'STATUS_FAIL',

    # Exit codes
    'EXIT_OK',
    'EXIT_FAILURE',
    'EXIT_INTERRUPTED',
]
