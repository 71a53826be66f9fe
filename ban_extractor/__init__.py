# Path: ban_extractor/__init__.py
"""
ban_extractor

Streaming extraction of a single billing account (BAN) record from large,
optionally gzip-compressed, XML bill extracts.

Example:
    from ban_extractor import Extractor

    result = Extractor('1002', 'bills.xml.gz', file_format='ZIP').run_local()
    print(result.found, result.output_path)
"""

from .constants import FileFormat
from .extractor import Extractor, ExtractionResult, extract_record
from .models.error import (
    ExtractionError,
    InputTooSmallError,
    MalformedXmlError,
    InputUnavailableError,
    OutputUnavailableError,
)

__version__ = '1.0.0'

__all__ = [
    'FileFormat',
    'Extractor',
    'ExtractionResult',
    'extract_record',
    'ExtractionError',
    'InputTooSmallError',
    'MalformedXmlError',
    'InputUnavailableError',
    'OutputUnavailableError',
]
