# Path: ban_extractor/models/__init__.py
"""
Data Models

Events, scan state and the error taxonomy shared by all layers.
"""

from .events import ElementOpen, Text, ElementClose, StructuralEvent
from .scan_state import ScanPhase, ScanState
from .error import (
    ErrorSeverity,
    ErrorCategory,
    ExtractionError,
    InputTooSmallError,
    MalformedXmlError,
    InputUnavailableError,
    OutputUnavailableError,
)

__all__ = [
    # Events
    'ElementOpen',
    'Text',
    'ElementClose',
    'StructuralEvent',

    # Scan state
    'ScanPhase',
    'ScanState',

    # Errors
    'ErrorSeverity',
    'ErrorCategory',
    'ExtractionError',
    'InputTooSmallError',
    'MalformedXmlError',
    'InputUnavailableError',
    'OutputUnavailableError',
]
