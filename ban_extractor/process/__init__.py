# Path: ban_extractor/process/__init__.py
"""
PROCESS Layer

Record matching and re-serialization of the matched fragment.

Components:
    - serializer: StructuralEvent -> XML text
    - record_matcher: Record boundary / BAN match state machine
"""

from .serializer import escape_xml, render_event
from .record_matcher import RecordMatcher, IdentifierObserver

__all__ = [
    'escape_xml',
    'render_event',
    'RecordMatcher',
    'IdentifierObserver',
]
