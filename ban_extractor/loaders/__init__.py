# Path: ban_extractor/loaders/__init__.py
"""
INPUT Layer

Input sources, compression sniffing and XML tokenization.

Components:
    - local_source: Local filesystem input
    - ssh_source: SFTP input over an authenticated SSH session
    - stream_detector: gzip magic sniffing, on-the-fly decompression
    - xml_events: Forward-only StructuralEvent stream (lxml feed parser)
"""

from .local_source import open_local_source
from .ssh_source import SSHSource, mask_secret
from .stream_detector import open_decoded_stream, is_gzip, read_head
from .xml_events import iter_events

__all__ = [
    'open_local_source',
    'SSHSource',
    'mask_secret',
    'open_decoded_stream',
    'is_gzip',
    'read_head',
    'iter_events',
]
