# Path: ban_extractor/output/__init__.py
"""
OUTPUT Layer

Output file naming and on-the-fly compression of the extracted record.
"""

from .codecs import open_destination, open_output_writer
from .naming import derive_archive_name, entry_name_for, resolve_output_path

__all__ = [
    'open_destination',
    'open_output_writer',
    'derive_archive_name',
    'entry_name_for',
    'resolve_output_path',
]
