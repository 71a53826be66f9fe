# Path: ban_extractor/core/logger/__init__.py
"""
ban_extractor Logger Package

IPO-aware logging for the record extractor.

Provides separate log streams for:
- INPUT layer (input sources, tokenizer)
- PROCESS layer (record matching)
- OUTPUT layer (codecs, naming)
"""

from .ipo_logging import (
    IPOFilter,
    setup_ipo_logging,
    get_input_logger,
    get_process_logger,
    get_output_logger,
)

__all__ = [
    'IPOFilter',
    'setup_ipo_logging',
    'get_input_logger',
    'get_process_logger',
    'get_output_logger',
]
