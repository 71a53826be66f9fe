# Path: ban_extractor/core/ui/progress.py
"""
Identifier Progress Display

Echoes every BAN seen during the scan, space separated and wrapped to the
terminal width, so the operator can watch a long extract being scanned.
"""

import shutil
import sys
from typing import Optional, TextIO

from ...constants import DEFAULT_TERMINAL_WIDTH


class IdentifierProgress:
    """
    Word-wrapping console echo of scanned identifiers.

    Used as the identifier observer of the record matcher. Call finish()
    before logging anything else so the log line starts on a fresh line.

    Example:
        progress = IdentifierProgress()
        progress.show('1001')
        progress.show('1002')
        progress.finish()
    """

    def __init__(self, stream: Optional[TextIO] = None, width: Optional[int] = None):
        """
        Initialize progress display.

        Args:
            stream: Output stream (defaults to stdout)
            width: Line width (defaults to detected terminal width)
        """
        self.stream = stream if stream is not None else sys.stdout
        if width is None:
            width = shutil.get_terminal_size((DEFAULT_TERMINAL_WIDTH, 24)).columns
        self.width = max(width, 1)
        self._column = 0
        self._need_line_feed = False

    def __call__(self, identifier: str) -> None:
        self.show(identifier)

    def show(self, identifier: str) -> None:
        """Print one identifier followed by a separator, wrapping as needed."""
        if self._column and self._column + len(identifier) > self.width:
            self._new_line()

        self._write(identifier)

        if self._column >= self.width:
            self._column = 0
            self._need_line_feed = False
            return

        self._write(' ')
        if self._column >= self.width:
            self._column = 0
            self._need_line_feed = False
        else:
            self._need_line_feed = True

    def finish(self) -> None:
        """Terminate the current line if anything is pending on it."""
        if self._need_line_feed:
            self.stream.write('\n')
            self.stream.flush()
        self._need_line_feed = False
        self._column = 0

    def _write(self, text: str) -> None:
        self.stream.write(text)
        self.stream.flush()
        self._column += len(text)

    def _new_line(self) -> None:
        self.stream.write('\n')
        self._column = 0


__all__ = ['IdentifierProgress']
