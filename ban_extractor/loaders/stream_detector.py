# Path: ban_extractor/loaders/stream_detector.py
"""
Compressed Stream Detector

Sniffs the first bytes of an input stream for the gzip magic number and
hands back a stream that decompresses on the fly when needed.

The sniffed bytes are replayed in front of the remaining input, so the
detector works on any sequential stream (local file, SFTP file, pipe)
without seeking.
"""

import gzip
import io
from contextlib import contextmanager
from typing import BinaryIO, Iterator, Optional

from ..constants import GZIP_MAGIC, GZIP_MAGIC_LENGTH
from ..core.logger import get_input_logger
from ..models.error import InputTooSmallError, InputUnavailableError


logger = get_input_logger('stream_detector')


class ReplayStream(io.RawIOBase):
    """
    Raw stream that yields already-consumed head bytes before the rest.

    Closing a ReplayStream leaves the wrapped stream open; it belongs to
    whoever opened it.
    """

    def __init__(self, head: bytes, stream: BinaryIO):
        super().__init__()
        self._head = head
        self._stream = stream

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        if self._head:
            size = min(len(buffer), len(self._head))
            buffer[:size] = self._head[:size]
            self._head = self._head[size:]
            return size

        data = self._stream.read(len(buffer))
        size = len(data)
        buffer[:size] = data
        return size


def read_head(stream: BinaryIO, size: int = GZIP_MAGIC_LENGTH, source: Optional[str] = None) -> bytes:
    """
    Read exactly size bytes from the start of stream.

    Args:
        stream: Readable binary stream positioned at offset 0
        size: Number of bytes to read
        source: Input name for error messages

    Returns:
        The first size bytes

    Raises:
        InputTooSmallError: If the stream ends before size bytes
        InputUnavailableError: If reading the stream fails
    """
    head = b''
    while len(head) < size:
        try:
            chunk = stream.read(size - len(head))
        except (OSError, EOFError) as e:
            raise InputUnavailableError(f"Failed to read input: {e}", source=source) from e
        if not chunk:
            raise InputTooSmallError(
                f"Input too small: {len(head)} bytes, need at least {size}",
                source=source
            )
        head += chunk
    return head


def is_gzip(head: bytes) -> bool:
    """Check whether head starts with the gzip magic number."""
    return head[:GZIP_MAGIC_LENGTH] == GZIP_MAGIC


@contextmanager
def open_decoded_stream(stream: BinaryIO, source: Optional[str] = None) -> Iterator[BinaryIO]:
    """
    Yield a readable stream of the input's XML bytes.

    Peeks the first three bytes; gzip input is wrapped in a decompressor,
    anything else is passed through unchanged. The given stream is not
    closed.

    Args:
        stream: Readable binary stream positioned at offset 0
        source: Input name for logging and errors

    Yields:
        Binary stream of (decompressed) XML bytes

    Raises:
        InputTooSmallError: If fewer than three bytes are available
        InputUnavailableError: If the first bytes cannot be read

    Example:
        with open('extract.xml.gz', 'rb') as raw:
            with open_decoded_stream(raw) as xml_bytes:
                data = xml_bytes.read()
    """
    head = read_head(stream, source=source)
    replay = io.BufferedReader(ReplayStream(head, stream))

    try:
        if is_gzip(head):
            logger.info(f"Input is gzip compressed, decompressing on the fly: {source}")
            with gzip.GzipFile(fileobj=replay, mode='rb') as decompressed:
                yield decompressed
        else:
            logger.debug(f"Input is not compressed: {source}")
            yield replay
    finally:
        replay.close()


__all__ = [
    'ReplayStream',
    'read_head',
    'is_gzip',
    'open_decoded_stream',
]
