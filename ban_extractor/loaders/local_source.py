# Path: ban_extractor/loaders/local_source.py
"""
Local File Source

Opens an input extract on the local (or mounted remote) filesystem.
"""

from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator, Union

from ..core.logger import get_input_logger
from ..models.error import InputUnavailableError


logger = get_input_logger('local_source')


@contextmanager
def open_local_source(path: Union[str, Path]) -> Iterator[BinaryIO]:
    """
    Open a local input file for sequential binary reading.

    Args:
        path: Input file path

    Yields:
        Binary stream positioned at offset 0

    Raises:
        InputUnavailableError: If the file is missing or cannot be read
    """
    path = Path(path)

    if not path.exists():
        raise InputUnavailableError("File not found", source=str(path))
    if path.is_dir():
        raise InputUnavailableError("Input is a directory", source=str(path))

    try:
        stream = path.open('rb')
    except OSError as e:
        raise InputUnavailableError(f"Cannot open input: {e}", source=str(path)) from e

    logger.info(f"Parsing XML file on local or remote filesystem: {path}")
    with stream:
        yield stream


__all__ = ['open_local_source']
