# Path: ban_extractor/output/codecs.py
"""
Output Codec Selector

Wraps the destination byte sink in the framing of the chosen output format
and hands back a UTF-8 text writer.

Formats:
- XML: text written directly to the sink
- GZIP: gzip member around the text
- ZIP: archive with exactly one deflated entry

Compression happens on the fly; no temporary files are created.
"""

import gzip
import io
import zipfile
from contextlib import ExitStack, contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, TextIO

from ..constants import DEFAULT_ZIP_COMPRESSION_LEVEL, OUTPUT_ENCODING, FileFormat
from ..core.logger import get_output_logger
from ..models.error import OutputUnavailableError


logger = get_output_logger('codecs')


@contextmanager
def open_destination(path: Path) -> Iterator[BinaryIO]:
    """
    Open the output file for binary writing.

    Args:
        path: Output file path

    Yields:
        Writable binary stream

    Raises:
        OutputUnavailableError: If the file cannot be created, written
            or closed
    """
    try:
        sink = open(path, 'wb')
    except OSError as e:
        raise OutputUnavailableError(f"Cannot open output file: {e}", source=str(path)) from e

    try:
        with sink:
            yield sink
    except OSError as e:
        raise OutputUnavailableError(f"Cannot write output file: {e}", source=str(path)) from e


@contextmanager
def open_output_writer(
    sink: BinaryIO,
    file_format: FileFormat,
    entry_name: Optional[str] = None,
    compression_level: int = DEFAULT_ZIP_COMPRESSION_LEVEL
) -> Iterator[TextIO]:
    """
    Yield a text writer over sink framed for file_format.

    On exit the writer is flushed and every compression layer is closed
    (finishing the gzip trailer or the ZIP central directory). The sink
    itself is left open.

    Args:
        sink: Writable binary stream
        file_format: XML, ZIP or GZIP
        entry_name: Name of the ZIP entry (required for ZIP)
        compression_level: Deflate level for ZIP output

    Yields:
        UTF-8 text writer

    Raises:
        ValueError: If ZIP is requested without an entry name
        OutputUnavailableError: If writing to the sink, or finishing a
            compression layer, fails

    Example:
        with open('out.zip', 'wb') as sink:
            with open_output_writer(sink, FileFormat.ZIP, 'bills.1002.xml') as writer:
                writer.write('<?xml version="1.0" encoding="UTF-8"?>')
    """
    try:
        with ExitStack() as stack:
            if file_format is FileFormat.ZIP:
                if not entry_name:
                    raise ValueError("ZIP output requires an entry name")
                archive = stack.enter_context(zipfile.ZipFile(
                    sink,
                    mode='w',
                    compression=zipfile.ZIP_DEFLATED,
                    compresslevel=compression_level
                ))
                binary = stack.enter_context(archive.open(entry_name, mode='w'))
                logger.debug(f"ZIP output, entry={entry_name}, level={compression_level}")
            elif file_format is FileFormat.GZIP:
                binary = stack.enter_context(gzip.GzipFile(fileobj=sink, mode='wb'))
                logger.debug("GZIP output")
            else:
                binary = sink
                logger.debug("Plain XML output")

            writer = io.TextIOWrapper(binary, encoding=OUTPUT_ENCODING, newline='')
            # Hand the binary layer back without closing it; the stack
            # closes compression layers, the caller owns the sink.
            stack.callback(writer.detach)
            yield writer
    except OSError as e:
        logger.error(f"Writing output failed: {e}")
        raise OutputUnavailableError(
            f"Cannot write output file: {e}",
            source=getattr(sink, 'name', None)
        ) from e


__all__ = [
    'open_destination',
    'open_output_writer',
]
