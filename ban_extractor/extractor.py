# Path: ban_extractor/extractor.py
"""
BAN Extractor Orchestrator

Wires the INPUT, PROCESS and OUTPUT layers into one extraction run:

    input stream -> gzip sniffing -> XML events -> record matcher -> codec -> file

Every handle opened for a run is closed on every exit path. When the BAN is
not found, or any error aborts the run, the output file created by the run
is deleted.
"""

import time
from contextlib import ExitStack, closing
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import BinaryIO, Iterable, Optional, TextIO, Union

from .config_loader import ConfigLoader
from .constants import (
    DEFAULT_IDENTIFIER_TAG,
    DEFAULT_READ_CHUNK_SIZE,
    DEFAULT_RECORD_TAG,
    DEFAULT_ZIP_COMPRESSION_LEVEL,
    FileFormat,
)
from .core.logger import get_process_logger
from .core.ui.progress import IdentifierProgress
from .loaders.local_source import open_local_source
from .loaders.ssh_source import SSHSource
from .loaders.stream_detector import open_decoded_stream
from .loaders.xml_events import iter_events
from .models.events import StructuralEvent
from .models.scan_state import ScanState
from .output.codecs import open_destination, open_output_writer
from .output.naming import entry_name_for, resolve_output_path
from .process.record_matcher import IdentifierObserver, RecordMatcher


logger = get_process_logger('extractor')


@dataclass
class ExtractionResult:
    """
    Outcome of one extraction run.

    Attributes:
        found: Whether the BAN was found and its record written
        identifier: BAN searched for
        output_path: Output file (deleted again when not found)
        records_scanned: Records opened during the scan
        identifiers_seen: BAN values compared during the scan
        elapsed_seconds: Wall time of the scan
    """
    found: bool
    identifier: str
    output_path: Optional[Path]
    records_scanned: int = 0
    identifiers_seen: int = 0
    elapsed_seconds: float = 0.0

    def to_dict(self) -> dict:
        result = asdict(self)
        result['output_path'] = str(self.output_path) if self.output_path else None
        return result


def extract_record(
    events: Iterable[StructuralEvent],
    writer: TextIO,
    record_tag: str,
    identifier_tag: str,
    identifier: str,
    observer: Optional[IdentifierObserver] = None
) -> ScanState:
    """
    Scan events and write the first record whose BAN equals identifier.

    Stops consuming events as soon as the matched record closes.

    Args:
        events: Structural events in document order
        writer: Text sink for the extracted document
        record_tag: Qualified name of the record element
        identifier_tag: Qualified name of the BAN element
        identifier: BAN to extract
        observer: Called with every BAN value compared

    Returns:
        Final scan state; state.is_committed tells whether the BAN was found
    """
    matcher = RecordMatcher(
        record_tag=record_tag,
        identifier_tag=identifier_tag,
        identifier=identifier,
        writer=writer,
        observer=observer
    )

    for event in events:
        if matcher.feed(event):
            break

    return matcher.finish()


class Extractor:
    """
    One BAN extraction from a local or remote extract file.

    Example:
        extractor = Extractor('1002', '/data/extracts/bills.xml.gz', file_format='ZIP')
        result = extractor.run_local()
        if result.found:
            print(result.output_path)
    """

    def __init__(
        self,
        identifier: str,
        input_name: Union[str, Path],
        output: Optional[Union[str, Path]] = None,
        file_format: Union[str, FileFormat] = FileFormat.XML,
        config: Optional[ConfigLoader] = None,
        record_tag: Optional[str] = None,
        identifier_tag: Optional[str] = None,
        progress: Optional[IdentifierProgress] = None
    ):
        """
        Initialize extractor.

        Args:
            identifier: BAN to extract
            input_name: Local path, or remote path for run_ssh()
            output: Output file or directory; derived from input_name when empty
            file_format: XML, ZIP or GZIP (case-insensitive string accepted)
            config: Optional ConfigLoader instance
            record_tag: Record element name (configured default when None)
            identifier_tag: BAN element name (configured default when None)
            progress: Console display of scanned BANs, None for silent runs
        """
        self.config = config if config else ConfigLoader()
        self.identifier = identifier
        self.input_name = str(input_name)
        self.output = output
        self.file_format = (
            file_format if isinstance(file_format, FileFormat)
            else FileFormat.parse(file_format)
        )
        self.record_tag = record_tag or self.config.get('record_tag', DEFAULT_RECORD_TAG)
        self.identifier_tag = identifier_tag or self.config.get(
            'identifier_tag', DEFAULT_IDENTIFIER_TAG
        )
        self.chunk_size = self.config.get('read_chunk_size', DEFAULT_READ_CHUNK_SIZE)
        self.compression_level = self.config.get(
            'zip_compression_level', DEFAULT_ZIP_COMPRESSION_LEVEL
        )
        self.progress = progress

        self.output_path: Optional[Path] = None
        self._output_created = False

    def run_local(self) -> ExtractionResult:
        """
        Extract from a file on the local (or mounted) filesystem.

        Raises:
            ExtractionError: Any fatal input, parsing or output error
        """
        self.output_path = resolve_output_path(
            self.input_name, self.identifier, self.output, self.file_format
        )
        with open_local_source(self.input_name) as stream:
            return self.run(stream)

    def run_ssh(
        self,
        host: str,
        username: str,
        port: Optional[int] = None,
        password: Optional[str] = None,
        key_file: Optional[Union[str, Path]] = None
    ) -> ExtractionResult:
        """
        Extract from a file on an SSH server over SFTP.

        Args:
            host: SSH server name
            username: Login user
            port: SSH port
            password: Login password, or key passphrase with key_file
            key_file: Private key for public key authentication

        Raises:
            ExtractionError: Any fatal connection, input, parsing or output error
        """
        self.output_path = resolve_output_path(
            self.input_name, self.identifier, self.output, self.file_format, remote=True
        )
        with SSHSource(host, username, port, password, key_file, config=self.config) as ssh:
            with ssh.open(self.input_name) as stream:
                return self.run(stream)

    def run(self, stream: BinaryIO) -> ExtractionResult:
        """
        Extract from an already opened input stream.

        Args:
            stream: Readable binary stream positioned at offset 0

        Returns:
            ExtractionResult; found is False when the BAN is not in the input

        Raises:
            ExtractionError: Any fatal input, parsing or output error
        """
        if self.output_path is None:
            self.output_path = resolve_output_path(
                self.input_name, self.identifier, self.output, self.file_format
            )

        logger.info(
            f"BAN={self.identifier}, input file name={self.input_name}, "
            f"output file name={self.output_path}"
        )

        start_time = time.time()
        self._output_created = False

        try:
            state = self._scan(stream)
        except BaseException:
            self._discard_output()
            raise

        elapsed = time.time() - start_time
        found = state.is_committed

        if found:
            logger.info(f"BAN {self.identifier} found, record written to {self.output_path}")
        else:
            logger.error(f"BAN {self.identifier} has not found")
            self._discard_output()

        logger.info(
            f"Scanned {state.records_scanned} records, "
            f"{state.identifiers_seen} BANs in {elapsed:.2f}s"
        )

        return ExtractionResult(
            found=found,
            identifier=self.identifier,
            output_path=self.output_path,
            records_scanned=state.records_scanned,
            identifiers_seen=state.identifiers_seen,
            elapsed_seconds=round(elapsed, 3)
        )

    def _scan(self, stream: BinaryIO) -> ScanState:
        with ExitStack() as stack:
            xml_stream = stack.enter_context(open_decoded_stream(stream, source=self.input_name))

            sink = stack.enter_context(open_destination(self.output_path))
            self._output_created = True

            writer = stack.enter_context(open_output_writer(
                sink,
                self.file_format,
                entry_name=entry_name_for(self.input_name, self.identifier),
                compression_level=self.compression_level
            ))
            events = stack.enter_context(closing(
                iter_events(xml_stream, chunk_size=self.chunk_size, source=self.input_name)
            ))

            observer = self.progress.show if self.progress is not None else None
            try:
                return extract_record(
                    events,
                    writer,
                    record_tag=self.record_tag,
                    identifier_tag=self.identifier_tag,
                    identifier=self.identifier,
                    observer=observer
                )
            finally:
                if self.progress is not None:
                    self.progress.finish()

    def _discard_output(self) -> None:
        """Delete the output file if this run created it."""
        if not self._output_created or self.output_path is None:
            return
        self.output_path.unlink(missing_ok=True)
        logger.debug(f"Deleted output file {self.output_path}")
        self._output_created = False


__all__ = [
    'Extractor',
    'ExtractionResult',
    'extract_record',
]
