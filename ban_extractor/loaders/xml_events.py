# Path: ban_extractor/loaders/xml_events.py
"""
XML Event Source

Forward-only tokenizer turning a byte stream into StructuralEvent objects.

Built on lxml's feed parser with a parser target: bytes are fed in fixed
size chunks and the events collected by the target are yielded as soon as
each chunk is parsed, so memory use does not depend on document size.

Names are reported as written in the source. lxml resolves prefixes to
namespace URIs; the target keeps its own stack of namespace declarations
and maps every '{uri}local' name back to 'prefix:local'. Input where
that mapping is not unique (an undeclared prefix, or two visible prefixes
bound to one URI) is rejected as malformed rather than renamed.

Features:
- Unbounded input (huge_tree, chunked feed)
- Adjacent character data coalesced into a single Text event
- Comments, processing instructions and DOCTYPE dropped
- External entities and network access disabled
"""

import zlib
from typing import BinaryIO, Iterator, Optional

from lxml import etree

from ..constants import DEFAULT_READ_CHUNK_SIZE
from ..core.logger import get_input_logger
from ..models.error import InputUnavailableError, MalformedXmlError
from ..models.events import ElementClose, ElementOpen, StructuralEvent, Text


logger = get_input_logger('xml_events')

XML_NAMESPACE = 'http://www.w3.org/XML/1998/namespace'

# A double-quoted attribute value only needs these; '&' first.
_URI_ESCAPES: tuple[tuple[str, str], ...] = (
    ('&', '&amp;'),
    ('<', '&lt;'),
    ('"', '&quot;'),
)


def namespace_declaration(prefix: Optional[str], uri: str) -> str:
    """
    Render one namespace declaration as it appears in a start tag.

    Args:
        prefix: Namespace prefix, '' or None for the default namespace
        uri: Namespace URI

    Returns:
        'xmlns:prefix="uri"' or 'xmlns="uri"'
    """
    for char, entity in _URI_ESCAPES:
        uri = uri.replace(char, entity)
    if prefix:
        return f'xmlns:{prefix}="{uri}"'
    return f'xmlns="{uri}"'


class EventCollector:
    """
    lxml parser target collecting StructuralEvent objects in document order.

    Events accumulate until drained by the caller. Character data is held
    back until the next tag so that one run of text becomes one Text event.
    """

    def __init__(self, source: Optional[str] = None):
        self.source = source
        self._events: list[StructuralEvent] = []
        self._text: list[str] = []
        self._pending_declarations: list[tuple[str, str]] = []
        self._scopes: list[list[tuple[str, str]]] = []

    # ------------------------------------------------------------------
    # lxml target interface
    # ------------------------------------------------------------------

    def start_ns(self, prefix: Optional[str], uri: str) -> None:
        self._pending_declarations.append((prefix or '', uri))

    def start(self, tag: str, attrib) -> None:
        self._flush_text()

        declared = self._pending_declarations
        self._pending_declarations = []
        self._scopes.append(declared)

        name = self._qualify(tag, is_attribute=False)
        attributes = tuple(
            (self._qualify(key, is_attribute=True), value)
            for key, value in attrib.items()
        )
        declarations = tuple(
            namespace_declaration(prefix, uri) for prefix, uri in declared
        )
        self._events.append(ElementOpen(name, attributes, declarations))

    def end(self, tag: str) -> None:
        self._flush_text()
        # Resolve before the element's own declarations go out of scope
        name = self._qualify(tag, is_attribute=False)
        if self._scopes:
            self._scopes.pop()
        self._events.append(ElementClose(name))

    def data(self, data: str) -> None:
        self._text.append(data)

    def close(self) -> None:
        self._flush_text()

    # ------------------------------------------------------------------
    # Collector API
    # ------------------------------------------------------------------

    def drain(self) -> list[StructuralEvent]:
        """Return and forget the events collected so far."""
        events = self._events
        self._events = []
        return events

    def _flush_text(self) -> None:
        if self._text:
            self._events.append(Text(''.join(self._text)))
            self._text = []

    def _qualify(self, tag: str, is_attribute: bool) -> str:
        """Map lxml's '{uri}local' back to the prefixed name."""
        if not tag.startswith('{'):
            return tag

        uri, local = tag[1:].split('}', 1)
        prefix = self._prefix_for(uri, local, is_attribute)
        return f'{prefix}:{local}' if prefix else local

    def _prefix_for(self, uri: str, local: str, is_attribute: bool) -> str:
        """
        Find the one prefix in scope that is bound to uri.

        Raises:
            MalformedXmlError: If no prefix, or more than one, is bound to
                uri, since the name as written cannot be recovered
        """
        if uri == XML_NAMESPACE:
            return 'xml'

        candidates = []
        # Innermost binding of each prefix wins
        shadowed: set[str] = set()
        for declared in reversed(self._scopes):
            for prefix, bound_uri in reversed(declared):
                if prefix in shadowed:
                    continue
                shadowed.add(prefix)
                # Unprefixed attributes never take the default namespace
                if bound_uri == uri and (prefix or not is_attribute):
                    candidates.append(prefix)

        if len(candidates) == 1:
            return candidates[0]

        if candidates:
            shown = ', '.join(repr(prefix) for prefix in sorted(candidates))
            message = (
                f"Ambiguous namespace prefix for '{local}': "
                f"{shown} are all bound to '{uri}'"
            )
        else:
            message = f"No namespace prefix in scope for '{local}' in '{uri}'"
        logger.error(message)
        raise MalformedXmlError(message, source=self.source)


def iter_events(
    stream: BinaryIO,
    chunk_size: int = DEFAULT_READ_CHUNK_SIZE,
    source: Optional[str] = None
) -> Iterator[StructuralEvent]:
    """
    Lazily tokenize an XML byte stream.

    The generator reads one chunk at a time and can be abandoned at any
    point; nothing past the last read chunk is consumed.

    Args:
        stream: Readable binary stream of XML (already decompressed)
        chunk_size: Bytes per read
        source: Input name for errors

    Yields:
        ElementOpen, Text and ElementClose events in document order

    Raises:
        MalformedXmlError: If the bytes are not well-formed XML, use an
            undeclared namespace prefix, or bind two visible prefixes to
            the same URI
        InputUnavailableError: If reading the stream fails

    Example:
        with open('extract.xml', 'rb') as f:
            for event in iter_events(f):
                print(event)
    """
    collector = EventCollector(source)
    parser = etree.XMLParser(
        target=collector,
        resolve_entities=False,
        no_network=True,
        huge_tree=True,
    )

    try:
        while True:
            chunk = _read_chunk(stream, chunk_size, source)
            if not chunk:
                break
            parser.feed(chunk)
            _check_namespaces(parser, source)
            yield from collector.drain()

        parser.close()
        _check_namespaces(parser, source)
    except etree.XMLSyntaxError as e:
        line, column = e.position if e.position else (None, None)
        logger.error(f"XML parsing error at line {line}, column {column}: {e.msg}")
        raise MalformedXmlError(
            f"XML syntax error: {e.msg}",
            source=source,
            line=line,
            column=column
        ) from e

    yield from collector.drain()


def _check_namespaces(parser: etree.XMLParser, source: Optional[str]) -> None:
    """
    Fail on namespace errors libxml2 reported without stopping.

    libxml2 accepts an undeclared prefix with only an error log entry and
    lxml then drops the prefix from the name.
    """
    errors = parser.feed_error_log.filter_domains(
        etree.ErrorDomains.NAMESPACE
    ).filter_from_errors()
    if not errors:
        return

    entry = next(iter(errors))
    logger.error(
        f"XML namespace error at line {entry.line}, column {entry.column}: {entry.message}"
    )
    raise MalformedXmlError(
        f"XML namespace error: {entry.message.strip()}",
        source=source,
        line=entry.line,
        column=entry.column
    )


def _read_chunk(stream: BinaryIO, chunk_size: int, source: Optional[str]) -> bytes:
    try:
        return stream.read(chunk_size)
    except (OSError, EOFError, zlib.error) as e:
        raise InputUnavailableError(f"Failed to read input: {e}", source=source) from e


__all__ = [
    'EventCollector',
    'iter_events',
    'namespace_declaration',
]
