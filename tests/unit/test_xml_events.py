# Path: tests/unit/test_xml_events.py
"""
Unit Tests for the XML Event Source

Tests the lxml-based tokenizer:
- Names reported with their source prefixes
- Namespace declarations carried on the element that makes them
- Character data coalescing across read chunks
- Comments and processing instructions dropped
- Malformed input reported as MalformedXmlError
"""

import io

import pytest

from ban_extractor.loaders.xml_events import iter_events, namespace_declaration
from ban_extractor.models.error import InputUnavailableError, MalformedXmlError
from ban_extractor.models.events import ElementClose, ElementOpen, Text


def tokenize(document, chunk_size=65536):
    """Collect all events of a document given as str."""
    return list(iter_events(io.BytesIO(document.encode('utf-8')), chunk_size=chunk_size))


class TestNamespaceDeclaration:
    """Test namespace declaration rendering."""

    def test_prefixed(self):
        assert namespace_declaration('att', 'urn:att') == 'xmlns:att="urn:att"'

    def test_default(self):
        assert namespace_declaration(None, 'urn:d') == 'xmlns="urn:d"'
        assert namespace_declaration('', 'urn:d') == 'xmlns="urn:d"'

    def test_only_attribute_delimiters_escaped(self):
        declaration = namespace_declaration('a', 'urn:x\'y&z<"')

        assert declaration == 'xmlns:a="urn:x\'y&amp;z&lt;&quot;"'

    def test_apostrophe_in_source_uri_kept(self):
        events = tokenize("<r xmlns:a=\"urn:o'neil\"/>")

        assert events[0].namespace_declarations == ("xmlns:a=\"urn:o'neil\"",)


class TestEventSequence:
    """Test the event stream produced for simple documents."""

    def test_simple_document(self):
        events = tokenize('<a><b>x</b></a>')

        assert events == [
            ElementOpen('a'),
            ElementOpen('b'),
            Text('x'),
            ElementClose('b'),
            ElementClose('a'),
        ]

    def test_attributes_in_document_order(self):
        events = tokenize('<e z="1" a="2" m="&amp;"/>')

        assert events[0] == ElementOpen('e', (('z', '1'), ('a', '2'), ('m', '&')))
        assert events[1] == ElementClose('e')

    def test_empty_element_yields_open_and_close(self):
        events = tokenize('<root><TITAN_BAN/></root>')

        assert events == [
            ElementOpen('root'),
            ElementOpen('TITAN_BAN'),
            ElementClose('TITAN_BAN'),
            ElementClose('root'),
        ]

    def test_entities_decoded(self):
        events = tokenize('<a>1 &lt; 2 &amp;&#65;</a>')
        assert events[1] == Text('1 < 2 &A')

    def test_comments_and_processing_instructions_dropped(self):
        events = tokenize('<a><!-- note --><?pi data?><b/></a>')

        assert events == [
            ElementOpen('a'),
            ElementOpen('b'),
            ElementClose('b'),
            ElementClose('a'),
        ]


class TestPrefixedNames:
    """Test mapping of namespace-qualified names back to prefixes."""

    def test_prefix_preserved(self):
        events = tokenize(
            '<att:BillExtract xmlns:att="urn:att"><att:MixedBillService/></att:BillExtract>'
        )

        assert events[0] == ElementOpen(
            'att:BillExtract', namespace_declarations=('xmlns:att="urn:att"',)
        )
        assert events[1] == ElementOpen('att:MixedBillService')
        assert events[2] == ElementClose('att:MixedBillService')
        assert events[3] == ElementClose('att:BillExtract')

    def test_default_namespace_elements_unprefixed(self):
        events = tokenize('<root xmlns="urn:d" id="1"><child/></root>')

        assert events[0] == ElementOpen('root', (('id', '1'),), ('xmlns="urn:d"',))
        assert events[1] == ElementOpen('child')

    def test_prefixed_attribute(self):
        events = tokenize('<r xmlns:b="urn:b" b:kind="x"/>')
        assert events[0].attributes == (('b:kind', 'x'),)

    def test_xml_lang_attribute(self):
        events = tokenize('<r xml:lang="en"/>')
        assert events[0].attributes == (('xml:lang', 'en'),)

    def test_shadowed_prefix_resolves_to_inner_binding(self):
        events = tokenize(
            '<p:a xmlns:p="urn:one"><p:b xmlns:p="urn:two"/><p:c/></p:a>'
        )
        names = [e.name for e in events if isinstance(e, ElementOpen)]

        assert names == ['p:a', 'p:b', 'p:c']

    def test_rebound_prefix_is_not_a_candidate(self):
        events = tokenize(
            '<a:r xmlns:a="urn:u"><a:s xmlns:a="urn:v" xmlns:b="urn:u"><b:t/></a:s></a:r>'
        )
        names = [e.name for e in events if isinstance(e, ElementOpen)]

        assert names == ['a:r', 'a:s', 'b:t']


class TestNamespaceErrors:
    """Test names that cannot be reported as written."""

    @pytest.mark.parametrize('chunk_size', [1, 7, 65536])
    def test_undeclared_element_prefix(self, chunk_size):
        document = (
            '<Extract><att:MixedBillService><TITAN_BAN>1</TITAN_BAN>'
            '</att:MixedBillService></Extract>'
        )

        with pytest.raises(MalformedXmlError) as exc_info:
            tokenize(document, chunk_size=chunk_size)

        assert 'att' in exc_info.value.message
        assert exc_info.value.line == 1

    def test_undeclared_attribute_prefix(self):
        with pytest.raises(MalformedXmlError):
            tokenize('<r x:kind="1"/>')

    def test_undeclared_prefix_reports_source(self):
        stream = io.BytesIO(b'<a><p:b/></a>')

        with pytest.raises(MalformedXmlError) as exc_info:
            list(iter_events(stream, source='bills.xml'))

        assert exc_info.value.source == 'bills.xml'

    def test_two_prefixes_for_one_uri(self):
        with pytest.raises(MalformedXmlError, match='Ambiguous namespace prefix'):
            tokenize('<r xmlns:a="urn:u" xmlns:b="urn:u"><a:x/><b:y/></r>')

    def test_default_and_prefix_for_one_uri(self):
        document = (
            '<Extract xmlns="urn:u" xmlns:att="urn:u">'
            '<att:MixedBillService><TITAN_BAN>1</TITAN_BAN></att:MixedBillService>'
            '</Extract>'
        )

        with pytest.raises(MalformedXmlError, match='Ambiguous namespace prefix'):
            tokenize(document)

    def test_no_events_after_the_error(self):
        events = iter_events(io.BytesIO(b'<r><a:x/><y/></r>'), chunk_size=3)
        seen = []

        with pytest.raises(MalformedXmlError):
            for event in events:
                seen.append(event)

        assert ElementOpen('x') not in seen
        assert ElementOpen('y') not in seen


class TestChunking:
    """Test incremental parsing."""

    def test_text_coalesced_across_chunks(self):
        document = '<a><b>' + 'x' * 50 + '&amp;' + 'y' * 50 + '</b></a>'
        events = tokenize(document, chunk_size=7)

        texts = [e for e in events if isinstance(e, Text)]
        assert texts == [Text('x' * 50 + '&' + 'y' * 50)]

    def test_same_events_for_any_chunk_size(self, two_record_xml):
        expected = tokenize(two_record_xml)

        for chunk_size in (1, 3, 64):
            assert tokenize(two_record_xml, chunk_size=chunk_size) == expected

    def test_lazy_consumption(self):
        """The generator reads no further than it has to."""
        body = '<r>' + '<i>v</i>' * 1000 + '</r>'
        stream = io.BytesIO(body.encode('utf-8'))

        events = iter_events(stream, chunk_size=16)
        first = next(events)
        events.close()

        assert first == ElementOpen('r')
        assert stream.tell() < len(body)


class TestMalformedInput:
    """Test malformed XML detection."""

    def test_mismatched_tags(self):
        with pytest.raises(MalformedXmlError) as exc_info:
            tokenize('<a><b></a>')

        assert exc_info.value.category.value == "XML_MALFORMED"

    def test_truncated_document(self):
        with pytest.raises(MalformedXmlError):
            tokenize('<a><b>text</b>')

    def test_not_xml(self):
        with pytest.raises(MalformedXmlError):
            tokenize('this is not xml at all')

    def test_source_in_error(self):
        stream = io.BytesIO(b'<a></b>')

        with pytest.raises(MalformedXmlError) as exc_info:
            list(iter_events(stream, source='bills.xml'))

        assert exc_info.value.source == 'bills.xml'
        assert 'bills.xml' in str(exc_info.value)


class TestReadFailure:
    """Test mapping of stream read errors."""

    def test_read_error_becomes_input_unavailable(self):
        class FailingStream(io.RawIOBase):
            def readable(self):
                return True

            def read(self, size=-1):
                raise OSError("connection reset")

        with pytest.raises(InputUnavailableError):
            list(iter_events(FailingStream()))
