"""Streaming decomposition of feed markup into structural events.

The document is fed to an expat parser in chunks and the events collected by
its callbacks are yielded between chunks, so consumers see a lazy, ordered
stream without the whole tree ever being built.

Character data is buffered until the next piece of markup so that a text
event always covers a maximal run between two tags, processing instructions
or CDATA sections, independent of chunk boundaries and of how expat splits
data internally (newlines, entity references). Comments do not end a run.
CDATA sections get their own event type.
"""

from typing import Iterator
from xml.parsers import expat

from aggregate_feeds.errors import MarkupParseError
from aggregate_feeds.models import (
    ElementClose,
    ElementOpen,
    EscapedText,
    Ignorable,
    MarkupEvent,
    Text,
)

DEFAULT_CHUNK_SIZE = 64 * 1024

# Expat joins namespace URI and local name with this; URIs cannot contain it.
NAMESPACE_SEPARATOR = " "

XML_WHITESPACE = " \t\r\n"


def local_name(name: str) -> str:
    """Strip the namespace URI expat prepends to qualified names."""
    return name.rpartition(NAMESPACE_SEPARATOR)[2]


class _EventCollector:
    """Expat callbacks that queue markup events until drained."""

    def __init__(self, parser) -> None:
        self.events: list[MarkupEvent] = []
        self._text: list[str] = []
        self._cdata: list[str] = []
        self._in_cdata = False

        parser.StartElementHandler = self.start_element
        parser.EndElementHandler = self.end_element
        parser.CharacterDataHandler = self.character_data
        parser.StartCdataSectionHandler = self.start_cdata
        parser.EndCdataSectionHandler = self.end_cdata
        parser.CommentHandler = self.comment
        parser.ProcessingInstructionHandler = self.processing_instruction
        parser.XmlDeclHandler = self.xml_declaration
        parser.StartDoctypeDeclHandler = self.doctype

    def drain(self) -> list[MarkupEvent]:
        events, self.events = self.events, []
        return events

    def flush_text(self) -> None:
        if not self._text:
            return
        content = "".join(self._text)
        self._text = []
        if content.strip(XML_WHITESPACE):
            self.events.append(Text(content))
        else:
            self.events.append(Ignorable("whitespace", content))

    def start_element(self, name, attributes) -> None:
        self.flush_text()
        self.events.append(ElementOpen(local_name(name)))

    def end_element(self, name) -> None:
        self.flush_text()
        self.events.append(ElementClose(local_name(name)))

    def character_data(self, data) -> None:
        if self._in_cdata:
            self._cdata.append(data)
        else:
            self._text.append(data)

    def start_cdata(self) -> None:
        self.flush_text()
        self._in_cdata = True

    def end_cdata(self) -> None:
        self._in_cdata = False
        self.events.append(EscapedText("".join(self._cdata)))
        self._cdata = []

    def comment(self, data) -> None:
        # Comments do not end the surrounding text run.
        self.events.append(Ignorable("comment", data))

    def processing_instruction(self, target, data) -> None:
        self.flush_text()
        self.events.append(Ignorable("processing_instruction", f"{target} {data}".strip()))

    def xml_declaration(self, version, encoding, standalone) -> None:
        self.events.append(Ignorable("declaration", version or ""))

    def doctype(self, doctype_name, system_id, public_id, has_internal_subset) -> None:
        self.flush_text()
        self.events.append(Ignorable("doctype", doctype_name or ""))


def _feed(parser, data: str, is_final: bool) -> None:
    try:
        parser.Parse(data, is_final)
    except expat.ExpatError as exc:
        raise MarkupParseError(
            expat.ErrorString(exc.code),
            line=exc.lineno,
            column=exc.offset + 1,
        ) from exc


def iter_markup_events(document: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[MarkupEvent]:
    """Yield the structural events of `document` in document order.

    Raises:
        MarkupParseError: If the document is not well-formed. Events before
            the offending chunk may already have been yielded.
    """
    if chunk_size < 1:
        raise ValueError("chunk_size must be >= 1")

    parser = expat.ParserCreate(namespace_separator=NAMESPACE_SEPARATOR)
    collector = _EventCollector(parser)

    yield Ignorable("start_document")

    for start in range(0, len(document), chunk_size):
        _feed(parser, document[start:start + chunk_size], False)
        yield from collector.drain()

    _feed(parser, "", True)
    collector.flush_text()
    yield from collector.drain()

    yield Ignorable("end_document")
