"""XHTML event writer over a SAX content handler.

Wraps any ``xml.sax.handler.ContentHandler`` and exposes the document and
element scopes as context managers, so a scope opened inside a ``with`` block
is closed on every exit path, exceptions included.
"""

import io
from contextlib import contextmanager
from typing import Iterator
from xml.sax.handler import ContentHandler
from xml.sax.saxutils import XMLGenerator
from xml.sax.xmlreader import AttributesImpl

from textcsv.patterns import READ_CHUNK


class XHTMLContentHandler:
    """Emits an ``html``/``body`` envelope and scoped elements to *handler*."""

    def __init__(self, handler: ContentHandler) -> None:
        self.handler = handler
        self._open: list[str] = []

    @property
    def open_elements(self) -> tuple[str, ...]:
        """Names of the elements currently open, outermost first."""
        return tuple(self._open)

    def start_element(self, name: str, attrs: dict[str, str] | None = None) -> None:
        self.handler.startElement(name, AttributesImpl(attrs or {}))
        self._open.append(name)

    def end_element(self, name: str) -> None:
        if not self._open or self._open[-1] != name:
            raise RuntimeError(f"end_element({name!r}) does not match open scope {self._open[-1:]}")
        self._open.pop()
        self.handler.endElement(name)

    def characters(self, text: str) -> None:
        if text:
            self.handler.characters(text)

    @contextmanager
    def element(self, name: str, attrs: dict[str, str] | None = None) -> Iterator[None]:
        self.start_element(name, attrs)
        try:
            yield
        finally:
            self.end_element(name)

    @contextmanager
    def document(self) -> Iterator[None]:
        self.handler.startDocument()
        try:
            with self.element("html"), self.element("body"):
                yield
        finally:
            self.handler.endDocument()

    def copy_text(self, reader) -> int:
        """Copy everything left in *reader* as character events; returns the count."""
        total = 0
        while chunk := reader.read(READ_CHUNK):
            self.characters(chunk)
            total += len(chunk)
        return total


def xhtml_writer(out: io.StringIO | None = None) -> tuple[XMLGenerator, io.StringIO]:
    """Return a serialising content handler and the buffer it writes to."""
    out = out if out is not None else io.StringIO()
    return XMLGenerator(out, encoding="utf-8", short_empty_elements=True), out
