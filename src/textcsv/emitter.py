"""Streaming emission of a classified document as XHTML events.

Plain text becomes a single ``p`` block.  Delimited text becomes a ``table``
with one ``tr`` per record and one ``td`` per field, parsed by the standard
``csv`` module in strict mode.

If a quoted field is never closed (csv hits the end of the data, or the field
outgrows csv's field size limit first), the table is closed, the raw lines of the
unfinished record and anything left in the source are written to a
``div name="after exception"`` block, the document is finished, and only then
is EncapsulationParseError raised.  Any other parse error is raised as
OtherParseError without a fallback block.  Either way every element that was
opened has been closed by the time the caller sees the exception.
"""

import csv
import logging
from dataclasses import dataclass
from typing import MutableMapping
from xml.sax.handler import ContentHandler

from textcsv.annotator import delimiter_label
from textcsv.config import TextAndCSVConfig
from textcsv.errors import EncapsulationParseError, OtherParseError, ParseError
from textcsv.patterns import (
    DELIMITER_PROPERTY,
    FALLBACK_DIV,
    FALLBACK_NAME,
    NUM_COLUMNS,
    NUM_ROWS,
    PARAGRAPH,
    QUOTE_CHAR,
    TABLE,
    TD,
    TR,
)
from textcsv.sax import XHTMLContentHandler

logger = logging.getLogger(__name__)

# csv reports an unterminated quoted field at EOF with this message (strict mode)
_UNTERMINATED_QUOTE = "unexpected end of data"


@dataclass
class TableEmissionState:
    """Counters for one table emission."""

    row_index: int = 0
    first_row_columns: int = 0


class _RecordTap:
    """Line iterator for csv.reader that keeps the raw lines of the record in progress.

    It also tracks whether those lines leave a quoted field open.  csv gives up
    on an open field once it outgrows ``csv.field_size_limit()``, so the
    pending lines never hold much more than that.
    """

    def __init__(self, reader) -> None:
        self._reader = reader
        self._pending: list[str] = []
        self._in_quotes = False

    def __iter__(self):
        return self

    def __next__(self) -> str:
        line = self._reader.readline()
        if not line:
            raise StopIteration
        self._pending.append(line)
        # Doubled quotes toggle twice, so only an odd count changes the state
        if line.count(QUOTE_CHAR) % 2:
            self._in_quotes = not self._in_quotes
        return line

    def commit(self) -> None:
        """Forget the lines of the record that just completed."""
        self._pending.clear()
        self._in_quotes = False

    @property
    def pending(self) -> str:
        return "".join(self._pending)

    @property
    def in_quoted_field(self) -> bool:
        return self._in_quotes


def _translate(exc: csv.Error, state: TableEmissionState, line_num: int, in_quoted_field: bool) -> ParseError:
    details = {"line": line_num, "row": state.row_index}
    # A quote closed and then followed by a stray character ('"x"y') leaves
    # the quotes balanced, so it is reported as OtherParseError, not a fallback
    if in_quoted_field or _UNTERMINATED_QUOTE in str(exc):
        return EncapsulationParseError(
            f"unterminated quoted field in row {state.row_index}",
            rows_emitted=state.row_index,
            details=details,
        )
    return OtherParseError(f"exception parsing the csv: {exc}", rows_emitted=state.row_index, details=details)


class StreamingTableEmitter:
    """Writes a classified document to a content handler and counts its rows."""

    def __init__(self, config: TextAndCSVConfig) -> None:
        self.config = config

    def emit_text(self, reader, handler: ContentHandler) -> int:
        """Copy *reader* into a single paragraph; returns the characters written."""
        xhtml = XHTMLContentHandler(handler)
        with xhtml.document(), xhtml.element(PARAGRAPH):
            return xhtml.copy_text(reader)

    def emit_table(
        self,
        reader,
        delimiter: str,
        handler: ContentHandler,
        metadata: MutableMapping,
    ) -> int:
        """Parse *reader* as delimited records and emit them as a table; returns the row count."""
        metadata[DELIMITER_PROPERTY] = delimiter_label(delimiter, self.config)

        xhtml = XHTMLContentHandler(handler)
        state = TableEmissionState()
        tap = _RecordTap(reader)
        records = csv.reader(tap, delimiter=delimiter, quotechar=QUOTE_CHAR, doublequote=True, strict=True)

        with xhtml.document():
            try:
                with xhtml.element(TABLE):
                    self._emit_rows(records, tap, xhtml, state, metadata)
            except EncapsulationParseError:
                metadata[NUM_ROWS] = state.row_index
                logger.warning(
                    "Unterminated quoted field after %d rows; writing the remainder as text",
                    state.row_index,
                )
                with xhtml.element(FALLBACK_DIV, {"name": FALLBACK_NAME}):
                    xhtml.characters(tap.pending)
                    xhtml.copy_text(reader)
                raise

        logger.info("Emitted %d rows (%d columns in the first row)", state.row_index, state.first_row_columns)
        return state.row_index

    def _emit_rows(self, records, tap: _RecordTap, xhtml: XHTMLContentHandler, state: TableEmissionState, metadata):
        try:
            for row in records:
                # A blank line is a record with one empty field
                cells = row or [""]
                with xhtml.element(TR):
                    for cell in cells:
                        with xhtml.element(TD):
                            xhtml.characters(cell)
                tap.commit()
                if state.row_index == 0:
                    state.first_row_columns = len(cells)
                    metadata[NUM_COLUMNS] = state.first_row_columns
                state.row_index += 1
        except csv.Error as exc:
            raise _translate(exc, state, records.line_num, tap.in_quoted_field) from exc
        metadata[NUM_ROWS] = state.row_index
