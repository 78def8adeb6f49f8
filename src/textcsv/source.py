"""Mark/reset character source used for the sniff-then-parse protocol.

The sniffer marks the source, reads a bounded prefix, and resets; the emitter
then reads the whole document from the start.  Only the characters read after
the mark are buffered, so the replay costs at most ``limit`` characters of
memory however large the document is.

Lines end at '\\r\\n', '\\r' or '\\n', so classic Mac files split into records
the same way as Unix and Windows ones.
"""

import logging
import re
from typing import TextIO

from textcsv.errors import UnsupportedSourceError
from textcsv.patterns import READ_CHUNK

logger = logging.getLogger(__name__)

_LINE_END = re.compile(r"\r\n?|\n")


class MarkableReader:
    """Character reader over a text stream supporting one bounded mark at a time."""

    mark_supported = True

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream
        self._pushback = ""  # characters replayed after a reset, ahead of the stream
        self._recorded: list[str] | None = None
        self._recorded_len = 0
        self._mark_limit = 0
        self._mark_valid = False

    # ─── Mark / Reset ────────────────────────────────────────────────────

    def mark(self, limit: int) -> None:
        """Remember the current position; reset() works until *limit* characters are read."""
        if limit <= 0:
            raise ValueError(f"mark limit must be positive, got {limit}")
        self._recorded = []
        self._recorded_len = 0
        self._mark_limit = limit
        self._mark_valid = True

    def reset(self) -> None:
        """Rewind to the mark.  Raises UnsupportedSourceError if the mark was lost."""
        if self._recorded is None:
            raise UnsupportedSourceError("reset() called without a mark")
        if not self._mark_valid:
            raise UnsupportedSourceError(
                f"mark invalidated: more than {self._mark_limit} characters were read after mark()",
                details={"mark_limit": self._mark_limit},
            )
        self._pushback = "".join(self._recorded) + self._pushback
        self._recorded = None
        self._recorded_len = 0

    def _record(self, text: str) -> None:
        if self._recorded is None or not self._mark_valid or not text:
            return
        self._recorded_len += len(text)
        if self._recorded_len > self._mark_limit:
            # Past the limit the mark is dropped rather than buffering unboundedly
            logger.debug("Mark invalidated after %d characters", self._recorded_len)
            self._recorded = []
            self._mark_valid = False
            return
        self._recorded.append(text)

    # ─── Reading ─────────────────────────────────────────────────────────

    def read(self, size: int = -1) -> str:
        """Read up to *size* characters (all remaining when negative)."""
        if size is None or size < 0:
            text = self._pushback + self._stream.read()
            self._pushback = ""
        elif len(self._pushback) >= size:
            text = self._pushback[:size]
            self._pushback = self._pushback[size:]
        else:
            text = self._pushback
            self._pushback = ""
            # TextIO.read may return short; keep reading until size or EOF
            while len(text) < size:
                chunk = self._stream.read(size - len(text))
                if not chunk:
                    break
                text += chunk
        self._record(text)
        return text

    def readline(self) -> str:
        """Read through the next line ending, or to EOF.

        '\\r\\n', '\\r' and '\\n' all end a line and are kept, as with
        ``newline=""`` on a text wrapper.
        """
        buffer = self._pushback
        while True:
            match = _LINE_END.search(buffer)
            # A trailing '\r' may be the first half of '\r\n'
            if match and (match.group() != "\r" or match.end() < len(buffer)):
                end = match.end()
                break
            chunk = self._stream.read(READ_CHUNK)
            if not chunk:
                end = len(buffer)
                break
            buffer += chunk
        line, self._pushback = buffer[:end], buffer[end:]
        self._record(line)
        return line

    def __iter__(self):
        return self

    def __next__(self) -> str:
        line = self.readline()
        if not line:
            raise StopIteration
        return line


def as_markable(stream) -> MarkableReader:
    """Return *stream* itself if it already supports mark/reset, else wrap it."""
    if getattr(stream, "mark_supported", False):
        return stream
    if not callable(getattr(stream, "read", None)) or not callable(getattr(stream, "readline", None)):
        raise UnsupportedSourceError(f"{type(stream).__name__} is not a readable text stream")
    return MarkableReader(stream)
