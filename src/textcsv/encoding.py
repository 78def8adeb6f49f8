"""Charset detection and decoding of byte streams.

The detector itself is a black box (``chardet`` by default): it receives a
prefix of the raw bytes and returns a charset name or None.  A byte-order mark
always wins over the detector.
"""

import codecs
import io
import logging
from typing import BinaryIO, Callable

import chardet

logger = logging.getLogger(__name__)

EncodingDetector = Callable[[bytes], "str | None"]

# Bytes handed to the detector
DETECTION_SAMPLE = 8192

FALLBACK_CHARSET = "utf-8"

# UTF-32 LE must be tested before UTF-16 LE, whose BOM is its prefix
_BOMS = (
    (codecs.BOM_UTF32_LE, "utf-32"),
    (codecs.BOM_UTF32_BE, "utf-32"),
    (codecs.BOM_UTF8, "utf-8"),
    (codecs.BOM_UTF16_LE, "utf-16"),
    (codecs.BOM_UTF16_BE, "utf-16"),
)


def normalize_charset(name: str | None) -> str | None:
    """Return Python's canonical codec name for *name*, or None if unknown."""
    if not name:
        return None
    try:
        return codecs.lookup(name.strip()).name
    except LookupError:
        return None


def chardet_detector(sample: bytes) -> str | None:
    """Default detector: ask chardet for its best guess."""
    result = chardet.detect(sample)
    logger.debug("chardet guessed %s (confidence %s)", result.get("encoding"), result.get("confidence"))
    return result.get("encoding")


def detect_charset(sample: bytes, detector: EncodingDetector = chardet_detector) -> str:
    """Resolve the charset of *sample*: BOM first, then the detector, then UTF-8."""
    for bom, charset in _BOMS:
        if sample.startswith(bom):
            return charset
    if not sample:
        return FALLBACK_CHARSET
    charset = normalize_charset(detector(sample))
    if charset is None:
        logger.warning("Could not detect a charset; falling back to %s", FALLBACK_CHARSET)
        return FALLBACK_CHARSET
    return charset


class _PrefixedStream(io.RawIOBase):
    """Raw stream that replays an already-read prefix before the rest of *stream*.

    Closing it leaves the wrapped stream open; the caller owns that stream.
    """

    def __init__(self, prefix: bytes, stream: BinaryIO) -> None:
        self._prefix = prefix
        self._stream = stream

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        if self._prefix:
            n = min(len(buffer), len(self._prefix))
            buffer[:n] = self._prefix[:n]
            self._prefix = self._prefix[n:]
            return n
        data = self._stream.read(len(buffer))
        if not data:
            return 0
        buffer[: len(data)] = data
        return len(data)


def open_text(
    stream: BinaryIO,
    charset: str | None = None,
    detector: EncodingDetector = chardet_detector,
) -> tuple[io.TextIOWrapper, str]:
    """Wrap a byte stream as text, detecting the charset when none is given.

    Returns the text stream and the charset name.  Line endings are passed
    through untouched so the tabular parser sees them as they are.
    """
    prefix = stream.read(DETECTION_SAMPLE) or b""
    if charset is None:
        charset = detect_charset(prefix, detector)
        logger.info("Detected charset %s", charset)
    # utf-8-sig decodes plain UTF-8 too, and drops a leading BOM
    codec = "utf-8-sig" if charset == "utf-8" else charset
    raw = io.BufferedReader(_PrefixedStream(prefix, stream))
    return io.TextIOWrapper(raw, encoding=codec, errors="replace", newline=""), charset
