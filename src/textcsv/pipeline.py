"""Main entry point: classify a text stream as plain text, CSV or TSV and emit it.

Pipeline:
  1. override    -- read the caller-forced classification, if any
  2. detection   -- fill the gaps: charset from the encoding detector, then
                    media type and delimiter from the sniffer (skipped when the
                    document is already known not to be plain/csv/tsv)
  3. annotation  -- write the resolved content type into the metadata
  4. emission    -- stream the full document to the content handler

A byte stream is decoded without being closed; the caller owns it.
"""

import io
import logging
from typing import MutableMapping
from xml.sax.handler import ContentHandler

from textcsv.annotator import finalize_text_metadata, update_metadata
from textcsv.config import TextAndCSVConfig
from textcsv.emitter import StreamingTableEmitter
from textcsv.encoding import EncodingDetector, chardet_detector, normalize_charset, open_text
from textcsv.errors import EncapsulationParseError
from textcsv.media_type import MediaType, is_csv_or_tsv
from textcsv.override import get_override
from textcsv.patterns import CONTENT_TYPE, SUPPORTED_TYPES
from textcsv.sax import xhtml_writer
from textcsv.schema import ClassificationParams
from textcsv.sniffer import DelimiterSniffer
from textcsv.source import as_markable

logger = logging.getLogger(__name__)


def _is_binary(stream) -> bool:
    if isinstance(stream, io.TextIOBase):
        return False
    if isinstance(stream, (io.RawIOBase, io.BufferedIOBase)):
        return True
    read = getattr(stream, "read", None)
    return callable(read) and isinstance(read(0), bytes)


class TextAndCSVParser:
    """Parser for text/plain, text/csv and text/tsv documents."""

    def __init__(
        self,
        config: TextAndCSVConfig | None = None,
        encoding_detector: EncodingDetector = chardet_detector,
    ) -> None:
        self.config = config or TextAndCSVConfig()
        self.encoding_detector = encoding_detector

    @property
    def supported_types(self) -> frozenset[str]:
        return SUPPORTED_TYPES

    def parse(
        self,
        stream,
        handler: ContentHandler,
        metadata: MutableMapping,
        config: TextAndCSVConfig | None = None,
    ) -> ClassificationParams:
        """Classify *stream*, write it to *handler* and annotate *metadata*.

        *config* overrides the parser's configuration for this call only.
        Returns the resolved classification.  Raises EncapsulationParseError
        (after finishing a well-formed partial document) or OtherParseError.
        """
        config = config or self.config
        params = get_override(metadata, config)

        wrapper = None
        try:
            if _is_binary(stream):
                wrapper, charset = open_text(stream, params.charset, self.encoding_detector)
                if params.charset is None:
                    params.charset = charset
                text = wrapper
            else:
                text = stream
                if params.charset is None and (declared := normalize_charset(getattr(stream, "encoding", None))):
                    params.charset = declared

            reader = as_markable(text)
            if not params.is_complete:
                self._detect(params, config, reader, metadata)

            update_metadata(params, metadata, config)
            emitter = StreamingTableEmitter(config)

            if not is_csv_or_tsv(params.media_type):
                finalize_text_metadata(metadata, params.charset)
                emitter.emit_text(reader, handler)
            else:
                emitter.emit_table(reader, params.delimiter, handler, metadata)
        finally:
            if wrapper is not None:
                # Leave the caller's byte stream open
                wrapper.detach()
        return params

    def parse_to_xhtml(
        self,
        stream,
        metadata: MutableMapping | None = None,
        config: TextAndCSVConfig | None = None,
    ) -> str:
        """Parse *stream* and return the serialised XHTML document.

        On EncapsulationParseError the finished partial document is attached
        to the exception as ``details["xhtml"]``.
        """
        generator, out = xhtml_writer()
        try:
            self.parse(stream, generator, metadata if metadata is not None else {}, config)
        except EncapsulationParseError as exc:
            exc.details["xhtml"] = out.getvalue()
            raise
        return out.getvalue()

    def _detect(self, params: ClassificationParams, config: TextAndCSVConfig, reader, metadata: MutableMapping) -> None:
        # Already identified as something other than txt/csv/tsv: don't sniff
        incoming = MediaType.parse(metadata.get(CONTENT_TYPE))
        if incoming is not None and incoming.base_type not in SUPPORTED_TYPES:
            logger.info("Content type %s is not plain/csv/tsv; treating as text", incoming.base_type)
            params.media_type = incoming.with_parameters({})
            return

        if params.delimiter is None and (params.media_type is None or is_csv_or_tsv(params.media_type)):
            result = DelimiterSniffer.from_config(config).sniff(reader)
            params.apply(result.media_type, result.delimiter)
