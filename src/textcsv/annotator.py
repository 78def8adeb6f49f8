"""Final content-type descriptor and legacy charset field for a classified document.

  plain text                -> text/plain; charset=...
  delimiter is a tab        -> text/tsv; charset=...; delimiter=<label>
  any other delimiter       -> text/csv; charset=...; delimiter=<label>

The delimiter label is the configured name, or the decimal code point when
the delimiter has no name.
"""

import logging
from typing import MutableMapping

from textcsv.config import TextAndCSVConfig
from textcsv.media_type import CSV, PLAIN, TSV, MediaKind, MediaType
from textcsv.patterns import CHARSET, CONTENT_ENCODING, CONTENT_TYPE, DELIMITER
from textcsv.schema import ClassificationParams

logger = logging.getLogger(__name__)


def delimiter_label(delimiter: str, config: TextAndCSVConfig) -> str:
    """Return the configured name for *delimiter*, or its code point."""
    return config.delimiter_to_name.get(delimiter, str(ord(delimiter)))


def _resolve_base(params: ClassificationParams, metadata: MutableMapping) -> MediaType:
    if params.kind == MediaKind.PLAIN:
        return PLAIN
    if params.delimiter is not None:
        return TSV if params.delimiter == "\t" else CSV
    # Pre-classified documents keep whatever type they arrived with
    incoming = MediaType.parse(metadata.get(CONTENT_TYPE))
    if incoming is not None:
        return incoming.with_parameters({})
    return params.media_type if params.media_type is not None else PLAIN


def update_metadata(
    params: ClassificationParams,
    metadata: MutableMapping,
    config: TextAndCSVConfig,
) -> MediaType:
    """Write the resolved content type (and legacy charset field) into *metadata*."""
    base = _resolve_base(params, metadata)

    attrs: dict[str, str] = {}
    if params.charset is not None:
        attrs[CHARSET] = params.charset
        metadata[CONTENT_ENCODING] = params.charset
    if base.kind != MediaKind.PLAIN and params.delimiter is not None:
        attrs[DELIMITER] = delimiter_label(params.delimiter, config)

    media_type = base.with_parameters(attrs)
    metadata[CONTENT_TYPE] = str(media_type)
    logger.debug("Content type resolved to %s", media_type)
    return media_type


def finalize_text_metadata(metadata: MutableMapping, charset: str | None) -> MediaType:
    """Content type for the text path: the incoming type (default text/plain) plus charset."""
    incoming = MediaType.parse(metadata.get(CONTENT_TYPE)) or PLAIN
    parameters = dict(incoming.parameters)
    if charset is not None:
        parameters[CHARSET] = charset
        metadata[CONTENT_ENCODING] = charset
    media_type = incoming.with_parameters(parameters)
    metadata[CONTENT_TYPE] = str(media_type)
    return media_type
