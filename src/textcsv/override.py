"""Caller-forced classification ("type/subtype; charset=...; delimiter=...").

An override is authoritative but never fatal: anything that cannot be
understood is treated as absent and detection fills the gap.
"""

import logging
from typing import Mapping

from textcsv.config import TextAndCSVConfig
from textcsv.encoding import normalize_charset
from textcsv.media_type import MediaType, is_csv_or_tsv
from textcsv.patterns import CHARSET, CONTENT_TYPE_OVERRIDE, DELIMITER
from textcsv.schema import ClassificationParams

logger = logging.getLogger(__name__)


def resolve_delimiter(value: str, config: TextAndCSVConfig) -> str | None:
    """Map a delimiter parameter to its character: configured name, else a literal single character."""
    if value in config.name_to_delimiter:
        return config.name_to_delimiter[value]
    if len(value) == 1:
        return value
    logger.warning("Ignoring unrecognised delimiter %r in content-type override", value)
    return None


def parse_override(override: str | None, config: TextAndCSVConfig) -> ClassificationParams:
    """Turn an override string into (possibly empty) classification params."""
    media_type = MediaType.parse(override)
    if media_type is None:
        if override:
            logger.warning("Ignoring unparsable content-type override %r", override)
        return ClassificationParams()

    charset = None
    if (charset_name := media_type.parameters.get(CHARSET)) is not None:
        charset = normalize_charset(charset_name)
        if charset is None:
            logger.warning("Ignoring unknown charset %r in content-type override", charset_name)

    # The override's own parameters are not carried into the final content type
    base = media_type.with_parameters({})
    if not is_csv_or_tsv(base):
        return ClassificationParams(media_type=base, charset=charset)

    delimiter = None
    if (delimiter_name := media_type.parameters.get(DELIMITER)) is not None:
        delimiter = resolve_delimiter(delimiter_name, config)
    return ClassificationParams(media_type=base, charset=charset, delimiter=delimiter)


def get_override(metadata: Mapping, config: TextAndCSVConfig) -> ClassificationParams:
    """Read the override from the caller's metadata record."""
    return parse_override(metadata.get(CONTENT_TYPE_OVERRIDE), config)
