"""Parsing and formatting of "type/subtype; key=value" media-type strings."""

import re
from enum import Enum

from pydantic import BaseModel, ConfigDict

from textcsv.patterns import TEXT_CSV, TEXT_PLAIN, TEXT_TSV, TOKEN_RE

_ESCAPE_RE = re.compile(r"\\(.)")


def _split_parameters(value: str) -> list[str]:
    """Split on ';' outside double-quoted parameter values."""
    parts: list[str] = []
    current: list[str] = []
    in_quotes = False
    escaped = False
    for char in value:
        if escaped:
            escaped = False
        elif char == "\\" and in_quotes:
            escaped = True
        elif char == '"':
            in_quotes = not in_quotes
        elif char == ";" and not in_quotes:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    parts.append("".join(current))
    return parts


class MediaKind(str, Enum):
    """The four classifications a document can end up with."""

    PLAIN = "plain"
    CSV = "csv"
    TSV = "tsv"
    OTHER = "other"


class MediaType(BaseModel):
    """An immutable media type with lower-cased names and sorted parameters."""

    model_config = ConfigDict(frozen=True)

    type: str
    subtype: str
    parameters: dict[str, str] = {}

    @classmethod
    def parse(cls, value: str | None) -> "MediaType | None":
        """Parse *value*, returning None when it is not a well-formed media type."""
        if not value:
            return None
        head, *params = _split_parameters(value)
        if head.count("/") != 1:
            return None
        main, sub = (part.strip().lower() for part in head.split("/"))
        if not TOKEN_RE.match(main) or not TOKEN_RE.match(sub):
            return None

        parameters: dict[str, str] = {}
        for param in params:
            if not param.strip():
                continue
            key, sep, raw = param.partition("=")
            key = key.strip().lower()
            if not sep or not TOKEN_RE.match(key):
                return None
            raw = raw.strip()
            # Quoted values keep their inner whitespace
            if len(raw) >= 2 and raw[0] == raw[-1] == '"':
                raw = _ESCAPE_RE.sub(r"\1", raw[1:-1])
            parameters[key] = raw
        return cls(type=main, subtype=sub, parameters=parameters)

    @property
    def base_type(self) -> str:
        return f"{self.type}/{self.subtype}"

    @property
    def kind(self) -> MediaKind:
        return {
            TEXT_PLAIN: MediaKind.PLAIN,
            TEXT_CSV: MediaKind.CSV,
            TEXT_TSV: MediaKind.TSV,
        }.get(self.base_type, MediaKind.OTHER)

    def with_parameters(self, parameters: dict[str, str]) -> "MediaType":
        """Return the same base type carrying *parameters* instead of the current ones."""
        return MediaType(type=self.type, subtype=self.subtype, parameters=dict(parameters))

    def __str__(self) -> str:
        parts = [self.base_type]
        for key in sorted(self.parameters):
            value = self.parameters[key]
            # Values that are not plain tokens (e.g. a literal tab) need quoting
            if not TOKEN_RE.match(value):
                value = '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'
            parts.append(f"{key}={value}")
        return "; ".join(parts)


def is_csv_or_tsv(media_type: MediaType | None) -> bool:
    """Return True if *media_type* has a CSV or TSV base type."""
    if media_type is None:
        return False
    return media_type.kind in (MediaKind.CSV, MediaKind.TSV)


PLAIN = MediaType(type="text", subtype="plain")
CSV = MediaType(type="text", subtype="csv")
TSV = MediaType(type="text", subtype="tsv")
