"""Shared, read-only configuration for text/CSV classification.

A TextAndCSVConfig is built once (directly or from the environment via
load_config) and then shared by every document parse.  It is a frozen pydantic
model; the delimiter maps are handed out as read-only views.
"""

import json
import logging
import os
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_serializer, field_validator, model_validator

from textcsv.errors import ConfigurationError
from textcsv.patterns import DEFAULT_DELIMITERS, DEFAULT_MARK_LIMIT, DEFAULT_MIN_CONFIDENCE

logger = logging.getLogger(__name__)

ROOT = Path(__file__).parent.parent.parent.resolve()


class TextAndCSVConfig(BaseModel):
    """Delimiter names, candidate delimiters and sniffing limits.

    ``delimiters`` maps a name (used in overrides and in the delimiter label)
    to exactly one character.  ``candidates`` lists the characters the
    sniffer tries, in tie-break order; it defaults to the map's characters in
    declaration order.
    """

    model_config = ConfigDict(frozen=True)

    delimiters: Mapping[str, str] = Field(default_factory=lambda: MappingProxyType(dict(DEFAULT_DELIMITERS)))
    candidates: tuple[str, ...] | None = None
    mark_limit: int = DEFAULT_MARK_LIMIT
    min_confidence: float = DEFAULT_MIN_CONFIDENCE

    # ConfigurationError is not a ValueError, so pydantic lets it propagate as-is

    @field_validator("delimiters")
    @classmethod
    def _single_character_delimiters(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        for name, delimiter in value.items():
            if len(delimiter) != 1:
                raise ConfigurationError(
                    f"delimiter must be a single character: {delimiter!r}",
                    details={"name": name},
                )
        # Copied and wrapped so the shared config cannot be edited in place
        return MappingProxyType(dict(value))

    @field_serializer("delimiters")
    def _dump_delimiters(self, value: Mapping[str, str]) -> dict[str, str]:
        return dict(value)

    @field_validator("mark_limit")
    @classmethod
    def _positive_mark_limit(cls, value: int) -> int:
        if value <= 0:
            raise ConfigurationError(f"mark_limit must be positive, got {value}")
        return value

    @field_validator("min_confidence")
    @classmethod
    def _confidence_in_range(cls, value: float) -> float:
        if not 0.0 <= value <= 1.0:
            raise ConfigurationError(f"min_confidence must be within [0, 1], got {value}")
        return value

    @model_validator(mode="after")
    def _resolve_candidates(self) -> "TextAndCSVConfig":
        """Default the candidates to the configured delimiters and check their width."""
        if self.candidates is None:
            # dict.fromkeys keeps declaration order while dropping repeated characters
            object.__setattr__(self, "candidates", tuple(dict.fromkeys(self.delimiters.values())))
        for candidate in self.candidates:
            if len(candidate) != 1:
                raise ConfigurationError(f"candidate delimiter must be a single character: {candidate!r}")
        if not self.candidates:
            raise ConfigurationError("at least one candidate delimiter is required")
        return self

    @property
    def name_to_delimiter(self) -> Mapping[str, str]:
        return self.delimiters

    @property
    def delimiter_to_name(self) -> Mapping[str, str]:
        """Reverse map; when two names share a character the first one wins."""
        reverse: dict[str, str] = {}
        for name, delimiter in self.delimiters.items():
            reverse.setdefault(delimiter, name)
        return MappingProxyType(reverse)


def load_config(env_file: Path | None = None) -> TextAndCSVConfig:
    """Build a config from ``TEXTCSV_*`` environment variables.

    ``TEXTCSV_DELIMITERS`` is a JSON object of name -> character and
    ``TEXTCSV_CANDIDATES`` a JSON list of characters.  Unset variables keep
    their defaults.  Malformed values raise ConfigurationError.
    """
    load_dotenv(env_file or ROOT / ".env")

    kwargs: dict = {}
    try:
        if raw := os.getenv("TEXTCSV_DELIMITERS"):
            kwargs["delimiters"] = json.loads(raw)
        if raw := os.getenv("TEXTCSV_CANDIDATES"):
            kwargs["candidates"] = tuple(json.loads(raw))
        if raw := os.getenv("TEXTCSV_MARK_LIMIT"):
            kwargs["mark_limit"] = int(raw)
        if raw := os.getenv("TEXTCSV_MIN_CONFIDENCE"):
            kwargs["min_confidence"] = float(raw)
    except (json.JSONDecodeError, TypeError, ValueError) as exc:
        raise ConfigurationError(f"invalid textcsv environment setting: {exc}") from exc

    try:
        config = TextAndCSVConfig(**kwargs)
    except ValidationError as exc:
        raise ConfigurationError(f"invalid textcsv configuration: {exc}") from exc

    logger.debug(
        "Loaded config: %d delimiters, mark_limit=%d, min_confidence=%.2f",
        len(config.delimiters),
        config.mark_limit,
        config.min_confidence,
    )
    return config
