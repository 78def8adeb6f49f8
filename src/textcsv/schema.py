"""Pydantic models for per-document classification state."""

from pydantic import BaseModel, ConfigDict, field_validator

from textcsv.media_type import MediaKind, MediaType, is_csv_or_tsv


class ClassificationParams(BaseModel):
    """Media type, delimiter and charset resolved for one document.

    Filled incrementally (override first, then detection) and frozen once
    complete: a complete instance rejects further assignment.
    """

    model_config = ConfigDict(validate_assignment=True)

    media_type: MediaType | None = None
    delimiter: str | None = None
    charset: str | None = None

    @field_validator("delimiter")
    @classmethod
    def _single_character(cls, value: str | None) -> str | None:
        if value is not None and len(value) != 1:
            raise ValueError(f"delimiter must be a single character, got {value!r}")
        return value

    @property
    def kind(self) -> MediaKind | None:
        return self.media_type.kind if self.media_type is not None else None

    @property
    def is_complete(self) -> bool:
        if self.media_type is None or self.charset is None:
            return False
        return not is_csv_or_tsv(self.media_type) or self.delimiter is not None

    def __setattr__(self, name, value):
        if self.is_complete:
            raise AttributeError(f"cannot set {name!r}: classification is already complete")
        super().__setattr__(name, value)

    def apply(self, media_type: MediaType, delimiter: str | None) -> None:
        """Set media type and delimiter together, so completing one does not freeze the other."""
        if self.is_complete:
            raise AttributeError("classification is already complete")
        BaseModel.__setattr__(self, "delimiter", delimiter)
        BaseModel.__setattr__(self, "media_type", media_type)


class DelimiterCandidateScore(BaseModel):
    """How consistently one candidate splits the sampled lines."""

    delimiter: str
    modal_columns: int
    confidence: float


class SniffResult(BaseModel):
    """Outcome of sniffing a bounded prefix."""

    model_config = ConfigDict(frozen=True)

    media_type: MediaType
    delimiter: str | None
    confidence: float

    @property
    def kind(self) -> MediaKind:
        return self.media_type.kind
