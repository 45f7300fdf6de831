"""Parsing result returned for every document handed to the parser."""

from dataclasses import dataclass, field
from enum import StrEnum

from paystub_ocr.models.paystub import ExtractedPaystub


class ConfidenceLevel(StrEnum):
    """How much of the expected paystub content was recovered."""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
    FAILED = "FAILED"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @property
    def description(self) -> str:
        return _CONFIDENCE_DESCRIPTIONS[self]


_CONFIDENCE_DESCRIPTIONS = {
    ConfidenceLevel.HIGH: "Most fields extracted successfully",
    ConfidenceLevel.MEDIUM: "Some fields extracted, verification recommended",
    ConfidenceLevel.LOW: "Minimal extraction, manual entry required",
    ConfidenceLevel.FAILED: "Parsing failed",
}


@dataclass(frozen=True)
class ParsingResult:
    """Outcome of one parsing pass over a document.

    The confidence is ``FAILED`` exactly when ``errors`` is non-empty;
    construction rejects any other combination.
    """

    paystub: ExtractedPaystub
    confidence: ConfidenceLevel
    fields_needing_verification: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    errors: tuple[str, ...] = ()
    raw_text: str = ""
    source_file: str | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        failed = self.confidence is ConfidenceLevel.FAILED
        if failed != bool(self.errors):
            raise ValueError(
                f"Confidence {self.confidence} is inconsistent with "
                f"{len(self.errors)} recorded error(s)"
            )

    @property
    def is_successful(self) -> bool:
        return self.confidence is not ConfidenceLevel.FAILED

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    @property
    def has_fields_needing_verification(self) -> bool:
        return bool(self.fields_needing_verification)
