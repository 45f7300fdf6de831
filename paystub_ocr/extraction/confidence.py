"""Confidence scoring for extracted paystubs."""

from dataclasses import dataclass

from paystub_ocr.parser.result import ConfidenceLevel
from paystub_ocr.utils.logger import get_logger

logger = get_logger(__name__)

NO_EARNINGS_WARNING = "No earnings could be automatically extracted"
LOW_CONFIDENCE_WARNING = "Low confidence: minimal extraction, manual entry required"

HIGH_MIN_FIELDS = 5
HIGH_MIN_EARNINGS = 2
MEDIUM_MIN_FIELDS = 3
MEDIUM_MIN_EARNINGS = 1


@dataclass(frozen=True)
class ConfidenceAssessment:
    """Confidence tier and the warnings that go with it."""

    level: ConfidenceLevel
    warnings: tuple[str, ...] = ()


class ConfidenceScorer:
    """Reduces extraction counts to a four-level confidence rating.

    Any hard error forces ``FAILED``. Otherwise five or more field groups
    with at least two earnings is ``HIGH``, three or more groups with at
    least one earning is ``MEDIUM``, and anything less is ``LOW``.
    """

    def score(
        self, fields_extracted: int, earnings_count: int, has_errors: bool = False
    ) -> ConfidenceAssessment:
        """Rate an extraction.

        Args:
            fields_extracted: Number of field groups that were found.
            earnings_count: Number of earning rows extracted.
            has_errors: Whether a hard error was recorded.

        Returns:
            The confidence tier plus warnings about thin extractions.
        """
        warnings: list[str] = []
        if earnings_count == 0:
            warnings.append(NO_EARNINGS_WARNING)

        if has_errors:
            level = ConfidenceLevel.FAILED
        elif fields_extracted >= HIGH_MIN_FIELDS and earnings_count >= HIGH_MIN_EARNINGS:
            level = ConfidenceLevel.HIGH
        elif fields_extracted >= MEDIUM_MIN_FIELDS and earnings_count >= MEDIUM_MIN_EARNINGS:
            level = ConfidenceLevel.MEDIUM
        else:
            level = ConfidenceLevel.LOW
            warnings.append(LOW_CONFIDENCE_WARNING)

        logger.debug(
            "Confidence %s from %d field groups and %d earnings",
            level,
            fields_extracted,
            earnings_count,
        )
        return ConfidenceAssessment(level=level, warnings=tuple(warnings))
