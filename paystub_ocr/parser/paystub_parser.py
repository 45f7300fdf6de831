"""End-to-end paystub parsing.

Sequences text acquisition, field extraction, confidence scoring and
validation into one blocking pass per document.
"""

from pathlib import Path

from paystub_ocr.extraction.confidence import NO_EARNINGS_WARNING, ConfidenceScorer
from paystub_ocr.extraction.rule_extractor import ExtractionRules, RuleExtractor
from paystub_ocr.models.paystub import ExtractedPaystub
from paystub_ocr.ocr.document import check_source, is_supported
from paystub_ocr.ocr.text_acquisition import TextAcquirer
from paystub_ocr.preprocessing.pipeline import PreprocessingPipeline
from paystub_ocr.utils.config import AppConfig
from paystub_ocr.utils.logger import get_logger
from paystub_ocr.validation.rules_engine import RulesEngine

from .result import ConfidenceLevel, ParsingResult

logger = get_logger(__name__)

NO_TEXT_ERROR = (
    "No meaningful text could be extracted from the document (tried both direct "
    "text extraction and OCR). The file may be blank, corrupted, or in an "
    "unsupported format."
)


class PaystubParser:
    """Parses PDF and image paystubs into structured results.

    Each parser owns its OCR engine handle. Use one parser per worker
    thread; only the configuration is safe to share.

    Args:
        config: Application configuration. Defaults to built-in settings.
        acquirer: Text acquirer. Built from ``config`` if not given.
        rules_engine: Paystub validator. Built from ``config`` if not given.
    """

    name = "Paystub Parser"

    def __init__(
        self,
        config: AppConfig | None = None,
        acquirer: TextAcquirer | None = None,
        rules_engine: RulesEngine | None = None,
    ) -> None:
        self.config = config or AppConfig()
        self.acquirer = acquirer or TextAcquirer(
            self.config.ocr, PreprocessingPipeline(self.config.preprocessing)
        )
        self.extractor = RuleExtractor(ExtractionRules.from_config(self.config.extraction))
        self.scorer = ConfidenceScorer()
        self.rules_engine = rules_engine or RulesEngine(
            Path(self.config.validation.rules_path)
        )

    def supports(self, path: Path | str) -> bool:
        """Check whether a file type can be parsed."""
        return is_supported(path)

    def extract_text(self, path: Path | str) -> str:
        """Acquire the raw text of a document without parsing it.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file type is not supported.
        """
        document = self.acquirer.open(path)
        return self.acquirer.acquire(document).text

    def parse(self, path: Path | str) -> ParsingResult:
        """Parse one paystub document.

        Args:
            path: Path to a PDF or image paystub.

        Returns:
            The parsing result. Any failure after input validation is
            reported through ``errors`` with ``FAILED`` confidence.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file type is not supported.
        """
        source = check_source(path)
        logger.info("Starting paystub parsing for file: %s", source.name)

        paystub = ExtractedPaystub()
        raw_text = ""
        try:
            document = self.acquirer.open(source)
            acquisition = self.acquirer.acquire(document)
            raw_text = acquisition.text
            if not acquisition.succeeded:
                logger.error(
                    "Complete parsing failure for %s: only %d characters of text extracted",
                    source.name,
                    len(raw_text.strip()),
                )
                return self._failed(source, paystub, NO_TEXT_ERROR, raw_text)

            extraction = self.extractor.extract(raw_text)
            paystub = extraction.paystub
            assessment = self.scorer.score(
                extraction.fields_extracted, extraction.earnings_count
            )
            report = self.rules_engine.validate(paystub)
        except Exception as exc:
            logger.exception("Error parsing %s: %s", source.name, exc)
            return self._failed(source, paystub, f"Parsing error: {exc}", raw_text)

        logger.info(
            "Paystub parsing completed for %s. Confidence: %s, field groups extracted: %d",
            source.name,
            assessment.level,
            extraction.fields_extracted,
        )
        return ParsingResult(
            paystub=paystub,
            confidence=assessment.level,
            fields_needing_verification=tuple(extraction.fields_needing_verification),
            warnings=assessment.warnings + tuple(report.warnings),
            errors=(),
            raw_text=raw_text,
            source_file=source.name,
        )

    @staticmethod
    def _failed(
        source: Path, paystub: ExtractedPaystub, error: str, raw_text: str
    ) -> ParsingResult:
        warnings = () if paystub.earnings else (NO_EARNINGS_WARNING,)
        return ParsingResult(
            paystub=paystub,
            confidence=ConfidenceLevel.FAILED,
            warnings=warnings,
            errors=(error,),
            raw_text=raw_text,
            source_file=source.name,
        )
