"""Text acquisition from paystub documents.

Tries the embedded text layer first and falls back to OCR. The OCR
fallback renders each page at decreasing resolutions until a non-blank
bitmap comes out, then walks the image variants and page segmentation
modes until Tesseract returns text.
"""

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from paystub_ocr.preprocessing.pipeline import ImageVariant, PageImage, PreprocessingPipeline
from paystub_ocr.utils.config import OCRConfig
from paystub_ocr.utils.logger import get_logger, preview

from .document import DocumentKind, RawDocument, check_source, document_kind
from .image_handler import ImageHandler
from .pdf_handler import PDFHandler
from .tessdata import resolve_tessdata_dir
from .tesseract_engine import OCRSettings, PageSegMode, TesseractEngine

logger = get_logger(__name__)


class AcquisitionMethod(StrEnum):
    """Where the acquired text came from."""

    DIRECT = "direct"
    OCR = "ocr"
    NONE = "none"


@dataclass(frozen=True)
class Attempt:
    """Outcome of one OCR call on one page variant."""

    succeeded: bool
    text: str | None
    page_index: int
    variant: ImageVariant
    settings: OCRSettings
    error: str | None = None


@dataclass(frozen=True)
class AcquisitionResult:
    """Text read from a document and how it was obtained."""

    text: str
    succeeded: bool
    method: AcquisitionMethod
    attempts: tuple[Attempt, ...] = ()

    @property
    def used_ocr(self) -> bool:
        return self.method is AcquisitionMethod.OCR


class TextAcquirer:
    """Reads the text of a paystub, by direct extraction or OCR.

    Args:
        config: OCR configuration.
        preprocessing: Pipeline producing image variants for OCR.
        engine: OCR engine. Built from ``config`` if not given.
        pdf_handler: PDF reader. A default one is built if not given.
        image_handler: Raster image reader. A default one is built if not given.
    """

    def __init__(
        self,
        config: OCRConfig,
        preprocessing: PreprocessingPipeline,
        engine: TesseractEngine | None = None,
        pdf_handler: PDFHandler | None = None,
        image_handler: ImageHandler | None = None,
    ) -> None:
        self.config = config
        self.preprocessing = preprocessing
        self.engine = engine or TesseractEngine(tesseract_cmd=config.tesseract_cmd)
        self.handlers: dict[DocumentKind, PDFHandler | ImageHandler] = {
            DocumentKind.PDF: pdf_handler or PDFHandler(),
            DocumentKind.IMAGE: image_handler or ImageHandler(),
        }
        self.strategies: tuple[PageSegMode, ...] = tuple(
            PageSegMode(psm) for psm in config.psm_order
        )
        self._settings: OCRSettings | None = None

    @property
    def settings(self) -> OCRSettings:
        """Base OCR settings, resolving the tessdata directory on first use."""
        if self._settings is None:
            self._settings = OCRSettings(
                language=self.config.default_lang,
                psm=self.strategies[0] if self.strategies else PageSegMode.SINGLE_BLOCK,
                tessdata_dir=resolve_tessdata_dir(
                    self.config.tessdata_dir, self.config.default_lang
                ),
            )
        return self._settings

    def open(self, path: Path | str) -> RawDocument:
        """Build a document handle for a supported file.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the extension is not supported.
        """
        source = check_source(path)
        kind = document_kind(source)
        page_count = self.handlers[kind].get_page_count(source)
        return RawDocument(
            path=source,
            byte_length=source.stat().st_size,
            page_count=page_count,
            kind=kind,
        )

    def is_meaningful(self, text: str | None) -> bool:
        """Check whether text is long enough to be worth parsing."""
        return text is not None and len(text.strip()) >= self.config.min_text_length

    def acquire(self, document: RawDocument) -> AcquisitionResult:
        """Obtain the text of a document.

        Args:
            document: Handle of the document to read.

        Returns:
            Direct text if it is meaningful, otherwise the concatenated OCR
            text of all pages. ``succeeded`` is False when neither path
            produced meaningful text.
        """
        handler = self.handlers[document.kind]
        direct = handler.extract_text(document.path)
        if self.is_meaningful(direct):
            logger.info(
                "Direct text extraction: %d characters from %s",
                len(direct),
                document.path.name,
            )
            return AcquisitionResult(
                text=direct, succeeded=True, method=AcquisitionMethod.DIRECT
            )

        logger.info(
            "No meaningful text layer in %s (%d characters), attempting OCR on %d pages",
            document.path.name,
            len(direct.strip()),
            document.page_count,
        )
        attempts: list[Attempt] = []
        page_texts: list[str] = []
        for page_index in range(document.page_count):
            page = self._render(handler, document.path, page_index)
            if page is None:
                logger.error("Could not render page %d, skipping", page_index + 1)
                continue
            text = self._recognize_page(page, attempts)
            if text is None:
                logger.error(
                    "OCR failed on both binarized and original images for page %d",
                    page_index + 1,
                )
                continue
            page_texts.append(text)

        text = "\n".join(page_texts)
        if self.is_meaningful(text):
            logger.info("OCR extracted %d characters", len(text))
            logger.debug("OCR text preview: %s", preview(text))
            return AcquisitionResult(
                text=text,
                succeeded=True,
                method=AcquisitionMethod.OCR,
                attempts=tuple(attempts),
            )

        logger.warning("OCR produced no meaningful text for %s", document.path.name)
        return AcquisitionResult(
            text=text,
            succeeded=False,
            method=AcquisitionMethod.NONE,
            attempts=tuple(attempts),
        )

    def _render(
        self, handler: PDFHandler | ImageHandler, path: Path, page_index: int
    ) -> PageImage | None:
        """Render a page, stepping down resolutions past blank output.

        Returns:
            The first non-blank render. If every render is blank, the last
            one. ``None`` if no resolution rendered at all.
        """
        last: PageImage | None = None
        for dpi in handler.render_resolutions(self.config.dpi_options):
            try:
                pixels = handler.render_page(path, page_index, dpi)
            except RuntimeError as exc:
                logger.warning(
                    "Rendering page %d at %s DPI failed: %s", page_index + 1, dpi, exc
                )
                continue

            last = PageImage(pixels=pixels, page_index=page_index, dpi=dpi)
            if not self.preprocessing.is_blank(last):
                logger.debug(
                    "Page %d rendered at %s DPI: %dx%d",
                    page_index + 1,
                    dpi,
                    last.width,
                    last.height,
                )
                return last
            logger.warning("Page %d rendered blank at %s DPI", page_index + 1, dpi)

        if last is not None:
            logger.warning(
                "All renders of page %d look blank, using the last one", page_index + 1
            )
        return last

    def _recognize_page(self, page: PageImage, attempts: list[Attempt]) -> str | None:
        for variant in self.preprocessing.variants(page):
            for psm in self.strategies:
                attempt = self._attempt(variant, self.settings.with_psm(psm))
                attempts.append(attempt)
                if attempt.succeeded:
                    logger.info(
                        "Page %d: OCR succeeded with PSM %d (%s) on %s image",
                        page.page_index + 1,
                        psm,
                        psm.name,
                        variant.variant,
                    )
                    return attempt.text
        return None

    def _attempt(self, page: PageImage, settings: OCRSettings) -> Attempt:
        try:
            text = self.engine.recognize(page.pixels, settings)
        except (RuntimeError, OSError) as exc:
            # TesseractError is a RuntimeError, TesseractNotFoundError an OSError.
            logger.warning(
                "PSM %d on %s image of page %d raised: %s",
                settings.psm,
                page.variant,
                page.page_index + 1,
                exc,
            )
            return Attempt(
                succeeded=False,
                text=None,
                page_index=page.page_index,
                variant=page.variant,
                settings=settings,
                error=str(exc),
            )

        succeeded = bool(text and text.strip())
        if not succeeded:
            logger.debug(
                "PSM %d on %s image of page %d returned no text",
                settings.psm,
                page.variant,
                page.page_index + 1,
            )
        return Attempt(
            succeeded=succeeded,
            text=text,
            page_index=page.page_index,
            variant=page.variant,
            settings=settings,
        )
