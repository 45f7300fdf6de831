"""PDF text-layer extraction and page rendering.

Reads the embedded text layer with pdfplumber and rasterizes single
pages through poppler (pdf2image) when OCR is needed.
"""

from collections.abc import Sequence
from pathlib import Path

import numpy as np
import pdfplumber
from pdf2image import convert_from_path

from paystub_ocr.utils.logger import get_logger

from .document import PAGE_BREAK

logger = get_logger(__name__)


class PDFHandler:
    """Reads text from, and renders pages of, PDF paystubs.

    Args:
        poppler_path: Directory holding the poppler binaries.
            If ``None``, uses the system ``PATH``.
    """

    def __init__(self, poppler_path: str | None = None) -> None:
        self.poppler_path = poppler_path

    def extract_text(self, pdf_path: Path) -> str:
        """Extract the embedded text of every page.

        Args:
            pdf_path: Path to the PDF file.

        Returns:
            Page texts joined with page breaks. Empty for scanned PDFs.
        """
        with pdfplumber.open(pdf_path) as pdf:
            pages = [page.extract_text() or "" for page in pdf.pages]
        logger.debug(
            "Direct extraction read %d characters from %d pages",
            sum(len(p) for p in pages),
            len(pages),
        )
        return PAGE_BREAK.join(pages)

    def get_page_count(self, pdf_path: Path) -> int:
        """Get the number of pages in a PDF from its page tree.

        Needs no poppler binaries, so text-layer PDFs can be read on hosts
        without them.

        Args:
            pdf_path: Path to the PDF file.

        Returns:
            Number of pages in the PDF.
        """
        with pdfplumber.open(pdf_path) as pdf:
            count = len(pdf.pages)
        logger.debug("PDF %s has %d pages", pdf_path, count)
        return count

    def render_page(self, pdf_path: Path, page_index: int, dpi: int | None) -> np.ndarray:
        """Render one page to an RGB image.

        Args:
            pdf_path: Path to the PDF file.
            page_index: Zero-based page index.
            dpi: Rendering resolution.

        Returns:
            Page image as a numpy array (RGB format).

        Raises:
            RuntimeError: If poppler fails to render the page.
        """
        try:
            pil_images = convert_from_path(
                str(pdf_path),
                dpi=dpi or 300,
                first_page=page_index + 1,
                last_page=page_index + 1,
                poppler_path=self.poppler_path,
            )
        except Exception as exc:
            raise RuntimeError(f"PDF rendering failed: {exc}") from exc

        if not pil_images:
            raise RuntimeError(f"PDF rendering produced no image for page {page_index + 1}")

        image = np.array(pil_images[0].convert("RGB"))
        logger.debug(
            "Rendered page %d at %s DPI: %dx%d pixels",
            page_index + 1,
            dpi,
            image.shape[1],
            image.shape[0],
        )
        return image

    def render_resolutions(self, preferred: Sequence[int]) -> list[int | None]:
        """Resolutions to try when rendering a page, in order."""
        return list(preferred)
