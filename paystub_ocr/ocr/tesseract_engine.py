"""Tesseract OCR engine wrapper.

Recognition settings are an immutable value passed into every call, so
one engine can serve a sequence of attempts with different page
segmentation modes without any state carried between them.
"""

from dataclasses import dataclass, replace
from enum import IntEnum

import numpy as np
import pytesseract
from PIL import Image

from paystub_ocr.utils.logger import get_logger

logger = get_logger(__name__)


class PageSegMode(IntEnum):
    """Tesseract page segmentation modes used for paystubs."""

    AUTO_OSD = 1
    AUTO = 3
    SINGLE_COLUMN = 4
    SINGLE_BLOCK = 6
    SPARSE_TEXT = 11
    SPARSE_TEXT_OSD = 12


# Paystubs are tabular: uniform block and column layouts usually read best.
DEFAULT_PSM_ORDER: tuple[PageSegMode, ...] = (
    PageSegMode.SINGLE_BLOCK,
    PageSegMode.SINGLE_COLUMN,
    PageSegMode.AUTO,
    PageSegMode.AUTO_OSD,
    PageSegMode.SPARSE_TEXT,
    PageSegMode.SPARSE_TEXT_OSD,
)


@dataclass(frozen=True)
class OCRSettings:
    """Configuration of a single recognition call."""

    language: str = "eng"
    psm: PageSegMode = PageSegMode.SINGLE_BLOCK
    tessdata_dir: str | None = None

    def with_psm(self, psm: PageSegMode) -> "OCRSettings":
        return replace(self, psm=psm)

    def to_config(self) -> str:
        """Render the settings as Tesseract command-line options."""
        config = f"--psm {int(self.psm)}"
        if self.tessdata_dir:
            config += f' --tessdata-dir "{self.tessdata_dir}"'
        return config


class TesseractEngine:
    """Wrapper around Tesseract OCR for page text recognition.

    Args:
        tesseract_cmd: Path to the Tesseract executable.
            If ``None``, uses the system default.
    """

    def __init__(self, tesseract_cmd: str | None = None) -> None:
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

    def recognize(self, image: np.ndarray, settings: OCRSettings) -> str:
        """Recognize the text of one page image.

        Args:
            image: Page image as a numpy array.
            settings: Language, segmentation mode and data path to use.

        Returns:
            Recognized text, possibly empty.

        Raises:
            pytesseract.TesseractError: If Tesseract fails on the image.
            pytesseract.TesseractNotFoundError: If Tesseract is not installed.
        """
        pil_image = Image.fromarray(image)
        text = pytesseract.image_to_string(
            pil_image, lang=settings.language, config=settings.to_config()
        )
        logger.debug(
            "Tesseract PSM %d (%s) returned %d characters",
            settings.psm,
            settings.psm.name,
            len(text),
        )
        return text
