"""Page image preprocessing ahead of OCR.

Wraps blank detection and binarization around ``PageImage`` values and
decides the order in which image variants are handed to the OCR engine.
"""

from dataclasses import dataclass, replace
from enum import StrEnum

import numpy as np

from paystub_ocr.utils.config import PreprocessingConfig
from paystub_ocr.utils.logger import get_logger

from .binarize import binarize, to_gray
from .blank import is_blank

logger = get_logger(__name__)


class ImageVariant(StrEnum):
    """Preprocessing state of a page image."""

    ORIGINAL = "original"
    BINARIZED = "binarized"


@dataclass(frozen=True, eq=False)
class PageImage:
    """A rendered bitmap of one document page."""

    pixels: np.ndarray
    page_index: int
    dpi: int | None = None
    variant: ImageVariant = ImageVariant.ORIGINAL

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])


def calculate_contrast(image: np.ndarray) -> float:
    """Calculate image contrast as the standard deviation of pixel intensities.

    Args:
        image: Input image (RGB or grayscale).

    Returns:
        Contrast score (higher means more contrast).
    """
    return float(to_gray(image).std())


class PreprocessingPipeline:
    """Prepares rendered pages for OCR.

    Args:
        config: Preprocessing configuration (threshold floor and blank
            detection sampling).
    """

    def __init__(self, config: PreprocessingConfig) -> None:
        self.config = config

    def is_blank(self, page: PageImage) -> bool:
        """Check whether a rendered page is degenerate."""
        return is_blank(
            page.pixels,
            sample_limit=self.config.blank_sample_limit,
            tolerance=self.config.blank_tolerance,
        )

    def binarize(self, page: PageImage) -> PageImage:
        """Produce the binarized variant of a page image."""
        binary = binarize(page.pixels, floor=self.config.threshold_floor)
        return replace(page, pixels=binary, variant=ImageVariant.BINARIZED)

    def variants(self, page: PageImage) -> list[PageImage]:
        """Return the variants to try for OCR, best candidate first.

        Args:
            page: The original rendered page.

        Returns:
            ``[binarized, original]``.
        """
        binarized = self.binarize(page)
        logger.debug(
            "Page %d variants: contrast original %.1f, binarized %.1f",
            page.page_index + 1,
            calculate_contrast(page.pixels),
            calculate_contrast(binarized.pixels),
        )
        return [binarized, page]
