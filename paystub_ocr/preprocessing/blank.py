"""Detection of blank (degenerate) page renders."""

import numpy as np

from paystub_ocr.utils.logger import get_logger

logger = get_logger(__name__)

# Coprime strides keep the sample from lining up with table rules.
_X_STRIDE = 97
_Y_STRIDE = 101


def is_blank(
    image: np.ndarray,
    sample_limit: int = 1000,
    tolerance: float = 0.01,
) -> bool:
    """Check whether a rendered page is effectively a single color.

    Samples up to ``sample_limit`` pixels (at most 1% of the page) at
    ``(i * 97 mod width, i * 101 mod height)`` and compares each to the
    first sample.

    Args:
        image: Page image (grayscale or multi-channel).
        sample_limit: Maximum number of pixels to sample.
        tolerance: Fraction of differing samples below which the page
            counts as blank.

    Returns:
        ``True`` if fewer than ``tolerance`` of the samples differ from
        the first one.
    """
    height, width = image.shape[:2]
    if height == 0 or width == 0:
        return True

    sample_size = min(sample_limit, width * height // 100)
    if sample_size == 0:
        return False

    index = np.arange(sample_size)
    samples = image[(index * _Y_STRIDE) % height, (index * _X_STRIDE) % width]

    differs = samples != samples[0]
    if differs.ndim > 1:
        differs = differs.any(axis=-1)
    different = int(differs.sum())

    blank = different < sample_size * tolerance
    if blank:
        logger.warning(
            "Image appears blank: only %d of %d sampled pixels differ from first pixel",
            different,
            sample_size,
        )
    return blank
