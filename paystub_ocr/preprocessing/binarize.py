"""Grayscale conversion and Otsu binarization for page images.

The threshold is chosen from a 256-bin intensity histogram, so its cost
does not depend on the page resolution. Scanned paystubs are rarely
legitimately dark, so a computed threshold below the floor is treated
as histogram noise and raised to the floor. Very dark scans may come
out over-whitened as a result.
"""

import cv2
import numpy as np

from paystub_ocr.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_THRESHOLD = 128
THRESHOLD_FLOOR = 100


def to_gray(image: np.ndarray) -> np.ndarray:
    """Convert an RGB or RGBA page image to 8-bit grayscale.

    Uses the luminosity weights 0.299R + 0.587G + 0.114B.

    Args:
        image: Input image (RGB, RGBA or already grayscale).

    Returns:
        Grayscale ``uint8`` image.
    """
    if image.ndim == 3:
        code = cv2.COLOR_RGBA2GRAY if image.shape[2] == 4 else cv2.COLOR_RGB2GRAY
        image = cv2.cvtColor(image, code)
    if image.dtype != np.uint8:
        image = np.clip(image, 0, 255).astype(np.uint8)
    return image


def intensity_histogram(gray: np.ndarray) -> np.ndarray:
    """Build the 256-bin intensity histogram of a grayscale image."""
    hist = cv2.calcHist([gray], [0], None, [256], [0, 256])
    return hist.ravel().astype(np.float64)


def otsu_threshold(histogram: np.ndarray) -> int:
    """Compute Otsu's threshold from an intensity histogram.

    Maximizes the between-class variance ``wB * wF * (mB - mF) ** 2``
    using cumulative weights and means over the 256 bins. Pixels at or
    below the returned level form the background class. The first level
    reaching the maximum wins.

    Args:
        histogram: 256 pixel counts indexed by intensity.

    Returns:
        Threshold level, or ``DEFAULT_THRESHOLD`` when the histogram has
        fewer than two populated levels.
    """
    hist = np.asarray(histogram, dtype=np.float64).ravel()
    levels = np.arange(hist.size, dtype=np.float64)
    total = hist.sum()

    weight_bg = np.cumsum(hist)
    weight_fg = total - weight_bg
    sum_bg = np.cumsum(levels * hist)
    sum_fg = sum_bg[-1] - sum_bg

    valid = (weight_bg > 0) & (weight_fg > 0)
    if not valid.any():
        return DEFAULT_THRESHOLD

    mean_bg = sum_bg[valid] / weight_bg[valid]
    mean_fg = sum_fg[valid] / weight_fg[valid]
    variance = np.zeros_like(hist)
    variance[valid] = weight_bg[valid] * weight_fg[valid] * (mean_bg - mean_fg) ** 2

    if variance.max() <= 0:
        return DEFAULT_THRESHOLD
    return int(np.argmax(variance))


def compute_threshold(gray: np.ndarray, floor: int = THRESHOLD_FLOOR) -> int:
    """Compute the Otsu threshold of an image, clamped to ``floor``.

    Args:
        gray: Grayscale image.
        floor: Lowest threshold allowed.

    Returns:
        Threshold level in ``[floor, 255]``.
    """
    threshold = otsu_threshold(intensity_histogram(gray))
    if threshold < floor:
        logger.warning(
            "Calculated threshold %d is too low, adjusting to %d", threshold, floor
        )
        return floor
    logger.debug("Calculated Otsu threshold: %d", threshold)
    return threshold


def binarize(image: np.ndarray, floor: int = THRESHOLD_FLOOR) -> np.ndarray:
    """Binarize a page image against its clamped Otsu threshold.

    Args:
        image: Input image (RGB, RGBA or grayscale).
        floor: Lowest threshold allowed.

    Returns:
        New grayscale image holding only 0 (ink) and 255 (background).
    """
    gray = to_gray(image)
    threshold = compute_threshold(gray, floor)
    _, binary = cv2.threshold(gray, threshold, 255, cv2.THRESH_BINARY)
    logger.debug("Applied Otsu binarization (threshold=%d)", threshold)
    return binary
