"""Raster image paystubs (scans and photos).

Images have no text layer and a fixed resolution, so each frame is
"rendered" exactly once. Multi-frame TIFFs are treated as multi-page
documents.
"""

from collections.abc import Sequence
from pathlib import Path

import numpy as np
from PIL import Image

from paystub_ocr.utils.logger import get_logger

logger = get_logger(__name__)


class ImageHandler:
    """Loads pages of PNG, JPEG, TIFF and BMP paystubs."""

    def extract_text(self, image_path: Path) -> str:
        """Raster images carry no text layer."""
        return ""

    def get_page_count(self, image_path: Path) -> int:
        """Count the frames of an image file.

        Raises:
            PIL.UnidentifiedImageError: If the file is not a readable image.
        """
        with Image.open(image_path) as img:
            return getattr(img, "n_frames", 1)

    def render_page(
        self, image_path: Path, page_index: int, dpi: int | None = None
    ) -> np.ndarray:
        """Load one frame as an RGB image. ``dpi`` does not apply.

        Raises:
            RuntimeError: If the frame cannot be decoded.
        """
        try:
            with Image.open(image_path) as img:
                img.seek(page_index)
                image = np.array(img.convert("RGB"))
        except (OSError, EOFError) as exc:
            raise RuntimeError(f"Image loading failed: {exc}") from exc

        logger.debug(
            "Loaded frame %d of %s: %dx%d pixels",
            page_index + 1,
            image_path.name,
            image.shape[1],
            image.shape[0],
        )
        return image

    def render_resolutions(self, preferred: Sequence[int]) -> list[int | None]:
        """A raster frame is loaded once at its native resolution."""
        return [None]
