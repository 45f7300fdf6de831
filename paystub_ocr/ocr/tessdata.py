"""Location of Tesseract trained-language data.

A ``tessdata`` directory next to the working directory wins. Otherwise
language files bundled under ``paystub_ocr/resources/tessdata`` are
copied once to a writable temp directory. If neither exists, Tesseract
falls back to its own installation data.
"""

import shutil
import tempfile
from importlib.resources import files
from importlib.resources.abc import Traversable
from pathlib import Path

from paystub_ocr.utils.logger import get_logger

logger = get_logger(__name__)

_TEMP_TESSDATA = Path(tempfile.gettempdir()) / "paystub_ocr" / "tessdata"


def bundled_tessdata() -> Traversable:
    """Directory of language data shipped inside the package."""
    return files("paystub_ocr") / "resources" / "tessdata"


def materialize_tessdata(
    source: Traversable, target: Path = _TEMP_TESSDATA
) -> Path | None:
    """Copy bundled language files to a writable directory.

    Files already present in ``target`` are kept, so repeated calls only
    copy once.

    Args:
        source: Directory holding ``*.traineddata`` resources.
        target: Destination directory.

    Returns:
        ``target`` if it holds at least one language file, else ``None``.
    """
    if not source.is_dir():
        return None

    resources = [r for r in source.iterdir() if r.is_file()]
    if not any(r.name.endswith(".traineddata") for r in resources):
        return None

    target.mkdir(parents=True, exist_ok=True)
    for resource in resources:
        destination = target / resource.name
        if destination.exists():
            continue
        logger.info("Extracting %s to %s", resource.name, target)
        with resource.open("rb") as src, open(destination, "wb") as dst:
            shutil.copyfileobj(src, dst)
    return target


def resolve_tessdata_dir(
    configured: str | None,
    language: str = "eng",
    bundled: Traversable | None = None,
    target: Path = _TEMP_TESSDATA,
) -> str | None:
    """Pick the tessdata directory handed to Tesseract.

    Args:
        configured: Local tessdata directory from configuration.
        language: Language whose ``.traineddata`` file must be present.
        bundled: Bundled resource directory, defaults to the package's.
        target: Where bundled data gets materialized.

    Returns:
        Directory path, or ``None`` to use Tesseract's default.
    """
    if configured:
        local = Path(configured)
        if (local / f"{language}.traineddata").is_file():
            logger.debug("Using tessdata from: %s", local)
            return str(local)

    try:
        extracted = materialize_tessdata(bundled or bundled_tessdata(), target)
    except OSError as exc:
        logger.error("Failed to extract bundled tessdata: %s", exc)
        extracted = None

    if extracted is not None:
        logger.debug("Using tessdata from: %s", extracted)
        return str(extracted)

    logger.debug("No local tessdata found, using Tesseract defaults")
    return None
