"""Source document handles and input checks."""

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

PDF_EXTENSIONS = (".pdf",)
IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".tif", ".tiff", ".bmp")
SUPPORTED_EXTENSIONS = PDF_EXTENSIONS + IMAGE_EXTENSIONS

# Pages of a direct text extraction are joined with a form feed on its own line.
PAGE_BREAK = "\n\f\n"


class DocumentKind(StrEnum):
    """Acquisition path a source file takes."""

    PDF = "pdf"
    IMAGE = "image"


@dataclass(frozen=True)
class RawDocument:
    """Read-only handle to a source file owned by the caller."""

    path: Path
    byte_length: int
    page_count: int
    kind: DocumentKind


def is_supported(path: Path | str) -> bool:
    """Check whether a file has a supported paystub extension."""
    return Path(path).suffix.lower() in SUPPORTED_EXTENSIONS


def document_kind(path: Path) -> DocumentKind:
    """Classify a supported file as PDF or raster image."""
    if path.suffix.lower() in PDF_EXTENSIONS:
        return DocumentKind.PDF
    return DocumentKind.IMAGE


def check_source(path: Path | str) -> Path:
    """Validate a caller-supplied document path.

    Args:
        path: Path to a PDF or raster image.

    Returns:
        The path as a ``Path``.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the extension is not supported.
    """
    source = Path(path)
    if not source.is_file():
        raise FileNotFoundError(f"Document not found: {source}")
    if not is_supported(source):
        raise ValueError(
            f"Unsupported file type '{source.suffix}', expected one of "
            f"{', '.join(SUPPORTED_EXTENSIONS)}"
        )
    return source
