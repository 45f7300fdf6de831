"""Centralized logging setup for the paystub OCR pipeline.

Provides one root handler with consistent formatting, keeps the very
chatty PDF/image libraries at WARNING, and offers a helper for logging
short previews of extracted text.
"""

import logging
import sys

# pdfminer (under pdfplumber) emits one DEBUG record per parsed PDF object.
_NOISY_LOGGERS = ("pdfminer", "PIL", "multipart")


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger with a standard format.

    Args:
        level: Logging level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    root = logging.getLogger()

    if root.handlers:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(handler)
    root.setLevel(numeric_level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))


def get_logger(name: str) -> logging.Logger:
    """Get a named logger instance.

    Args:
        name: Logger name, typically ``__name__`` of the calling module.

    Returns:
        Configured logger instance.
    """
    return logging.getLogger(name)


def preview(text: str | None, limit: int = 100) -> str:
    """Shorten extracted text to a single-line preview for log messages.

    Args:
        text: Text to preview, may be ``None``.
        limit: Maximum number of characters kept.

    Returns:
        Preview string, ``"<empty>"`` when there is no text.
    """
    if not text or not text.strip():
        return "<empty>"
    flat = " ".join(text.split())
    if len(flat) <= limit:
        return flat
    return flat[:limit] + "..."
