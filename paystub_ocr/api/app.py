"""FastAPI application for the paystub OCR API.

Provides REST endpoints for single and batch paystub parsing and a
health check. Handlers are synchronous; FastAPI runs them in its
worker threadpool, and every request gets its own parser.
"""

import shutil
import tempfile
import time
from pathlib import Path
from typing import Annotated

from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware

from paystub_ocr import __version__
from paystub_ocr.ocr.document import SUPPORTED_EXTENSIONS, is_supported
from paystub_ocr.parser.paystub_parser import PaystubParser
from paystub_ocr.utils.config import load_config
from paystub_ocr.utils.logger import get_logger

from .schemas import (
    BatchItemResponse,
    BatchParsingResponse,
    HealthResponse,
    ParsingResponse,
)

logger = get_logger(__name__)

app = FastAPI(
    title="Paystub OCR API",
    description="Extract payroll facts from PDF and scanned paystubs",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _get_parser() -> PaystubParser:
    """Build a parser for one request from the current configuration."""
    return PaystubParser(load_config())


@app.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return system health status."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        tesseract_available=shutil.which("tesseract") is not None,
    )


@app.post("/parse", response_model=ParsingResponse)
def parse_paystub(file: Annotated[UploadFile, File(...)]) -> ParsingResponse:
    """Parse an uploaded paystub.

    Args:
        file: Uploaded PDF or image paystub.

    Returns:
        Extracted paystub with confidence, warnings and errors.
    """
    filename = Path(file.filename or "document").name
    if not is_supported(filename):
        raise HTTPException(
            status_code=400,
            detail=(
                f"Unsupported file type: {filename}. "
                f"Supported: {', '.join(SUPPORTED_EXTENSIONS)}"
            ),
        )

    start_time = time.time()
    try:
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = Path(tmp_dir) / f"upload{Path(filename).suffix.lower()}"
            with open(path, "wb") as out:
                shutil.copyfileobj(file.file, out)
            result = _get_parser().parse(path)
    except Exception as exc:
        logger.error("Parsing %s failed: %s", filename, exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    processing_time = (time.time() - start_time) * 1000
    logger.info(
        "Parsed %s in %.0f ms with %s confidence",
        filename,
        processing_time,
        result.confidence,
    )
    return ParsingResponse.from_result(
        result, filename=filename, processing_time_ms=processing_time
    )


@app.post("/parse/batch", response_model=BatchParsingResponse)
def parse_batch(
    files: Annotated[list[UploadFile], File(...)],
) -> BatchParsingResponse:
    """Parse multiple uploaded paystubs.

    Args:
        files: List of uploaded paystub files.

    Returns:
        Batch results with per-file outcomes.
    """
    results: list[BatchItemResponse] = []
    successful = 0

    for file in files:
        filename = file.filename or "unknown"
        try:
            result = parse_paystub(file)
        except HTTPException as exc:
            results.append(BatchItemResponse(filename=filename, error=str(exc.detail)))
            continue

        results.append(BatchItemResponse(filename=filename, result=result))
        if result.success:
            successful += 1

    return BatchParsingResponse(
        success=successful > 0,
        total_documents=len(files),
        successful=successful,
        failed=len(files) - successful,
        results=results,
    )
