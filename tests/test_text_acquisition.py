"""Tests for direct text extraction and the OCR fallback loop."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import numpy as np
import pytest
import pytesseract

from paystub_ocr.ocr.document import DocumentKind, RawDocument
from paystub_ocr.ocr.tesseract_engine import PageSegMode
from paystub_ocr.ocr.text_acquisition import AcquisitionMethod, TextAcquirer
from paystub_ocr.preprocessing.pipeline import ImageVariant, PreprocessingPipeline
from paystub_ocr.utils.config import OCRConfig, PreprocessingConfig

OCR_TEXT = "Employee: John Smith\nRegular 1600.00 8000.00\n"


def _document(page_count: int = 1, kind: DocumentKind = DocumentKind.PDF) -> RawDocument:
    return RawDocument(
        path=Path("/fake/stub.pdf"), byte_length=1024, page_count=page_count, kind=kind
    )


def _pdf_handler(direct_text: str, pages: list[np.ndarray] | None = None) -> MagicMock:
    handler = MagicMock()
    handler.extract_text.return_value = direct_text
    handler.render_resolutions.side_effect = lambda preferred: list(preferred)
    if pages is not None:
        handler.render_page.side_effect = pages
    return handler


@pytest.fixture(autouse=True)
def _no_tessdata_lookup():
    with patch(
        "paystub_ocr.ocr.text_acquisition.resolve_tessdata_dir", return_value=None
    ):
        yield


class TestDirectExtraction:
    """Tests for the text-layer path."""

    def test_meaningful_direct_text_skips_ocr(self, sample_text: str) -> None:
        engine = MagicMock()
        handler = _pdf_handler(sample_text)
        acquirer = TextAcquirer(
            OCRConfig(), PreprocessingPipeline(PreprocessingConfig()), engine, handler
        )

        result = acquirer.acquire(_document())

        assert result.succeeded is True
        assert result.method is AcquisitionMethod.DIRECT
        assert result.text == sample_text
        assert result.attempts == ()
        engine.recognize.assert_not_called()
        handler.render_page.assert_not_called()

    def test_exactly_ten_characters_is_enough(self) -> None:
        acquirer = TextAcquirer(
            OCRConfig(), PreprocessingPipeline(PreprocessingConfig()), MagicMock()
        )
        assert acquirer.is_meaningful("  0123456789  ") is True
        assert acquirer.is_meaningful("012345678") is False
        assert acquirer.is_meaningful(None) is False


class TestOCRFallback:
    """Tests for the OCR fallback loop."""

    def setup_method(self) -> None:
        self.config = OCRConfig()
        self.pipeline = PreprocessingPipeline(PreprocessingConfig())

    def test_short_direct_text_falls_back_to_ocr(self, sample_page: np.ndarray) -> None:
        engine = MagicMock()
        engine.recognize.return_value = OCR_TEXT
        handler = _pdf_handler("  abc \n", [sample_page])
        acquirer = TextAcquirer(self.config, self.pipeline, engine, handler)

        result = acquirer.acquire(_document())

        assert result.succeeded is True
        assert result.method is AcquisitionMethod.OCR
        assert result.used_ocr is True
        assert result.text == OCR_TEXT
        assert len(result.attempts) == 1
        first = result.attempts[0]
        assert first.variant is ImageVariant.BINARIZED
        assert first.settings.psm is PageSegMode.SINGLE_BLOCK
        handler.render_page.assert_called_once_with(Path("/fake/stub.pdf"), 0, 300)

    def test_psm_order_then_original_image(self, sample_page: np.ndarray) -> None:
        engine = MagicMock()
        engine.recognize.side_effect = [""] * 6 + ["   "] + [OCR_TEXT]
        handler = _pdf_handler("", [sample_page])
        acquirer = TextAcquirer(self.config, self.pipeline, engine, handler)

        result = acquirer.acquire(_document())

        assert result.succeeded is True
        psms = [int(a.settings.psm) for a in result.attempts]
        assert psms == [6, 4, 3, 1, 11, 12, 6, 4]
        variants = [a.variant for a in result.attempts]
        assert variants[:6] == [ImageVariant.BINARIZED] * 6
        assert variants[6:] == [ImageVariant.ORIGINAL] * 2
        assert [a.succeeded for a in result.attempts][-2:] == [False, True]

    def test_engine_errors_are_soft(self, sample_page: np.ndarray) -> None:
        engine = MagicMock()
        engine.recognize.side_effect = pytesseract.TesseractError(1, "boom")
        handler = _pdf_handler("", [sample_page])
        acquirer = TextAcquirer(self.config, self.pipeline, engine, handler)

        result = acquirer.acquire(_document())

        assert result.succeeded is False
        assert result.method is AcquisitionMethod.NONE
        assert len(result.attempts) == 12
        assert all(a.error for a in result.attempts)

    def test_missing_tesseract_is_soft(self, sample_page: np.ndarray) -> None:
        engine = MagicMock()
        engine.recognize.side_effect = pytesseract.TesseractNotFoundError()
        handler = _pdf_handler("", [sample_page])
        acquirer = TextAcquirer(self.config, self.pipeline, engine, handler)

        assert acquirer.acquire(_document()).succeeded is False

    def test_blank_render_steps_down_dpi(
        self, sample_page: np.ndarray, blank_page: np.ndarray
    ) -> None:
        engine = MagicMock()
        engine.recognize.return_value = OCR_TEXT
        handler = _pdf_handler("", [blank_page, sample_page])
        acquirer = TextAcquirer(self.config, self.pipeline, engine, handler)

        result = acquirer.acquire(_document())

        assert result.succeeded is True
        dpis = [call.args[2] for call in handler.render_page.call_args_list]
        assert dpis == [300, 200]

    def test_all_blank_renders_still_used(self, blank_page: np.ndarray) -> None:
        engine = MagicMock()
        engine.recognize.return_value = OCR_TEXT
        handler = _pdf_handler("", [blank_page, blank_page, blank_page])
        acquirer = TextAcquirer(self.config, self.pipeline, engine, handler)

        result = acquirer.acquire(_document())

        assert handler.render_page.call_count == 3
        assert result.succeeded is True
        engine.recognize.assert_called()

    def test_render_failure_tries_next_dpi(self, sample_page: np.ndarray) -> None:
        engine = MagicMock()
        engine.recognize.return_value = OCR_TEXT
        handler = _pdf_handler("", [RuntimeError("bad render"), sample_page])
        acquirer = TextAcquirer(self.config, self.pipeline, engine, handler)

        assert acquirer.acquire(_document()).succeeded is True

    def test_unrenderable_page_is_skipped(self) -> None:
        engine = MagicMock()
        handler = _pdf_handler("", [RuntimeError("bad")] * 3)
        acquirer = TextAcquirer(self.config, self.pipeline, engine, handler)

        result = acquirer.acquire(_document())

        assert result.succeeded is False
        engine.recognize.assert_not_called()

    def test_pages_joined_in_order(self, sample_page: np.ndarray) -> None:
        engine = MagicMock()
        engine.recognize.side_effect = ["Page one text", "Page two text"]
        handler = _pdf_handler("", [sample_page, sample_page])
        acquirer = TextAcquirer(self.config, self.pipeline, engine, handler)

        result = acquirer.acquire(_document(page_count=2))

        assert result.text == "Page one text\nPage two text"

    def test_short_ocr_text_is_failure(self, sample_page: np.ndarray) -> None:
        engine = MagicMock()
        engine.recognize.return_value = "abc"
        handler = _pdf_handler("", [sample_page])
        acquirer = TextAcquirer(self.config, self.pipeline, engine, handler)

        result = acquirer.acquire(_document())

        assert result.succeeded is False
        assert result.text == "abc"

    def test_image_document_uses_image_handler(self, sample_page: np.ndarray) -> None:
        engine = MagicMock()
        engine.recognize.return_value = OCR_TEXT
        image_handler = MagicMock()
        image_handler.extract_text.return_value = ""
        image_handler.render_resolutions.return_value = [None]
        image_handler.render_page.return_value = sample_page
        acquirer = TextAcquirer(
            self.config, self.pipeline, engine, MagicMock(), image_handler
        )

        result = acquirer.acquire(_document(kind=DocumentKind.IMAGE))

        assert result.succeeded is True
        image_handler.render_page.assert_called_once_with(Path("/fake/stub.pdf"), 0, None)

    def test_custom_psm_order(self, sample_page: np.ndarray) -> None:
        engine = MagicMock()
        engine.recognize.side_effect = ["", OCR_TEXT]
        handler = _pdf_handler("", [sample_page])
        acquirer = TextAcquirer(
            OCRConfig(psm_order=[11, 3]), self.pipeline, engine, handler
        )

        result = acquirer.acquire(_document())

        assert [a.settings.psm for a in result.attempts] == [
            PageSegMode.SPARSE_TEXT,
            PageSegMode.AUTO,
        ]


class TestOpen:
    """Tests for building document handles."""

    def test_open_pdf(self, stub_pdf: Path) -> None:
        handler = MagicMock()
        handler.get_page_count.return_value = 2
        acquirer = TextAcquirer(
            OCRConfig(), PreprocessingPipeline(PreprocessingConfig()), MagicMock(), handler
        )

        document = acquirer.open(stub_pdf)

        assert document.kind is DocumentKind.PDF
        assert document.page_count == 2
        assert document.byte_length == stub_pdf.stat().st_size

    @patch("paystub_ocr.ocr.pdf_handler.convert_from_path")
    @patch("paystub_ocr.ocr.pdf_handler.pdfplumber.open")
    def test_text_pdf_read_without_poppler(
        self,
        mock_open: MagicMock,
        mock_convert: MagicMock,
        stub_pdf: Path,
        sample_text: str,
    ) -> None:
        pdf = MagicMock()
        pdf.pages = [MagicMock(**{"extract_text.return_value": sample_text})]
        mock_open.return_value.__enter__.return_value = pdf
        mock_convert.side_effect = OSError("Unable to get page count. Is poppler installed?")
        engine = MagicMock()
        acquirer = TextAcquirer(
            OCRConfig(), PreprocessingPipeline(PreprocessingConfig()), engine
        )

        document = acquirer.open(stub_pdf)
        result = acquirer.acquire(document)

        assert document.page_count == 1
        assert result.succeeded is True
        assert result.method is AcquisitionMethod.DIRECT
        mock_convert.assert_not_called()
        engine.recognize.assert_not_called()

    def test_open_missing_file(self, tmp_path: Path) -> None:
        acquirer = TextAcquirer(
            OCRConfig(), PreprocessingPipeline(PreprocessingConfig()), MagicMock()
        )
        with pytest.raises(FileNotFoundError):
            acquirer.open(tmp_path / "missing.pdf")
