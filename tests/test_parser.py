"""Tests for the end-to-end paystub parser."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from paystub_ocr.extraction.confidence import NO_EARNINGS_WARNING
from paystub_ocr.ocr.document import DocumentKind, RawDocument
from paystub_ocr.ocr.text_acquisition import AcquisitionMethod, AcquisitionResult
from paystub_ocr.parser.paystub_parser import NO_TEXT_ERROR, PaystubParser
from paystub_ocr.parser.result import ConfidenceLevel
from paystub_ocr.validation.rules_engine import RulesEngine


def _mock_acquirer(path: Path, text: str, succeeded: bool = True) -> MagicMock:
    acquirer = MagicMock()
    acquirer.open.return_value = RawDocument(
        path=path, byte_length=100, page_count=1, kind=DocumentKind.PDF
    )
    acquirer.acquire.return_value = AcquisitionResult(
        text=text,
        succeeded=succeeded,
        method=AcquisitionMethod.DIRECT if succeeded else AcquisitionMethod.NONE,
    )
    return acquirer


def _parser(acquirer: MagicMock) -> PaystubParser:
    return PaystubParser(
        acquirer=acquirer, rules_engine=RulesEngine(Path("/nonexistent/rules.yaml"))
    )


class TestPaystubParser:
    """Tests for the PaystubParser orchestrator."""

    def test_parse_sample_paystub(self, stub_pdf: Path, sample_text: str) -> None:
        parser = _parser(_mock_acquirer(stub_pdf, sample_text))

        result = parser.parse(stub_pdf)

        assert result.confidence is ConfidenceLevel.HIGH
        assert result.errors == ()
        assert result.fields_needing_verification == ()
        assert result.paystub.employee_name == "John Smith"
        assert result.raw_text == sample_text
        assert result.source_file == "stub.pdf"

    def test_no_text_is_failure(self, stub_pdf: Path) -> None:
        parser = _parser(_mock_acquirer(stub_pdf, "", succeeded=False))

        result = parser.parse(stub_pdf)

        assert result.confidence is ConfidenceLevel.FAILED
        assert result.errors == (NO_TEXT_ERROR,)
        assert result.warnings == (NO_EARNINGS_WARNING,)
        assert result.is_successful is False

    def test_unexpected_exception_recorded(self, stub_pdf: Path) -> None:
        acquirer = _mock_acquirer(stub_pdf, "")
        acquirer.open.side_effect = RuntimeError("corrupt xref table")

        result = _parser(acquirer).parse(stub_pdf)

        assert result.confidence is ConfidenceLevel.FAILED
        assert result.errors == ("Parsing error: corrupt xref table",)
        assert result.warnings == (NO_EARNINGS_WARNING,)

    def test_extraction_failure_keeps_raw_text(self, stub_pdf: Path, sample_text: str) -> None:
        parser = _parser(_mock_acquirer(stub_pdf, sample_text))
        parser.extractor = MagicMock()
        parser.extractor.extract.side_effect = ValueError("bad rule")

        result = parser.parse(stub_pdf)

        assert result.confidence is ConfidenceLevel.FAILED
        assert result.errors[0].startswith("Parsing error:")
        assert result.raw_text == sample_text

    def test_failure_after_extraction_keeps_earnings(
        self, stub_pdf: Path, sample_text: str
    ) -> None:
        parser = _parser(_mock_acquirer(stub_pdf, sample_text))
        parser.rules_engine = MagicMock()
        parser.rules_engine.validate.side_effect = KeyError("pay_date")

        result = parser.parse(stub_pdf)

        assert result.confidence is ConfidenceLevel.FAILED
        assert result.paystub.earnings
        assert NO_EARNINGS_WARNING not in result.warnings

    def test_zero_earnings_warns(self, stub_pdf: Path) -> None:
        text = "Employee: John Smith\nEmployer: Acme Corp\nPay Date 01/30/2026\nBi-weekly"
        parser = _parser(_mock_acquirer(stub_pdf, text))

        result = parser.parse(stub_pdf)

        assert result.confidence is ConfidenceLevel.LOW
        assert NO_EARNINGS_WARNING in result.warnings
        assert result.fields_needing_verification == ("Earnings",)

    def test_medium_confidence(self, stub_pdf: Path) -> None:
        text = "Employee: John Smith\nPay Date 01/30/2026\nRegular 1600.00 8000.00"
        result = _parser(_mock_acquirer(stub_pdf, text)).parse(stub_pdf)
        assert result.confidence is ConfidenceLevel.MEDIUM

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        parser = _parser(MagicMock())
        with pytest.raises(FileNotFoundError):
            parser.parse(tmp_path / "missing.pdf")

    def test_unsupported_file_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "stub.docx"
        path.write_bytes(b"not a paystub")
        acquirer = MagicMock()
        with pytest.raises(ValueError):
            _parser(acquirer).parse(path)
        acquirer.open.assert_not_called()

    def test_supports(self) -> None:
        parser = _parser(MagicMock())
        assert parser.supports("stub.pdf") is True
        assert parser.supports("scan.TIF") is True
        assert parser.supports("stub.docx") is False

    def test_extract_text(self, stub_pdf: Path, sample_text: str) -> None:
        parser = _parser(_mock_acquirer(stub_pdf, sample_text))
        assert parser.extract_text(stub_pdf) == sample_text

    def test_name(self) -> None:
        assert _parser(MagicMock()).name == "Paystub Parser"
