"""Tests for the paystub model and parsing result value objects."""

from decimal import Decimal

import pytest

from paystub_ocr.models.paystub import (
    Deduction,
    Earning,
    ExtractedPaystub,
    PayCategory,
    PayFrequency,
)
from paystub_ocr.parser.result import ConfidenceLevel, ParsingResult


def _paystub() -> ExtractedPaystub:
    return ExtractedPaystub(
        earnings=[
            Earning("Regular", PayCategory.BASE_WAGE, Decimal("1600.00"), Decimal("8000.00")),
            Earning("Overtime", PayCategory.VARIABLE, Decimal("200.00"), Decimal("800.00")),
            Earning("Tips", PayCategory.OTHER, Decimal("50.00"), Decimal("50.00")),
        ],
        deductions=[
            Deduction("Federal Tax", Decimal("150.00"), Decimal("750.00")),
            Deduction("Medicare", Decimal("25.00"), Decimal("125.00")),
        ],
    )


class TestPayFrequency:
    """Tests for PayFrequency helpers."""

    @pytest.mark.parametrize(
        ("frequency", "periods"),
        [
            (PayFrequency.WEEKLY, 52),
            (PayFrequency.BI_WEEKLY, 26),
            (PayFrequency.SEMI_MONTHLY, 24),
            (PayFrequency.MONTHLY, 12),
        ],
    )
    def test_periods_per_year(self, frequency: PayFrequency, periods: int) -> None:
        assert frequency.periods_per_year == periods

    def test_display_name(self) -> None:
        assert PayFrequency.BI_WEEKLY.display_name == "Bi-Weekly"


class TestExtractedPaystub:
    """Tests for ExtractedPaystub totals and filters."""

    def test_defaults_unset(self) -> None:
        paystub = ExtractedPaystub()
        assert paystub.employee_name is None
        assert paystub.pay_frequency is None
        assert paystub.earnings == []
        assert paystub.total_current_earnings == Decimal("0")

    def test_totals(self) -> None:
        paystub = _paystub()
        assert paystub.total_current_earnings == Decimal("1850.00")
        assert paystub.total_ytd_earnings == Decimal("8850.00")
        assert paystub.total_current_deductions == Decimal("175.00")
        assert paystub.total_ytd_deductions == Decimal("875.00")

    def test_category_filters(self) -> None:
        paystub = _paystub()
        assert [e.pay_type_name for e in paystub.base_wage_earnings] == ["Regular"]
        assert [e.pay_type_name for e in paystub.variable_earnings] == ["Overtime"]

    def test_earning_flags(self) -> None:
        earning = Earning("Bonus", PayCategory.VARIABLE)
        assert earning.is_variable_income is True
        assert earning.is_base_wage is False
        assert earning.current_amount == Decimal("0")


class TestParsingResult:
    """Tests for the ParsingResult invariant and helpers."""

    def test_successful_result(self) -> None:
        result = ParsingResult(
            paystub=ExtractedPaystub(),
            confidence=ConfidenceLevel.MEDIUM,
            warnings=("check dates",),
        )
        assert result.is_successful is True
        assert result.has_errors is False
        assert result.has_warnings is True
        assert result.has_fields_needing_verification is False

    def test_failed_result(self) -> None:
        result = ParsingResult(
            paystub=ExtractedPaystub(),
            confidence=ConfidenceLevel.FAILED,
            errors=("Parsing error: boom",),
        )
        assert result.is_successful is False
        assert result.has_errors is True

    def test_failed_without_errors_rejected(self) -> None:
        with pytest.raises(ValueError):
            ParsingResult(paystub=ExtractedPaystub(), confidence=ConfidenceLevel.FAILED)

    def test_errors_without_failed_rejected(self) -> None:
        with pytest.raises(ValueError):
            ParsingResult(
                paystub=ExtractedPaystub(),
                confidence=ConfidenceLevel.HIGH,
                errors=("boom",),
            )

    def test_confidence_descriptions(self) -> None:
        assert ConfidenceLevel.LOW.display_name == "Low"
        assert "manual entry" in ConfidenceLevel.LOW.description
