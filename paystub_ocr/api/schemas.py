"""Pydantic response schemas shared by the API and the CLI."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel

from paystub_ocr.models.paystub import (
    Deduction,
    Earning,
    ExtractedPaystub,
    PayCategory,
    PayFrequency,
)
from paystub_ocr.parser.result import ConfidenceLevel, ParsingResult


class EarningResponse(BaseModel):
    """Response schema for one earning line."""

    pay_type_name: str
    category: PayCategory
    current_amount: Decimal
    ytd_amount: Decimal

    @classmethod
    def from_earning(cls, earning: Earning) -> "EarningResponse":
        return cls(
            pay_type_name=earning.pay_type_name,
            category=earning.category,
            current_amount=earning.current_amount,
            ytd_amount=earning.ytd_amount,
        )


class DeductionResponse(BaseModel):
    """Response schema for one deduction line."""

    name: str
    current_amount: Decimal
    ytd_amount: Decimal

    @classmethod
    def from_deduction(cls, deduction: Deduction) -> "DeductionResponse":
        return cls(
            name=deduction.name,
            current_amount=deduction.current_amount,
            ytd_amount=deduction.ytd_amount,
        )


class PaystubResponse(BaseModel):
    """Response schema for the extracted paystub fields."""

    employee_name: str | None = None
    employer_name: str | None = None
    pay_date: date | None = None
    pay_period_start: date | None = None
    pay_period_end: date | None = None
    pay_frequency: PayFrequency | None = None
    earnings: list[EarningResponse] = []
    deductions: list[DeductionResponse] = []
    total_current_earnings: Decimal = Decimal("0")
    total_ytd_earnings: Decimal = Decimal("0")
    total_current_deductions: Decimal = Decimal("0")
    total_ytd_deductions: Decimal = Decimal("0")

    @classmethod
    def from_paystub(cls, paystub: ExtractedPaystub) -> "PaystubResponse":
        return cls(
            employee_name=paystub.employee_name,
            employer_name=paystub.employer_name,
            pay_date=paystub.pay_date,
            pay_period_start=paystub.pay_period_start,
            pay_period_end=paystub.pay_period_end,
            pay_frequency=paystub.pay_frequency,
            earnings=[EarningResponse.from_earning(e) for e in paystub.earnings],
            deductions=[DeductionResponse.from_deduction(d) for d in paystub.deductions],
            total_current_earnings=paystub.total_current_earnings,
            total_ytd_earnings=paystub.total_ytd_earnings,
            total_current_deductions=paystub.total_current_deductions,
            total_ytd_deductions=paystub.total_ytd_deductions,
        )


class ParsingResponse(BaseModel):
    """Response schema for a parsed paystub document."""

    success: bool
    filename: str
    confidence: ConfidenceLevel
    confidence_description: str
    paystub: PaystubResponse
    fields_needing_verification: list[str]
    warnings: list[str]
    errors: list[str]
    raw_text: str
    processing_time_ms: float = 0.0

    @classmethod
    def from_result(
        cls,
        result: ParsingResult,
        filename: str | None = None,
        processing_time_ms: float = 0.0,
    ) -> "ParsingResponse":
        """Convert a parsing result into its wire representation."""
        return cls(
            success=result.is_successful,
            filename=filename or result.source_file or "document",
            confidence=result.confidence,
            confidence_description=result.confidence.description,
            paystub=PaystubResponse.from_paystub(result.paystub),
            fields_needing_verification=list(result.fields_needing_verification),
            warnings=list(result.warnings),
            errors=list(result.errors),
            raw_text=result.raw_text,
            processing_time_ms=processing_time_ms,
        )


class BatchItemResponse(BaseModel):
    """Response schema for a single item in a batch request."""

    filename: str
    result: ParsingResponse | None = None
    error: str | None = None


class BatchParsingResponse(BaseModel):
    """Response schema for batch parsing of multiple documents."""

    success: bool
    total_documents: int
    successful: int
    failed: int
    results: list[BatchItemResponse]


class HealthResponse(BaseModel):
    """Response schema for the health check endpoint."""

    status: str
    version: str
    tesseract_available: bool
