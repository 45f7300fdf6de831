"""Paystub domain model produced by field extraction.

These records are also the contract with the downstream income
calculator, which only ever sees ``ExtractedPaystub`` values.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import StrEnum


class PayFrequency(StrEnum):
    """How often the employee is paid."""

    WEEKLY = "WEEKLY"
    BI_WEEKLY = "BI_WEEKLY"
    SEMI_MONTHLY = "SEMI_MONTHLY"
    MONTHLY = "MONTHLY"

    @property
    def periods_per_year(self) -> int:
        """Number of pay periods in a calendar year."""
        return _PERIODS_PER_YEAR[self]

    @property
    def display_name(self) -> str:
        return _FREQUENCY_NAMES[self]


_PERIODS_PER_YEAR = {
    PayFrequency.WEEKLY: 52,
    PayFrequency.BI_WEEKLY: 26,
    PayFrequency.SEMI_MONTHLY: 24,
    PayFrequency.MONTHLY: 12,
}

_FREQUENCY_NAMES = {
    PayFrequency.WEEKLY: "Weekly",
    PayFrequency.BI_WEEKLY: "Bi-Weekly",
    PayFrequency.SEMI_MONTHLY: "Semi-Monthly",
    PayFrequency.MONTHLY: "Monthly",
}


class PayCategory(StrEnum):
    """Income classification of an earning line."""

    BASE_WAGE = "BASE_WAGE"
    VARIABLE = "VARIABLE"
    OTHER = "OTHER"

    @property
    def display_name(self) -> str:
        return _CATEGORY_NAMES[self]


_CATEGORY_NAMES = {
    PayCategory.BASE_WAGE: "Base Wage",
    PayCategory.VARIABLE: "Variable Income",
    PayCategory.OTHER: "Other",
}


@dataclass(frozen=True)
class Earning:
    """One earnings row: pay type with current-period and YTD amounts."""

    pay_type_name: str
    category: PayCategory
    current_amount: Decimal = Decimal("0")
    ytd_amount: Decimal = Decimal("0")

    @property
    def is_base_wage(self) -> bool:
        return self.category is PayCategory.BASE_WAGE

    @property
    def is_variable_income(self) -> bool:
        return self.category is PayCategory.VARIABLE


@dataclass(frozen=True)
class Deduction:
    """One deductions row from the deductions section."""

    name: str
    current_amount: Decimal = Decimal("0")
    ytd_amount: Decimal = Decimal("0")


@dataclass
class ExtractedPaystub:
    """Payroll facts extracted from a single document.

    Built field by field during extraction. Fields that no rule matched
    stay ``None``; nothing already extracted is ever discarded.
    """

    employee_name: str | None = None
    employer_name: str | None = None
    pay_date: date | None = None
    pay_period_start: date | None = None
    pay_period_end: date | None = None
    pay_frequency: PayFrequency | None = None
    earnings: list[Earning] = field(default_factory=list)
    deductions: list[Deduction] = field(default_factory=list)

    @property
    def total_current_earnings(self) -> Decimal:
        return sum((e.current_amount for e in self.earnings), Decimal("0"))

    @property
    def total_ytd_earnings(self) -> Decimal:
        return sum((e.ytd_amount for e in self.earnings), Decimal("0"))

    @property
    def total_current_deductions(self) -> Decimal:
        return sum((d.current_amount for d in self.deductions), Decimal("0"))

    @property
    def total_ytd_deductions(self) -> Decimal:
        return sum((d.ytd_amount for d in self.deductions), Decimal("0"))

    @property
    def base_wage_earnings(self) -> list[Earning]:
        return [e for e in self.earnings if e.is_base_wage]

    @property
    def variable_earnings(self) -> list[Earning]:
        return [e for e in self.earnings if e.is_variable_income]
