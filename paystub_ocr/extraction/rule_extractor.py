"""Rule-based paystub field extraction using regex patterns.

Extracts employee and employer names, pay dates, pay frequency, and
itemized earnings and deductions from acquired paystub text.
"""

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal

from paystub_ocr.models.paystub import (
    Deduction,
    Earning,
    ExtractedPaystub,
    PayCategory,
    PayFrequency,
)
from paystub_ocr.utils.config import ExtractionConfig
from paystub_ocr.utils.logger import get_logger

logger = get_logger(__name__)

# Two or more capitalised or all-caps words separated by spaces or tabs,
# never crossing a line.
_PERSON_NAME = r"([A-Z][A-Za-z'-]+(?:[ \t]+[A-Z][A-Za-z'-]+)+)"

_EMPLOYEE_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"(?i:employee[ \t]+name)[ \t]*:?[ \t]*" + _PERSON_NAME),
    re.compile(r"(?i:employee)[ \t]*:?[ \t]*" + _PERSON_NAME),
    re.compile(r"(?i:name)[ \t]*:?[ \t]*" + _PERSON_NAME),
]

_EMPLOYER_PATTERNS: list[re.Pattern[str]] = [
    re.compile(label + r"[ \t]*:?[ \t]*([A-Z][A-Za-z0-9 \t&,.]+?)(?:$|(?i:pay))", re.MULTILINE)
    for label in (r"(?i:employer[ \t]+name)", r"(?i:employer)", r"(?i:company)")
]

_DATE_TOKEN = re.compile(r"\b(\d{1,2}[/-]\d{1,2}[/-]\d{2,4}|\d{4}-\d{1,2}-\d{1,2})\b")

# Checked in order: the compound frequencies contain the simple ones.
_FREQUENCY_PATTERNS: list[tuple[PayFrequency, re.Pattern[str]]] = [
    (PayFrequency.BI_WEEKLY, re.compile(r"bi[- ]?weekly", re.IGNORECASE)),
    (PayFrequency.SEMI_MONTHLY, re.compile(r"semi[- ]?monthly", re.IGNORECASE)),
    (
        PayFrequency.MONTHLY,
        re.compile(r"(?<!semi)(?<!semi-)(?<!semi )monthly", re.IGNORECASE),
    ),
    (
        PayFrequency.WEEKLY,
        re.compile(r"(?<!bi)(?<!bi-)(?<!bi )weekly", re.IGNORECASE),
    ),
]

_CURRENCY = r"\$?\s*(\d{1,3}(?:,\d{3})+(?:\.\d{2})?|\d+(?:\.\d{2})?)"

# A label followed by the current and year-to-date amounts.
_LINE_ITEM = re.compile(r"([A-Za-z\s]+?)\s+" + _CURRENCY + r"\s+" + _CURRENCY)

_DEDUCTION_SECTION_START = ("deduction", "withholding")
_DEDUCTION_SECTION_END = ("net pay", "total")

FIELD_EMPLOYEE_NAME = "Employee Name"
FIELD_EMPLOYER_NAME = "Employer Name"
FIELD_PAY_DATES = "Pay Dates"
FIELD_PAY_FREQUENCY = "Pay Frequency"
FIELD_EARNINGS = "Earnings"


@dataclass(frozen=True)
class ExtractionRules:
    """Read-only rule tables shared by every extraction."""

    header_keywords: tuple[str, ...]
    category_keywords: tuple[tuple[str, PayCategory], ...]
    date_formats: tuple[str, ...]
    employer_max_length: int = 50

    @classmethod
    def from_config(cls, config: ExtractionConfig) -> "ExtractionRules":
        categories = [(kw.lower(), PayCategory.BASE_WAGE) for kw in config.base_wage_keywords]
        categories += [(kw.lower(), PayCategory.VARIABLE) for kw in config.variable_keywords]
        return cls(
            header_keywords=tuple(kw.lower() for kw in config.header_keywords),
            category_keywords=tuple(categories),
            date_formats=tuple(config.date_formats),
            employer_max_length=config.employer_max_length,
        )


@dataclass
class FieldExtraction:
    """Extracted paystub plus bookkeeping for confidence scoring."""

    paystub: ExtractedPaystub
    fields_extracted: int = 0
    fields_needing_verification: list[str] = field(default_factory=list)

    @property
    def earnings_count(self) -> int:
        return len(self.paystub.earnings)


class RuleExtractor:
    """Regex-based field extractor for paystub text.

    Runs every field rule over the full text. A rule that finds nothing
    leaves its field unset; only the identity, date, frequency and
    earnings groups are reported as needing verification.

    Args:
        rules: Rule tables. Defaults to those of ``ExtractionConfig()``.
    """

    def __init__(self, rules: ExtractionRules | None = None) -> None:
        self.rules = rules or ExtractionRules.from_config(ExtractionConfig())

    def extract(self, text: str) -> FieldExtraction:
        """Extract all paystub fields from text.

        Args:
            text: Acquired paystub text.

        Returns:
            The populated paystub, the number of field groups found, and
            the names of groups that need manual verification.
        """
        paystub = ExtractedPaystub()
        result = FieldExtraction(paystub=paystub)

        paystub.employee_name = self.extract_employee_name(text)
        self._record(result, paystub.employee_name is not None, FIELD_EMPLOYEE_NAME)

        paystub.employer_name = self.extract_employer_name(text)
        self._record(result, paystub.employer_name is not None, FIELD_EMPLOYER_NAME)

        dates = self.extract_dates(text)
        if dates:
            paystub.pay_date = dates[-1]
            if len(dates) >= 2:
                paystub.pay_period_end = dates[-2]
            if len(dates) >= 3:
                paystub.pay_period_start = dates[-3]
            logger.debug(
                "Assigned pay date %s, period %s to %s",
                paystub.pay_date,
                paystub.pay_period_start,
                paystub.pay_period_end,
            )
        self._record(result, bool(dates), FIELD_PAY_DATES)

        paystub.pay_frequency = self.extract_pay_frequency(text)
        self._record(result, paystub.pay_frequency is not None, FIELD_PAY_FREQUENCY)

        paystub.earnings = self.extract_earnings(text)
        self._record(result, bool(paystub.earnings), FIELD_EARNINGS)

        paystub.deductions = self.extract_deductions(text)
        if paystub.deductions:
            result.fields_extracted += 1

        logger.info(
            "Rule extraction found %d field groups, %d earnings, %d deductions",
            result.fields_extracted,
            len(paystub.earnings),
            len(paystub.deductions),
        )
        return result

    def extract_employee_name(self, text: str) -> str | None:
        """Return the first labeled person name found, if any."""
        for pattern in _EMPLOYEE_PATTERNS:
            match = pattern.search(text)
            if match:
                name = match.group(1).strip()
                logger.debug("Extracted employee name: %s", name)
                return name
        return None

    def extract_employer_name(self, text: str) -> str | None:
        """Return the first labeled employer name, capped in length."""
        for pattern in _EMPLOYER_PATTERNS:
            match = pattern.search(text)
            if match:
                employer = match.group(1).strip()
                if len(employer) > self.rules.employer_max_length:
                    employer = employer[: self.rules.employer_max_length].strip()
                logger.debug("Extracted employer name: %s", employer)
                return employer
        return None

    def extract_dates(self, text: str) -> list[date]:
        """Find every parseable date in the text.

        Returns:
            All dates in ascending order, duplicates included.
        """
        dates = []
        for match in _DATE_TOKEN.finditer(text):
            parsed = self.parse_date(match.group(1))
            if parsed is not None:
                dates.append(parsed)
        return sorted(dates)

    def parse_date(self, token: str) -> date | None:
        """Parse a date token with the first format that accepts it."""
        for fmt in self.rules.date_formats:
            try:
                return datetime.strptime(token, fmt).date()
            except ValueError:
                continue
        logger.debug("Unparseable date token: %s", token)
        return None

    def extract_pay_frequency(self, text: str) -> PayFrequency | None:
        for frequency, pattern in _FREQUENCY_PATTERNS:
            if pattern.search(text):
                logger.debug("Extracted pay frequency: %s", frequency)
                return frequency
        return None

    def extract_earnings(self, text: str) -> list[Earning]:
        """Extract earning rows from every line of the document."""
        earnings = []
        for line in text.splitlines():
            item = self._match_line_item(line)
            if item is None:
                continue
            label, current, ytd = item
            earning = Earning(
                pay_type_name=label,
                category=self.categorize(label),
                current_amount=current,
                ytd_amount=ytd,
            )
            logger.debug(
                "Extracted earning: %s (%s) current %s, YTD %s",
                label,
                earning.category,
                current,
                ytd,
            )
            earnings.append(earning)
        return earnings

    def extract_deductions(self, text: str) -> list[Deduction]:
        """Extract deduction rows from the deductions section.

        The section opens after a line mentioning deductions or
        withholdings and closes at the first line mentioning net pay
        or a total.
        """
        deductions = []
        in_section = False
        for line in text.splitlines():
            lower = line.lower()
            if any(marker in lower for marker in _DEDUCTION_SECTION_START):
                in_section = True
                continue
            if not in_section:
                continue
            if any(marker in lower for marker in _DEDUCTION_SECTION_END):
                break

            item = self._match_line_item(line)
            if item is None:
                continue
            label, current, ytd = item
            logger.debug("Extracted deduction: %s current %s, YTD %s", label, current, ytd)
            deductions.append(Deduction(name=label, current_amount=current, ytd_amount=ytd))
        return deductions

    def categorize(self, pay_type_name: str) -> PayCategory:
        """Map an earning label to its pay category by keyword."""
        lower = pay_type_name.lower()
        for keyword, category in self.rules.category_keywords:
            if keyword in lower:
                return category
        return PayCategory.OTHER

    def is_likely_header(self, label: str) -> bool:
        """Check whether a label looks like a table header rather than data."""
        lower = label.lower()
        return len(lower) < 2 or any(kw in lower for kw in self.rules.header_keywords)

    def _match_line_item(self, line: str) -> tuple[str, Decimal, Decimal] | None:
        match = _LINE_ITEM.search(line)
        if not match:
            return None
        label = match.group(1).strip()
        if self.is_likely_header(label):
            logger.debug("Skipping header-like row: %s", line.strip())
            return None
        return label, parse_currency(match.group(2)), parse_currency(match.group(3))

    @staticmethod
    def _record(result: FieldExtraction, found: bool, field_name: str) -> None:
        if found:
            result.fields_extracted += 1
        else:
            result.fields_needing_verification.append(field_name)


def parse_currency(value: str) -> Decimal:
    """Convert a currency token such as ``$1,600.00`` to a Decimal."""
    cleaned = value.replace("$", "").replace(",", "").strip()
    if not cleaned:
        return Decimal("0")
    return Decimal(cleaned)
