"""Configurable sanity checks for extracted paystubs.

Validates pay dates, employee names, and earning and deduction amounts,
plus a cross-field check of current against year-to-date amounts.
Failed checks become warnings on the parsing result; they never
change its confidence.
"""

import calendar
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from paystub_ocr.models.paystub import ExtractedPaystub
from paystub_ocr.utils.logger import get_logger

logger = get_logger(__name__)

NAME_PATTERN = r"^[a-zA-Z\s'-]+$"


@dataclass
class ValidationResult:
    """Result of a single field validation check."""

    field_name: str
    is_valid: bool
    message: str
    rule_name: str


@dataclass
class ValidationReport:
    """Aggregated validation report for a paystub."""

    all_valid: bool
    results: list[ValidationResult]
    warnings: list[str] = field(default_factory=list)


def shift_months(day: date, months: int) -> date:
    """Move a date by whole months, clamping to the end of shorter months."""
    index = day.year * 12 + day.month - 1 + months
    year, month = divmod(index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


class RulesEngine:
    """Configurable validation rules engine for paystubs.

    Rules are keyed by paystub attribute and loaded from a YAML file,
    falling back to built-in defaults.

    Args:
        rules_path: Path to the validation rules YAML file.
    """

    def __init__(
        self, rules_path: Path = Path("configs/validation_rules.yaml")
    ) -> None:
        self.rules = self._load_rules(rules_path)
        self._validators: dict[str, Callable[[str, Any, dict, date], ValidationResult]] = {
            "date_range": self._validate_date_range,
            "name_format": self._validate_name_format,
            "amount_range": self._validate_amount_range,
            "required": self._validate_required,
        }

    def _load_rules(self, path: Path) -> dict:
        """Load validation rules from YAML file.

        Args:
            path: Path to the rules file.

        Returns:
            Dictionary of paystub attribute rules.
        """
        if path.exists():
            with open(path) as f:
                data = yaml.safe_load(f)
                if data and "paystub" in data:
                    logger.info("Loaded validation rules from %s", path)
                    return data["paystub"]
        logger.debug("Using default validation rules")
        return self._default_rules()

    def _default_rules(self) -> dict:
        return {
            "pay_date": [{"type": "date_range", "months_back": 24, "months_ahead": 1}],
            "employee_name": [
                {"type": "name_format", "min_length": 2, "max_length": 100}
            ],
            "earnings": [{"type": "amount_range", "min": -100000, "max": 1000000}],
            "deductions": [{"type": "amount_range", "min": -100000, "max": 1000000}],
        }

    def validate(
        self, paystub: ExtractedPaystub, reference_date: date | None = None
    ) -> ValidationReport:
        """Validate an extracted paystub.

        Args:
            paystub: The extracted paystub.
            reference_date: "Today" for date checks. Defaults to the
                current date.

        Returns:
            Validation report whose warnings list every failed check.
        """
        today = reference_date or date.today()
        results: list[ValidationResult] = []
        warnings: list[str] = []

        for field_name, rules in self.rules.items():
            value = getattr(paystub, field_name, None)

            for rule in rules or []:
                rule_type = rule.get("type")
                validator = self._validators.get(rule_type)

                if not validator:
                    warnings.append(f"Unknown rule type: {rule_type}")
                    continue

                results.append(validator(field_name, value, rule, today))

        results.extend(self._cross_validate(paystub))

        warnings.extend(r.message for r in results if not r.is_valid)
        all_valid = all(r.is_valid for r in results)
        logger.info(
            "Paystub validation: %s (%d checks)",
            "PASSED" if all_valid else "FAILED",
            len(results),
        )
        return ValidationReport(all_valid=all_valid, results=results, warnings=warnings)

    def _validate_date_range(
        self, field_name: str, value: Any, rule: dict, today: date
    ) -> ValidationResult:
        """Check that a date lies strictly inside a window around today."""
        if value is None:
            return ValidationResult(field_name, True, "No value to validate", "date_range")

        earliest = shift_months(today, -int(rule.get("months_back", 24)))
        latest = shift_months(today, int(rule.get("months_ahead", 1)))
        if earliest < value < latest:
            return ValidationResult(field_name, True, "Date in valid range", "date_range")
        return ValidationResult(
            field_name,
            False,
            f"{field_name} {value.isoformat()} is outside the expected range "
            f"({earliest.isoformat()} to {latest.isoformat()})",
            "date_range",
        )

    def _validate_name_format(
        self, field_name: str, value: Any, rule: dict, today: date
    ) -> ValidationResult:
        """Check that a name is letters, spaces, hyphens and apostrophes."""
        if value is None:
            return ValidationResult(field_name, True, "No value to validate", "name_format")

        name = str(value).strip()
        min_length = rule.get("min_length", 2)
        max_length = rule.get("max_length", 100)
        if not min_length <= len(name) <= max_length:
            return ValidationResult(
                field_name,
                False,
                f"{field_name} length {len(name)} outside [{min_length}, {max_length}]",
                "name_format",
            )
        if re.match(rule.get("pattern", NAME_PATTERN), name):
            return ValidationResult(field_name, True, "Valid name format", "name_format")
        return ValidationResult(
            field_name, False, f"Invalid {field_name}: {name}", "name_format"
        )

    def _validate_amount_range(
        self, field_name: str, value: Any, rule: dict, today: date
    ) -> ValidationResult:
        """Check every current and YTD amount of a line-item list."""
        if not value:
            return ValidationResult(field_name, True, "No value to validate", "amount_range")

        try:
            min_val = Decimal(str(rule.get("min", -100000)))
            max_val = Decimal(str(rule.get("max", 1000000)))
        except InvalidOperation:
            return ValidationResult(
                field_name, False, f"Invalid amount range in rule: {rule}", "amount_range"
            )

        outside = [
            f"{_item_name(item)} {amount}"
            for item in value
            for amount in (item.current_amount, item.ytd_amount)
            if not min_val <= amount <= max_val
        ]
        if not outside:
            return ValidationResult(field_name, True, "Amounts in valid range", "amount_range")
        return ValidationResult(
            field_name,
            False,
            f"{field_name} amounts outside [{min_val}, {max_val}]: {', '.join(outside)}",
            "amount_range",
        )

    def _validate_required(
        self, field_name: str, value: Any, rule: dict, today: date
    ) -> ValidationResult:
        """Check that a field is present and non-empty."""
        if value is not None and str(value).strip() and value != []:
            return ValidationResult(field_name, True, "Required field present", "required")
        return ValidationResult(
            field_name, False, f"Required field missing: {field_name}", "required"
        )

    def _cross_validate(self, paystub: ExtractedPaystub) -> list[ValidationResult]:
        """Run cross-field validation checks.

        A year-to-date amount includes the current period, so it can
        never be smaller than the current amount.

        Args:
            paystub: The extracted paystub.

        Returns:
            List of cross-field validation results.
        """
        results: list[ValidationResult] = []
        for earning in paystub.earnings:
            if earning.ytd_amount >= earning.current_amount:
                results.append(
                    ValidationResult(
                        "earnings_ytd", True, "YTD covers current amount", "cross_field"
                    )
                )
            else:
                results.append(
                    ValidationResult(
                        "earnings_ytd",
                        False,
                        f"{earning.pay_type_name}: YTD {earning.ytd_amount} is below "
                        f"current {earning.current_amount}",
                        "cross_field",
                    )
                )
        return results


def _item_name(item: Any) -> str:
    return getattr(item, "pay_type_name", None) or getattr(item, "name", "item")
