"""Configuration management for the paystub OCR pipeline.

Loads and validates YAML configuration with sensible defaults
for preprocessing, OCR, field extraction, and validation settings.
"""

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class PreprocessingConfig(BaseModel):
    """Configuration for page image preprocessing."""

    threshold_floor: int = Field(default=100, ge=0, le=255)
    blank_sample_limit: int = Field(default=1000, gt=0)
    blank_tolerance: float = Field(default=0.01, ge=0.0, le=1.0)


class OCRConfig(BaseModel):
    """Configuration for text acquisition and the Tesseract engine."""

    tesseract_cmd: str | None = None
    default_lang: str = "eng"
    tessdata_dir: str | None = "tessdata"
    dpi_options: list[int] = Field(default_factory=lambda: [300, 200, 150])
    psm_order: list[int] = Field(default_factory=lambda: [6, 4, 3, 1, 11, 12])
    min_text_length: int = 10


class ExtractionConfig(BaseModel):
    """Configuration for rule-based field extraction."""

    employer_max_length: int = 50
    header_keywords: list[str] = Field(
        default_factory=lambda: [
            "description",
            "current",
            "ytd",
            "rate",
            "hours",
            "amount",
        ]
    )
    base_wage_keywords: list[str] = Field(
        default_factory=lambda: [
            "regular",
            "salary",
            "hourly",
            "holiday",
            "pto",
            "vacation",
            "sick",
            "personal",
        ]
    )
    variable_keywords: list[str] = Field(
        default_factory=lambda: ["overtime", "ot", "commission", "bonus", "incentive"]
    )
    date_formats: list[str] = Field(
        default_factory=lambda: [
            "%m/%d/%Y",
            "%m-%d-%Y",
            "%m/%d/%y",
            "%m-%d-%y",
            "%Y-%m-%d",
        ]
    )


class ValidationConfig(BaseModel):
    """Configuration for the paystub validation rules engine."""

    rules_path: str = "configs/validation_rules.yaml"


class AppConfig(BaseModel):
    """Top-level application configuration."""

    preprocessing: PreprocessingConfig = Field(default_factory=PreprocessingConfig)
    ocr: OCRConfig = Field(default_factory=OCRConfig)
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    log_level: str = "INFO"


def load_config(path: Path | None = None) -> AppConfig:
    """Load configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file.
            Defaults to configs/config.yaml.

    Returns:
        Validated application configuration.
    """
    if path is None:
        path = Path("configs/config.yaml")

    if path.exists():
        logger.info("Loading configuration from %s", path)
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
        return AppConfig(**raw)

    logger.info("No config file found at %s, using defaults", path)
    return AppConfig()
