"""Shared test fixtures for the paystub OCR test suite."""

from pathlib import Path

import numpy as np
import pytest

SAMPLE_PAYSTUB_TEXT = """ACME CORPORATION
Employer: Acme Corporation
Employee Name: John Smith
Pay Period: 01/02/2026 - 01/16/2026
Pay Date: 01/30/2026
Pay Frequency: Bi-Weekly

Earnings        Current     YTD
Regular         1600.00     8000.00
Overtime        $200.00     $800.00

Deductions
Federal Tax     150.00      750.00
Social Security 99.20       496.00
Net Pay         1550.80     7554.00
"""


@pytest.fixture
def sample_text() -> str:
    """Direct-extracted text of a typical bi-weekly paystub."""
    return SAMPLE_PAYSTUB_TEXT


@pytest.fixture
def sample_page() -> np.ndarray:
    """Create a synthetic RGB page with dark 'text' bars on white."""
    image = np.full((300, 200, 3), 255, dtype=np.uint8)
    for top in range(20, 280, 30):
        image[top : top + 8, 20:180] = (20, 20, 20)
    return image


@pytest.fixture
def blank_page() -> np.ndarray:
    """Create a uniform white RGB page."""
    return np.full((300, 200, 3), 255, dtype=np.uint8)


@pytest.fixture
def stub_pdf(tmp_path: Path) -> Path:
    """Create a placeholder PDF file; its content is never parsed."""
    path = tmp_path / "stub.pdf"
    path.write_bytes(b"%PDF-1.4\n%%EOF\n")
    return path


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def config_dir(project_root: Path) -> Path:
    """Return the configs directory path."""
    return project_root / "configs"
