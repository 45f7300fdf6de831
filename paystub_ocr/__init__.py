"""Paystub OCR extraction pipeline.

Reads a paystub PDF or scanned image, recovers its text through the PDF
text layer or a Tesseract OCR fallback, extracts identity, dates, pay
frequency, earnings and deductions, and rates how far the result can be
trusted.
"""

__version__ = "1.0.0"
