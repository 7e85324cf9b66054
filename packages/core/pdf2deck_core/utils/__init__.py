"""Utility functions."""

from pdf2deck_core.utils.filenames import safe_filename
from pdf2deck_core.utils.logging import get_logger, log_exceptions, log_stage
from pdf2deck_core.utils.pdf import PDFValidationError, is_pdf_upload, validate_pdf
from pdf2deck_core.utils.retry import with_retry

__all__ = [
    "get_logger",
    "log_exceptions",
    "log_stage",
    "PDFValidationError",
    "is_pdf_upload",
    "safe_filename",
    "validate_pdf",
    "with_retry",
]
