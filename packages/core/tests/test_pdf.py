"""Tests for PDF input checks."""

import pytest

from pdf2deck_core.errors import LoadError
from pdf2deck_core.utils.pdf import (
    PDFValidationError,
    get_pdf_version,
    is_pdf_upload,
    validate_pdf,
)


class TestPDFValidation:
    """Tests for PDF validation."""

    def test_valid_pdf_header(self) -> None:
        """Test that valid PDF header passes validation."""
        assert validate_pdf(b"%PDF-1.7\n%%EOF") is True

    def test_empty_data_raises(self) -> None:
        with pytest.raises(PDFValidationError, match="Empty file data"):
            validate_pdf(b"")

    def test_too_short_raises(self) -> None:
        with pytest.raises(PDFValidationError, match="too small"):
            validate_pdf(b"abc")

    def test_invalid_magic_raises(self) -> None:
        with pytest.raises(PDFValidationError, match="magic bytes"):
            validate_pdf(b"NOT A PDF FILE")

    def test_png_rejected(self) -> None:
        with pytest.raises(PDFValidationError, match="magic bytes"):
            validate_pdf(b"\x89PNG\r\n\x1a\n")

    def test_validation_error_is_load_error(self) -> None:
        """Validation failures surface as ingest-stage load errors."""
        with pytest.raises(LoadError) as exc_info:
            validate_pdf(b"NOT A PDF FILE")

        assert exc_info.value.stage == "ingest"


class TestPDFVersion:
    """Tests for PDF version extraction."""

    def test_version_lf(self) -> None:
        assert get_pdf_version(b"%PDF-1.7\n%%EOF") == "1.7"

    def test_version_crlf(self) -> None:
        assert get_pdf_version(b"%PDF-1.4\r\n%%EOF") == "1.4"

    def test_binary_after_version(self) -> None:
        assert get_pdf_version(b"%PDF-2.0" + b"\x00" * 20) == "2.0"

    def test_no_header(self) -> None:
        assert get_pdf_version(b"hello") is None


class TestUploadType:
    """Tests for MIME type and extension checks."""

    @pytest.mark.parametrize(
        "filename, content_type",
        [
            ("slides.pdf", None),
            ("SLIDES.PDF", None),
            ("slides", "application/pdf"),
            ("slides.bin", "application/pdf; charset=binary"),
        ],
    )
    def test_accepted(self, filename: str, content_type: str | None) -> None:
        assert is_pdf_upload(filename, content_type) is True

    @pytest.mark.parametrize(
        "filename, content_type",
        [
            ("slides.pptx", None),
            ("slides.pdf", "image/png"),
            (None, None),
            ("", None),
        ],
    )
    def test_rejected(self, filename: str | None, content_type: str | None) -> None:
        assert is_pdf_upload(filename, content_type) is False
