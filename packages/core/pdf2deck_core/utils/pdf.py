"""PDF input checks."""

from pathlib import PurePath

from pdf2deck_core.errors import LoadError
from pdf2deck_core.utils.logging import get_logger

logger = get_logger(__name__)

# PDF magic bytes
PDF_MAGIC = b"%PDF"
PDF_MIME_TYPES = frozenset({"application/pdf", "application/x-pdf"})
PDF_EXTENSION = ".pdf"


class PDFValidationError(LoadError):
    """Error when PDF validation fails."""

    pass


def is_pdf_upload(filename: str | None, content_type: str | None = None) -> bool:
    """Check the declared type of an uploaded file.

    A file is accepted when its MIME type is a PDF type or, when no MIME type
    is given, when its name ends in ``.pdf``.
    """
    if content_type:
        return content_type.split(";")[0].strip().lower() in PDF_MIME_TYPES
    if not filename:
        return False
    return PurePath(filename).suffix.lower() == PDF_EXTENSION


def validate_pdf(data: bytes) -> bool:
    """Validate that data looks like a PDF file.

    Args:
        data: Raw file bytes

    Returns:
        True if valid PDF

    Raises:
        PDFValidationError: If validation fails
    """
    if not data:
        raise PDFValidationError("Empty file data")

    if len(data) < 4:
        raise PDFValidationError("File too small to be a valid PDF")

    if not data.startswith(PDF_MAGIC):
        raise PDFValidationError(
            f"Invalid PDF: file does not start with PDF magic bytes. Got: {data[:4]!r}"
        )

    # Truncated uploads usually lose the trailer
    if b"%%EOF" not in data[-1024:]:
        logger.warning("PDF does not contain %%EOF marker near end of file")

    logger.debug(f"PDF validation passed ({len(data)} bytes)")
    return True


def get_pdf_version(data: bytes) -> str | None:
    """Read the version from a ``%PDF-x.y`` header, if present."""
    try:
        header = data[:20].decode("latin-1")
    except UnicodeDecodeError:
        return None
    if not header.startswith("%PDF-"):
        return None
    version = ""
    for char in header[5:]:
        if not (char.isdigit() or char == "."):
            break
        version += char
    return version or None
