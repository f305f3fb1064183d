from app.extraction.exceptions import UnsupportedFileTypeError
from app.extraction.models import DocumentClassification

PDF_MIME_TYPES = frozenset({"application/pdf"})

IMAGE_MIME_TYPES = frozenset(
    {
        "image/jpeg",
        "image/png",
        "image/gif",
        "image/bmp",
        "image/tiff",
        "image/webp",
    }
)

TEXT_MIME_TYPES = frozenset(
    {
        "text/plain",
        "text/markdown",
        "text/csv",
        "application/json",
    }
)

OFFICE_MIME_TYPES = frozenset(
    {
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "application/vnd.ms-excel",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "application/vnd.ms-powerpoint",
        "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    }
)

ALLOWED_MIME_TYPES = PDF_MIME_TYPES | IMAGE_MIME_TYPES | TEXT_MIME_TYPES | OFFICE_MIME_TYPES


def normalize_mime_type(mime_type: str) -> str:
    """Lowercase and drop parameters: ``Text/Plain; charset=utf-8`` -> ``text/plain``."""
    return mime_type.split(";", 1)[0].strip().lower()


def is_allowed(mime_type: str) -> bool:
    return normalize_mime_type(mime_type) in ALLOWED_MIME_TYPES


def classify(
    mime_type: str,
    byte_size: int | None = None,
    max_bytes: int | None = None,
) -> DocumentClassification:
    """Classify a document by its declared type and size.

    Raises:
        UnsupportedFileTypeError: if the type is not on the allow-list or the
            file exceeds ``max_bytes``.
    """
    mime = normalize_mime_type(mime_type)
    if mime not in ALLOWED_MIME_TYPES:
        raise UnsupportedFileTypeError(f"Unsupported file type: {mime_type or '<empty>'}")
    if max_bytes is not None and byte_size is not None and byte_size > max_bytes:
        raise UnsupportedFileTypeError(
            f"File too large: {byte_size} bytes (max {max_bytes})"
        )
    return DocumentClassification(
        mime_type=mime,
        byte_size=byte_size,
        is_pdf=mime in PDF_MIME_TYPES,
        is_image=mime in IMAGE_MIME_TYPES,
        is_plain_text=mime in TEXT_MIME_TYPES,
        is_office=mime in OFFICE_MIME_TYPES,
    )
