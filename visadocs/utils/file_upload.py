"""
File Upload Utility - Validate uploads and extract text from documents.

Supported formats for analysis:
- PDF (.pdf) using PyPDF2
- Images (.jpg, .jpeg, .png) using Tesseract OCR via pytesseract + Pillow

Admin template files (.pdf, .doc, .docx, .txt, .rtf) are stored as-is and
never read for text.

Validation (extension, MIME type, size) always runs before any extraction
work, so a rejected upload costs nothing downstream.
"""

import io
import logging
from typing import Optional, Tuple

from fastapi import UploadFile
from PIL import Image, UnidentifiedImageError
from PyPDF2 import PdfReader
import pytesseract

from visadocs.core.config import get_settings
from visadocs.core.errors import TextExtractionError, UploadValidationError

logger = logging.getLogger(__name__)

settings = get_settings()

# extension -> accepted MIME types
ALLOWED_TYPES = {
    ".pdf": {"application/pdf"},
    ".jpg": {"image/jpeg", "image/jpg"},
    ".jpeg": {"image/jpeg", "image/jpg"},
    ".png": {"image/png"},
}
ALLOWED_EXTENSIONS = set(ALLOWED_TYPES)

TEMPLATE_EXTENSIONS = {".pdf", ".doc", ".docx", ".txt", ".rtf"}


def get_file_extension(filename: str) -> str:
    """Get lowercase file extension."""
    if '.' not in filename:
        return ''
    return '.' + filename.rsplit('.', 1)[1].lower()


def _too_large_error(max_bytes: int) -> UploadValidationError:
    return UploadValidationError(
        f"File too large. Maximum size: {max_bytes // (1024 * 1024)}MB", status_code=413
    )


def validate_upload(filename: Optional[str], content_type: Optional[str], size: Optional[int] = None) -> str:
    """
    Check name, extension, MIME type and (if known) size of an upload.

    Returns:
        The lowercase extension.

    Raises:
        UploadValidationError (400 missing name / empty, 415 wrong type, 413 too large)
    """
    if not filename:
        raise UploadValidationError("No file uploaded")

    ext = get_file_extension(filename)
    if ext not in ALLOWED_TYPES:
        raise UploadValidationError(
            f"Unsupported file type '{ext or filename}'. Allowed: PDF, JPEG, PNG", status_code=415
        )

    mime = (content_type or "").split(";")[0].strip().lower()
    if mime not in ALLOWED_TYPES[ext]:
        raise UploadValidationError(
            f"File content type '{mime or 'unknown'}' does not match extension '{ext}'", status_code=415
        )

    if size is not None:
        if size == 0:
            raise UploadValidationError("Uploaded file is empty")
        if size > settings.max_upload_bytes:
            raise _too_large_error(settings.max_upload_bytes)

    return ext


async def read_upload(file: UploadFile, max_bytes: Optional[int] = None) -> bytes:
    """
    Read an upload body, refusing anything over ``max_bytes``.

    At most ``max_bytes + 1`` bytes are read, so an oversized body is rejected
    without buffering the rest of it.
    """
    limit = max_bytes if max_bytes is not None else settings.max_upload_bytes
    content = await file.read(limit + 1)
    if len(content) > limit:
        raise _too_large_error(limit)
    if not content:
        raise UploadValidationError("Uploaded file is empty")
    return content


def extract_from_pdf(content: bytes) -> str:
    """Extract text from PDF bytes, pages joined by newlines."""
    try:
        reader = PdfReader(io.BytesIO(content))
        text_parts = []
        for page in reader.pages:
            page_text = page.extract_text()
            if page_text:
                text_parts.append(page_text)
        return '\n'.join(text_parts)
    except Exception as e:
        logger.warning("PDF text extraction failed: %s", e)
        raise TextExtractionError() from e


def extract_from_image(content: bytes) -> str:
    """OCR an image with Tesseract (English)."""
    try:
        with Image.open(io.BytesIO(content)) as image:
            return pytesseract.image_to_string(image, lang="eng")
    except (UnidentifiedImageError, OSError, pytesseract.TesseractError) as e:
        logger.warning("Image OCR failed: %s", e)
        raise TextExtractionError() from e


def extract_text(content: bytes, ext: str) -> str:
    """
    Turn validated file bytes into plain text.

    Raises:
        TextExtractionError if the file is unreadable or yields no text
    """
    if ext == '.pdf':
        text = extract_from_pdf(content)
    else:
        text = extract_from_image(content)

    if not text.strip():
        raise TextExtractionError("Could not extract any text from the document")

    return text


async def extract_text_from_file(file: UploadFile) -> Tuple[str, str, int]:
    """
    Validate, read and extract text from an uploaded document.

    Returns:
        Tuple of (extracted_text, filename, size_in_bytes)
    """
    ext = validate_upload(file.filename, file.content_type, getattr(file, "size", None))
    content = await read_upload(file)

    text = extract_text(content, ext)
    logger.info("Extracted %d characters from %s (%d bytes)", len(text), file.filename, len(content))

    return text, file.filename, len(content)


def validate_template_upload(filename: Optional[str], size: int) -> str:
    """Validate an admin template upload; returns the extension."""
    if not filename:
        raise UploadValidationError("No file uploaded")

    ext = get_file_extension(filename)
    if ext not in TEMPLATE_EXTENSIONS:
        raise UploadValidationError(
            f"Unsupported template type '{ext or filename}'. Allowed: PDF, DOC, DOCX, TXT, RTF",
            status_code=415,
        )
    if size == 0:
        raise UploadValidationError("Uploaded file is empty")
    if size > settings.max_upload_bytes:
        raise _too_large_error(settings.max_upload_bytes)
    return ext


def get_supported_formats() -> dict:
    """Get info about supported file formats."""
    return {
        "supported_formats": [
            {"extension": ".pdf", "mime_types": ["application/pdf"], "name": "PDF"},
            {"extension": ".jpg", "mime_types": ["image/jpeg"], "name": "JPEG Image"},
            {"extension": ".jpeg", "mime_types": ["image/jpeg"], "name": "JPEG Image"},
            {"extension": ".png", "mime_types": ["image/png"], "name": "PNG Image"},
        ],
        "max_size_mb": settings.max_upload_mb
    }
