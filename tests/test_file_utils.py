import pytest

from conftest import OFFER_LETTER_PAGES, make_pdf
from visadocs.core.errors import NotFoundError, TextExtractionError, UploadValidationError
from visadocs.services.email_service import send_email
from visadocs.utils.file_storage import (
    delete_template_file,
    format_file_size,
    read_template_file,
    resolve_template_path,
    save_template_file,
)
from visadocs.utils.file_upload import extract_text, validate_template_upload, validate_upload


@pytest.mark.parametrize("filename, content_type, expected", [
    ("letter.pdf", "application/pdf", ".pdf"),
    ("SCAN.JPG", "image/jpeg", ".jpg"),
    ("scan.jpeg", "image/jpg", ".jpeg"),
    ("photo.png", "image/png; charset=binary", ".png"),
])
def test_accepted_uploads(filename, content_type, expected):
    assert validate_upload(filename, content_type, 1024) == expected


@pytest.mark.parametrize("filename, content_type, size, status", [
    (None, "application/pdf", 10, 400),
    ("letter.docx", "application/msword", 10, 415),
    ("letter", "application/pdf", 10, 415),
    ("letter.pdf", "text/plain", 10, 415),
    ("letter.pdf", "application/pdf", 0, 400),
    ("letter.pdf", "application/pdf", 1024 * 1024 + 1, 413),
])
def test_rejected_uploads(filename, content_type, size, status):
    with pytest.raises(UploadValidationError) as exc_info:
        validate_upload(filename, content_type, size)
    assert exc_info.value.status_code == status


def test_template_uploads():
    assert validate_template_upload("guide.DOCX", 100) == ".docx"
    with pytest.raises(UploadValidationError) as exc_info:
        validate_template_upload("guide.zip", 100)
    assert exc_info.value.status_code == 415


def test_pdf_text_spans_pages():
    text = extract_text(make_pdf(OFFER_LETTER_PAGES), ".pdf")
    assert "Test University" in text
    assert "Computer Science" in text


def test_pdf_without_text_fails():
    with pytest.raises(TextExtractionError):
        extract_text(make_pdf([[]]), ".pdf")


def test_garbage_image_fails():
    with pytest.raises(TextExtractionError):
        extract_text(b"not an image", ".png")


def test_template_storage_round_trip():
    path = save_template_file(b"hello", "My Form (v2).pdf")
    assert path.startswith("templates/My_Form_v2_")
    assert path.endswith(".pdf")
    assert read_template_file(path) == b"hello"

    assert delete_template_file(path) is True
    assert delete_template_file(path) is False
    with pytest.raises(NotFoundError):
        read_template_file(path)


def test_storage_refuses_path_traversal():
    with pytest.raises(NotFoundError):
        resolve_template_path("../../etc/passwd")


def test_format_file_size():
    assert format_file_size(0) == "0 Bytes"
    assert format_file_size(512) == "512 Bytes"
    assert format_file_size(1536) == "1.5 KB"
    assert format_file_size(10 * 1024 * 1024) == "10 MB"


def test_email_without_api_key_is_skipped():
    assert send_email("jane@example.com", "Hello", "Body") is True
