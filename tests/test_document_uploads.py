"""Upload -> extraction -> storage through the HTTP API."""

from conftest import OFFER_LETTER_OUTPUT, COE_OUTPUT, VISA_REFUSAL, count_rows, create_user, auth_headers, load_user
from visadocs.core.errors import LLMProviderError
from visadocs.models import Analysis, CoeInformation, OfferLetterInfo
from visadocs.db.postgres import get_db_session
from visadocs.services.document_fields import LIST, NOT_SPECIFIED, OFFER_LETTER_FIELDS

# columns OFFER_LETTER_OUTPUT fills in
EXTRACTED_COLUMNS = {
    "institution_name", "cricos_provider_code", "student_name", "course_name", "course_start_date",
    "total_tuition_fees", "payment_schedule", "conditions_of_offer",
}


# ============================================================
# VALIDATION (nothing reaches the model)
# ============================================================

def test_wrong_file_type_is_rejected(client, provider, user_headers):
    response = client.post(
        "/api/analyze",
        files={"file": ("notes.txt", b"hello", "text/plain")},
        headers=user_headers,
    )
    assert response.status_code == 415
    assert "error" in response.json()
    assert provider.calls == []
    assert count_rows(Analysis) == 0


def test_mime_must_match_extension(client, provider, user_headers, offer_letter_pdf):
    response = client.post(
        "/api/offer-letter-information/extract",
        files={"document": ("offer.pdf", offer_letter_pdf, "image/png")},
        headers=user_headers,
    )
    assert response.status_code == 415
    assert provider.calls == []


def test_oversized_file_is_rejected(client, provider, user, user_headers):
    too_big = b"%PDF-1.4\n" + b"0" * (1024 * 1024)
    response = client.post(
        "/api/offer-letter-information/extract",
        files={"document": ("big.pdf", too_big, "application/pdf")},
        headers=user_headers,
    )
    assert response.status_code == 413
    assert provider.calls == []
    assert count_rows(OfferLetterInfo) == 0
    assert load_user(user.id).analysis_count == 0


def test_empty_file_is_rejected(client, provider, user_headers):
    response = client.post(
        "/api/coe-info/upload",
        files={"file": ("empty.pdf", b"", "application/pdf")},
        headers=user_headers,
    )
    assert response.status_code == 400
    assert provider.calls == []


def test_unreadable_pdf_is_unprocessable(client, provider, user_headers):
    response = client.post(
        "/api/analyze",
        files={"file": ("broken.pdf", b"this is not really a pdf", "application/pdf")},
        headers=user_headers,
    )
    assert response.status_code == 422
    assert provider.calls == []


def test_upload_requires_authentication(client, offer_letter_pdf):
    response = client.post(
        "/api/offer-letter-information/extract",
        files={"document": ("offer.pdf", offer_letter_pdf, "application/pdf")},
    )
    assert response.status_code == 401


# ============================================================
# OFFER LETTER / COE
# ============================================================

def test_offer_letter_end_to_end(client, provider, user, user_headers, offer_letter_pdf):
    provider.queue(OFFER_LETTER_OUTPUT)
    response = client.post(
        "/api/offer-letter-information/extract",
        files={"document": ("offer.pdf", offer_letter_pdf, "application/pdf")},
        headers=user_headers,
    )
    assert response.status_code == 201
    body = response.json()

    # text from both pages made it into the prompt
    prompt = provider.calls[0]["user"]
    assert "Test University" in prompt
    assert "Computer Science" in prompt

    assert body["fields"]["institution_name"] == "Test University"
    assert body["fields"]["course_name"] == "Computer Science"
    assert body["fields"]["abn"] == NOT_SPECIFIED
    assert body["sections"]["courseProgramInformation"]["courseName"] == "Computer Science"
    assert body["file_name"] == "offer.pdf"
    assert body["file_size"] == len(offer_letter_pdf)
    assert body["tokens_used"] == 321

    assert load_user(user.id).analysis_count == 1

    with get_db_session() as db:
        row = db.get(OfferLetterInfo, body["id"])
    assert row.course_name == "Computer Science"
    assert row.payment_schedule == [{"studyPeriod": "Year 1", "fee": "AUD 42,000"}]
    for spec in OFFER_LETTER_FIELDS:
        if spec.column in EXTRACTED_COLUMNS:
            continue
        expected = [] if spec.kind == LIST else NOT_SPECIFIED
        assert getattr(row, spec.column) == expected, spec.column

    listing = client.get("/api/offer-letter-information", headers=user_headers).json()
    assert [item["id"] for item in listing] == [body["id"]]
    assert listing[0]["institution_name"] == "Test University"

    detail = client.get(f"/api/offer-letter-information/{body['id']}", headers=user_headers)
    assert detail.status_code == 200
    assert detail.json()["fields"] == body["fields"]


def test_offer_letter_is_private_to_owner(client, provider, user_headers, offer_letter_pdf):
    provider.queue(OFFER_LETTER_OUTPUT)
    created = client.post(
        "/api/offer-letter-information/extract",
        files={"document": ("offer.pdf", offer_letter_pdf, "application/pdf")},
        headers=user_headers,
    ).json()

    other = auth_headers(create_user("other"))
    assert client.get(f"/api/offer-letter-information/{created['id']}", headers=other).status_code == 403
    assert client.delete(f"/api/offer-letter-information/{created['id']}", headers=other).status_code == 403
    assert client.delete(f"/api/offer-letter-information/{created['id']}", headers=user_headers).status_code == 200
    assert count_rows(OfferLetterInfo) == 0


def test_coe_upload(client, provider, user_headers, offer_letter_pdf):
    provider.queue(COE_OUTPUT)
    response = client.post(
        "/api/coe-info/upload",
        files={"file": ("coe.pdf", offer_letter_pdf, "application/pdf")},
        headers=user_headers,
    )
    assert response.status_code == 201
    fields = response.json()["fields"]
    assert fields["coe_number"] == "E1234567"
    assert fields["provider_name"] == "Test University"
    assert fields["vevo_info"] == NOT_SPECIFIED

    listing = client.get("/api/coe-info", headers=user_headers).json()
    assert len(listing) == 1
    assert listing[0]["coe_number"] == "E1234567"


# ============================================================
# FAILURES LEAVE NO TRACE
# ============================================================

def test_provider_failure_stores_nothing(client, provider, user, user_headers, offer_letter_pdf):
    provider.queue(LLMProviderError("Could not reach the analysis service", category="network"))
    response = client.post(
        "/api/offer-letter-information/extract",
        files={"document": ("offer.pdf", offer_letter_pdf, "application/pdf")},
        headers=user_headers,
    )
    assert response.status_code == 502
    assert response.json() == {"error": "Could not reach the analysis service"}
    assert count_rows(OfferLetterInfo) == 0
    assert load_user(user.id).analysis_count == 0


def test_malformed_model_output_is_502(client, provider, user, user_headers, visa_letter_pdf):
    provider.queue("I'm sorry, I can't produce JSON for this.")
    response = client.post(
        "/api/analyze",
        files={"file": ("visa.pdf", visa_letter_pdf, "application/pdf")},
        headers=user_headers,
    )
    assert response.status_code == 502
    assert "error" in response.json()
    assert count_rows(Analysis) == 0
    assert load_user(user.id).analysis_count == 0


def test_incomplete_visa_analysis_is_502(client, provider, user_headers, visa_letter_pdf):
    provider.queue({"key_terms": []})
    response = client.post(
        "/api/analyze",
        files={"file": ("visa.pdf", visa_letter_pdf, "application/pdf")},
        headers=user_headers,
    )
    assert response.status_code == 502
    assert count_rows(Analysis) == 0


# ============================================================
# QUOTA
# ============================================================

def test_quota_blocks_before_extraction(client, provider, visa_letter_pdf):
    student = create_user("limited", max_analyses=1)
    headers = auth_headers(student)
    upload = {"file": ("visa.pdf", visa_letter_pdf, "application/pdf")}

    assert client.post("/api/analyze", files=upload, headers=headers).status_code == 201
    second = client.post("/api/analyze", files=upload, headers=headers)

    assert second.status_code == 403
    assert "limit" in second.json()["error"].lower()
    assert len(provider.calls) == 1
    assert count_rows(Analysis) == 1
    assert load_user(student.id).analysis_count == 1


def test_quota_is_shared_across_document_types(client, provider, offer_letter_pdf):
    student = create_user("limited", max_analyses=2)
    headers = auth_headers(student)
    pdf = ("doc.pdf", offer_letter_pdf, "application/pdf")

    provider.queue(OFFER_LETTER_OUTPUT, COE_OUTPUT)
    assert client.post("/api/offer-letter-information/extract", files={"document": pdf}, headers=headers).status_code == 201
    assert client.post("/api/coe-info/upload", files={"file": pdf}, headers=headers).status_code == 201
    assert client.post("/api/analyses", json={"text": "Visa granted"}, headers=headers).status_code == 403

    assert client.get("/api/auth/usage", headers=headers).json()["remaining"] == 0


def test_admin_is_not_limited(client, admin, admin_headers):
    for _ in range(3):
        assert client.post("/api/analyses", json={"text": "Visa granted"}, headers=admin_headers).status_code == 201
    assert load_user(admin.id).analysis_count == 0


def test_refusal_is_stored_as_rejection(client, provider, user_headers):
    provider.queue(VISA_REFUSAL)
    response = client.post(
        "/api/analyses", json={"filename": "refusal.txt", "text": "Your application is refused."},
        headers=user_headers,
    )
    assert response.status_code == 201
    body = response.json()
    assert body["document_outcome"] == "rejection"
    assert body["filename"] == "refusal.txt"
    assert body["rejection_reasons"][0]["title"] == "Genuine student"
