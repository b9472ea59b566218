import pytest

from conftest import COE_OUTPUT, OFFER_LETTER_OUTPUT, VISA_APPROVAL, VISA_REFUSAL
from visadocs.core.errors import LLMProviderError, ModelOutputError
from visadocs.services.document_fields import (
    COE_COLUMNS,
    NOT_SPECIFIED,
    OFFER_LETTER_COLUMNS,
    OFFER_LETTER_FIELDS,
    LIST,
)
from visadocs.services.extraction_service import (
    coerce_list,
    coerce_text,
    nest_offer_letter,
    normalize_coe,
    normalize_offer_letter,
    normalize_visa_analysis,
)
from visadocs.services.prompts import DocumentType


# ============================================================
# VALUE COERCION
# ============================================================

def test_coerce_text_placeholders():
    for blank in (None, "", "   ", NOT_SPECIFIED, [], {}):
        assert coerce_text(blank) == NOT_SPECIFIED


def test_coerce_text_scalars():
    assert coerce_text("  AUD 42,000 ") == "AUD 42,000"
    assert coerce_text(12) == "12"
    assert coerce_text(True) == "Yes"
    assert coerce_text(["IELTS 6.5", "", "Transcripts"]) == "IELTS 6.5; Transcripts"


def test_coerce_list():
    assert coerce_list(None) == []
    assert coerce_list("") == []
    assert coerce_list(NOT_SPECIFIED) == []
    assert coerce_list("single") == ["single"]
    assert coerce_list(["a", None, "", {"b": 1}]) == ["a", {"b": 1}]


# ============================================================
# OFFER LETTER / COE
# ============================================================

def test_offer_letter_fills_every_column():
    fields = normalize_offer_letter(OFFER_LETTER_OUTPUT)

    assert set(fields) == set(OFFER_LETTER_COLUMNS)
    assert fields["institution_name"] == "Test University"
    assert fields["course_name"] == "Computer Science"
    assert fields["payment_schedule"] == [{"studyPeriod": "Year 1", "fee": "AUD 42,000"}]
    assert fields["trading_as"] == NOT_SPECIFIED
    assert fields["additional_fees"] == []


def test_offer_letter_missing_fields_use_placeholders():
    fields = normalize_offer_letter({})
    for spec in OFFER_LETTER_FIELDS:
        expected = [] if spec.kind == LIST else NOT_SPECIFIED
        assert fields[spec.column] == expected


def test_offer_letter_accepts_flat_camel_case():
    fields = normalize_offer_letter({"institutionName": "Flat Institute", "courseName": "BSc"})
    assert fields["institution_name"] == "Flat Institute"
    assert fields["course_name"] == "BSc"


def test_offer_letter_normalize_is_idempotent():
    once = normalize_offer_letter(OFFER_LETTER_OUTPUT)
    twice = normalize_offer_letter(nest_offer_letter(once))
    assert twice == once


def test_nest_offer_letter_restores_sections():
    sections = nest_offer_letter(normalize_offer_letter(OFFER_LETTER_OUTPUT))
    assert sections["institutionInformation"]["institutionName"] == "Test University"
    assert sections["paymentInformation"]["bankDetails"]["accountName"] == NOT_SPECIFIED


def test_coe_fields():
    fields = normalize_coe(COE_OUTPUT)
    assert set(fields) == set(COE_COLUMNS)
    assert fields["coe_number"] == "E1234567"
    assert fields["given_names"] == "Jane"
    assert fields["vevo_info"] == NOT_SPECIFIED
    assert fields["course_end_date"] == NOT_SPECIFIED


def test_coe_normalize_is_idempotent():
    once = normalize_coe(COE_OUTPUT)
    assert normalize_coe(once) == once


# ============================================================
# VISA ANALYSIS
# ============================================================

def test_visa_approval():
    fields = normalize_visa_analysis(VISA_APPROVAL)
    assert fields["document_outcome"] == "approval"
    assert fields["key_terms"][0]["title"] == "Work limitation"
    assert fields["rejection_reasons"] == []


def test_visa_refusal_with_camel_case_and_plain_strings():
    fields = normalize_visa_analysis(VISA_REFUSAL)
    assert fields["document_outcome"] == "rejection"
    assert fields["rejection_reasons"][0]["severity"] == "high"
    assert fields["recommendations"][0]["title"] == "Strengthen the statement of purpose"
    assert fields["next_steps"][0]["description"] == "Request a review within 28 days"


def test_visa_without_key_terms_is_a_rejection():
    fields = normalize_visa_analysis({"summary": "Unclear letter"})
    assert fields["document_outcome"] == "rejection"


def test_visa_missing_summary_is_model_output_error():
    with pytest.raises(ModelOutputError):
        normalize_visa_analysis({"key_terms": []})


def test_visa_wrong_shape_is_model_output_error():
    with pytest.raises(ModelOutputError):
        normalize_visa_analysis({"summary": "x", "key_terms": "not a list"})


def test_visa_explicit_outcome_wins_over_heuristic():
    fields = normalize_visa_analysis({"outcome": "approval", "summary": "Visa granted, no conditions listed"})
    assert fields["document_outcome"] == "approval"


def test_visa_outcome_synonyms():
    refused = normalize_visa_analysis({**VISA_APPROVAL, "outcome": "Refused"})
    assert refused["document_outcome"] == "rejection"
    granted = normalize_visa_analysis({**VISA_REFUSAL, "documentOutcome": "granted"})
    assert granted["document_outcome"] == "approval"


def test_visa_unknown_outcome_is_model_output_error():
    with pytest.raises(ModelOutputError):
        normalize_visa_analysis({**VISA_APPROVAL, "outcome": "pending"})


# ============================================================
# PIPELINE
# ============================================================

def test_pipeline_offer_letter(pipeline, provider):
    provider.queue(OFFER_LETTER_OUTPUT)
    result = pipeline.run("Test University offer letter", DocumentType.offer_letter, "offer.pdf")

    assert result.fields["institution_name"] == "Test University"
    assert result.tokens_used == 321
    assert result.model == "scripted-model"
    assert result.processing_time_ms >= 0
    assert "Test University offer letter" in provider.calls[0]["user"]
    assert provider.calls[0]["temperature"] == 0.1


def test_pipeline_visa_uses_higher_temperature(pipeline, provider):
    pipeline.run("Visa grant notice", DocumentType.visa_letter, "visa.pdf")
    assert provider.calls[0]["temperature"] == 0.3


def test_pipeline_handles_fenced_reply(pipeline, provider):
    provider.queue('```json\n{"coeNumber": "E999"}\n```')
    result = pipeline.run("CoE text", DocumentType.coe, "coe.pdf")
    assert result.fields["coe_number"] == "E999"


def test_pipeline_unparseable_reply(pipeline, provider):
    provider.queue("Sorry, I cannot help with that.")
    with pytest.raises(ModelOutputError):
        pipeline.run("CoE text", DocumentType.coe, "coe.pdf")


def test_pipeline_provider_error_propagates(pipeline, provider):
    provider.queue(LLMProviderError("busy", category="rate_limit"))
    with pytest.raises(LLMProviderError) as exc_info:
        pipeline.run("Offer text", DocumentType.offer_letter, "offer.pdf")
    assert exc_info.value.category == "rate_limit"
    assert exc_info.value.status_code == 502
