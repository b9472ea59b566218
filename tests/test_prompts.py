import json

from visadocs.services.document_fields import NOT_SPECIFIED
from visadocs.services.prompts import (
    COE_STRUCTURE,
    OFFER_LETTER_STRUCTURE,
    DocumentType,
    build_prompt,
    fill_template,
    prepare_document_text,
)


def test_prompt_building_is_pure():
    first = build_prompt("Some letter", DocumentType.offer_letter, "a.pdf", max_chars=1000)
    second = build_prompt("Some letter", DocumentType.offer_letter, "a.pdf", max_chars=1000)
    assert first == second


def test_visa_prompt_embeds_text_and_file_name():
    prompt = build_prompt("Your visa has been granted {with braces}", DocumentType.visa_letter, "grant.pdf")
    assert "Your visa has been granted {with braces}" in prompt.user
    assert "grant.pdf" in prompt.user
    assert '"rejection_reasons"' in prompt.user
    assert prompt.temperature == 0.3
    assert "JSON" in prompt.system


def test_offer_letter_prompt_contains_structure():
    prompt = build_prompt("Offer text", DocumentType.offer_letter)
    assert OFFER_LETTER_STRUCTURE in prompt.user
    assert NOT_SPECIFIED in prompt.user
    assert "File name: unknown" in prompt.user
    assert prompt.temperature == 0.1


def test_coe_prompt_accepts_string_document_type():
    prompt = build_prompt("CoE text", "coe", "coe.pdf")
    assert COE_STRUCTURE in prompt.user
    assert "CoE text" in prompt.user


def test_structures_are_valid_json():
    offer = json.loads(OFFER_LETTER_STRUCTURE)
    assert "institutionName" in offer["institutionInformation"]
    assert isinstance(offer["financialInformation"]["paymentSchedule"], list)
    assert "coeNumber" in json.loads(COE_STRUCTURE)


def test_short_text_is_untouched_apart_from_whitespace():
    assert prepare_document_text("  hello  ", max_chars=100) == "hello"


def test_long_text_is_truncated_with_marker():
    text = "x" * 250
    prepared = prepare_document_text(text, max_chars=100)
    assert prepared.startswith("x" * 100)
    assert "x" * 101 not in prepared
    assert "showing 100 of 250 characters" in prepared


def test_truncation_reaches_the_prompt():
    prompt = build_prompt("y" * 500, DocumentType.coe, max_chars=50)
    assert "showing 50 of 500 characters" in prompt.user
    assert "y" * 51 not in prompt.user


def test_placeholder_in_file_name_is_not_expanded():
    prompt = build_prompt("SECRET LETTER", DocumentType.visa_letter, "{document_text}.pdf")
    assert prompt.user.count("SECRET LETTER") == 1
    assert "{document_text}.pdf" in prompt.user


def test_placeholder_in_document_is_not_expanded():
    prompt = build_prompt("Fees: {not_specified} {structure}", DocumentType.offer_letter, "offer.pdf")
    assert "Fees: {not_specified} {structure}" in prompt.user
    assert prompt.user.count(OFFER_LETTER_STRUCTURE) == 1


def test_fill_template_leaves_other_braces():
    filled = fill_template('{"a": "{file_name}", "b": {x}}', file_name="{document_text}", document_text="body")
    assert filled == '{"a": "{document_text}", "b": {x}}'


def test_visa_prompt_asks_for_explicit_outcome():
    prompt = build_prompt("Visa granted", DocumentType.visa_letter)
    assert '"outcome": "approval|rejection"' in prompt.user
