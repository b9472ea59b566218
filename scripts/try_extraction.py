#!/usr/bin/env python3
"""
Extraction Try-Out Script

Runs the extraction pipeline against a file or a built-in sample, without
touching the database or any quota.

IMPORTANT: This script requires a valid OPENAI_API_KEY or ANTHROPIC_API_KEY
in .env (matching LLM_PROVIDER).

Run: python scripts/try_extraction.py [visa_letter|offer_letter|coe|enrollment_analysis|offer_letter_analysis] [path/to/file.pdf]
"""
import json
import sys
sys.path.insert(0, '.')

from visadocs.core.errors import AppError
from visadocs.services.extraction_service import ExtractionPipeline
from visadocs.services.prompts import DocumentType
from visadocs.utils.file_upload import extract_text, get_file_extension


# ============================================================
# SAMPLE DATA FOR TESTING
# ============================================================

SAMPLE_OFFER_LETTER = """
TEST UNIVERSITY
Office of International Admissions
123 College Avenue, Sydney NSW 2000, Australia
CRICOS Provider Code: 01234A

Date: 15 March 2025

Dear Ms Jane Doe,
Student ID: TU2025001 | Date of Birth: 02/07/2001 | Passport: N1234567

LETTER OF OFFER
We are pleased to offer you a place in the Master of Computer Science
(CRICOS Course Code: 098765K), Faculty of Engineering, Sydney campus.

Course start date: 24 February 2026 | End date: 20 December 2027
Duration: 2 years full-time | Study mode: On campus
Annual tuition fee: AUD 42,000 | Total tuition fee: AUD 84,000
Enrolment deposit: AUD 21,000 due by 30 June 2025

Conditions: Provide certified copies of your academic transcripts.
English requirement: IELTS 6.5 overall with no band below 6.0.

Accept this offer by 30 June 2025.
"""

SAMPLE_VISA_LETTER = """
Department of Home Affairs
Notification of Visa Grant

Applicant: Jane Doe   Date of birth: 02 July 2001
Visa: Student (subclass 500)   Grant date: 10 November 2025
Must not arrive after: 24 February 2026   Stay until: 15 March 2028

Conditions: 8105 - work limitation of 48 hours per fortnight during study periods.
8202 - must remain enrolled in a registered course.
8501 - maintain adequate health insurance.
"""

SAMPLES = {
    DocumentType.offer_letter: SAMPLE_OFFER_LETTER,
    DocumentType.offer_letter_analysis: SAMPLE_OFFER_LETTER,
    DocumentType.visa_letter: SAMPLE_VISA_LETTER,
}


def load_text(document_type: DocumentType, path: str = None) -> str:
    if path:
        with open(path, "rb") as f:
            return extract_text(f.read(), get_file_extension(path))
    if document_type not in SAMPLES:
        raise SystemExit(f"No built-in sample for {document_type.value}; pass a file path")
    return SAMPLES[document_type]


def main():
    document_type = DocumentType(sys.argv[1]) if len(sys.argv) > 1 else DocumentType.offer_letter
    path = sys.argv[2] if len(sys.argv) > 2 else None

    print("\n" + "=" * 60)
    print(f"EXTRACTING {document_type.value.upper()}")
    print("=" * 60)

    text = load_text(document_type, path)
    print(f"\n📄 Input: {path or 'built-in sample'} ({len(text)} characters)")

    print("\n🤖 Calling LLM provider...")
    try:
        result = ExtractionPipeline().run(text, document_type, path or "sample.txt")
    except AppError as e:
        print(f"\n❌ Extraction failed ({e.status_code}): {e.message}")
        sys.exit(1)

    print(f"\n✅ Model: {result.model} | Tokens: {result.tokens_used} | Time: {result.processing_time_ms} ms")
    print("-" * 40)
    print(json.dumps(result.fields, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
