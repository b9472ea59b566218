"""
Prompt Builder - fixed prompt templates per document type.

build_prompt() is a pure function of (document text, document type, file
name): no I/O, no randomness. The same input always yields the same prompt.

PROMPTS:
- visa_letter: approval or refusal letter -> summary, reasons, key terms,
  recommendations, next steps
- offer_letter: sectioned extraction of every field in OFFER_LETTER_FIELDS
- coe: flat extraction of every field in COE_FIELDS
- enrollment_analysis: enrolment document review -> key facts, findings,
  missing information, compliance issues, recommendations, next steps
- offer_letter_analysis: offer letter review -> strengths, concerns,
  opportunities, recommendations and an immediate / short / long term plan
"""

import json
import logging
import re
from enum import Enum
from typing import NamedTuple, Optional

from visadocs.core.config import get_settings
from visadocs.services.document_fields import (
    COE_FIELDS,
    NOT_SPECIFIED,
    OFFER_LETTER_FIELDS,
    skeleton,
)

logger = logging.getLogger(__name__)


class DocumentType(str, Enum):
    visa_letter = "visa_letter"
    offer_letter = "offer_letter"
    coe = "coe"
    enrollment_analysis = "enrollment_analysis"
    offer_letter_analysis = "offer_letter_analysis"


class Prompt(NamedTuple):
    system: str
    user: str
    temperature: float


TRUNCATION_MARKER = "\n\n[... document truncated: showing {shown} of {total} characters ...]"
OMISSION_MARKER = "\n\n[... {omitted} characters omitted from the middle of the document ...]\n\n"


# ============================================================
# TEMPLATES
# ============================================================

VISA_SYSTEM_PROMPT = (
    "You are an experienced visa consultant who analyses visa decision letters "
    "for international students. Return ONLY valid JSON."
)

VISA_USER_TEMPLATE = """Analyse the visa document below. First decide whether it is an APPROVAL or a REFUSAL.

For an approval, describe the grant and its conditions: validity dates, work rights,
study conditions, travel restrictions and compliance obligations.

For a refusal, explain each reason the officer gave and put it in exactly one category:
financial (funds, sponsorship), documentation (missing or inadequate documents),
eligibility (course or institution issues), academic (qualifications),
immigration_history (previous refusals or breaches), ties_to_home (intention to return),
credibility (truthfulness concerns) or general.

Rules:
- Use only what the document says. Do not assume facts that are not stated.
- Recommendations and next steps must be specific and actionable.
- Leave "rejection_reasons" empty for an approval and "key_terms" empty for a refusal.

Output format:
{
  "outcome": "approval|rejection",
  "summary": "Two or three sentence summary of the decision",
  "rejection_reasons": [
    {"title": "Reason", "description": "Explanation", "category": "financial|documentation|eligibility|academic|immigration_history|ties_to_home|credibility|general", "severity": "high|medium|low"}
  ],
  "key_terms": [
    {"title": "Condition", "description": "Explanation", "category": "validity|work_permission|study_conditions|travel_restrictions|compliance|general"}
  ],
  "recommendations": [
    {"title": "Recommendation", "description": "Explanation"}
  ],
  "next_steps": [
    {"title": "Step", "description": "Explanation"}
  ]
}

Document file name: {file_name}

Visa document:
\"\"\"
{document_text}
\"\"\"
"""

OFFER_LETTER_SYSTEM_PROMPT = (
    "You extract information from university and college offer letters with "
    "maximum accuracy and completeness. Return structured JSON only."
)

OFFER_LETTER_USER_TEMPLATE = """Extract ALL available information from the offer letter below into this JSON structure:

{structure}

Rules:
1. Extract only information explicitly stated in the document.
2. Use "{not_specified}" for any text field that is not in the document, and [] for lists with no entries.
3. Keep amounts, dates, codes and names exactly as written, including currency symbols.
4. Capture every fee schedule row, payment term, condition and policy.

File name: {file_name}

Document text:
{document_text}
"""

COE_SYSTEM_PROMPT = (
    "You extract information from Australian Confirmation of Enrolment (CoE) "
    "documents. Return ONLY a JSON object."
)

COE_USER_TEMPLATE = """Extract the information in the Confirmation of Enrolment below into this JSON object:

{structure}

Rules:
- Copy values exactly as they appear, including currency symbols and brackets around codes.
- Do not interpret or add anything that is not stated.
- Use "{not_specified}" for any field that is not present.

File name: {file_name}

Document text:
{document_text}
"""

ENROLLMENT_SYSTEM_PROMPT = (
    "You are an international education counsellor who reviews enrolment documents "
    "for students and their families. Return ONLY valid JSON."
)

ENROLLMENT_USER_TEMPLATE = """Review the {document_label} enrolment document below for an international student.

Pay particular attention to:
- every amount (pre-paid tuition, non-tuition fees, total course cost, scholarships and discounts)
- health cover (provider, cover type, start and end dates)
- English test type, score and date
- course codes, provider registration and contact details
- visa conditions and compliance obligations, key dates and deadlines

Rules:
- Use only what the document says. Leave a text field empty when the document does not state it.
- Write in plain language a student or parent can follow.
- analysisScore rates how complete the document is (0-100); confidence rates your own certainty (0-100).

Output format:
{
  "institutionName": "Institution name, with trading name if different",
  "studentName": "Student full name",
  "studentId": "Provider student ID",
  "programName": "Course name with course code",
  "programLevel": "Bachelor, Master, Diploma, ...",
  "startDate": "Course start date",
  "endDate": "Course end date",
  "institutionCountry": "Country of the institution",
  "studentCountry": "Student's country, if stated",
  "visaType": "Relevant visa type or subclass",
  "tuitionAmount": "Tuition amount with currency",
  "currency": "Currency code",
  "scholarshipAmount": "Scholarship amount or percentage",
  "totalCost": "Total course cost",
  "healthCover": "Health cover provider, type and dates",
  "englishTestScore": "English test, score and date",
  "institutionContact": "Phone, email and other contact details",
  "visaObligations": "Visa related requirements and obligations",
  "summary": "Summary of the document covering fees, scholarships, health cover and obligations",
  "keyFindings": [{"title": "Finding", "description": "Details with amounts and dates", "importance": "high|medium|low"}],
  "missingInformation": [{"field": "Field", "description": "What is missing", "impact": "Why it matters"}],
  "recommendations": [{"title": "Recommendation", "description": "Advice", "priority": "urgent|important|suggested", "category": "documentation|financial|academic|visa|preparation"}],
  "nextSteps": [{"step": "Action", "description": "How to do it", "deadline": "Date if known", "category": "immediate|short_term|long_term"}],
  "isValid": true,
  "expiryDate": "Expiry date, if any",
  "complianceIssues": [{"issue": "Issue", "severity": "critical|moderate|minor", "resolution": "How to resolve"}],
  "analysisScore": 0,
  "confidence": 0
}

File name: {file_name}

Document text:
{document_text}
"""

OFFER_ANALYSIS_SYSTEM_PROMPT = (
    "You are a study abroad advisor who assesses university offer letters and turns "
    "them into a practical plan for the student. Return ONLY valid JSON."
)

OFFER_ANALYSIS_USER_TEMPLATE = """Assess the offer letter below from the student's point of view.

Identify the strengths of the offer, the concerns the student should raise or plan around,
the opportunities it opens, and concrete recommendations. Finish with an action plan split into
immediate actions (before accepting), short term actions (before departure) and long term
actions (during the course).

Rules:
- Base every point on the letter. Do not invent rankings, statistics or scholarships.
- Tie concerns to a specific fee, condition, deadline or policy in the letter.

Output format:
{
  "summary": "Three or four sentence overview of the offer",
  "institutionName": "Institution name",
  "programName": "Course name",
  "courseLevel": "Course level",
  "startDate": "Course start date",
  "totalFees": "Total tuition fees with currency",
  "offerConditions": [{"condition": "Condition", "category": "academic|english|visa|health|financial|other", "deadline": "Deadline if stated"}],
  "strengths": [{"category": "Category", "strength": "Strength", "impact": "Why it helps"}],
  "concerns": [{"category": "Category", "concern": "Concern", "severity": "high|medium|low", "mitigation": "What to do about it"}],
  "opportunities": [{"opportunity": "Opportunity", "benefit": "Benefit", "requirements": "What it takes"}],
  "recommendations": [{"category": "Category", "recommendation": "Recommendation", "rationale": "Why", "priority": "high|medium|low"}],
  "actionPlan": {
    "immediate": [{"action": "Action", "description": "Details", "deadline": "Date", "priority": "high|medium|low", "documents": ["Document"]}],
    "shortTerm": [{"action": "Action", "description": "Details", "timeline": "When"}],
    "longTerm": [{"action": "Action", "description": "Details", "milestones": ["Milestone"]}]
  }
}

File name: {file_name}

Offer letter text:
{document_text}
"""

OFFER_LETTER_STRUCTURE = json.dumps(skeleton(OFFER_LETTER_FIELDS), indent=2)
COE_STRUCTURE = json.dumps(skeleton(COE_FIELDS), indent=2)


# ============================================================
# BUILDER
# ============================================================

_PLACEHOLDER = re.compile(r"\{(structure|not_specified|file_name|document_text|document_label)\}")


def fill_template(template: str, **values: str) -> str:
    """
    Substitute ``{name}`` placeholders in a single pass.

    Literal JSON braces in the template are left alone, and placeholder-like
    text inside a substituted value (a file name, the document itself) is
    never expanded again.
    """
    return _PLACEHOLDER.sub(lambda m: values.get(m.group(1), m.group(0)), template)


def prepare_document_text(document_text: str, max_chars: Optional[int] = None, keep_tail: bool = False) -> str:
    """
    Trim surrounding whitespace and cut documents over ``max_chars``.

    By default the end of the document is dropped and a marker says how much
    was shown. With ``keep_tail`` the first 70% of the budget comes from the
    start of the document and the rest from its end, with a marker in between.
    """
    limit = max_chars if max_chars is not None else get_settings().llm_max_input_chars
    text = document_text.strip()
    if not limit or len(text) <= limit:
        return text

    logger.warning("Document text truncated from %d to %d characters", len(text), limit)
    if keep_tail and limit > 1:
        head = int(limit * 0.7)
        tail = limit - head
        return text[:head] + OMISSION_MARKER.format(omitted=len(text) - limit) + text[-tail:]
    return text[:limit] + TRUNCATION_MARKER.format(shown=limit, total=len(text))


def build_prompt(
    document_text: str,
    document_type: DocumentType,
    file_name: Optional[str] = None,
    max_chars: Optional[int] = None,
    document_label: Optional[str] = None,
) -> Prompt:
    """
    Build the (system, user) prompt pair for one document.

    Args:
        document_text: Extracted text of the upload
        document_type: Which prompt to use
        file_name: Shown to the model for context
        max_chars: Input budget (defaults to settings.llm_max_input_chars)
        document_label: Kind of enrolment document (coe, i20, cas, ...);
            only used by enrollment_analysis

    Returns:
        Prompt(system, user, temperature)
    """
    document_type = DocumentType(document_type)
    keep_tail = document_type is DocumentType.enrollment_analysis
    values = {
        "document_text": prepare_document_text(document_text, max_chars, keep_tail=keep_tail),
        "file_name": file_name or "unknown",
        "not_specified": NOT_SPECIFIED,
    }

    if document_type is DocumentType.visa_letter:
        return Prompt(VISA_SYSTEM_PROMPT, fill_template(VISA_USER_TEMPLATE, **values), 0.3)

    if document_type is DocumentType.enrollment_analysis:
        values["document_label"] = (document_label or "coe").replace("_", " ").upper()
        return Prompt(ENROLLMENT_SYSTEM_PROMPT, fill_template(ENROLLMENT_USER_TEMPLATE, **values), 0.3)

    if document_type is DocumentType.offer_letter_analysis:
        return Prompt(OFFER_ANALYSIS_SYSTEM_PROMPT, fill_template(OFFER_ANALYSIS_USER_TEMPLATE, **values), 0.3)

    if document_type is DocumentType.offer_letter:
        template, structure, system = OFFER_LETTER_USER_TEMPLATE, OFFER_LETTER_STRUCTURE, OFFER_LETTER_SYSTEM_PROMPT
    else:
        template, structure, system = COE_USER_TEMPLATE, COE_STRUCTURE, COE_SYSTEM_PROMPT

    return Prompt(system, fill_template(template, structure=structure, **values), 0.1)
