"""
Extraction Service - document text -> validated, column-shaped fields.

PIPELINE:
1. Build the prompt for the document type (services.prompts)
2. Call the configured completion provider (services.llm_client)
3. Isolate the JSON object in the reply (services.response_parser)
4. Validate / normalise into the shape the database stores (one
   normaliser per document type, extraction or advisory analysis)

Every failure raises (LLMProviderError, ModelOutputError). There is no
"best effort" result: callers either get a complete ExtractionResult or an
exception, and nothing is persisted here.
"""

import json
import logging
import time
from typing import Any, Dict, NamedTuple, Optional

from pydantic import ValidationError

from visadocs.core.errors import ModelOutputError
from visadocs.schemas.schemas import EnrollmentAnalysisResult, OfferLetterAnalysisResult, VisaAnalysisResult
from visadocs.services.document_fields import (
    COE_FIELDS,
    LIST,
    NOT_SPECIFIED,
    OFFER_LETTER_FIELDS,
)
from visadocs.services.llm_client import CompletionProvider, get_llm_provider
from visadocs.services.prompts import DocumentType, build_prompt
from visadocs.services.response_parser import parse_json_response

logger = logging.getLogger(__name__)


class ExtractionResult(NamedTuple):
    fields: Dict[str, Any]
    tokens_used: int
    processing_time_ms: int
    model: str
    document_label: Optional[str] = None


# ============================================================
# VALUE COERCION
# ============================================================

def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and (not value.strip() or value.strip() == NOT_SPECIFIED))


def coerce_text(value: Any) -> str:
    """Normalise a model value for a text column."""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, list):
        parts = [coerce_text(item) for item in value if not _is_blank(item)]
        return "; ".join(parts) if parts else NOT_SPECIFIED
    if isinstance(value, dict):
        return json.dumps(value, ensure_ascii=False) if value else NOT_SPECIFIED
    if _is_blank(value):
        return NOT_SPECIFIED
    return str(value).strip()


def coerce_list(value: Any) -> list:
    """Normalise a model value for a JSON list column."""
    if isinstance(value, list):
        return [item for item in value if not _is_blank(item)]
    if _is_blank(value):
        return []
    return [value]


def _lookup(data: dict, path: tuple) -> Any:
    node: Any = data
    for key in path:
        if not isinstance(node, dict) or key not in node:
            return None
        node = node[key]
    return node


def _normalize(data: dict, catalog: list) -> Dict[str, Any]:
    fields = {}
    for spec in catalog:
        value = _lookup(data, spec.path)
        if value is None:
            # Flat output: camelCase leaf key or the column name itself
            value = data.get(spec.path[-1], data.get(spec.column))
        fields[spec.column] = coerce_list(value) if spec.kind == LIST else coerce_text(value)
    return fields


# ============================================================
# NORMALISERS
# ============================================================

def normalize_visa_analysis(data: dict) -> Dict[str, Any]:
    """Validate a visa analysis object; raises ModelOutputError on schema violations."""
    try:
        result = VisaAnalysisResult.model_validate(data)
    except ValidationError as e:
        logger.warning("Visa analysis failed validation: %s", e.errors()[:3])
        raise ModelOutputError("The analysis service returned an incomplete analysis") from e

    return {
        "summary": result.summary.strip(),
        "document_outcome": result.document_outcome,
        "rejection_reasons": [item.model_dump() for item in result.rejection_reasons],
        "key_terms": [item.model_dump() for item in result.key_terms],
        "recommendations": [item.model_dump() for item in result.recommendations],
        "next_steps": [item.model_dump() for item in result.next_steps],
    }


def normalize_offer_letter(data: dict) -> Dict[str, Any]:
    """
    Map sectioned (or flat camelCase) offer letter output onto
    OfferLetterInfo columns.

    Missing or blank text fields become "Not specified in document",
    missing list fields become []. Applying it to its own output passed
    through nest_offer_letter() returns the same dict.
    """
    return _normalize(data, OFFER_LETTER_FIELDS)


def nest_offer_letter(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Rebuild the sectioned view from flat column values."""
    out: dict = {}
    for spec in OFFER_LETTER_FIELDS:
        node = out
        for key in spec.path[:-1]:
            node = node.setdefault(key, {})
        node[spec.path[-1]] = fields.get(spec.column)
    return out


def normalize_coe(data: dict) -> Dict[str, Any]:
    """Map CoE output onto CoeInformation columns (same placeholder rule)."""
    return _normalize(data, COE_FIELDS)


def _validate(schema, data: dict, label: str):
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        logger.warning("%s failed validation: %s", label, e.errors()[:3])
        raise ModelOutputError(f"The analysis service returned an incomplete {label.lower()}") from e


def _placeholders(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {key: NOT_SPECIFIED if value is None else value for key, value in fields.items()}


def normalize_enrollment_analysis(data: dict) -> Dict[str, Any]:
    """
    Validate an enrolment document review.

    A summary is required; key facts the document does not state become
    "Not specified in document" and missing lists become []. Scores are
    clamped to 0-100.
    """
    result = _validate(EnrollmentAnalysisResult, data, "Enrollment analysis")
    return _placeholders(result.model_dump())


def normalize_offer_letter_analysis(data: dict) -> Dict[str, Any]:
    """Validate an offer letter assessment (same placeholder rule)."""
    result = _validate(OfferLetterAnalysisResult, data, "Offer letter analysis")
    return _placeholders(result.model_dump())


_NORMALIZERS = {
    DocumentType.visa_letter: normalize_visa_analysis,
    DocumentType.offer_letter: normalize_offer_letter,
    DocumentType.coe: normalize_coe,
    DocumentType.enrollment_analysis: normalize_enrollment_analysis,
    DocumentType.offer_letter_analysis: normalize_offer_letter_analysis,
}


# ============================================================
# PIPELINE
# ============================================================

class ExtractionPipeline:
    """
    prompt -> provider -> parse -> normalise, for one document at a time.

    The provider is resolved lazily so constructing a pipeline never needs
    API keys.
    """

    def __init__(self, provider: Optional[CompletionProvider] = None):
        self._provider = provider

    @property
    def provider(self) -> CompletionProvider:
        if self._provider is None:
            self._provider = get_llm_provider()
        return self._provider

    def run(
        self,
        document_text: str,
        document_type: DocumentType,
        file_name: str = None,
        document_label: Optional[str] = None,
    ) -> ExtractionResult:
        document_type = DocumentType(document_type)
        started = time.monotonic()

        prompt = build_prompt(document_text, document_type, file_name, document_label=document_label)
        logger.info(
            "Extracting %s from %s (%d chars of text)", document_type.value, file_name, len(document_text)
        )

        completion = self.provider.complete(prompt.system, prompt.user, temperature=prompt.temperature)

        parsed = parse_json_response(completion.text)
        if not parsed.ok:
            logger.warning("Unparseable %s response for %s: %s", document_type.value, file_name, parsed.error)
            raise ModelOutputError()

        fields = _NORMALIZERS[document_type](parsed.data)
        elapsed_ms = int((time.monotonic() - started) * 1000)

        logger.info(
            "Extracted %s from %s: %d tokens, %d ms",
            document_type.value, file_name, completion.tokens_used, elapsed_ms
        )
        return ExtractionResult(
            fields=fields,
            tokens_used=completion.tokens_used,
            processing_time_ms=elapsed_ms,
            model=completion.model,
            document_label=document_label,
        )


# Singleton instance
_pipeline: ExtractionPipeline = None


def get_extraction_pipeline() -> ExtractionPipeline:
    """FastAPI dependency: the shared pipeline (overridable in tests)."""
    global _pipeline
    if _pipeline is None:
        _pipeline = ExtractionPipeline()
    return _pipeline
