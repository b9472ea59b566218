"""
Enrolment and Offer Letter Analysis Routes

POST /enrollment-analysis - Upload an enrolment document (CoE, I-20, CAS, ...) for review
GET /enrollment-analyses - My enrolment analyses
GET /enrollment-analyses/{id} - One analysis
DELETE /enrollment-analyses/{id} - Delete

POST /offer-letter-analysis - Upload an offer letter for assessment
GET /offer-letter-analyses - My offer letter analyses
GET /offer-letter-analyses/{id} - One analysis
DELETE /offer-letter-analyses/{id} - Delete

Both uploads count against the same analysis quota as every other document.
"""

from typing import List

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.concurrency import run_in_threadpool

from visadocs.core.auth import get_current_user
from visadocs.models import User
from visadocs.services.analysis_service import EnrollmentAnalysisService, OfferLetterAnalysisService
from visadocs.services.extraction_service import ExtractionPipeline, get_extraction_pipeline
from visadocs.utils.file_upload import extract_text_from_file
from visadocs.schemas.schemas import (
    EnrollmentAnalysisResponse, EnrollmentAnalysisSummaryResponse, EnrollmentDocumentType,
    MessageResponse, OfferLetterAnalysisResponse, OfferLetterAnalysisSummaryResponse
)

router = APIRouter(tags=["Document Analyses"])


# ============================================================
# ENROLMENT DOCUMENTS
# ============================================================

@router.post("/enrollment-analysis", response_model=EnrollmentAnalysisResponse, status_code=201)
async def analyze_enrollment_document(
    file: UploadFile = File(..., description="Enrolment document (PDF, JPEG or PNG, max 10MB)"),
    document_type: EnrollmentDocumentType = Form(EnrollmentDocumentType.coe),
    user: User = Depends(get_current_user),
    pipeline: ExtractionPipeline = Depends(get_extraction_pipeline),
):
    """
    Review an enrolment document.

    Returns the key facts (institution, course, dates, fees, health cover),
    findings, missing information, compliance issues, recommendations and
    next steps, with a completeness score and the model's confidence.
    """
    text, filename, size = await extract_text_from_file(file)

    service = EnrollmentAnalysisService(pipeline)
    row = await run_in_threadpool(service.analyze, user, text, filename, size, document_type.value)
    return EnrollmentAnalysisResponse.model_validate(row)


@router.get("/enrollment-analyses", response_model=List[EnrollmentAnalysisSummaryResponse])
async def list_enrollment_analyses(user: User = Depends(get_current_user)):
    rows, _ = EnrollmentAnalysisService().list_for_user(user.id, page=1, page_size=200)
    return [EnrollmentAnalysisSummaryResponse.model_validate(r) for r in rows]


@router.get("/enrollment-analyses/{analysis_id}", response_model=EnrollmentAnalysisResponse)
async def get_enrollment_analysis(analysis_id: int, user: User = Depends(get_current_user)):
    row = EnrollmentAnalysisService().get_for_user(analysis_id, user)
    return EnrollmentAnalysisResponse.model_validate(row)


@router.delete("/enrollment-analyses/{analysis_id}", response_model=MessageResponse)
async def delete_enrollment_analysis(analysis_id: int, user: User = Depends(get_current_user)):
    EnrollmentAnalysisService().delete(analysis_id, user)
    return MessageResponse(message="Enrollment analysis deleted")


# ============================================================
# OFFER LETTERS
# ============================================================

@router.post("/offer-letter-analysis", response_model=OfferLetterAnalysisResponse, status_code=201)
async def analyze_offer_letter(
    document: UploadFile = File(..., description="Offer letter (PDF, JPEG or PNG, max 10MB)"),
    user: User = Depends(get_current_user),
    pipeline: ExtractionPipeline = Depends(get_extraction_pipeline),
):
    """
    Assess an offer letter: strengths, concerns, opportunities,
    recommendations and an immediate / short term / long term action plan.
    """
    text, filename, size = await extract_text_from_file(document)

    service = OfferLetterAnalysisService(pipeline)
    row = await run_in_threadpool(service.extract_and_store, user, text, filename, size)
    return OfferLetterAnalysisResponse.model_validate(row)


@router.get("/offer-letter-analyses", response_model=List[OfferLetterAnalysisSummaryResponse])
async def list_offer_letter_analyses(user: User = Depends(get_current_user)):
    rows, _ = OfferLetterAnalysisService().list_for_user(user.id, page=1, page_size=200)
    return [OfferLetterAnalysisSummaryResponse.model_validate(r) for r in rows]


@router.get("/offer-letter-analyses/{analysis_id}", response_model=OfferLetterAnalysisResponse)
async def get_offer_letter_analysis(analysis_id: int, user: User = Depends(get_current_user)):
    row = OfferLetterAnalysisService().get_for_user(analysis_id, user)
    return OfferLetterAnalysisResponse.model_validate(row)


@router.delete("/offer-letter-analyses/{analysis_id}", response_model=MessageResponse)
async def delete_offer_letter_analysis(analysis_id: int, user: User = Depends(get_current_user)):
    OfferLetterAnalysisService().delete(analysis_id, user)
    return MessageResponse(message="Offer letter analysis deleted")
