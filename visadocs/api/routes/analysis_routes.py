"""
Visa Analysis Routes

POST /analyze - Upload a visa decision letter (PDF/JPEG/PNG) for analysis
POST /analyses - Analyse pasted letter text
GET /analyses - My analyses
GET /analyses/public - Analyses their owners chose to share
GET /analyses/{id} - One analysis
PATCH /analyses/{id}/visibility - Share / unshare
DELETE /analyses/{id} - Delete
GET /analyses/{id}/feedback - My feedback on an analysis
POST /analyses/{id}/feedback - Leave feedback (once)
GET /documents/formats - Supported upload formats
"""

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from fastapi.concurrency import run_in_threadpool

from visadocs.core.auth import get_current_user
from visadocs.models import User
from visadocs.services.analysis_service import AnalysisService
from visadocs.services.extraction_service import ExtractionPipeline, get_extraction_pipeline
from visadocs.services.feedback_service import get_feedback, submit_feedback
from visadocs.utils.file_upload import extract_text_from_file, get_supported_formats
from visadocs.schemas.schemas import (
    AnalysisDetailResponse, AnalysisListResponse, AnalysisResponse, AnalysisSummaryResponse,
    FeedbackCreate, FeedbackResponse, MessageResponse, TextAnalysisRequest, VisibilityUpdate
)

router = APIRouter(tags=["Visa Analyses"])


@router.post("/analyze", response_model=AnalysisResponse, status_code=201)
async def analyze_document(
    file: UploadFile = File(..., description="Visa decision letter (PDF, JPEG or PNG, max 10MB)"),
    user: User = Depends(get_current_user),
    pipeline: ExtractionPipeline = Depends(get_extraction_pipeline),
):
    """
    Upload and analyse a visa decision letter.

    Process:
    1. Validate type and size, extract text (PDF text layer or OCR)
    2. Check the user's remaining quota
    3. AI analysis: approval or refusal, reasons, recommendations, next steps
    4. Store the analysis and count it against the quota
    """
    text, filename, _ = await extract_text_from_file(file)

    service = AnalysisService(pipeline)
    analysis = await run_in_threadpool(service.analyze_visa_document, user, text, filename)
    return AnalysisResponse.model_validate(analysis)


@router.post("/analyses", response_model=AnalysisResponse, status_code=201)
async def analyze_text(
    request: TextAnalysisRequest,
    user: User = Depends(get_current_user),
    pipeline: ExtractionPipeline = Depends(get_extraction_pipeline),
):
    """Analyse letter text pasted by the user (same quota as uploads)."""
    if not request.text.strip():
        raise HTTPException(status_code=400, detail="Text is empty")

    service = AnalysisService(pipeline)
    analysis = await run_in_threadpool(service.analyze_visa_document, user, request.text, request.filename)
    return AnalysisResponse.model_validate(analysis)


@router.get("/analyses", response_model=AnalysisListResponse)
async def list_my_analyses(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    user: User = Depends(get_current_user),
):
    """Current user's analyses, newest first."""
    rows, total = AnalysisService().list_for_user(user.id, page, page_size)
    return AnalysisListResponse(
        analyses=[AnalysisSummaryResponse.model_validate(r) for r in rows],
        total=total, page=page, page_size=page_size
    )


@router.get("/analyses/public", response_model=AnalysisListResponse)
async def list_public_analyses(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    user: User = Depends(get_current_user),
):
    """Analyses shared publicly by their owners."""
    rows, total = AnalysisService().list_public(page, page_size)
    return AnalysisListResponse(
        analyses=[AnalysisSummaryResponse.model_validate(r) for r in rows],
        total=total, page=page, page_size=page_size
    )


@router.get("/analyses/{analysis_id}", response_model=AnalysisDetailResponse)
async def get_analysis(analysis_id: int, user: User = Depends(get_current_user)):
    """Full analysis including the extracted letter text."""
    analysis = AnalysisService().get_for_user(analysis_id, user)
    return AnalysisDetailResponse.model_validate(analysis)


@router.patch("/analyses/{analysis_id}/visibility", response_model=AnalysisResponse)
async def update_visibility(analysis_id: int, data: VisibilityUpdate, user: User = Depends(get_current_user)):
    """Make an analysis public or private. Nothing else about an analysis can change."""
    analysis = AnalysisService().set_visibility(analysis_id, user, data.is_public)
    return AnalysisResponse.model_validate(analysis)


@router.delete("/analyses/{analysis_id}", response_model=MessageResponse)
async def delete_analysis(analysis_id: int, user: User = Depends(get_current_user)):
    AnalysisService().delete(analysis_id, user)
    return MessageResponse(message="Analysis deleted")


@router.get("/analyses/{analysis_id}/feedback", response_model=FeedbackResponse)
async def get_analysis_feedback(
    analysis_id: int,
    analysis_type: str = Query("visa", pattern="^(visa|offer_letter|coe|enrollment|offer_analysis)$"),
    user: User = Depends(get_current_user),
):
    feedback = get_feedback(analysis_id, user, analysis_type)
    if feedback is None:
        raise HTTPException(status_code=404, detail="No feedback for this analysis")
    return FeedbackResponse.model_validate(feedback)


@router.post("/analyses/{analysis_id}/feedback", response_model=FeedbackResponse, status_code=201)
async def post_analysis_feedback(
    analysis_id: int,
    data: FeedbackCreate,
    user: User = Depends(get_current_user),
):
    """
    Rate an analysis (1-5) with optional accuracy/helpfulness flags.

    Each analysis takes one feedback per user; a second attempt returns 409.
    ``analysis_type`` selects visa analyses, offer letters, CoE documents,
    enrollment analyses or offer letter analyses.
    """
    feedback = submit_feedback(analysis_id, user, data)
    return FeedbackResponse.model_validate(feedback)


@router.get("/documents/formats")
async def document_formats():
    """Get supported upload formats."""
    return get_supported_formats()
