"""
Offer Letter Routes

POST /offer-letter-information/extract - Upload an offer letter, extract every field
GET /offer-letter-information - My extracted offer letters
GET /offer-letter-information/{id} - Flat fields plus sectioned view
DELETE /offer-letter-information/{id} - Delete
"""

from typing import List

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.concurrency import run_in_threadpool

from visadocs.core.auth import get_current_user
from visadocs.models import User
from visadocs.services.analysis_service import OfferLetterService
from visadocs.services.extraction_service import ExtractionPipeline, get_extraction_pipeline
from visadocs.utils.file_upload import extract_text_from_file
from visadocs.schemas.schemas import (
    MessageResponse, OfferLetterDetailResponse, OfferLetterSummaryResponse
)

router = APIRouter(prefix="/offer-letter-information", tags=["Offer Letters"])


@router.post("/extract", response_model=OfferLetterDetailResponse, status_code=201)
async def extract_offer_letter(
    document: UploadFile = File(..., description="Offer letter (PDF, JPEG or PNG, max 10MB)"),
    user: User = Depends(get_current_user),
    pipeline: ExtractionPipeline = Depends(get_extraction_pipeline),
):
    """
    Extract institution, student, course, fee, payment, condition and policy
    details from an offer letter. Fields missing from the letter come back as
    "Not specified in document". Counts against the analysis quota.
    """
    text, filename, size = await extract_text_from_file(document)

    service = OfferLetterService(pipeline)
    row = await run_in_threadpool(service.extract_and_store, user, text, filename, size)
    return OfferLetterDetailResponse(**OfferLetterService.detail(row))


@router.get("", response_model=List[OfferLetterSummaryResponse])
async def list_offer_letters(user: User = Depends(get_current_user)):
    rows, _ = OfferLetterService().list_for_user(user.id, page=1, page_size=200)
    return [OfferLetterSummaryResponse.model_validate(r) for r in rows]


@router.get("/{offer_letter_id}", response_model=OfferLetterDetailResponse)
async def get_offer_letter(offer_letter_id: int, user: User = Depends(get_current_user)):
    row = OfferLetterService().get_for_user(offer_letter_id, user)
    return OfferLetterDetailResponse(**OfferLetterService.detail(row))


@router.delete("/{offer_letter_id}", response_model=MessageResponse)
async def delete_offer_letter(offer_letter_id: int, user: User = Depends(get_current_user)):
    OfferLetterService().delete(offer_letter_id, user)
    return MessageResponse(message="Offer letter deleted")
