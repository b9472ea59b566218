"""
Confirmation of Enrolment Routes

POST /coe-info/upload - Upload a CoE, extract its fields (also POST /coe-info)
GET /coe-info - My CoE documents
GET /coe-info/{id} - One CoE with all fields
DELETE /coe-info/{id} - Delete
"""

from typing import List

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.concurrency import run_in_threadpool

from visadocs.core.auth import get_current_user
from visadocs.models import User
from visadocs.services.analysis_service import CoeService
from visadocs.services.extraction_service import ExtractionPipeline, get_extraction_pipeline
from visadocs.utils.file_upload import extract_text_from_file
from visadocs.schemas.schemas import CoeDetailResponse, CoeSummaryResponse, MessageResponse

router = APIRouter(prefix="/coe-info", tags=["Confirmation of Enrolment"])


@router.post("/upload", response_model=CoeDetailResponse, status_code=201)
@router.post("", response_model=CoeDetailResponse, status_code=201, include_in_schema=False)
async def upload_coe(
    file: UploadFile = File(..., description="CoE document (PDF, JPEG or PNG, max 10MB)"),
    user: User = Depends(get_current_user),
    pipeline: ExtractionPipeline = Depends(get_extraction_pipeline),
):
    """Extract reference, provider, course, fee, student, OSHC and English test details."""
    text, filename, size = await extract_text_from_file(file)

    service = CoeService(pipeline)
    row = await run_in_threadpool(service.extract_and_store, user, text, filename, size)
    return CoeDetailResponse(**CoeService.detail(row))


@router.get("", response_model=List[CoeSummaryResponse])
async def list_coe_documents(user: User = Depends(get_current_user)):
    rows, _ = CoeService().list_for_user(user.id, page=1, page_size=200)
    return [CoeSummaryResponse.model_validate(r) for r in rows]


@router.get("/{coe_id}", response_model=CoeDetailResponse)
async def get_coe_document(coe_id: int, user: User = Depends(get_current_user)):
    row = CoeService().get_for_user(coe_id, user)
    return CoeDetailResponse(**CoeService.detail(row))


@router.delete("/{coe_id}", response_model=MessageResponse)
async def delete_coe_document(coe_id: int, user: User = Depends(get_current_user)):
    CoeService().delete(coe_id, user)
    return MessageResponse(message="CoE document deleted")
