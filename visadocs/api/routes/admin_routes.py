"""
Admin Routes (admin role required for everything here)

Users:
    GET /admin/users, GET /admin/users/{id}
    PATCH /admin/users/{id}/role | /status | /max-analyses
Analyses and feedback:
    GET /admin/analyses, GET /admin/analyses/{id}, GET /admin/analyses/{id}/feedback
    GET /admin/feedback
Offer letters / CoE:
    GET /admin/offer-letters, GET /admin/offer-letters/{id}, POST /admin/offer-letters (no quota)
    GET /admin/coe, GET /admin/coe/{id}
    GET /admin/enrollment-analyses, GET /admin/enrollment-analyses/{id}
    GET /admin/offer-letter-analyses, GET /admin/offer-letter-analyses/{id}
Appointments:
    GET /admin/appointments, PATCH /admin/appointments/{id}/status
Document templates:
    GET/POST /admin/document-templates, PUT/DELETE /admin/document-templates/{id},
    PATCH /admin/document-templates/{id}/toggle
Updates:
    GET/POST /admin/updates, PUT/DELETE /admin/updates/{id}
Scholarships:
    GET/POST /admin/scholarships, PUT/DELETE /admin/scholarships/{id}
Reporting:
    GET /admin/system-stats
    GET /admin/export/{data_type}?format=csv|json
"""

import csv
import io
import json
import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, HTTPException, Query, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response
from sqlalchemy import func, or_, select

from visadocs.core.auth import get_current_admin
from visadocs.db.postgres import get_db_session
from visadocs.models import (
    Analysis, Appointment, CoeInformation, DocumentTemplate, EnrollmentAnalysis, Feedback,
    OfferLetterAnalysis, OfferLetterInfo, Scholarship, Update, User,
)
from visadocs.services.analysis_service import (
    AnalysisService, CoeService, EnrollmentAnalysisService, OfferLetterAnalysisService, OfferLetterService, paginate,
)
from visadocs.services.email_service import send_appointment_status_email
from visadocs.services.extraction_service import ExtractionPipeline, get_extraction_pipeline
from visadocs.services.feedback_service import get_feedback_stats, list_all_feedback
from visadocs.utils.file_storage import delete_template_file, save_template_file
from visadocs.utils.file_upload import extract_text_from_file, read_upload, validate_template_upload
from visadocs.schemas.schemas import (
    AnalysisDetailResponse, AnalysisListResponse, AnalysisSummaryResponse, AppointmentResponse,
    AppointmentStatusUpdate, CoeDetailResponse, CoeSummaryResponse, DocumentTemplateResponse,
    DocumentTemplateUpdate, EnrollmentAnalysisResponse, EnrollmentAnalysisSummaryResponse, ExportFormat,
    FeedbackListResponse, FeedbackResponse, MaxAnalysesUpdate, MessageResponse, OfferLetterAnalysisResponse,
    OfferLetterAnalysisSummaryResponse, OfferLetterDetailResponse, OfferLetterSummaryResponse, RoleUpdate,
    ScholarshipCreate, ScholarshipResponse, ScholarshipUpdate, StatusUpdate, SystemStatsResponse,
    UpdateCreate, UpdateEdit, UpdateResponse, UserListResponse, UserResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


# ============================================================
# USERS
# ============================================================

def _get_user_or_404(db, user_id: int) -> User:
    user = db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("/users", response_model=UserListResponse)
async def list_users(
    search: Optional[str] = None,
    role: Optional[str] = None,
    status: Optional[str] = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    admin: User = Depends(get_current_admin),
):
    query = select(User).order_by(User.created_at.desc(), User.id.desc())
    if search:
        pattern = f"%{search.lower()}%"
        query = query.where(or_(
            func.lower(User.username).like(pattern),
            func.lower(User.email).like(pattern),
            func.lower(User.first_name + " " + User.last_name).like(pattern),
        ))
    if role:
        query = query.where(User.role == role)
    if status:
        query = query.where(User.status == status)

    with get_db_session() as db:
        rows, total = paginate(db, query, page, page_size)

    return UserListResponse(
        users=[UserResponse.model_validate(u) for u in rows], total=total, page=page, page_size=page_size
    )


@router.get("/users/{user_id}", response_model=UserResponse)
async def get_user(user_id: int, admin: User = Depends(get_current_admin)):
    with get_db_session() as db:
        user = _get_user_or_404(db, user_id)
    return UserResponse.model_validate(user)


@router.patch("/users/{user_id}/role", response_model=UserResponse)
async def update_user_role(user_id: int, data: RoleUpdate, admin: User = Depends(get_current_admin)):
    if user_id == admin.id and data.role.value != "admin":
        raise HTTPException(status_code=400, detail="You cannot remove your own admin role")
    with get_db_session() as db:
        user = _get_user_or_404(db, user_id)
        user.role = data.role.value
    logger.info("Admin %s set role of user %s to %s", admin.id, user_id, data.role.value)
    return UserResponse.model_validate(user)


@router.patch("/users/{user_id}/status", response_model=UserResponse)
async def update_user_status(user_id: int, data: StatusUpdate, admin: User = Depends(get_current_admin)):
    if user_id == admin.id and data.status.value != "active":
        raise HTTPException(status_code=400, detail="You cannot deactivate your own account")
    with get_db_session() as db:
        user = _get_user_or_404(db, user_id)
        user.status = data.status.value
    logger.info("Admin %s set status of user %s to %s", admin.id, user_id, data.status.value)
    return UserResponse.model_validate(user)


@router.patch("/users/{user_id}/max-analyses", response_model=UserResponse)
async def update_max_analyses(user_id: int, data: MaxAnalysesUpdate, admin: User = Depends(get_current_admin)):
    """Set the quota. Lowering it below the current count blocks further analyses but keeps history."""
    with get_db_session() as db:
        user = _get_user_or_404(db, user_id)
        user.max_analyses = data.max_analyses
    logger.info("Admin %s set max_analyses of user %s to %d", admin.id, user_id, data.max_analyses)
    return UserResponse.model_validate(user)


# ============================================================
# ANALYSES & FEEDBACK
# ============================================================

@router.get("/analyses", response_model=AnalysisListResponse)
async def list_analyses(
    search: Optional[str] = None,
    outcome: Optional[str] = Query(None, pattern="^(approval|rejection)$"),
    user_id: Optional[int] = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    admin: User = Depends(get_current_admin),
):
    rows, total = AnalysisService().search(page, page_size, search, outcome, user_id)
    return AnalysisListResponse(
        analyses=[AnalysisSummaryResponse.model_validate(r) for r in rows],
        total=total, page=page, page_size=page_size
    )


@router.get("/analyses/{analysis_id}", response_model=AnalysisDetailResponse)
async def get_analysis(analysis_id: int, admin: User = Depends(get_current_admin)):
    return AnalysisDetailResponse.model_validate(AnalysisService().get_for_user(analysis_id, admin))


@router.get("/analyses/{analysis_id}/feedback", response_model=List[FeedbackResponse])
async def get_analysis_feedback(analysis_id: int, admin: User = Depends(get_current_admin)):
    with get_db_session() as db:
        rows = db.scalars(
            select(Feedback)
            .where(Feedback.analysis_id == analysis_id, Feedback.analysis_type == "visa")
            .order_by(Feedback.created_at.desc())
        ).all()
    return [FeedbackResponse.model_validate(f) for f in rows]


@router.get("/feedback", response_model=FeedbackListResponse)
async def list_feedback(
    rating: Optional[int] = Query(None, ge=1, le=5),
    analysis_type: Optional[str] = Query(None, pattern="^(visa|offer_letter|coe|enrollment|offer_analysis)$"),
    limit: int = Query(100, ge=1, le=1000),
    admin: User = Depends(get_current_admin),
):
    rows = list_all_feedback(rating=rating, analysis_type=analysis_type, limit=limit)
    return FeedbackListResponse(
        feedback=[FeedbackResponse.model_validate(f) for f in rows],
        stats=get_feedback_stats(),
    )


# ============================================================
# OFFER LETTERS & COE
# ============================================================

@router.get("/offer-letters", response_model=List[OfferLetterSummaryResponse])
async def list_offer_letters(
    user_id: Optional[int] = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
    admin: User = Depends(get_current_admin),
):
    rows, _ = OfferLetterService().list_all(page, page_size, user_id)
    return [OfferLetterSummaryResponse.model_validate(r) for r in rows]


@router.get("/offer-letters/{offer_letter_id}", response_model=OfferLetterDetailResponse)
async def get_offer_letter(offer_letter_id: int, admin: User = Depends(get_current_admin)):
    row = OfferLetterService().get_for_user(offer_letter_id, admin)
    return OfferLetterDetailResponse(**OfferLetterService.detail(row))


@router.post("/offer-letters", response_model=OfferLetterDetailResponse, status_code=201)
async def upload_offer_letter(
    document: UploadFile = File(...),
    admin: User = Depends(get_current_admin),
    pipeline: ExtractionPipeline = Depends(get_extraction_pipeline),
):
    """Extract an offer letter as admin. Admin accounts have no quota."""
    text, filename, size = await extract_text_from_file(document)
    service = OfferLetterService(pipeline)
    row = await run_in_threadpool(service.extract_and_store, admin, text, filename, size)
    return OfferLetterDetailResponse(**OfferLetterService.detail(row))


@router.get("/coe", response_model=List[CoeSummaryResponse])
async def list_coe_documents(
    user_id: Optional[int] = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
    admin: User = Depends(get_current_admin),
):
    rows, _ = CoeService().list_all(page, page_size, user_id)
    return [CoeSummaryResponse.model_validate(r) for r in rows]


@router.get("/coe/{coe_id}", response_model=CoeDetailResponse)
async def get_coe_document(coe_id: int, admin: User = Depends(get_current_admin)):
    return CoeDetailResponse(**CoeService.detail(CoeService().get_for_user(coe_id, admin)))


@router.get("/enrollment-analyses", response_model=List[EnrollmentAnalysisSummaryResponse])
async def list_enrollment_analyses(
    user_id: Optional[int] = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
    admin: User = Depends(get_current_admin),
):
    rows, _ = EnrollmentAnalysisService().list_all(page, page_size, user_id)
    return [EnrollmentAnalysisSummaryResponse.model_validate(r) for r in rows]


@router.get("/enrollment-analyses/{analysis_id}", response_model=EnrollmentAnalysisResponse)
async def get_enrollment_analysis(analysis_id: int, admin: User = Depends(get_current_admin)):
    return EnrollmentAnalysisResponse.model_validate(EnrollmentAnalysisService().get_for_user(analysis_id, admin))


@router.get("/offer-letter-analyses", response_model=List[OfferLetterAnalysisSummaryResponse])
async def list_offer_letter_analyses(
    user_id: Optional[int] = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
    admin: User = Depends(get_current_admin),
):
    rows, _ = OfferLetterAnalysisService().list_all(page, page_size, user_id)
    return [OfferLetterAnalysisSummaryResponse.model_validate(r) for r in rows]


@router.get("/offer-letter-analyses/{analysis_id}", response_model=OfferLetterAnalysisResponse)
async def get_offer_letter_analysis(analysis_id: int, admin: User = Depends(get_current_admin)):
    return OfferLetterAnalysisResponse.model_validate(OfferLetterAnalysisService().get_for_user(analysis_id, admin))


# ============================================================
# APPOINTMENTS
# ============================================================

@router.get("/appointments", response_model=List[AppointmentResponse])
async def list_appointments(
    status: Optional[str] = Query(None, pattern="^(pending|confirmed|completed|cancelled)$"),
    admin: User = Depends(get_current_admin),
):
    query = select(Appointment).order_by(Appointment.created_at.desc(), Appointment.id.desc())
    if status:
        query = query.where(Appointment.status == status)
    with get_db_session() as db:
        rows = db.scalars(query).all()
    return [AppointmentResponse.model_validate(a) for a in rows]


@router.patch("/appointments/{appointment_id}/status", response_model=AppointmentResponse)
async def update_appointment_status(
    appointment_id: int,
    data: AppointmentStatusUpdate,
    background_tasks: BackgroundTasks,
    admin: User = Depends(get_current_admin),
):
    with get_db_session() as db:
        appointment = db.get(Appointment, appointment_id)
        if not appointment:
            raise HTTPException(status_code=404, detail="Appointment not found")
        appointment.status = data.status.value

    background_tasks.add_task(
        send_appointment_status_email, appointment.email, appointment.name, appointment.subject, appointment.status
    )
    return AppointmentResponse.model_validate(appointment)


# ============================================================
# DOCUMENT TEMPLATES
# ============================================================

def _split_list(value: Optional[str]) -> list:
    """Form fields carry lists as JSON arrays or comma-separated text."""
    if not value:
        return []
    value = value.strip()
    if value.startswith("["):
        try:
            parsed = json.loads(value)
        except json.JSONDecodeError:
            raise HTTPException(status_code=400, detail="Invalid list value")
        return [str(v).strip() for v in parsed if str(v).strip()]
    return [part.strip() for part in value.split(",") if part.strip()]


@router.get("/document-templates", response_model=List[DocumentTemplateResponse])
async def list_all_templates(admin: User = Depends(get_current_admin)):
    """All templates, including inactive ones."""
    with get_db_session() as db:
        rows = db.scalars(
            select(DocumentTemplate).order_by(DocumentTemplate.created_at.desc(), DocumentTemplate.id.desc())
        ).all()
    return [DocumentTemplateResponse.model_validate(t) for t in rows]


@router.post("/document-templates", response_model=DocumentTemplateResponse, status_code=201)
async def create_template(
    title: str = Form(..., min_length=2),
    description: Optional[str] = Form(None),
    category: str = Form("general"),
    countries: Optional[str] = Form(None),
    visa_types: Optional[str] = Form(None),
    file: UploadFile = File(..., description="PDF, DOC, DOCX, TXT or RTF"),
    admin: User = Depends(get_current_admin),
):
    content = await read_upload(file)
    validate_template_upload(file.filename, len(content))
    country_list, visa_type_list = _split_list(countries), _split_list(visa_types)

    file_path = save_template_file(content, file.filename)
    try:
        with get_db_session() as db:
            template = DocumentTemplate(
                title=title,
                description=description,
                category=category,
                countries=country_list,
                visa_types=visa_type_list,
                file_name=file.filename,
                file_path=file_path,
                file_size=len(content),
                mime_type=file.content_type,
                is_active=True,
                created_by=admin.id,
            )
            db.add(template)
            db.flush()
    except Exception:
        delete_template_file(file_path)
        raise

    return DocumentTemplateResponse.model_validate(template)


@router.put("/document-templates/{template_id}", response_model=DocumentTemplateResponse)
async def update_template(template_id: int, data: DocumentTemplateUpdate, admin: User = Depends(get_current_admin)):
    changes = data.model_dump(exclude_none=True)
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")
    with get_db_session() as db:
        template = db.get(DocumentTemplate, template_id)
        if not template:
            raise HTTPException(status_code=404, detail="Template not found")
        for field, value in changes.items():
            setattr(template, field, value)
        db.flush()
    return DocumentTemplateResponse.model_validate(template)


@router.patch("/document-templates/{template_id}/toggle", response_model=DocumentTemplateResponse)
async def toggle_template(template_id: int, admin: User = Depends(get_current_admin)):
    with get_db_session() as db:
        template = db.get(DocumentTemplate, template_id)
        if not template:
            raise HTTPException(status_code=404, detail="Template not found")
        template.is_active = not template.is_active
        db.flush()
    return DocumentTemplateResponse.model_validate(template)


@router.delete("/document-templates/{template_id}", response_model=MessageResponse)
async def delete_template(template_id: int, admin: User = Depends(get_current_admin)):
    with get_db_session() as db:
        template = db.get(DocumentTemplate, template_id)
        if not template:
            raise HTTPException(status_code=404, detail="Template not found")
        file_path = template.file_path
        db.delete(template)

    delete_template_file(file_path)
    return MessageResponse(message="Template deleted")


# ============================================================
# UPDATES
# ============================================================

@router.get("/updates", response_model=List[UpdateResponse])
async def list_all_updates(admin: User = Depends(get_current_admin)):
    with get_db_session() as db:
        rows = db.scalars(select(Update).order_by(Update.created_at.desc(), Update.id.desc())).all()
    return [UpdateResponse.model_validate(u) for u in rows]


@router.post("/updates", response_model=UpdateResponse, status_code=201)
async def create_update(data: UpdateCreate, admin: User = Depends(get_current_admin)):
    with get_db_session() as db:
        item = Update(created_by=admin.id, is_active=True, view_count=0, **data.model_dump(mode="python"))
        item.priority = data.priority.value
        db.add(item)
        db.flush()
    return UpdateResponse.model_validate(item)


@router.put("/updates/{update_id}", response_model=UpdateResponse)
async def edit_update(update_id: int, data: UpdateEdit, admin: User = Depends(get_current_admin)):
    changes = data.model_dump(exclude_none=True)
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")
    if "priority" in changes:
        changes["priority"] = data.priority.value
    with get_db_session() as db:
        item = db.get(Update, update_id)
        if not item:
            raise HTTPException(status_code=404, detail="Update not found")
        for field, value in changes.items():
            setattr(item, field, value)
    return UpdateResponse.model_validate(item)


@router.delete("/updates/{update_id}", response_model=MessageResponse)
async def delete_update(update_id: int, admin: User = Depends(get_current_admin)):
    with get_db_session() as db:
        item = db.get(Update, update_id)
        if not item:
            raise HTTPException(status_code=404, detail="Update not found")
        db.delete(item)
    return MessageResponse(message="Update deleted")


# ============================================================
# SCHOLARSHIPS
# ============================================================

@router.get("/scholarships", response_model=List[ScholarshipResponse])
async def list_all_scholarships(admin: User = Depends(get_current_admin)):
    with get_db_session() as db:
        rows = db.scalars(select(Scholarship).order_by(Scholarship.created_at.desc(), Scholarship.id.desc())).all()
    return [ScholarshipResponse.model_validate(s) for s in rows]


@router.post("/scholarships", response_model=ScholarshipResponse, status_code=201)
async def create_scholarship(data: ScholarshipCreate, admin: User = Depends(get_current_admin)):
    with get_db_session() as db:
        scholarship = Scholarship(**data.model_dump())
        db.add(scholarship)
        db.flush()
    return ScholarshipResponse.model_validate(scholarship)


@router.put("/scholarships/{scholarship_id}", response_model=ScholarshipResponse)
async def update_scholarship(scholarship_id: int, data: ScholarshipUpdate, admin: User = Depends(get_current_admin)):
    changes = data.model_dump(exclude_none=True)
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")
    with get_db_session() as db:
        scholarship = db.get(Scholarship, scholarship_id)
        if not scholarship:
            raise HTTPException(status_code=404, detail="Scholarship not found")
        for field, value in changes.items():
            setattr(scholarship, field, value)
        db.flush()
    return ScholarshipResponse.model_validate(scholarship)


@router.delete("/scholarships/{scholarship_id}", response_model=MessageResponse)
async def delete_scholarship(scholarship_id: int, admin: User = Depends(get_current_admin)):
    with get_db_session() as db:
        scholarship = db.get(Scholarship, scholarship_id)
        if not scholarship:
            raise HTTPException(status_code=404, detail="Scholarship not found")
        db.delete(scholarship)
    return MessageResponse(message="Scholarship deleted")


# ============================================================
# REPORTING
# ============================================================

@router.get("/system-stats", response_model=SystemStatsResponse)
async def system_stats(admin: User = Depends(get_current_admin)):
    with get_db_session() as db:
        def count(model, *conditions) -> int:
            query = select(func.count()).select_from(model)
            for condition in conditions:
                query = query.where(condition)
            return db.scalar(query) or 0

        tokens = sum(
            db.scalar(select(func.coalesce(func.sum(model.tokens_used), 0))) or 0
            for model in (Analysis, OfferLetterInfo, CoeInformation, EnrollmentAnalysis, OfferLetterAnalysis)
        )
        average = db.scalar(select(func.avg(Feedback.rating)))

        return SystemStatsResponse(
            total_users=count(User),
            active_users=count(User, User.status == "active"),
            admin_users=count(User, User.role == "admin"),
            total_analyses=count(Analysis),
            public_analyses=count(Analysis, Analysis.is_public.is_(True)),
            total_offer_letters=count(OfferLetterInfo),
            total_coe_documents=count(CoeInformation),
            total_enrollment_analyses=count(EnrollmentAnalysis),
            total_offer_letter_analyses=count(OfferLetterAnalysis),
            total_feedback=count(Feedback),
            average_rating=round(float(average), 2) if average is not None else None,
            pending_appointments=count(Appointment, Appointment.status == "pending"),
            active_templates=count(DocumentTemplate, DocumentTemplate.is_active.is_(True)),
            active_updates=count(Update, Update.is_active.is_(True)),
            total_scholarships=count(Scholarship),
            total_tokens_used=int(tokens),
        )


EXPORTS = {
    "users": (User, {"password_hash"}),
    "analyses": (Analysis, {"original_text"}),
    "feedback": (Feedback, set()),
    "appointments": (Appointment, set()),
}


def _csv_value(value):
    if isinstance(value, (list, dict)):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, datetime):
        return value.isoformat()
    return value


@router.get("/export/{data_type}")
async def export_data(
    data_type: str,
    format: ExportFormat = ExportFormat.csv,
    admin: User = Depends(get_current_admin),
):
    """Download users, analyses, feedback or appointments as CSV or JSON."""
    if data_type not in EXPORTS:
        raise HTTPException(status_code=400, detail=f"Unknown export type '{data_type}'. Use: {', '.join(EXPORTS)}")

    model, excluded = EXPORTS[data_type]
    columns = [c.key for c in model.__table__.columns if c.key not in excluded]

    with get_db_session() as db:
        rows = db.scalars(select(model).order_by(model.id)).all()
    records = [{column: getattr(row, column) for column in columns} for row in rows]

    stamp = datetime.now().strftime("%Y%m%d")
    filename = f"{data_type}_{stamp}.{format.value}"
    headers = {"Content-Disposition": f'attachment; filename="{filename}"'}
    logger.info("Admin %s exported %d %s as %s", admin.id, len(records), data_type, format.value)

    if format is ExportFormat.json:
        return JSONResponse(content=jsonable_encoder(records), headers=headers)

    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=columns)
    writer.writeheader()
    for record in records:
        writer.writerow({k: _csv_value(v) for k, v in record.items()})
    return Response(content=buffer.getvalue(), media_type="text/csv", headers=headers)
