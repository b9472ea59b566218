"""
Scholarship Routes

GET /scholarships/search - Search and filter the catalog (paginated)
GET /scholarships/{id} - Scholarship details
"""

from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy import func, select
from typing import Optional

from visadocs.db.postgres import get_db_session
from visadocs.core.auth import get_current_user
from visadocs.models import Scholarship, User
from visadocs.services.analysis_service import paginate
from visadocs.schemas.schemas import ScholarshipListResponse, ScholarshipResponse

router = APIRouter(prefix="/scholarships", tags=["Scholarships"])


@router.get("/search", response_model=ScholarshipListResponse)
async def search_scholarships(
    q: Optional[str] = Query(None, description="Search name, provider, institution or description"),
    funding_type: Optional[str] = None,
    program_level: Optional[str] = None,
    country: Optional[str] = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    user: User = Depends(get_current_user),
):
    query = select(Scholarship).order_by(Scholarship.scholarship_name, Scholarship.id)
    if q:
        pattern = f"%{q.lower()}%"
        query = query.where(
            func.lower(Scholarship.scholarship_name).like(pattern)
            | func.lower(Scholarship.provider_name).like(pattern)
            | func.lower(func.coalesce(Scholarship.institution_name, "")).like(pattern)
            | func.lower(func.coalesce(Scholarship.description, "")).like(pattern)
        )
    if funding_type:
        query = query.where(Scholarship.funding_type == funding_type)
    if program_level:
        query = query.where(Scholarship.program_level == program_level)

    with get_db_session() as db:
        if country:
            # host_countries is a JSON list; filter in Python, then paginate the result
            rows = [s for s in db.scalars(query).all() if country in (s.host_countries or [])]
            total = len(rows)
            rows = rows[(page - 1) * page_size: page * page_size]
        else:
            rows, total = paginate(db, query, page, page_size)

    return ScholarshipListResponse(
        scholarships=[ScholarshipResponse.model_validate(s) for s in rows],
        total=total, page=page, page_size=page_size
    )


@router.get("/{scholarship_id}", response_model=ScholarshipResponse)
async def get_scholarship(scholarship_id: int, user: User = Depends(get_current_user)):
    with get_db_session() as db:
        scholarship = db.get(Scholarship, scholarship_id)
    if not scholarship:
        raise HTTPException(status_code=404, detail="Scholarship not found")
    return ScholarshipResponse.model_validate(scholarship)
