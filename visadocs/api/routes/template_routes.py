"""
Document Template Routes (read side; admins manage templates under /admin)

GET /document-templates - Active templates, filter by category/country/visa type/search
GET /document-templates/{id} - Template details
GET /document-templates/{id}/download - Download the file
"""

import re
from urllib.parse import quote

from fastapi import APIRouter, HTTPException, Depends, Query
from fastapi.responses import Response
from sqlalchemy import func, select, update
from typing import List, Optional

from visadocs.db.postgres import get_db_session
from visadocs.core.auth import get_current_user
from visadocs.models import DocumentTemplate, User
from visadocs.utils.file_storage import read_template_file
from visadocs.schemas.schemas import DocumentTemplateResponse

router = APIRouter(prefix="/document-templates", tags=["Document Templates"])

_UNSAFE_HEADER_CHARS = re.compile(r'[^\x20-\x7e]|["\\]')


def content_disposition(file_name: str) -> str:
    """Attachment header with an ASCII fallback and the RFC 5987 UTF-8 name."""
    fallback = _UNSAFE_HEADER_CHARS.sub("_", file_name) or "download"
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(file_name, safe='')}"


def _get_visible_template(db, template_id: int, user: User) -> DocumentTemplate:
    template = db.get(DocumentTemplate, template_id)
    if not template or (not template.is_active and not user.is_admin):
        raise HTTPException(status_code=404, detail="Template not found")
    return template


@router.get("", response_model=List[DocumentTemplateResponse])
async def list_templates(
    category: Optional[str] = None,
    country: Optional[str] = None,
    visa_type: Optional[str] = None,
    search: Optional[str] = None,
    user: User = Depends(get_current_user),
):
    query = select(DocumentTemplate).where(DocumentTemplate.is_active.is_(True))
    if category:
        query = query.where(DocumentTemplate.category == category)
    if search:
        pattern = f"%{search.lower()}%"
        query = query.where(
            func.lower(DocumentTemplate.title).like(pattern)
            | func.lower(func.coalesce(DocumentTemplate.description, "")).like(pattern)
        )

    with get_db_session() as db:
        rows = db.scalars(query.order_by(DocumentTemplate.created_at.desc(), DocumentTemplate.id.desc())).all()

    # JSON list filters are applied here so they work the same on every backend
    if country:
        rows = [t for t in rows if not t.countries or country in t.countries]
    if visa_type:
        rows = [t for t in rows if not t.visa_types or visa_type in t.visa_types]

    return [DocumentTemplateResponse.model_validate(t) for t in rows]


@router.get("/{template_id}", response_model=DocumentTemplateResponse)
async def get_template(template_id: int, user: User = Depends(get_current_user)):
    with get_db_session() as db:
        template = _get_visible_template(db, template_id, user)
    return DocumentTemplateResponse.model_validate(template)


@router.get("/{template_id}/download")
async def download_template(template_id: int, user: User = Depends(get_current_user)):
    """Stream the stored file and bump the download counter."""
    with get_db_session() as db:
        template = _get_visible_template(db, template_id, user)
        content = read_template_file(template.file_path)
        db.execute(
            update(DocumentTemplate)
            .where(DocumentTemplate.id == template_id)
            .values(download_count=DocumentTemplate.download_count + 1)
        )

    return Response(
        content=content,
        media_type=template.mime_type or "application/octet-stream",
        headers={"Content-Disposition": content_disposition(template.file_name)},
    )
