"""
Analysis Service - run the extraction pipeline and persist the result.

One service per document kind:
- AnalysisService: visa decision letters -> analyses
- OfferLetterService: offer letters -> offer_letter_info
- CoeService: Confirmation of Enrolment -> coe_information
- EnrollmentAnalysisService: enrolment document review -> enrollment_analyses
- OfferLetterAnalysisService: offer letter assessment -> offer_letter_analyses

WORKFLOW (same for all of them):
1. check_quota() - reject early if the user has nothing left
2. pipeline.run() - prompt, model call, parse, validate (no DB work)
3. ONE transaction: consume_quota() + INSERT the row

If step 2 fails nothing is written and no quota is used. If the insert in
step 3 fails the quota increment rolls back with it.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from visadocs.core.errors import NotFoundError, PermissionDeniedError
from visadocs.db.postgres import get_db_session
from visadocs.models import (
    Analysis, CoeInformation, EnrollmentAnalysis, Feedback, OfferLetterAnalysis, OfferLetterInfo, User
)
from visadocs.services.document_fields import COE_COLUMNS, OFFER_LETTER_COLUMNS
from visadocs.services.extraction_service import (
    ExtractionPipeline,
    ExtractionResult,
    get_extraction_pipeline,
    nest_offer_letter,
)
from visadocs.services.prompts import DocumentType
from visadocs.services.quota_service import check_quota, consume_quota_or_raise

logger = logging.getLogger(__name__)


def paginate(db: Session, query, page: int, page_size: int) -> Tuple[list, int]:
    """Run a select() with LIMIT/OFFSET; returns (rows, total)."""
    total = db.scalar(select(func.count()).select_from(query.order_by(None).subquery()))
    rows = db.scalars(query.limit(page_size).offset((page - 1) * page_size)).all()
    return list(rows), total or 0


class _DocumentService:
    """Shared store/list/get/delete logic for one document table."""

    model = None
    document_type: DocumentType = None
    feedback_type: str = None

    def __init__(self, pipeline: Optional[ExtractionPipeline] = None):
        self.pipeline = pipeline or get_extraction_pipeline()

    def _build_row(self, user: User, text: str, file_name: str, file_size: int, result: ExtractionResult):
        raise NotImplementedError

    def extract_and_store(
        self, user: User, text: str, file_name: str, file_size: int = 0, document_label: Optional[str] = None
    ):
        with get_db_session() as db:
            check_quota(db, user.id)

        result = self.pipeline.run(text, self.document_type, file_name, document_label=document_label)

        with get_db_session() as db:
            consume_quota_or_raise(db, user)
            row = self._build_row(user, text, file_name, file_size, result)
            db.add(row)
            db.flush()

        logger.info(
            "Stored %s %s for user %s (%d tokens)",
            self.document_type.value, row.id, user.id, result.tokens_used
        )
        return row

    def _get(self, db: Session, row_id: int):
        row = db.get(self.model, row_id)
        if row is None:
            raise NotFoundError(f"{self.label} not found")
        return row

    @property
    def label(self) -> str:
        return self.model.__name__

    def can_view(self, row, user: User) -> bool:
        return user.is_admin or row.user_id == user.id or bool(getattr(row, "is_public", False))

    def get_for_user(self, row_id: int, user: User):
        with get_db_session() as db:
            row = self._get(db, row_id)
        if not self.can_view(row, user):
            raise PermissionDeniedError(f"You do not have access to this {self.label.lower()}")
        return row

    def list_for_user(self, user_id: int, page: int = 1, page_size: int = 50) -> Tuple[list, int]:
        query = (
            select(self.model)
            .where(self.model.user_id == user_id)
            .order_by(self.model.created_at.desc(), self.model.id.desc())
        )
        with get_db_session() as db:
            return paginate(db, query, page, page_size)

    def list_all(self, page: int = 1, page_size: int = 50, user_id: Optional[int] = None) -> Tuple[list, int]:
        query = select(self.model).order_by(self.model.created_at.desc(), self.model.id.desc())
        if user_id is not None:
            query = query.where(self.model.user_id == user_id)
        with get_db_session() as db:
            return paginate(db, query, page, page_size)

    def delete(self, row_id: int, user: User) -> None:
        with get_db_session() as db:
            row = self._get(db, row_id)
            if not (user.is_admin or row.user_id == user.id):
                raise PermissionDeniedError(f"You do not have access to this {self.label.lower()}")
            db.execute(
                delete(Feedback).where(
                    Feedback.analysis_id == row_id, Feedback.analysis_type == self.feedback_type
                )
            )
            db.delete(row)


# ============================================================
# VISA ANALYSES
# ============================================================

class AnalysisService(_DocumentService):
    model = Analysis
    document_type = DocumentType.visa_letter
    feedback_type = "visa"

    @property
    def label(self) -> str:
        return "Analysis"

    def _build_row(self, user, text, file_name, file_size, result):
        return Analysis(
            user_id=user.id,
            filename=file_name,
            original_text=text,
            tokens_used=result.tokens_used,
            processing_time_ms=result.processing_time_ms,
            **result.fields
        )

    def analyze_visa_document(self, user: User, text: str, filename: str) -> Analysis:
        return self.extract_and_store(user, text, filename, len(text.encode("utf-8")))

    def set_visibility(self, analysis_id: int, user: User, is_public: bool) -> Analysis:
        with get_db_session() as db:
            analysis = self._get(db, analysis_id)
            if analysis.user_id != user.id and not user.is_admin:
                raise PermissionDeniedError("Only the owner can change visibility")
            analysis.is_public = is_public
        return analysis

    def list_public(self, page: int = 1, page_size: int = 20) -> Tuple[List[Analysis], int]:
        query = (
            select(Analysis)
            .where(Analysis.is_public.is_(True))
            .order_by(Analysis.created_at.desc(), Analysis.id.desc())
        )
        with get_db_session() as db:
            return paginate(db, query, page, page_size)

    def search(
        self,
        page: int = 1,
        page_size: int = 20,
        search: Optional[str] = None,
        outcome: Optional[str] = None,
        user_id: Optional[int] = None,
    ) -> Tuple[List[Analysis], int]:
        """Admin listing with filename/summary search and outcome filter."""
        query = select(Analysis).order_by(Analysis.created_at.desc(), Analysis.id.desc())
        if search:
            pattern = f"%{search.lower()}%"
            query = query.where(
                func.lower(Analysis.filename).like(pattern) | func.lower(Analysis.summary).like(pattern)
            )
        if outcome:
            query = query.where(Analysis.document_outcome == outcome)
        if user_id is not None:
            query = query.where(Analysis.user_id == user_id)
        with get_db_session() as db:
            return paginate(db, query, page, page_size)


# ============================================================
# OFFER LETTERS
# ============================================================

class OfferLetterService(_DocumentService):
    model = OfferLetterInfo
    document_type = DocumentType.offer_letter
    feedback_type = "offer_letter"

    @property
    def label(self) -> str:
        return "Offer letter"

    def _build_row(self, user, text, file_name, file_size, result):
        return OfferLetterInfo(
            user_id=user.id,
            file_name=file_name,
            file_size=file_size,
            extracted_text=text,
            tokens_used=result.tokens_used,
            processing_time_ms=result.processing_time_ms,
            **result.fields
        )

    @staticmethod
    def fields_of(row: OfferLetterInfo) -> Dict[str, Any]:
        return {column: getattr(row, column) for column in OFFER_LETTER_COLUMNS}

    @classmethod
    def detail(cls, row: OfferLetterInfo) -> dict:
        """Flat columns plus the sectioned view."""
        fields = cls.fields_of(row)
        return {
            "id": row.id,
            "user_id": row.user_id,
            "file_name": row.file_name,
            "file_size": row.file_size,
            "tokens_used": row.tokens_used,
            "processing_time_ms": row.processing_time_ms,
            "created_at": row.created_at,
            "fields": fields,
            "sections": nest_offer_letter(fields),
        }


# ============================================================
# CONFIRMATION OF ENROLMENT
# ============================================================

class CoeService(_DocumentService):
    model = CoeInformation
    document_type = DocumentType.coe
    feedback_type = "coe"

    @property
    def label(self) -> str:
        return "CoE document"

    def _build_row(self, user, text, file_name, file_size, result):
        return CoeInformation(
            user_id=user.id,
            file_name=file_name,
            file_size=file_size,
            document_text=text,
            tokens_used=result.tokens_used,
            processing_time_ms=result.processing_time_ms,
            **result.fields
        )

    @staticmethod
    def detail(row: CoeInformation) -> dict:
        return {
            "id": row.id,
            "user_id": row.user_id,
            "file_name": row.file_name,
            "file_size": row.file_size,
            "tokens_used": row.tokens_used,
            "processing_time_ms": row.processing_time_ms,
            "is_public": row.is_public,
            "created_at": row.created_at,
            "fields": {column: getattr(row, column) for column in COE_COLUMNS},
        }


# ============================================================
# ENROLMENT DOCUMENT ANALYSES
# ============================================================

class EnrollmentAnalysisService(_DocumentService):
    model = EnrollmentAnalysis
    document_type = DocumentType.enrollment_analysis
    feedback_type = "enrollment"

    @property
    def label(self) -> str:
        return "Enrollment analysis"

    def _build_row(self, user, text, file_name, file_size, result):
        return EnrollmentAnalysis(
            user_id=user.id,
            filename=file_name,
            document_type=result.document_label or "coe",
            file_size=file_size,
            original_text=text,
            tokens_used=result.tokens_used,
            processing_time_ms=result.processing_time_ms,
            **result.fields
        )

    def analyze(self, user: User, text: str, file_name: str, file_size: int, document_type: str) -> EnrollmentAnalysis:
        return self.extract_and_store(user, text, file_name, file_size, document_label=document_type)


# ============================================================
# OFFER LETTER ANALYSES
# ============================================================

class OfferLetterAnalysisService(_DocumentService):
    model = OfferLetterAnalysis
    document_type = DocumentType.offer_letter_analysis
    feedback_type = "offer_analysis"

    @property
    def label(self) -> str:
        return "Offer letter analysis"

    def _build_row(self, user, text, file_name, file_size, result):
        return OfferLetterAnalysis(
            user_id=user.id,
            file_name=file_name,
            file_size=file_size,
            document_text=text,
            tokens_used=result.tokens_used,
            processing_time_ms=result.processing_time_ms,
            **result.fields
        )
