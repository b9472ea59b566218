"""
Feedback Service - one rating per user per analysis.

A second submission for the same (user, analysis, analysis_type) raises
ConflictError. The pre-check gives a clean message; the unique constraint
on the feedback table catches the race where two submissions pass the
pre-check together.
"""

import logging
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from visadocs.core.errors import ConflictError, NotFoundError, PermissionDeniedError
from visadocs.db.postgres import get_db_session
from visadocs.models import (
    Analysis, CoeInformation, EnrollmentAnalysis, Feedback, OfferLetterAnalysis, OfferLetterInfo, User
)
from visadocs.schemas.schemas import FeedbackCreate

logger = logging.getLogger(__name__)

ANALYSIS_MODELS = {
    "visa": Analysis,
    "offer_letter": OfferLetterInfo,
    "coe": CoeInformation,
    "enrollment": EnrollmentAnalysis,
    "offer_analysis": OfferLetterAnalysis,
}


def _analysis_owner(db, analysis_id: int, analysis_type: str) -> int:
    model = ANALYSIS_MODELS[analysis_type]
    row = db.get(model, analysis_id)
    if row is None:
        raise NotFoundError("Analysis not found")
    return row.user_id


def submit_feedback(analysis_id: int, user: User, data: FeedbackCreate) -> Feedback:
    analysis_type = data.analysis_type.value
    try:
        with get_db_session() as db:
            owner_id = _analysis_owner(db, analysis_id, analysis_type)
            if owner_id != user.id:
                raise PermissionDeniedError("You can only leave feedback on your own analyses")

            existing = db.scalar(
                select(Feedback.id).where(
                    Feedback.user_id == user.id,
                    Feedback.analysis_id == analysis_id,
                    Feedback.analysis_type == analysis_type,
                )
            )
            if existing:
                raise ConflictError("Feedback already submitted for this analysis")

            feedback = Feedback(
                analysis_id=analysis_id,
                analysis_type=analysis_type,
                user_id=user.id,
                rating=data.rating,
                is_accurate=data.is_accurate,
                is_helpful=data.is_helpful,
                comment=data.comment,
                improvement_suggestions=data.improvement_suggestions,
                categories=data.categories,
            )
            db.add(feedback)
            db.flush()
    except IntegrityError as e:
        logger.info("Duplicate feedback from user %s on %s %s", user.id, analysis_type, analysis_id)
        raise ConflictError("Feedback already submitted for this analysis") from e

    logger.info("Feedback %s (rating %d) on %s %s", feedback.id, feedback.rating, analysis_type, analysis_id)
    return feedback


def get_feedback(analysis_id: int, user: User, analysis_type: str = "visa") -> Optional[Feedback]:
    """The requesting user's feedback on an analysis (admins see the first one left)."""
    with get_db_session() as db:
        owner_id = _analysis_owner(db, analysis_id, analysis_type)
        if owner_id != user.id and not user.is_admin:
            raise PermissionDeniedError("You do not have access to this analysis")

        query = select(Feedback).where(
            Feedback.analysis_id == analysis_id, Feedback.analysis_type == analysis_type
        )
        if not user.is_admin:
            query = query.where(Feedback.user_id == user.id)
        return db.scalars(query.order_by(Feedback.id)).first()


def list_all_feedback(
    rating: Optional[int] = None,
    analysis_type: Optional[str] = None,
    limit: int = 100,
) -> List[Feedback]:
    query = select(Feedback).order_by(Feedback.created_at.desc(), Feedback.id.desc()).limit(limit)
    if rating is not None:
        query = query.where(Feedback.rating == rating)
    if analysis_type:
        query = query.where(Feedback.analysis_type == analysis_type)
    with get_db_session() as db:
        return list(db.scalars(query).all())


def get_feedback_stats() -> dict:
    with get_db_session() as db:
        total = db.scalar(select(func.count(Feedback.id))) or 0
        average = db.scalar(select(func.avg(Feedback.rating)))
        accurate = db.scalar(select(func.count(Feedback.id)).where(Feedback.is_accurate.is_(True))) or 0
        helpful = db.scalar(select(func.count(Feedback.id)).where(Feedback.is_helpful.is_(True))) or 0
        by_rating = dict(
            db.execute(select(Feedback.rating, func.count(Feedback.id)).group_by(Feedback.rating)).all()
        )

    return {
        "total": total,
        "average_rating": round(float(average), 2) if average is not None else None,
        "accurate_count": accurate,
        "helpful_count": helpful,
        "by_rating": {str(r): by_rating.get(r, 0) for r in range(1, 6)},
    }
