"""
Visa document analyses and the feedback users leave on any analysis.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from visadocs.models.base import Base, JSONType, utcnow


class Analysis(Base):
    """
    One visa letter analysis. Written once after a successful model call;
    only ``is_public`` changes afterwards.
    """

    __tablename__ = "analyses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[Optional[int]] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    filename: Mapped[str] = mapped_column(Text, nullable=False)
    original_text: Mapped[str] = mapped_column(Text, nullable=False)
    summary: Mapped[str] = mapped_column(Text, nullable=False)
    document_outcome: Mapped[str] = mapped_column(String(20), nullable=False, default="rejection")
    rejection_reasons: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    key_terms: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    recommendations: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    next_steps: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    tokens_used: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    processing_time_ms: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)


class Feedback(Base):
    """
    Rating left by a user on one of their analyses. ``analysis_id`` points at
    analyses, offer_letter_info or coe_information depending on
    ``analysis_type``, so it is not a database foreign key.
    """

    __tablename__ = "feedback"
    __table_args__ = (
        UniqueConstraint("user_id", "analysis_id", "analysis_type", name="uq_feedback_user_analysis"),
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_feedback_rating"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    analysis_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    analysis_type: Mapped[str] = mapped_column(String(20), nullable=False, default="visa")
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    is_accurate: Mapped[Optional[bool]] = mapped_column(Boolean)
    is_helpful: Mapped[Optional[bool]] = mapped_column(Boolean)
    comment: Mapped[Optional[str]] = mapped_column(Text)
    improvement_suggestions: Mapped[Optional[str]] = mapped_column(Text)
    categories: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
