"""
Advisory analyses of enrolment documents and offer letters.

Unlike OfferLetterInfo and CoeInformation, which copy fields out of a
document, these rows hold the model's assessment of it: findings, risks,
recommendations and next steps, stored as JSON arrays.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from visadocs.models.base import Base, JSONType, utcnow


class EnrollmentAnalysis(Base):
    __tablename__ = "enrollment_analyses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    filename: Mapped[str] = mapped_column(Text, nullable=False)
    document_type: Mapped[str] = mapped_column(String(30), nullable=False, default="coe")
    file_size: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    original_text: Mapped[str] = mapped_column(Text, nullable=False)

    # Key facts
    institution_name: Mapped[Optional[str]] = mapped_column(Text)
    student_name: Mapped[Optional[str]] = mapped_column(Text)
    student_id: Mapped[Optional[str]] = mapped_column(Text)
    program_name: Mapped[Optional[str]] = mapped_column(Text)
    program_level: Mapped[Optional[str]] = mapped_column(Text)
    start_date: Mapped[Optional[str]] = mapped_column(Text)
    end_date: Mapped[Optional[str]] = mapped_column(Text)
    institution_country: Mapped[Optional[str]] = mapped_column(Text)
    student_country: Mapped[Optional[str]] = mapped_column(Text)
    visa_type: Mapped[Optional[str]] = mapped_column(Text)
    tuition_amount: Mapped[Optional[str]] = mapped_column(Text)
    currency: Mapped[Optional[str]] = mapped_column(Text)
    scholarship_amount: Mapped[Optional[str]] = mapped_column(Text)
    total_cost: Mapped[Optional[str]] = mapped_column(Text)
    health_cover: Mapped[Optional[str]] = mapped_column(Text)
    english_test_score: Mapped[Optional[str]] = mapped_column(Text)
    institution_contact: Mapped[Optional[str]] = mapped_column(Text)
    visa_obligations: Mapped[Optional[str]] = mapped_column(Text)
    expiry_date: Mapped[Optional[str]] = mapped_column(Text)

    # Assessment
    summary: Mapped[str] = mapped_column(Text, nullable=False)
    key_findings: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    missing_information: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    recommendations: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    next_steps: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    compliance_issues: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    is_valid: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    analysis_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    confidence: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    tokens_used: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    processing_time_ms: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)


class OfferLetterAnalysis(Base):
    __tablename__ = "offer_letter_analyses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    file_name: Mapped[str] = mapped_column(Text, nullable=False)
    file_size: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    document_text: Mapped[str] = mapped_column(Text, nullable=False)

    summary: Mapped[str] = mapped_column(Text, nullable=False)
    institution_name: Mapped[Optional[str]] = mapped_column(Text)
    program_name: Mapped[Optional[str]] = mapped_column(Text)
    course_level: Mapped[Optional[str]] = mapped_column(Text)
    start_date: Mapped[Optional[str]] = mapped_column(Text)
    total_fees: Mapped[Optional[str]] = mapped_column(Text)

    offer_conditions: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    strengths: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    concerns: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    opportunities: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    recommendations: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    # {"immediate": [...], "short_term": [...], "long_term": [...]}
    action_plan: Mapped[dict] = mapped_column(JSONType, nullable=False, default=dict)

    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    tokens_used: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    processing_time_ms: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
