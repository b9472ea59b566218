"""
CoeInformation ORM Model - fields of an Australian Confirmation of Enrolment.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from visadocs.models.base import Base, utcnow


class CoeInformation(Base):
    __tablename__ = "coe_information"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    file_name: Mapped[str] = mapped_column(Text, nullable=False)
    file_size: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    document_text: Mapped[Optional[str]] = mapped_column(Text)

    # CoE reference, e.g. "106EBD133"
    coe_number: Mapped[Optional[str]] = mapped_column(Text)
    coe_created_date: Mapped[Optional[str]] = mapped_column(Text)
    coe_updated_date: Mapped[Optional[str]] = mapped_column(Text)

    # Provider
    provider_name: Mapped[Optional[str]] = mapped_column(Text)
    provider_cricos_code: Mapped[Optional[str]] = mapped_column(Text)  # e.g. "[00124K]"
    trading_as: Mapped[Optional[str]] = mapped_column(Text)
    provider_phone: Mapped[Optional[str]] = mapped_column(Text)
    provider_fax: Mapped[Optional[str]] = mapped_column(Text)
    provider_email: Mapped[Optional[str]] = mapped_column(Text)

    # Course
    course_name: Mapped[Optional[str]] = mapped_column(Text)
    course_cricos_code: Mapped[Optional[str]] = mapped_column(Text)
    course_level: Mapped[Optional[str]] = mapped_column(Text)
    course_start_date: Mapped[Optional[str]] = mapped_column(Text)
    course_end_date: Mapped[Optional[str]] = mapped_column(Text)

    # Pre-paid and total fees, e.g. "$AU 12,880"
    initial_pre_paid_tuition_fee: Mapped[Optional[str]] = mapped_column(Text)
    other_pre_paid_non_tuition_fee: Mapped[Optional[str]] = mapped_column(Text)
    total_tuition_fee: Mapped[Optional[str]] = mapped_column(Text)

    # Student
    provider_student_id: Mapped[Optional[str]] = mapped_column(Text)
    family_name: Mapped[Optional[str]] = mapped_column(Text)
    given_names: Mapped[Optional[str]] = mapped_column(Text)
    gender: Mapped[Optional[str]] = mapped_column(Text)
    date_of_birth: Mapped[Optional[str]] = mapped_column(Text)
    country_of_birth: Mapped[Optional[str]] = mapped_column(Text)
    nationality: Mapped[Optional[str]] = mapped_column(Text)

    # Overseas Student Health Cover
    provider_arranged_oshc: Mapped[Optional[str]] = mapped_column(Text)
    oshc_start_date: Mapped[Optional[str]] = mapped_column(Text)
    oshc_end_date: Mapped[Optional[str]] = mapped_column(Text)
    oshc_provider_name: Mapped[Optional[str]] = mapped_column(Text)
    oshc_cover_type: Mapped[Optional[str]] = mapped_column(Text)

    # English test
    english_test_type: Mapped[Optional[str]] = mapped_column(Text)
    english_test_score: Mapped[Optional[str]] = mapped_column(Text)
    english_test_date: Mapped[Optional[str]] = mapped_column(Text)

    comments: Mapped[Optional[str]] = mapped_column(Text)
    scholarship_info: Mapped[Optional[str]] = mapped_column(Text)

    # Legal and compliance
    esos_act_compliance: Mapped[Optional[str]] = mapped_column(Text)
    cricos_registration: Mapped[Optional[str]] = mapped_column(Text)
    national_code_compliance: Mapped[Optional[str]] = mapped_column(Text)
    government_data_sharing: Mapped[Optional[str]] = mapped_column(Text)

    important_notes: Mapped[Optional[str]] = mapped_column(Text)
    study_australia_link: Mapped[Optional[str]] = mapped_column(Text)
    quality_assurance_info: Mapped[Optional[str]] = mapped_column(Text)

    # Visa
    visa_application_info: Mapped[Optional[str]] = mapped_column(Text)
    vevo_info: Mapped[Optional[str]] = mapped_column(Text)
    home_affairs_link: Mapped[Optional[str]] = mapped_column(Text)

    tokens_used: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    processing_time_ms: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
