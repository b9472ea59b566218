"""
OfferLetterInfo ORM Model
=========================

One row per uploaded offer letter: every field the extraction prompt asks
for, flattened into its own column. Text columns hold either the value as it
appears in the document or ``"Not specified in document"``; list-valued
sections (fee schedules, conditions, refund rules ...) are JSON arrays.

Rows are never updated in place. Uploading the same letter again creates a
new row.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from visadocs.models.base import Base, JSONType, utcnow


class OfferLetterInfo(Base):
    __tablename__ = "offer_letter_info"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    file_name: Mapped[str] = mapped_column(Text, nullable=False)
    file_size: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Institution
    institution_name: Mapped[Optional[str]] = mapped_column(Text)
    trading_as: Mapped[Optional[str]] = mapped_column(Text)
    institution_address: Mapped[Optional[str]] = mapped_column(Text)
    institution_phone: Mapped[Optional[str]] = mapped_column(Text)
    institution_email: Mapped[Optional[str]] = mapped_column(Text)
    institution_website: Mapped[Optional[str]] = mapped_column(Text)
    provider_id: Mapped[Optional[str]] = mapped_column(Text)
    cricos_provider_code: Mapped[Optional[str]] = mapped_column(Text)
    abn: Mapped[Optional[str]] = mapped_column(Text)

    # Student
    student_name: Mapped[Optional[str]] = mapped_column(Text)
    student_id_number: Mapped[Optional[str]] = mapped_column(Text)
    date_of_birth: Mapped[Optional[str]] = mapped_column(Text)
    gender: Mapped[Optional[str]] = mapped_column(Text)
    citizenship: Mapped[Optional[str]] = mapped_column(Text)
    marital_status: Mapped[Optional[str]] = mapped_column(Text)
    home_address: Mapped[Optional[str]] = mapped_column(Text)
    contact_number: Mapped[Optional[str]] = mapped_column(Text)
    email_address: Mapped[Optional[str]] = mapped_column(Text)
    correspondence_address: Mapped[Optional[str]] = mapped_column(Text)
    passport_number: Mapped[Optional[str]] = mapped_column(Text)
    passport_expiry_date: Mapped[Optional[str]] = mapped_column(Text)
    agent_details: Mapped[Optional[str]] = mapped_column(Text)

    # Course / program
    course_name: Mapped[Optional[str]] = mapped_column(Text)
    course_specialization: Mapped[Optional[str]] = mapped_column(Text)
    course_level: Mapped[Optional[str]] = mapped_column(Text)
    course_cricos_code: Mapped[Optional[str]] = mapped_column(Text)
    course_duration: Mapped[Optional[str]] = mapped_column(Text)
    number_of_units: Mapped[Optional[str]] = mapped_column(Text)
    credit_points: Mapped[Optional[str]] = mapped_column(Text)
    orientation_date: Mapped[Optional[str]] = mapped_column(Text)
    course_start_date: Mapped[Optional[str]] = mapped_column(Text)
    course_end_date: Mapped[Optional[str]] = mapped_column(Text)
    study_mode: Mapped[Optional[str]] = mapped_column(Text)
    campus_location: Mapped[Optional[str]] = mapped_column(Text)

    # Financial
    tuition_fee_per_unit: Mapped[Optional[str]] = mapped_column(Text)
    upfront_fee_for_coe: Mapped[Optional[str]] = mapped_column(Text)
    total_tuition_fees: Mapped[Optional[str]] = mapped_column(Text)
    enrollment_fee: Mapped[Optional[str]] = mapped_column(Text)
    material_fee: Mapped[Optional[str]] = mapped_column(Text)
    total_fee_due: Mapped[Optional[str]] = mapped_column(Text)
    scholarship_amount: Mapped[Optional[str]] = mapped_column(Text)
    scholarship_details: Mapped[Optional[str]] = mapped_column(Text)
    payment_schedule: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)

    # Payment
    payment_methods: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    bank_account_name: Mapped[Optional[str]] = mapped_column(Text)
    bank_bsb: Mapped[Optional[str]] = mapped_column(Text)
    bank_account_number: Mapped[Optional[str]] = mapped_column(Text)
    bank_name: Mapped[Optional[str]] = mapped_column(Text)
    bank_address: Mapped[Optional[str]] = mapped_column(Text)
    bank_swift_code: Mapped[Optional[str]] = mapped_column(Text)
    credit_card_payment_link: Mapped[Optional[str]] = mapped_column(Text)
    payment_reference: Mapped[Optional[str]] = mapped_column(Text)

    conditions_of_offer: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)

    # Course structure
    units_per_year: Mapped[Optional[str]] = mapped_column(Text)
    yearly_breakdown: Mapped[Optional[str]] = mapped_column(Text)
    full_time_study_requirement: Mapped[Optional[str]] = mapped_column(Text)
    attendance_requirements: Mapped[Optional[str]] = mapped_column(Text)
    academic_progress_requirements: Mapped[Optional[str]] = mapped_column(Text)

    additional_fees: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    support_services: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)

    # Terms and conditions
    refund_policy: Mapped[Optional[str]] = mapped_column(Text)
    refund_conditions: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    withdrawal_policy: Mapped[Optional[str]] = mapped_column(Text)
    transfer_policy: Mapped[Optional[str]] = mapped_column(Text)
    appeal_procedures: Mapped[Optional[str]] = mapped_column(Text)
    student_code_of_conduct: Mapped[Optional[str]] = mapped_column(Text)

    # Legal and compliance
    esos_legislation: Mapped[Optional[str]] = mapped_column(Text)
    privacy_policy: Mapped[Optional[str]] = mapped_column(Text)
    student_rights: Mapped[Optional[str]] = mapped_column(Text)
    tuition_protection_scheme: Mapped[Optional[str]] = mapped_column(Text)

    # Health and insurance
    oshc_requirement: Mapped[Optional[str]] = mapped_column(Text)
    health_insurance_details: Mapped[Optional[str]] = mapped_column(Text)
    medical_requirements: Mapped[Optional[str]] = mapped_column(Text)

    # Visa and immigration
    visa_requirements: Mapped[Optional[str]] = mapped_column(Text)
    student_visa_conditions: Mapped[Optional[str]] = mapped_column(Text)
    work_rights: Mapped[Optional[str]] = mapped_column(Text)
    dependents_information: Mapped[Optional[str]] = mapped_column(Text)
    school_aged_dependents: Mapped[Optional[str]] = mapped_column(Text)

    # Study materials
    laptop_requirement: Mapped[Optional[str]] = mapped_column(Text)
    textbook_costs: Mapped[Optional[str]] = mapped_column(Text)
    library_access: Mapped[Optional[str]] = mapped_column(Text)
    technology_requirements: Mapped[Optional[str]] = mapped_column(Text)

    # Contacts
    admissions_officer: Mapped[Optional[str]] = mapped_column(Text)
    admissions_email: Mapped[Optional[str]] = mapped_column(Text)
    student_services_contact: Mapped[Optional[str]] = mapped_column(Text)
    emergency_contacts: Mapped[Optional[str]] = mapped_column(Text)
    quality_systems_manager: Mapped[Optional[str]] = mapped_column(Text)

    # Acceptance and declaration
    acceptance_deadline: Mapped[Optional[str]] = mapped_column(Text)
    student_declaration: Mapped[Optional[str]] = mapped_column(Text)
    declaration_requirements: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    signature_requirements: Mapped[Optional[str]] = mapped_column(Text)
    return_instructions: Mapped[Optional[str]] = mapped_column(Text)

    # Administrative
    application_id: Mapped[Optional[str]] = mapped_column(Text)
    offer_date: Mapped[Optional[str]] = mapped_column(Text)
    offer_version: Mapped[Optional[str]] = mapped_column(Text)
    page_count: Mapped[Optional[str]] = mapped_column(Text)
    document_status: Mapped[Optional[str]] = mapped_column(Text)

    # Processing
    extracted_text: Mapped[Optional[str]] = mapped_column(Text)
    tokens_used: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    processing_time_ms: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
