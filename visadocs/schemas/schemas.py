"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
Response models that mirror an ORM row use ``from_attributes`` so routes can
pass model instances straight to ``model_validate``.
"""

import json

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List, Any
from datetime import datetime
from enum import Enum


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    user = "user"
    admin = "admin"


class AccountStatus(str, Enum):
    active = "active"
    inactive = "inactive"


class AnalysisType(str, Enum):
    visa = "visa"
    offer_letter = "offer_letter"
    coe = "coe"
    enrollment = "enrollment"
    offer_analysis = "offer_analysis"


class EnrollmentDocumentType(str, Enum):
    coe = "coe"
    i20 = "i20"
    cas = "cas"
    admission_letter = "admission_letter"
    offer_letter = "offer_letter"
    enrollment_letter = "enrollment_letter"


class ContactMethod(str, Enum):
    phone = "phone"
    whatsapp = "whatsapp"
    viber = "viber"


class AppointmentStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    completed = "completed"
    cancelled = "cancelled"


class UpdatePriority(str, Enum):
    low = "low"
    normal = "normal"
    high = "high"
    urgent = "urgent"


class WatchlistPriority(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


class WatchlistStatus(str, Enum):
    not_started = "not_started"
    in_progress = "in_progress"
    submitted = "submitted"
    completed = "completed"


class ExportFormat(str, Enum):
    csv = "csv"
    json = "json"


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=8)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone_number: str = ""
    study_destination: str = ""
    start_date: str = ""
    city: str = ""
    country: str = ""
    counselling_mode: str = ""
    funding_source: str = ""
    study_level: str = ""
    agree_to_terms: bool = False
    allow_contact: bool = False
    receive_updates: bool = False

    @field_validator("agree_to_terms")
    @classmethod
    def must_agree_to_terms(cls, v: bool) -> bool:
        if not v:
            raise ValueError("You must agree to the terms and conditions")
        return v


class LoginRequest(BaseModel):
    username: str  # username or email
    password: str


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    first_name: str
    last_name: str
    phone_number: str = ""
    study_destination: str = ""
    city: str = ""
    country: str = ""
    study_level: str = ""
    role: str
    status: str
    analysis_count: int
    max_analyses: int
    created_at: datetime


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class UsageResponse(BaseModel):
    analysis_count: int
    max_analyses: int
    remaining: int
    unlimited: bool = False


# ============================================================
# VISA ANALYSIS SCHEMAS
# ============================================================

class AnalysisItem(BaseModel):
    """One rejection reason, key term, recommendation or next step."""
    title: str
    description: str = ""
    category: Optional[str] = None
    severity: Optional[str] = None


OUTCOME_SYNONYMS = {
    "approval": "approval", "approved": "approval", "grant": "approval", "granted": "approval",
    "rejection": "rejection", "rejected": "rejection", "refusal": "rejection", "refused": "rejection",
}


class VisaAnalysisResult(BaseModel):
    """Shape the model must return for a visa letter. Accepts camelCase keys."""
    outcome: Optional[str] = Field(
        None, validation_alias=AliasChoices("outcome", "document_outcome", "documentOutcome")
    )
    summary: str = Field(..., min_length=1)
    rejection_reasons: List[AnalysisItem] = Field(
        default_factory=list, validation_alias=AliasChoices("rejection_reasons", "rejectionReasons")
    )
    key_terms: List[AnalysisItem] = Field(
        default_factory=list, validation_alias=AliasChoices("key_terms", "keyTerms")
    )
    recommendations: List[AnalysisItem] = Field(default_factory=list)
    next_steps: List[AnalysisItem] = Field(
        default_factory=list, validation_alias=AliasChoices("next_steps", "nextSteps")
    )

    @field_validator("outcome", mode="before")
    @classmethod
    def check_outcome(cls, v: Any) -> Optional[str]:
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        outcome = OUTCOME_SYNONYMS.get(str(v).strip().lower())
        if outcome is None:
            raise ValueError(f"outcome must be approval or rejection, got {v!r}")
        return outcome

    @field_validator("rejection_reasons", "key_terms", "recommendations", "next_steps", mode="before")
    @classmethod
    def coerce_plain_strings(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, list):
            return [{"title": item, "description": item} if isinstance(item, str) else item for item in v]
        return v

    @property
    def document_outcome(self) -> str:
        """The stated outcome; inferred from the reasons and terms only when the model gave none."""
        if self.outcome:
            return self.outcome
        if self.key_terms and not self.rejection_reasons:
            return "approval"
        return "rejection"


class TextAnalysisRequest(BaseModel):
    filename: str = Field("pasted-text.txt", max_length=255)
    text: str = Field(..., min_length=1)


class AnalysisSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: Optional[int] = None
    filename: str
    summary: str
    document_outcome: str
    is_public: bool
    created_at: datetime


class AnalysisResponse(AnalysisSummaryResponse):
    rejection_reasons: List[AnalysisItem] = []
    key_terms: List[AnalysisItem] = []
    recommendations: List[AnalysisItem] = []
    next_steps: List[AnalysisItem] = []
    tokens_used: int = 0
    processing_time_ms: int = 0


class AnalysisDetailResponse(AnalysisResponse):
    original_text: str


class AnalysisListResponse(BaseModel):
    analyses: List[AnalysisSummaryResponse]
    total: int
    page: int
    page_size: int


class VisibilityUpdate(BaseModel):
    is_public: bool


# ============================================================
# FEEDBACK SCHEMAS
# ============================================================

class FeedbackCreate(BaseModel):
    analysis_type: AnalysisType = AnalysisType.visa
    rating: int = Field(..., ge=1, le=5)
    is_accurate: Optional[bool] = None
    is_helpful: Optional[bool] = None
    comment: Optional[str] = Field(None, max_length=5000)
    improvement_suggestions: Optional[str] = Field(None, max_length=5000)
    categories: List[str] = []


class FeedbackResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    analysis_id: int
    analysis_type: str
    user_id: int
    rating: int
    is_accurate: Optional[bool] = None
    is_helpful: Optional[bool] = None
    comment: Optional[str] = None
    improvement_suggestions: Optional[str] = None
    categories: List[str] = []
    created_at: datetime


class FeedbackStatsResponse(BaseModel):
    total: int
    average_rating: Optional[float] = None
    accurate_count: int
    helpful_count: int
    by_rating: dict


class FeedbackListResponse(BaseModel):
    feedback: List[FeedbackResponse]
    stats: FeedbackStatsResponse


# ============================================================
# OFFER LETTER / COE SCHEMAS
# ============================================================

class OfferLetterSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    file_name: str
    institution_name: Optional[str] = None
    student_name: Optional[str] = None
    course_name: Optional[str] = None
    course_start_date: Optional[str] = None
    total_tuition_fees: Optional[str] = None
    created_at: datetime


class OfferLetterDetailResponse(BaseModel):
    id: int
    user_id: int
    file_name: str
    file_size: int
    tokens_used: int
    processing_time_ms: int
    created_at: datetime
    fields: dict
    sections: dict


class CoeSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    file_name: str
    coe_number: Optional[str] = None
    provider_name: Optional[str] = None
    course_name: Optional[str] = None
    given_names: Optional[str] = None
    family_name: Optional[str] = None
    is_public: bool = False
    created_at: datetime


class CoeDetailResponse(BaseModel):
    id: int
    user_id: int
    file_name: str
    file_size: int
    tokens_used: int
    processing_time_ms: int
    is_public: bool
    created_at: datetime
    fields: dict


# ============================================================
# ENROLLMENT / OFFER LETTER ANALYSIS SCHEMAS
# ============================================================

def _optional_text(value: Any) -> Optional[str]:
    """Model text -> stripped string, or None when blank."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False) if value else None
    text = str(value).strip()
    return text or None


def _items(value: Any, key: str) -> Any:
    """Accept plain strings in a list as shorthand for ``{key: text}`` objects."""
    if value is None:
        return []
    if isinstance(value, list):
        return [{key: item} if isinstance(item, str) else item for item in value if item not in (None, "")]
    return value


def _score(value: Any) -> int:
    """0-100 score; floats and numeric strings are rounded, out-of-range values clamped."""
    if value is None or value == "":
        return 0
    if isinstance(value, str):
        value = value.strip().rstrip("%")
    number = round(float(value))
    return max(0, min(100, number))


class _ModelOutput(BaseModel):
    """Base for model replies: camelCase or snake_case keys, unknown keys ignored, nulls mean "absent"."""
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore", coerce_numbers_to_str=True
    )

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class EnrollmentFinding(_ModelOutput):
    title: str
    description: str = ""
    importance: str = "medium"


class MissingInformation(_ModelOutput):
    field: str
    description: str = ""
    impact: str = ""


class EnrollmentRecommendation(_ModelOutput):
    title: str
    description: str = ""
    priority: str = "suggested"
    category: str = "preparation"


class EnrollmentStep(_ModelOutput):
    step: str
    description: str = ""
    deadline: Optional[str] = None
    category: str = "immediate"


class ComplianceIssue(_ModelOutput):
    issue: str
    severity: str = "minor"
    resolution: str = ""


ENROLLMENT_TEXT_FIELDS = (
    "institution_name", "student_name", "student_id", "program_name", "program_level",
    "start_date", "end_date", "institution_country", "student_country", "visa_type",
    "tuition_amount", "currency", "scholarship_amount", "total_cost", "health_cover",
    "english_test_score", "institution_contact", "visa_obligations", "expiry_date",
)


class EnrollmentAnalysisResult(_ModelOutput):
    """Shape the model must return when reviewing an enrolment document."""
    institution_name: Optional[str] = None
    student_name: Optional[str] = None
    student_id: Optional[str] = None
    program_name: Optional[str] = None
    program_level: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    institution_country: Optional[str] = None
    student_country: Optional[str] = None
    visa_type: Optional[str] = None
    tuition_amount: Optional[str] = None
    currency: Optional[str] = None
    scholarship_amount: Optional[str] = None
    total_cost: Optional[str] = None
    health_cover: Optional[str] = None
    english_test_score: Optional[str] = None
    institution_contact: Optional[str] = None
    visa_obligations: Optional[str] = None
    expiry_date: Optional[str] = None

    summary: str = Field(..., min_length=1)
    key_findings: List[EnrollmentFinding] = Field(default_factory=list)
    missing_information: List[MissingInformation] = Field(default_factory=list)
    recommendations: List[EnrollmentRecommendation] = Field(default_factory=list)
    next_steps: List[EnrollmentStep] = Field(default_factory=list)
    compliance_issues: List[ComplianceIssue] = Field(default_factory=list)
    is_valid: bool = True
    analysis_score: int = 0
    confidence: int = 0

    @field_validator("summary", *ENROLLMENT_TEXT_FIELDS, mode="before")
    @classmethod
    def clean_text(cls, v: Any) -> Optional[str]:
        return _optional_text(v)

    @field_validator("key_findings", "recommendations", mode="before")
    @classmethod
    def titled_items(cls, v: Any) -> Any:
        return _items(v, "title")

    @field_validator("missing_information", mode="before")
    @classmethod
    def missing_items(cls, v: Any) -> Any:
        return _items(v, "field")

    @field_validator("next_steps", mode="before")
    @classmethod
    def step_items(cls, v: Any) -> Any:
        return _items(v, "step")

    @field_validator("compliance_issues", mode="before")
    @classmethod
    def issue_items(cls, v: Any) -> Any:
        return _items(v, "issue")

    @field_validator("analysis_score", "confidence", mode="before")
    @classmethod
    def clamp_score(cls, v: Any) -> int:
        try:
            return _score(v)
        except (TypeError, ValueError):
            raise ValueError(f"expected a number from 0 to 100, got {v!r}")


class OfferCondition(_ModelOutput):
    condition: str
    category: str = "other"
    deadline: Optional[str] = None


class OfferStrength(_ModelOutput):
    strength: str
    category: str = "general"
    impact: Optional[str] = None


class OfferConcern(_ModelOutput):
    concern: str
    category: str = "general"
    severity: str = "medium"
    mitigation: Optional[str] = None


class OfferOpportunity(_ModelOutput):
    opportunity: str
    benefit: Optional[str] = None
    requirements: Optional[str] = None


class OfferRecommendation(_ModelOutput):
    recommendation: str
    category: str = "general"
    rationale: Optional[str] = None
    priority: str = "medium"


class ImmediateAction(_ModelOutput):
    action: str
    description: Optional[str] = None
    deadline: Optional[str] = None
    priority: str = "medium"
    documents: List[str] = Field(default_factory=list)


class ShortTermAction(_ModelOutput):
    action: str
    description: Optional[str] = None
    timeline: Optional[str] = None


class LongTermAction(_ModelOutput):
    action: str
    description: Optional[str] = None
    milestones: List[str] = Field(default_factory=list)


class ActionPlan(_ModelOutput):
    immediate: List[ImmediateAction] = Field(default_factory=list)
    short_term: List[ShortTermAction] = Field(default_factory=list)
    long_term: List[LongTermAction] = Field(default_factory=list)

    @field_validator("immediate", "short_term", "long_term", mode="before")
    @classmethod
    def action_items(cls, v: Any) -> Any:
        return _items(v, "action")


OFFER_ANALYSIS_TEXT_FIELDS = ("institution_name", "program_name", "course_level", "start_date", "total_fees")


class OfferLetterAnalysisResult(_ModelOutput):
    """Shape the model must return when assessing an offer letter."""
    summary: str = Field(..., min_length=1)
    institution_name: Optional[str] = None
    program_name: Optional[str] = None
    course_level: Optional[str] = None
    start_date: Optional[str] = None
    total_fees: Optional[str] = None
    offer_conditions: List[OfferCondition] = Field(default_factory=list)
    strengths: List[OfferStrength] = Field(default_factory=list)
    concerns: List[OfferConcern] = Field(default_factory=list)
    opportunities: List[OfferOpportunity] = Field(default_factory=list)
    recommendations: List[OfferRecommendation] = Field(default_factory=list)
    action_plan: ActionPlan = Field(default_factory=ActionPlan)

    @field_validator("summary", *OFFER_ANALYSIS_TEXT_FIELDS, mode="before")
    @classmethod
    def clean_text(cls, v: Any) -> Optional[str]:
        return _optional_text(v)

    @field_validator("offer_conditions", "strengths", "concerns", "opportunities", "recommendations", mode="before")
    @classmethod
    def shorthand_items(cls, v: Any, info) -> Any:
        key = {
            "offer_conditions": "condition",
            "strengths": "strength",
            "concerns": "concern",
            "opportunities": "opportunity",
            "recommendations": "recommendation",
        }[info.field_name]
        return _items(v, key)


class EnrollmentAnalysisSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    filename: str
    document_type: str
    institution_name: Optional[str] = None
    program_name: Optional[str] = None
    summary: str
    analysis_score: int = 0
    is_valid: bool = True
    created_at: datetime


class EnrollmentAnalysisResponse(EnrollmentAnalysisSummaryResponse):
    file_size: int = 0
    student_name: Optional[str] = None
    student_id: Optional[str] = None
    program_level: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    institution_country: Optional[str] = None
    student_country: Optional[str] = None
    visa_type: Optional[str] = None
    tuition_amount: Optional[str] = None
    currency: Optional[str] = None
    scholarship_amount: Optional[str] = None
    total_cost: Optional[str] = None
    health_cover: Optional[str] = None
    english_test_score: Optional[str] = None
    institution_contact: Optional[str] = None
    visa_obligations: Optional[str] = None
    expiry_date: Optional[str] = None
    key_findings: List[dict] = []
    missing_information: List[dict] = []
    recommendations: List[dict] = []
    next_steps: List[dict] = []
    compliance_issues: List[dict] = []
    confidence: int = 0
    tokens_used: int = 0
    processing_time_ms: int = 0


class OfferLetterAnalysisSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    file_name: str
    institution_name: Optional[str] = None
    program_name: Optional[str] = None
    tokens_used: int = 0
    processing_time_ms: int = 0
    created_at: datetime


class OfferLetterAnalysisResponse(OfferLetterAnalysisSummaryResponse):
    file_size: int = 0
    summary: str
    course_level: Optional[str] = None
    start_date: Optional[str] = None
    total_fees: Optional[str] = None
    offer_conditions: List[dict] = []
    strengths: List[dict] = []
    concerns: List[dict] = []
    opportunities: List[dict] = []
    recommendations: List[dict] = []
    action_plan: dict = {}


# ============================================================
# APPOINTMENT SCHEMAS
# ============================================================

class AppointmentCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=200)
    email: EmailStr
    phone_number: str = Field(..., min_length=5, max_length=50)
    preferred_contact: ContactMethod
    subject: str = Field(..., min_length=2, max_length=300)
    message: Optional[str] = Field(None, max_length=5000)
    requested_date: Optional[datetime] = None


class AppointmentStatusUpdate(BaseModel):
    status: AppointmentStatus


class AppointmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    name: str
    email: str
    phone_number: str
    preferred_contact: str
    subject: str
    message: Optional[str] = None
    requested_date: Optional[datetime] = None
    status: str
    created_at: datetime


# ============================================================
# DOCUMENT TEMPLATE SCHEMAS
# ============================================================

class DocumentTemplateUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=2, max_length=300)
    description: Optional[str] = None
    category: Optional[str] = None
    countries: Optional[List[str]] = None
    visa_types: Optional[List[str]] = None
    is_active: Optional[bool] = None


class DocumentTemplateResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: Optional[str] = None
    category: str
    countries: List[str] = []
    visa_types: List[str] = []
    file_name: str
    file_size: int
    mime_type: Optional[str] = None
    is_active: bool
    download_count: int
    created_at: datetime
    updated_at: datetime


# ============================================================
# UPDATE (NOTIFICATION) SCHEMAS
# ============================================================

class UpdateCreate(BaseModel):
    title: str = Field(..., min_length=2, max_length=300)
    content: str = Field(..., min_length=1)
    summary: Optional[str] = None
    type: str = "general"
    priority: UpdatePriority = UpdatePriority.normal
    target_audience: str = "all"
    call_to_action: Optional[str] = None
    external_link: Optional[str] = None
    expires_at: Optional[datetime] = None


class UpdateEdit(BaseModel):
    title: Optional[str] = Field(None, min_length=2, max_length=300)
    content: Optional[str] = None
    summary: Optional[str] = None
    type: Optional[str] = None
    priority: Optional[UpdatePriority] = None
    target_audience: Optional[str] = None
    call_to_action: Optional[str] = None
    external_link: Optional[str] = None
    expires_at: Optional[datetime] = None
    is_active: Optional[bool] = None


class UpdateResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    content: str
    summary: Optional[str] = None
    type: str
    priority: str
    target_audience: str
    call_to_action: Optional[str] = None
    external_link: Optional[str] = None
    expires_at: Optional[datetime] = None
    is_active: bool
    view_count: int
    created_at: datetime
    is_read: bool = False


class UnreadCountResponse(BaseModel):
    unread_count: int


# ============================================================
# SCHOLARSHIP / WATCHLIST SCHEMAS
# ============================================================

class ScholarshipCreate(BaseModel):
    scholarship_name: str = Field(..., min_length=2, max_length=300)
    provider_name: str = Field(..., min_length=2, max_length=300)
    institution_name: Optional[str] = None
    program_level: Optional[str] = None
    description: Optional[str] = None
    funding_type: Optional[str] = None
    total_value: Optional[str] = None
    host_countries: List[str] = []
    tags: List[str] = []
    eligibility_criteria: Optional[str] = None
    application_deadline: Optional[str] = None
    scholarship_url: Optional[str] = None


class ScholarshipUpdate(BaseModel):
    scholarship_name: Optional[str] = Field(None, min_length=2, max_length=300)
    provider_name: Optional[str] = Field(None, min_length=2, max_length=300)
    institution_name: Optional[str] = None
    program_level: Optional[str] = None
    description: Optional[str] = None
    funding_type: Optional[str] = None
    total_value: Optional[str] = None
    host_countries: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    eligibility_criteria: Optional[str] = None
    application_deadline: Optional[str] = None
    scholarship_url: Optional[str] = None


class ScholarshipResponse(ScholarshipCreate):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime
    updated_at: datetime


class ScholarshipListResponse(BaseModel):
    scholarships: List[ScholarshipResponse]
    total: int
    page: int
    page_size: int


class WatchlistAdd(BaseModel):
    scholarship_id: int
    notes: str = ""
    priority: WatchlistPriority = WatchlistPriority.medium


class WatchlistUpdate(BaseModel):
    notes: Optional[str] = None
    priority: Optional[WatchlistPriority] = None
    status: Optional[WatchlistStatus] = None


class WatchlistItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    scholarship_id: int
    scholarship_name: str
    provider_name: str
    funding_type: Optional[str] = None
    application_deadline: Optional[str] = None
    notes: str
    priority: str
    status: str
    created_at: datetime
    updated_at: datetime


class WatchlistCheckResponse(BaseModel):
    in_watchlist: bool
    item_id: Optional[int] = None


# ============================================================
# ADMIN SCHEMAS
# ============================================================

class RoleUpdate(BaseModel):
    role: UserRole


class StatusUpdate(BaseModel):
    status: AccountStatus


class MaxAnalysesUpdate(BaseModel):
    max_analyses: int = Field(..., ge=0, le=100000)


class UserListResponse(BaseModel):
    users: List[UserResponse]
    total: int
    page: int
    page_size: int


class SystemStatsResponse(BaseModel):
    total_users: int
    active_users: int
    admin_users: int
    total_analyses: int
    public_analyses: int
    total_offer_letters: int
    total_coe_documents: int
    total_enrollment_analyses: int = 0
    total_offer_letter_analyses: int = 0
    total_feedback: int
    average_rating: Optional[float] = None
    pending_appointments: int
    active_templates: int
    active_updates: int
    total_scholarships: int
    total_tokens_used: int


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True


class ErrorResponse(BaseModel):
    error: str
