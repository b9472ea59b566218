"""
Field catalogs for the structured extractions.

Each entry ties one location in the JSON the model is asked to produce
(``path``) to one database column, with the hint shown to the model. The
prompt builder renders the JSON skeleton from these catalogs and the
extraction service reads model output back through them, so the two can
never drift apart.
"""

from typing import Any, NamedTuple, Tuple

TEXT = "text"
LIST = "list"

NOT_SPECIFIED = "Not specified in document"


class FieldSpec(NamedTuple):
    path: Tuple[str, ...]
    column: str
    hint: str
    kind: str = TEXT
    item: Any = None  # example element shown for list fields


def _section(name: str, *fields: Tuple[str, str, str]) -> list:
    return [FieldSpec((name, key), column, hint) for key, column, hint in fields]


# ============================================================
# OFFER LETTER (sectioned)
# ============================================================

OFFER_LETTER_FIELDS = [
    *_section(
        "institutionInformation",
        ("institutionName", "institution_name", "Full legal name of the institution"),
        ("tradingAs", "trading_as", "Trading name if different"),
        ("institutionAddress", "institution_address", "Complete postal address of the institution"),
        ("institutionPhone", "institution_phone", "Phone number with country code"),
        ("institutionEmail", "institution_email", "Primary email address"),
        ("institutionWebsite", "institution_website", "Website URL"),
        ("providerId", "provider_id", "Provider ID or registration number"),
        ("cricosProviderCode", "cricos_provider_code", "CRICOS provider code"),
        ("abn", "abn", "Australian Business Number"),
    ),
    *_section(
        "studentPersonalInformation",
        ("studentName", "student_name", "Full name of the student"),
        ("studentId", "student_id_number", "Student identification number"),
        ("dateOfBirth", "date_of_birth", "Date of birth as written"),
        ("gender", "gender", "Gender"),
        ("citizenship", "citizenship", "Country of citizenship or nationality"),
        ("maritalStatus", "marital_status", "Marital status"),
        ("homeAddress", "home_address", "Complete home address"),
        ("contactNumber", "contact_number", "Phone number with country code"),
        ("emailAddress", "email_address", "Student email address"),
        ("correspondenceAddress", "correspondence_address", "Correspondence address if different"),
        ("passportNumber", "passport_number", "Passport number"),
        ("passportExpiryDate", "passport_expiry_date", "Passport expiry date"),
        ("agentDetails", "agent_details", "Education agent name and contact"),
    ),
    *_section(
        "courseProgramInformation",
        ("courseName", "course_name", "Full course name"),
        ("courseSpecialization", "course_specialization", "Specialisation or major"),
        ("courseLevel", "course_level", "Academic level (Bachelor, Master, ...)"),
        ("cricosCode", "course_cricos_code", "CRICOS course code"),
        ("courseDuration", "course_duration", "Total duration"),
        ("numberOfUnits", "number_of_units", "Total number of units or subjects"),
        ("creditPoints", "credit_points", "Total credit points"),
        ("orientationDate", "orientation_date", "Orientation date and time"),
        ("courseStartDate", "course_start_date", "Course commencement date"),
        ("courseEndDate", "course_end_date", "Course completion date"),
        ("studyMode", "study_mode", "Mode of study (full-time, part-time, online, on campus)"),
        ("campusLocation", "campus_location", "Campus name or address"),
    ),
    *_section(
        "financialInformation",
        ("tuitionFeePerUnit", "tuition_fee_per_unit", "Fee per unit or subject"),
        ("upfrontFeeForCoe", "upfront_fee_for_coe", "Amount payable before the CoE is issued"),
        ("totalTuitionFees", "total_tuition_fees", "Total tuition fees for the whole course"),
        ("enrollmentFee", "enrollment_fee", "Enrolment or admission fee"),
        ("materialFee", "material_fee", "Material or resource fee"),
        ("totalFeeDue", "total_fee_due", "Total amount due initially"),
        ("scholarshipAmount", "scholarship_amount", "Scholarship amount, if any"),
        ("scholarshipDetails", "scholarship_details", "Scholarship terms"),
    ),
    FieldSpec(
        ("financialInformation", "paymentSchedule"), "payment_schedule", "Fee instalments", LIST,
        {"studyPeriod": "Study period", "fee": "Fee for the period", "scholarship": "Scholarship applied",
         "balance": "Balance due", "dueDate": "Due date"},
    ),
    FieldSpec(
        ("paymentInformation", "paymentMethods"), "payment_methods", "Accepted payment methods", LIST,
        {"method": "Payment method", "details": "Method details"},
    ),
    *[
        FieldSpec(("paymentInformation", "bankDetails", key), column, hint)
        for key, column, hint in (
            ("accountName", "bank_account_name", "Account name"),
            ("bsb", "bank_bsb", "BSB or routing number"),
            ("accountNumber", "bank_account_number", "Account number"),
            ("bankName", "bank_name", "Bank name"),
            ("bankAddress", "bank_address", "Bank address"),
            ("swiftCode", "bank_swift_code", "SWIFT code for international transfers"),
        )
    ],
    *_section(
        "paymentInformation",
        ("creditCardPaymentLink", "credit_card_payment_link", "Online payment link"),
        ("paymentReference", "payment_reference", "Reference to quote with payments"),
    ),
    FieldSpec(
        ("conditionsOfOffer",), "conditions_of_offer", "Conditions attached to the offer", LIST,
        {"condition": "Condition", "type": "academic, visa, health, ...", "requirements": "What must be provided"},
    ),
    *_section(
        "courseStructureRequirements",
        ("unitsPerYear", "units_per_year", "Units per year"),
        ("yearlyBreakdown", "yearly_breakdown", "Units by year"),
        ("fullTimeStudyRequirement", "full_time_study_requirement", "Full-time study requirement"),
        ("attendanceRequirements", "attendance_requirements", "Attendance requirements"),
        ("academicProgressRequirements", "academic_progress_requirements", "Academic progress requirements"),
    ),
    FieldSpec(
        ("additionalFeesAndCosts",), "additional_fees", "Other fees and charges", LIST,
        {"feeItem": "Fee item", "amount": "Amount", "description": "Description"},
    ),
    FieldSpec(
        ("studentSupportServices",), "support_services", "Support services offered", LIST,
        {"service": "Service", "description": "Description", "availability": "Availability or cost"},
    ),
    *_section(
        "termsAndConditions",
        ("refundPolicy", "refund_policy", "Refund policy"),
    ),
    FieldSpec(
        ("termsAndConditions", "refundConditions"), "refund_conditions", "Refund rules", LIST,
        {"reason": "Reason", "refundAmount": "Percentage or amount refunded", "conditions": "Conditions"},
    ),
    *_section(
        "termsAndConditions",
        ("withdrawalPolicy", "withdrawal_policy", "Withdrawal policy"),
        ("transferPolicy", "transfer_policy", "Transfer policy"),
        ("appealProcedures", "appeal_procedures", "Complaints and appeals procedure"),
        ("studentCodeOfConduct", "student_code_of_conduct", "Code of conduct"),
    ),
    *_section(
        "legalAndCompliance",
        ("esosLegislation", "esos_legislation", "ESOS framework information"),
        ("privacyPolicy", "privacy_policy", "Privacy notice"),
        ("studentRights", "student_rights", "Student rights"),
        ("tuitionProtectionScheme", "tuition_protection_scheme", "Tuition Protection Service information"),
    ),
    *_section(
        "healthAndInsurance",
        ("oshcRequirement", "oshc_requirement", "Overseas Student Health Cover requirement"),
        ("healthInsuranceDetails", "health_insurance_details", "Health insurance provider and cost"),
        ("medicalRequirements", "medical_requirements", "Medical requirements"),
    ),
    *_section(
        "visaAndImmigration",
        ("visaRequirements", "visa_requirements", "Visa requirements"),
        ("studentVisaConditions", "student_visa_conditions", "Student visa conditions"),
        ("workRights", "work_rights", "Work rights"),
        ("dependentsInformation", "dependents_information", "Dependants"),
        ("schoolAgedDependents", "school_aged_dependents", "School-aged dependants"),
    ),
    *_section(
        "studyMaterialsResources",
        ("laptopRequirement", "laptop_requirement", "Laptop requirement"),
        ("textbookCosts", "textbook_costs", "Textbook and material costs"),
        ("libraryAccess", "library_access", "Library access"),
        ("technologyRequirements", "technology_requirements", "Other technology requirements"),
    ),
    *_section(
        "contactInformation",
        ("admissionsOfficer", "admissions_officer", "Admissions officer"),
        ("admissionsEmail", "admissions_email", "Admissions email"),
        ("studentServicesContact", "student_services_contact", "Student services contact"),
        ("emergencyContacts", "emergency_contacts", "Emergency contacts"),
        ("qualitySystemsManager", "quality_systems_manager", "Quality systems manager"),
    ),
    *_section(
        "acceptanceAndDeclaration",
        ("acceptanceDeadline", "acceptance_deadline", "Deadline to accept the offer"),
        ("studentDeclaration", "student_declaration", "Declaration text"),
    ),
    FieldSpec(
        ("acceptanceAndDeclaration", "declarationRequirements"), "declaration_requirements",
        "Items the student declares", LIST, "Declaration item",
    ),
    *_section(
        "acceptanceAndDeclaration",
        ("signatureRequirements", "signature_requirements", "Signature requirements"),
        ("returnInstructions", "return_instructions", "How to return the signed offer"),
    ),
    *_section(
        "administrativeInformation",
        ("applicationId", "application_id", "Application ID or reference"),
        ("offerDate", "offer_date", "Date of the offer"),
        ("offerVersion", "offer_version", "Version of the offer"),
        ("pageCount", "page_count", "Number of pages"),
        ("documentStatus", "document_status", "Document status"),
    ),
]


# ============================================================
# CONFIRMATION OF ENROLMENT (flat)
# ============================================================

COE_FIELDS = [
    FieldSpec((key,), column, hint)
    for key, column, hint in (
        ("coeNumber", "coe_number", "CoE reference number, usually at the top"),
        ("coeCreatedDate", "coe_created_date", "Date the CoE was created"),
        ("coeUpdatedDate", "coe_updated_date", "Date the CoE was last updated"),
        ("providerName", "provider_name", "Provider (institution) name"),
        ("providerCricosCode", "provider_cricos_code", "Provider CRICOS code as printed, e.g. [00124K]"),
        ("tradingAs", "trading_as", "Trading name if different from the provider name"),
        ("providerPhone", "provider_phone", "Provider telephone"),
        ("providerFax", "provider_fax", "Provider fax"),
        ("providerEmail", "provider_email", "Provider email"),
        ("courseName", "course_name", "Full course name"),
        ("courseCricosCode", "course_cricos_code", "Course CRICOS code as printed"),
        ("courseLevel", "course_level", "Course level, e.g. Bachelor Degree"),
        ("courseStartDate", "course_start_date", "Course start date"),
        ("courseEndDate", "course_end_date", "Course end date"),
        ("initialPrePaidTuitionFee", "initial_pre_paid_tuition_fee", "Initial pre-paid tuition fee"),
        ("otherPrePaidNonTuitionFee", "other_pre_paid_non_tuition_fee", "Other pre-paid non-tuition fee"),
        ("totalTuitionFee", "total_tuition_fee", "Total tuition fee for the course"),
        ("providerStudentId", "provider_student_id", "Student ID assigned by the provider"),
        ("familyName", "family_name", "Family name"),
        ("givenNames", "given_names", "Given names"),
        ("gender", "gender", "Gender"),
        ("dateOfBirth", "date_of_birth", "Date of birth"),
        ("countryOfBirth", "country_of_birth", "Country of birth"),
        ("nationality", "nationality", "Nationality"),
        ("providerArrangedOshc", "provider_arranged_oshc", "Whether the provider arranged OSHC (Yes/No)"),
        ("oshcStartDate", "oshc_start_date", "OSHC start date"),
        ("oshcEndDate", "oshc_end_date", "OSHC end date"),
        ("oshcProviderName", "oshc_provider_name", "OSHC provider, e.g. Medibank Private"),
        ("oshcCoverType", "oshc_cover_type", "OSHC cover type, e.g. Single"),
        ("englishTestType", "english_test_type", "English test, e.g. IELTS"),
        ("englishTestScore", "english_test_score", "Overall English test score"),
        ("englishTestDate", "english_test_date", "English test date"),
        ("comments", "comments", "Text of the comments section"),
        ("scholarshipInfo", "scholarship_info", "Scholarship details if mentioned"),
        ("esosActCompliance", "esos_act_compliance", "ESOS Act information"),
        ("cricosRegistration", "cricos_registration", "CRICOS registration information"),
        ("nationalCodeCompliance", "national_code_compliance", "National Code information"),
        ("governmentDataSharing", "government_data_sharing", "Government data sharing notice"),
        ("importantNotes", "important_notes", "Important notes and reminders"),
        ("studyAustraliaLink", "study_australia_link", "Study Australia link"),
        ("qualityAssuranceInfo", "quality_assurance_info", "Quality assurance information"),
        ("visaApplicationInfo", "visa_application_info", "Visa application information"),
        ("veVOInfo", "vevo_info", "VEVO (Visa Entitlement Verification Online) information"),
        ("homeAffairsLink", "home_affairs_link", "Department of Home Affairs links"),
    )
]


OFFER_LETTER_COLUMNS = [spec.column for spec in OFFER_LETTER_FIELDS]
COE_COLUMNS = [spec.column for spec in COE_FIELDS]


def skeleton(fields: list) -> dict:
    """Nested example object (hints as values) for a field catalog."""
    out: dict = {}
    for spec in fields:
        node = out
        for key in spec.path[:-1]:
            node = node.setdefault(key, {})
        node[spec.path[-1]] = [spec.item] if spec.kind == LIST else spec.hint
    return out
