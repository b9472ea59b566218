"""
Shared fixtures.

The app is pointed at a throwaway SQLite file and upload directory before
anything from visadocs is imported, and the LLM is replaced by ScriptedProvider,
so no test needs a database server or an API key.
"""

import os
import tempfile

_TMP_DIR = tempfile.mkdtemp(prefix="visadocs-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ["UPLOADS_DIR"] = os.path.join(_TMP_DIR, "uploads")
os.environ["LLM_PROVIDER"] = "openai"
os.environ["OPENAI_API_KEY"] = ""
os.environ["ANTHROPIC_API_KEY"] = ""
os.environ["SENDGRID_API_KEY"] = ""
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["MAX_UPLOAD_MB"] = "1"
os.environ["DEFAULT_MAX_ANALYSES"] = "3"

import json  # noqa: E402
from typing import List  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from visadocs.core.auth import create_access_token, hash_password  # noqa: E402
from visadocs.db.postgres import engine, get_db_session  # noqa: E402
from visadocs.main import app  # noqa: E402
from visadocs.models import User  # noqa: E402
from visadocs.models.base import Base  # noqa: E402
from visadocs.services.extraction_service import ExtractionPipeline, get_extraction_pipeline  # noqa: E402
from visadocs.services.llm_client import Completion, CompletionProvider  # noqa: E402

# bcrypt is slow; every fixture user shares one hash
PASSWORD = "password123"
PASSWORD_HASH = hash_password(PASSWORD)


# ============================================================
# SAMPLE MODEL OUTPUT
# ============================================================

VISA_APPROVAL = {
    "outcome": "approval",
    "summary": "Student visa (subclass 500) granted until March 2028.",
    "rejection_reasons": [],
    "key_terms": [
        {"title": "Work limitation", "description": "48 hours per fortnight during study periods",
         "category": "condition"},
    ],
    "recommendations": [{"title": "Keep enrolment", "description": "Stay enrolled in a registered course"}],
    "next_steps": [{"title": "Book travel", "description": "Arrive before 24 February 2026"}],
}

VISA_REFUSAL = {
    "summary": "Visa refused: genuine student requirement not met.",
    "rejectionReasons": [
        {"title": "Genuine student", "description": "Study plan was not convincing", "severity": "high"},
    ],
    "keyTerms": [],
    "recommendations": ["Strengthen the statement of purpose"],
    "nextSteps": ["Request a review within 28 days"],
}

OFFER_LETTER_OUTPUT = {
    "institutionInformation": {"institutionName": "Test University", "cricosProviderCode": "01234A"},
    "studentPersonalInformation": {"studentName": "Jane Doe"},
    "courseProgramInformation": {"courseName": "Computer Science", "courseStartDate": "24 February 2026"},
    "financialInformation": {
        "totalTuitionFees": "AUD 84,000",
        "paymentSchedule": [{"studyPeriod": "Year 1", "fee": "AUD 42,000"}],
    },
    "conditionsOfOffer": [{"condition": "Certified transcripts", "type": "academic"}],
}

COE_OUTPUT = {
    "coeNumber": "E1234567",
    "providerName": "Test University",
    "courseName": "Master of Computer Science",
    "familyName": "Doe",
    "givenNames": "Jane",
    "veVOInfo": "",
}


ENROLLMENT_OUTPUT = {
    "institutionName": "Test University",
    "studentName": "Jane Doe",
    "programName": "Master of Computer Science (CRS1234)",
    "startDate": "24 February 2026",
    "tuitionAmount": "AUD 84,000",
    "currency": "AUD",
    "healthCover": "Allianz OSHC, single cover to 30 June 2028",
    "summary": "Confirmation of enrolment for a two year master's course.",
    "keyFindings": [{"title": "Tuition prepaid", "description": "AUD 21,000 paid", "importance": "high"}],
    "missingInformation": ["English test score"],
    "recommendations": [{"title": "Keep OSHC active", "priority": "urgent", "category": "visa"}],
    "nextSteps": ["Lodge the student visa application"],
    "complianceIssues": [],
    "isValid": True,
    "analysisScore": 85,
    "confidence": 90,
}

OFFER_ANALYSIS_OUTPUT = {
    "summary": "Conditional offer for a Master of Computer Science starting February 2026.",
    "institutionName": "Test University",
    "programName": "Master of Computer Science",
    "courseLevel": "Master",
    "totalFees": "AUD 84,000",
    "offerConditions": [{"condition": "Certified transcripts", "category": "academic", "deadline": "1 December 2025"}],
    "strengths": ["Well ranked program"],
    "concerns": [{"concern": "High deposit", "category": "financial", "severity": "medium"}],
    "opportunities": [],
    "recommendations": [{"recommendation": "Accept before the deadline", "priority": "high"}],
    "actionPlan": {
        "immediate": [{"action": "Sign the acceptance form", "documents": ["Passport"]}],
        "shortTerm": ["Pay the deposit"],
        "longTerm": [{"action": "Plan accommodation", "milestones": ["Book by January"]}],
    },
}

class ScriptedProvider(CompletionProvider):
    """Completion provider that replays queued replies and records every prompt."""

    name = "scripted"

    def __init__(self):
        super().__init__("scripted-model")
        self.replies: List = []
        self.default_reply = json.dumps(VISA_APPROVAL)
        self.calls: List[dict] = []

    def queue(self, *replies):
        self.replies.extend(replies)

    def complete(self, system, user, temperature=0.1, json_mode=True):
        self.calls.append({"system": system, "user": user, "temperature": temperature})
        reply = self.replies.pop(0) if self.replies else self.default_reply
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, dict):
            reply = json.dumps(reply)
        return Completion(text=reply, tokens_used=321, model=self.model)


# ============================================================
# PDF FIXTURES
# ============================================================

def _pdf_escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def make_pdf(pages: List[List[str]]) -> bytes:
    """Build a minimal text PDF, one list of lines per page."""
    page_count = len(pages)
    font_id = 3
    objects = {
        1: b"<< /Type /Catalog /Pages 2 0 R >>",
        font_id: b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    }
    kids = []
    for index, lines in enumerate(pages):
        page_id = 4 + index * 2
        content_id = page_id + 1
        kids.append(f"{page_id} 0 R")

        ops = ["BT", "/F1 12 Tf", "14 TL", "72 720 Td"]
        for line in lines:
            ops.append(f"({_pdf_escape(line)}) Tj T*")
        ops.append("ET")
        stream = "\n".join(ops).encode("latin-1")

        objects[page_id] = (
            f"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
            f"/Resources << /Font << /F1 {font_id} 0 R >> >> /Contents {content_id} 0 R >>"
        ).encode("latin-1")
        objects[content_id] = (
            f"<< /Length {len(stream)} >>\nstream\n".encode("latin-1") + stream + b"\nendstream"
        )
    objects[2] = f"<< /Type /Pages /Kids [{' '.join(kids)}] /Count {page_count} >>".encode("latin-1")

    out = bytearray(b"%PDF-1.4\n")
    offsets = {}
    for obj_id in sorted(objects):
        offsets[obj_id] = len(out)
        out += f"{obj_id} 0 obj\n".encode("latin-1") + objects[obj_id] + b"\nendobj\n"

    xref_at = len(out)
    size = max(objects) + 1
    out += f"xref\n0 {size}\n".encode("latin-1")
    out += b"0000000000 65535 f \n"
    for obj_id in range(1, size):
        out += f"{offsets[obj_id]:010d} 00000 n \n".encode("latin-1")
    out += f"trailer\n<< /Size {size} /Root 1 0 R >>\nstartxref\n{xref_at}\n%%EOF\n".encode("latin-1")
    return bytes(out)


OFFER_LETTER_PAGES = [
    [
        "Test University",
        "Office of International Admissions",
        "Letter of Offer for Jane Doe",
    ],
    [
        "Course: Computer Science",
        "Start date: 24 February 2026",
        "Total tuition fee: AUD 84,000",
    ],
]


@pytest.fixture
def offer_letter_pdf() -> bytes:
    return make_pdf(OFFER_LETTER_PAGES)


@pytest.fixture
def visa_letter_pdf() -> bytes:
    return make_pdf([["Notification of Visa Grant", "Student (subclass 500)", "Condition 8105 applies"]])


# ============================================================
# DATABASE / APP
# ============================================================

@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def provider() -> ScriptedProvider:
    return ScriptedProvider()


@pytest.fixture
def pipeline(provider) -> ExtractionPipeline:
    return ExtractionPipeline(provider)


@pytest.fixture
def client(pipeline):
    app.dependency_overrides[get_extraction_pipeline] = lambda: pipeline
    yield TestClient(app)
    app.dependency_overrides.clear()


def create_user(username: str = "student", role: str = "user", max_analyses: int = 3, **extra) -> User:
    with get_db_session() as db:
        user = User(
            username=username,
            email=extra.pop("email", f"{username}@example.com"),
            password_hash=PASSWORD_HASH,
            first_name=extra.pop("first_name", username.title()),
            last_name=extra.pop("last_name", "Tester"),
            role=role,
            status=extra.pop("status", "active"),
            analysis_count=0,
            max_analyses=max_analyses,
            agree_to_terms=True,
            **extra
        )
        db.add(user)
        db.flush()
    return user


def auth_headers(user: User) -> dict:
    token = create_access_token({"sub": str(user.id), "role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user() -> User:
    return create_user()


@pytest.fixture
def user_headers(user) -> dict:
    return auth_headers(user)


@pytest.fixture
def admin() -> User:
    return create_user("admin", role="admin", max_analyses=0)


@pytest.fixture
def admin_headers(admin) -> dict:
    return auth_headers(admin)


def load_user(user_id: int) -> User:
    with get_db_session() as db:
        return db.get(User, user_id)


def count_rows(model) -> int:
    from sqlalchemy import func, select

    with get_db_session() as db:
        return db.scalar(select(func.count()).select_from(model))
