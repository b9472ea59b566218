from concurrent.futures import ThreadPoolExecutor

import pytest

from conftest import OFFER_LETTER_OUTPUT, count_rows, create_user, load_user
from visadocs.core.errors import QuotaExceededError
from visadocs.db.postgres import get_db_session
from visadocs.models import OfferLetterInfo
from visadocs.services.analysis_service import OfferLetterService
from visadocs.services.quota_service import check_quota, consume_quota, consume_quota_or_raise, get_usage


def test_consume_stops_at_limit():
    student = create_user("student", max_analyses=2)
    results = []
    for _ in range(3):
        with get_db_session() as db:
            results.append(consume_quota(db, student.id))
    assert results == [True, True, False]
    assert load_user(student.id).analysis_count == 2


def test_check_quota_raises_when_exhausted():
    student = create_user("student", max_analyses=0)
    with get_db_session() as db:
        with pytest.raises(QuotaExceededError) as exc_info:
            check_quota(db, student.id)
    assert exc_info.value.status_code == 403


def test_admin_is_exempt():
    admin = create_user("admin", role="admin", max_analyses=0)
    with get_db_session() as db:
        check_quota(db, admin.id)
        consume_quota_or_raise(db, admin)
        usage = get_usage(db, admin.id)
    assert usage["unlimited"] is True
    assert load_user(admin.id).analysis_count == 0


def test_lowered_limit_keeps_history():
    student = create_user("student", max_analyses=3)
    for _ in range(2):
        with get_db_session() as db:
            consume_quota(db, student.id)
    with get_db_session() as db:
        db.get(type(student), student.id).max_analyses = 1
    with get_db_session() as db:
        assert get_usage(db, student.id)["remaining"] == 0
        assert consume_quota(db, student.id) is False


def test_consume_rolls_back_with_the_session():
    student = create_user("student", max_analyses=1)
    with pytest.raises(RuntimeError):
        with get_db_session() as db:
            assert consume_quota(db, student.id)
            raise RuntimeError("insert failed")
    assert load_user(student.id).analysis_count == 0


def test_concurrent_extractions_respect_quota(pipeline, provider):
    """Five simultaneous uploads against a quota of one: exactly one is stored."""
    student = create_user("racer", max_analyses=1)
    provider.default_reply = OFFER_LETTER_OUTPUT
    service = OfferLetterService(pipeline)

    def attempt(i):
        try:
            service.extract_and_store(student, f"Offer letter {i}", f"offer-{i}.pdf", 100)
            return "stored"
        except QuotaExceededError:
            return "rejected"

    with ThreadPoolExecutor(max_workers=5) as executor:
        outcomes = list(executor.map(attempt, range(5)))

    assert outcomes.count("stored") == 1
    assert outcomes.count("rejected") == 4
    assert count_rows(OfferLetterInfo) == 1
    assert load_user(student.id).analysis_count == 1
