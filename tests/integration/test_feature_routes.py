"""
Route tests for the feature routers with repositories stubbed out.
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

from app.db.helpers import DatabaseError
from app.features.analytics.repository import AnalyticsRepository
from app.features.job_matching.repository import JobMatchRepository
from app.features.networking.repository import ContactRepository
from app.features.referrals.repository import ReferralRepository


def _contact_row(contact_id: str, name: str, **extra) -> dict:
    return {"id": contact_id, "name": name, **extra}


def test_connection_path_found(api_client, fake_tracker, monkeypatch):
    monkeypatch.setattr(
        ContactRepository, "fetch_contacts", AsyncMock(return_value=[_contact_row("c1", "Alice")])
    )
    monkeypatch.setattr(
        ContactRepository,
        "fetch_connections",
        AsyncMock(return_value=[{"contact_id_a": "c1", "contact_id_b": "c9"}]),
    )
    monkeypatch.setattr(
        ContactRepository,
        "fetch_contacts_by_ids",
        AsyncMock(return_value=[_contact_row("c9", "Target Person")]),
    )

    response = api_client.get("/network/contacts/c9/path")

    assert response.status_code == 200
    body = response.json()
    assert body["found"] is True
    assert body["degree"] == 2
    assert body["path_description"] == "2nd degree via Alice"
    assert body["target"]["name"] == "Target Person"
    assert fake_tracker.events[0]["event_name"] == "connection_path_viewed"


def test_connection_path_not_found(api_client, monkeypatch):
    monkeypatch.setattr(ContactRepository, "fetch_contacts", AsyncMock(return_value=[]))
    monkeypatch.setattr(ContactRepository, "fetch_connections", AsyncMock(return_value=[]))
    monkeypatch.setattr(ContactRepository, "fetch_contacts_by_ids", AsyncMock(return_value=[]))

    response = api_client.get("/network/contacts/missing/path")

    assert response.status_code == 200
    assert response.json()["found"] is False


def test_connection_path_database_error_is_503(api_client, monkeypatch):
    monkeypatch.setattr(
        ContactRepository,
        "fetch_contacts",
        AsyncMock(side_effect=DatabaseError("down", operation="fetch_all", recoverable=True)),
    )

    response = api_client.get("/network/contacts/c1/path")

    assert response.status_code == 503


def test_influencers_filter(api_client, monkeypatch):
    rows = [
        _contact_row("a", "A", is_influencer=True, influence_score=80),
        _contact_row("b", "B", is_influencer=True, influence_score=20),
    ]
    monkeypatch.setattr(ContactRepository, "fetch_contacts", AsyncMock(return_value=rows))

    response = api_client.get("/network/influencers", params={"min_score": 50})

    assert response.status_code == 200
    assert response.json()["count"] == 1


def test_alumni_requires_school(api_client):
    assert api_client.get("/network/alumni").status_code == 422


def test_referral_timing_from_body(api_client, fake_tracker):
    now = datetime.now(UTC)
    payload = {
        "relationship_strength": 5,
        "last_contacted_at": now.isoformat(),
        "job_deadline": (now + timedelta(days=60)).isoformat(),
        "job_created_at": now.isoformat(),
    }

    response = api_client.post("/referrals/timing", json=payload)

    assert response.status_code == 200
    body = response.json()
    assert body["confidence"] == "high"
    assert len(body["reasoning"]) == 3
    assert fake_tracker.events[0]["event_name"] == "referral_timing_suggested"


def test_referral_timing_rejects_bad_strength(api_client):
    payload = {"relationship_strength": 9, "job_created_at": datetime.now(UTC).isoformat()}

    assert api_client.post("/referrals/timing", json=payload).status_code == 422


def test_stored_referral_timing_is_saved(api_client, monkeypatch):
    row = {
        "id": "r1",
        "status": "pending",
        "sent_at": None,
        "follow_up_at": None,
        "relationship_strength": 3,
        "last_contacted_at": None,
        "job_deadline": None,
        "job_created_at": datetime.now(UTC),
    }
    save = AsyncMock(return_value=True)
    monkeypatch.setattr(ReferralRepository, "fetch_request_context", AsyncMock(return_value=row))
    monkeypatch.setattr(ReferralRepository, "save_schedule", save)

    response = api_client.get("/referrals/r1/timing")

    assert response.status_code == 200
    save.assert_awaited_once()


def test_referral_follow_up_missing_request_is_404(api_client, monkeypatch):
    monkeypatch.setattr(ReferralRepository, "fetch_request_context", AsyncMock(return_value=None))

    assert api_client.get("/referrals/nope/follow-up").status_code == 404


def test_referral_follow_up_overdue(api_client, monkeypatch):
    row = {
        "id": "r1",
        "status": "sent",
        "sent_at": datetime.now(UTC) - timedelta(days=20),
        "follow_up_at": None,
    }
    monkeypatch.setattr(ReferralRepository, "fetch_request_context", AsyncMock(return_value=row))

    response = api_client.get("/referrals/r1/follow-up")

    assert response.status_code == 200
    body = response.json()
    assert body["should_follow_up"] is True
    assert "overdue" in body["reason"]


def test_score_job_with_inline_profile(api_client):
    payload = {
        "job": {
            "job_title": "Software Engineer",
            "job_description": "react typescript node",
            "company_name": "Acme",
        },
        "profile": {"skills": [{"name": "react"}, {"name": "typescript"}, {"name": "node"}]},
    }

    response = api_client.post("/job-matching/score", json=payload)

    assert response.status_code == 200
    body = response.json()
    assert body["skills_score"] == 100
    assert "Strong skill match" in body["strengths"]


def test_score_job_rejects_inverted_salary(api_client):
    payload = {
        "job": {"job_title": "Engineer", "salary_min": 10, "salary_max": 5},
        "profile": {},
    }

    assert api_client.post("/job-matching/score", json=payload).status_code == 422


def test_score_saved_job(api_client, fake_tracker, monkeypatch):
    job_row = {
        "id": "j1",
        "job_title": "Data Engineer",
        "job_description": "python spark",
        "company_name": "Acme",
        "location": "Remote",
        "salary_min": None,
        "salary_max": None,
    }
    monkeypatch.setattr(JobMatchRepository, "fetch_job", AsyncMock(return_value=job_row))
    monkeypatch.setattr(JobMatchRepository, "fetch_profile", AsyncMock(return_value=None))

    response = api_client.get("/job-matching/jobs/j1/score")

    assert response.status_code == 200
    body = response.json()
    assert body["job_id"] == "j1"
    assert body["location_score"] == 50
    assert fake_tracker.events[0]["properties"]["job_id"] == "j1"


def test_score_saved_job_missing_is_404(api_client, monkeypatch):
    monkeypatch.setattr(JobMatchRepository, "fetch_job", AsyncMock(return_value=None))

    assert api_client.get("/job-matching/jobs/j404/score").status_code == 404


def test_job_analytics(api_client, monkeypatch):
    jobs = [
        {"id": "1", "job_title": "A", "company_name": "X", "status": "Applied", "status_history": None},
        {"id": "2", "job_title": "B", "company_name": "Y", "status": "Interview", "status_history": None},
    ]
    history = [
        {"job_id": "2", "to_status": "Applied", "changed_at": "2025-01-01T00:00:00Z"},
        {"job_id": "2", "to_status": "Interview", "changed_at": "2025-01-05T00:00:00Z"},
    ]
    monkeypatch.setattr(AnalyticsRepository, "fetch_jobs", AsyncMock(return_value=jobs))
    monkeypatch.setattr(AnalyticsRepository, "fetch_status_history", AsyncMock(return_value=history))
    monkeypatch.setattr(
        AnalyticsRepository,
        "fetch_interviews",
        AsyncMock(return_value=[{"id": "i1", "scheduled_start": "2025-01-05T10:00:00Z"}]),
    )
    monkeypatch.setattr(AnalyticsRepository, "fetch_offers", AsyncMock(return_value=[]))

    response = api_client.get("/analytics/jobs")

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 2
    assert body["applications_sent"] == 2
    assert body["interviews_scheduled"] == 1
    assert body["offers_received"] == 0
    assert body["conversion_rates"]["applied_to_interview"] == 50
    assert body["median_time_to_response"] == 4
    assert body["avg_time_in_stage"] == {"applied": 4}


def test_funnel(api_client, monkeypatch):
    jobs = [{"id": "1", "status": "Wishlist"}, {"id": "2", "status": "Offer"}]
    monkeypatch.setattr(AnalyticsRepository, "fetch_jobs", AsyncMock(return_value=jobs))

    response = api_client.get("/analytics/funnel")

    assert response.status_code == 200
    body = response.json()
    assert body["stages"]["interested"] == 1
    assert body["stages"]["offer"] == 1
    assert body["conversion_rates"]["applied_to_offer"] == 100


def test_routes_require_auth():
    from fastapi.testclient import TestClient

    from app.main import app

    app.dependency_overrides.clear()
    response = TestClient(app).get("/analytics/funnel")

    assert response.status_code in (401, 403)


def test_stored_referral_with_out_of_range_strength_is_422(api_client, monkeypatch):
    row = {
        "id": "r1",
        "status": "pending",
        "relationship_strength": 9,
        "last_contacted_at": None,
        "job_deadline": None,
        "job_created_at": datetime.now(UTC),
    }
    save = AsyncMock(return_value=True)
    monkeypatch.setattr(ReferralRepository, "fetch_request_context", AsyncMock(return_value=row))
    monkeypatch.setattr(ReferralRepository, "save_schedule", save)

    response = api_client.get("/referrals/r1/timing")

    assert response.status_code == 422
    save.assert_not_awaited()


def test_score_saved_job_with_nulls_in_stored_profile(api_client, monkeypatch):
    job_row = {
        "id": "j1",
        "job_title": "Backend Developer",
        "job_description": "python postgres",
        "company_name": "Acme",
        "location": None,
        "salary_min": None,
        "salary_max": None,
    }
    profile_row = {
        "skills": [{"name": "python", "level": None}, {"name": None}, None],
        "employment_history": [{"title": "Dev", "company": "X", "description": None}],
        "education": [{"degree": None, "field": "Computer Science", "institution": None}],
        "experience_level": None,
        "location": None,
    }
    monkeypatch.setattr(JobMatchRepository, "fetch_job", AsyncMock(return_value=job_row))
    monkeypatch.setattr(JobMatchRepository, "fetch_profile", AsyncMock(return_value=profile_row))

    response = api_client.get("/job-matching/jobs/j1/score")

    assert response.status_code == 200
    body = response.json()
    assert 0 <= body["overall_score"] <= 100
    assert body["skills_score"] == 50
