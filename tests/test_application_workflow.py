"""
Application workflow tests: submission, duplicates and status policy.
"""

import pytest
from sqlalchemy import func, select

from internhub.core.config import get_settings
from internhub.db.session import get_db_session
from internhub.db.tables import applications
from internhub.schemas.schemas import ApplicationStatus as S
from internhub.services.application_workflow import is_transition_allowed
from tests.helpers import post_internship, signup


def _apply(client, headers, internship_id, **extra):
    return client.post(
        "/api/students/applications", json={"internship_id": internship_id, **extra}, headers=headers
    )


def _set_status(client, headers, application_id, status):
    return client.put(
        f"/api/companies/applications/{application_id}/status", json={"status": status}, headers=headers
    )


class TestTransitionPolicy:

    def test_lenient_allows_everything(self):
        for current in S:
            for new in S:
                assert is_transition_allowed(current, new, policy="lenient")

    def test_forward_only(self):
        assert is_transition_allowed(S.applied, S.reviewed, policy="forward_only")
        assert is_transition_allowed(S.applied, S.rejected, policy="forward_only")
        assert is_transition_allowed(S.reviewed, S.accepted, policy="forward_only")
        assert not is_transition_allowed(S.reviewed, S.applied, policy="forward_only")
        assert not is_transition_allowed(S.accepted, S.rejected, policy="forward_only")
        assert not is_transition_allowed(S.rejected, S.reviewed, policy="forward_only")

    def test_same_status_is_always_allowed(self):
        assert is_transition_allowed(S.accepted, S.accepted, policy="forward_only")


class TestSubmit:

    def test_new_application_starts_applied(self, client, student, company):
        posting = post_internship(client, company)
        resp = _apply(client, student, posting["id"], cover_letter="Hello!")
        assert resp.status_code == 201
        body = resp.json()
        assert body["status"] == "applied"
        assert body["cover_letter"] == "Hello!"
        assert body["internship_title"] == "Backend Intern"
        assert body["company_name"] == "Acme Corp"

    def test_duplicate_is_rejected_and_stored_once(self, client, student, company):
        posting = post_internship(client, company)
        assert _apply(client, student, posting["id"]).status_code == 201

        resp = _apply(client, student, posting["id"])
        assert resp.status_code == 409
        assert resp.json() == {
            "detail": "You have already applied for this internship",
            "code": "DUPLICATE_APPLICATION",
        }

        with get_db_session() as db:
            count = db.execute(
                select(func.count()).select_from(applications)
                .where(applications.c.internship_id == posting["id"])
            ).scalar()
        assert count == 1

    def test_has_applied(self, client, student, company):
        posting = post_internship(client, company)
        url = f"/api/internships/{posting['id']}/application-status"
        assert client.get(url, headers=student).json()["has_applied"] is False
        _apply(client, student, posting["id"])
        assert client.get(url, headers=student).json()["has_applied"] is True

    def test_unknown_internship(self, client, student):
        resp = _apply(client, student, "does-not-exist")
        assert resp.status_code == 404

    def test_closed_internship(self, client, student, company):
        posting = post_internship(client, company)
        client.put(f"/api/internships/{posting['id']}", json={"is_active": False}, headers=company)

        resp = _apply(client, student, posting["id"])
        assert resp.status_code == 400
        assert resp.json()["code"] == "INTERNSHIP_CLOSED"

    def test_company_cannot_apply(self, client, company):
        posting = post_internship(client, company)
        assert _apply(client, company, posting["id"]).status_code == 403

    def test_cover_letter_cap(self, client, student, company):
        posting = post_internship(client, company)
        resp = _apply(client, student, posting["id"], cover_letter="c" * 5001)
        assert resp.status_code == 422
        assert resp.json()["field"] == "cover_letter"


class TestStatusUpdates:

    @pytest.fixture
    def application(self, client, student, company):
        posting = post_internship(client, company)
        return _apply(client, student, posting["id"]).json()

    def test_company_moves_application_forward(self, client, company, application):
        resp = _set_status(client, company, application["id"], "reviewed")
        assert resp.status_code == 200
        assert resp.json()["status"] == "reviewed"
        assert resp.json()["student"]["full_name"] == "Ada Student"

    def test_lenient_allows_correction(self, client, company, application):
        assert _set_status(client, company, application["id"], "accepted").status_code == 200
        resp = _set_status(client, company, application["id"], "applied")
        assert resp.status_code == 200
        assert resp.json()["status"] == "applied"

    def test_forward_only_rejects_backwards(self, client, company, application, monkeypatch):
        monkeypatch.setenv("APPLICATION_STATUS_POLICY", "forward_only")
        get_settings.cache_clear()

        assert _set_status(client, company, application["id"], "accepted").status_code == 200
        resp = _set_status(client, company, application["id"], "applied")
        assert resp.status_code == 409
        assert resp.json()["code"] == "ILLEGAL_TRANSITION"

        stored = client.get(f"/api/companies/applications/{application['id']}", headers=company).json()
        assert stored["status"] == "accepted"

    def test_unknown_status_value(self, client, company, application):
        resp = _set_status(client, company, application["id"], "hired")
        assert resp.status_code == 422
        assert resp.json()["field"] == "status"

    def test_other_company_cannot_touch_it(self, client, application):
        rival = signup(client, "company", "jobs@globex.io", "Globex")
        assert _set_status(client, rival, application["id"], "rejected").status_code == 404
        assert client.get("/api/companies/applications", headers=rival).json() == []

    def test_student_cannot_set_status(self, client, student, application):
        assert _set_status(client, student, application["id"], "accepted").status_code == 403

    def test_company_filters_by_status_and_posting(self, client, student, company, application):
        other = post_internship(client, company, title="Frontend Intern")
        _apply(client, student, other["id"])
        _set_status(client, company, application["id"], "reviewed")

        listed = client.get("/api/companies/applications", params={"status": "reviewed"}, headers=company).json()
        assert [a["id"] for a in listed] == [application["id"]]

        listed = client.get(
            "/api/companies/applications", params={"internship_id": other["id"]}, headers=company
        ).json()
        assert [a["internship_title"] for a in listed] == ["Frontend Intern"]
