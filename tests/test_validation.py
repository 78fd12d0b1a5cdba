"""
Validation schema tests: boundaries, normalization and first-error reporting.
"""

import pytest

from internhub.core.errors import ValidationFailed
from internhub.schemas.schemas import (
    CompanyProfileUpdate, EducationLevel, InternshipCreate, SignupRequest, StudentProfileUpdate, validate,
)
from tests.helpers import internship_payload


class TestInternshipCreate:

    def test_title_boundaries(self):
        assert validate(InternshipCreate, internship_payload(title="Dev")).title == "Dev"
        with pytest.raises(ValidationFailed) as exc:
            validate(InternshipCreate, internship_payload(title="De"))
        assert exc.value.field == "title"
        assert exc.value.message == "Title must be at least 3 characters"

    def test_title_is_trimmed_before_length_check(self):
        with pytest.raises(ValidationFailed):
            validate(InternshipCreate, internship_payload(title="  ab  "))
        assert validate(InternshipCreate, internship_payload(title="  abc  ")).title == "abc"

    def test_title_upper_bound(self):
        validate(InternshipCreate, internship_payload(title="t" * 200))
        with pytest.raises(ValidationFailed):
            validate(InternshipCreate, internship_payload(title="t" * 201))

    def test_description_boundaries(self):
        validate(InternshipCreate, internship_payload(description="d" * 10000))
        with pytest.raises(ValidationFailed) as exc:
            validate(InternshipCreate, internship_payload(description="d" * 10001))
        assert exc.value.field == "description"

        with pytest.raises(ValidationFailed) as exc:
            validate(InternshipCreate, internship_payload(description="too short"))
        assert exc.value.message == "Description must be at least 10 characters"

    def test_onsite_requires_location(self):
        with pytest.raises(ValidationFailed) as exc:
            validate(InternshipCreate, internship_payload(location="   ", is_remote=False))
        assert exc.value.message == "Location is required for on-site positions"

    def test_remote_location_is_normalized(self):
        remote = validate(InternshipCreate, internship_payload(location="", is_remote=True))
        assert remote.location == "Remote"
        remote = validate(InternshipCreate, internship_payload(location="Berlin", is_remote=True))
        assert remote.location == "Remote"

    def test_non_text_location_is_a_field_error(self):
        with pytest.raises(ValidationFailed) as exc:
            validate(InternshipCreate, internship_payload(location=123))
        assert exc.value.field == "location"

        remote = validate(InternshipCreate, internship_payload(location=None, is_remote=True))
        assert remote.location == "Remote"

    def test_blank_optionals_become_none(self):
        data = validate(InternshipCreate, internship_payload(requirements="", industry="  ", duration=""))
        assert data.requirements is None
        assert data.industry is None
        assert data.duration is None

    def test_only_first_failure_is_reported(self):
        with pytest.raises(ValidationFailed) as exc:
            validate(InternshipCreate, internship_payload(title="x", description="y"))
        assert exc.value.field == "title"


class TestProfiles:

    def test_education_level_defaults_to_university(self):
        assert validate(StudentProfileUpdate, {"full_name": "Ada"}).education_level == EducationLevel.university
        assert validate(StudentProfileUpdate, {"full_name": "Ada", "education_level": ""}).education_level == (
            EducationLevel.university
        )
        with pytest.raises(ValidationFailed) as exc:
            validate(StudentProfileUpdate, {"full_name": "Ada", "education_level": "phd"})
        assert exc.value.field == "education_level"

    def test_social_urls_must_be_http(self):
        validate(StudentProfileUpdate, {"full_name": "Ada", "github_url": "https://github.com/ada"})
        with pytest.raises(ValidationFailed) as exc:
            validate(StudentProfileUpdate, {"full_name": "Ada", "github_url": "github.com/ada"})
        assert exc.value.field == "github_url"
        assert exc.value.message == "Must be a valid URL starting with http:// or https://"

    def test_blank_url_is_accepted_as_none(self):
        data = validate(StudentProfileUpdate, {"full_name": "Ada", "linkedin_url": ""})
        assert data.linkedin_url is None

    def test_url_length_cap(self):
        with pytest.raises(ValidationFailed) as exc:
            validate(StudentProfileUpdate, {"full_name": "Ada", "portfolio_url": "https://" + "a" * 500})
        assert exc.value.message == "URL too long"

    def test_list_caps(self):
        validate(StudentProfileUpdate, {"full_name": "Ada", "skills": ["s"] * 50})
        with pytest.raises(ValidationFailed) as exc:
            validate(StudentProfileUpdate, {"full_name": "Ada", "skills": ["s"] * 51})
        assert exc.value.message == "Maximum 50 skills"
        with pytest.raises(ValidationFailed) as exc:
            validate(StudentProfileUpdate, {"full_name": "Ada", "interests": ["i" * 51]})
        assert exc.value.message == "Interest too long"

    def test_project_errors_point_into_the_list(self):
        with pytest.raises(ValidationFailed) as exc:
            validate(StudentProfileUpdate, {"full_name": "Ada", "projects": [{"title": "p", "url": "ftp://x"}]})
        assert exc.value.field == "projects.0.url"

    def test_company_name_required(self):
        with pytest.raises(ValidationFailed) as exc:
            validate(CompanyProfileUpdate, {"company_name": "   "})
        assert exc.value.message == "Company name is required"

    def test_company_website_shape(self):
        with pytest.raises(ValidationFailed) as exc:
            validate(CompanyProfileUpdate, {"company_name": "Acme", "website": "acme.io"})
        assert exc.value.field == "website"


class TestSignup:

    def test_admin_cannot_sign_up(self):
        with pytest.raises(ValidationFailed) as exc:
            validate(SignupRequest, {"email": "root@internhub.io", "password": "secret123", "role": "admin"})
        assert exc.value.field == "role"

    def test_short_password(self):
        with pytest.raises(ValidationFailed) as exc:
            validate(SignupRequest, {
                "email": "a@internhub.io", "password": "12345", "role": "student", "full_name": "A",
            })
        assert exc.value.message == "Password must be at least 6 characters"

    def test_role_requires_display_name(self):
        with pytest.raises(ValidationFailed) as exc:
            validate(SignupRequest, {"email": "c@internhub.io", "password": "secret123", "role": "company"})
        assert exc.value.message == "Please enter your company name"


class TestApiErrors:

    def test_invalid_posting_returns_detail_and_field(self, client, company):
        resp = client.post("/api/internships", json=internship_payload(title="ab"), headers=company)
        assert resp.status_code == 422
        body = resp.json()
        assert body == {
            "detail": "Title must be at least 3 characters",
            "code": "VALIDATION_ERROR",
            "field": "title",
        }

    def test_non_text_location_returns_422(self, client, company):
        resp = client.post("/api/internships", json=internship_payload(location=123), headers=company)
        assert resp.status_code == 422
        assert resp.json()["field"] == "location"

    def test_nothing_is_stored_on_failure(self, client, company):
        client.post("/api/internships", json=internship_payload(location="", is_remote=False), headers=company)
        assert client.get("/api/companies/internships", headers=company).json() == []

    def test_remote_posting_stored_as_remote(self, client, company):
        resp = client.post(
            "/api/internships", json=internship_payload(location="Somewhere", is_remote=True), headers=company
        )
        assert resp.status_code == 201
        assert resp.json()["location"] == "Remote"
