"""
Filter composer tests: sanitizing, tri-state flags and search behavior.
"""

from sqlalchemy import update

from internhub.db.session import get_db_session
from internhub.db.tables import internships
from internhub.schemas.schemas import InternshipFilter
from internhub.services.filter_composer import compose_internship_query, escape_like, sanitize_search_input
from tests.helpers import post_internship


def _titles(client, **params):
    resp = client.get("/api/internships", params=params)
    assert resp.status_code == 200, resp.text
    return [i["title"] for i in resp.json()]


class TestSanitizing:

    def test_escapes_like_metacharacters(self):
        assert escape_like("50%") == "50\\%"
        assert escape_like("data_science") == "data\\_science"
        assert escape_like("a\\b") == "a\\\\b"

    def test_backslash_escaped_before_percent(self):
        # a raw "\%" must become an escaped backslash followed by an escaped percent
        assert escape_like("\\%") == "\\\\\\%"

    def test_trims_and_caps_before_escaping(self):
        assert sanitize_search_input("  python  ") == "python"
        assert len(sanitize_search_input("a" * 150)) == 100
        assert sanitize_search_input("%" * 150) == "\\%" * 100

    def test_blank_input_yields_nothing(self):
        assert sanitize_search_input(None) == ""
        assert sanitize_search_input("") == ""
        assert sanitize_search_input("    ") == ""

    def test_custom_cap(self):
        assert sanitize_search_input("abcdef", max_length=3) == "abc"

    def test_substring_clauses_declare_escape(self):
        sql = str(compose_internship_query(InternshipFilter(keyword="x", location="y")))
        assert sql.count("ESCAPE") == 3

    def test_false_flags_add_no_clause(self):
        plain = str(compose_internship_query(InternshipFilter()))
        with_false = str(compose_internship_query(InternshipFilter(is_remote=False, is_paid=False)))
        assert plain == with_false


class TestSearch:

    def test_only_active_postings_newest_first(self, client, company):
        first = post_internship(client, company, title="First posting")
        post_internship(client, company, title="Second posting")
        hidden = post_internship(client, company, title="Closed posting")
        client.put(f"/api/internships/{hidden['id']}", json={"is_active": False}, headers=company)

        assert _titles(client) == ["Second posting", "First posting"]
        assert first["company"]["company_name"] == "Acme Corp"

    def test_results_carry_company_public_fields(self, client, company):
        post_internship(client, company)
        result = client.get("/api/internships").json()[0]
        assert set(result["company"]) >= {"company_name", "logo_url", "industry"}

    def test_keyword_matches_title_or_description_case_insensitive(self, client, company):
        post_internship(client, company, title="Python Developer Intern")
        post_internship(client, company, title="Design Intern", description="Work with our PYTHON tooling team.")
        post_internship(client, company, title="Sales Intern", description="Talk to customers every single day.")

        assert sorted(_titles(client, keyword="python")) == ["Design Intern", "Python Developer Intern"]

    def test_q_alias_for_keyword(self, client, company):
        post_internship(client, company, title="Data Intern")
        post_internship(client, company, title="Sales Intern")
        assert _titles(client, q="data") == ["Data Intern"]
        assert _titles(client, keyword="", q="data") == ["Data Intern"]

    def test_literal_percent_matches_only_literal(self, client, company):
        post_internship(client, company, title="50% remote bonus")
        post_internship(client, company, title="500 remote bonus")

        assert _titles(client, keyword="50%") == ["50% remote bonus"]

    def test_literal_underscore_matches_only_literal(self, client, company):
        post_internship(client, company, title="data_science intern")
        post_internship(client, company, title="dataXscience intern")

        assert _titles(client, keyword="data_science") == ["data_science intern"]

    def test_location_substring(self, client, company):
        post_internship(client, company, title="Berlin role", location="Berlin, Germany")
        post_internship(client, company, title="Paris role", location="Paris, France")

        assert _titles(client, location="germany") == ["Berlin role"]

    def test_industry_is_exact(self, client, company):
        post_internship(client, company, title="Tech role", industry="Technology")
        post_internship(client, company, title="Fin role", industry="Finance")
        post_internship(client, company, title="Fintech role", industry="Finance Technology")

        assert _titles(client, industry="Finance") == ["Fin role"]

    def test_filters_combine(self, client, company):
        post_internship(client, company, title="Python Berlin", location="Berlin")
        post_internship(client, company, title="Python Paris", location="Paris")
        post_internship(client, company, title="Java Berlin", location="Berlin")

        assert _titles(client, keyword="python", location="berlin") == ["Python Berlin"]


class TestTriStateFlags:

    def _seed(self, client, company):
        post_internship(client, company, title="remote paid", is_remote=True, is_paid=True)
        post_internship(client, company, title="onsite unpaid", is_remote=False, is_paid=False)
        unknown = post_internship(client, company, title="unknown flags")
        with get_db_session() as db:
            db.execute(
                update(internships)
                .where(internships.c.id == unknown["id"])
                .values(is_remote=None, is_paid=None)
            )

    def test_none_never_excludes(self, client, company):
        self._seed(client, company)
        assert len(_titles(client)) == 3

    def test_false_does_not_filter(self, client, company):
        self._seed(client, company)
        assert len(_titles(client, is_remote="false", is_paid="false")) == 3

    def test_true_excludes_false_and_null(self, client, company):
        self._seed(client, company)
        assert _titles(client, is_remote="true") == ["remote paid"]
        assert _titles(client, is_paid="true") == ["remote paid"]
