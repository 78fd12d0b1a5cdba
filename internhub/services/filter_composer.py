"""
Filter Composer - InternshipFilter -> SELECT over active internships.

Clauses (all ANDed):
- keyword   -> title ILIKE %kw% OR description ILIKE %kw%
- location  -> location ILIKE %loc%
- industry  -> industry = :industry (exact)
- is_remote / is_paid -> flag IS TRUE, only when the filter is True

Free text is sanitized before it goes into a LIKE pattern: trimmed, capped
at `max_length` characters, and every LIKE metacharacter escaped with a
backslash. Each substring clause declares that escape character, so a search
for "50%" only matches a literal "50%".
"""

from typing import List, Optional

from sqlalchemy import Select, or_, select, true

from internhub.core.config import get_settings
from internhub.db.tables import company_profiles, internships
from internhub.schemas.schemas import CompanySummary, InternshipFilter, InternshipResponse

LIKE_ESCAPE = "\\"
LIKE_METACHARACTERS = ("\\", "%", "_")

# Company columns joined onto every listing row
COMPANY_COLUMNS = [
    company_profiles.c.company_name.label("company_name"),
    company_profiles.c.logo_url.label("company_logo_url"),
    company_profiles.c.industry.label("company_industry"),
    company_profiles.c.description.label("company_description"),
    company_profiles.c.location.label("company_location"),
    company_profiles.c.website.label("company_website"),
]


def escape_like(value: str) -> str:
    """Escape LIKE metacharacters so they match literally."""
    # backslash first, otherwise the escapes added for % and _ get doubled
    for char in LIKE_METACHARACTERS:
        value = value.replace(char, LIKE_ESCAPE + char)
    return value


def sanitize_search_input(value: Optional[str], max_length: Optional[int] = None) -> str:
    """Trim, cap and escape untrusted search text. Returns "" for nothing to search."""
    if not value:
        return ""
    if max_length is None:
        max_length = get_settings().search_max_length
    return escape_like(value.strip()[:max_length])


def contains_pattern(sanitized: str) -> str:
    return f"%{sanitized}%"


def base_listing_query() -> Select:
    """Internships joined with their company's public fields."""
    return select(internships, *COMPANY_COLUMNS).join(
        company_profiles, internships.c.company_id == company_profiles.c.id
    )


def compose_filter_clauses(filters: InternshipFilter, max_length: Optional[int] = None) -> List:
    clauses = [internships.c.is_active == true()]

    keyword = sanitize_search_input(filters.keyword, max_length)
    if keyword:
        pattern = contains_pattern(keyword)
        clauses.append(or_(
            internships.c.title.ilike(pattern, escape=LIKE_ESCAPE),
            internships.c.description.ilike(pattern, escape=LIKE_ESCAPE),
        ))

    location = sanitize_search_input(filters.location, max_length)
    if location:
        clauses.append(internships.c.location.ilike(contains_pattern(location), escape=LIKE_ESCAPE))

    if filters.industry and filters.industry.strip():
        clauses.append(internships.c.industry == filters.industry.strip())

    # tri-state: only an explicit True narrows the result
    if filters.is_remote is True:
        clauses.append(internships.c.is_remote == true())
    if filters.is_paid is True:
        clauses.append(internships.c.is_paid == true())

    return clauses


def compose_internship_query(filters: Optional[InternshipFilter] = None, max_length: Optional[int] = None) -> Select:
    """Build the full listing query for `filters`, newest postings first."""
    filters = filters or InternshipFilter()
    return (
        base_listing_query()
        .where(*compose_filter_clauses(filters, max_length))
        .order_by(internships.c.created_at.desc(), internships.c.id.desc())
    )


def to_internship_response(row, include_company_details: bool = False) -> InternshipResponse:
    """Decode one joined listing row into the typed DTO."""
    data = dict(row)
    company = CompanySummary(
        id=data["company_id"],
        company_name=data.pop("company_name"),
        logo_url=data.pop("company_logo_url"),
        industry=data.pop("company_industry"),
        description=data.pop("company_description") if include_company_details else None,
        location=data.pop("company_location") if include_company_details else None,
        website=data.pop("company_website") if include_company_details else None,
    )
    return InternshipResponse(**data, company=company)
