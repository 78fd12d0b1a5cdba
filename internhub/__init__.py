"""
InternHub
A job board connecting students and companies around internship postings.

Architecture:
- Relational store: accounts, profiles, internships, applications
- Filter composer: search over active postings with sanitized LIKE patterns
- Application workflow: applied -> reviewed -> accepted | rejected
"""

__version__ = "1.0.0"
