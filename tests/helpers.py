"""Shared request helpers for the API tests."""


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def signup(client, role: str, email: str, name: str = "Test User") -> dict:
    body = {"email": email, "password": "secret123", "role": role}
    if role == "student":
        body["full_name"] = name
    else:
        body["company_name"] = name
    resp = client.post("/api/auth/signup", json=body)
    assert resp.status_code == 201, resp.text
    return auth_headers(resp.json()["access_token"])


def internship_payload(**overrides) -> dict:
    payload = {
        "title": "Backend Intern",
        "description": "Build and test REST APIs with the platform team.",
        "location": "Berlin",
        "is_remote": False,
        "is_paid": True,
        "industry": "Technology",
    }
    payload.update(overrides)
    return payload


def post_internship(client, headers, **overrides) -> dict:
    resp = client.post("/api/internships", json=internship_payload(**overrides), headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()
