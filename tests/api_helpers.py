"""Shared helpers for API tests."""

# Test credentials used across API tests
OWNER_PASSWORD = "owner-pass-123"
MEMBER_PASSWORD = "member-pass-123"


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def register_owner(client, email, organization_name, name="Owner", password=OWNER_PASSWORD) -> dict:
    """Register an owner over HTTP and return the response body."""
    response = client.post(
        "/auth/register-owner",
        json={
            "name": name,
            "email": email,
            "password": password,
            "organizationName": organization_name,
        },
    )
    assert response.status_code == 201, response.text
    return response.json()


def provision(client, token, email, name="Member", role="member") -> dict:
    response = client.post(
        "/organizations/my/members/provision",
        json={"email": email, "name": name, "role": role},
        headers=auth_headers(token),
    )
    assert response.status_code == 201, response.text
    return response.json()


def complete_setup(client, setup_token, password=MEMBER_PASSWORD) -> dict:
    response = client.post(f"/auth/complete-setup/{setup_token}", json={"password": password})
    assert response.status_code == 200, response.text
    return response.json()


def login(client, email, password) -> dict:
    response = client.post("/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()
