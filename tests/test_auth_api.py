"""HTTP tests for the authentication endpoints."""

import asyncio
import uuid

import pytest
from sqlalchemy import func, select

from api_helpers import (
    MEMBER_PASSWORD,
    OWNER_PASSWORD,
    auth_headers,
    complete_setup,
    login,
    provision,
    register_owner,
)
from app.core.jwt import session_tokens
from app.models.enums import MembershipRole, MembershipStatus
from app.models.membership import Membership
from app.models.organization import Organization
from app.models.principal import Principal


def count_rows(session_factory, model):
    async def main():
        async with session_factory() as db:
            return await db.scalar(select(func.count()).select_from(model))

    return asyncio.run(main())


@pytest.mark.db
def test_register_owner_returns_token_and_context(client):
    body = register_owner(client, "ada@example.com", "Acme", name="Ada")

    assert body["token"]
    assert body["user"]["email"] == "ada@example.com"
    assert body["user"]["isAccountActive"] is True
    assert "passwordHash" not in body["user"]
    assert body["activeOrganization"]["name"] == "Acme"
    assert body["activeOrganization"]["role"] == "owner"
    assert body["activeOrganization"]["currency"] == "INR"
    assert body["activeOrganization"]["timezone"] == "Asia/Kolkata"
    assert body["memberships"] == [
        {
            "organizationId": body["activeOrganization"]["id"],
            "organizationName": "Acme",
            "role": "owner",
        }
    ]

    claims = session_tokens.verify(body["token"])
    assert str(claims.principal_id) == body["user"]["id"]
    assert str(claims.organization_id) == body["activeOrganization"]["id"]


@pytest.mark.db
def test_duplicate_registration_leaves_store_unchanged(client, session_factory):
    register_owner(client, "ada@example.com", "Acme")
    before = [count_rows(session_factory, m) for m in (Principal, Organization, Membership)]

    response = client.post(
        "/auth/register-owner",
        json={
            "name": "Ada Again",
            "email": "ADA@example.com",
            "password": OWNER_PASSWORD,
            "organizationName": "Acme Two",
        },
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "DUPLICATE_EMAIL"
    after = [count_rows(session_factory, m) for m in (Principal, Organization, Membership)]
    assert after == before


@pytest.mark.db
def test_register_validation_errors(client, session_factory):
    short = client.post(
        "/auth/register-owner",
        json={"name": "Ada", "email": "ada@example.com", "password": "1234567", "organizationName": "Acme"},
    )
    assert short.status_code == 400
    assert short.json()["error"]["code"] == "VALIDATION_ERROR"

    missing = client.post("/auth/register-owner", json={"name": "Ada", "email": "ada@example.com"})
    assert missing.status_code == 400
    assert missing.json()["error"]["code"] == "VALIDATION_ERROR"
    assert missing.json()["error"]["details"]["errors"]

    bad_currency = client.post(
        "/auth/register-owner",
        json={
            "name": "Ada",
            "email": "ada@example.com",
            "password": OWNER_PASSWORD,
            "organizationName": "Acme",
            "currency": "JPY",
        },
    )
    assert bad_currency.status_code == 400

    bad_timezone = client.post(
        "/auth/register-owner",
        json={
            "name": "Ada",
            "email": "ada@example.com",
            "password": OWNER_PASSWORD,
            "organizationName": "Acme",
            "timezone": "Mars/Olympus_Mons",
        },
    )
    assert bad_timezone.status_code == 400
    assert count_rows(session_factory, Principal) == 0


@pytest.mark.db
def test_login_picks_persisted_active_organization(client):
    registered = register_owner(client, "ada@example.com", "Acme")

    body = login(client, "Ada@Example.com", OWNER_PASSWORD)

    assert body["activeOrganization"]["id"] == registered["activeOrganization"]["id"]
    assert body["user"]["lastLoginAt"] is not None


@pytest.mark.db
def test_login_failures_are_indistinguishable(client):
    register_owner(client, "ada@example.com", "Acme")

    wrong_password = client.post("/auth/login", json={"email": "ada@example.com", "password": "nope-nope"})
    unknown_email = client.post("/auth/login", json={"email": "zed@example.com", "password": "nope-nope"})

    assert wrong_password.status_code == 401
    assert unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json()
    assert wrong_password.json()["error"]["code"] == "UNAUTHENTICATED"


@pytest.mark.db
def test_login_before_setup_is_setup_incomplete(client):
    owner = register_owner(client, "ada@example.com", "Acme")
    provision(client, owner["token"], "ben@example.com", name="Ben")

    response = client.post("/auth/login", json={"email": "ben@example.com", "password": MEMBER_PASSWORD})

    assert response.status_code == 403
    error = response.json()["error"]
    assert error["code"] == "SETUP_INCOMPLETE"
    assert error["details"]["actionRequired"] == "COMPLETE_ACCOUNT_SETUP"
    assert "token" not in response.json()


@pytest.mark.db
def test_complete_setup_activates_member(client):
    owner = register_owner(client, "ada@example.com", "Acme")
    provisioned = provision(client, owner["token"], "ben@example.com", name="Ben")

    body = complete_setup(client, provisioned["setupToken"])

    assert body["token"]
    assert body["user"]["isAccountActive"] is True
    assert body["activeOrganization"]["id"] == owner["activeOrganization"]["id"]
    assert body["activeOrganization"]["role"] == "member"
    assert body["user"]["defaultOrganizationId"] == owner["activeOrganization"]["id"]

    again = client.post(f"/auth/complete-setup/{provisioned['setupToken']}", json={"password": MEMBER_PASSWORD})
    assert again.status_code == 400
    assert again.json()["error"]["code"] == "INVALID_TOKEN"

    assert login(client, "ben@example.com", MEMBER_PASSWORD)["activeOrganization"]["role"] == "member"


@pytest.mark.db
def test_complete_setup_with_unknown_token(client):
    response = client.post("/auth/complete-setup/" + "0" * 64, json={"password": MEMBER_PASSWORD})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_TOKEN"


@pytest.mark.db
def test_me_requires_valid_bearer_token(client):
    assert client.get("/auth/me").status_code == 401
    assert client.get("/auth/me").json()["error"]["code"] == "UNAUTHENTICATED"

    bad = client.get("/auth/me", headers=auth_headers("garbage"))
    assert bad.status_code == 401
    assert bad.json()["error"]["code"] == "INVALID_TOKEN"


@pytest.mark.db
def test_me_returns_profile(client):
    owner = register_owner(client, "ada@example.com", "Acme", name="Ada")

    response = client.get("/auth/me", headers=auth_headers(owner["token"]))

    assert response.status_code == 200
    body = response.json()
    assert body["token"] is None
    assert body["user"]["name"] == "Ada"
    assert body["activeOrganization"]["role"] == "owner"


@pytest.mark.db
def test_me_allows_inactive_principal_but_other_routes_do_not(client):
    owner = register_owner(client, "ada@example.com", "Acme")
    provisioned = provision(client, owner["token"], "ben@example.com", name="Ben")
    token, _ = session_tokens.mint(uuid.UUID(provisioned["userId"]))

    me = client.get("/auth/me", headers=auth_headers(token))
    assert me.status_code == 200
    assert me.json()["user"]["isAccountActive"] is False

    tasks = client.get("/tasks", headers=auth_headers(token))
    assert tasks.status_code == 403
    assert tasks.json()["error"]["code"] == "SETUP_INCOMPLETE"


@pytest.mark.db
def test_switch_active_organization(client, session_factory):
    ada = register_owner(client, "ada@example.com", "Acme")
    bob = register_owner(client, "bob@example.com", "Beta")
    ada_id = ada["user"]["id"]
    beta_id = bob["activeOrganization"]["id"]

    # Foreign organization: not found, nothing leaks
    denied = client.post(
        "/auth/set-active-organization",
        json={"organizationId": beta_id},
        headers=auth_headers(ada["token"]),
    )
    assert denied.status_code == 404

    async def join_beta():
        async with session_factory() as db:
            db.add(
                Membership(
                    principal_id=uuid.UUID(ada_id),
                    organization_id=uuid.UUID(beta_id),
                    role=MembershipRole.MEMBER,
                    status=MembershipStatus.ACTIVE,
                    invited_by_id=uuid.UUID(bob["user"]["id"]),
                )
            )
            await db.commit()

    asyncio.run(join_beta())

    switched = client.post(
        "/auth/set-active-organization",
        json={"organizationId": beta_id},
        headers=auth_headers(ada["token"]),
    )
    assert switched.status_code == 200
    body = switched.json()
    assert body["activeOrganization"]["id"] == beta_id
    assert body["activeOrganization"]["role"] == "member"
    assert {m["organizationName"] for m in body["memberships"]} == {"Acme", "Beta"}

    # The old token still works and still points at Acme
    old = client.get("/organizations/my", headers=auth_headers(ada["token"]))
    assert old.json()["organization"]["name"] == "Acme"
    new = client.get("/organizations/my", headers=auth_headers(body["token"]))
    assert new.json()["organization"]["name"] == "Beta"

    # Login now lands on the persisted choice
    assert login(client, "ada@example.com", OWNER_PASSWORD)["activeOrganization"]["id"] == beta_id


@pytest.mark.db
@pytest.mark.parametrize("timezone", ["America", "Europe", "x" * 300])
def test_register_rejects_non_zone_timezone_names(client, session_factory, timezone):
    response = client.post(
        "/auth/register-owner",
        json={
            "name": "Ada",
            "email": "ada@example.com",
            "password": OWNER_PASSWORD,
            "organizationName": "Acme",
            "timezone": timezone,
        },
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"
    assert count_rows(session_factory, Principal) == 0
