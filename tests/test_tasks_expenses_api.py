"""Tenant isolation through the reference task and expense endpoints."""

import pytest

from api_helpers import auth_headers, complete_setup, provision, register_owner


@pytest.fixture
def two_tenants(client):
    ada = register_owner(client, "ada@example.com", "Acme")
    zed = register_owner(client, "zed@example.com", "Other")
    return ada, zed


@pytest.mark.db
def test_tasks_are_isolated_between_organizations(client, two_tenants):
    ada, zed = two_tenants

    created = client.post(
        "/tasks",
        json={"title": "Ship onboarding", "priority": "high"},
        headers=auth_headers(ada["token"]),
    )
    assert created.status_code == 201
    task = created.json()
    assert task["organizationId"] == ada["activeOrganization"]["id"]
    assert task["createdById"] == ada["user"]["id"]
    assert task["status"] == "todo"

    zed_headers = auth_headers(zed["token"])
    assert client.get(f"/tasks/{task['id']}", headers=zed_headers).status_code == 404
    assert client.put(f"/tasks/{task['id']}", json={"title": "x"}, headers=zed_headers).status_code == 404
    assert client.delete(f"/tasks/{task['id']}", headers=zed_headers).status_code == 404
    assert client.get("/tasks", headers=zed_headers).json() == []

    ada_list = client.get("/tasks", headers=auth_headers(ada["token"])).json()
    assert [t["id"] for t in ada_list] == [task["id"]]


@pytest.mark.db
def test_task_assignee_must_be_active_member(client, two_tenants):
    ada, zed = two_tenants
    headers = auth_headers(ada["token"])

    foreign = client.post(
        "/tasks",
        json={"title": "Review", "assignedToId": zed["user"]["id"]},
        headers=headers,
    )
    assert foreign.status_code == 400
    assert foreign.json()["error"]["code"] == "VALIDATION_ERROR"

    provisioned = provision(client, ada["token"], "ben@example.com", name="Ben")
    pending = client.post(
        "/tasks",
        json={"title": "Review", "assignedToId": provisioned["userId"]},
        headers=headers,
    )
    assert pending.status_code == 400

    complete_setup(client, provisioned["setupToken"])
    assigned = client.post(
        "/tasks",
        json={"title": "Review", "assignedToId": provisioned["userId"]},
        headers=headers,
    )
    assert assigned.status_code == 201
    assert assigned.json()["assignedToId"] == provisioned["userId"]

    filtered = client.get(f"/tasks?assignedToId={provisioned['userId']}", headers=headers).json()
    assert [t["id"] for t in filtered] == [assigned.json()["id"]]


@pytest.mark.db
def test_task_update_and_delete(client, two_tenants):
    ada, _ = two_tenants
    headers = auth_headers(ada["token"])
    task = client.post("/tasks", json={"title": "Draft plan"}, headers=headers).json()

    updated = client.put(f"/tasks/{task['id']}", json={"status": "completed"}, headers=headers)
    assert updated.status_code == 200
    assert updated.json()["status"] == "completed"
    assert updated.json()["completedAt"] is not None
    assert updated.json()["title"] == "Draft plan"

    reopened = client.put(f"/tasks/{task['id']}", json={"status": "in_progress"}, headers=headers)
    assert reopened.json()["completedAt"] is None

    assert client.delete(f"/tasks/{task['id']}", headers=headers).status_code == 204
    assert client.get(f"/tasks/{task['id']}", headers=headers).status_code == 404


@pytest.mark.db
def test_tasks_require_authentication(client):
    response = client.get("/tasks")

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHENTICATED"


@pytest.mark.db
def test_expenses_are_isolated_and_summarized(client, two_tenants):
    ada, zed = two_tenants
    ada_headers = auth_headers(ada["token"])
    zed_headers = auth_headers(zed["token"])

    for amount, category in (("1200.50", "Tech Infrastructure"), ("300.00", "Tech Infrastructure"), ("99.99", "Other")):
        response = client.post(
            "/expenses",
            json={
                "expenseDate": "2026-04-15",
                "amount": amount,
                "category": category,
                "description": "Monthly spend",
            },
            headers=ada_headers,
        )
        assert response.status_code == 201, response.text
        assert response.json()["currency"] == "INR"

    foreign = client.post(
        "/expenses",
        json={
            "expenseDate": "2026-04-15",
            "amount": "5000",
            "category": "Other",
            "description": "Not Acme's",
            "currency": "USD",
        },
        headers=zed_headers,
    )
    assert foreign.status_code == 201
    assert foreign.json()["currency"] == "USD"

    summary = client.get("/expenses/summary", headers=ada_headers).json()
    assert float(summary["total"]) == pytest.approx(1600.49)
    assert summary["count"] == 3
    by_category = {row["category"]: row for row in summary["categories"]}
    assert float(by_category["Tech Infrastructure"]["total"]) == pytest.approx(1500.50)
    assert by_category["Tech Infrastructure"]["count"] == 2

    assert len(client.get("/expenses", headers=ada_headers).json()) == 3
    assert client.get(f"/expenses/{foreign.json()['id']}", headers=ada_headers).status_code == 404


@pytest.mark.db
def test_expense_validation(client, two_tenants):
    ada, _ = two_tenants

    response = client.post(
        "/expenses",
        json={"expenseDate": "2026-04-15", "amount": "-5", "category": "Other", "description": "Refund"},
        headers=auth_headers(ada["token"]),
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"
