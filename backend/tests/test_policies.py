"""Tests for the policies API."""

from datetime import timedelta

import pytest

from app.models.customer import Policy
from app.models.payment import Payment


class TestCreatePolicy:
    """Tests for adding policies to a customer."""

    def test_create(self, client, customer, policy, today) -> None:
        assert policy["customer_id"] == customer["id"]
        assert policy["policy_number"] == "LIC-100234"
        assert policy["premium"] == 1200.0
        assert policy["mode"] == "Monthly"
        assert policy["annual_premium"] == 14400.0
        assert policy["sum_assured"] == 500000.0
        assert policy["status"] == "Active"
        assert policy["due_date"] == (today + timedelta(days=20)).isoformat()
        assert policy["days_until_due"] == 20
        assert policy["health"] == "on_track"

    def test_defaults(self, client, customer, today) -> None:
        response = client.post(
            f"/api/customers/{customer['id']}/policies/",
            json={"policy_number": "X-1", "premium": 500, "due_date": today.isoformat()},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["mode"] == "Monthly"
        assert data["sum_assured"] == 0.0
        assert data["plan_name"] is None
        assert data["health"] == "due_soon"

    @pytest.mark.parametrize(
        "payload",
        [
            {"premium": 500, "due_date": "2025-12-01"},
            {"policy_number": "X", "due_date": "2025-12-01"},
            {"policy_number": "X", "premium": 500},
            {"policy_number": "X", "premium": 0, "due_date": "2025-12-01"},
            {"policy_number": "X", "premium": -10, "due_date": "2025-12-01"},
            {"policy_number": "X", "premium": 500, "due_date": "2025-12-01", "mode": "Weekly"},
            {"policy_number": "X", "premium": 500, "due_date": "2025-12-01", "sum_assured": -1},
        ],
    )
    def test_invalid_payload(self, client, customer, payload) -> None:
        response = client.post(f"/api/customers/{customer['id']}/policies/", json=payload)
        assert response.status_code == 422

    def test_unknown_customer(self, client) -> None:
        response = client.post(
            "/api/customers/999/policies/",
            json={"policy_number": "X", "premium": 500, "due_date": "2025-12-01"},
        )
        assert response.status_code == 404


class TestReadPolicies:
    """Tests for listing and fetching policies."""

    def test_list_soonest_due_first(self, client, customer, policy, today) -> None:
        client.post(
            f"/api/customers/{customer['id']}/policies/",
            json={"policy_number": "EARLY", "premium": 100, "due_date": (today - timedelta(days=2)).isoformat()},
        )

        data = client.get(f"/api/customers/{customer['id']}/policies/").json()

        assert data["total"] == 2
        assert [p["policy_number"] for p in data["policies"]] == ["EARLY", "LIC-100234"]
        assert data["policies"][0]["health"] == "overdue"

    def test_get_with_reference_date(self, client, customer, policy, today) -> None:
        as_of = (today + timedelta(days=15)).isoformat()

        data = client.get(f"/api/customers/{customer['id']}/policies/{policy['id']}?as_of={as_of}").json()

        assert data["days_until_due"] == 5
        assert data["health"] == "due_soon"

    def test_policy_of_other_customer_not_found(self, client, policy) -> None:
        other = client.post("/api/customers/", json={"name": "Other", "phone": "2"}).json()

        response = client.get(f"/api/customers/{other['id']}/policies/{policy['id']}")

        assert response.status_code == 404
        assert response.json()["detail"] == "Policy not found"


class TestUpdatePolicy:
    """Tests for editing policies."""

    def test_update_fields(self, client, customer, policy) -> None:
        response = client.patch(
            f"/api/customers/{customer['id']}/policies/{policy['id']}",
            json={"premium": 3000, "mode": "Quarterly", "notes": "Moved to quarterly"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["premium"] == 3000.0
        assert data["mode"] == "Quarterly"
        assert data["annual_premium"] == 12000.0
        assert data["notes"] == "Moved to quarterly"
        assert data["policy_number"] == "LIC-100234"

    def test_save_reactivates(self, client, db_session, customer, policy) -> None:
        stored = db_session.get(Policy, policy["id"])
        stored.status = "Lapsed"
        db_session.commit()

        data = client.patch(
            f"/api/customers/{customer['id']}/policies/{policy['id']}",
            json={"plan_name": "Jeevan Labh"},
        ).json()

        assert data["status"] == "Active"
        assert data["plan_name"] == "Jeevan Labh"

    def test_non_positive_premium_rejected(self, client, customer, policy) -> None:
        response = client.patch(
            f"/api/customers/{customer['id']}/policies/{policy['id']}",
            json={"premium": 0},
        )
        assert response.status_code == 422


class TestDeletePolicy:
    """Tests for deleting policies."""

    def test_delete_removes_payments(self, client, db_session, customer, policy) -> None:
        base = f"/api/customers/{customer['id']}/policies/{policy['id']}"
        client.post(f"{base}/payments", json={"amount": 100})

        response = client.delete(base)

        assert response.status_code == 200
        assert response.json()["payments_deleted"] == 1
        assert client.get(base).status_code == 404
        db_session.expire_all()
        assert db_session.query(Payment).count() == 0

    def test_delete_missing(self, client, customer) -> None:
        assert client.delete(f"/api/customers/{customer['id']}/policies/999").status_code == 404
