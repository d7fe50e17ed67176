"""HTTP tests for the v1 API through FastAPI's TestClient."""

from typing import Generator
from unittest.mock import MagicMock

import pytest
import stripe
from fastapi.testclient import TestClient

from teamhub.api.dependencies import Container
from teamhub.api.main import create_app
from teamhub.teams.models import Role, Team

from conftest import OWNER_ID, make_customer, make_event, make_subscription


def _as(user_id: str) -> dict[str, str]:
    return {"X-User-Id": user_id}


OWNER = _as(OWNER_ID)


@pytest.fixture
def client(container: Container) -> Generator[TestClient, None, None]:
    with TestClient(create_app(container=container)) as test_client:
        yield test_client


class TestHealth:
    """Tests for /health and the identity header."""

    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.headers["X-Frame-Options"] == "DENY"

    def test_missing_identity(self, client: TestClient) -> None:
        response = client.get("/api/v1/user/profile", params={"email": "a@example.com"})

        assert response.status_code == 401

    def test_request_id_generated(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.headers["X-Request-ID"]

    def test_request_id_echoed(self, client: TestClient) -> None:
        response = client.get("/health", headers={"X-Request-ID": "req-abc"})

        assert response.headers["X-Request-ID"] == "req-abc"

    def test_request_id_on_error_response(self, client: TestClient) -> None:
        response = client.get("/api/v1/user/profile", params={"email": "a@example.com"}, headers={"X-Request-ID": "req-401"})

        assert response.status_code == 401
        assert response.headers["X-Request-ID"] == "req-401"


class TestUserEndpoints:
    """Tests for /user."""

    def test_profile_provisions_default_team(self, client: TestClient) -> None:
        response = client.get("/api/v1/user/profile", params={"email": "a@example.com"}, headers=_as("alice"))

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == "alice"
        assert [team["displayName"] for team in body["teamList"]] == ["New Team"]

    def test_profile_rejects_bad_email(self, client: TestClient) -> None:
        response = client.get("/api/v1/user/profile", params={"email": "not-an-email"}, headers=_as("alice"))

        assert response.status_code == 400
        assert response.json()["errors"][0]["param"] == "email"

    def test_update_email(self, client: TestClient, container: Container, team: Team) -> None:
        response = client.put("/api/v1/user/email", json={"email": "new@example.com"}, headers=OWNER)

        assert response.status_code == 200
        assert container.member_repository.find_by_keys(team.id, OWNER_ID).email == "new@example.com"


class TestTeamEndpoints:
    """Tests for /team."""

    def test_create_and_list(self, client: TestClient, owner) -> None:
        response = client.post(
            "/api/v1/team/create",
            json={"displayName": "Acme", "userEmail": "owner@example.com"},
            headers=OWNER,
        )
        assert response.status_code == 200
        team_id = response.json()["id"]

        response = client.get(f"/api/v1/team/{team_id}/list-members", headers=OWNER)

        assert response.status_code == 200
        body = response.json()
        assert body["list"] == [{"memberId": OWNER_ID, "email": "owner@example.com", "role": "OWNER"}]
        assert body["inviteList"] == []
        assert body["role"] == "OWNER"

    def test_non_member_gets_403(self, client: TestClient, container: Container, team: Team) -> None:
        container.user_repository.create_with_user_id("outsider")

        response = client.get(f"/api/v1/team/{team.id}/list-members", headers=_as("outsider"))

        assert response.status_code == 403
        assert response.json() == {"errors": "not_member"}

    def test_invite_and_join(self, client: TestClient, container: Container, team: Team, email_service: MagicMock) -> None:
        """Full invitation round trip over HTTP."""
        response = client.post(
            f"/api/v1/team/{team.id}/invite",
            json={"email": "e2@example.com", "role": "ADMIN"},
            headers=OWNER,
        )
        assert response.status_code == 200
        assert response.json()["status"] == "PENDING"
        email_service.send.assert_awaited_once()

        invites = client.get(f"/api/v1/team/{team.id}/list-members", headers=OWNER).json()["inviteList"]
        code = invites[0]["memberId"]

        response = client.get(f"/api/v1/team/{team.id}/join/{code}")
        assert response.json() == {"displayName": "Acme"}

        container.user_repository.create_with_user_id("u2")
        response = client.post(
            f"/api/v1/team/{team.id}/join/{code}",
            json={"email": "e3@example.com"},
            headers=_as("u2"),
        )
        assert response.status_code == 200
        assert response.json()["role"] == "ADMIN"
        assert response.json()["email"] == "e3@example.com"

        response = client.get(f"/api/v1/team/{team.id}/join/{code}")
        assert response.status_code == 400
        assert response.json() == {"errors": "incorrect_code"}

    def test_invite_owner_role_rejected(self, client: TestClient, team: Team) -> None:
        response = client.post(
            f"/api/v1/team/{team.id}/invite",
            json={"email": "e2@example.com", "role": "OWNER"},
            headers=OWNER,
        )

        assert response.status_code == 400
        assert response.json() == {"errors": "incorrect_data"}

    def test_read_only_cannot_invite(self, client: TestClient, team: Team, add_member) -> None:
        add_member("reader", Role.READ_ONLY)

        response = client.post(
            f"/api/v1/team/{team.id}/invite",
            json={"email": "e2@example.com", "role": "READ_ONLY"},
            headers=_as("reader"),
        )

        assert response.status_code == 403
        assert response.json() == {"errors": "incorrect_permission"}

    def test_edit_owner_looks_like_unknown_member(self, client: TestClient, team: Team, add_member) -> None:
        add_member("admin", Role.ADMIN)

        response = client.put(
            f"/api/v1/team/{team.id}/edit/{OWNER_ID}",
            json={"role": "READ_ONLY"},
            headers=_as("admin"),
        )

        assert response.status_code == 404
        assert response.json() == {"errors": "incorrect_member_id"}

    def test_remove_member(self, client: TestClient, container: Container, team: Team, add_member) -> None:
        add_member("u2", Role.READ_ONLY)

        response = client.delete(f"/api/v1/team/{team.id}/remove/u2", headers=OWNER)

        assert response.status_code == 200
        assert container.member_repository.find_by_keys(team.id, "u2") is None

    def test_transfer_ownership_owner_only(self, client: TestClient, team: Team, add_member) -> None:
        add_member("admin", Role.ADMIN)
        add_member("reader", Role.READ_ONLY)

        response = client.put(f"/api/v1/team/{team.id}/transfer-ownership/reader", headers=_as("admin"))
        assert response.status_code == 403

        response = client.put(f"/api/v1/team/{team.id}/transfer-ownership/admin", headers=OWNER)
        assert response.status_code == 200

        body = client.get(f"/api/v1/team/{team.id}/list-members", headers=OWNER).json()
        assert body["role"] == "ADMIN"

    def test_settings_and_rename(self, client: TestClient, team: Team) -> None:
        response = client.put(f"/api/v1/team/{team.id}/name", json={"displayName": "Acme Corp"}, headers=OWNER)
        assert response.json()["displayName"] == "Acme Corp"

        response = client.get(f"/api/v1/team/{team.id}/settings", headers=OWNER)

        assert response.json() == {
            "planId": "FREE",
            "planName": "Free",
            "hasStripeCustomerId": False,
            "role": "OWNER",
        }

    def test_delete_team(self, client: TestClient, team: Team) -> None:
        response = client.delete(f"/api/v1/team/{team.id}", headers=OWNER)
        assert response.status_code == 200

        response = client.get(f"/api/v1/team/{team.id}/list-members", headers=OWNER)
        assert response.status_code == 403


class TestBillingEndpoints:
    """Tests for checkout, the portal and the webhook."""

    def test_checkout_session(self, client: TestClient, team: Team, gateway: MagicMock) -> None:
        response = client.post(
            f"/api/v1/{team.id}/billing/create-checkout-session",
            json={"priceId": "price_1"},
            headers=OWNER,
        )

        assert response.status_code == 200
        assert response.json() == {"sessionId": "cs_test_123"}
        gateway.create_customer.assert_called_once()

    def test_portal_without_customer(self, client: TestClient, team: Team) -> None:
        response = client.post(f"/api/v1/{team.id}/billing/customer-portal", headers=OWNER)

        assert response.status_code == 400
        assert response.json() == {"errors": "incorrect_data"}

    def test_webhook_updates_plan(self, client: TestClient, team: Team, gateway: MagicMock) -> None:
        gateway.construct_event.return_value = make_event(
            "customer.subscription.updated", {"id": "sub_123", "object": "subscription"}
        )
        gateway.retrieve_subscription.return_value = make_subscription()
        gateway.retrieve_customer.return_value = make_customer(team.id)

        response = client.post(
            "/api/v1/billing/webhook",
            content=b'{"id": "evt_1"}',
            headers={"stripe-signature": "t=1,v1=abc"},
        )

        assert response.status_code == 200
        assert response.json() == {"received": True}
        gateway.construct_event.assert_called_once_with(b'{"id": "evt_1"}', "t=1,v1=abc", "whsec_test")

        settings = client.get(f"/api/v1/team/{team.id}/settings", headers=OWNER).json()
        assert settings["planId"] == "PRO"

    def test_webhook_bad_signature(self, client: TestClient, gateway: MagicMock) -> None:
        gateway.construct_event.side_effect = stripe.SignatureVerificationError("bad", "t=1,v1=abc")

        response = client.post(
            "/api/v1/billing/webhook",
            content=b"{}",
            headers={"stripe-signature": "t=1,v1=abc"},
        )

        assert response.status_code == 400
        assert response.json() == {"errors": "incorrect_stripe_signature"}

    def test_webhook_unrecognized_event(self, client: TestClient, gateway: MagicMock) -> None:
        gateway.construct_event.return_value = make_event("invoice.paid", {"id": "in_1", "object": "invoice"})

        response = client.post(
            "/api/v1/billing/webhook",
            content=b"{}",
            headers={"stripe-signature": "t=1,v1=abc"},
        )

        assert response.status_code == 400
        assert response.json() == {"errors": "incorrect_stripe_event"}


class TestTodoEndpoints:
    """Tests for /{teamId}/todo."""

    def test_create_and_list(self, client: TestClient, team: Team) -> None:
        response = client.post(f"/api/v1/{team.id}/todo", json={"title": "Ship it"}, headers=OWNER)
        assert response.status_code == 200
        todo_id = response.json()["id"]

        response = client.get(f"/api/v1/{team.id}/todo", headers=OWNER)

        assert response.json() == {"list": [{"id": todo_id, "ownerId": team.id, "title": "Ship it"}]}

    def test_unknown_todo(self, client: TestClient, team: Team) -> None:
        response = client.get(f"/api/v1/{team.id}/todo/missing", headers=OWNER)

        assert response.status_code == 404
        assert response.json() == {"errors": "incorrect_todo_id"}
