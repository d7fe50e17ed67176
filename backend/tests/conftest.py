"""Shared fixtures: a file-backed SQLite store and fake Stripe/SendGrid."""

from types import SimpleNamespace
from typing import Any, Callable, Generator
from unittest.mock import AsyncMock, MagicMock

import pytest
import stripe
import structlog

from teamhub.api.dependencies import Container, build_container
from teamhub.email.service import EmailService
from teamhub.payments.stripe_service import StripeGateway
from teamhub.settings import Settings
from teamhub.storage.db import Database
from teamhub.teams.models import Member, Role, Team
from teamhub.users.models import User

OWNER_ID = "user-owner"
OWNER_EMAIL = "owner@example.com"


@pytest.fixture(autouse=True)
def reset_structlog() -> Generator[None, None, None]:
    """Drop logging configuration applied by the app or CLI under test."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings for the test billing environment."""
    return Settings(
        env="test",
        database_url=f"sqlite:///{tmp_path / 'teamhub.db'}",
        stripe_secret_key="sk_test_dummy",
        stripe_webhook_secret="whsec_test",
        billing_plan_env="test",
        frontend_domain_url="https://app.example.com",
        site_name="Teamhub",
        sendgrid_api_key=None,
        log_level="WARNING",
    )


@pytest.fixture
def db(settings: Settings) -> Generator[Database, None, None]:
    database = Database(settings.database_url)
    database.create_tables()
    yield database
    database.drop_tables()
    database.dispose()


@pytest.fixture
def gateway() -> MagicMock:
    """Stripe gateway that never leaves the process.

    Subscriptions, customers and events are real Stripe objects built
    with ``construct_from``, see the helpers at the bottom.
    """
    gateway = MagicMock(spec=StripeGateway)
    gateway.create_customer.return_value = SimpleNamespace(id="cus_new")
    gateway.create_checkout_session.return_value = SimpleNamespace(id="cs_test_123")
    gateway.create_portal_session.return_value = SimpleNamespace(
        url="https://billing.stripe.com/p/session_123"
    )
    return gateway


@pytest.fixture
def email_service() -> MagicMock:
    service = MagicMock(spec=EmailService)
    service.send = AsyncMock(return_value=True)
    return service


@pytest.fixture
def container(
    settings: Settings,
    db: Database,
    gateway: MagicMock,
    email_service: MagicMock,
) -> Container:
    return build_container(settings, db=db, gateway=gateway, email_service=email_service)


@pytest.fixture
def owner(container: Container) -> User:
    return container.user_repository.create_with_user_id(OWNER_ID)


@pytest.fixture
def team(container: Container, owner: User) -> Team:
    """Team "Acme" owned by ``owner``."""
    return container.team_service.create("Acme", owner, OWNER_EMAIL)


@pytest.fixture
def add_member(container: Container, team: Team) -> Callable[..., Member]:
    """Factory adding an ACTIVE member with a role to ``team``."""

    def _add(user_id: str, role: Role, email: str | None = None) -> Member:
        user = container.user_repository.find_or_create(user_id)
        return container.team_service.join(team, user, email or f"{user_id}@example.com", role)

    return _add


def make_subscription(
    subscription_id: str = "sub_123",
    customer: Any = "cus_123",
    product: str = "test_MQPRO",
    status: str = "active",
    products: list[str] | None = None,
) -> stripe.Subscription:
    """Stripe subscription with one item per product (a single one by default)."""
    if products is None:
        products = [product]
    items = [{"object": "subscription_item", "plan": {"object": "plan", "product": p}} for p in products]
    return stripe.Subscription.construct_from(
        {
            "id": subscription_id,
            "object": "subscription",
            "customer": customer,
            "status": status,
            "items": {"object": "list", "data": items},
        },
        "sk_test_dummy",
    )


def make_customer(team_id: str | None, deleted: bool = False) -> stripe.Customer:
    values: dict[str, Any] = {
        "id": "cus_123",
        "object": "customer",
        "metadata": {"teamId": team_id} if team_id else {},
    }
    if deleted:
        values["deleted"] = True
    return stripe.Customer.construct_from(values, "sk_test_dummy")


def make_event(event_type: str, data: dict[str, Any]) -> stripe.Event:
    """Verified webhook event wrapping ``data`` as its object."""
    return stripe.Event.construct_from(
        {"id": "evt_1", "object": "event", "type": event_type, "data": {"object": data}},
        "sk_test_dummy",
    )
