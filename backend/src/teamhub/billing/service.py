"""Billing service: Stripe customers, checkout and subscription sync."""

from typing import Any

import stripe

from teamhub.billing.plans import BILLING_PLANS, Plan, PlanTable, SubscriptionStatus
from teamhub.errors import (
    ApiError,
    InvalidData,
    InvalidSignature,
    MalformedResult,
    UnknownTeam,
    UnrecognizedEvent,
)
from teamhub.logging_config import get_logger
from teamhub.payments.stripe_service import StripeGateway
from teamhub.storage.repo import TeamRepository
from teamhub.teams.models import Subscription, Team

logger = get_logger(__name__)

SUBSCRIPTION_EVENTS = frozenset(
    {
        "customer.subscription.created",
        "customer.subscription.updated",
        "customer.subscription.deleted",
    }
)
CHECKOUT_COMPLETED_EVENT = "checkout.session.completed"


class BillingService:
    """Keeps team subscriptions in sync with Stripe and resolves plans.

    Webhook payloads are only used for the event type and the subscription
    id. The current state is always fetched again from Stripe, so events can
    arrive late, twice, or out of order and the last processed one still
    writes the latest state.
    """

    def __init__(
        self,
        team_repository: TeamRepository,
        gateway: StripeGateway,
        billing_plan_env: str,
        webhook_secret: str,
        frontend_url: str,
    ):
        self.team_repository = team_repository
        self.gateway = gateway
        self.webhook_secret = webhook_secret
        self.frontend_url = frontend_url.rstrip("/")

        plan_table = BILLING_PLANS.get(billing_plan_env)

        if plan_table is None:
            raise ApiError("BILLING_PLAN_ENV environment variable isn't defined correctly")

        self.plan_table: PlanTable = plan_table

    # ─── Webhooks ────────────────────────────────────────────────────────────

    def verify_webhook(self, payload: bytes, sig_header: str) -> Any:
        """Verify and parse a Stripe webhook event.

        Raises:
            InvalidSignature: Missing secret, bad signature or bad payload
        """
        if not self.webhook_secret:
            raise InvalidSignature("Stripe webhook secret is not configured")

        try:
            return self.gateway.construct_event(payload, sig_header, self.webhook_secret)
        except (stripe.SignatureVerificationError, ValueError) as e:
            raise InvalidSignature("Incorrect Stripe webhook signature", e) from e

    def process_event(self, event: Any) -> Team:
        """Apply a verified Stripe event.

        Raises:
            UnrecognizedEvent: Event type not handled here
            MalformedResult: Unexpected checkout session or Stripe data
        """
        # Stripe objects are not dicts, work on a plain copy of the payload
        payload = event.to_dict()
        event_type = payload["type"]
        data = payload["data"]["object"]

        if event_type in SUBSCRIPTION_EVENTS:
            subscription_id = data.get("id")

            if not isinstance(subscription_id, str):
                raise MalformedResult("Stripe is calling with a subscription event without id")
        elif event_type == CHECKOUT_COMPLETED_EVENT:
            subscription_id = data.get("subscription")

            if data.get("mode") != "subscription" or not isinstance(subscription_id, str):
                raise MalformedResult("Stripe is calling with an unexpected checkout session mode")
        else:
            raise UnrecognizedEvent(f"Stripe is calling with an unexpected event {event_type}")

        logger.info("stripe_event_received", event_id=payload.get("id"), event_type=event_type)
        return self.sync_subscription(subscription_id)

    def sync_subscription(self, subscription_id: str) -> Team:
        """Fetch a subscription from Stripe and store it on its team.

        Raises:
            MalformedResult: Subscription, customer or product are not in the
                expected shape, or the customer has no team
        """
        # The event may be older than the subscription's current state
        subscription = self.gateway.retrieve_subscription(subscription_id).to_dict()
        items = (subscription.get("items") or {}).get("data") or []
        customer_id = subscription.get("customer")

        if not isinstance(customer_id, str) or len(items) != 1:
            raise MalformedResult("Incorrect Stripe Subscription format")

        product = (items[0].get("plan") or {}).get("product")
        customer = self.gateway.retrieve_customer(customer_id).to_dict()
        team_id = (customer.get("metadata") or {}).get("teamId")

        if customer.get("deleted") is True or team_id is None or not isinstance(product, str):
            raise MalformedResult("Incorrect Stripe Customer or Stripe product format")

        snapshot = Subscription(
            id=subscription["id"],
            product_id=product,
            status=subscription["status"],
        )
        team = self.team_repository.update_subscription(team_id, snapshot)

        if team is None:
            logger.error("subscription_team_not_found", team_id=team_id, subscription_id=subscription_id)
            raise UnknownTeam(f"Incorrect TeamID {team_id}")

        logger.info(
            "subscription_synced",
            team_id=team_id,
            subscription_id=snapshot.id,
            product_id=snapshot.product_id,
            status=snapshot.status,
        )
        return team

    # ─── Plans ───────────────────────────────────────────────────────────────

    def get_plan_from_subscription(self, subscription: Subscription | None) -> Plan:
        """Resolve the plan of a subscription snapshot.

        Anything but an active subscription to a known product is free.
        """
        if subscription is None:
            return self.plan_table.free

        plan = self.plan_table.products.get(subscription.product_id)

        # https://stripe.com/docs/billing/subscriptions/overview#subscription-statuses
        if plan is not None and subscription.status == SubscriptionStatus.ACTIVE.value:
            return plan

        return self.plan_table.free

    # ─── Checkout ────────────────────────────────────────────────────────────

    def create_or_retrieve_customer_id(self, team_id: str) -> str:
        """Get the team's Stripe customer, creating it on first use.

        Raises:
            UnknownTeam: The team does not exist
        """
        team = self.team_repository.find_by_team_id(team_id)

        if team is None:
            raise UnknownTeam(f"Incorrect TeamID {team_id}")

        if team.stripe_customer_id:
            return team.stripe_customer_id

        customer = self.gateway.create_customer({"teamId": team.id})
        updated = self.team_repository.set_stripe_customer_id_if_missing(team.id, customer.id)

        if updated is None:
            # Another request linked a customer first, keep that one
            team = self.team_repository.find_by_team_id(team_id)

            if team is None or not team.stripe_customer_id:
                raise UnknownTeam(f"Incorrect TeamID {team_id}")

            logger.warning(
                "stripe_customer_race",
                team_id=team_id,
                kept=team.stripe_customer_id,
                orphaned=customer.id,
            )
            return team.stripe_customer_id

        return customer.id

    def create_checkout_session(self, customer_id: str, price_id: str) -> Any:
        # {CHECKOUT_SESSION_ID} is filled in by Stripe on redirect
        return self.gateway.create_checkout_session(
            customer_id,
            price_id,
            success_url=f"{self.frontend_url}/dashboard/success?session_id={{CHECKOUT_SESSION_ID}}",
            cancel_url=f"{self.frontend_url}/dashboard/upgrade",
        )

    def create_customer_portal_link(self, team: Team) -> str:
        """Create a Stripe billing portal session for the team.

        Raises:
            InvalidData: The team never went through checkout
        """
        if not team.stripe_customer_id:
            # The portal option is hidden until a customer exists
            raise InvalidData("Stripe customer ID shouldn't be null")

        portal_session = self.gateway.create_portal_session(
            team.stripe_customer_id,
            return_url=f"{self.frontend_url}/dashboard/settings",
        )
        return portal_session.url
