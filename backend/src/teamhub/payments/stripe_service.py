"""Stripe integration."""

from typing import Any

import stripe

from teamhub.logging_config import get_logger

logger = get_logger(__name__)


class StripeGateway:
    """Thin wrapper over the Stripe client.

    Keeps every Stripe call behind one object so services receive it as a
    dependency instead of configuring the global ``stripe`` module.
    """

    def __init__(self, secret_key: str, client: stripe.StripeClient | None = None):
        self.client = client or stripe.StripeClient(secret_key)

    def create_customer(self, metadata: dict[str, str]) -> Any:
        customer = self.client.customers.create(params={"metadata": metadata})
        logger.info("stripe_customer_created", customer_id=customer.id, metadata=metadata)
        return customer

    def retrieve_customer(self, customer_id: str) -> Any:
        return self.client.customers.retrieve(customer_id)

    def retrieve_subscription(self, subscription_id: str) -> Any:
        return self.client.subscriptions.retrieve(subscription_id)

    def create_checkout_session(
        self,
        customer_id: str,
        price_id: str,
        success_url: str,
        cancel_url: str,
    ) -> Any:
        session = self.client.checkout.sessions.create(
            params={
                "mode": "subscription",
                "payment_method_types": ["card"],
                "customer": customer_id,
                "line_items": [
                    {
                        "price": price_id,
                        # For metered billing, do not pass quantity
                        "quantity": 1,
                    }
                ],
                "success_url": success_url,
                "cancel_url": cancel_url,
            }
        )

        logger.info(
            "checkout_session_created",
            customer_id=customer_id,
            price_id=price_id,
            session_id=session.id,
        )
        return session

    def create_portal_session(self, customer_id: str, return_url: str) -> Any:
        return self.client.billing_portal.sessions.create(
            params={"customer": customer_id, "return_url": return_url}
        )

    def construct_event(self, payload: bytes, sig_header: str, secret: str) -> Any:
        """Verify the signature and parse a webhook payload.

        Raises:
            stripe.SignatureVerificationError: Invalid signature
            ValueError: Payload is not valid JSON
        """
        return self.client.construct_event(payload, sig_header, secret)
