"""Webhook endpoints for external services."""

from fastapi import APIRouter, Header, Request

from teamhub.api.dependencies import Container, ContainerDep
from teamhub.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/billing", tags=["webhooks"])


@router.post("/webhook")
async def stripe_webhook(
    request: Request,
    stripe_signature: str = Header(default="", alias="stripe-signature"),
    container: Container = ContainerDep,
):
    """Handle Stripe webhook events.

    The signature is checked against the raw body. Failures are returned as
    errors so Stripe retries the delivery later.
    """
    payload = await request.body()

    event = container.billing_service.verify_webhook(payload, stripe_signature)
    team = container.billing_service.process_event(event)

    logger.info("stripe_webhook_processed", event_type=event["type"], team_id=team.id)
    return {"received": True}
