"""Billing endpoints for Stripe checkout and the customer portal."""

from fastapi import APIRouter
from pydantic import BaseModel, Field

from teamhub.api.dependencies import Container, ContainerDep, UserIdDep
from teamhub.teams.models import Role

router = APIRouter(tags=["billing"])

BILLING_ROLES = (Role.OWNER, Role.ADMIN)


class PriceRequest(BaseModel):
    """Stripe price the team wants to subscribe to."""
    price_id: str = Field(..., alias="priceId", min_length=1)


@router.post("/{team_id}/billing/create-checkout-session")
async def create_checkout_session(
    team_id: str,
    request: PriceRequest,
    user_id: str = UserIdDep,
    container: Container = ContainerDep,
):
    """Start a Stripe checkout for a subscription."""
    container.team_service.required_auth(user_id, team_id, BILLING_ROLES)

    customer_id = container.billing_service.create_or_retrieve_customer_id(team_id)
    session = container.billing_service.create_checkout_session(customer_id, request.price_id)

    return {"sessionId": session.id}


@router.post("/{team_id}/billing/customer-portal")
async def create_customer_portal_link(
    team_id: str,
    user_id: str = UserIdDep,
    container: Container = ContainerDep,
):
    """Get a link to the Stripe billing portal."""
    auth = container.team_service.required_auth_with_team(user_id, team_id, BILLING_ROLES)

    url = container.billing_service.create_customer_portal_link(auth.team)

    return {"url": url}
