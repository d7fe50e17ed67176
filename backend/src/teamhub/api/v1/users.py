"""User profile endpoints."""

from fastapi import APIRouter, Query
from pydantic import BaseModel, EmailStr

from teamhub.api.dependencies import Container, ContainerDep, UserIdDep

router = APIRouter(prefix="/user", tags=["user"])


class UpdateEmailRequest(BaseModel):
    """Request to change the email used in every team."""
    email: EmailStr


@router.get("/profile")
async def get_profile(
    email: EmailStr = Query(...),
    user_id: str = UserIdDep,
    container: Container = ContainerDep,
):
    """Get the current user's profile.

    Creates the user and a default team on first sign in.
    """
    profile = container.user_service.get_profile(user_id, email)

    return {
        "id": profile.user.provider_id,
        "firstSignIn": profile.first_sign_in.isoformat(),
        "teamList": [
            {"id": team.id, "displayName": team.display_name}
            for team in profile.teams
        ],
    }


@router.put("/email")
async def update_email(
    request: UpdateEmailRequest,
    user_id: str = UserIdDep,
    container: Container = ContainerDep,
):
    """Update the current user's email in all teams."""
    user = container.user_service.update_email(user_id, request.email)

    return {"id": user.provider_id, "email": request.email}
