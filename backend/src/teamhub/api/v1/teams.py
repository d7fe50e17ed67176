"""Team endpoints."""

from fastapi import APIRouter
from pydantic import BaseModel, EmailStr, Field

from teamhub.api.dependencies import Container, ContainerDep, UserIdDep
from teamhub.errors import UnknownMember
from teamhub.teams.models import Member, Role

router = APIRouter(prefix="/team", tags=["team"])

EDITOR_ROLES = (Role.OWNER, Role.ADMIN)


# ─── Request Models ──────────────────────────────────────────────────────────

class CreateTeamRequest(BaseModel):
    """Request to create a new team."""
    display_name: str = Field(..., alias="displayName", min_length=1, max_length=100)
    user_email: EmailStr = Field(..., alias="userEmail")


class TeamNameRequest(BaseModel):
    display_name: str = Field(..., alias="displayName", min_length=1, max_length=100)


class InviteRequest(BaseModel):
    """Request to invite a team member."""
    email: EmailStr
    role: Role


class JoinRequest(BaseModel):
    """Email the joining user wants to use in the team."""
    email: EmailStr


class EditMemberRequest(BaseModel):
    role: Role


def _member_view(member: Member) -> dict:
    return {
        "memberId": member.member_id,
        "email": member.email,
        "role": member.role.value,
    }


# ─── Endpoints ───────────────────────────────────────────────────────────────

@router.post("/create")
async def create_team(
    request: CreateTeamRequest,
    user_id: str = UserIdDep,
    container: Container = ContainerDep,
):
    """Create a new team owned by the current user."""
    user = container.user_repository.strict_find_by_user_id(user_id)

    team = container.team_service.create(request.display_name, user, request.user_email)

    return {"id": team.id, "displayName": team.display_name}


@router.get("/{team_id}/list-members")
async def list_members(
    team_id: str,
    user_id: str = UserIdDep,
    container: Container = ContainerDep,
):
    """List active members and pending invitations. Any member can read."""
    auth = container.team_service.required_auth(user_id, team_id)

    members = container.invitation_service.list_members(team_id)

    return {
        "list": [_member_view(member) for member in members.active],
        "inviteList": [_member_view(member) for member in members.pending],
        "role": auth.member.role.value,
    }


@router.put("/{team_id}/name")
async def update_display_name(
    team_id: str,
    request: TeamNameRequest,
    user_id: str = UserIdDep,
    container: Container = ContainerDep,
):
    container.team_service.required_auth(user_id, team_id, EDITOR_ROLES)

    team = container.team_service.update_display_name(team_id, request.display_name)

    return {"id": team.id, "displayName": team.display_name}


@router.delete("/{team_id}")
async def delete_team(
    team_id: str,
    user_id: str = UserIdDep,
    container: Container = ContainerDep,
):
    """Delete a team and all of its memberships."""
    container.team_service.required_auth(user_id, team_id, EDITOR_ROLES)

    container.team_service.delete(team_id)

    return {"success": True}


@router.get("/{team_id}/settings")
async def get_settings(
    team_id: str,
    user_id: str = UserIdDep,
    container: Container = ContainerDep,
):
    """Get the team's plan and the caller's role."""
    auth = container.team_service.required_auth_with_team(user_id, team_id)

    plan = container.billing_service.get_plan_from_subscription(auth.team.subscription)

    return {
        "planId": plan.id,
        "planName": plan.name,
        "hasStripeCustomerId": auth.team.has_stripe_customer_id,
        "role": auth.member.role.value,
    }


@router.post("/{team_id}/invite")
async def invite(
    team_id: str,
    request: InviteRequest,
    user_id: str = UserIdDep,
    container: Container = ContainerDep,
):
    """Invite someone by email. Owners and admins only."""
    auth = container.team_service.required_auth_with_team(user_id, team_id, EDITOR_ROLES)

    member = await container.invitation_service.invite(auth.team, request.email, request.role)

    return {
        "teamId": team_id,
        "email": member.email,
        "role": member.role.value,
        "status": member.status.value,
    }


@router.get("/{team_id}/join/{verification_code}")
async def get_join_info(
    team_id: str,
    verification_code: str,
    container: Container = ContainerDep,
):
    """Get the name of the team an invitation is for."""
    display_name = container.invitation_service.get_join_info(team_id, verification_code)

    return {"displayName": display_name}


@router.post("/{team_id}/join/{verification_code}")
async def join(
    team_id: str,
    verification_code: str,
    request: JoinRequest,
    user_id: str = UserIdDep,
    container: Container = ContainerDep,
):
    """Accept an invitation as the current user."""
    member = container.invitation_service.accept(team_id, verification_code, user_id, request.email)

    return {
        "teamId": team_id,
        "email": member.email,
        "role": member.role.value,
        "status": member.status.value,
    }


@router.put("/{team_id}/edit/{member_id}")
async def edit_member(
    team_id: str,
    member_id: str,
    request: EditMemberRequest,
    user_id: str = UserIdDep,
    container: Container = ContainerDep,
):
    container.team_service.required_auth(user_id, team_id, EDITOR_ROLES)

    member = container.invitation_service.edit_role(team_id, member_id, request.role)

    if member is None:
        # The owner row is never editable from the frontend, so this is
        # either a stale page or someone bypassing it
        raise UnknownMember("Incorrect Member ID or the member has the OWNER ROLE")

    return {"teamId": team_id, "memberId": member_id, "role": member.role.value}


@router.delete("/{team_id}/remove/{member_id}")
async def remove_member(
    team_id: str,
    member_id: str,
    user_id: str = UserIdDep,
    container: Container = ContainerDep,
):
    """Remove a member or cancel an invitation. Owners and admins only."""
    container.team_service.required_auth(user_id, team_id, EDITOR_ROLES)

    container.invitation_service.remove(team_id, member_id)

    return {"success": True}


@router.put("/{team_id}/transfer-ownership/{member_id}")
async def transfer_ownership(
    team_id: str,
    member_id: str,
    user_id: str = UserIdDep,
    container: Container = ContainerDep,
):
    """Make another member the owner. The current owner becomes an admin."""
    container.team_service.required_auth(user_id, team_id, [Role.OWNER])

    container.invitation_service.transfer_ownership(team_id, user_id, member_id)

    return {"success": True}
