"""Invitation lifecycle: invite, accept, edit, remove, transfer ownership.

A membership moves through two states::

    invite()  ->  PENDING (keyed by invitation code)
    accept()  ->  ACTIVE  (keyed by the joining user's id)

Accepting deletes the PENDING record and writes a new ACTIVE one, so the
code can never be used twice. Permission checks are the caller's job; every
method here assumes the acting user was already authorized.
"""

from dataclasses import dataclass

from teamhub.email.service import EmailService
from teamhub.email.templates import TeamInviteEmailTemplate
from teamhub.errors import (
    AlreadyMember,
    ApiError,
    InvalidCode,
    InvalidData,
    InvalidInvite,
    UnknownMember,
    UnknownTeam,
)
from teamhub.logging_config import get_logger
from teamhub.storage.repo import MemberRepository, TeamRepository, UserRepository
from teamhub.teams.models import InvitationStatus, Member, Role, Team, new_invitation_code
from teamhub.teams.service import TeamService

logger = get_logger(__name__)


@dataclass
class MemberList:
    """Members of a team split by status."""
    active: list[Member]
    pending: list[Member]


class InvitationService:
    """Service for the membership lifecycle of existing teams."""

    def __init__(
        self,
        team_service: TeamService,
        team_repository: TeamRepository,
        user_repository: UserRepository,
        member_repository: MemberRepository,
        email_service: EmailService,
        invite_template: TeamInviteEmailTemplate,
    ):
        self.team_service = team_service
        self.team_repository = team_repository
        self.user_repository = user_repository
        self.member_repository = member_repository
        self.email_service = email_service
        self.invite_template = invite_template

    async def invite(self, team: Team, email: str, role: Role) -> Member:
        """Create a PENDING membership and email the invitation link.

        Raises:
            InvalidInvite: role is OWNER
        """
        if role == Role.OWNER:
            raise InvalidInvite("Impossible to invite with OWNER role")

        member = Member(
            team_id=team.id,
            member_id=new_invitation_code(),
            role=role,
            status=InvitationStatus.PENDING,
            email=email,
        )
        member = self.member_repository.create(member)

        subject, text = self.invite_template.build(team, member.member_id)
        sent = await self.email_service.send(subject, text, email)

        if not sent:
            logger.warning("team_invite_email_not_sent", team_id=team.id, email=email)

        logger.info("team_member_invited", team_id=team.id, email=email, role=role.value)
        return member

    def get_join_info(self, team_id: str, verification_code: str) -> str:
        """Get the display name of the team a code invites to.

        Raises:
            UnknownTeam: The team does not exist
            InvalidCode: No pending invitation under that code
        """
        team = self.team_repository.find_by_team_id(team_id)

        if team is None:
            raise UnknownTeam(f"Incorrect TeamID {team_id}")

        member = self.member_repository.find_by_keys(team_id, verification_code)

        # An ACTIVE record here means a user id was passed as a code
        if member is None or member.is_active:
            raise InvalidCode("Incorrect code")

        return team.display_name

    def accept(self, team_id: str, verification_code: str, user_id: str, email: str) -> Member:
        """Consume an invitation and make the user an ACTIVE member.

        The role comes from the invitation, the email from the caller.

        Raises:
            UnknownUser: No record for the user
            AlreadyMember: The user is already an active member
            UnknownTeam: The team does not exist
            InvalidCode: The code is unknown or was already consumed
        """
        user = self.user_repository.strict_find_by_user_id(user_id)

        if self.team_service.find_team_member(user_id, team_id) is not None:
            raise AlreadyMember("Already a member")

        team = self.team_repository.find_by_team_id(team_id)

        if team is None:
            raise UnknownTeam(f"Incorrect TeamID {team_id}")

        invitation = self.member_repository.delete_only_in_pending(team_id, verification_code)

        if invitation is None:
            raise InvalidCode("Incorrect code")

        member = self.team_service.join(team, user, email, invitation.role)

        logger.info("team_invitation_accepted", team_id=team_id, user_id=user_id, role=member.role.value)
        return member

    def list_members(self, team_id: str) -> MemberList:
        return MemberList(
            active=self.member_repository.find_all_by_team_id(team_id, InvitationStatus.ACTIVE),
            pending=self.member_repository.find_all_by_team_id(team_id, InvitationStatus.PENDING),
        )

    def edit_role(self, team_id: str, member_id: str, role: Role) -> Member | None:
        """Change the role of a non-owner member.

        Returns:
            The updated member, or None when the member does not exist or
            is the owner
        """
        member = self.member_repository.update_role_if_not_owner(team_id, member_id, role)

        if member is not None:
            logger.info("team_member_role_updated", team_id=team_id, member_id=member_id, role=role.value)

        return member

    def remove(self, team_id: str, member_id: str) -> None:
        """Remove a member or cancel a pending invitation.

        Raises:
            UnknownMember: No membership under member_id
            InvalidData: The member is the owner, who has to transfer
                ownership before leaving
            ApiError: The delete itself failed after the checks passed
        """
        member = self.member_repository.find_by_keys(team_id, member_id)

        if member is None:
            raise UnknownMember("Incorrect MemberID")

        if member.role == Role.OWNER:
            raise InvalidData("Incorrect Member ID or the member has the OWNER ROLE")

        if member.is_active:
            removed = self.team_service.required_auth(member_id, team_id)
            removed.user.remove_team(team_id)
            self.user_repository.save(removed.user)

        deleted = self.member_repository.delete_by_keys(team_id, member_id)

        if deleted is None:
            logger.error("team_member_delete_failed", team_id=team_id, member_id=member_id)
            raise ApiError("Impossible to delete")

        logger.info("team_member_removed", team_id=team_id, member_id=member_id, status=member.status.value)

    def transfer_ownership(self, team_id: str, current_owner_id: str, new_owner_id: str) -> Member:
        """Promote a member to OWNER and demote the current owner to ADMIN.

        Two separate writes: if the process dies in between, the team is
        left with two owners and the previous one has to be demoted with a
        manual role update.

        Raises:
            UnknownMember: The target does not exist or already is the owner
        """
        new_owner = self.member_repository.update_role_if_not_owner(team_id, new_owner_id, Role.OWNER)

        if new_owner is None:
            raise UnknownMember("Incorrect Member ID or the member has the OWNER ROLE")

        self.member_repository.update_role(team_id, current_owner_id, Role.ADMIN)

        logger.info(
            "team_ownership_transferred",
            team_id=team_id,
            previous_owner_id=current_owner_id,
            new_owner_id=new_owner_id,
        )
        return new_owner
