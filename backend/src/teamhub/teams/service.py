"""Team service: authorization checks and team lifecycle."""

from dataclasses import dataclass
from typing import Iterable

from teamhub.errors import EmptyMembership, InsufficientPermission, NotMember, UnknownTeam
from teamhub.logging_config import get_logger
from teamhub.storage.repo import MemberRepository, TeamRepository, UserRepository
from teamhub.teams.models import ALL_ROLES, InvitationStatus, Member, Role, Team
from teamhub.users.models import User

logger = get_logger(__name__)


@dataclass
class AuthResult:
    """Outcome of a successful authorization check."""
    user: User
    member: Member
    team: Team | None = None


class TeamService:
    """Service for team membership checks and the team lifecycle."""

    def __init__(
        self,
        team_repository: TeamRepository,
        user_repository: UserRepository,
        member_repository: MemberRepository,
    ):
        self.team_repository = team_repository
        self.user_repository = user_repository
        self.member_repository = member_repository

    # ─── Authorization ───────────────────────────────────────────────────────

    def find_team_member(self, user_id: str, team_id: str) -> Member | None:
        """Get the user's ACTIVE membership. Pending invitations never count."""
        member = self.member_repository.find_by_keys(team_id, user_id)

        if member is None or not member.is_active:
            return None

        return member

    def required_auth(
        self,
        user_id: str,
        team_id: str,
        required_roles: Iterable[Role] = ALL_ROLES,
    ) -> AuthResult:
        """Check that a user is an active team member with one of the roles.

        Must succeed before any team-scoped mutation.

        Raises:
            UnknownUser: No record for the verified user id
            NotMember: No ACTIVE membership for the user in the team
            InsufficientPermission: The member's role is not in required_roles
        """
        user = self.user_repository.strict_find_by_user_id(user_id)
        member = self.find_team_member(user_id, team_id)

        if member is None:
            raise NotMember(f"User {user_id} isn't a team member of {team_id}")

        if member.role not in tuple(required_roles):
            raise InsufficientPermission(
                f"The user role {member.role.value} is not able to perform the action"
            )

        return AuthResult(user=user, member=member)

    def required_auth_with_team(
        self,
        user_id: str,
        team_id: str,
        required_roles: Iterable[Role] = ALL_ROLES,
    ) -> AuthResult:
        """Same as required_auth, also loading the team.

        Raises:
            UnknownTeam: The membership points at a missing team
        """
        result = self.required_auth(user_id, team_id, required_roles)

        team = self.team_repository.find_by_team_id(team_id)

        if team is None:
            logger.error("dangling_membership", team_id=team_id, user_id=user_id)
            raise UnknownTeam(f"Incorrect TeamID {team_id}")

        result.team = team
        return result

    # ─── Lifecycle ───────────────────────────────────────────────────────────

    def create(self, display_name: str, user: User, user_email: str) -> Team:
        """Create a team with the user as its only OWNER."""
        team = self.team_repository.create_with_display_name(display_name)

        self.join(team, user, user_email, Role.OWNER)

        logger.info("team_created", team_id=team.id, owner_id=user.provider_id)
        return team

    def join(self, team: Team, user: User, user_email: str, role: Role) -> Member:
        """Add the user as an ACTIVE member.

        This is an upsert: calling it again for the same user overwrites the
        role and email.
        """
        member = Member(
            team_id=team.id,
            member_id=user.provider_id,
            role=role,
            status=InvitationStatus.ACTIVE,
            email=user_email,
        )
        member = self.member_repository.save(member)

        user.add_team(team.id)
        self.user_repository.save(user)

        return member

    def delete(self, team_id: str) -> None:
        """Delete a team and every membership of it.

        The team row goes first, then the memberships in one batch, then the
        team id is removed from each active member's user record. These are
        separate writes; a crash in between leaves the later steps undone
        and re-running the delete reports UnknownTeam.

        Raises:
            UnknownTeam: The team does not exist
            EmptyMembership: The team had no membership at all. The team row
                is already deleted at that point.
        """
        deleted_team = self.team_repository.delete_by_team_id(team_id)

        if deleted_team is None:
            raise UnknownTeam(f"Incorrect TeamID {team_id}")

        member_list = self.member_repository.delete_all_members(team_id)

        if not member_list:
            logger.error("team_deleted_without_members", team_id=team_id)
            raise EmptyMembership(
                f"Nothing to delete, the member list of team {team_id} was empty"
            )

        # Sequential on purpose, one user write at a time
        for member in member_list:
            if member.is_active:
                self.user_repository.remove_team(member.member_id, team_id)

        logger.info("team_deleted", team_id=team_id, members_removed=len(member_list))

    def update_display_name(self, team_id: str, display_name: str) -> Team:
        team = self.team_repository.update_display_name(team_id, display_name)

        if team is None:
            raise UnknownTeam(f"Incorrect TeamID {team_id}")

        return team

    def get_user_teams(self, user: User) -> list[Team]:
        return self.team_repository.find_all_by_team_id_list(user.team_list)

    def update_email_all_teams(self, user: User, email: str) -> None:
        """Rewrite the user's membership email in every team."""
        for team_id in user.team_list:
            self.member_repository.update_email(team_id, user.provider_id, email)

        logger.info("member_email_updated", user_id=user.provider_id, teams=len(user.team_list))
