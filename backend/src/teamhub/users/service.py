"""User profile service."""

from dataclasses import dataclass
from datetime import datetime

from teamhub.logging_config import get_logger
from teamhub.storage.repo import UserRepository
from teamhub.teams.models import Team
from teamhub.teams.service import TeamService
from teamhub.users.models import User

logger = get_logger(__name__)

DEFAULT_TEAM_NAME = "New Team"


@dataclass
class Profile:
    user: User
    teams: list[Team]

    @property
    def first_sign_in(self) -> datetime:
        return self.user.first_sign_in


class UserService:
    """Service for the signed-in user's own record."""

    def __init__(self, user_repository: UserRepository, team_service: TeamService):
        self.user_repository = user_repository
        self.team_service = team_service

    def get_profile(self, user_id: str, email: str) -> Profile:
        """Get the user's profile, provisioning it on first sign in.

        A user without any team gets a fresh team that they own, so every
        signed-in user always has somewhere to work.
        """
        user = self.user_repository.find_or_create(user_id)

        if not user.team_list:
            self.team_service.create(DEFAULT_TEAM_NAME, user, email)
            logger.info("default_team_provisioned", user_id=user_id)

        return Profile(user=user, teams=self.team_service.get_user_teams(user))

    def update_email(self, user_id: str, email: str) -> User:
        user = self.user_repository.strict_find_by_user_id(user_id)

        self.team_service.update_email_all_teams(user, email)

        return user
