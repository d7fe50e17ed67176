"""Repository layer for data access."""

from teamhub.errors import UnknownUser
from teamhub.logging_config import get_logger
from teamhub.storage.repository import Repository
from teamhub.teams.models import InvitationStatus, Member, Role, Subscription, Team, new_team_id
from teamhub.todos.models import Todo
from teamhub.users.models import User

logger = get_logger(__name__)


class UserRepository(Repository[User]):
    """Repository for User entities."""

    model = User

    def create_with_user_id(self, user_id: str) -> User:
        user = self.create(User.new(user_id))
        logger.info("user_created", user_id=user_id)
        return user

    def find_by_user_id(self, user_id: str) -> User | None:
        return self.get(provider_id=user_id)

    def find_or_create(self, user_id: str) -> User:
        user = self.find_by_user_id(user_id)

        if user is None:
            return self.create_with_user_id(user_id)

        return user

    def strict_find_by_user_id(self, user_id: str) -> User:
        """Get a user that must exist.

        Raises:
            UnknownUser: The id comes from a verified upstream identity, so a
                missing record is an integrity fault
        """
        user = self.find_by_user_id(user_id)

        if user is None:
            logger.error("user_not_found", user_id=user_id)
            raise UnknownUser(f"Incorrect UserID {user_id}")

        return user

    def remove_team(self, user_id: str, team_id: str) -> User:
        user = self.strict_find_by_user_id(user_id)
        user.remove_team(team_id)
        return self.save(user)


class TeamRepository(Repository[Team]):
    """Repository for Team entities."""

    model = Team

    def create_with_display_name(self, display_name: str) -> Team:
        return self.create(Team(id=new_team_id(), display_name=display_name))

    def find_by_team_id(self, team_id: str) -> Team | None:
        return self.get(id=team_id)

    def find_all_by_team_id_list(self, team_id_list: list[str]) -> list[Team]:
        """Get teams by id, silently skipping ids that no longer exist."""
        if not team_id_list:
            return []

        teams = {team.id: team for team in self.find_many(Team.id.in_(team_id_list))}
        return [teams[team_id] for team_id in team_id_list if team_id in teams]

    def delete_by_team_id(self, team_id: str) -> Team | None:
        return self.delete({"id": team_id})

    def update_display_name(self, team_id: str, display_name: str) -> Team | None:
        return self.update({"id": team_id}, {"display_name": display_name})

    def update_subscription(self, team_id: str, subscription: Subscription) -> Team | None:
        """Overwrite the subscription snapshot as a single write."""
        return self.update(
            {"id": team_id},
            {
                "subscription_id": subscription.id,
                "subscription_product_id": subscription.product_id,
                "subscription_status": subscription.status,
            },
        )

    def set_stripe_customer_id_if_missing(self, team_id: str, customer_id: str) -> Team | None:
        """Attach a Stripe customer unless the team already has one.

        Returns:
            The updated team, or None when the team is missing or already
            linked to a customer
        """
        return self.update(
            {"id": team_id},
            {"stripe_customer_id": customer_id},
            Team.stripe_customer_id.is_(None),
        )


class MemberRepository(Repository[Member]):
    """Repository for Member entities."""

    model = Member

    def find_by_keys(self, team_id: str, member_id: str) -> Member | None:
        return self.get(team_id=team_id, member_id=member_id)

    def find_all_by_team_id(
        self, team_id: str, status: InvitationStatus | None = None
    ) -> list[Member]:
        if status is None:
            return self.find_many(team_id=team_id)

        return self.find_many(team_id=team_id, status=status)

    def delete_by_keys(self, team_id: str, member_id: str) -> Member | None:
        return self.delete({"team_id": team_id, "member_id": member_id})

    def delete_only_in_pending(self, team_id: str, verification_code: str) -> Member | None:
        """Consume an invitation.

        The status guard makes this the single point where two concurrent
        accepts of the same code are decided: only one delete matches.
        """
        return self.delete(
            {"team_id": team_id, "member_id": verification_code},
            Member.status == InvitationStatus.PENDING,
        )

    def delete_all_members(self, team_id: str) -> list[Member]:
        return self.delete_many(team_id=team_id)

    def update_email(self, team_id: str, member_id: str, email: str) -> Member | None:
        return self.update({"team_id": team_id, "member_id": member_id}, {"email": email})

    def update_role(self, team_id: str, member_id: str, role: Role) -> Member | None:
        return self.update({"team_id": team_id, "member_id": member_id}, {"role": role})

    def update_role_if_not_owner(self, team_id: str, member_id: str, role: Role) -> Member | None:
        """Change a role unless the member is the owner.

        Returns:
            The updated member, or None when the member is missing or is the
            owner (both cases look the same to the caller)
        """
        return self.update(
            {"team_id": team_id, "member_id": member_id},
            {"role": role},
            Member.role != Role.OWNER,
        )


class TodoRepository(Repository[Todo]):
    """Repository for Todo entities."""

    model = Todo

    def find_by_keys(self, team_id: str, todo_id: str) -> Todo | None:
        return self.get(owner_id=team_id, id=todo_id)

    def find_all_by_team_id(self, team_id: str) -> list[Todo]:
        return self.find_many(owner_id=team_id)

    def update_title(self, team_id: str, todo_id: str, title: str) -> Todo | None:
        return self.update({"owner_id": team_id, "id": todo_id}, {"title": title})

    def delete_by_keys(self, team_id: str, todo_id: str) -> Todo | None:
        return self.delete({"owner_id": team_id, "id": todo_id})
