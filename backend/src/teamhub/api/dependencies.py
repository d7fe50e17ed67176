"""Service wiring and FastAPI dependencies.

Everything is constructed once in ``build_container`` at application start
and handed to routers through ``app.state``.
"""

from dataclasses import dataclass

from fastapi import Depends, Header, HTTPException, Request, status

from teamhub.billing.service import BillingService
from teamhub.email.service import EmailService
from teamhub.email.templates import TeamInviteEmailTemplate
from teamhub.payments.stripe_service import StripeGateway
from teamhub.settings import Settings
from teamhub.storage.db import Database
from teamhub.storage.repo import MemberRepository, TeamRepository, TodoRepository, UserRepository
from teamhub.teams.invitations import InvitationService
from teamhub.teams.service import TeamService
from teamhub.todos.service import TodoService
from teamhub.users.service import UserService


@dataclass
class Container:
    """Services shared by every request."""
    settings: Settings
    db: Database
    user_repository: UserRepository
    team_repository: TeamRepository
    member_repository: MemberRepository
    todo_repository: TodoRepository
    team_service: TeamService
    invitation_service: InvitationService
    billing_service: BillingService
    user_service: UserService
    todo_service: TodoService


def build_container(
    settings: Settings,
    db: Database | None = None,
    gateway: StripeGateway | None = None,
    email_service: EmailService | None = None,
) -> Container:
    """Construct the repositories and services.

    Args:
        settings: Application settings
        db: Database to use instead of one built from settings.database_url
        gateway: Stripe gateway to use instead of a live client
        email_service: Email service to use instead of SendGrid

    Raises:
        ApiError: settings.billing_plan_env names no plan table
    """
    db = db or Database(settings.database_url, echo=settings.env == "development")
    gateway = gateway or StripeGateway(settings.stripe_secret_key)
    email_service = email_service or EmailService(
        api_key=settings.sendgrid_api_key,
        from_email=settings.sender_email_address,
        from_name=settings.site_name,
    )

    user_repository = UserRepository(db)
    team_repository = TeamRepository(db)
    member_repository = MemberRepository(db)
    todo_repository = TodoRepository(db)

    team_service = TeamService(team_repository, user_repository, member_repository)
    invitation_service = InvitationService(
        team_service,
        team_repository,
        user_repository,
        member_repository,
        email_service,
        TeamInviteEmailTemplate(settings.site_name, settings.frontend_domain_url),
    )
    billing_service = BillingService(
        team_repository,
        gateway,
        billing_plan_env=settings.billing_plan_env,
        webhook_secret=settings.stripe_webhook_secret,
        frontend_url=settings.frontend_domain_url,
    )

    return Container(
        settings=settings,
        db=db,
        user_repository=user_repository,
        team_repository=team_repository,
        member_repository=member_repository,
        todo_repository=todo_repository,
        team_service=team_service,
        invitation_service=invitation_service,
        billing_service=billing_service,
        user_service=UserService(user_repository, team_service),
        todo_service=TodoService(todo_repository, team_service),
    )


def get_container(request: Request) -> Container:
    return request.app.state.container


def require_user_id(
    x_user_id: str | None = Header(default=None, alias="X-User-Id"),
) -> str:
    """Get the user id verified by the upstream authorizer.

    Raises:
        HTTPException: 401 if the header is missing
    """
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return x_user_id


ContainerDep = Depends(get_container)
UserIdDep = Depends(require_user_id)
