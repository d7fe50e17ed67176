"""Command-line interface for Teamhub operators."""

from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from teamhub.api.dependencies import build_container
from teamhub.billing.plans import BILLING_PLANS
from teamhub.errors import ApiError
from teamhub.logging_config import get_logger, setup_logging
from teamhub.settings import get_settings

logger = get_logger(__name__)

app = typer.Typer(
    name="teamhub",
    help="Teamhub - team collaboration and billing backend",
    no_args_is_help=True,
)

console = Console()


@app.command("init-db")
def init_database() -> None:
    """Initialize the database and create tables."""
    settings = get_settings()
    setup_logging(settings)
    container = build_container(settings)

    console.print("[bold blue]Initializing database...[/bold blue]")
    container.db.create_tables()
    console.print("[bold green]✓[/bold green] Database initialized successfully")


@app.command("resync-subscription")
def resync_subscription(
    subscription_id: Annotated[str, typer.Argument(help="Stripe subscription id (sub_...)")],
) -> None:
    """Fetch a subscription from Stripe and store it on its team.

    Safe to run any number of times; used to repair a team after a webhook
    delivery was given up on.
    """
    settings = get_settings()
    setup_logging(settings)
    container = build_container(settings)

    try:
        team = container.billing_service.sync_subscription(subscription_id)
    except ApiError as e:
        console.print(f"[bold red]✗[/bold red] {e.error_code.value}: {e.message}")
        raise typer.Exit(code=1) from e

    plan = container.billing_service.get_plan_from_subscription(team.subscription)
    console.print(
        f"[bold green]✓[/bold green] Team [bold]{team.id}[/bold] ({team.display_name}) "
        f"is now on plan [bold]{plan.name}[/bold]"
    )


@app.command("plans")
def show_plans(
    env: Annotated[str | None, typer.Option(help="Billing environment, defaults to BILLING_PLAN_ENV")] = None,
) -> None:
    """Show the plan table of a billing environment."""
    env = env or get_settings().billing_plan_env
    plan_table = BILLING_PLANS.get(env)

    if plan_table is None:
        console.print(f"[bold red]✗[/bold red] Unknown billing environment: {env}")
        raise typer.Exit(code=1)

    table = Table(title=f"Plans ({env})")
    table.add_column("Stripe product")
    table.add_column("Plan id")
    table.add_column("Plan name")

    table.add_row("-", plan_table.free.id, plan_table.free.name)
    for product_id, plan in plan_table.products.items():
        table.add_row(product_id, plan.id, plan.name)

    console.print(table)


if __name__ == "__main__":
    app()
