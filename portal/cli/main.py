"""Main CLI entry point for portal commands."""
import asyncio
from typing import Optional

import click

from portal import __version__
from portal.cli import db
from portal.core.config import settings
from portal.core.database import AsyncSessionLocal, engine
from portal.db.enums import AccountStatus, Role, UserType
from portal.exceptions import PortalError
from portal.lifecycle.users import user_service


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """District portal administration CLI."""
    pass


# Register command groups
cli.add_command(db.db_group, name="db")


@cli.group(name="users")
def users_group() -> None:
    """Account management commands."""
    pass


async def _create_admin(email: str, password: str, full_name: str):
    async with AsyncSessionLocal() as session:
        user = await user_service.create_account(
            session,
            email=email,
            password=password,
            full_name=full_name,
            user_types=[UserType.GENERAL_USER],
            roles=[Role.SUPER_ADMIN],
            approval_status=AccountStatus.APPROVED,
        )
    await engine.dispose()
    return user


@users_group.command(name="create-admin")
@click.option("--email", default=None, help="Defaults to ADMIN_EMAIL.")
@click.option("--password", default=None, help="Defaults to ADMIN_PASSWORD; prompted if unset.")
@click.option("--name", "full_name", default="Administrator", show_default=True)
def create_admin(email: Optional[str], password: Optional[str], full_name: str) -> None:
    """Create an approved SUPER_ADMIN account."""
    email = email or settings.admin_email
    if not email:
        raise click.UsageError("Pass --email or set ADMIN_EMAIL")
    password = password or settings.admin_password
    if not password:
        password = click.prompt("Password", hide_input=True, confirmation_prompt=True)

    try:
        user = asyncio.run(_create_admin(email, password, full_name))
    except PortalError as e:
        click.echo(click.style(f"✗ {e.message}", fg="red"))
        raise click.Abort() from e
    click.echo(click.style(f"✓ Administrator {user.email} created (id={user.id})", fg="green"))


@cli.command()
@click.option("--host", default="0.0.0.0", show_default=True)
@click.option("--port", default=8000, show_default=True, type=int)
@click.option("--reload", is_flag=True, help="Reload on code changes (development).")
def serve(host: str, port: int, reload: bool) -> None:
    """Run the API server with uvicorn."""
    import uvicorn

    uvicorn.run("portal.main:app", host=host, port=port, reload=reload, log_level=settings.log_level.lower())


if __name__ == "__main__":
    cli()
