"""Database management commands for the portal CLI."""
import asyncio
from pathlib import Path

import click
from alembic import command
from alembic.config import Config

from portal.core.database import AsyncSessionLocal, Base, engine, mask_url
from portal.core.config import settings
from portal.db.seed import seed_upazilas


def get_project_root() -> Path:
    """Get the project root directory."""
    return Path(__file__).parent.parent.parent


def get_alembic_config() -> Config:
    """Alembic configuration pointing at the repository's migration scripts."""
    root = get_project_root()
    config = Config(str(root / "alembic.ini"))
    config.set_main_option("script_location", str(root / "alembic"))
    return config


async def create_tables() -> None:
    # Register every model on Base.metadata
    import portal.db.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()


async def drop_tables() -> None:
    import portal.db.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


async def run_seed() -> int:
    async with AsyncSessionLocal() as session:
        created = await seed_upazilas(session)
    await engine.dispose()
    return len(created)


@click.group()
def db_group() -> None:
    """Database management commands."""
    pass


@db_group.command()
def init() -> None:
    """Create all tables directly from the models (development)."""
    click.echo(click.style(f"Creating tables on {mask_url(settings.database_url)}...", fg="yellow"))
    asyncio.run(create_tables())
    click.echo(click.style("✓ Tables created", fg="green"))


@db_group.command()
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt.")
def reset(yes: bool) -> None:
    """Drop and recreate every table."""
    if not yes:
        click.confirm("This deletes all portal data. Continue?", abort=True)
    asyncio.run(drop_tables())
    asyncio.run(create_tables())
    click.echo(click.style("✓ Database reset", fg="green"))


@db_group.command()
@click.argument("revision", default="head")
def migrate(revision: str) -> None:
    """Run Alembic migrations up to REVISION (default: head)."""
    click.echo(click.style(f"Upgrading to {revision}...", fg="yellow"))
    command.upgrade(get_alembic_config(), revision)
    click.echo(click.style("✓ Migrations applied", fg="green"))


@db_group.command()
def seed() -> None:
    """Insert the district's upazilas (idempotent)."""
    created = asyncio.run(run_seed())
    click.echo(click.style(f"✓ {created} upazilas created", fg="green"))
