"""Command-line interface for ddb-migrate."""

import asyncio
import logging
import sys
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any, TypeVar

import click

from .config import DEFAULT_CONFIG_FILE, config_path, load_profiles
from .connector import connect
from .exceptions import DdbMigrateError
from .ledger import Ledger
from .migrations import DEFAULT_MIGRATIONS_DIR, MigrationRunner, create_migration_file

T = TypeVar("T")

SAMPLE_CONFIG = """\
awsConfig:
  - region: us-east-1
  - profile: local
    region: localhost
    dynamoDbEndpoint: http://localhost:8000
    mode: local
"""


def _run(ctx: click.Context, action: Callable[[Ledger], Awaitable[T]]) -> T:
    """Connect with the selected profile, run ``action`` and close the client."""
    options = ctx.obj

    async def _main() -> T:
        handle = await connect(
            options["profile"],
            loader=lambda: load_profiles(options["config"]),
        )
        async with Ledger(handle) as ledger:
            return await action(ledger)

    try:
        return asyncio.run(_main())
    except DdbMigrateError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@click.group()
@click.version_option(package_name="ddb-migrate")
@click.option("--profile", "-p", default="default", help="Profile from the config file.")
@click.option(
    "--config",
    "-c",
    "config",
    type=click.Path(dir_okay=False),
    help=f"Config file (default: $DDB_MIGRATE_CONFIG or ./{DEFAULT_CONFIG_FILE}).",
)
@click.option(
    "--migrations-dir",
    "-d",
    default=DEFAULT_MIGRATIONS_DIR,
    type=click.Path(file_okay=False),
    help="Directory holding migration files.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(
    ctx: click.Context,
    profile: str,
    config: str | None,
    migrations_dir: str,
    verbose: bool,
) -> None:
    """DynamoDB migration management CLI."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = {"profile": profile, "config": config, "migrations_dir": migrations_dir}


@cli.command()
@click.option("--create-table", is_flag=True, help="Also create the ledger table.")
@click.pass_context
def init(ctx: click.Context, create_table: bool) -> None:
    """Create the config file, migrations directory and optionally the ledger table."""
    options = ctx.obj
    path = config_path(options["config"])
    migrations_dir = Path(options["migrations_dir"])
    try:
        if path.exists():
            click.echo(f"Config file exists: {path}")
        else:
            path.write_text(SAMPLE_CONFIG)
            click.echo(f"Created config file: {path}")
        migrations_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo(f"Migrations directory: {migrations_dir}")

    if not create_table:
        return

    async def _create(ledger: Ledger) -> bool:
        if await ledger.table_exists():
            return False
        await ledger.ensure_schema()
        return True

    if _run(ctx, _create):
        click.echo("Created ledger table")
    else:
        click.echo("Ledger table already exists")


@cli.command()
@click.argument("name")
@click.pass_context
def create(ctx: click.Context, name: str) -> None:
    """Create a new migration file named NAME."""
    try:
        path = create_migration_file(ctx.obj["migrations_dir"], name)
    except (ValueError, FileExistsError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo(f"Created migration: {path}")


@cli.command()
@click.pass_context
def up(ctx: click.Context) -> None:
    """Apply all pending migrations."""

    async def _up(ledger: Ledger) -> list[Any]:
        return await MigrationRunner(ledger, ctx.obj["migrations_dir"]).up()

    applied = _run(ctx, _up)
    if not applied:
        click.echo("No pending migrations.")
        return
    for entry in applied:
        click.echo(f"  + {entry.file_name} ({entry.applied_at})")
    click.echo(f"\nApplied {len(applied)} migration(s).")


@cli.command()
@click.option(
    "--count",
    "-n",
    default=1,
    type=click.IntRange(min=1),
    help="Number of migrations to revert (default: 1).",
)
@click.pass_context
def down(ctx: click.Context, count: int) -> None:
    """Revert the most recently applied migrations."""

    async def _down(ledger: Ledger) -> list[Any]:
        return await MigrationRunner(ledger, ctx.obj["migrations_dir"]).down(count)

    reverted = _run(ctx, _down)
    if not reverted:
        click.echo("No applied migrations.")
        return
    for entry in reverted:
        click.echo(f"  - {entry.file_name} ({entry.applied_at})")
    click.echo(f"\nReverted {len(reverted)} migration(s).")


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show applied and pending migrations."""

    async def _status(ledger: Ledger) -> list[tuple[str, str | None]]:
        return await MigrationRunner(ledger, ctx.obj["migrations_dir"]).status()

    rows = _run(ctx, _status)
    if not rows:
        click.echo("No migrations found.")
        return

    width = max(len(name) for name, _ in rows)
    click.echo(f"{'Migration':<{width}}  Applied At")
    click.echo("-" * (width + 16))
    for name, applied_at in rows:
        click.echo(f"{name:<{width}}  {applied_at or 'PENDING'}")


if __name__ == "__main__":
    cli()
