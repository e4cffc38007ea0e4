"""
Migration scripts and the runner that applies them.

A migration is a Python file in the migrations directory named
``<YYYYMMDDHHMMSS>-<name>.py`` that defines two coroutines::

    async def up(client):
        ...

    async def down(client):
        ...

Both receive the raw aioboto3 DynamoDB client. Every applied migration is
recorded in the ledger once its ``up`` succeeds, and removed once its
``down`` succeeds.
"""

from __future__ import annotations

import importlib.util
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

from .exceptions import MigrationError, MigrationLoadError
from .models import MigrationEntry, timestamp

if TYPE_CHECKING:
    from .ledger import Ledger

logger = logging.getLogger(__name__)

DEFAULT_MIGRATIONS_DIR = "migrations"

MIGRATION_FILE_PATTERN = re.compile(r"^\d{14}-[A-Za-z0-9_-]+\.py$")

_SLUG_PATTERN = re.compile(r"[^A-Za-z0-9_-]+")

MIGRATION_TEMPLATE = '''"""{name}"""


async def up(client):
    """Apply the migration using the DynamoDB client."""


async def down(client):
    """Revert the migration using the DynamoDB client."""
'''


class MigrationFunc(Protocol):
    """Protocol for migration functions."""

    async def __call__(self, client: Any) -> None:
        """Execute the migration."""
        ...


@dataclass
class Migration:
    """A loaded migration script."""

    file_name: str
    path: Path
    up: MigrationFunc
    down: MigrationFunc


def discover_migrations(directory: str | Path) -> list[Path]:
    """List migration files in ``directory``, oldest first."""
    root = Path(directory)
    if not root.is_dir():
        return []
    return sorted(
        (p for p in root.iterdir() if p.is_file() and MIGRATION_FILE_PATTERN.match(p.name)),
        key=lambda p: p.name,
    )


def load_migration(path: str | Path) -> Migration:
    """
    Import a migration file.

    Raises:
        MigrationLoadError: If the file cannot be imported or lacks up/down
    """
    path = Path(path)
    module_name = "ddb_migrate_script_" + _SLUG_PATTERN.sub("_", path.stem)
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise MigrationLoadError(path.name, "not an importable Python file")

    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except FileNotFoundError as e:
        raise MigrationLoadError(path.name, "file not found") from e
    except Exception as e:
        raise MigrationLoadError(path.name, f"{type(e).__name__}: {e}") from e

    missing = [name for name in ("up", "down") if not callable(getattr(module, name, None))]
    if missing:
        raise MigrationLoadError(path.name, f"missing {', '.join(missing)}()")

    return Migration(file_name=path.name, path=path, up=module.up, down=module.down)


def create_migration_file(
    directory: str | Path,
    name: str,
    now: float | None = None,
) -> Path:
    """
    Write a new migration file from the template.

    Args:
        directory: Migrations directory (created if missing)
        name: Human-readable name, turned into the file slug
        now: Epoch seconds for the file prefix (default: current time)

    Returns:
        Path of the new file
    """
    slug = _SLUG_PATTERN.sub("-", name.strip()).strip("-")
    if not slug:
        raise ValueError(f"Invalid migration name: {name!r}")

    root = Path(directory)
    root.mkdir(parents=True, exist_ok=True)
    path = root / f"{timestamp(now)}-{slug}.py"
    if path.exists():
        raise FileExistsError(f"Migration file already exists: {path}")
    path.write_text(MIGRATION_TEMPLATE.format(name=name.strip()))
    return path


class MigrationRunner:
    """
    Applies and reverts migration scripts against a ledger.

    Args:
        ledger: Ledger that records applied migrations
        directory: Directory holding the migration files
    """

    def __init__(self, ledger: Ledger, directory: str | Path = DEFAULT_MIGRATIONS_DIR) -> None:
        self.ledger = ledger
        self.directory = Path(directory)

    async def _applied(self) -> list[MigrationEntry]:
        if not await self.ledger.table_exists():
            return []
        return await self.ledger.list_entries()

    async def status(self) -> list[tuple[str, str | None]]:
        """
        Report every migration file with its latest application time.

        Returns:
            ``(file_name, applied_at)`` pairs in file order; applied_at is
            None for pending migrations
        """
        latest: dict[str, str] = {}
        for entry in await self._applied():
            if entry.applied_at > latest.get(entry.file_name, ""):
                latest[entry.file_name] = entry.applied_at
        return [(p.name, latest.get(p.name)) for p in discover_migrations(self.directory)]

    async def pending(self) -> list[Path]:
        """Migration files that have no ledger entry, oldest first."""
        applied = {entry.file_name for entry in await self._applied()}
        return [p for p in discover_migrations(self.directory) if p.name not in applied]

    async def up(self) -> list[MigrationEntry]:
        """
        Apply all pending migrations in file order.

        The ledger table is created first when missing. Each migration is
        recorded right after it succeeds, so a failure leaves earlier
        migrations recorded.

        Returns:
            Entries recorded for the applied migrations

        Raises:
            MigrationError: If a migration fails
        """
        if not await self.ledger.table_exists():
            await self.ledger.ensure_schema()

        client = await self.ledger.handle.client()
        applied: list[MigrationEntry] = []
        for path in await self.pending():
            migration = load_migration(path)
            logger.info("Applying %s", migration.file_name)
            try:
                await migration.up(client)
            except Exception as e:
                raise MigrationError(migration.file_name, str(e)) from e

            entry = MigrationEntry.now(migration.file_name)
            await self.ledger.add_migration(entry)
            applied.append(entry)

        return applied

    async def down(self, count: int = 1) -> list[MigrationEntry]:
        """
        Revert the ``count`` most recently applied migrations.

        Returns:
            Entries removed from the ledger, most recent first

        Raises:
            MigrationLoadError: If an applied migration's file is missing
            MigrationError: If a migration fails
        """
        if count < 1:
            raise ValueError("count must be positive")

        entries = sorted(
            await self._applied(),
            key=lambda e: (e.applied_at, e.file_name),
            reverse=True,
        )

        client = await self.ledger.handle.client()
        reverted: list[MigrationEntry] = []
        for entry in entries[:count]:
            migration = load_migration(self.directory / entry.file_name)
            logger.info("Reverting %s (applied %s)", entry.file_name, entry.applied_at)
            try:
                await migration.down(client)
            except Exception as e:
                raise MigrationError(entry.file_name, str(e)) from e

            await self.ledger.remove_migration(entry)
            reverted.append(entry)

        return reverted
