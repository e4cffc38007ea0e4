"""
ddb-migrate: migration tracking backed by DynamoDB.

Applied migrations are recorded in a ledger table keyed by file name and
application time. Connection settings come from a multi-profile config file,
including a local mode for DynamoDB Local that skips credential resolution.

Example:
    from ddb_migrate import Ledger, MigrationEntry, connect

    handle = await connect("dev")
    async with Ledger(handle) as ledger:
        if not await ledger.table_exists():
            await ledger.ensure_schema()
        await ledger.add_migration(MigrationEntry.now("20240101120000-init.py"))
        print(await ledger.list_migrations())
"""

from .config import load_profiles
from .connector import ClientHandle, connect
from .credentials import (
    CredentialProvider,
    Credentials,
    SharedCredentialProvider,
    StaticCredentialProvider,
)
from .exceptions import (
    ConfigError,
    DdbMigrateError,
    LedgerDeleteError,
    LedgerError,
    LedgerReadError,
    LedgerWriteError,
    MigrationError,
    MigrationLoadError,
    SchemaError,
)
from .ledger import Ledger
from .migrations import MigrationRunner, load_migration
from .models import ConnectionProfile, MigrationEntry
from .profiles import resolve_profile

__all__ = [
    # Connection
    "ClientHandle",
    "ConnectionProfile",
    "connect",
    "load_profiles",
    "resolve_profile",
    # Credentials
    "CredentialProvider",
    "Credentials",
    "SharedCredentialProvider",
    "StaticCredentialProvider",
    # Ledger
    "Ledger",
    "MigrationEntry",
    # Migrations
    "MigrationRunner",
    "load_migration",
    # Exceptions
    "ConfigError",
    "DdbMigrateError",
    "LedgerDeleteError",
    "LedgerError",
    "LedgerReadError",
    "LedgerWriteError",
    "MigrationError",
    "MigrationLoadError",
    "SchemaError",
]
