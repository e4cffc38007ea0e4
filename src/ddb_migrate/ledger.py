"""DynamoDB-backed ledger of applied migrations."""

import logging
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from . import schema
from .connector import ClientHandle
from .exceptions import LedgerDeleteError, LedgerReadError, LedgerWriteError, SchemaError
from .models import MigrationEntry

logger = logging.getLogger(__name__)

_STORE_ERRORS = (ClientError, BotoCoreError)


def error_message(error: Exception) -> str:
    """Extract the store's own message from a botocore error."""
    if isinstance(error, ClientError):
        message = error.response.get("Error", {}).get("Message")
        if message:
            return str(message)
    return str(error)


class Ledger:
    """
    Async repository for the migrations ledger table.

    Handles table provisioning, entry writes and deletes, and full scans.
    Every store failure surfaces as a library exception carrying the
    original DynamoDB message; nothing is retried here.
    """

    def __init__(
        self,
        handle: ClientHandle,
        table_name: str = schema.MIGRATIONS_LOG_TABLE,
    ) -> None:
        self.handle = handle
        self.table_name = table_name

    async def _get_client(self) -> Any:
        return await self.handle.client()

    async def close(self) -> None:
        await self.handle.close()

    async def __aenter__(self) -> "Ledger":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    # -------------------------------------------------------------------------
    # Table operations
    # -------------------------------------------------------------------------

    async def ensure_schema(self) -> None:
        """
        Create the ledger table and wait until it is active.

        An existing table is reported as an error, not ignored; check with
        ``table_exists()`` first when that should count as success.

        Raises:
            SchemaError: If creation or the wait for the table fails
        """
        client = await self._get_client()
        definition = schema.get_table_definition(self.table_name)

        try:
            await client.create_table(**definition)
        except _STORE_ERRORS as e:
            raise SchemaError(error_message(e)) from e

        try:
            waiter = client.get_waiter("table_exists")
            await waiter.wait(TableName=self.table_name)
        except _STORE_ERRORS as e:
            raise SchemaError(error_message(e)) from e

        logger.info("Created migrations ledger table %s", self.table_name)

    async def table_exists(self) -> bool:
        """
        Check whether the ledger table exists.

        Any describe failure (missing table, permissions, network) yields
        False; call ``describe_table`` directly for the error detail. A
        ``ConfigError`` from opening the client is not a describe failure
        and propagates.
        """
        client = await self._get_client()
        try:
            await client.describe_table(TableName=self.table_name)
        except _STORE_ERRORS as e:
            logger.debug("describe_table(%s) failed: %s", self.table_name, e)
            return False
        return True

    # -------------------------------------------------------------------------
    # Entry operations
    # -------------------------------------------------------------------------

    async def add_migration(self, entry: MigrationEntry) -> None:
        """
        Record an applied migration.

        Writes unconditionally; the same (file_name, applied_at) pair
        replaces the earlier item.

        Raises:
            LedgerWriteError: If the put fails
        """
        client = await self._get_client()
        try:
            await client.put_item(TableName=self.table_name, Item=schema.entry_item(entry))
        except _STORE_ERRORS as e:
            raise LedgerWriteError(error_message(e), table_name=self.table_name) from e

    async def remove_migration(self, entry: MigrationEntry) -> None:
        """
        Delete a migration entry. Deleting a missing entry is not an error.

        Raises:
            LedgerDeleteError: If the delete fails
        """
        client = await self._get_client()
        try:
            await client.delete_item(TableName=self.table_name, Key=schema.entry_key(entry))
        except _STORE_ERRORS as e:
            raise LedgerDeleteError(error_message(e), table_name=self.table_name) from e

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def list_migrations(self) -> list[dict[str, str]]:
        """
        Scan the whole ledger.

        Pages are fetched in order until a response carries no
        LastEvaluatedKey. The result is the concatenation of all pages in
        retrieval order; DynamoDB guarantees no particular scan order, so
        sort by APPLIED_AT when chronology matters.

        Returns:
            Flat ``{"FILE_NAME": ..., "APPLIED_AT": ...}`` records

        Raises:
            LedgerReadError: If any page fails (partial results are dropped)
        """
        client = await self._get_client()
        records: list[dict[str, str]] = []
        scan_args: dict[str, Any] = {"TableName": self.table_name}
        pages = 0

        while True:
            try:
                response = await client.scan(**scan_args)
            except _STORE_ERRORS as e:
                raise LedgerReadError(error_message(e), table_name=self.table_name) from e

            pages += 1
            records.extend(schema.parse_item(item) for item in response.get("Items", []))

            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                break
            scan_args["ExclusiveStartKey"] = last_key

        logger.debug("Scanned %d ledger entries in %d page(s)", len(records), pages)
        return records

    async def list_entries(self) -> list[MigrationEntry]:
        """Scan the whole ledger as MigrationEntry objects."""
        return [MigrationEntry.from_record(r) for r in await self.list_migrations()]
