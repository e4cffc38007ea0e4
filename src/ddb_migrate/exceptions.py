"""Exceptions for ddb-migrate."""

# ---------------------------------------------------------------------------
# Base Exception
# ---------------------------------------------------------------------------


class DdbMigrateError(Exception):
    """
    Base exception for all ddb-migrate errors.

    All exceptions raised by this library inherit from this class,
    allowing callers to catch all library-specific errors with a single
    except clause.
    """

    pass


# ---------------------------------------------------------------------------
# Configuration Exceptions
# ---------------------------------------------------------------------------


class ConfigError(DdbMigrateError):
    """
    Raised when the profile configuration is invalid or incomplete.

    Covers unreadable or malformed config files as well as profiles
    missing required fields such as the region.
    """

    pass


# ---------------------------------------------------------------------------
# Ledger Exceptions
# ---------------------------------------------------------------------------


class SchemaError(DdbMigrateError):
    """
    Raised when the ledger table cannot be created or never becomes active.

    The message is the underlying DynamoDB error message; the original
    exception is available as ``__cause__``.
    """

    pass


class LedgerError(DdbMigrateError):
    """
    Base exception for ledger item operations.

    Attributes:
        table_name: The DynamoDB table that was being accessed
    """

    def __init__(self, message: str, table_name: str | None = None) -> None:
        self.table_name = table_name
        super().__init__(message)


class LedgerWriteError(LedgerError):
    """Raised when a migration entry cannot be written."""


class LedgerDeleteError(LedgerError):
    """Raised when a migration entry cannot be deleted."""


class LedgerReadError(LedgerError):
    """Raised when any page of a ledger scan fails."""


# ---------------------------------------------------------------------------
# Migration Exceptions
# ---------------------------------------------------------------------------


class MigrationError(DdbMigrateError):
    """
    Raised when a migration script fails while running.

    Attributes:
        file_name: The migration file that failed
    """

    def __init__(self, file_name: str, reason: str) -> None:
        self.file_name = file_name
        self.reason = reason
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        return f"Migration {self.file_name} failed: {self.reason}"


class MigrationLoadError(MigrationError):
    """Raised when a migration script cannot be imported or is incomplete."""

    def _format_message(self) -> str:
        return f"Could not load migration {self.file_name}: {self.reason}"
