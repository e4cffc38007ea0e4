"""Core models for ddb-migrate."""

import time
from dataclasses import dataclass
from typing import Any

LOCAL_MODE = "local"
"""Profile ``mode`` value that disables credential resolution."""

APPLIED_AT_FORMAT = "%Y%m%d%H%M%S"
"""Compact timestamp format used for ``applied_at`` and migration file prefixes."""


def timestamp(now: float | None = None) -> str:
    """Format a UTC timestamp as ``YYYYMMDDHHMMSS``."""
    return time.strftime(APPLIED_AT_FORMAT, time.gmtime(now))


@dataclass(frozen=True)
class MigrationEntry:
    """
    One applied migration in the ledger.

    The pair (file_name, applied_at) is the table's primary key, so applying
    the same file again at a different time creates a second entry.

    Attributes:
        file_name: Migration source file name (partition key)
        applied_at: Compact UTC timestamp of application (sort key)
    """

    file_name: str
    applied_at: str

    @classmethod
    def now(cls, file_name: str) -> "MigrationEntry":
        """Create an entry for ``file_name`` stamped with the current time."""
        return cls(file_name=file_name, applied_at=timestamp())

    @classmethod
    def from_record(cls, record: dict[str, str]) -> "MigrationEntry":
        """Create an entry from a flat ``{FILE_NAME, APPLIED_AT}`` record."""
        return cls(file_name=record["FILE_NAME"], applied_at=record["APPLIED_AT"])

    def as_record(self) -> dict[str, str]:
        """Flat ``{FILE_NAME, APPLIED_AT}`` projection of this entry."""
        return {"FILE_NAME": self.file_name, "APPLIED_AT": self.applied_at}


# Config file keys (camelCase) mapped to dataclass fields
_PROFILE_KEYS = {
    "profile": "profile",
    "region": "region",
    "accessKeyId": "access_key_id",
    "access_key_id": "access_key_id",
    "secretAccessKey": "secret_access_key",
    "secret_access_key": "secret_access_key",
    "dynamoDbEndpoint": "dynamodb_endpoint",
    "dynamodb_endpoint": "dynamodb_endpoint",
    "mode": "mode",
}


@dataclass(frozen=True)
class ConnectionProfile:
    """
    A named set of DynamoDB connection settings.

    Profiles are validated when they are resolved (see
    ``profiles.resolve_profile``), not when they are constructed, so a
    profile file may contain incomplete entries that are never selected.

    Attributes:
        region: AWS region (required at resolution time)
        profile: Profile name; None means the default profile
        access_key_id: Explicit access key
        secret_access_key: Explicit secret key
        dynamodb_endpoint: Custom endpoint URL (e.g., DynamoDB Local)
        mode: "local" to skip credential resolution entirely
    """

    region: str = ""
    profile: str | None = None
    access_key_id: str | None = None
    secret_access_key: str | None = None
    dynamodb_endpoint: str | None = None
    mode: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ConnectionProfile":
        """
        Build a profile from a config file mapping.

        Accepts camelCase keys (``accessKeyId``, ``dynamoDbEndpoint``) and
        their snake_case equivalents. Unknown keys are ignored.
        """
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            field_name = _PROFILE_KEYS.get(key)
            if field_name is None or value is None:
                continue
            kwargs[field_name] = str(value)
        return cls(**kwargs)

    @property
    def name(self) -> str:
        """Profile name, with unlabelled profiles reported as "default"."""
        return self.profile or "default"

    @property
    def is_local(self) -> bool:
        """True when this profile targets a local emulator without credentials."""
        return self.mode == LOCAL_MODE
