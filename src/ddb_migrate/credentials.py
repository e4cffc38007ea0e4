"""Credential providers used by the backend connector.

The connector picks exactly one provider per profile instead of relying on
the SDK's global fallback chain:

- ``StaticCredentialProvider`` for profiles carrying explicit keys
- ``SharedCredentialProvider`` for ambient discovery (shared credentials
  file, environment, instance metadata) scoped to a named AWS profile

Local-mode profiles use no provider at all.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol

import aioboto3  # type: ignore[import-untyped]
from botocore.exceptions import ProfileNotFound

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Credentials:
    """Resolved AWS credentials."""

    access_key_id: str
    secret_access_key: str
    session_token: str | None = None

    def __repr__(self) -> str:
        # Never print secrets
        return f"Credentials(access_key_id={self.access_key_id!r})"


class CredentialProvider(Protocol):
    """Protocol for credential sources."""

    async def load(self) -> Credentials | None:
        """Resolve credentials, or None when none are available."""
        ...

    def session_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for the aioboto3 session that signs requests."""
        ...


class StaticCredentialProvider:
    """Credentials given explicitly in the profile."""

    def __init__(self, access_key_id: str, secret_access_key: str) -> None:
        self.access_key_id = access_key_id
        self.secret_access_key = secret_access_key

    async def load(self) -> Credentials | None:
        return Credentials(
            access_key_id=self.access_key_id,
            secret_access_key=self.secret_access_key,
        )

    def session_kwargs(self) -> dict[str, Any]:
        return {
            "aws_access_key_id": self.access_key_id,
            "aws_secret_access_key": self.secret_access_key,
        }


class SharedCredentialProvider:
    """
    Ambient credential discovery through a botocore session.

    ``load()`` only reports what the session currently resolves. The client
    session itself is built from ``session_kwargs()``, so it stays scoped to
    ``profile_name`` and botocore refreshes temporary credentials as usual.

    Args:
        profile_name: AWS shared-config profile to read, or None for the
            default chain
        session_factory: Callable building the session (injectable for tests)
    """

    def __init__(
        self,
        profile_name: str | None = None,
        session_factory: Callable[..., Any] = aioboto3.Session,
    ) -> None:
        self.profile_name = profile_name
        self._session_factory = session_factory

    def session_kwargs(self) -> dict[str, Any]:
        return {"profile_name": self.profile_name}

    async def load(self) -> Credentials | None:
        try:
            session = self._session_factory(**self.session_kwargs())
        except ProfileNotFound:
            logger.warning(
                "AWS profile %r not found in shared credentials; requests will fail",
                self.profile_name,
            )
            return None

        creds = await session.get_credentials()
        if creds is None:
            logger.debug("No ambient credentials found (profile=%s)", self.profile_name)
            return None

        frozen = await creds.get_frozen_credentials()
        return Credentials(
            access_key_id=frozen.access_key,
            secret_access_key=frozen.secret_key,
            session_token=frozen.token,
        )
