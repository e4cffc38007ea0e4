"""Backend connector: turns a configuration profile into a DynamoDB client handle."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import aioboto3  # type: ignore[import-untyped]
from botocore import UNSIGNED
from botocore.config import Config
from botocore.exceptions import ProfileNotFound

from .config import load_profiles
from .credentials import (
    CredentialProvider,
    Credentials,
    SharedCredentialProvider,
    StaticCredentialProvider,
)
from .exceptions import ConfigError
from .models import ConnectionProfile
from .profiles import DEFAULT_PROFILE, resolve_profile

logger = logging.getLogger(__name__)


class ClientHandle:
    """
    Connection settings for one profile plus a lazily opened DynamoDB client.

    The client session is built from ``provider``. A handle without a
    provider (local mode) sends unsigned requests and never looks up
    credentials. ``credentials`` is what the provider resolved when the
    handle was built, for reporting only. Use as an async context manager,
    or call ``close()``.
    """

    def __init__(
        self,
        profile: ConnectionProfile,
        provider: CredentialProvider | None,
        credentials: Credentials | None = None,
    ) -> None:
        self.profile = profile
        self.region = profile.region
        self.endpoint_url = profile.dynamodb_endpoint
        self.provider = provider
        self.credentials = credentials
        self._session: aioboto3.Session | None = None
        self._client: Any = None

    @property
    def is_local(self) -> bool:
        return self.profile.is_local

    def _make_session(self) -> aioboto3.Session:
        kwargs = self.provider.session_kwargs() if self.provider is not None else {}
        try:
            return aioboto3.Session(**kwargs)
        except ProfileNotFound as e:
            raise ConfigError(
                f"AWS profile not found for profile:{self.profile.name}: {e}"
            ) from e

    async def client(self) -> Any:
        """
        Get or create the DynamoDB client.

        Raises:
            ConfigError: If the AWS profile backing ambient credentials
                does not exist
        """
        if self._client is None:
            config = None
            if self.provider is None:
                config = Config(signature_version=UNSIGNED)
            self._session = self._make_session()
            self._client = await self._session.client(
                "dynamodb",
                region_name=self.region,
                endpoint_url=self.endpoint_url,
                config=config,
            ).__aenter__()
        return self._client

    async def close(self) -> None:
        """Close the DynamoDB client."""
        if self._client is not None:
            await self._client.__aexit__(None, None, None)
            self._client = None
            self._session = None

    async def __aenter__(self) -> ClientHandle:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    def __repr__(self) -> str:
        return (
            f"ClientHandle(profile={self.profile.name!r}, region={self.region!r}, "
            f"endpoint_url={self.endpoint_url!r}, local={self.is_local})"
        )


def credential_provider(profile: ConnectionProfile) -> CredentialProvider | None:
    """
    Choose the credential provider for a profile.

    Returns None for local-mode profiles, which never resolve credentials.
    """
    if profile.is_local:
        return None
    if profile.access_key_id and profile.secret_access_key:
        return StaticCredentialProvider(profile.access_key_id, profile.secret_access_key)
    scope = profile.profile if profile.name != DEFAULT_PROFILE else None
    return SharedCredentialProvider(profile_name=scope)


async def build_handle(
    profile: ConnectionProfile,
    provider_factory: Callable[[ConnectionProfile], CredentialProvider | None] = (
        credential_provider
    ),
) -> ClientHandle:
    """Build a client handle for an already-resolved profile."""
    provider = provider_factory(profile)
    credentials = await provider.load() if provider is not None else None
    logger.debug(
        "Connecting profile=%s region=%s endpoint=%s local=%s",
        profile.name,
        profile.region,
        profile.dynamodb_endpoint,
        profile.is_local,
    )
    return ClientHandle(profile, provider, credentials)


async def connect(
    profile_name: str = DEFAULT_PROFILE,
    *,
    loader: Callable[[], list[ConnectionProfile]] = load_profiles,
    provider_factory: Callable[[ConnectionProfile], CredentialProvider | None] = (
        credential_provider
    ),
) -> ClientHandle:
    """
    Build a client handle for the named profile.

    Profiles are reloaded from configuration on every call.

    Args:
        profile_name: Profile to connect with (default: "default")
        loader: Callable returning all configured profiles
        provider_factory: Chooses the credential provider for the profile

    Returns:
        A ClientHandle; the DynamoDB client itself is opened on first use

    Raises:
        ConfigError: If the profile is missing or has no region
    """
    profile = resolve_profile(loader(), profile_name)
    return await build_handle(profile, provider_factory)
