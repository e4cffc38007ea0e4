"""Profile selection over an already-loaded list of connection profiles."""

from .exceptions import ConfigError
from .models import ConnectionProfile

DEFAULT_PROFILE = "default"


def find_profile(profiles: list[ConnectionProfile], name: str) -> ConnectionProfile | None:
    """
    Find the profile called ``name``.

    A profile labelled exactly ``name`` wins. For the default profile the
    first unlabelled entry is used when no entry is labelled "default".
    """
    for profile in profiles:
        if profile.profile == name:
            return profile

    if name == DEFAULT_PROFILE:
        for profile in profiles:
            if profile.profile is None:
                return profile

    return None


def resolve_profile(
    profiles: list[ConnectionProfile],
    name: str = DEFAULT_PROFILE,
) -> ConnectionProfile:
    """
    Select and validate the profile called ``name``.

    Args:
        profiles: All profiles from the configuration file
        name: Profile to select (default: "default")

    Returns:
        The selected profile

    Raises:
        ConfigError: If the profile is missing or has no region
    """
    profile = find_profile(profiles, name)
    if profile is None or not profile.region:
        raise ConfigError(f"Please provide region for profile:{name}")
    return profile
