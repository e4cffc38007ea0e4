"""Tests for profile resolution."""

import pytest

from ddb_migrate.exceptions import ConfigError
from ddb_migrate.models import ConnectionProfile
from ddb_migrate.profiles import find_profile, resolve_profile


@pytest.fixture
def profiles() -> list[ConnectionProfile]:
    return [
        ConnectionProfile(
            region="defaultRegion", access_key_id="defaultAccess", secret_access_key="defaultSecret"
        ),
        ConnectionProfile(
            profile="dev",
            region="devRegion",
            access_key_id="devAccess",
            secret_access_key="devSecret",
        ),
        ConnectionProfile(
            profile="test",
            region="testRegion",
            access_key_id="testAccess",
            secret_access_key="testSecret",
        ),
    ]


class TestResolveProfile:
    """Tests for resolve_profile."""

    @pytest.mark.parametrize(
        ("name", "region", "access_key"),
        [
            ("test", "testRegion", "testAccess"),
            ("dev", "devRegion", "devAccess"),
            ("default", "defaultRegion", "defaultAccess"),
        ],
    )
    def test_selects_profile_by_name(self, profiles, name, region, access_key) -> None:
        profile = resolve_profile(profiles, name)
        assert profile.region == region
        assert profile.access_key_id == access_key

    def test_default_name_is_default(self, profiles) -> None:
        assert resolve_profile(profiles).region == "defaultRegion"

    def test_labelled_default_wins_over_unlabelled(self) -> None:
        profiles = [
            ConnectionProfile(region="first"),
            ConnectionProfile(profile="default", region="labelled"),
        ]
        assert resolve_profile(profiles).region == "labelled"

    def test_first_unlabelled_profile_is_default(self) -> None:
        profiles = [
            ConnectionProfile(profile="dev", region="devRegion"),
            ConnectionProfile(region="first"),
            ConnectionProfile(region="second"),
        ]
        assert resolve_profile(profiles).region == "first"

    def test_empty_region_fails(self) -> None:
        with pytest.raises(ConfigError, match="Please provide region for profile:default"):
            resolve_profile([ConnectionProfile(region="")])

    def test_empty_region_names_requested_profile(self) -> None:
        profiles = [ConnectionProfile(profile="dev")]
        with pytest.raises(ConfigError, match="Please provide region for profile:dev"):
            resolve_profile(profiles, "dev")

    def test_missing_profile_fails(self, profiles) -> None:
        with pytest.raises(ConfigError, match="profile:prod"):
            resolve_profile(profiles, "prod")

    def test_unlabelled_profile_not_used_for_named_lookup(self) -> None:
        assert find_profile([ConnectionProfile(region="r")], "dev") is None
