"""Tests for space models and naming."""

import re

import pytest

from spaces_mcp.domains.spaces.models import (
    NAMESPACE_MAX_LENGTH,
    Space,
    SpaceStatus,
    namespace_for,
    validate_description,
    validate_space_name,
)
from spaces_mcp.utils.errors import ValidationError

DNS_LABEL = re.compile(r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?$")


class TestValidateSpaceName:
    """Test the naming policy."""

    @pytest.mark.parametrize("name", ["abc", "team-alpha", "a1-b2", "a" * 50])
    def test_valid(self, name: str) -> None:
        assert validate_space_name(name) == name

    @pytest.mark.parametrize(
        "name",
        ["", "ab", "a" * 51, "Team", "1abc", "-abc", "abc-", "abc_def", "abc def"],
    )
    def test_invalid(self, name: str) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_space_name(name)

        assert exc_info.value.field == "name"

    def test_description_length(self) -> None:
        assert validate_description(None) is None
        assert validate_description("x" * 500) == "x" * 500
        with pytest.raises(ValidationError):
            validate_description("x" * 501)


class TestNamespaceFor:
    """Test namespace derivation."""

    def test_simple_id(self) -> None:
        assert namespace_for("abc123") == "ws-abc123"

    def test_uuid(self) -> None:
        space_id = "3f2b8c1e-9a4d-4e7f-8b21-0c5d6e7f8a9b"

        assert namespace_for(space_id) == f"ws-{space_id}"

    def test_deterministic(self) -> None:
        assert namespace_for("Team_Alpha!") == namespace_for("Team_Alpha!")

    @pytest.mark.parametrize(
        "space_id", ["Team_Alpha", "UPPER", "x" * 80, "___", "a.b.c", "-abc-"]
    )
    def test_always_dns_safe(self, space_id: str) -> None:
        namespace = namespace_for(space_id)

        assert namespace.startswith("ws-")
        assert len(namespace) <= NAMESPACE_MAX_LENGTH
        assert DNS_LABEL.match(namespace)

    def test_distinct_ids_do_not_collide(self) -> None:
        """Ids that sanitize to the same text still get different namespaces."""
        assert namespace_for("Team_Alpha") != namespace_for("team-alpha")
        assert namespace_for("TEAM") != namespace_for("team")


class TestSpace:
    """Test the space record."""

    def test_touch_updates_status_and_timestamp(self) -> None:
        space = Space(id="abc", owner_id="user-alice", name="team", namespace="ws-abc")

        active = space.touch(SpaceStatus.ACTIVE)

        assert space.status == SpaceStatus.PENDING
        assert active.status == SpaceStatus.ACTIVE
        assert active.updated_at >= space.updated_at
        assert active.created_at == space.created_at
