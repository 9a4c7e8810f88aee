"""MCP Tools for space operations."""

from typing import TYPE_CHECKING, Any

from mcp.server.fastmcp import FastMCP

from spaces_mcp.domains.spaces.models import ServiceTier, Space, SpaceCreate
from spaces_mcp.models.common import ResourceMetadata
from spaces_mcp.models.quota import QuotaUsage
from spaces_mcp.utils.errors import (
    ClusterError,
    OperationNotAllowedError,
    SpacesError,
    ValidationError,
)

if TYPE_CHECKING:
    from spaces_mcp.server import SpacesServer


def space_to_dict(space: Space) -> dict[str, Any]:
    """Format a space for tool responses."""
    return {
        "id": space.id,
        "name": space.name,
        "description": space.description,
        "tier": space.tier.value,
        "status": space.status.value,
        "owner_id": space.owner_id,
        "created_at": space.created_at.isoformat(),
        "updated_at": space.updated_at.isoformat(),
        "_source": ResourceMetadata(
            name=space.namespace, kind="Namespace", api_version="v1"
        ).to_source_dict(),
    }


def quota_to_dict(usage: QuotaUsage) -> dict[str, Any]:
    return usage.model_dump()


def error_response(e: SpacesError) -> dict[str, Any]:
    """Format an error without leaking transport payloads."""
    if isinstance(e, ClusterError):
        body = e.to_dict()
        return {"error": body["message"], **body}
    return {"error": e.message, "code": e.code, "message": e.message}


def _blocked(server: "SpacesServer", operation: str) -> dict[str, Any] | None:
    allowed, reason = server.config.is_operation_allowed(operation)
    if allowed:
        return None
    message = reason or f"Operation '{operation}' is disabled"
    return error_response(OperationNotAllowedError(message))


def register_tools(mcp: FastMCP, server: "SpacesServer") -> None:
    """Register space management tools with the MCP server."""

    @mcp.tool()
    async def create_space(
        token: str,
        name: str,
        description: str | None = None,
        tier: str = "FREE",
    ) -> dict[str, Any]:
        """Create a new space with its own namespace, quota and limit range.

        Args:
            token: Caller's bearer token.
            name: Space name: 3-50 lowercase letters, digits or hyphens,
                starting with a letter and ending with a letter or digit.
            description: Optional description (max 500 characters).
            tier: Service tier deciding the quota: FREE, PRO or TEAM.

        Returns:
            The created space, or an error.
        """
        blocked = _blocked(server, "create")
        if blocked:
            return blocked

        try:
            service_tier = ServiceTier(tier.upper())
        except ValueError:
            choices = ", ".join(t.value for t in ServiceTier)
            return error_response(
                ValidationError("tier", f"unknown tier '{tier}', choose one of: {choices}")
            )

        try:
            identity = await server.verifier.verify(token)
            space = await server.provisioner.create(
                identity,
                SpaceCreate(name=name, description=description, tier=service_tier),
            )
        except SpacesError as e:
            return error_response(e)

        result = space_to_dict(space)
        result["message"] = f"Space '{name}' created successfully"
        return result

    @mcp.tool()
    async def list_spaces(token: str, limit: int | None = None) -> dict[str, Any]:
        """List the caller's spaces.

        Administrators see every space.

        Args:
            token: Caller's bearer token.
            limit: Maximum number of spaces to return, at least 1.

        Returns:
            Spaces with a total count.
        """
        if limit is not None and limit < 1:
            return error_response(ValidationError("limit", "must be at least 1"))

        try:
            identity = await server.verifier.verify(token)
            spaces = await server.provisioner.list_spaces(identity)
        except SpacesError as e:
            return error_response(e)

        effective_limit = server.config.max_list_limit
        if limit is not None:
            effective_limit = min(limit, effective_limit)

        return {
            "total": len(spaces),
            "returned": min(len(spaces), effective_limit),
            "spaces": [space_to_dict(s) for s in spaces[:effective_limit]],
        }

    @mcp.tool()
    async def get_space(token: str, space_id: str) -> dict[str, Any]:
        """Get a space by id.

        Args:
            token: Caller's bearer token.
            space_id: The space identifier.

        Returns:
            Space details, or an error.
        """
        try:
            identity = await server.verifier.verify(token)
            space = await server.provisioner.get(identity, space_id)
        except SpacesError as e:
            return error_response(e)
        return space_to_dict(space)

    @mcp.tool()
    async def update_space(
        token: str,
        space_id: str,
        name: str | None = None,
        description: str | None = None,
    ) -> dict[str, Any]:
        """Rename a space or change its description.

        Args:
            token: Caller's bearer token.
            space_id: The space identifier.
            name: New name, same rules as on creation.
            description: New description.

        Returns:
            The updated space, or an error.
        """
        blocked = _blocked(server, "update")
        if blocked:
            return blocked

        try:
            identity = await server.verifier.verify(token)
            space = await server.provisioner.update(
                identity, space_id, name=name, description=description
            )
        except SpacesError as e:
            return error_response(e)
        return space_to_dict(space)

    @mcp.tool()
    async def delete_space(token: str, space_id: str, confirm: bool = False) -> dict[str, Any]:
        """Delete a space.

        WARNING: This deletes the space's namespace and ALL resources in it.

        Args:
            token: Caller's bearer token.
            space_id: The space identifier.
            confirm: Must be True to actually delete. This is a safety measure.

        Returns:
            Confirmation of deletion or an error.
        """
        blocked = _blocked(server, "delete")
        if blocked:
            return blocked

        if not confirm:
            return {
                "error": "Deletion not confirmed",
                "message": (
                    f"To delete space '{space_id}', set confirm=True. "
                    "WARNING: This will delete ALL resources in the space."
                ),
            }

        try:
            identity = await server.verifier.verify(token)
            space = await server.provisioner.remove(identity, space_id)
        except SpacesError as e:
            return error_response(e)

        result = space_to_dict(space)
        result["deleted"] = True
        result["message"] = f"Space '{space.name}' deletion initiated"
        return result

    @mcp.tool()
    async def get_space_quota(token: str, space_id: str) -> dict[str, Any]:
        """Get CPU, memory and storage usage against the space quota.

        Args:
            token: Caller's bearer token.
            space_id: The space identifier.

        Returns:
            Used and limit per dimension. ``usage`` is null while the
            cluster has not reported quota status yet.
        """
        try:
            identity = await server.verifier.verify(token)
            usage = await server.provisioner.get_quota_usage(identity, space_id)
        except SpacesError as e:
            return error_response(e)

        return {
            "space_id": space_id,
            "usage": quota_to_dict(usage) if usage is not None else None,
        }
