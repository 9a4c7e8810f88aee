"""Shared models."""

from spaces_mcp.models.common import NamespaceInfo, ResourceMetadata

__all__ = ["NamespaceInfo", "ResourceMetadata"]
