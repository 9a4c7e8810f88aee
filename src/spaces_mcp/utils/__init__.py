"""Utility functions and helpers for the Spaces MCP server."""

from spaces_mcp.utils.errors import (
    AccessDeniedError,
    AuthenticationError,
    ClusterError,
    ConfigurationError,
    InternalClusterError,
    NotFoundError,
    OperationNotAllowedError,
    ResourceConflict,
    ResourceForbidden,
    ResourceNotFound,
    SpacesError,
    ValidationError,
    translate_api_exception,
)
from spaces_mcp.utils.labels import SpacesAnnotations, SpacesLabels

__all__ = [
    # Errors
    "SpacesError",
    "ValidationError",
    "AuthenticationError",
    "AccessDeniedError",
    "NotFoundError",
    "ConfigurationError",
    "OperationNotAllowedError",
    # Cluster error taxonomy
    "ClusterError",
    "ResourceNotFound",
    "ResourceForbidden",
    "ResourceConflict",
    "InternalClusterError",
    "translate_api_exception",
    # Labels and annotations
    "SpacesAnnotations",
    "SpacesLabels",
]
