"""Caller identity and authorization."""

from spaces_mcp.auth.identity import (
    Identity,
    IdentityVerifier,
    StaticIdentityVerifier,
    TokenReviewVerifier,
    UserRole,
    ensure_access,
    identity_from_payload,
)

__all__ = [
    "Identity",
    "IdentityVerifier",
    "StaticIdentityVerifier",
    "TokenReviewVerifier",
    "UserRole",
    "ensure_access",
    "identity_from_payload",
]
