"""Caller identity and authorization.

Provisioning never runs without a verified ``Identity``. Verification is
pluggable through ``IdentityVerifier``; the server ships a verifier backed
by the Kubernetes TokenReview API so bearer tokens issued for the cluster
double as credentials for this server.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol

from kubernetes import client  # type: ignore[import-untyped]
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from spaces_mcp.utils.errors import AccessDeniedError, AuthenticationError

if TYPE_CHECKING:
    from spaces_mcp.clients.base import K8sClient
    from spaces_mcp.domains.spaces.models import Space

logger = logging.getLogger(__name__)


class UserRole(str, Enum):
    """Roles a caller can hold."""

    USER = "USER"
    ADMIN = "ADMIN"


class Identity(BaseModel):
    """Verified caller identity."""

    subject: str = Field(..., min_length=1, description="Stable user identifier")
    email: str = Field("", description="User email, empty when unknown")
    role: UserRole = Field(UserRole.USER, description="Caller role")

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN


def identity_from_payload(payload: Any) -> Identity:
    """Validate a verified credential payload.

    Accepts ``sub`` as an alias for ``subject`` so decoded token claims can be
    passed straight through.

    Raises:
        AuthenticationError: If required fields are missing or malformed.
    """
    if not isinstance(payload, Mapping):
        raise AuthenticationError("Invalid identity payload")

    data = dict(payload)
    if "subject" not in data and "sub" in data:
        data["subject"] = data.pop("sub")
    if isinstance(data.get("role"), str):
        data["role"] = data["role"].upper()

    try:
        return Identity.model_validate(data)
    except PydanticValidationError as e:
        raise AuthenticationError("Invalid identity payload: missing or invalid fields") from e


def ensure_access(identity: Identity, space: Space) -> None:
    """Allow the space owner or an administrator.

    Raises:
        AccessDeniedError: If the caller is neither.
    """
    if identity.is_admin or identity.subject == space.owner_id:
        return
    raise AccessDeniedError(identity.subject, space.id)


class IdentityVerifier(Protocol):
    """Turns a bearer credential into a verified identity."""

    async def verify(self, token: str | None) -> Identity: ...


class TokenReviewVerifier:
    """Verify bearer tokens with the cluster's TokenReview API.

    The reviewed username becomes the subject. Email comes from the
    ``email`` extra when the authenticator provides it, otherwise from the
    username if it looks like an address. Members of any configured admin
    group receive the ADMIN role.
    """

    def __init__(self, k8s: K8sClient, admin_groups: Iterable[str] = ()) -> None:
        self._k8s = k8s
        self._admin_groups = frozenset(admin_groups)

    async def verify(self, token: str | None) -> Identity:
        if not token:
            raise AuthenticationError("Missing bearer credential")

        review = client.V1TokenReview(spec=client.V1TokenReviewSpec(token=token))
        try:
            result = await asyncio.to_thread(
                self._k8s.authentication_v1.create_token_review, body=review
            )
        except Exception as e:
            logger.warning(f"TokenReview request failed: {type(e).__name__}")
            raise AuthenticationError("Credential verification failed") from e

        status = getattr(result, "status", None)
        if status is None or not status.authenticated or status.user is None:
            raise AuthenticationError("Credential rejected")

        user = status.user
        username = user.username or ""
        groups = set(user.groups or [])
        extra = user.extra or {}
        emails = extra.get("email") or []
        email = emails[0] if emails else (username if "@" in username else "")
        role = UserRole.ADMIN if groups & self._admin_groups else UserRole.USER

        return identity_from_payload({"subject": username, "email": email, "role": role.value})


class StaticIdentityVerifier:
    """Verifier over a fixed token table.

    For local development and tests where no cluster authenticator is
    available.
    """

    def __init__(self, identities: Mapping[str, Identity]) -> None:
        self._identities = dict(identities)

    async def verify(self, token: str | None) -> Identity:
        if not token:
            raise AuthenticationError("Missing bearer credential")
        identity = self._identities.get(token)
        if identity is None:
            raise AuthenticationError("Credential rejected")
        return identity
