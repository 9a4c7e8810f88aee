"""Error types for the Spaces MCP server.

Two families live here. ``ClusterError`` and its four subclasses are the
only exceptions the cluster gateway ever raises; ``translate_api_exception``
maps any transport failure onto one of them. The remaining ``SpacesError``
subclasses cover validation, identity and record-store failures that never
touch the cluster.
"""

from __future__ import annotations

from typing import Any


class SpacesError(Exception):
    """Base exception for all Spaces MCP errors."""

    code = "SPACES_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(SpacesError):
    """Input rejected locally before any cluster call."""

    code = "VALIDATION_ERROR"

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"Invalid {field}: {message}")
        self.field = field


class AuthenticationError(SpacesError):
    """Bearer credential missing or failed verification."""

    code = "UNAUTHENTICATED"


class AccessDeniedError(SpacesError):
    """Caller does not own the space and is not an administrator."""

    code = "ACCESS_DENIED"

    def __init__(self, subject: str, space_id: str) -> None:
        super().__init__(f"User '{subject}' may not access space '{space_id}'")
        self.subject = subject
        self.space_id = space_id


class NotFoundError(SpacesError):
    """Record (not cluster resource) not found."""

    code = "NOT_FOUND"

    def __init__(self, kind: str, name: str, namespace: str | None = None) -> None:
        location = f" in namespace '{namespace}'" if namespace else ""
        super().__init__(f"{kind} '{name}' not found{location}")
        self.kind = kind
        self.name = name
        self.namespace = namespace


class ConfigurationError(SpacesError):
    """Invalid configuration or unusable cluster credentials."""

    code = "CONFIGURATION_ERROR"


class OperationNotAllowedError(SpacesError):
    """Operation blocked by server configuration."""

    code = "OPERATION_NOT_ALLOWED"


class ClusterError(SpacesError):
    """Failure reported by the Kubernetes control plane.

    Carries the resource kind, namespace, attempted action and a short
    cause message. The raw API response body is never stored.
    """

    code = "K8S_ERROR"
    status_code = 500

    def __init__(
        self,
        resource: str,
        namespace: str | None = None,
        action: str | None = None,
        cause: str | None = None,
    ) -> None:
        self.resource = resource
        self.namespace = namespace
        self.action = action
        self.cause = cause
        super().__init__(self._describe())

    def _describe(self) -> str:
        return f"Cluster error on {self.resource}"

    @property
    def details(self) -> dict[str, str | None]:
        return {
            "resource": self.resource,
            "namespace": self.namespace,
            "action": self.action,
            "cause": self.cause,
        }

    def to_dict(self) -> dict[str, Any]:
        """Render the error envelope returned to callers."""
        return {
            "code": self.code,
            "message": self.message,
            "status_code": self.status_code,
            "details": self.details,
        }


class ResourceNotFound(ClusterError):
    """The named resource or namespace does not exist."""

    code = "K8S_RESOURCE_NOT_FOUND"
    status_code = 404

    def _describe(self) -> str:
        where = f" in namespace {self.namespace}" if self.namespace else ""
        return f"{self.resource} does not exist{where}"


class ResourceForbidden(ClusterError):
    """Cluster credentials lack permission for the action."""

    code = "K8S_FORBIDDEN"
    status_code = 403

    def _describe(self) -> str:
        return f"Not permitted to {self.action or 'operate on'} {self.resource}"


class ResourceConflict(ClusterError):
    """Resource already exists or was modified concurrently."""

    code = "K8S_RESOURCE_CONFLICT"
    status_code = 409

    def _describe(self) -> str:
        return f"{self.resource} conflicts with an existing resource"


class InternalClusterError(ClusterError):
    """Unclassified transport or server failure."""

    code = "K8S_INTERNAL_ERROR"
    status_code = 500

    def _describe(self) -> str:
        return f"Failed to {self.action or 'process'} {self.resource}"


_STATUS_TO_ERROR: dict[int, type[ClusterError]] = {
    404: ResourceNotFound,
    403: ResourceForbidden,
    409: ResourceConflict,
}


def _status_of(exc: BaseException) -> int | None:
    status = getattr(exc, "status", None)
    if isinstance(status, int) and not isinstance(status, bool):
        return status
    return None


def _cause_of(exc: BaseException) -> str:
    # ApiException.__str__ embeds headers and body; keep only the reason phrase.
    status = _status_of(exc)
    reason = getattr(exc, "reason", None)
    if status is not None:
        return f"{status} {reason}" if reason else str(status)
    if reason:
        return str(reason)
    return str(exc) or type(exc).__name__


def translate_api_exception(
    exc: BaseException,
    resource: str,
    action: str,
    namespace: str | None = None,
) -> ClusterError:
    """Map a transport failure onto the cluster error taxonomy.

    Total over its input: anything without a recognised status code becomes
    ``InternalClusterError``. Errors that are already ``ClusterError`` pass
    through unchanged.

    Args:
        exc: The failure raised by the Kubernetes client.
        resource: Kind of resource being operated on, e.g. "Namespace".
        action: Attempted action, e.g. "create".
        namespace: Namespace involved, if any.

    Returns:
        The domain exception to raise.
    """
    if isinstance(exc, ClusterError):
        return exc

    error_cls = _STATUS_TO_ERROR.get(_status_of(exc) or 0, InternalClusterError)
    return error_cls(resource, namespace=namespace, action=action, cause=_cause_of(exc))
