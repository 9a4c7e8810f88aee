"""Cluster gateway: the only code that calls the Kubernetes API.

Each public coroutine wraps exactly one CoreV1 call, runs it on a worker
thread and translates any failure with ``translate_api_exception`` so
callers only ever see the four ``ClusterError`` kinds. The gateway holds no
state beyond the injected transport and never retries.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from kubernetes import client  # type: ignore[import-untyped]

from spaces_mcp.models.common import NamespaceInfo
from spaces_mcp.models.quota import LimitRangeItem, QuotaUsage, read_quota_usage
from spaces_mcp.utils.errors import ResourceNotFound, translate_api_exception
from spaces_mcp.utils.labels import SpacesLabels

if TYPE_CHECKING:
    from spaces_mcp.clients.base import K8sClient

logger = logging.getLogger(__name__)

# One quota and one limit range per namespace, under fixed names
QUOTA_NAME = "space-quota"
LIMIT_RANGE_NAME = "default-limits"


class LookupOutcome(str, Enum):
    """Result kinds of a namespace lookup."""

    FOUND = "found"
    ABSENT = "absent"


@dataclass(frozen=True)
class NamespaceLookup:
    """Outcome of reading a namespace where absence is not an error."""

    outcome: LookupOutcome
    namespace: NamespaceInfo | None = None

    @property
    def found(self) -> bool:
        return self.outcome is LookupOutcome.FOUND

    @classmethod
    def present(cls, namespace: NamespaceInfo) -> "NamespaceLookup":
        return cls(LookupOutcome.FOUND, namespace)

    @classmethod
    def absent(cls) -> "NamespaceLookup":
        return cls(LookupOutcome.ABSENT)


class ClusterGateway:
    """Async namespace, quota and limit range operations."""

    def __init__(self, k8s: K8sClient) -> None:
        self._k8s = k8s

    async def _call(
        self,
        method: str,
        resource: str,
        action: str,
        scope: str | None,
        /,
        **kwargs: Any,
    ) -> Any:
        # ``scope`` is the namespace reported in errors; kwargs go to the API call.
        # A disconnected client raises on attribute access, so resolve inside the try.
        try:
            fn = getattr(self._k8s.core_v1, method)
            return await asyncio.to_thread(fn, **kwargs)
        except Exception as e:
            raise translate_api_exception(e, resource, action, scope) from e

    # Namespaces

    async def create_namespace(
        self,
        name: str,
        labels: Mapping[str, str] | None = None,
        annotations: Mapping[str, str] | None = None,
    ) -> None:
        """Create a namespace carrying the managed-by label.

        Caller labels never override the managed-by marker.

        Raises:
            ResourceConflict: If the namespace already exists.
        """
        body = client.V1Namespace(
            metadata=client.V1ObjectMeta(
                name=name,
                labels=SpacesLabels.with_managed_by(dict(labels or {})),
                annotations=dict(annotations) if annotations else None,
            )
        )
        await self._call("create_namespace", "Namespace", "create", name, body=body)
        logger.info(f"Namespace created: {name}")

    async def delete_namespace(self, name: str) -> None:
        """Delete a namespace and everything in it.

        Raises:
            ResourceNotFound: If the namespace does not exist.
        """
        await self._call("delete_namespace", "Namespace", "delete", name, name=name)
        logger.info(f"Namespace deleted: {name}")

    async def get_namespace(self, name: str) -> NamespaceInfo:
        """Read a namespace.

        Raises:
            ResourceNotFound: If the namespace does not exist.
        """
        ns = await self._call("read_namespace", "Namespace", "read", name, name=name)
        return NamespaceInfo.from_namespace(ns)

    async def lookup_namespace(self, name: str) -> NamespaceLookup:
        """Read a namespace, reporting absence as a result instead of an error.

        Every failure other than "not found" is still raised.
        """
        try:
            ns = await self.get_namespace(name)
        except ResourceNotFound:
            return NamespaceLookup.absent()
        return NamespaceLookup.present(ns)

    async def namespace_exists(self, name: str) -> bool:
        """Check whether a namespace exists."""
        return (await self.lookup_namespace(name)).found

    # Quota and limit range

    async def create_resource_quota(self, namespace: str, spec: Mapping[str, str]) -> None:
        """Attach the space quota to a namespace.

        Args:
            namespace: Target namespace.
            spec: Hard limits keyed by quota dimension, e.g. ``{"limits.cpu": "2"}``.
        """
        body = client.V1ResourceQuota(
            metadata=client.V1ObjectMeta(
                name=QUOTA_NAME,
                namespace=namespace,
                labels=SpacesLabels.managed_labels(),
            ),
            spec=client.V1ResourceQuotaSpec(hard=dict(spec)),
        )
        await self._call(
            "create_namespaced_resource_quota",
            "ResourceQuota",
            "create",
            namespace,
            namespace=namespace,
            body=body,
        )
        logger.info(f"ResourceQuota created in namespace: {namespace}")

    async def get_resource_quota_usage(self, namespace: str) -> QuotaUsage | None:
        """Read quota usage for a namespace.

        Returns:
            The usage snapshot, or None when the quota object does not exist
            or has not reported status yet.
        """
        try:
            quota = await self._call(
                "read_namespaced_resource_quota",
                "ResourceQuota",
                "read",
                namespace,
                name=QUOTA_NAME,
                namespace=namespace,
            )
        except ResourceNotFound:
            return None
        return read_quota_usage(getattr(quota, "status", None))

    async def create_limit_range(
        self, namespace: str, limits: Sequence[LimitRangeItem]
    ) -> None:
        """Attach the default limit range to a namespace."""
        body = client.V1LimitRange(
            metadata=client.V1ObjectMeta(
                name=LIMIT_RANGE_NAME,
                namespace=namespace,
                labels=SpacesLabels.managed_labels(),
            ),
            spec=client.V1LimitRangeSpec(
                limits=[
                    client.V1LimitRangeItem(
                        type=item.type,
                        default=dict(item.default) or None,
                        default_request=dict(item.default_request) or None,
                    )
                    for item in limits
                ]
            ),
        )
        await self._call(
            "create_namespaced_limit_range",
            "LimitRange",
            "create",
            namespace,
            namespace=namespace,
            body=body,
        )
        logger.info(f"LimitRange created in namespace: {namespace}")
