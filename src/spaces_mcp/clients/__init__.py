"""Kubernetes transport and gateway."""

from spaces_mcp.clients.base import K8sClient
from spaces_mcp.clients.gateway import ClusterGateway, LookupOutcome, NamespaceLookup

__all__ = ["ClusterGateway", "K8sClient", "LookupOutcome", "NamespaceLookup"]
