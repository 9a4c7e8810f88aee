"""FastMCP server definition for Spaces."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Any

from mcp.server.fastmcp import FastMCP

from spaces_mcp.auth.identity import IdentityVerifier, TokenReviewVerifier
from spaces_mcp.clients.base import K8sClient
from spaces_mcp.clients.gateway import ClusterGateway
from spaces_mcp.config import SpacesConfig, get_config
from spaces_mcp.domains.spaces.models import ServiceTier
from spaces_mcp.domains.spaces.provisioner import SpaceProvisioner
from spaces_mcp.domains.spaces.store import InMemorySpaceStore, SpaceStore
from spaces_mcp.domains.spaces.tiers import TierCatalog

logger = logging.getLogger(__name__)


class SpacesServer:
    """Spaces MCP server.

    Owns the Kubernetes client for the process lifetime: it is created on
    startup, handed to the gateway and provisioner, and closed on shutdown.
    The record store and identity verifier can be injected; otherwise an
    in-memory store and a TokenReview verifier are used.
    """

    def __init__(
        self,
        config: SpacesConfig | None = None,
        store: SpaceStore | None = None,
        verifier: IdentityVerifier | None = None,
    ) -> None:
        self._config = config or get_config()
        self._store: SpaceStore = store or InMemorySpaceStore()
        self._verifier = verifier
        self._k8s_client: K8sClient | None = None
        self._provisioner: SpaceProvisioner | None = None
        self._tiers: TierCatalog | None = None
        self._mcp: FastMCP | None = None

    @property
    def config(self) -> SpacesConfig:
        """Get server configuration."""
        return self._config

    @property
    def k8s(self) -> K8sClient:
        """Get the Kubernetes client.

        Raises:
            RuntimeError: If server is not running.
        """
        if self._k8s_client is None:
            raise RuntimeError("Server not running. K8s client not available.")
        return self._k8s_client

    @property
    def provisioner(self) -> SpaceProvisioner:
        """Get the space provisioner.

        Raises:
            RuntimeError: If server is not running.
        """
        if self._provisioner is None:
            raise RuntimeError("Server not running. Provisioner not available.")
        return self._provisioner

    @property
    def verifier(self) -> IdentityVerifier:
        """Get the identity verifier.

        Raises:
            RuntimeError: If server is not running.
        """
        if self._verifier is None:
            raise RuntimeError("Server not running. Identity verifier not available.")
        return self._verifier

    @property
    def mcp(self) -> FastMCP:
        """Get the MCP server instance.

        Raises:
            RuntimeError: If server is not initialized.
        """
        if self._mcp is None:
            raise RuntimeError("Server not initialized.")
        return self._mcp

    def startup(self) -> None:
        """Connect to the cluster and build the provisioning stack.

        A client that is already connected is kept.

        Raises:
            ConfigurationError: If credentials or the tiers file cannot be loaded.
        """
        if self._k8s_client is None or not self._k8s_client.is_connected:
            self._k8s_client = K8sClient(self._config)
            self._k8s_client.connect()

        self._tiers = TierCatalog.load(self._config.effective_tiers_path)
        if self._verifier is None:
            self._verifier = TokenReviewVerifier(self._k8s_client, self._config.admin_groups)
        self._provisioner = SpaceProvisioner(
            ClusterGateway(self._k8s_client), self._store, self._tiers
        )

    def shutdown(self) -> None:
        """Release the cluster connection."""
        if self._k8s_client:
            self._k8s_client.disconnect()
        self._k8s_client = None
        self._provisioner = None

    def _create_lifespan(self) -> Callable[[Any], AbstractAsyncContextManager[None]]:
        """Create the lifespan context manager for the MCP server."""
        server_self = self

        @asynccontextmanager
        async def lifespan(_app: Any) -> AsyncIterator[None]:
            """Connect K8s on startup, disconnect on shutdown."""
            logger.info("Starting Spaces MCP server...")
            try:
                server_self.startup()
                logger.info("Spaces MCP server started")
                yield
            finally:
                logger.info("Shutting down Spaces MCP server...")
                server_self.shutdown()
                logger.info("Spaces MCP server shut down")

        return lifespan

    def create_mcp(self) -> FastMCP:
        """Create and configure the FastMCP server."""
        from spaces_mcp.domains.spaces.tools import register_tools

        mcp = FastMCP(
            name="spaces-mcp",
            instructions="MCP server for tenant spaces - create isolated, "
            "quota-bounded Kubernetes namespaces and inspect their usage.",
            lifespan=self._create_lifespan(),
            host=self._config.host,
            port=self._config.port,
        )
        self._mcp = mcp

        register_tools(mcp, self)
        self._register_core_resources(mcp)
        return mcp

    def _register_core_resources(self, mcp: FastMCP) -> None:
        """Register core MCP resources."""

        @mcp.resource("spaces://server/status")
        def server_status() -> dict:
            """Connection state and configured safety settings."""
            return {
                "connected": self._k8s_client is not None and self._k8s_client.is_connected,
                "read_only": self._config.read_only_mode,
            }

        @mcp.resource("spaces://tiers")
        def service_tiers() -> dict:
            """Quota and limit range presets for every service tier."""
            tiers = self._tiers or TierCatalog()
            return {
                tier.value: tiers.resources_for(tier).model_dump() for tier in ServiceTier
            }

        logger.info("Registered core MCP resources")


def create_server(config: SpacesConfig | None = None) -> FastMCP:
    """Create and return the MCP server instance."""
    return SpacesServer(config).create_mcp()
