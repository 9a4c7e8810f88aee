"""Kubernetes transport client shared by all cluster operations."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from kubernetes import client  # type: ignore[import-untyped]

from spaces_mcp.clients.credentials import load_api_client

if TYPE_CHECKING:
    from spaces_mcp.config import SpacesConfig

logger = logging.getLogger(__name__)


class K8sClient:
    """Owns the API client for the lifetime of the server process.

    ``connect`` loads credentials once; ``disconnect`` releases the
    connection pool. The CoreV1 and Authentication APIs built on top are
    safe to share between concurrent requests.
    """

    def __init__(self, config: SpacesConfig) -> None:
        self._config = config
        self._api_client: client.ApiClient | None = None
        self._core_v1: client.CoreV1Api | None = None
        self._authn_v1: client.AuthenticationV1Api | None = None

    @property
    def is_connected(self) -> bool:
        return self._api_client is not None

    def connect(self) -> None:
        """Load credentials and build the API objects.

        Raises:
            ConfigurationError: If no credentials can be loaded.
        """
        if self.is_connected:
            return
        api_client = load_api_client(
            self._config.kubeconfig_path,
            context=self._config.kubeconfig_context,
        )
        self._api_client = api_client
        self._core_v1 = client.CoreV1Api(api_client)
        self._authn_v1 = client.AuthenticationV1Api(api_client)
        logger.info("Kubernetes CoreV1Api client initialized")

    def disconnect(self) -> None:
        """Close the underlying connection pool."""
        if self._api_client is not None:
            try:
                self._api_client.close()
            except Exception as e:
                logger.warning(f"Error closing Kubernetes API client: {e}")
        self._api_client = None
        self._core_v1 = None
        self._authn_v1 = None

    @property
    def core_v1(self) -> client.CoreV1Api:
        """CoreV1 API.

        Raises:
            RuntimeError: If the client is not connected.
        """
        if self._core_v1 is None:
            raise RuntimeError("Kubernetes client is not connected")
        return self._core_v1

    @property
    def authentication_v1(self) -> client.AuthenticationV1Api:
        """Authentication API used for TokenReview.

        Raises:
            RuntimeError: If the client is not connected.
        """
        if self._authn_v1 is None:
            raise RuntimeError("Kubernetes client is not connected")
        return self._authn_v1
