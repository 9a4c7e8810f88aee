"""Cluster credential loading.

Resolves the kubeconfig path, loads it into a dedicated client
configuration and falls back to the in-cluster service account when the
file cannot be used. Nothing here touches the kubernetes package's global
default configuration.
"""

from __future__ import annotations

import logging
from pathlib import Path

from kubernetes import client  # type: ignore[import-untyped]
from kubernetes import config as kube_config  # type: ignore[import-untyped]

from spaces_mcp.utils.errors import ConfigurationError

logger = logging.getLogger(__name__)


def expand_kubeconfig_path(path: str) -> Path:
    """Expand a configured kubeconfig path to an absolute path.

    ``~``, ``~/...`` and ``$HOME/...`` resolve against the current user's
    home directory. Anything else is resolved relative to the working
    directory.
    """
    if path == "~" or path.startswith("~/"):
        return Path.home() / path[2:]
    if path.startswith("$HOME/"):
        return Path.home() / path[len("$HOME/") :]
    return Path(path).resolve()


def _load_from_file(path: Path, context: str | None) -> client.ApiClient:
    configuration = client.Configuration()
    kube_config.load_kube_config(
        config_file=str(path),
        context=context,
        client_configuration=configuration,
        persist_config=False,
    )
    return client.ApiClient(configuration)


def _load_in_cluster() -> client.ApiClient:
    configuration = client.Configuration()
    kube_config.load_incluster_config(client_configuration=configuration)
    return client.ApiClient(configuration)


def load_api_client(
    kubeconfig_path: str | None = None,
    context: str | None = None,
) -> client.ApiClient:
    """Produce the API client shared by every cluster call.

    Args:
        kubeconfig_path: Configured kubeconfig path, or None for in-cluster.
        context: Kubeconfig context to activate.

    Returns:
        An initialized ``kubernetes.client.ApiClient``.

    Raises:
        ConfigurationError: If neither the kubeconfig nor in-cluster
            credentials can be loaded.
    """
    if kubeconfig_path:
        expanded = expand_kubeconfig_path(kubeconfig_path)
        try:
            api_client = _load_from_file(expanded, context)
            logger.info(f"Kubernetes config loaded from file: {expanded}")
            return api_client
        except Exception as e:
            logger.error(
                f"Failed to load kubeconfig from {expanded}: {e}, "
                "falling back to in-cluster config"
            )

    try:
        api_client = _load_in_cluster()
    except Exception as e:
        raise ConfigurationError(f"Could not load Kubernetes credentials: {e}") from e

    if kubeconfig_path:
        logger.info("Kubernetes config loaded from cluster (fallback)")
    else:
        logger.info("Kubernetes config loaded from cluster")
    return api_client
