"""Shared fixtures: an in-memory CoreV1 API and a wired provisioner."""

import threading
from typing import Any
from unittest.mock import MagicMock

import pytest
from kubernetes import client
from kubernetes.client import ApiException

from spaces_mcp.auth.identity import Identity, UserRole
from spaces_mcp.clients.gateway import ClusterGateway
from spaces_mcp.domains.spaces.provisioner import SpaceProvisioner
from spaces_mcp.domains.spaces.store import InMemorySpaceStore


def api_error(status: int, reason: str) -> ApiException:
    return ApiException(status=status, reason=reason)


class FakeCoreV1:
    """Thread-safe stand-in for CoreV1Api covering the calls the gateway makes.

    ``fail_on`` injects an ApiException for a method name. ``gate(name)``
    makes that method block until released, so tests can cancel mid-call.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.namespaces: dict[str, Any] = {}
        self.quotas: dict[str, Any] = {}
        self.limit_ranges: dict[str, Any] = {}
        self.fail_on: dict[str, ApiException] = {}
        self.calls: list[str] = []
        self._gates: dict[str, threading.Event] = {}
        self.entered: dict[str, threading.Event] = {}

    def gate(self, method: str) -> threading.Event:
        release = threading.Event()
        self._gates[method] = release
        self.entered[method] = threading.Event()
        return release

    def _enter(self, method: str) -> None:
        self.calls.append(method)
        if method in self._gates:
            self.entered[method].set()
            self._gates[method].wait(timeout=5)
        if method in self.fail_on:
            raise self.fail_on[method]

    def create_namespace(self, body: Any) -> Any:
        self._enter("create_namespace")
        with self._lock:
            name = body.metadata.name
            if name in self.namespaces:
                raise api_error(409, "Conflict")
            self.namespaces[name] = body
            return body

    def read_namespace(self, name: str) -> Any:
        self._enter("read_namespace")
        with self._lock:
            if name not in self.namespaces:
                raise api_error(404, "Not Found")
            return self.namespaces[name]

    def delete_namespace(self, name: str) -> Any:
        self._enter("delete_namespace")
        with self._lock:
            if name not in self.namespaces:
                raise api_error(404, "Not Found")
            del self.namespaces[name]
            self.quotas.pop(name, None)
            self.limit_ranges.pop(name, None)
            return client.V1Status(status="Success")

    def create_namespaced_resource_quota(self, namespace: str, body: Any) -> Any:
        self._enter("create_namespaced_resource_quota")
        with self._lock:
            if namespace not in self.namespaces:
                raise api_error(404, "Not Found")
            if namespace in self.quotas:
                raise api_error(409, "Conflict")
            self.quotas[namespace] = body
            return body

    def read_namespaced_resource_quota(self, name: str, namespace: str) -> Any:
        self._enter("read_namespaced_resource_quota")
        with self._lock:
            quota = self.quotas.get(namespace)
            if quota is None or quota.metadata.name != name:
                raise api_error(404, "Not Found")
            return quota

    def create_namespaced_limit_range(self, namespace: str, body: Any) -> Any:
        self._enter("create_namespaced_limit_range")
        with self._lock:
            if namespace not in self.namespaces:
                raise api_error(404, "Not Found")
            if namespace in self.limit_ranges:
                raise api_error(409, "Conflict")
            self.limit_ranges[namespace] = body
            return body

    def report_quota_status(
        self, namespace: str, hard: dict[str, str], used: dict[str, str]
    ) -> None:
        """Simulate the quota controller filling in status."""
        with self._lock:
            self.quotas[namespace].status = client.V1ResourceQuotaStatus(hard=hard, used=used)


@pytest.fixture
def fake_core() -> FakeCoreV1:
    return FakeCoreV1()


@pytest.fixture
def k8s(fake_core: FakeCoreV1) -> MagicMock:
    """K8sClient double whose core_v1 is the in-memory API."""
    mock = MagicMock()
    mock.core_v1 = fake_core
    return mock


@pytest.fixture
def gateway(k8s: MagicMock) -> ClusterGateway:
    return ClusterGateway(k8s)


@pytest.fixture
def store() -> InMemorySpaceStore:
    return InMemorySpaceStore()


@pytest.fixture
def provisioner(gateway: ClusterGateway, store: InMemorySpaceStore) -> SpaceProvisioner:
    return SpaceProvisioner(gateway, store)


@pytest.fixture
def owner() -> Identity:
    return Identity(subject="user-alice", email="alice@example.com", role=UserRole.USER)


@pytest.fixture
def other_user() -> Identity:
    return Identity(subject="user-bob", email="bob@example.com", role=UserRole.USER)


@pytest.fixture
def admin() -> Identity:
    return Identity(subject="user-root", email="root@example.com", role=UserRole.ADMIN)
