"""Tests for shared resource models."""

from kubernetes import client

from spaces_mcp.models.common import NamespaceInfo, ResourceMetadata
from spaces_mcp.utils.labels import SpacesLabels


class TestResourceMetadata:
    """Test ResourceMetadata."""

    def test_source_dict_fields(self) -> None:
        meta = ResourceMetadata(name="ws-abc", kind="Namespace", api_version="v1")

        assert meta.to_source_dict() == {
            "kind": "Namespace",
            "api_version": "v1",
            "name": "ws-abc",
            "namespace": None,
        }

    def test_from_k8s_metadata_without_labels(self) -> None:
        meta = ResourceMetadata.from_k8s_metadata(
            client.V1ObjectMeta(name="ws-abc"), kind="Namespace"
        )

        assert meta.labels == {}
        assert meta.annotations == {}


class TestNamespaceInfo:
    """Test NamespaceInfo."""

    def test_managed_namespace(self) -> None:
        ns = NamespaceInfo.from_namespace(
            client.V1Namespace(
                metadata=client.V1ObjectMeta(
                    name="ws-abc", labels=SpacesLabels.managed_labels()
                )
            )
        )

        assert ns.is_managed
        assert ns.phase == "Active"
        assert ns.metadata.kind == "Namespace"
