"""Common Pydantic models shared across Spaces resources."""

from typing import Any

from pydantic import BaseModel, Field

from spaces_mcp.utils.labels import SpacesLabels


class ResourceMetadata(BaseModel):
    """Identity and markers of a cluster object owned by a space."""

    name: str = Field(..., description="Resource name")
    namespace: str | None = Field(None, description="Resource namespace")
    kind: str | None = Field(None, description="Resource kind")
    api_version: str | None = Field(None, description="API version")
    labels: dict[str, str] = Field(default_factory=dict, description="Resource labels")
    annotations: dict[str, str] = Field(default_factory=dict, description="Resource annotations")

    def to_source_dict(self) -> dict[str, Any]:
        """The `_source` block tool responses use to point at the cluster object."""
        return {
            "kind": self.kind,
            "api_version": self.api_version,
            "name": self.name,
            "namespace": self.namespace,
        }

    @classmethod
    def from_k8s_metadata(
        cls,
        metadata: Any,
        kind: str | None = None,
        api_version: str | None = None,
    ) -> "ResourceMetadata":
        """Read name, namespace, labels and annotations off a V1ObjectMeta."""
        return cls(
            name=metadata.name,
            namespace=getattr(metadata, "namespace", None),
            kind=kind,
            api_version=api_version,
            labels=dict(metadata.labels or {}),
            annotations=dict(metadata.annotations or {}),
        )


class NamespaceInfo(BaseModel):
    """Cluster-side namespace as seen by the gateway."""

    metadata: ResourceMetadata
    phase: str = Field("Active", description="Namespace phase (Active or Terminating)")

    @property
    def is_managed(self) -> bool:
        """Whether the namespace carries the managed-by marker."""
        return SpacesLabels.is_managed(self.metadata.labels)

    @property
    def is_terminating(self) -> bool:
        return self.phase == "Terminating"

    @classmethod
    def from_namespace(cls, namespace: Any) -> "NamespaceInfo":
        """Create from a Kubernetes V1Namespace."""
        phase = "Active"
        status = getattr(namespace, "status", None)
        if status is not None:
            phase = getattr(status, "phase", None) or "Active"

        return cls(
            metadata=ResourceMetadata.from_k8s_metadata(
                namespace.metadata,
                kind="Namespace",
                api_version="v1",
            ),
            phase=phase,
        )
