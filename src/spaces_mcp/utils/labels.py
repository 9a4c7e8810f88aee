"""Labels and annotations applied to resources owned by the Spaces server."""


class SpacesLabels:
    """Label keys and helpers for Spaces-managed resources."""

    MANAGED_BY = "app.kubernetes.io/managed-by"
    MANAGED_BY_VALUE = "spaces-mcp"

    SPACE_ID = "spaces.io/space-id"
    TIER = "spaces.io/tier"

    @classmethod
    def managed_labels(cls) -> dict[str, str]:
        """Labels every managed namespace, quota and limit range carries."""
        return {cls.MANAGED_BY: cls.MANAGED_BY_VALUE}

    @classmethod
    def with_managed_by(cls, labels: dict[str, str] | None) -> dict[str, str]:
        """Merge caller labels with the managed-by marker.

        The marker always wins over a caller-supplied value.
        """
        merged = dict(labels or {})
        merged.update(cls.managed_labels())
        return merged

    @classmethod
    def space_labels(cls, space_id: str, tier: str | None = None) -> dict[str, str]:
        """Labels identifying the space a namespace belongs to."""
        labels = {cls.SPACE_ID: space_id}
        if tier:
            labels[cls.TIER] = tier
        return labels

    @classmethod
    def is_managed(cls, labels: dict[str, str] | None) -> bool:
        """Check whether a resource was created by this server."""
        return (labels or {}).get(cls.MANAGED_BY) == cls.MANAGED_BY_VALUE


class SpacesAnnotations:
    """Annotation keys used on space namespaces."""

    DISPLAY_NAME = "openshift.io/display-name"
    DESCRIPTION = "openshift.io/description"
    REQUESTER = "openshift.io/requester"
