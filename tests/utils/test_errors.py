"""Tests for error types and API exception translation."""

import pytest
from kubernetes.client import ApiException

from spaces_mcp.utils.errors import (
    AccessDeniedError,
    ClusterError,
    InternalClusterError,
    NotFoundError,
    ResourceConflict,
    ResourceForbidden,
    ResourceNotFound,
    SpacesError,
    ValidationError,
    translate_api_exception,
)


class TestTranslateApiException:
    """Test mapping transport failures onto the cluster taxonomy."""

    @pytest.mark.parametrize(
        ("status", "expected", "code"),
        [
            (404, ResourceNotFound, "K8S_RESOURCE_NOT_FOUND"),
            (403, ResourceForbidden, "K8S_FORBIDDEN"),
            (409, ResourceConflict, "K8S_RESOURCE_CONFLICT"),
            (500, InternalClusterError, "K8S_INTERNAL_ERROR"),
            (401, InternalClusterError, "K8S_INTERNAL_ERROR"),
            (422, InternalClusterError, "K8S_INTERNAL_ERROR"),
        ],
    )
    def test_status_mapping(self, status: int, expected: type, code: str) -> None:
        exc = ApiException(status=status, reason="Reason")

        err = translate_api_exception(exc, "Namespace", "create", "ws-abc")

        assert type(err) is expected
        assert err.code == code
        assert err.resource == "Namespace"
        assert err.action == "create"
        assert err.namespace == "ws-abc"

    def test_exception_without_status(self) -> None:
        err = translate_api_exception(TimeoutError("timed out"), "ResourceQuota", "read")

        assert isinstance(err, InternalClusterError)
        assert err.cause == "timed out"
        assert err.namespace is None

    def test_non_integer_status_is_internal(self) -> None:
        exc = Exception("odd")
        exc.status = "404"  # type: ignore[attr-defined]

        err = translate_api_exception(exc, "Namespace", "read")

        assert isinstance(err, InternalClusterError)

    def test_cluster_error_passes_through(self) -> None:
        original = ResourceForbidden("Namespace", action="delete")

        assert translate_api_exception(original, "Other", "read") is original

    def test_response_body_not_included(self) -> None:
        """Raw response bodies never reach the message or cause."""
        exc = ApiException(status=403, reason="Forbidden")
        exc.body = '{"kind":"Status","message":"secret-token-abc"}'

        err = translate_api_exception(exc, "ResourceQuota", "create", "ws-abc")

        assert err.cause == "403 Forbidden"
        assert "secret-token-abc" not in err.message
        assert "secret-token-abc" not in str(err.to_dict())


class TestClusterErrorEnvelope:
    """Test the error envelope rendered for callers."""

    def test_to_dict(self) -> None:
        err = ResourceNotFound(
            "ResourceQuota", namespace="ws-abc", action="read", cause="404 Not Found"
        )

        assert err.to_dict() == {
            "code": "K8S_RESOURCE_NOT_FOUND",
            "message": "ResourceQuota does not exist in namespace ws-abc",
            "status_code": 404,
            "details": {
                "resource": "ResourceQuota",
                "namespace": "ws-abc",
                "action": "read",
                "cause": "404 Not Found",
            },
        }

    def test_status_codes(self) -> None:
        assert ResourceNotFound("x").status_code == 404
        assert ResourceForbidden("x").status_code == 403
        assert ResourceConflict("x").status_code == 409
        assert InternalClusterError("x").status_code == 500

    def test_forbidden_message_names_action(self) -> None:
        err = ResourceForbidden("LimitRange", action="create")

        assert err.message == "Not permitted to create LimitRange"

    def test_cluster_errors_are_spaces_errors(self) -> None:
        assert issubclass(ClusterError, SpacesError)


class TestDomainErrors:
    """Test errors raised before any cluster call."""

    def test_validation_error(self) -> None:
        err = ValidationError("name", "too short")

        assert err.field == "name"
        assert err.message == "Invalid name: too short"
        assert err.code == "VALIDATION_ERROR"

    def test_access_denied(self) -> None:
        err = AccessDeniedError("user-bob", "space-1")

        assert "user-bob" in err.message
        assert err.space_id == "space-1"

    def test_not_found_with_namespace(self) -> None:
        err = NotFoundError("Space", "abc", namespace="ws-abc")

        assert str(err) == "Space 'abc' not found in namespace 'ws-abc'"
