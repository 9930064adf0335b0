"""Tests for accesscore.exceptions."""

from __future__ import annotations

import grpc
import pytest
from accesscore.decisions import AccessDecision, DenialReason
from accesscore.exceptions import (
    AccessCoreError,
    AccessDeniedError,
    ConfigurationError,
    DirectoryStoreError,
    IdentityMissingError,
    ModuleToggleError,
    get_grpc_status_code,
)


class TestHierarchy:
    """Error codes, messages and details."""

    def test_base_defaults(self) -> None:
        err = AccessCoreError()
        assert err.code == "INTERNAL_ERROR"
        assert str(err) == "An internal error occurred"
        assert err.details == {}

    def test_details_kept(self) -> None:
        err = DirectoryStoreError("roles query failed", query="user_roles")
        assert err.code == "DIRECTORY_ERROR"
        assert err.details == {"query": "user_roles"}

    @pytest.mark.parametrize("cls", [ConfigurationError, DirectoryStoreError, ModuleToggleError, AccessDeniedError, IdentityMissingError])
    def test_subclasses(self, cls) -> None:
        assert issubclass(cls, AccessCoreError)

    def test_access_denied_module(self) -> None:
        err = AccessDeniedError(AccessDecision.deny(DenialReason.MODULE_DISABLED, module="REVENUE"))
        assert err.code == "ACCESS_DENIED"
        assert str(err) == "Access denied: REVENUE"
        assert err.details == {"reason": "MODULE_DISABLED", "module": "REVENUE"}

    def test_access_denied_permission(self) -> None:
        err = AccessDeniedError(AccessDecision.deny(DenialReason.INSUFFICIENT_ACCESS))
        assert str(err) == "Access denied: permission"
        assert err.details["module"] is None

    def test_access_pending(self) -> None:
        err = AccessDeniedError(AccessDecision.pending())
        assert err.code == "ACCESS_PENDING"
        assert err.details["reason"] is None


class TestGrpcStatus:
    """get_grpc_status_code mapping."""

    @pytest.mark.parametrize(
        "error,status",
        [
            (AccessDeniedError(AccessDecision.deny(DenialReason.INSUFFICIENT_ACCESS)), grpc.StatusCode.PERMISSION_DENIED),
            (AccessDeniedError(AccessDecision.pending()), grpc.StatusCode.UNAVAILABLE),
            (IdentityMissingError(), grpc.StatusCode.UNAUTHENTICATED),
            (ConfigurationError("bad"), grpc.StatusCode.FAILED_PRECONDITION),
            (DirectoryStoreError(), grpc.StatusCode.UNAVAILABLE),
            (ModuleToggleError("no"), grpc.StatusCode.FAILED_PRECONDITION),
            (AccessCoreError(), grpc.StatusCode.INTERNAL),
        ],
    )
    def test_mapping(self, error, status) -> None:
        assert get_grpc_status_code(error) == status

    def test_super_admin_denial_is_permission_denied(self) -> None:
        err = AccessDeniedError(AccessDecision.deny(DenialReason.SUPER_ADMIN_REQUIRED))
        assert str(err) == "Access denied: super_admin"
        assert get_grpc_status_code(err) == grpc.StatusCode.PERMISSION_DENIED
