"""Exception hierarchy for the access-control engine.

All errors inherit from AccessCoreError. This module provides:
- Base exception hierarchy with stable error codes
- gRPC status mapping for server-side enforcement

Denial is not an error: evaluators return an AccessDecision. Only the
explicit ``require()`` helper turns a denial into AccessDeniedError.

Usage:
    from accesscore.exceptions import AccessCoreError, DirectoryStoreError

Directory store adapters raise DirectoryStoreError (or any exception);
the resolver catches everything at its boundary and fails closed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .decisions import AccessDecision

__all__ = [
    # Base hierarchy
    "AccessCoreError",
    "ConfigurationError",
    "DirectoryStoreError",
    "AccessDeniedError",
    "ModuleToggleError",
    "IdentityMissingError",
    # gRPC helpers
    "get_grpc_status_code",
]

# ---- Exception Hierarchy ----------------------------------------------------


class AccessCoreError(Exception):
    """Base exception for the access-control engine.

    Attributes:
        code: Stable error code string for protocol mapping (e.g. "ACCESS_DENIED").
        message: Human-readable error description.
        details: Additional context as keyword arguments.
    """

    code: str = "INTERNAL_ERROR"
    message: str = "An internal error occurred"

    def __init__(self, message: str | None = None, code: str | None = None, **kwargs: Any) -> None:
        self.message = message or self.message
        self.code = code or self.code
        self.details = kwargs
        super().__init__(self.message)


class ConfigurationError(AccessCoreError):
    """Invalid or missing configuration."""

    code: str = "CONFIGURATION_ERROR"


class DirectoryStoreError(AccessCoreError):
    """Directory store unreachable or returned an error."""

    code: str = "DIRECTORY_ERROR"
    message: str = "Directory store request failed"


class ModuleToggleError(AccessCoreError):
    """Requested module flag change is not allowed."""

    code: str = "MODULE_TOGGLE_ERROR"


class IdentityMissingError(AccessCoreError):
    """Caller reached an enforcement point without actor or tenant identity."""

    code: str = "IDENTITY_MISSING"
    message: str = "Missing actor or tenant identity"


class AccessDeniedError(AccessCoreError):
    """Raised by ``require()`` when a requirement is not met.

    Attributes:
        decision: The AccessDecision that caused the error.
    """

    code: str = "ACCESS_DENIED"
    message: str = "Access denied"

    def __init__(self, decision: AccessDecision, message: str | None = None) -> None:
        self.decision = decision
        reason = decision.reason.value if decision.reason else None
        super().__init__(
            message or f"Access denied: {decision.failed_requirement or 'pending'}",
            code="ACCESS_PENDING" if decision.is_pending else None,
            reason=reason,
            module=decision.module,
        )


# ---- gRPC mapping -----------------------------------------------------------


def get_grpc_status_code(error: AccessCoreError) -> Any:
    """Map AccessCoreError to gRPC status code.

    Import grpc locally to avoid a hard dependency for non-gRPC callers.
    """
    import grpc

    error_to_status = {
        "ACCESS_DENIED": grpc.StatusCode.PERMISSION_DENIED,
        "ACCESS_PENDING": grpc.StatusCode.UNAVAILABLE,
        "IDENTITY_MISSING": grpc.StatusCode.UNAUTHENTICATED,
        "CONFIGURATION_ERROR": grpc.StatusCode.FAILED_PRECONDITION,
        "DIRECTORY_ERROR": grpc.StatusCode.UNAVAILABLE,
        "MODULE_TOGGLE_ERROR": grpc.StatusCode.FAILED_PRECONDITION,
    }
    return error_to_status.get(error.code, grpc.StatusCode.INTERNAL)
