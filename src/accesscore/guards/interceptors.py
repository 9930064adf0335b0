"""gRPC server interceptor enforcing AccessRequirements per RPC.

Provides:
- ``EnforcementMode`` — three-state toggle: off / warn / enforce.
- ``RequirementInterceptor`` — maps RPC names to AccessRequirements and
  evaluates them against the caller's snapshot.
- ``_extract_rpc_name``, ``_should_skip`` — helper utilities.

The caller is identified by ``x-actor-id`` and ``x-tenant-id`` metadata; an
upstream authentication layer is expected to have set them.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Mapping

import grpc

from ..decisions import AccessDecision, AccessRequirement, DenialReason
from ..evaluator import evaluate
from ..exceptions import (
    AccessCoreError,
    AccessDeniedError,
    ConfigurationError,
    IdentityMissingError,
    get_grpc_status_code,
)
from ..logging import safe_log_value
from ..snapshot import AuthorizationSnapshot

logger = logging.getLogger(__name__)

SnapshotProvider = Callable[[str, str], Awaitable[AuthorizationSnapshot]]

ACTOR_METADATA_KEY = "x-actor-id"
TENANT_METADATA_KEY = "x-tenant-id"
DENIAL_REASON_KEY = "x-denial-reason"
DENIED_MODULE_KEY = "x-denied-module"


# ── Enforcement Mode ────────────────────────────────────────────


class EnforcementMode(str, Enum):
    """Three-state enforcement toggle.

    - ``off``     — no checks, only caller-identity logging.
    - ``warn``    — evaluate, log denials as WARNING, but allow through.
    - ``enforce`` — evaluate, abort on failure.

    Set via env ``ACCESS_ENFORCEMENT=off|warn|enforce``.
    """

    OFF = "off"
    WARN = "warn"
    ENFORCE = "enforce"

    @classmethod
    def from_env(cls) -> EnforcementMode:
        """Read from ``ACCESS_ENFORCEMENT`` env var (default: enforce)."""
        import os  # Localized: the only direct env read outside config.py

        raw = os.environ.get("ACCESS_ENFORCEMENT", "enforce").strip().lower()
        try:
            return cls(raw)
        except ValueError:
            logger.warning("Unknown ACCESS_ENFORCEMENT=%r, defaulting to 'enforce'", raw)
            return cls.ENFORCE


# Method prefixes that bypass requirement checks
_SKIP_PREFIXES = (
    "grpc.health.v1",
    "grpc.reflection.v1",
)


# ── Helpers ──────────────────────────────────────────────────────


def _extract_rpc_name(full_method: str) -> str:
    """``/hr.EmployeeService/ListEmployees`` → ``ListEmployees``"""
    return full_method.rsplit("/", 1)[-1] if "/" in full_method else full_method


def _should_skip(method: str) -> bool:
    return any(prefix in method for prefix in _SKIP_PREFIXES)


def _denial_metadata(decision: AccessDecision) -> tuple[tuple[str, str], ...]:
    metadata = []
    if decision.reason is not None:
        metadata.append((DENIAL_REASON_KEY, decision.reason.value))
    if decision.module:
        metadata.append((DENIED_MODULE_KEY, decision.module))
    return tuple(metadata)


def _denied_handler(
    status: grpc.StatusCode,
    message: str,
    trailing_metadata: tuple[tuple[str, str], ...] = (),
) -> grpc.RpcMethodHandler:
    async def _denied(request, context):
        await context.abort(status, message, trailing_metadata=trailing_metadata)

    return grpc.unary_unary_rpc_method_handler(_denied)


# ── Interceptor ─────────────────────────────────────────────────


class RequirementInterceptor(grpc.aio.ServerInterceptor):
    """gRPC server interceptor enforcing per-RPC AccessRequirements.

    Sits before all handlers and:
    1. Logs caller identity (always, even when enforcement is off)
    2. Reads actor and tenant ids from metadata
    3. Maps the RPC to its requirement via ``rpc_requirements``
    4. Fetches the caller's snapshot from ``snapshot_provider``
    5. Turns a failed check into an AccessCoreError and aborts with the
       status ``get_grpc_status_code`` maps it to

    Unmapped RPCs are **denied**. A provider failure is treated as the empty
    snapshot.

    Args:
        rpc_requirements: Mapping of RPC name → AccessRequirement.
        snapshot_provider: ``async (actor_id, tenant_id) -> AuthorizationSnapshot``.
        service_name: Name used in log and abort messages.
        enforcement: Three-state mode. Defaults to ``ACCESS_ENFORCEMENT``.

    Raises:
        ConfigurationError: A mapped value is not an AccessRequirement.

    Usage::

        interceptor = RequirementInterceptor(
            rpc_requirements={
                "ListEmployees": AccessRequirement(module=Module.HR_CORE,
                                                   permission=Permissions.HR_VIEW_EMPLOYEE),
                "RunPayroll": AccessRequirement(module=Module.FINANCE,
                                                permission=Permissions.FINANCE_MANAGE_PAYROLL),
            },
            snapshot_provider=snapshots.get,
            service_name="HR",
        )
        server = grpc.aio.server(interceptors=[interceptor])
    """

    def __init__(
        self,
        rpc_requirements: Mapping[str, AccessRequirement],
        snapshot_provider: SnapshotProvider,
        *,
        service_name: str = "Service",
        enforcement: EnforcementMode | None = None,
    ) -> None:
        self._rpc_map = dict(rpc_requirements)
        for rpc, requirement in self._rpc_map.items():
            if not isinstance(requirement, AccessRequirement):
                raise ConfigurationError(
                    f"{service_name}: requirement for {rpc!r} must be an AccessRequirement",
                    rpc=rpc,
                )
        self._provider = snapshot_provider
        self._service_name = service_name
        self._mode = enforcement if enforcement is not None else EnforcementMode.from_env()

        if self._mode != EnforcementMode.OFF:
            logger.info("%s access interceptor mode: %s", self._service_name, self._mode.value)

    @property
    def mode(self) -> EnforcementMode:
        return self._mode

    async def _snapshot_for(self, actor_id: str, tenant_id: str) -> AuthorizationSnapshot:
        try:
            return await self._provider(actor_id, tenant_id)
        except Exception as e:
            logger.warning(
                "%s snapshot provider failed for actor=%s tenant=%s: %s",
                self._service_name,
                actor_id,
                tenant_id,
                safe_log_value(e),
            )
            return AuthorizationSnapshot.empty(actor_id, tenant_id)

    async def intercept_service(
        self,
        continuation: Any,
        handler_call_details: grpc.HandlerCallDetails,
    ) -> grpc.RpcMethodHandler:
        method = handler_call_details.method or ""

        if _should_skip(method):
            return await continuation(handler_call_details)

        rpc_name = _extract_rpc_name(method)
        metadata = dict(handler_call_details.invocation_metadata or [])
        actor_id = str(metadata.get(ACTOR_METADATA_KEY, "")).strip()
        tenant_id = str(metadata.get(TENANT_METADATA_KEY, "")).strip()

        logger.info(
            "%s RPC %s | actor=%s tenant=%s",
            self._service_name,
            rpc_name,
            actor_id or "anonymous",
            tenant_id or "-",
        )

        if self._mode == EnforcementMode.OFF:
            return await continuation(handler_call_details)

        requirement = self._rpc_map.get(rpc_name)
        error: AccessCoreError | None = None
        trailing: tuple[tuple[str, str], ...] = ()

        if requirement is None:
            error = AccessDeniedError(
                AccessDecision.deny(DenialReason.INSUFFICIENT_ACCESS),
                message="RPC not mapped to a requirement",
            )
        elif not actor_id or not tenant_id:
            error = IdentityMissingError()
        else:
            decision = evaluate(await self._snapshot_for(actor_id, tenant_id), requirement)
            if decision.is_pending:
                error = AccessDeniedError(decision, message="authorization still resolving")
            elif decision.denied:
                error = AccessDeniedError(
                    decision,
                    message=f"{decision.reason.value} ({decision.failed_requirement})",
                )
                trailing = _denial_metadata(decision)

        if error is not None:
            deny_reason = error.message
            if self._mode == EnforcementMode.WARN:
                logger.warning(
                    "%s WARN_DENIED '%s': %s (would block in enforce mode)",
                    self._service_name,
                    rpc_name,
                    deny_reason,
                )
                return await continuation(handler_call_details)

            logger.warning("%s DENIED '%s': %s", self._service_name, rpc_name, deny_reason)
            return _denied_handler(
                get_grpc_status_code(error),
                f"{self._service_name}: {rpc_name} denied: {deny_reason}",
                trailing,
            )

        logger.debug("%s ALLOWED '%s' for actor=%s", self._service_name, rpc_name, actor_id)
        return await continuation(handler_call_details)


__all__ = [
    "ACTOR_METADATA_KEY",
    "DENIAL_REASON_KEY",
    "DENIED_MODULE_KEY",
    "EnforcementMode",
    "RequirementInterceptor",
    "SnapshotProvider",
    "TENANT_METADATA_KEY",
    "_extract_rpc_name",
    "_should_skip",
]
