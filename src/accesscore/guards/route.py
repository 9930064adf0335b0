"""Route guard: page-level access check with redirect on denial.

A route declares an AccessRequirement. On every navigation the guard checks
the current snapshot and tells the router what to do:

- LOADING         — snapshot still resolving, render a placeholder;
- REDIRECT        — denied, go to the module-disabled, unauthorized or
  super-admin target page;
- RENDER_FALLBACK — denied on a guard built with ``fallback``, render it in
  place instead of redirecting;
- RENDER          — allowed.

A denial carries a DenialContext so the target page can explain which
module or permission was missing and where the user came from.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..config import AccessConfig
from ..decisions import AccessDecision, AccessRequirement, DenialReason
from ..evaluator import evaluate
from ..snapshot import AuthorizationSnapshot

logger = logging.getLogger(__name__)


class RouteOutcome(str, Enum):
    RENDER = "render"
    LOADING = "loading"
    REDIRECT = "redirect"
    RENDER_FALLBACK = "render_fallback"


@dataclass(frozen=True)
class DenialContext:
    """Payload handed to the redirect target.

    Attributes:
        from_location: Path the user tried to open.
        reason: Why access was denied.
        module: Disabled module code (MODULE_DISABLED only).
        failed: The module code, ``"super_admin"``, or ``"permission"`` for
            role/permission failures.
    """

    from_location: str
    reason: DenialReason
    module: str | None = None
    failed: str | None = None


@dataclass(frozen=True)
class RouteResult:
    """What the router should do for one navigation."""

    outcome: RouteOutcome
    decision: AccessDecision
    redirect_to: str | None = None
    denial: DenialContext | None = None
    fallback: Any = None

    @property
    def should_render(self) -> bool:
        return self.outcome is RouteOutcome.RENDER


class RouteGuard:
    """Guards one route with an AccessRequirement.

    Args:
        requirement: What the route needs. None guards nothing but loading.
        module_redirect: Target when a module is disabled.
            Defaults to ``config.module_redirect``.
        permission_redirect: Target when roles/permissions are insufficient.
            Defaults to ``config.permission_redirect``.
        super_admin_redirect: Target when the route needs a platform super
            admin. Defaults to ``config.super_admin_redirect``.
        fallback: Rendered in place on denial instead of redirecting.
        config: Engine configuration.

    Usage::

        payroll = RouteGuard(AccessRequirement(
            module=Module.FINANCE,
            permission=Permissions.FINANCE_VIEW_PAYROLL,
        ))
        result = payroll.check(resolver.snapshot, "/finance/payroll")
        if result.outcome is RouteOutcome.REDIRECT:
            router.replace(result.redirect_to, state=result.denial)
    """

    def __init__(
        self,
        requirement: AccessRequirement | None = None,
        *,
        module_redirect: str | None = None,
        permission_redirect: str | None = None,
        super_admin_redirect: str | None = None,
        fallback: Any = None,
        config: AccessConfig | None = None,
    ) -> None:
        cfg = config or AccessConfig()
        self.requirement = requirement or AccessRequirement()
        self.module_redirect = module_redirect or cfg.module_redirect
        self.permission_redirect = permission_redirect or cfg.permission_redirect
        self.super_admin_redirect = super_admin_redirect or cfg.super_admin_redirect
        self.fallback = fallback

    def _target(self, reason: DenialReason | None) -> str:
        if reason is DenialReason.MODULE_DISABLED:
            return self.module_redirect
        if reason is DenialReason.SUPER_ADMIN_REQUIRED:
            return self.super_admin_redirect
        return self.permission_redirect

    def check(self, snapshot: AuthorizationSnapshot, location: str) -> RouteResult:
        decision = evaluate(snapshot, self.requirement)

        if decision.is_pending:
            return RouteResult(outcome=RouteOutcome.LOADING, decision=decision)

        if decision.allowed:
            return RouteResult(outcome=RouteOutcome.RENDER, decision=decision)

        denial = DenialContext(
            from_location=location,
            reason=decision.reason,
            module=decision.module,
            failed=decision.failed_requirement,
        )

        if self.fallback is not None:
            logger.info(
                "Route %s denied for actor=%s tenant=%s (%s); rendering fallback",
                location,
                snapshot.actor_id,
                snapshot.tenant_id,
                decision.failed_requirement,
            )
            return RouteResult(
                outcome=RouteOutcome.RENDER_FALLBACK,
                decision=decision,
                denial=denial,
                fallback=self.fallback,
            )

        target = self._target(decision.reason)
        logger.info(
            "Route %s denied for actor=%s tenant=%s (%s); redirecting to %s",
            location,
            snapshot.actor_id,
            snapshot.tenant_id,
            decision.failed_requirement,
            target,
        )
        return RouteResult(
            outcome=RouteOutcome.REDIRECT,
            decision=decision,
            redirect_to=target,
            denial=denial,
        )


__all__ = [
    "DenialContext",
    "RouteGuard",
    "RouteOutcome",
    "RouteResult",
]
