"""Access decision evaluation.

``evaluate`` is the one place where a snapshot and a requirement are turned
into a decision. It is synchronous, has no I/O and keeps no state, so the
same inputs always give the same decision.

Evaluation order (fixed):

1. Snapshot still loading → pending
2. Required module not enabled → deny(MODULE_DISABLED), admins included
3. Super admin required and actor is not one → deny(SUPER_ADMIN_REQUIRED)
4. Company admin and not strict mode → allow
5. Role predicate (single role / any-of roles)
6. Permission predicate (single / all-of / any-of, conjunction of those given)
7. Both pass → allow, otherwise deny(INSUFFICIENT_ACCESS)
"""

from __future__ import annotations

import logging

from .decisions import OPEN_REQUIREMENT, AccessDecision, AccessRequirement, DenialReason
from .exceptions import AccessDeniedError
from .snapshot import AuthorizationSnapshot

logger = logging.getLogger(__name__)


def _role_predicate(snapshot: AuthorizationSnapshot, requirement: AccessRequirement) -> bool:
    if requirement.role is not None and not snapshot.has_role(requirement.role):
        return False
    if requirement.any_role and not snapshot.has_any_role(requirement.any_role):
        return False
    return True


def _permission_predicate(snapshot: AuthorizationSnapshot, requirement: AccessRequirement) -> bool:
    granted = snapshot.permissions

    if requirement.permission is not None and requirement.permission not in granted:
        return False

    if requirement.all_permissions and not all(code in granted for code in requirement.all_permissions):
        return False

    if requirement.any_permission and not any(code in granted for code in requirement.any_permission):
        return False

    return True


def evaluate(
    snapshot: AuthorizationSnapshot,
    requirement: AccessRequirement | None = None,
) -> AccessDecision:
    """Decide whether ``snapshot`` satisfies ``requirement``.

    Args:
        snapshot: Current authorization snapshot.
        requirement: What is being asked for. None means no requirement.

    Returns:
        AccessDecision — allow, deny (with reason), or pending while loading.

    Example::

        snapshot = AuthorizationSnapshot.build(
            roles=["HR"],
            permissions=["hr.view_employee"],
            enabled_modules=["HR_CORE"],
        )
        evaluate(snapshot, AccessRequirement(module="HR_CORE", permission="hr.view_employee"))
        # allow
        evaluate(snapshot, AccessRequirement(module="ATTENDANCE", permission="hr.view_employee"))
        # deny(MODULE_DISABLED)
    """
    if snapshot.is_loading:
        return AccessDecision.pending()

    req = requirement or OPEN_REQUIREMENT

    # Module gate is a tenant feature boundary: nobody bypasses it.
    if req.module is not None and req.module not in snapshot.enabled_modules:
        return AccessDecision.deny(DenialReason.MODULE_DISABLED, module=req.module)

    # Platform axis: tenant-level admin rights never satisfy it.
    if req.super_admin and not snapshot.is_super_admin:
        return AccessDecision.deny(DenialReason.SUPER_ADMIN_REQUIRED)

    if snapshot.is_company_admin and not req.strict_mode:
        return AccessDecision.allow()

    if _role_predicate(snapshot, req) and _permission_predicate(snapshot, req):
        return AccessDecision.allow()

    return AccessDecision.deny(DenialReason.INSUFFICIENT_ACCESS)


def is_allowed(
    snapshot: AuthorizationSnapshot,
    requirement: AccessRequirement | None = None,
) -> bool:
    """Shorthand for ``evaluate(...).allowed``. Pending counts as not allowed."""
    return evaluate(snapshot, requirement).allowed


def require(
    snapshot: AuthorizationSnapshot,
    requirement: AccessRequirement | None = None,
) -> AccessDecision:
    """Evaluate and raise unless allowed.

    For server-side handlers where a denial should abort the call.

    Raises:
        AccessDeniedError: On deny or pending. ``error.decision`` holds the
            decision; ``error.code`` is ``ACCESS_PENDING`` for the latter.
    """
    decision = evaluate(snapshot, requirement)
    if not decision.allowed:
        logger.debug(
            "Requirement not met for actor=%s tenant=%s: %s",
            snapshot.actor_id,
            snapshot.tenant_id,
            decision.outcome.value,
        )
        raise AccessDeniedError(decision)
    return decision


__all__ = [
    "evaluate",
    "is_allowed",
    "require",
]
