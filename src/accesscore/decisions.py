"""Access requirements and access decisions.

``AccessRequirement`` is the single declarative request shape shared by
every guard: route guard, component gate, navigation filter and the gRPC
interceptor all build one and hand it to ``evaluate``.

``AccessDecision`` is the result: allow, deny with a reason, or pending
while the snapshot is still loading.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from .permissions.constants import Module


class DecisionOutcome(str, Enum):
    """Result of evaluating a requirement."""

    ALLOW = "allow"
    DENY = "deny"
    PENDING = "pending"  # Snapshot still loading; neither allowed nor denied


class DenialReason(str, Enum):
    """Why a requirement was denied."""

    MODULE_DISABLED = "MODULE_DISABLED"
    INSUFFICIENT_ACCESS = "INSUFFICIENT_ACCESS"
    SUPER_ADMIN_REQUIRED = "SUPER_ADMIN_REQUIRED"


def _as_tuple(values: Iterable[str] | str | None) -> tuple[str, ...]:
    if not values:
        return ()
    if isinstance(values, str):
        return (values,)
    return tuple(values)


@dataclass(frozen=True)
class AccessRequirement:
    """Declarative access request.

    All fields are optional; an empty requirement is open to any member of
    the tenant.

    Args:
        module: Feature module that must be enabled for the tenant.
        permission: Single permission code that must be held.
        all_permissions: Every code must be held.
        any_permission: At least one code must be held.
        role: Role name that must be held.
        any_role: At least one role name must be held.
        super_admin: Actor must be a platform super admin. Company admins
            do not bypass this.
        strict_mode: If True, company admins are checked like everyone else.

    Example::

        AccessRequirement(module=Module.FINANCE, any_permission=(
            Permissions.FINANCE_PAYROLL_VIEW,
            Permissions.FINANCE_MANAGE_PAYROLL,
        ))
    """

    module: Module | str | None = None
    permission: str | None = None
    all_permissions: tuple[str, ...] = ()
    any_permission: tuple[str, ...] = ()
    role: str | None = None
    any_role: tuple[str, ...] = ()
    super_admin: bool = False
    strict_mode: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "module", Module.coerce(self.module) or None)
        object.__setattr__(self, "permission", self.permission or None)
        object.__setattr__(self, "role", self.role or None)
        for name in ("all_permissions", "any_permission", "any_role"):
            object.__setattr__(self, name, _as_tuple(getattr(self, name)))

    @property
    def has_role_predicate(self) -> bool:
        return self.role is not None or bool(self.any_role)

    @property
    def has_permission_predicate(self) -> bool:
        return self.permission is not None or bool(self.all_permissions) or bool(self.any_permission)

    @property
    def is_open(self) -> bool:
        """True when nothing is required at all."""
        return (
            self.module is None
            and not self.super_admin
            and not self.has_role_predicate
            and not self.has_permission_predicate
        )

    def module_only(self) -> AccessRequirement:
        """Copy keeping only the module condition."""
        return AccessRequirement(module=self.module)


OPEN_REQUIREMENT = AccessRequirement()
SUPER_ADMIN_REQUIREMENT = AccessRequirement(super_admin=True)


@dataclass(frozen=True)
class AccessDecision:
    """Outcome of evaluating an AccessRequirement against a snapshot.

    Attributes:
        outcome: allow / deny / pending.
        reason: Denial reason (None unless denied).
        module: Module code that was disabled (MODULE_DISABLED only).
    """

    outcome: DecisionOutcome
    reason: DenialReason | None = None
    module: str | None = None

    @classmethod
    def allow(cls) -> AccessDecision:
        return _ALLOW

    @classmethod
    def deny(cls, reason: DenialReason, module: str | None = None) -> AccessDecision:
        return cls(outcome=DecisionOutcome.DENY, reason=reason, module=module)

    @classmethod
    def pending(cls) -> AccessDecision:
        return _PENDING

    @property
    def allowed(self) -> bool:
        return self.outcome is DecisionOutcome.ALLOW

    @property
    def denied(self) -> bool:
        return self.outcome is DecisionOutcome.DENY

    @property
    def is_pending(self) -> bool:
        return self.outcome is DecisionOutcome.PENDING

    @property
    def failed_requirement(self) -> str | None:
        """Which part of the requirement failed.

        The module code, ``"super_admin"``, or ``"permission"`` for role and
        permission failures.
        """
        if not self.denied:
            return None
        if self.reason is DenialReason.MODULE_DISABLED:
            return self.module
        if self.reason is DenialReason.SUPER_ADMIN_REQUIRED:
            return "super_admin"
        return "permission"


_ALLOW = AccessDecision(outcome=DecisionOutcome.ALLOW)
_PENDING = AccessDecision(outcome=DecisionOutcome.PENDING)


__all__ = [
    "OPEN_REQUIREMENT",
    "SUPER_ADMIN_REQUIREMENT",
    "AccessDecision",
    "AccessRequirement",
    "DecisionOutcome",
    "DenialReason",
]
