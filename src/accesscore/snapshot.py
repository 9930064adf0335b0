"""Authorization Snapshot: the resolved access state of one actor in one tenant.

A snapshot is an immutable value. The resolver builds a complete one and
swaps it in atomically; consumers hold a reference and never observe a
partially loaded state. While resolution is in flight the published value
is an explicit loading snapshot, so guards can tell "not known yet" from
"known and empty".
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from .permissions.constants import ADMIN_ROLE_NAME, Module


@dataclass(frozen=True)
class AuthorizationSnapshot:
    """Resolved roles, permissions and modules for an (actor, tenant) pair.

    Attributes:
        actor_id: Actor the snapshot was resolved for (None when signed out).
        tenant_id: Tenant the snapshot was resolved for.
        roles: Names of the actor's active roles.
        permissions: Deduplicated permission codes granted through those roles.
        enabled_modules: Module codes enabled for the tenant.
        permission_modules: Modules in which the actor holds at least one permission.
        is_super_admin: Actor is an active platform super admin (not tenant scoped).
        is_loading: True while resolution is in flight.
        admin_role_name: Role name that marks a company administrator.
        is_company_admin: Derived on construction; True iff ``admin_role_name``
            is among ``roles``.
    """

    actor_id: str | None = None
    tenant_id: str | None = None
    roles: frozenset[str] = frozenset()
    permissions: frozenset[str] = frozenset()
    enabled_modules: frozenset[str] = frozenset()
    permission_modules: frozenset[str] = frozenset()
    is_super_admin: bool = False
    is_loading: bool = False
    admin_role_name: str = ADMIN_ROLE_NAME
    is_company_admin: bool = field(init=False, default=False)

    def __post_init__(self) -> None:
        # Accept any iterable from callers; store frozensets.
        for name in ("roles", "permissions", "enabled_modules", "permission_modules"):
            value = getattr(self, name)
            if not isinstance(value, frozenset):
                object.__setattr__(self, name, frozenset(value))
        for name in ("enabled_modules", "permission_modules"):
            codes = frozenset(Module.coerce(m) for m in getattr(self, name))
            object.__setattr__(self, name, codes)
        object.__setattr__(self, "is_company_admin", self.admin_role_name in self.roles)

    # ── Factories ──────────────────────────────────────

    @classmethod
    def empty(
        cls,
        actor_id: str | None = None,
        tenant_id: str | None = None,
        *,
        admin_role_name: str = ADMIN_ROLE_NAME,
    ) -> AuthorizationSnapshot:
        """Fail-closed snapshot: nothing granted, not loading."""
        return cls(actor_id=actor_id, tenant_id=tenant_id, admin_role_name=admin_role_name)

    @classmethod
    def loading(
        cls,
        actor_id: str | None = None,
        tenant_id: str | None = None,
        *,
        admin_role_name: str = ADMIN_ROLE_NAME,
    ) -> AuthorizationSnapshot:
        """Placeholder published while resolution is in flight."""
        return cls(
            actor_id=actor_id,
            tenant_id=tenant_id,
            is_loading=True,
            admin_role_name=admin_role_name,
        )

    @classmethod
    def build(
        cls,
        *,
        roles: Iterable[str] = (),
        permissions: Iterable[str] = (),
        enabled_modules: Iterable[Module | str] = (),
        permission_modules: Iterable[Module | str] = (),
        is_super_admin: bool = False,
        actor_id: str | None = None,
        tenant_id: str | None = None,
        admin_role_name: str = ADMIN_ROLE_NAME,
    ) -> AuthorizationSnapshot:
        """Build a ready snapshot from plain iterables.

        Example::

            snapshot = AuthorizationSnapshot.build(
                roles=["HR"],
                permissions=["hr.view_employee"],
                enabled_modules=[Module.HR_CORE],
            )
        """
        return cls(
            actor_id=actor_id,
            tenant_id=tenant_id,
            roles=frozenset(roles),
            permissions=frozenset(permissions),
            enabled_modules=frozenset(enabled_modules),
            permission_modules=frozenset(permission_modules),
            is_super_admin=is_super_admin,
            admin_role_name=admin_role_name,
        )

    # ── Queries ────────────────────────────────────────

    def has_role(self, role_name: str) -> bool:
        return role_name in self.roles

    def has_any_role(self, role_names: Iterable[str]) -> bool:
        return any(name in self.roles for name in role_names)

    def has_permission(self, code: str) -> bool:
        return code in self.permissions

    def is_module_enabled(self, module: Module | str) -> bool:
        return Module.coerce(module) in self.enabled_modules

    def has_module_permission(self, module: Module | str) -> bool:
        """Whether the actor holds any permission owned by ``module``."""
        return Module.coerce(module) in self.permission_modules

    def is_for(self, actor_id: str | None, tenant_id: str | None) -> bool:
        """Whether this snapshot was resolved for the given pair."""
        return self.actor_id == actor_id and self.tenant_id == tenant_id


__all__ = ["AuthorizationSnapshot"]
