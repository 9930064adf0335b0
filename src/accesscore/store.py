"""Directory store interface and an in-memory implementation.

The directory store owns roles, permissions, their links and module flags.
The engine only reads from it, through four independent async queries.
Adapters for a real backend implement :class:`DirectoryStore`; errors may be
raised as :class:`DirectoryStoreError` or any other exception, the resolver
fails closed either way.
"""

from __future__ import annotations

import asyncio
from typing import Iterable, Protocol, Sequence, runtime_checkable

from .permissions.models import (
    ModuleEnablement,
    Permission,
    Role,
    RolePermission,
    SuperAdmin,
    UserRole,
)


@runtime_checkable
class DirectoryStore(Protocol):
    """Read-only access to the authorization directory."""

    async def fetch_user_roles(self, actor_id: str) -> Sequence[Role]:
        """Roles assigned to the actor (all of them; the resolver filters)."""
        ...

    async def fetch_role_permissions(self, role_ids: Sequence[str]) -> Sequence[Permission]:
        """Permissions granted to any of ``role_ids`` (duplicates allowed)."""
        ...

    async def fetch_module_enablements(self, tenant_id: str) -> Sequence[ModuleEnablement]:
        """Module flag records for the tenant."""
        ...

    async def fetch_super_admin(self, actor_id: str) -> SuperAdmin | None:
        """Platform super-admin record for the actor, if any."""
        ...


class InMemoryDirectoryStore:
    """Dictionary-backed DirectoryStore.

    Useful for embedding, local development and tests. ``fail_with`` makes
    every query raise, and ``delay_s`` adds latency, so resolver behaviour
    under outages and races can be exercised without a backend.

    Example::

        store = InMemoryDirectoryStore()
        store.add_role(Role(id="r-hr", name="HR", tenant_id="acme"))
        store.add_permission(Permission(id="p1", code="hr.view_employee", module="HR_CORE"))
        store.grant("r-hr", "p1")
        store.assign("u-1", "r-hr")
        store.set_module("acme", "HR_CORE", True)
    """

    def __init__(self, *, delay_s: float = 0.0) -> None:
        self.delay_s = delay_s
        self.fail_with: BaseException | None = None
        self._roles: dict[str, Role] = {}
        self._permissions: dict[str, Permission] = {}
        self._user_roles: list[UserRole] = []
        self._role_permissions: list[RolePermission] = []
        self._modules: dict[tuple[str, str], ModuleEnablement] = {}
        self._super_admins: dict[str, SuperAdmin] = {}

    # ── Population ──────────────────────────────────────

    def add_role(self, role: Role) -> None:
        self._roles[role.id] = role

    def add_permission(self, permission: Permission) -> None:
        self._permissions[permission.id] = permission

    def add_permissions(self, permissions: Iterable[Permission]) -> None:
        for permission in permissions:
            self.add_permission(permission)

    def assign(self, user_id: str, role_id: str) -> None:
        edge = UserRole(user_id=user_id, role_id=role_id)
        if edge not in self._user_roles:
            self._user_roles.append(edge)

    def unassign(self, user_id: str, role_id: str) -> None:
        self._user_roles = [e for e in self._user_roles if e != UserRole(user_id=user_id, role_id=role_id)]

    def grant(self, role_id: str, permission_id: str) -> None:
        edge = RolePermission(role_id=role_id, permission_id=permission_id)
        if edge not in self._role_permissions:
            self._role_permissions.append(edge)

    def set_module(self, tenant_id: str, module: str, enabled: bool) -> None:
        code = getattr(module, "value", module)
        self._modules[(tenant_id, code)] = ModuleEnablement(tenant_id=tenant_id, module=code, enabled=enabled)

    def add_super_admin(self, record: SuperAdmin) -> None:
        self._super_admins[record.user_id] = record

    # ── DirectoryStore ──────────────────────────────────

    async def _simulate_io(self) -> None:
        if self.delay_s:
            await asyncio.sleep(self.delay_s)
        if self.fail_with is not None:
            raise self.fail_with

    async def fetch_user_roles(self, actor_id: str) -> list[Role]:
        await self._simulate_io()
        return [self._roles[e.role_id] for e in self._user_roles if e.user_id == actor_id and e.role_id in self._roles]

    async def fetch_role_permissions(self, role_ids: Sequence[str]) -> list[Permission]:
        await self._simulate_io()
        wanted = set(role_ids)
        return [
            self._permissions[e.permission_id]
            for e in self._role_permissions
            if e.role_id in wanted and e.permission_id in self._permissions
        ]

    async def fetch_module_enablements(self, tenant_id: str) -> list[ModuleEnablement]:
        await self._simulate_io()
        return [m for (tenant, _), m in self._modules.items() if tenant == tenant_id]

    async def fetch_super_admin(self, actor_id: str) -> SuperAdmin | None:
        await self._simulate_io()
        return self._super_admins.get(actor_id)


__all__ = [
    "DirectoryStore",
    "InMemoryDirectoryStore",
]
