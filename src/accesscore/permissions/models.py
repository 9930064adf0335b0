"""Directory records read by the resolver.

These mirror the rows the directory store keeps (``roles``,
``permissions``, ``user_roles``, ``role_permissions``,
``company_modules``, ``super_admins``). They are plain frozen values; the engine never
writes them back.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Actor:
    """Authenticated user identity within one tenant."""

    id: str
    tenant_id: str | None = None
    active: bool = True


@dataclass(frozen=True)
class Role:
    """Named bundle of permissions.

    ``tenant_id`` of None marks a global role usable in every tenant.
    """

    id: str
    name: str
    active: bool = True
    tenant_id: str | None = None

    def applies_to(self, tenant_id: str) -> bool:
        """Whether this role may be resolved for ``tenant_id``."""
        return self.tenant_id is None or self.tenant_id == tenant_id


@dataclass(frozen=True)
class Permission:
    """Catalog permission. ``module`` is the feature area that owns the code."""

    id: str
    code: str
    module: str | None = None


@dataclass(frozen=True)
class UserRole:
    """Actor → Role assignment edge."""

    user_id: str
    role_id: str


@dataclass(frozen=True)
class RolePermission:
    """Role → Permission grant edge."""

    role_id: str
    permission_id: str


@dataclass(frozen=True)
class ModuleEnablement:
    """Per-tenant module flag. A missing record means disabled."""

    tenant_id: str
    module: str
    enabled: bool = True


@dataclass(frozen=True)
class SuperAdmin:
    """Platform administrator record, independent of any tenant."""

    id: str
    user_id: str
    email: str = ""
    full_name: str | None = None
    active: bool = True


__all__ = [
    "Actor",
    "ModuleEnablement",
    "Permission",
    "Role",
    "RolePermission",
    "SuperAdmin",
    "UserRole",
]
