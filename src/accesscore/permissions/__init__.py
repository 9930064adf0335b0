"""Permission catalog, module catalog, and directory record types.

Defines:
- Module: the tenant feature areas
- Permissions: permission code constants
- MODULE_CATALOG / MANDATORY_MODULES: module metadata and the mandatory rule
- Actor, Role, Permission, UserRole, RolePermission, ModuleEnablement, SuperAdmin:
  directory records
"""

from .constants import ADMIN_ROLE_NAME, Module, Permissions
from .models import (
    Actor,
    ModuleEnablement,
    Permission,
    Role,
    RolePermission,
    SuperAdmin,
    UserRole,
)
from .modules import (
    MANDATORY_MODULES,
    MODULE_CATALOG,
    ModuleInfo,
    check_module_toggle,
    module_info,
)

__all__ = [
    "ADMIN_ROLE_NAME",
    "MANDATORY_MODULES",
    "MODULE_CATALOG",
    "Actor",
    "Module",
    "ModuleEnablement",
    "ModuleInfo",
    "Permission",
    "Permissions",
    "Role",
    "RolePermission",
    "SuperAdmin",
    "UserRole",
    "check_module_toggle",
    "module_info",
]
