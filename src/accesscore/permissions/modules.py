"""Module catalog: display metadata and the mandatory-module rule.

Mandatory modules are always part of a tenant's plan and cannot be switched
off from the module settings screen. The engine itself never writes module
flags; toggle flows call :func:`check_module_toggle` before persisting and
then trigger a resolver refresh.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..exceptions import ModuleToggleError
from .constants import Module


@dataclass(frozen=True)
class ModuleInfo:
    """Catalog entry for a feature module."""

    code: Module
    name: str
    description: str
    mandatory: bool = False


MODULE_CATALOG: dict[Module, ModuleInfo] = {
    Module.HR_CORE: ModuleInfo(
        code=Module.HR_CORE,
        name="HR Core",
        description="Core HR functions including employee management, departments, and positions",
        mandatory=True,
    ),
    Module.ATTENDANCE: ModuleInfo(
        code=Module.ATTENDANCE,
        name="Attendance Automation",
        description="Time tracking, attendance records, and shift management",
    ),
    Module.LEAVE: ModuleInfo(
        code=Module.LEAVE,
        name="Leave Management",
        description="Leave requests, approvals, calendars, and balance tracking",
    ),
    Module.FINANCE: ModuleInfo(
        code=Module.FINANCE,
        name="Finance",
        description="Payroll processing, expenses, and financial reporting",
    ),
    Module.REVENUE: ModuleInfo(
        code=Module.REVENUE,
        name="Revenue & Collections",
        description="Revenue tracking, invoicing, and collection management",
    ),
    Module.SALES_CRM: ModuleInfo(
        code=Module.SALES_CRM,
        name="Sales CRM",
        description="Lead management, deals, and customer relationships",
    ),
    Module.COMPLIANCE: ModuleInfo(
        code=Module.COMPLIANCE,
        name="Compliance",
        description="Policy management, audits, and compliance tracking",
    ),
    Module.ADMIN: ModuleInfo(
        code=Module.ADMIN,
        name="Admin & Settings",
        description="Company settings, user management, and system configuration",
        mandatory=True,
    ),
}

MANDATORY_MODULES: frozenset[str] = frozenset(
    info.code.value for info in MODULE_CATALOG.values() if info.mandatory
)


def module_info(module: Module | str) -> ModuleInfo | None:
    """Look up catalog metadata by enum member or raw code.

    Returns None for codes outside the catalog.
    """
    try:
        return MODULE_CATALOG[Module(Module.coerce(module))]
    except ValueError:
        return None


def check_module_toggle(module: Module | str, enabled: bool) -> None:
    """Validate a requested module flag change.

    Raises:
        ModuleToggleError: If ``module`` is mandatory and ``enabled`` is False,
            or if ``module`` is not a known module code.
    """
    info = module_info(module)
    if info is None:
        raise ModuleToggleError(f"Unknown module: {module}", module=Module.coerce(module))
    if info.mandatory and not enabled:
        raise ModuleToggleError(
            f"{info.name} is mandatory and cannot be disabled",
            module=info.code.value,
        )


__all__ = [
    "MANDATORY_MODULES",
    "MODULE_CATALOG",
    "ModuleInfo",
    "check_module_toggle",
    "module_info",
]
