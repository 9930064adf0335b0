"""Navigation tree model and permission-aware filtering.

The navigation tree is static and declarative: sections of items, where
each item may name a module and/or a permission and may have children.
``filter_navigation`` returns the part of the tree an actor may see:

- each item's module / permission is evaluated with ``evaluate``;
- children are filtered first, and a parent left with no children is dropped;
- sections left with no items are dropped;
- sibling order is preserved and the input tree is never mutated.

Company admins and holders of a configured operational role skip the
permission check for module-gated items but are still subject to the
module check. Items without a module keep their permission check.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Sequence

from .config import AccessConfig
from .decisions import AccessRequirement
from .evaluator import evaluate
from .permissions.constants import Module, Permissions
from .snapshot import AuthorizationSnapshot


@dataclass(frozen=True)
class NavItem:
    """Menu entry. ``children`` makes it a collapsible parent."""

    id: str
    title: str
    href: str
    module: str | None = None
    permission: str | None = None
    icon: str | None = None
    children: tuple[NavItem, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "module", Module.coerce(self.module))
        object.__setattr__(self, "children", tuple(self.children))

    @property
    def requirement(self) -> AccessRequirement:
        return AccessRequirement(module=self.module, permission=self.permission)


@dataclass(frozen=True)
class NavSection:
    """Titled group of menu items."""

    id: str
    title: str
    items: tuple[NavItem, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))


class _NavFilter:
    """Depth-first filter bound to one snapshot."""

    def __init__(
        self,
        snapshot: AuthorizationSnapshot,
        *,
        bypass: bool,
        require_module_permission: bool,
    ) -> None:
        self._snapshot = snapshot
        self._bypass = bypass
        self._require_module_permission = require_module_permission

    def _visible(self, item: NavItem) -> bool:
        requirement = item.requirement
        # Bypass covers module-gated entries only; the rest keep their permission.
        if self._bypass and item.module:
            return evaluate(self._snapshot, requirement.module_only()).allowed

        if not evaluate(self._snapshot, requirement).allowed:
            return False

        # Module-tagged entry without its own permission: show it only to
        # actors holding some permission in that module.
        if self._require_module_permission and item.module and not item.permission:
            return self._snapshot.has_module_permission(item.module)
        return True

    def item(self, item: NavItem) -> NavItem | None:
        if not self._visible(item):
            return None
        if not item.children:
            return item
        children = self.items(item.children)
        if not children:
            return None
        return replace(item, children=children)

    def items(self, items: Iterable[NavItem]) -> tuple[NavItem, ...]:
        kept = (self.item(i) for i in items)
        return tuple(i for i in kept if i is not None)

    def section(self, section: NavSection) -> NavSection | None:
        items = self.items(section.items)
        if not items:
            return None
        return replace(section, items=items)


def has_navigation_bypass(snapshot: AuthorizationSnapshot, operational_roles: Iterable[str] = ()) -> bool:
    """Whether the actor sees every module-gated item of an enabled module regardless of permissions."""
    return snapshot.is_company_admin or snapshot.has_any_role(operational_roles)


def filter_navigation(
    sections: Sequence[NavSection],
    snapshot: AuthorizationSnapshot,
    *,
    operational_roles: Iterable[str] | None = None,
    require_module_permission: bool | None = None,
    config: AccessConfig | None = None,
) -> list[NavSection]:
    """Prune a navigation tree to what the snapshot allows.

    Args:
        sections: Full navigation tree.
        snapshot: Current authorization snapshot.
        operational_roles: Role names with admin-like visibility. Defaults to
            ``config.operational_roles``.
        require_module_permission: Module-only items need a permission in that
            module. Defaults to ``config.nav_require_module_permission``.
        config: Engine configuration supplying the defaults above.

    Returns:
        New list of sections; empty while the snapshot is loading.
    """
    if snapshot.is_loading:
        return []

    cfg = config or AccessConfig()
    roles = cfg.operational_roles if operational_roles is None else list(operational_roles)
    fallback = cfg.nav_require_module_permission if require_module_permission is None else require_module_permission

    nav = _NavFilter(
        snapshot,
        bypass=has_navigation_bypass(snapshot, roles),
        require_module_permission=fallback,
    )
    kept = (nav.section(s) for s in sections)
    return [s for s in kept if s is not None]


def _item(item_id: str, title: str, href: str, module: Module, permission: str, icon: str) -> NavItem:
    return NavItem(id=item_id, title=title, href=href, module=module, permission=permission, icon=icon)


DEFAULT_NAVIGATION: tuple[NavSection, ...] = (
    NavSection(
        id="main",
        title="Main",
        items=(NavItem(id="dashboard", title="Dashboard", href="/dashboard", icon="layout-dashboard"),),
    ),
    NavSection(
        id="hr",
        title="Human Resources",
        items=(
            _item("employees", "Employees", "/employees", Module.HR_CORE, Permissions.HR_EMPLOYEES_VIEW, "users"),
            _item("departments", "Departments", "/departments", Module.HR_CORE, Permissions.HR_DEPARTMENTS_VIEW, "building-2"),
            _item("positions", "Positions", "/positions", Module.HR_CORE, Permissions.HR_POSITIONS_VIEW, "briefcase"),
        ),
    ),
    NavSection(
        id="attendance",
        title="Attendance",
        items=(
            _item("time-tracking", "Time Tracking", "/attendance/time-tracking", Module.ATTENDANCE, Permissions.ATTENDANCE_RECORDS_VIEW, "clock"),
            _item("attendance-reports", "Reports", "/attendance/reports", Module.ATTENDANCE, Permissions.ATTENDANCE_REPORTS_VIEW, "file-text"),
        ),
    ),
    NavSection(
        id="leave",
        title="Leave Management",
        items=(
            _item("leave-requests", "Leave Requests", "/leave/requests", Module.LEAVE, Permissions.LEAVE_REQUESTS_VIEW, "calendar-days"),
            _item("leave-calendar", "Calendar", "/leave/calendar", Module.LEAVE, Permissions.LEAVE_CALENDAR_VIEW, "calendar-days"),
        ),
    ),
    NavSection(
        id="finance",
        title="Finance",
        items=(
            _item("payroll", "Payroll", "/finance/payroll", Module.FINANCE, Permissions.FINANCE_PAYROLL_VIEW, "dollar-sign"),
            _item("expenses", "Expenses", "/finance/expenses", Module.FINANCE, Permissions.FINANCE_EXPENSES_VIEW, "credit-card"),
        ),
    ),
    NavSection(
        id="revenue",
        title="Revenue",
        items=(
            _item("revenue-dashboard", "Dashboard", "/revenue/dashboard", Module.REVENUE, Permissions.REVENUE_DASHBOARD_VIEW, "trending-up"),
            _item("revenue-reports", "Reports", "/revenue/reports", Module.REVENUE, Permissions.REVENUE_REPORTS_VIEW, "pie-chart"),
        ),
    ),
    NavSection(
        id="sales",
        title="Sales & CRM",
        items=(
            _item("leads", "Leads", "/sales/leads", Module.SALES_CRM, Permissions.SALES_LEADS_VIEW, "target"),
            _item("deals", "Deals", "/sales/deals", Module.SALES_CRM, Permissions.SALES_DEALS_VIEW, "handshake"),
        ),
    ),
    NavSection(
        id="compliance",
        title="Compliance",
        items=(
            _item("policies", "Policies", "/compliance/policies", Module.COMPLIANCE, Permissions.COMPLIANCE_POLICIES_VIEW, "shield-check"),
            _item("audits", "Audits", "/compliance/audits", Module.COMPLIANCE, Permissions.COMPLIANCE_AUDITS_VIEW, "clipboard-list"),
        ),
    ),
    NavSection(
        id="admin",
        title="Administration",
        items=(
            _item("company-settings", "Company Settings", "/admin/company", Module.ADMIN, Permissions.ADMIN_COMPANY_VIEW, "building-2"),
            _item("user-management", "User Management", "/admin/users", Module.ADMIN, Permissions.ADMIN_USERS_VIEW, "user-cog"),
            _item("roles-permissions", "Roles & Permissions", "/admin/roles", Module.ADMIN, Permissions.ADMIN_ROLES_VIEW, "shield-check"),
            _item("settings", "Settings", "/admin/settings", Module.ADMIN, Permissions.ADMIN_SETTINGS_VIEW, "settings"),
        ),
    ),
)


__all__ = [
    "DEFAULT_NAVIGATION",
    "NavItem",
    "NavSection",
    "filter_navigation",
    "has_navigation_bypass",
]
