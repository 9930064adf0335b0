"""Module codes and permission constants for the business suite.

Provides:
- ``Module`` — the fixed set of tenant feature areas.
- ``Permissions`` — permission code constants (``domain.resource.action`` format).
- ``ADMIN_ROLE_NAME`` — the distinguished company administrator role.
"""

from __future__ import annotations

from enum import Enum


class Module(str, Enum):
    """Toggleable feature area of a tenant.

    Values match the ``module_code`` enumeration stored by the directory.
    """

    HR_CORE = "HR_CORE"
    ATTENDANCE = "ATTENDANCE"
    LEAVE = "LEAVE"
    FINANCE = "FINANCE"
    REVENUE = "REVENUE"
    SALES_CRM = "SALES_CRM"
    COMPLIANCE = "COMPLIANCE"
    ADMIN = "ADMIN"

    @classmethod
    def coerce(cls, value: Module | str | None) -> str | None:
        """Normalise a module given as enum member or raw code to its code string."""
        if value is None:
            return None
        if isinstance(value, Module):
            return value.value
        return str(value)


ADMIN_ROLE_NAME = "Company Admin"


class Permissions:
    """Canonical permission codes.

    Format: ``{domain}.{resource}.{action}``, with a handful of older
    two-part codes (``hr.view_employee``) still granted by seeded roles.

    Codes are opaque to the engine: it only ever compares them for
    equality, so tenants may grant codes that are not listed here.
    """

    # ── HR Core ─────────────────────────────────────────
    HR_EMPLOYEES_VIEW = "hr.employees.view"
    HR_DEPARTMENTS_VIEW = "hr.departments.view"
    HR_POSITIONS_VIEW = "hr.positions.view"
    HR_VIEW_EMPLOYEE = "hr.view_employee"
    HR_EDIT_EMPLOYEE = "hr.edit_employee"
    HR_MANAGE_DEPARTMENT = "hr.manage_department"

    # ── Attendance ──────────────────────────────────────
    ATTENDANCE_RECORDS_VIEW = "attendance.records.view"
    ATTENDANCE_REPORTS_VIEW = "attendance.reports.view"

    # ── Leave ───────────────────────────────────────────
    LEAVE_REQUESTS_VIEW = "leave.requests.view"
    LEAVE_CALENDAR_VIEW = "leave.calendar.view"

    # ── Finance ─────────────────────────────────────────
    FINANCE_PAYROLL_VIEW = "finance.payroll.view"
    FINANCE_EXPENSES_VIEW = "finance.expenses.view"
    FINANCE_VIEW_PAYROLL = "finance.view_payroll"
    FINANCE_MANAGE_PAYROLL = "finance.manage_payroll"

    # ── Revenue ─────────────────────────────────────────
    REVENUE_DASHBOARD_VIEW = "revenue.dashboard.view"
    REVENUE_REPORTS_VIEW = "revenue.reports.view"

    # ── Sales & CRM ─────────────────────────────────────
    SALES_LEADS_VIEW = "sales.leads.view"
    SALES_DEALS_VIEW = "sales.deals.view"

    # ── Compliance ──────────────────────────────────────
    COMPLIANCE_POLICIES_VIEW = "compliance.policies.view"
    COMPLIANCE_AUDITS_VIEW = "compliance.audits.view"

    # ── Administration ──────────────────────────────────
    ADMIN_COMPANY_VIEW = "admin.company.view"
    ADMIN_USERS_VIEW = "admin.users.view"
    ADMIN_ROLES_VIEW = "admin.roles.view"
    ADMIN_SETTINGS_VIEW = "admin.settings.view"

    @staticmethod
    def code(domain: str, resource: str, action: str) -> str:
        """Build a permission code from its parts.

        Example::

            Permissions.code("hr", "employees", "view")  # "hr.employees.view"
        """
        return f"{domain}.{resource}.{action}"


__all__ = [
    "ADMIN_ROLE_NAME",
    "Module",
    "Permissions",
]
