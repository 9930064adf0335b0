"""Tests for accesscore.evaluator and accesscore.decisions."""

from __future__ import annotations

import pytest
from accesscore.decisions import (
    OPEN_REQUIREMENT,
    SUPER_ADMIN_REQUIREMENT,
    AccessDecision,
    AccessRequirement,
    DecisionOutcome,
    DenialReason,
)
from accesscore.evaluator import evaluate, is_allowed, require
from accesscore.exceptions import AccessDeniedError
from accesscore.permissions import ADMIN_ROLE_NAME, Module, Permissions
from accesscore.snapshot import AuthorizationSnapshot


def _hr_snapshot() -> AuthorizationSnapshot:
    return AuthorizationSnapshot.build(
        roles=["HR"],
        permissions=[Permissions.HR_VIEW_EMPLOYEE],
        enabled_modules=[Module.HR_CORE],
    )


def _admin_snapshot(*modules: str) -> AuthorizationSnapshot:
    return AuthorizationSnapshot.build(roles=[ADMIN_ROLE_NAME], enabled_modules=modules)


class TestAccessRequirement:
    """AccessRequirement normalisation."""

    def test_defaults_are_open(self):
        req = AccessRequirement()
        assert req.is_open is True
        assert req.has_role_predicate is False
        assert req.has_permission_predicate is False

    def test_module_enum_normalised_to_code(self):
        req = AccessRequirement(module=Module.FINANCE)
        assert req.module == "FINANCE"

    def test_string_sequence_fields_become_tuples(self):
        req = AccessRequirement(any_permission=["a", "b"], any_role="HR")
        assert req.any_permission == ("a", "b")
        assert req.any_role == ("HR",)

    def test_empty_strings_mean_absent(self):
        req = AccessRequirement(module="", permission="", role="")
        assert req.is_open is True

    def test_module_only_drops_predicates(self):
        req = AccessRequirement(module="LEAVE", permission="leave.requests.view", role="HR", strict_mode=True)
        only = req.module_only()
        assert only == AccessRequirement(module="LEAVE")


class TestAccessDecision:
    """AccessDecision accessors."""

    def test_allow(self):
        decision = AccessDecision.allow()
        assert decision.allowed is True
        assert decision.denied is False
        assert decision.failed_requirement is None

    def test_pending(self):
        decision = AccessDecision.pending()
        assert decision.outcome is DecisionOutcome.PENDING
        assert decision.allowed is False
        assert decision.denied is False

    def test_module_denial_names_module(self):
        decision = AccessDecision.deny(DenialReason.MODULE_DISABLED, module="FINANCE")
        assert decision.failed_requirement == "FINANCE"

    def test_insufficient_access_names_permission(self):
        decision = AccessDecision.deny(DenialReason.INSUFFICIENT_ACCESS)
        assert decision.failed_requirement == "permission"
        assert decision.module is None


class TestConcreteScenarios:
    """Worked examples for an HR user and a company admin."""

    def test_hr_user_allowed_in_hr_core(self):
        req = AccessRequirement(module="HR_CORE", permission="hr.view_employee")
        assert evaluate(_hr_snapshot(), req) == AccessDecision.allow()

    def test_hr_user_denied_when_module_disabled(self):
        req = AccessRequirement(module="ATTENDANCE", permission="hr.view_employee")
        decision = evaluate(_hr_snapshot(), req)
        assert decision == AccessDecision.deny(DenialReason.MODULE_DISABLED, module="ATTENDANCE")

    def test_hr_user_denied_missing_permission(self):
        req = AccessRequirement(module="HR_CORE", permission="hr.manage_department")
        decision = evaluate(_hr_snapshot(), req)
        assert decision == AccessDecision.deny(DenialReason.INSUFFICIENT_ACCESS)

    def test_admin_bypasses_permissions(self):
        req = AccessRequirement(
            module="FINANCE",
            all_permissions=("finance.manage_payroll", "finance.view"),
        )
        assert evaluate(_admin_snapshot("FINANCE"), req).allowed is True

    def test_admin_still_subject_to_module(self):
        req = AccessRequirement(
            module="REVENUE",
            all_permissions=("finance.manage_payroll", "finance.view"),
        )
        decision = evaluate(_admin_snapshot("FINANCE"), req)
        assert decision.reason is DenialReason.MODULE_DISABLED
        assert decision.module == "REVENUE"


class TestEvaluationOrder:
    """Module gate, admin bypass, role and permission predicates."""

    @pytest.mark.parametrize("strict_mode", [False, True])
    @pytest.mark.parametrize("roles", [[], ["HR"], [ADMIN_ROLE_NAME]])
    def test_disabled_module_always_denies(self, strict_mode, roles):
        snapshot = AuthorizationSnapshot.build(
            roles=roles,
            permissions=["sales.leads.view"],
            enabled_modules=["HR_CORE"],
        )
        req = AccessRequirement(module="SALES_CRM", permission="sales.leads.view", strict_mode=strict_mode)
        decision = evaluate(snapshot, req)
        assert decision.reason is DenialReason.MODULE_DISABLED

    @pytest.mark.parametrize(
        "req",
        [
            AccessRequirement(role="Finance Manager"),
            AccessRequirement(any_role=("A", "B")),
            AccessRequirement(permission="x.y.z"),
            AccessRequirement(all_permissions=("a", "b")),
            AccessRequirement(any_permission=("c",), role="R"),
            AccessRequirement(module="COMPLIANCE", permission="compliance.audits.view"),
        ],
    )
    def test_admin_non_strict_allows_anything_module_enabled(self, req):
        snapshot = _admin_snapshot("COMPLIANCE")
        assert evaluate(snapshot, req).allowed is True

    def test_strict_mode_checks_admin_like_everyone(self):
        req = AccessRequirement(permission="finance.manage_payroll", strict_mode=True)
        decision = evaluate(_admin_snapshot(), req)
        assert decision.reason is DenialReason.INSUFFICIENT_ACCESS

    def test_strict_mode_admin_with_permission_allowed(self):
        snapshot = AuthorizationSnapshot.build(
            roles=[ADMIN_ROLE_NAME],
            permissions=["finance.manage_payroll"],
        )
        req = AccessRequirement(permission="finance.manage_payroll", strict_mode=True)
        assert evaluate(snapshot, req).allowed is True

    def test_all_permissions_requires_every_code(self):
        snapshot = AuthorizationSnapshot.build(permissions=["a", "b"])
        assert evaluate(snapshot, AccessRequirement(all_permissions=("a", "b"))).allowed
        assert evaluate(snapshot, AccessRequirement(all_permissions=("a", "c"))).denied

    def test_any_permission_requires_one_code(self):
        snapshot = AuthorizationSnapshot.build(permissions=["b"])
        assert evaluate(snapshot, AccessRequirement(any_permission=("a", "b"))).allowed
        assert evaluate(snapshot, AccessRequirement(any_permission=("a", "c"))).denied

    def test_permission_predicates_are_conjunctive(self):
        snapshot = AuthorizationSnapshot.build(permissions=["a", "b"])
        req = AccessRequirement(permission="a", any_permission=("c", "d"))
        assert evaluate(snapshot, req).denied

    def test_role_and_permission_both_required(self):
        snapshot = AuthorizationSnapshot.build(roles=["HR"], permissions=["hr.view_employee"])
        assert evaluate(snapshot, AccessRequirement(role="HR", permission="hr.view_employee")).allowed
        assert evaluate(snapshot, AccessRequirement(role="Finance", permission="hr.view_employee")).denied
        assert evaluate(snapshot, AccessRequirement(any_role=("Finance", "HR"))).allowed

    def test_open_requirement_allows_empty_snapshot(self):
        assert evaluate(AuthorizationSnapshot.empty(), OPEN_REQUIREMENT).allowed
        assert evaluate(AuthorizationSnapshot.empty()).allowed

    def test_empty_snapshot_denies_any_predicate(self):
        decision = evaluate(AuthorizationSnapshot.empty(), AccessRequirement(permission="hr.view_employee"))
        assert decision.reason is DenialReason.INSUFFICIENT_ACCESS

    def test_loading_snapshot_is_pending(self):
        snapshot = AuthorizationSnapshot.loading("u-1", "acme")
        assert evaluate(snapshot, AccessRequirement(module="HR_CORE")).is_pending
        assert evaluate(snapshot).is_pending

    def test_idempotent(self):
        snapshot = _hr_snapshot()
        req = AccessRequirement(module="HR_CORE", permission="hr.manage_department")
        assert evaluate(snapshot, req) == evaluate(snapshot, req)

    def test_custom_admin_role_name(self):
        snapshot = AuthorizationSnapshot.build(roles=["Owner"], admin_role_name="Owner")
        assert snapshot.is_company_admin is True
        assert evaluate(snapshot, AccessRequirement(permission="anything")).allowed


class TestRequire:
    """is_allowed / require helpers."""

    def test_is_allowed(self):
        assert is_allowed(_hr_snapshot(), AccessRequirement(permission="hr.view_employee")) is True
        assert is_allowed(AuthorizationSnapshot.loading(), AccessRequirement()) is False

    def test_require_returns_decision(self):
        decision = require(_hr_snapshot(), AccessRequirement(module="HR_CORE"))
        assert decision.allowed

    def test_require_raises_on_deny(self):
        with pytest.raises(AccessDeniedError) as exc_info:
            require(_hr_snapshot(), AccessRequirement(module="FINANCE"))
        err = exc_info.value
        assert err.code == "ACCESS_DENIED"
        assert err.decision.module == "FINANCE"
        assert err.details["reason"] == "MODULE_DISABLED"
        assert err.details["module"] == "FINANCE"

    def test_require_raises_pending(self):
        with pytest.raises(AccessDeniedError) as exc_info:
            require(AuthorizationSnapshot.loading(), AccessRequirement())
        assert exc_info.value.code == "ACCESS_PENDING"


class TestSuperAdminRequirement:
    """Platform super-admin axis."""

    def test_company_admin_denied(self):
        """Tenant-level admin rights never satisfy a platform requirement."""
        decision = evaluate(_admin_snapshot(Module.ADMIN), SUPER_ADMIN_REQUIREMENT)
        assert decision.denied
        assert decision.reason is DenialReason.SUPER_ADMIN_REQUIRED
        assert decision.failed_requirement == "super_admin"

    def test_super_admin_allowed(self):
        snapshot = AuthorizationSnapshot.build(is_super_admin=True)
        assert evaluate(snapshot, SUPER_ADMIN_REQUIREMENT).allowed

    def test_module_gate_checked_first(self):
        snapshot = AuthorizationSnapshot.build(is_super_admin=True)
        decision = evaluate(snapshot, AccessRequirement(module=Module.FINANCE, super_admin=True))
        assert decision.reason is DenialReason.MODULE_DISABLED
        assert decision.module == "FINANCE"

    def test_other_predicates_still_apply(self):
        snapshot = AuthorizationSnapshot.build(is_super_admin=True)
        req = AccessRequirement(super_admin=True, permission=Permissions.ADMIN_USERS_VIEW)
        assert evaluate(snapshot, req).reason is DenialReason.INSUFFICIENT_ACCESS

    def test_pending_while_loading(self):
        assert evaluate(AuthorizationSnapshot.loading(), SUPER_ADMIN_REQUIREMENT).is_pending

    def test_requirement_not_open(self):
        assert SUPER_ADMIN_REQUIREMENT.is_open is False
