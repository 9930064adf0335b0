"""Tests for accesscore.snapshot."""

from __future__ import annotations

import dataclasses

import pytest
from accesscore.permissions import ADMIN_ROLE_NAME, Module
from accesscore.snapshot import AuthorizationSnapshot


class TestAuthorizationSnapshot:
    """Snapshot construction and queries."""

    def test_empty_grants_nothing(self):
        snapshot = AuthorizationSnapshot.empty("u-1", "acme")
        assert snapshot.roles == frozenset()
        assert snapshot.permissions == frozenset()
        assert snapshot.enabled_modules == frozenset()
        assert snapshot.is_loading is False
        assert snapshot.is_company_admin is False
        assert snapshot.is_for("u-1", "acme")
        assert snapshot.is_super_admin is False

    def test_loading(self):
        snapshot = AuthorizationSnapshot.loading("u-1", "acme")
        assert snapshot.is_loading is True
        assert snapshot.permissions == frozenset()

    def test_build_coerces_iterables(self):
        snapshot = AuthorizationSnapshot.build(
            roles=["HR", "HR"],
            permissions=("a", "b", "a"),
            enabled_modules=[Module.HR_CORE, "LEAVE"],
        )
        assert snapshot.roles == frozenset({"HR"})
        assert snapshot.permissions == frozenset({"a", "b"})
        assert snapshot.enabled_modules == frozenset({"HR_CORE", "LEAVE"})

    def test_admin_derived_from_roles(self):
        assert AuthorizationSnapshot.build(roles=[ADMIN_ROLE_NAME]).is_company_admin is True
        assert AuthorizationSnapshot.build(roles=["company admin"]).is_company_admin is False

    def test_super_admin_independent_of_roles(self):
        snapshot = AuthorizationSnapshot.build(is_super_admin=True)
        assert snapshot.is_super_admin is True
        assert snapshot.is_company_admin is False
        assert AuthorizationSnapshot.build(roles=[ADMIN_ROLE_NAME]).is_super_admin is False

    def test_admin_flag_not_settable(self):
        with pytest.raises(TypeError):
            AuthorizationSnapshot(roles=frozenset(), is_company_admin=True)  # type: ignore[call-arg]

    def test_immutable(self):
        snapshot = AuthorizationSnapshot.empty()
        with pytest.raises(dataclasses.FrozenInstanceError):
            snapshot.roles = frozenset({"HR"})  # type: ignore[misc]

    def test_queries(self):
        snapshot = AuthorizationSnapshot.build(
            roles=["HR"],
            permissions=["hr.view_employee"],
            enabled_modules=["HR_CORE"],
            permission_modules=["HR_CORE"],
        )
        assert snapshot.has_role("HR")
        assert snapshot.has_any_role(["Finance", "HR"])
        assert not snapshot.has_any_role([])
        assert snapshot.has_permission("hr.view_employee")
        assert snapshot.is_module_enabled(Module.HR_CORE)
        assert not snapshot.is_module_enabled("FINANCE")
        assert snapshot.has_module_permission("HR_CORE")
        assert not snapshot.has_module_permission(Module.LEAVE)
