"""Permission resolver: builds and publishes Authorization Snapshots.

One resolver is owned per active session. It reads the directory store for
the current (actor, tenant) pair and publishes a complete snapshot:

- the actor's active roles (inactive roles and roles of other tenants dropped),
- the permissions granted through exactly those roles, deduplicated by code,
- the tenant's enabled modules,
- whether the actor is an active platform super admin.

The role → permission chain, the module query and the super-admin lookup
run concurrently; the snapshot is published only after all of them finish.
While they run, the published snapshot is an explicit loading value.

Every load takes a new generation number. A result that arrives after a
newer load started (tenant switch, sign-out, refresh) is discarded, so a
slow response for a previous tenant can never leak into the current one.

Any store error, timeout or cancellation publishes the empty snapshot
(fail closed).
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from .config import AccessConfig
from .logging import AccessLoggerAdapter, get_access_logger, safe_log_value
from .permissions.models import Actor, ModuleEnablement, Permission, Role, SuperAdmin
from .snapshot import AuthorizationSnapshot
from .store import DirectoryStore

logger = logging.getLogger(__name__)

SnapshotListener = Callable[[AuthorizationSnapshot], None]


class PermissionResolver:
    """Resolves and publishes the authorization snapshot for one session.

    Args:
        store: Read-only directory store.
        config: Engine configuration (admin role name, fetch timeout).

    Usage::

        resolver = PermissionResolver(store, config)
        resolver.subscribe(on_snapshot)
        await resolver.load(actor_id="u-1", tenant_id="acme")
        decision = evaluate(resolver.snapshot, requirement)

        # after an admin toggles a module or edits role assignments
        await resolver.refresh()

        # sign-out
        resolver.clear()
    """

    def __init__(self, store: DirectoryStore, config: AccessConfig | None = None) -> None:
        self._store = store
        self._config = config or AccessConfig()
        self._actor_id: str | None = None
        self._tenant_id: str | None = None
        self._generation = 0
        self._listeners: list[SnapshotListener] = []
        self._snapshot = AuthorizationSnapshot.empty(admin_role_name=self._config.admin_role_name)

    # ── State ──────────────────────────────────────────

    @property
    def snapshot(self) -> AuthorizationSnapshot:
        """Currently published snapshot. Always a complete value."""
        return self._snapshot

    @property
    def actor_id(self) -> str | None:
        return self._actor_id

    @property
    def tenant_id(self) -> str | None:
        return self._tenant_id

    @property
    def is_loading(self) -> bool:
        return self._snapshot.is_loading

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Register a callback for every published snapshot.

        Returns:
            A function that removes the listener.
        """
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # ── Operations ─────────────────────────────────────

    async def load(self, actor_id: str | None, tenant_id: str | None) -> AuthorizationSnapshot:
        """Resolve the snapshot for a new (actor, tenant) pair.

        Missing actor or tenant publishes the empty snapshot immediately.
        Supersedes any load still in flight.
        """
        self._actor_id = actor_id or None
        self._tenant_id = tenant_id or None
        return await self._resolve()

    async def load_actor(self, actor: Actor | None) -> AuthorizationSnapshot:
        """Resolve for an Actor record. Absent or inactive actors resolve to nothing."""
        if actor is None or not actor.active:
            return self.clear()
        return await self.load(actor.id, actor.tenant_id)

    async def refresh(self) -> AuthorizationSnapshot:
        """Re-fetch for the current pair after roles, grants or modules change."""
        return await self._resolve()

    def clear(self) -> AuthorizationSnapshot:
        """Drop the identity (sign-out) and publish the empty snapshot."""
        self._actor_id = None
        self._tenant_id = None
        self._generation += 1
        return self._publish(AuthorizationSnapshot.empty(admin_role_name=self._config.admin_role_name))

    # ── Internals ──────────────────────────────────────

    async def _resolve(self) -> AuthorizationSnapshot:
        self._generation += 1
        generation = self._generation
        actor_id, tenant_id = self._actor_id, self._tenant_id
        admin_role = self._config.admin_role_name
        log = get_access_logger(__name__, actor_id=actor_id, tenant_id=tenant_id)

        if not actor_id or not tenant_id:
            log.debug("No actor or tenant; publishing empty snapshot")
            return self._publish(AuthorizationSnapshot.empty(actor_id, tenant_id, admin_role_name=admin_role))

        self._publish(AuthorizationSnapshot.loading(actor_id, tenant_id, admin_role_name=admin_role))

        try:
            snapshot = await asyncio.wait_for(
                self._fetch(actor_id, tenant_id, log),
                timeout=self._config.fetch_timeout_s,
            )
        except asyncio.TimeoutError:
            log.warning(
                "Snapshot resolution timed out after %.1fs; failing closed",
                self._config.fetch_timeout_s,
            )
            snapshot = AuthorizationSnapshot.empty(actor_id, tenant_id, admin_role_name=admin_role)
        except asyncio.CancelledError:
            # Never leave a loading snapshot behind with nothing in flight.
            if generation == self._generation:
                log.warning("Snapshot resolution cancelled; failing closed")
                self._publish(AuthorizationSnapshot.empty(actor_id, tenant_id, admin_role_name=admin_role))
            raise
        except Exception as e:
            log.warning("Snapshot resolution failed; failing closed: %s", safe_log_value(e))
            snapshot = AuthorizationSnapshot.empty(actor_id, tenant_id, admin_role_name=admin_role)

        if generation != self._generation:
            log.debug("Discarding stale snapshot (generation %d, current %d)", generation, self._generation)
            return self._snapshot

        log.info(
            "Snapshot published: roles=%d permissions=%d modules=%s admin=%s super_admin=%s",
            len(snapshot.roles),
            len(snapshot.permissions),
            safe_log_value(snapshot.enabled_modules),
            snapshot.is_company_admin,
            snapshot.is_super_admin,
        )
        return self._publish(snapshot)

    async def _fetch(self, actor_id: str, tenant_id: str, log: AccessLoggerAdapter) -> AuthorizationSnapshot:
        results = await asyncio.gather(
            self._fetch_grants(actor_id, tenant_id),
            self._store.fetch_module_enablements(tenant_id),
            self._store.fetch_super_admin(actor_id),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result

        (roles, permissions), enablements, super_admin = results
        enabled = _enabled_modules(enablements, tenant_id)
        log.debug("Resolved %d role(s), %d permission(s)", len(roles), len(permissions))

        return AuthorizationSnapshot(
            actor_id=actor_id,
            tenant_id=tenant_id,
            roles=frozenset(role.name for role in roles),
            permissions=frozenset(p.code for p in permissions),
            enabled_modules=enabled,
            permission_modules=frozenset(p.module for p in permissions if p.module),
            is_super_admin=_is_super_admin(super_admin, actor_id),
            admin_role_name=self._config.admin_role_name,
        )

    async def _fetch_grants(self, actor_id: str, tenant_id: str) -> tuple[list[Role], list[Permission]]:
        assigned = await self._store.fetch_user_roles(actor_id)
        roles = [r for r in assigned if r is not None and r.active and r.applies_to(tenant_id)]
        if not roles:
            return [], []

        granted = await self._store.fetch_role_permissions([r.id for r in roles])
        # Same code granted through several roles appears once.
        unique: dict[str, Permission] = {}
        for permission in granted:
            if permission is not None:
                unique.setdefault(permission.code, permission)
        return roles, list(unique.values())

    def _publish(self, snapshot: AuthorizationSnapshot) -> AuthorizationSnapshot:
        self._snapshot = snapshot
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Snapshot listener %r failed", listener)
        return snapshot


def _enabled_modules(enablements: list[ModuleEnablement], tenant_id: str) -> frozenset[str]:
    return frozenset(m.module for m in enablements if m.enabled and m.tenant_id == tenant_id)


def _is_super_admin(record: SuperAdmin | None, actor_id: str) -> bool:
    return record is not None and record.active and record.user_id == actor_id


__all__ = [
    "PermissionResolver",
    "SnapshotListener",
]
