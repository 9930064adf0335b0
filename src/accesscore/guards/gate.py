"""Component gate: show, replace or hide a piece of content."""

from __future__ import annotations

from typing import Generic, TypeVar

from ..decisions import AccessRequirement
from ..evaluator import evaluate
from ..snapshot import AuthorizationSnapshot

T = TypeVar("T")


class ComponentGate(Generic[T]):
    """Conditionally renders content behind an AccessRequirement.

    ``render`` returns the content on allow, ``fallback`` on deny and None
    while the snapshot is loading (render nothing rather than flash either).

    Usage::

        edit_button = ComponentGate(AccessRequirement(permission=Permissions.HR_EDIT_EMPLOYEE))
        widget = edit_button.render(snapshot, EditButton())
    """

    def __init__(self, requirement: AccessRequirement | None = None, fallback: T | None = None) -> None:
        self.requirement = requirement or AccessRequirement()
        self.fallback = fallback

    def visible(self, snapshot: AuthorizationSnapshot) -> bool:
        return evaluate(snapshot, self.requirement).allowed

    def render(self, snapshot: AuthorizationSnapshot, content: T) -> T | None:
        decision = evaluate(snapshot, self.requirement)
        if decision.is_pending:
            return None
        return content if decision.allowed else self.fallback


__all__ = ["ComponentGate"]
