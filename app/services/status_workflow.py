"""Transition rules for complaintStatus.

The default workflow is permissive: any role allowed to edit the status may set
any value. With ENFORCE_STATUS_TRANSITIONS enabled, Closed and Cancelled become
terminal states.

Usage:
    from app.services.status_workflow import build_status_validator
    validator = build_status_validator(enforce=True)
    validator.assert_can_transition("Closed", "Open")  # raises ValidationError
"""
from typing import Dict, Set

from ..core.exceptions import ValidationError
from ..models.complaint import ComplaintStatus

ALL_STATUSES: Set[str] = {s.value for s in ComplaintStatus}
TERMINAL_STATUSES: Set[str] = {ComplaintStatus.CLOSED.value, ComplaintStatus.CANCELLED.value}


class TransitionValidator:
    def __init__(self, graph: Dict[str, Set[str]], field_name: str = 'complaintStatus'):
        self.graph = graph
        self.field_name = field_name

    def can_transition(self, current: str, target: str) -> bool:
        if current == target:
            return True
        return target in self.graph.get(current, set())

    def assert_can_transition(self, current: str, target: str):
        if not self.can_transition(current, target):
            raise ValidationError(
                f"Invalid {self.field_name} transition {current} -> {target}",
                errors=[{"field": self.field_name, "message": f"Cannot move from {current} to {target}"}],
            )
        return True


PERMISSIVE_GRAPH: Dict[str, Set[str]] = {status: set(ALL_STATUSES) for status in ALL_STATUSES}

TERMINAL_GRAPH: Dict[str, Set[str]] = {
    status: (set() if status in TERMINAL_STATUSES else set(ALL_STATUSES))
    for status in ALL_STATUSES
}


def build_status_validator(enforce: bool) -> TransitionValidator:
    return TransitionValidator(TERMINAL_GRAPH if enforce else PERMISSIVE_GRAPH)
