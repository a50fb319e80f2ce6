"""
Role based permission decisions for complaints.

Every check in the application goes through this module: routers, the
lifecycle service and the /complaints/permissions endpoint all consume the
same tables instead of comparing role strings inline.

Decisions are pure functions of (role, operation, field). A denial is a normal
outcome and is returned as a value, never raised.
"""

from enum import Enum
from typing import Any, Dict, FrozenSet, List, NamedTuple, Optional, Tuple, Union

from ..models.complaint import MAINTENANCE_FIELDS, SYSTEM_FIELDS, ComplaintCreate
from ..models.user import UserRole


class Operation(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    VIEW = "view"
    EDIT_FIELD = "edit_field"


class PermissionDecision(NamedTuple):
    allowed: bool
    reason: Optional[str] = None


RoleLike = Union[UserRole, str, None]

# Every field a payload may carry
EDITABLE_FIELDS: FrozenSet[str] = frozenset(ComplaintCreate.model_fields) - frozenset(SYSTEM_FIELDS)
CORE_FIELDS: FrozenSet[str] = EDITABLE_FIELDS - frozenset(MAINTENANCE_FIELDS)

OPERATIONS_BY_ROLE: Dict[UserRole, FrozenSet[Operation]] = {
    UserRole.ADMIN: frozenset({Operation.CREATE, Operation.UPDATE, Operation.DELETE, Operation.VIEW}),
    UserRole.MAINTENANCE: frozenset({Operation.CREATE, Operation.UPDATE, Operation.VIEW}),
    UserRole.UPDATER: frozenset({Operation.CREATE, Operation.UPDATE, Operation.VIEW}),
    UserRole.SPECIAL_EDITOR_PRIORITY: frozenset({Operation.CREATE, Operation.UPDATE, Operation.VIEW}),
    UserRole.CREATOR: frozenset({Operation.CREATE, Operation.VIEW}),
    UserRole.SPECIAL_EDITOR_PHOTOS: frozenset({Operation.CREATE, Operation.VIEW}),
    UserRole.VIEWER: frozenset({Operation.VIEW}),
}

# Roles allowed to touch actionDate, maintenanceRemarks, assignedTo, ...
MAINTENANCE_EDITORS: FrozenSet[UserRole] = frozenset({
    UserRole.ADMIN,
    UserRole.MAINTENANCE,
    UserRole.UPDATER,
    UserRole.SPECIAL_EDITOR_PRIORITY,
})

# Fields each role may change on an existing complaint
UPDATE_FIELDS_BY_ROLE: Dict[UserRole, FrozenSet[str]] = {
    UserRole.ADMIN: EDITABLE_FIELDS,
    UserRole.UPDATER: EDITABLE_FIELDS,
    UserRole.SPECIAL_EDITOR_PRIORITY: EDITABLE_FIELDS,
    UserRole.MAINTENANCE: frozenset(MAINTENANCE_FIELDS) | {"complaintStatus", "materialsUsed"},
}

# Roles that see every complaint rather than only their own
SEE_ALL_ROLES: FrozenSet[UserRole] = frozenset({UserRole.ADMIN, UserRole.MAINTENANCE})


def resolve_role(role: RoleLike) -> UserRole:
    return UserRole.from_value(role)


def _create_fields(role: UserRole) -> FrozenSet[str]:
    if Operation.CREATE not in OPERATIONS_BY_ROLE[role]:
        return frozenset()
    if role in MAINTENANCE_EDITORS:
        return EDITABLE_FIELDS
    return CORE_FIELDS


def can_edit_field(role: RoleLike, field: str, creating: bool = False) -> bool:
    role = resolve_role(role)
    if field in SYSTEM_FIELDS or field not in EDITABLE_FIELDS:
        return False
    if creating:
        if Operation.CREATE not in OPERATIONS_BY_ROLE[role]:
            return False
        # Department is chosen by whoever files the complaint
        if field == "department":
            return True
        return field in _create_fields(role)
    if Operation.UPDATE not in OPERATIONS_BY_ROLE[role]:
        return False
    return field in UPDATE_FIELDS_BY_ROLE.get(role, frozenset())


def can_perform(
    role: RoleLike,
    operation: Union[Operation, str],
    field: Optional[str] = None,
    creating: bool = False,
) -> bool:
    """Return True when `role` may perform `operation` (on `field` for edit_field)."""
    role = resolve_role(role)
    operation = Operation(operation)
    if operation is Operation.EDIT_FIELD:
        if not field:
            return False
        return can_edit_field(role, field, creating=creating)
    return operation in OPERATIONS_BY_ROLE[role]


def check(role: RoleLike, operation: Union[Operation, str]) -> PermissionDecision:
    role = resolve_role(role)
    operation = Operation(operation)
    if can_perform(role, operation):
        return PermissionDecision(True)
    return PermissionDecision(False, f"Role '{role.value}' may not {operation.value} complaints")


def writable_fields(role: RoleLike, creating: bool = False) -> List[str]:
    role = resolve_role(role)
    return sorted(f for f in EDITABLE_FIELDS if can_edit_field(role, f, creating=creating))


def filter_writable(
    role: RoleLike, changes: Dict[str, Any], creating: bool = False
) -> Tuple[Dict[str, Any], List[str]]:
    """Split `changes` into the fields the role may write and the names it may not."""
    accepted: Dict[str, Any] = {}
    rejected: List[str] = []
    for field, value in changes.items():
        if can_edit_field(role, field, creating=creating):
            accepted[field] = value
        else:
            rejected.append(field)
    return accepted, rejected


def can_see_all(role: RoleLike) -> bool:
    return resolve_role(role) in SEE_ALL_ROLES


def can_view_complaint(role: RoleLike, actor_email: Optional[str], created_by: Optional[str]) -> bool:
    if not can_perform(role, Operation.VIEW):
        return False
    if can_see_all(role):
        return True
    return bool(actor_email) and actor_email == created_by


def permissions_summary(role: RoleLike) -> Dict[str, Any]:
    role = resolve_role(role)
    return {
        "role": role.value,
        "operations": {op.value: can_perform(role, op) for op in Operation if op is not Operation.EDIT_FIELD},
        "see_all": can_see_all(role),
        "create_fields": writable_fields(role, creating=True),
        "update_fields": writable_fields(role, creating=False),
    }

