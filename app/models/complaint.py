from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Any, Dict, List, Optional
from datetime import date, datetime
from enum import Enum

# ──────────────────────────────────────────────────────────────────────────────
# Enums
# ──────────────────────────────────────────────────────────────────────────────

class Priority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class ComplaintStatus(str, Enum):
    OPEN = "Open"
    IN_PROGRESS = "In Progress"
    PENDING_PARTS = "Pending Parts"
    RESOLVED = "Resolved"
    CLOSED = "Closed"
    CANCELLED = "Cancelled"


class Department(str, Enum):
    MECHANICAL = "Mechanical"
    ELECTRICAL = "Electrical"
    PRODUCTION = "Production"
    QUALITY = "Quality"
    OTHER = "Other"


class AssignedTo(str, Enum):
    PERSON_A = "Person A"
    PERSON_B = "Person B"
    PERSON_C = "Person C"
    PERSON_D = "Person D"


class HistoryAction(str, Enum):
    CREATED = "Created"
    UPDATED = "Updated"


# Fields only technicians (and roles above them) may touch
MAINTENANCE_FIELDS = (
    "actionDate",
    "maintenanceRemarks",
    "initialInspectionDate",
    "estimatedEndDate",
    "finalizationDate",
    "assignedTo",
)

# Managed by the lifecycle service, never taken from a payload
SYSTEM_FIELDS = ("id", "complaintId", "createdBy", "history")

DATE_FIELDS = (
    "complaintDate",
    "actionDate",
    "initialInspectionDate",
    "estimatedEndDate",
    "finalizationDate",
)


def _parse_optional_date(value: Any) -> Optional[str]:
    """Blank -> None; otherwise must be an ISO date or datetime string."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    value = str(value).strip()
    if not value:
        return None
    try:
        date.fromisoformat(value[:10])
        if len(value) > 10:
            datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise ValueError(f"'{value}' is not a valid ISO date")
    return value


# ──────────────────────────────────────────────────────────────────────────────
# Nested documents
# ──────────────────────────────────────────────────────────────────────────────

class MaterialUsed(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, description="Material name required")
    quantity: str = Field(..., min_length=1, description="Quantity required")
    remarks: Optional[str] = None

    @field_validator("quantity", mode="before")
    @classmethod
    def _quantity_as_text(cls, v):
        # Forms send quantities as text ("2 m", "4"); plain numbers are accepted too
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v


class HistoryEntry(BaseModel):
    """One immutable audit record of a creation or update."""
    model_config = ConfigDict(frozen=True)

    action: HistoryAction
    user: str
    timestamp: str

    @field_validator("timestamp", mode="before")
    @classmethod
    def iso_timestamp(cls, v):
        # Backfilled records may carry a Firestore timestamp instead of a string
        if isinstance(v, datetime):
            return v.isoformat()
        return v


# ──────────────────────────────────────────────────────────────────────────────
# Payloads
# ──────────────────────────────────────────────────────────────────────────────

class ComplaintCreate(BaseModel):
    """Fields a caller may submit when opening a complaint.

    System fields (createdBy, complaintId, history) are ignored if present.
    """
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    complaintDate: Optional[str] = None
    machineName: str = Field(..., min_length=1)
    complaintDescription: str = Field(..., min_length=1)
    priority: Priority
    complaintStatus: ComplaintStatus = ComplaintStatus.OPEN
    department: Department
    assignedTo: AssignedTo = AssignedTo.PERSON_A
    actionDate: Optional[str] = None
    maintenanceRemarks: Optional[str] = None
    initialInspectionDate: Optional[str] = None
    estimatedEndDate: Optional[str] = None
    finalizationDate: Optional[str] = None
    materialsUsed: List[MaterialUsed] = Field(default_factory=list)

    @field_validator(*DATE_FIELDS, mode="before")
    @classmethod
    def check_dates(cls, v):
        return _parse_optional_date(v)

    @field_validator("maintenanceRemarks", mode="before")
    @classmethod
    def _blank_remarks(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class ComplaintUpdate(BaseModel):
    """Partial update; only fields present in the request are applied."""
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    complaintDate: Optional[str] = None
    machineName: Optional[str] = Field(None, min_length=1)
    complaintDescription: Optional[str] = Field(None, min_length=1)
    priority: Optional[Priority] = None
    complaintStatus: Optional[ComplaintStatus] = None
    department: Optional[Department] = None
    assignedTo: Optional[AssignedTo] = None
    actionDate: Optional[str] = None
    maintenanceRemarks: Optional[str] = None
    initialInspectionDate: Optional[str] = None
    estimatedEndDate: Optional[str] = None
    finalizationDate: Optional[str] = None
    materialsUsed: Optional[List[MaterialUsed]] = None

    @field_validator(*DATE_FIELDS, mode="before")
    @classmethod
    def check_dates(cls, v):
        return _parse_optional_date(v)

    @model_validator(mode="after")
    def _required_fields_not_cleared(self):
        for name in ("complaintDate", "machineName", "complaintDescription", "priority",
                     "complaintStatus", "department", "assignedTo", "materialsUsed"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be cleared")
        return self

    def changes(self) -> Dict[str, Any]:
        """The submitted fields, serialized the way they are stored."""
        return self.model_dump(mode="json", include=self.model_fields_set)


# ──────────────────────────────────────────────────────────────────────────────
# Stored document
# ──────────────────────────────────────────────────────────────────────────────

class Complaint(BaseModel):
    id: Optional[str] = None  # Firestore document id
    complaintId: str = ""  # e.g. "AIRTECH-01"
    complaintDate: str = ""
    machineName: str = ""
    complaintDescription: str = ""
    priority: Priority = Priority.LOW
    complaintStatus: ComplaintStatus = ComplaintStatus.OPEN
    department: str = ""
    assignedTo: AssignedTo = AssignedTo.PERSON_A
    actionDate: Optional[str] = None
    maintenanceRemarks: Optional[str] = None
    initialInspectionDate: Optional[str] = None
    estimatedEndDate: Optional[str] = None
    finalizationDate: Optional[str] = None
    materialsUsed: List[MaterialUsed] = Field(default_factory=list)
    createdBy: str = ""
    history: List[HistoryEntry] = Field(default_factory=list)

    @field_validator("priority", mode="before")
    @classmethod
    def legacy_priority(cls, v):
        return v if v in {p.value for p in Priority} else Priority.LOW

    @field_validator("complaintStatus", mode="before")
    @classmethod
    def legacy_status(cls, v):
        return v if v in {s.value for s in ComplaintStatus} else ComplaintStatus.OPEN

    @field_validator("assignedTo", mode="before")
    @classmethod
    def legacy_assignee(cls, v):
        return v if v in {a.value for a in AssignedTo} else AssignedTo.PERSON_A

    @field_validator(*DATE_FIELDS[1:], mode="before")
    @classmethod
    def stored_dates(cls, v):
        if isinstance(v, (date, datetime)):
            return v.isoformat()
        return v or None

    @classmethod
    def from_document(cls, data: Dict[str, Any]) -> "Complaint":
        """Build from a stored document, filling defaults for legacy records."""
        data = dict(data)
        complaint_date = data.get("complaintDate")
        if isinstance(complaint_date, (date, datetime)):
            data["complaintDate"] = complaint_date.isoformat()[:10]
        for key in ("complaintDate", "machineName", "complaintDescription", "department", "createdBy"):
            if data.get(key) is None:
                data[key] = ""
        for key in ("materialsUsed", "history"):
            if data.get(key) is None:
                data[key] = []
        if not data.get("complaintId"):
            data["complaintId"] = data.get("id") or ""
        return cls(**data)

    def to_document(self) -> Dict[str, Any]:
        """Serialize for storage; the document id lives outside the body."""
        return self.model_dump(mode="json", exclude={"id"})
