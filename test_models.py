import pytest
from pydantic import ValidationError

from app.models.complaint import Complaint, ComplaintCreate, ComplaintUpdate, HistoryEntry, MaterialUsed
from app.models.user import Actor, UserProfile, UserRole


def test_material_quantity_accepts_numbers():
    material = MaterialUsed(name=" Seal ", quantity=4)
    assert material.name == "Seal"
    assert material.quantity == "4"


@pytest.mark.parametrize("name,quantity", [("", "2"), ("Seal", ""), ("Seal", "   ")])
def test_material_requires_name_and_quantity(name, quantity):
    with pytest.raises(ValidationError):
        MaterialUsed(name=name, quantity=quantity)


def test_create_payload_defaults():
    payload = ComplaintCreate(machineName="Lathe", complaintDescription="Noise", priority="Low", department="Quality")
    assert payload.complaintStatus.value == "Open"
    assert payload.assignedTo.value == "Person A"
    assert payload.materialsUsed == []
    assert payload.complaintDate is None


def test_create_payload_normalizes_blank_optionals():
    payload = ComplaintCreate(
        machineName="Lathe", complaintDescription="Noise", priority="Low", department="Quality",
        maintenanceRemarks="   ", actionDate="",
    )
    assert payload.maintenanceRemarks is None
    assert payload.actionDate is None


@pytest.mark.parametrize("value", ["2025-13-01", "yesterday", "2025-01-01Tnoon"])
def test_invalid_dates_rejected(value):
    with pytest.raises(ValidationError):
        ComplaintCreate(machineName="L", complaintDescription="N", priority="Low", department="Other", actionDate=value)


def test_datetime_strings_accepted():
    payload = ComplaintCreate(
        machineName="L", complaintDescription="N", priority="Low", department="Other",
        estimatedEndDate="2025-03-01T08:15:30.120Z",
    )
    assert payload.estimatedEndDate == "2025-03-01T08:15:30.120Z"


def test_update_changes_only_submitted_fields():
    update = ComplaintUpdate(maintenanceRemarks="Done", actionDate=None)
    assert update.changes() == {"maintenanceRemarks": "Done", "actionDate": None}


def test_update_cannot_clear_required():
    with pytest.raises(ValidationError):
        ComplaintUpdate(machineName=None)


def test_history_entry_is_frozen():
    entry = HistoryEntry(action="Created", user="a@x.com", timestamp="t")
    with pytest.raises(ValidationError):
        entry.user = "b@x.com"


def test_legacy_document_gets_defaults():
    complaint = Complaint.from_document({
        "id": "doc1",
        "machineName": "Press",
        "priority": "Critical",
        "complaintStatus": None,
        "assignedTo": "Bob",
        "actionDate": "",
    })
    assert complaint.complaintId == "doc1"
    assert complaint.priority.value == "Low"
    assert complaint.complaintStatus.value == "Open"
    assert complaint.assignedTo.value == "Person A"
    assert complaint.actionDate is None
    assert complaint.history == []
    assert complaint.materialsUsed == []
    assert complaint.createdBy == ""


def test_to_document_excludes_id():
    complaint = Complaint.from_document({"id": "doc1", "complaintId": "AIRTECH-07"})
    document = complaint.to_document()
    assert "id" not in document
    assert document["complaintId"] == "AIRTECH-07"


@pytest.mark.parametrize("raw", [None, "", "superuser", 42])
def test_unknown_roles_become_viewer(raw):
    assert UserRole.from_value(raw) is UserRole.VIEWER
    assert UserProfile(role=raw).role is UserRole.VIEWER


def test_actor_normalizes_email():
    assert Actor(uid="u", email="  ", role="ADMIN").email is None
    assert Actor(uid="u", email=" a@x.com ", role="ADMIN").role is UserRole.ADMIN


def test_actor_needs_only_role():
    actor = Actor(role="viewer")
    assert actor.uid is None
    assert actor.email is None
    assert actor.role is UserRole.VIEWER
