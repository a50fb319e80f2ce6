from typing import Any, Callable, Dict, List, Optional, Union
import logging

from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from app.core.config import settings
from app.core.exceptions import ComplaintError, NotFound, PermissionDenied, StorageFailure, ValidationError
from app.database.collections import COLLECTIONS
from app.models.action_result import ActionResult
from app.models.complaint import Complaint, ComplaintCreate, ComplaintUpdate, HistoryAction
from app.models.user import Actor
from app.services import permission_service
from app.services.complaint_id_service import ComplaintIdService
from app.services.history_service import append_entry, utc_now_iso
from app.services.permission_service import Operation
from app.services.status_workflow import build_status_validator

logger = logging.getLogger(__name__)

ActorLike = Union[Actor, Dict[str, Any]]

_email_adapter = TypeAdapter(EmailStr)


def _field_errors(exc: PydanticValidationError) -> List[Dict[str, Any]]:
    return [
        {"field": ".".join(str(part) for part in err["loc"]) or "__root__", "message": err["msg"]}
        for err in exc.errors()
    ]


class ComplaintService:
    """
    Complaint lifecycle: create, update, delete, list and read complaints.

    The storage collaborator is injected so tests and local demos can run
    against the in-memory store. Every public method returns an ActionResult
    and never raises; permission denials, validation problems, missing records
    and storage faults all come back as `success=False` results.
    """

    def __init__(
        self,
        db=None,
        id_service: Optional[ComplaintIdService] = None,
        clock: Optional[Callable[[], str]] = None,
        enforce_status_transitions: Optional[bool] = None,
    ):
        if db is None:
            from app.database.database_service import database_service
            db = database_service
        self.db = db
        self.id_service = id_service or ComplaintIdService(db)
        self.clock = clock or utc_now_iso
        if enforce_status_transitions is None:
            enforce_status_transitions = settings.ENFORCE_STATUS_TRANSITIONS
        self.status_validator = build_status_validator(enforce_status_transitions)
        self.collection = COLLECTIONS['complaints']

    # ──────────────────────────────────────────────────────────────────────
    # Public operations
    # ──────────────────────────────────────────────────────────────────────

    async def create_complaint(self, actor: ActorLike, payload: Dict[str, Any]) -> ActionResult:
        return await self._run("create", self._create, actor, payload)

    async def update_complaint(self, actor: ActorLike, complaint_id: str, payload: Dict[str, Any]) -> ActionResult:
        return await self._run("update", self._update, actor, complaint_id, payload)

    async def delete_complaint(self, actor: ActorLike, complaint_id: str) -> ActionResult:
        return await self._run("delete", self._delete, actor, complaint_id)

    async def list_complaints(self, actor: ActorLike) -> ActionResult:
        return await self._run("list", self._list, actor)

    async def get_complaint(self, actor: ActorLike, complaint_id: str) -> ActionResult:
        return await self._run("get", self._get, actor, complaint_id)

    async def get_complaint_history(self, actor: ActorLike, complaint_id: str) -> ActionResult:
        return await self._run("history", self._history, actor, complaint_id)

    # ──────────────────────────────────────────────────────────────────────
    # Operation bodies (may raise ComplaintError)
    # ──────────────────────────────────────────────────────────────────────

    async def _create(self, actor: Actor, payload: Dict[str, Any]) -> ActionResult:
        data = self._validate(ComplaintCreate, payload)
        self._require(actor, Operation.CREATE)
        creator_email = self._require_email(actor)

        submitted = data.model_dump(mode="json")
        explicit = {k: submitted[k] for k in data.model_fields_set}
        _, rejected = permission_service.filter_writable(actor.role, explicit, creating=True)
        if rejected:
            logger.info(f"[COMPLAINTS] Dropping fields {rejected} not settable by role '{actor.role.value}' on create")
        values = {k: v for k, v in submitted.items() if k not in rejected}

        complaint_id = await self.id_service.generate_complaint_id()
        if await self.id_service.verify_id_uniqueness(complaint_id) is False:
            logger.warning(f"[COMPLAINTS] Complaint ID {complaint_id} is already in use (concurrent create?)")

        now = self.clock()
        if not values.get("complaintDate"):
            values["complaintDate"] = now[:10]
        complaint = Complaint(
            **values,
            complaintId=complaint_id,
            createdBy=creator_email,
            history=append_entry([], creator_email, now, HistoryAction.CREATED),
        )

        success, doc_id, error = await self.db.create_document(self.collection, complaint.to_document())
        if not success:
            raise StorageFailure(f"Failed to create complaint: {error}")

        complaint.id = doc_id
        logger.info(f"[COMPLAINTS] {creator_email} created complaint {complaint_id} ({doc_id})")
        return ActionResult.ok("Complaint created successfully", id=doc_id, data=complaint.model_dump(mode="json"))

    async def _update(self, actor: Actor, complaint_id: str, payload: Dict[str, Any]) -> ActionResult:
        existing = await self._load(complaint_id)
        changes = self._validate(ComplaintUpdate, payload).changes()
        self._require(actor, Operation.UPDATE)

        spoofed = payload.get("createdBy") if isinstance(payload, dict) else None
        if spoofed is not None and spoofed != existing.createdBy:
            logger.warning(
                f"[COMPLAINTS] Ignoring createdBy '{spoofed}' from {actor.email} on {complaint_id}; keeping '{existing.createdBy}'"
            )

        accepted, rejected = permission_service.filter_writable(actor.role, changes)
        if rejected:
            logger.info(f"[COMPLAINTS] Dropping fields {rejected} not writable by role '{actor.role.value}'")

        if "complaintStatus" in accepted:
            self.status_validator.assert_can_transition(existing.complaintStatus.value, accepted["complaintStatus"])

        merged = existing.model_dump(mode="json")
        merged.update(accepted)
        merged["createdBy"] = existing.createdBy
        merged["complaintId"] = existing.complaintId
        merged["history"] = append_entry(existing.history, actor.email or actor.uid or "Unknown", self.clock())
        updated = Complaint(**merged)

        success, error = await self.db.update_document(self.collection, complaint_id, updated.to_document())
        if not success:
            if error == "Document not found":
                raise NotFound(f"Complaint {complaint_id} not found")
            raise StorageFailure(f"Failed to update complaint: {error}")

        logger.info(f"[COMPLAINTS] {actor.email} updated complaint {updated.complaintId} fields={sorted(accepted)}")
        return ActionResult.ok("Complaint updated successfully", id=complaint_id, data=updated.model_dump(mode="json"))

    async def _delete(self, actor: Actor, complaint_id: str) -> ActionResult:
        self._require(actor, Operation.DELETE)
        existing = await self._load(complaint_id)

        success, error = await self.db.delete_document(self.collection, complaint_id)
        if not success:
            if error == "Document not found":
                raise NotFound(f"Complaint {complaint_id} not found")
            raise StorageFailure(f"Failed to delete complaint: {error}")

        logger.info(f"[COMPLAINTS] {actor.email} deleted complaint {existing.complaintId} ({complaint_id})")
        return ActionResult.ok("Complaint deleted successfully", id=complaint_id)

    async def _list(self, actor: Actor) -> ActionResult:
        self._require(actor, Operation.VIEW)

        if permission_service.can_see_all(actor.role):
            filters = None
        elif actor.email:
            filters = [("createdBy", "==", actor.email)]
        else:
            return ActionResult.ok("Found 0 complaints", data=[])

        success, documents, error = await self.db.query_documents(self.collection, filters)
        if not success:
            raise StorageFailure(f"Failed to list complaints: {error}")

        complaints = [Complaint.from_document(doc) for doc in documents]
        complaints.sort(key=lambda c: c.complaintId)
        return ActionResult.ok(
            f"Found {len(complaints)} complaints",
            data=[c.model_dump(mode="json") for c in complaints],
        )

    async def _get(self, actor: Actor, complaint_id: str) -> ActionResult:
        complaint = await self._load_visible(actor, complaint_id)
        return ActionResult.ok("Complaint found", id=complaint_id, data=complaint.model_dump(mode="json"))

    async def _history(self, actor: Actor, complaint_id: str) -> ActionResult:
        complaint = await self._load_visible(actor, complaint_id)
        return ActionResult.ok(
            f"{len(complaint.history)} history entries",
            id=complaint_id,
            data=[entry.model_dump(mode="json") for entry in complaint.history],
        )

    # ──────────────────────────────────────────────────────────────────────
    # Helpers
    # ──────────────────────────────────────────────────────────────────────

    async def _run(self, operation: str, handler, actor: ActorLike, *args) -> ActionResult:
        try:
            actor = actor if isinstance(actor, Actor) else Actor(**actor)
            return await handler(actor, *args)
        except PermissionDenied as e:
            logger.warning(f"[COMPLAINTS] {operation} denied: {e.message}")
            return ActionResult.fail(e.kind, e.message)
        except ValidationError as e:
            logger.info(f"[COMPLAINTS] {operation} rejected: {e.message} {e.errors}")
            return ActionResult.fail(e.kind, e.message, e.errors)
        except NotFound as e:
            return ActionResult.fail(e.kind, e.message)
        except StorageFailure as e:
            logger.error(f"[COMPLAINTS] {operation} storage failure: {e.message}")
            return ActionResult.fail(e.kind, e.message)
        except ComplaintError as e:
            logger.error(f"[COMPLAINTS] {operation} failed: {e.message}")
            return ActionResult.fail(e.kind, e.message)
        except PydanticValidationError as e:
            # Malformed actor or stored document
            logger.error(f"[COMPLAINTS] {operation} failed on invalid data: {e}")
            return ActionResult.fail(ValidationError.kind, "Invalid data", _field_errors(e))
        except Exception as e:
            logger.error(f"[COMPLAINTS] Unexpected error during {operation}: {e}")
            return ActionResult.fail(StorageFailure.kind, f"Failed to {operation} complaint: {e}")

    @staticmethod
    def _validate(model, payload: Dict[str, Any]):
        if not isinstance(payload, dict):
            raise ValidationError("Payload must be an object")
        try:
            return model.model_validate(payload)
        except PydanticValidationError as e:
            raise ValidationError("Validation failed", errors=_field_errors(e))

    @staticmethod
    def _require(actor: Actor, operation: Operation) -> None:
        decision = permission_service.check(actor.role, operation)
        if not decision.allowed:
            raise PermissionDenied(decision.reason)

    @staticmethod
    def _require_email(actor: Actor) -> str:
        try:
            _email_adapter.validate_python(actor.email or "")
        except PydanticValidationError:
            raise ValidationError(
                "You must be logged in with a valid email to submit a complaint",
                errors=[{"field": "createdBy", "message": "Valid email required"}],
            )
        return actor.email

    async def _load(self, complaint_id: str) -> Complaint:
        success, document, error = await self.db.get_document(self.collection, complaint_id)
        if not success or not document:
            if error and error != "Document not found":
                raise StorageFailure(f"Failed to load complaint: {error}")
            raise NotFound(f"Complaint {complaint_id} not found")
        return Complaint.from_document(document)

    async def _load_visible(self, actor: Actor, complaint_id: str) -> Complaint:
        complaint = await self._load(complaint_id)
        if not permission_service.can_view_complaint(actor.role, actor.email, complaint.createdBy):
            # Hide the existence of complaints the actor cannot see
            raise NotFound(f"Complaint {complaint_id} not found")
        return complaint
