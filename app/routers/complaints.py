from fastapi import APIRouter, HTTPException, Depends, Path, status
from typing import Dict, Any
from ..auth.dependencies import get_current_actor, get_complaint_service
from ..core.exceptions import ERROR_STATUS_CODES
from ..models.action_result import ActionResult
from ..models.user import Actor
from ..services.complaint_service import ComplaintService
from ..services.permission_service import permissions_summary
import logging

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/complaints",
    tags=["Complaints"],
    responses={404: {"description": "Not found"}}
)


def _respond(result: ActionResult) -> Dict[str, Any]:
    """Return successful results as-is; map failures to their HTTP status"""
    if result.success:
        return result.model_dump()
    status_code = ERROR_STATUS_CODES.get(result.error_type, status.HTTP_500_INTERNAL_SERVER_ERROR)
    raise HTTPException(status_code=status_code, detail=result.model_dump())


@router.post("/", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED)
async def create_complaint(
    complaint_data: Dict[str, Any],
    actor: Actor = Depends(get_current_actor),
    service: ComplaintService = Depends(get_complaint_service),
):
    """Create a new complaint (every role except viewer)"""
    result = await service.create_complaint(actor, complaint_data)
    return _respond(result)


@router.get("/", response_model=Dict[str, Any])
async def list_complaints(
    actor: Actor = Depends(get_current_actor),
    service: ComplaintService = Depends(get_complaint_service),
):
    """
    List complaints visible to the current user:
    - admin / maintenance: every complaint
    - everyone else: only complaints they created
    """
    result = await service.list_complaints(actor)
    return _respond(result)


@router.get("/permissions", response_model=Dict[str, Any])
async def get_my_permissions(actor: Actor = Depends(get_current_actor)):
    """Operations and fields the current user may use, for clients to enable/disable controls"""
    return {"success": True, "data": permissions_summary(actor.role)}


@router.get("/{complaint_id}", response_model=Dict[str, Any])
async def get_complaint(
    complaint_id: str = Path(..., description="Complaint document ID"),
    actor: Actor = Depends(get_current_actor),
    service: ComplaintService = Depends(get_complaint_service),
):
    result = await service.get_complaint(actor, complaint_id)
    return _respond(result)


@router.get("/{complaint_id}/history", response_model=Dict[str, Any])
async def get_complaint_history(
    complaint_id: str,
    actor: Actor = Depends(get_current_actor),
    service: ComplaintService = Depends(get_complaint_service),
):
    """Audit trail of a complaint, oldest first"""
    result = await service.get_complaint_history(actor, complaint_id)
    return _respond(result)


@router.put("/{complaint_id}", response_model=Dict[str, Any])
async def update_complaint(
    complaint_id: str,
    update_data: Dict[str, Any],
    actor: Actor = Depends(get_current_actor),
    service: ComplaintService = Depends(get_complaint_service),
):
    """Update a complaint; fields the role may not change are ignored"""
    result = await service.update_complaint(actor, complaint_id, update_data)
    return _respond(result)


@router.delete("/{complaint_id}", response_model=Dict[str, Any])
async def delete_complaint(
    complaint_id: str,
    actor: Actor = Depends(get_current_actor),
    service: ComplaintService = Depends(get_complaint_service),
):
    """Delete a complaint (Admin only)"""
    result = await service.delete_complaint(actor, complaint_id)
    return _respond(result)
