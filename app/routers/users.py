from fastapi import APIRouter, Depends
from ..auth.dependencies import get_current_actor
from ..models.user import Actor

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me")
async def get_me(actor: Actor = Depends(get_current_actor)):
    """The authenticated user as the complaint service sees them"""
    return {"success": True, "data": actor.model_dump(mode="json")}
