from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from .firebase_auth import firebase_auth
from ..database.factory import get_database
from ..models.user import Actor
from ..services.complaint_service import ComplaintService
from ..services.user_service import UserService
import logging

security = HTTPBearer()
logger = logging.getLogger(__name__)

async def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(security)):
    """
    Verify Firebase authentication token and return the decoded claims.
    Raises 401 if token is invalid.
    """
    try:
        token = credentials.credentials
        user_data = await firebase_auth.verify_token(token)

        if not user_data:
            logger.warning("[Auth] Token verification failed - invalid token")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid authentication credentials",
                headers={"WWW-Authenticate": "Bearer"},
            )

        logger.info(f"[Auth] ✅ Authenticated user: {user_data.get('email')}")

        return user_data
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[Auth] ❌ Authentication error: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Authentication failed: {str(e)}",
            headers={"WWW-Authenticate": "Bearer"},
        )

def get_user_service() -> UserService:
    return UserService(get_database())

async def get_current_actor(
    current_user: dict = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
) -> Actor:
    """Authenticated user with the role looked up from their profile (viewer if none)"""
    actor = await users.resolve_actor(current_user)
    logger.info(f"[Auth] Acting as {actor.email} with role: {actor.role.value}")
    return actor

_complaint_service = None

def get_complaint_service() -> ComplaintService:
    global _complaint_service
    if _complaint_service is None:
        _complaint_service = ComplaintService(get_database())
    return _complaint_service
