from typing import Any, Dict, Optional
import logging

from ..database.collections import COLLECTIONS
from ..models.user import Actor, UserProfile, UserRole

logger = logging.getLogger(__name__)


class UserService:
    """Resolves authenticated identities into actors using the users collection."""

    def __init__(self, db=None):
        if db is None:
            from ..database.database_service import database_service
            db = database_service
        self.db = db

    async def get_user_profile(self, uid: str) -> Optional[UserProfile]:
        """Get the profile stored at users/{uid}, or None when it doesn't exist"""
        success, user_data, error = await self.db.get_document(COLLECTIONS['users'], uid)

        if not success or not user_data:
            if error and error != "Document not found":
                logger.error(f"[Users] Failed to load profile {uid}: {error}")
            return None

        return UserProfile(**user_data)

    async def resolve_actor(self, identity: Dict[str, Any]) -> Actor:
        """
        Build the acting user from a verified token payload ({uid, email, ...}).
        The role comes from the profile document; no profile means viewer.
        """
        uid = identity.get("uid") or identity.get("user_id") or identity.get("sub")
        profile = await self.get_user_profile(uid) if uid else None

        role = profile.role if profile else UserRole.VIEWER
        email = identity.get("email") or (profile.email if profile else None)

        if not profile:
            logger.info(f"[Users] No profile for {uid}, defaulting to viewer")

        return Actor(uid=uid, email=email, role=role)

