from firebase_admin import auth
from typing import Optional
import logging

from ..core.firebase_init import initialize_firebase, is_firebase_available

logger = logging.getLogger(__name__)

class FirebaseAuth:
    def _ensure_initialized(self):
        if not is_firebase_available():
            if not initialize_firebase():
                raise Exception("Firebase initialization failed - Auth not available")

    async def verify_token(self, token: str) -> Optional[dict]:
        """Verify a Firebase ID token and return its decoded claims"""
        try:
            self._ensure_initialized()
            decoded_token = auth.verify_id_token(token)
            return decoded_token
        except Exception as e:
            logger.warning(f"[Auth] Token verification failed: {e}")
            return None

firebase_auth = FirebaseAuth()
