"""
Firebase Admin bootstrap shared by the Firestore collaborator and token auth.

Initialization is lazy and never fatal: when no credentials can be found the
app keeps serving (the memory backend needs none) and /health reports why.
Credentials are taken from FIREBASE_SERVICE_ACCOUNT_PATH, falling back to
Google application default credentials when GOOGLE_APPLICATION_CREDENTIALS
is set.
"""
import os
import logging
from typing import Optional, Tuple

import firebase_admin
from firebase_admin import credentials
from google.auth.exceptions import DefaultCredentialsError

from .config import settings

logger = logging.getLogger(__name__)

_state = {"source": None, "error": None}


def _resolve_credentials() -> Tuple[Optional[credentials.Base], Optional[str]]:
    path = settings.FIREBASE_SERVICE_ACCOUNT_PATH
    if path and os.path.exists(path):
        return credentials.Certificate(path), "service_account"
    if os.getenv("GOOGLE_APPLICATION_CREDENTIALS"):
        return credentials.ApplicationDefault(), "application_default"
    return None, None


def _default_app() -> Optional[firebase_admin.App]:
    try:
        return firebase_admin.get_app()
    except ValueError:
        return None


def initialize_firebase() -> bool:
    """Create the default Firebase app once; False when it cannot be created."""
    if _default_app() is not None:
        return True

    try:
        cred, source = _resolve_credentials()
    except (ValueError, OSError) as e:
        _state["error"] = f"unreadable service account file: {e}"
        logger.error(f"[Firebase] ❌ {_state['error']}")
        return False

    if cred is None:
        _state["error"] = f"no credentials (looked for {settings.FIREBASE_SERVICE_ACCOUNT_PATH})"
        logger.warning(f"[Firebase] Not initialized: {_state['error']}")
        return False

    try:
        firebase_admin.initialize_app(cred, {"projectId": settings.FIREBASE_PROJECT_ID})
    except (ValueError, OSError, DefaultCredentialsError) as e:
        _state["error"] = str(e)
        logger.error(f"[Firebase] ❌ Initialization with {source} credentials failed: {e}")
        return False

    _state.update(source=source, error=None)
    logger.info(f"[Firebase] ✅ Initialized project {settings.FIREBASE_PROJECT_ID} using {source} credentials")
    return True


def is_firebase_available() -> bool:
    return _default_app() is not None


def get_firebase_status() -> dict:
    """Firebase state for / and /health."""
    return {
        "available": is_firebase_available(),
        "project_id": settings.FIREBASE_PROJECT_ID,
        "credential_source": _state["source"],
        "error": _state["error"],
    }
