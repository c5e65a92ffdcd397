"""
FastAPI dependencies: database client, auth, AI and quota services.

Without Firebase credentials the app runs in local dev mode on LocalStore
with in-memory dev tokens.
"""

import hashlib
import os
import time
from typing import Dict, Optional

from fastapi import Depends, Header

from toyrotator.config import Settings, get_settings
from toyrotator.crud.user import UserCRUD
from toyrotator.services.ai.openai_service import OpenAIService
from toyrotator.services.ai.toy_advisor import ToyAdvisor
from toyrotator.services.quota import QuotaService
from toyrotator.utils.exceptions import UnauthenticatedError
from toyrotator.utils.logger import get_logger

logger = get_logger(__name__)

# Global Instances
_db_client = None
_openai_service = None
_is_local_mode = None


def _check_local_mode() -> bool:
    """Determine if we should use local mode (no Firebase)."""
    global _is_local_mode
    if _is_local_mode is not None:
        return _is_local_mode

    settings = get_settings()
    cred_path = settings.firebase_credentials_path

    if not cred_path or not os.path.exists(cred_path):
        logger.info("Firebase credentials not found - running in LOCAL DEV mode")
        _is_local_mode = True
    else:
        _is_local_mode = False

    return _is_local_mode


def get_db_client(settings: Settings = Depends(get_settings)):
    """Get database client - Firestore in prod, LocalStore in dev."""
    global _db_client
    if _db_client is not None:
        return _db_client

    if _check_local_mode():
        from toyrotator.services.local_store import get_local_store
        data_dir = settings.local_data_dir or None
        _db_client = get_local_store(data_dir)
        logger.info("Using LocalStore database (%s)", data_dir or "in-memory")
    else:
        from firebase_admin import firestore

        from toyrotator.services.firebase.auth_service import FirebaseAuthService
        FirebaseAuthService.initialize(settings.firebase_credentials_path)
        _db_client = firestore.client()
        logger.info("Using Firestore database")

    return _db_client


def get_openai_service(settings: Settings = Depends(get_settings)) -> Optional[OpenAIService]:
    """Get the OpenAI chat service, or None when no API key is configured."""
    global _openai_service
    if _openai_service is not None:
        return _openai_service

    if not settings.openai_api_key:
        logger.debug("No OpenAI API key, AI functions are unavailable")
        return None

    _openai_service = OpenAIService(
        api_key=settings.openai_api_key,
        model=settings.openai_model,
        vision_model=settings.openai_vision_model,
        timeout=settings.openai_timeout,
    )
    return _openai_service


def get_toy_advisor(
    chat: Optional[OpenAIService] = Depends(get_openai_service),
    settings: Settings = Depends(get_settings),
) -> Optional[ToyAdvisor]:
    if chat is None:
        return None
    return ToyAdvisor(chat, default_display_count=settings.default_display_count)


def get_quota_service(
    db_client=Depends(get_db_client),
    settings: Settings = Depends(get_settings),
) -> QuotaService:
    return QuotaService(db_client, settings)


# Local Auth Store (for dev mode without Firebase)
_local_users: Dict[str, dict] = {}
_local_tokens: Dict[str, str] = {}  # token -> uid


def local_issue_token(email: str, display_name: Optional[str] = None) -> dict:
    """Sign in locally; the uid is stable per email."""
    email = email.lower()
    uid = hashlib.sha256(email.encode()).hexdigest()[:28]
    _local_users[uid] = {"uid": uid, "email": email, "name": display_name}
    token = hashlib.sha256(f"{uid}:{time.time_ns()}".encode()).hexdigest()
    _local_tokens[token] = uid
    return {"uid": uid, "token": token}


def local_verify_token(token: str) -> Optional[dict]:
    uid = _local_tokens.get(token)
    if uid and uid in _local_users:
        return _local_users[uid]
    return None


def reset_local_auth() -> None:
    _local_users.clear()
    _local_tokens.clear()


async def get_current_user(
    authorization: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Optional[str]]:
    """
    Get current user from auth token.

    Returns:
        ``{"uid", "email", "name"}`` of the caller

    Raises:
        UnauthenticatedError: If the header is missing or the token is invalid
    """
    if not authorization:
        raise UnauthenticatedError("Authorization header missing")

    if not authorization.startswith("Bearer "):
        raise UnauthenticatedError("Invalid authorization header format")

    token = authorization[len("Bearer "):].strip()

    if _check_local_mode():
        user = local_verify_token(token)
        if not user:
            raise UnauthenticatedError("Invalid or expired token")
        return {"uid": user["uid"], "email": user.get("email"), "name": user.get("name")}

    from toyrotator.services.firebase.auth_service import FirebaseAuthService
    FirebaseAuthService.initialize(settings.firebase_credentials_path)
    decoded = FirebaseAuthService.verify_token(token)
    return {"uid": decoded["uid"], "email": decoded.get("email"), "name": decoded.get("name")}


def get_household_id(
    current_user: dict = Depends(get_current_user),
    db_client=Depends(get_db_client),
) -> str:
    """Household the caller works in: profile householdId, else the caller's uid."""
    return UserCRUD(db_client).resolve_household_id(current_user["uid"])
