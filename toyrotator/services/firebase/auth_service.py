"""Firebase Admin initialization and ID token verification."""

import os
from typing import Any, Dict, Optional

import firebase_admin
from firebase_admin import auth, credentials

from toyrotator.utils.exceptions import UnauthenticatedError
from toyrotator.utils.logger import get_logger

logger = get_logger(__name__)


class FirebaseAuthService:
    """Service for Firebase Admin authentication."""

    def __init__(self, credentials_path: Optional[str] = None):
        """Initialize Firebase Admin SDK.

        Args:
            credentials_path: Path to a service account JSON file. When it is
                missing, application default credentials are used.
        """
        self.initialize(credentials_path)

    @staticmethod
    def initialize(credentials_path: Optional[str] = None) -> None:
        """Initialize the default Firebase app once per process."""
        if firebase_admin._apps:
            return

        if credentials_path and os.path.exists(credentials_path):
            cred = credentials.Certificate(credentials_path)
            firebase_admin.initialize_app(cred)
            logger.info(f"Firebase initialized with credentials: {credentials_path}")
        else:
            firebase_admin.initialize_app()
            logger.info("Firebase initialized with default credentials")

    @staticmethod
    def verify_token(token: str) -> Dict[str, Any]:
        """Verify a Firebase ID token.

        Args:
            token: Firebase ID token

        Returns:
            Decoded token claims (``uid``, ``email``, ``name``, ...)

        Raises:
            UnauthenticatedError: If the token is missing, invalid, expired or revoked
        """
        if not token:
            raise UnauthenticatedError("Token cannot be empty")
        try:
            decoded = auth.verify_id_token(token)
        except (ValueError, auth.InvalidIdTokenError, auth.ExpiredIdTokenError,
                auth.RevokedIdTokenError, auth.CertificateFetchError) as e:
            logger.warning(f"Firebase token verification failed: {e}")
            raise UnauthenticatedError("Invalid or expired token")
        logger.debug(f"Token verified for user: {decoded.get('uid')}")
        return decoded
