"""
RedLife Backend - Firebase Identity Verifier
============================================

What:  Verifies Firebase ID tokens and extracts the caller's email claim.
How:   Firebase Admin SDK `auth.verify_id_token` checks signature, audience
       and expiry against Google's public keys. The SDK call is blocking
       (it may fetch certificates over HTTP), so it runs in a worker thread.
Who:   Built once in the lifespan; used by `security.get_verified_email`.

Failure mapping:
    token rejected / expired / revoked / malformed  → AuthenticationError (401)
    token valid but carries no email claim          → AuthenticationError (401)
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import firebase_admin
from firebase_admin import auth, credentials

from redlife.config import Settings
from redlife.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

FIREBASE_APP_NAME = "redlife"


class FirebaseIdentityVerifier:
    """Token → verified email, backed by a named Firebase Admin app."""

    def __init__(self, app: firebase_admin.App):
        self._app = app

    @property
    def app(self) -> firebase_admin.App:
        return self._app

    async def verify(self, token: str) -> str:
        """
        Verify an ID token and return its email claim.

        Raises:
            AuthenticationError: verification failed or no email in the token
        """
        try:
            claims: Dict[str, Any] = await asyncio.to_thread(
                auth.verify_id_token, token, app=self._app
            )
        except Exception as e:
            # The SDK raises ValueError for malformed input and several
            # FirebaseError subclasses for expired/revoked/invalid tokens.
            logger.warning("Token verification failed: %s", type(e).__name__)
            raise AuthenticationError(context={"reason": type(e).__name__})

        email = claims.get("email")
        if not email:
            logger.warning("Verified token for uid=%s has no email claim", claims.get("uid"))
            raise AuthenticationError(message="Token has no email claim")
        return email


def create_identity_verifier(settings: Settings) -> Optional[FirebaseIdentityVerifier]:
    """
    Initialize the Firebase Admin app from FB_SERVICE_ACCOUNT_KEY.

    Returns None when the key is missing or unusable; authenticated routes
    then answer with a GatewayError instead of the server refusing to start.
    """
    try:
        info = settings.firebase_credentials_info()
    except ValueError as e:
        logger.error("Firebase identity verifier disabled: %s", str(e))
        return None

    try:
        app = firebase_admin.get_app(FIREBASE_APP_NAME)
    except ValueError:
        try:
            app = firebase_admin.initialize_app(
                credentials.Certificate(info), name=FIREBASE_APP_NAME
            )
        except ValueError as e:
            logger.error("Firebase identity verifier disabled: invalid service account: %s", str(e))
            return None
    logger.info("Firebase identity verifier ready (project=%s)", info.get("project_id"))
    return FirebaseIdentityVerifier(app)


def close_identity_verifier(verifier: Optional[FirebaseIdentityVerifier]) -> None:
    if verifier is not None:
        firebase_admin.delete_app(verifier.app)
