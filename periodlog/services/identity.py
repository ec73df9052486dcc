"""Firebase Authentication: accounts, password sign-in, verification and reset emails.

Password flows go through the Identity Toolkit REST API (the Admin SDK cannot
check passwords); ID tokens from browser OAuth sign-in are verified and
refresh tokens revoked with firebase-admin.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

import firebase_admin
import httpx
from firebase_admin import auth, credentials
from firebase_admin.exceptions import FirebaseError
from pydantic import BaseModel

from periodlog.config import settings
from periodlog.exceptions import IdentityError

logger = logging.getLogger(__name__)

_firebase_app = None


class IdentityUser(BaseModel):
    uid: str
    email: str
    email_verified: bool = False
    display_name: Optional[str] = None
    photo_url: Optional[str] = None


class IdentitySession(IdentityUser):
    id_token: str
    refresh_token: Optional[str] = None


def _get_firebase_app():
    global _firebase_app
    if _firebase_app is not None:
        return _firebase_app

    try:
        if settings.firebase_credentials_path:
            cred = credentials.Certificate(settings.firebase_credentials_path)
            _firebase_app = firebase_admin.initialize_app(cred, name="periodlog")
        elif settings.firebase_project_id:
            _firebase_app = firebase_admin.initialize_app(
                options={"projectId": settings.firebase_project_id}, name="periodlog"
            )
        else:
            logger.warning("Neither FIREBASE_CREDENTIALS_PATH nor FIREBASE_PROJECT_ID set. ID-token sign-in is disabled.")
            return None
        return _firebase_app
    except Exception as e:
        logger.error(f"Failed to initialize Firebase app: {e}")
        return None


def parse_error_code(message: str) -> str:
    """``"WEAK_PASSWORD : Password should be ..."`` -> ``"WEAK_PASSWORD"``."""
    return (message or "").split(" ", 1)[0].split(":", 1)[0] or "UNKNOWN"


async def _post(endpoint: str, payload: dict[str, Any]) -> dict[str, Any]:
    if not settings.firebase_web_api_key:
        logger.warning("FIREBASE_WEB_API_KEY not set. Password sign-in is disabled.")
        raise IdentityError("CONFIGURATION_NOT_FOUND", "Identity provider is not configured")

    url = f"{settings.identity_toolkit_url}/accounts:{endpoint}"
    try:
        async with httpx.AsyncClient(timeout=15) as client:
            resp = await client.post(url, params={"key": settings.firebase_web_api_key}, json=payload)
    except httpx.HTTPError as e:
        logger.error(f"Identity Toolkit {endpoint} request failed: {e}")
        raise IdentityError("NETWORK_REQUEST_FAILED", str(e)) from e

    try:
        data = resp.json()
    except ValueError:
        data = {}
    if resp.status_code >= 400:
        message = (data.get("error") or {}).get("message") or f"HTTP_{resp.status_code}"
        logger.warning(f"Identity Toolkit {endpoint} error: {message}")
        raise IdentityError(parse_error_code(message), message)
    return data


async def sign_up(email: str, password: str) -> IdentitySession:
    data = await _post("signUp", {"email": email, "password": password, "returnSecureToken": True})
    return IdentitySession(
        uid=data["localId"],
        email=data.get("email", email),
        id_token=data["idToken"],
        refresh_token=data.get("refreshToken"),
    )


async def sign_in_with_password(email: str, password: str) -> IdentitySession:
    data = await _post("signInWithPassword", {"email": email, "password": password, "returnSecureToken": True})
    # signInWithPassword does not report verification status
    lookup = await _post("lookup", {"idToken": data["idToken"]})
    account = (lookup.get("users") or [{}])[0]
    return IdentitySession(
        uid=data["localId"],
        email=data.get("email", email),
        email_verified=bool(account.get("emailVerified", False)),
        display_name=data.get("displayName") or account.get("displayName"),
        photo_url=account.get("photoUrl"),
        id_token=data["idToken"],
        refresh_token=data.get("refreshToken"),
    )


async def send_email_verification(id_token: str) -> None:
    await _post("sendOobCode", {"requestType": "VERIFY_EMAIL", "idToken": id_token})


async def send_password_reset(email: str) -> None:
    await _post("sendOobCode", {"requestType": "PASSWORD_RESET", "email": email})


async def verify_id_token(id_token: str) -> IdentityUser:
    """Check a Firebase ID token issued to the browser (e.g. after Google sign-in)."""
    app = _get_firebase_app()
    if not app:
        raise IdentityError("CONFIGURATION_NOT_FOUND", "Identity provider is not configured")
    try:
        claims = await asyncio.to_thread(auth.verify_id_token, id_token, app)
    except (ValueError, auth.InvalidIdTokenError) as e:
        raise IdentityError("INVALID_ID_TOKEN", str(e)) from e
    except FirebaseError as e:
        logger.error(f"Firebase ID-token verification failed: {e}")
        raise IdentityError("NETWORK_REQUEST_FAILED", str(e)) from e

    return IdentityUser(
        uid=claims["uid"],
        email=claims.get("email") or "",
        email_verified=bool(claims.get("email_verified", False)),
        display_name=claims.get("name"),
        photo_url=claims.get("picture"),
    )


async def sign_out(email: str) -> None:
    """Revoke the account's provider refresh tokens; a no-op without a service account."""
    if not settings.firebase_credentials_path:
        return
    app = _get_firebase_app()
    if not app:
        return
    try:
        account = await asyncio.to_thread(auth.get_user_by_email, email, app)
        await asyncio.to_thread(auth.revoke_refresh_tokens, account.uid, app)
    except auth.UserNotFoundError:
        return
    except FirebaseError as e:
        logger.error(f"Failed to revoke refresh tokens for {email}: {e}")
        raise IdentityError("NETWORK_REQUEST_FAILED", str(e)) from e
