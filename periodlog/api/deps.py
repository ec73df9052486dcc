"""Shared dependencies: store access, JWT auth and permission checks."""
from datetime import datetime, timedelta, timezone
from typing import Annotated, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt

from periodlog.config import settings
from periodlog.db import get_database
from periodlog.models.user import User
from periodlog.rbac import Action, has_permission
from periodlog.services.store import TableStore
from periodlog.services.users import get_user

security = HTTPBearer(auto_error=False)


def get_store() -> TableStore:
    return TableStore(get_database())


def create_access_token(subject: str, role: str) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.jwt_access_token_expire_minutes)
    to_encode = {"sub": subject, "role": role, "exp": expire, "type": "access"}
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def create_refresh_token(subject: str) -> str:
    expire = datetime.now(timezone.utc) + timedelta(days=settings.jwt_refresh_token_expire_days)
    to_encode = {"sub": subject, "exp": expire, "type": "refresh"}
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str, expected_type: str) -> str:
    """Return the token subject, or raise 401."""
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    if payload.get("type") != expected_type:
        raise HTTPException(status_code=401, detail="Invalid token type")
    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=401, detail="Invalid token")
    return user_id


async def get_current_user(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    store: Annotated[TableStore, Depends(get_store)],
) -> User:
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    user_id = decode_token(credentials.credentials, "access")
    user = await get_user(store, user_id)
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    return user


def require_permission(action: Action):
    async def checker(user: Annotated[User, Depends(get_current_user)]):
        if not has_permission(user.role, action):
            raise HTTPException(status_code=403, detail=f"Missing {action} permission")
        return user

    return checker


# Type aliases for route injection
Store = Annotated[TableStore, Depends(get_store)]
CurrentUser = Annotated[User, Depends(get_current_user)]
