"""Local user profiles kept next to the identity-provider accounts."""
from __future__ import annotations

import logging
import uuid
from typing import Optional

from periodlog.exceptions import UserNotFoundError
from periodlog.models.user import User, UserCreate, UserProfileUpdate
from periodlog.services.mapping import user_from_row, user_to_row
from periodlog.services.store import USERS, TableStore

logger = logging.getLogger(__name__)


async def get_user(store: TableStore, user_id: str) -> Optional[User]:
    row = await store.select_one(USERS, eq={"id": user_id})
    return user_from_row(row) if row else None


async def get_user_by_email(store: TableStore, email: str) -> Optional[User]:
    """Case-insensitive lookup; emails typed at login rarely match stored case."""
    row = await store.select_one(USERS, ilike={"email": email.strip()})
    return user_from_row(row) if row else None


async def register_user_local(store: TableStore, data: UserCreate) -> User:
    """Create the profile row for a new account, or return the existing one."""
    existing = await get_user_by_email(store, data.email)
    if existing:
        if existing.role != data.role:
            logger.warning(
                f"Profile {existing.id} is {getattr(existing.role, 'value', existing.role)}, "
                f"ignoring requested role {data.role.value}"
            )
        return existing
    user = User(id=str(uuid.uuid4()), **data.model_dump())
    await store.insert(USERS, user_to_row(user))
    logger.info(f"Registered {user.role.value} profile {user.id}")
    return user


async def update_profile(store: TableStore, user: User, changes: UserProfileUpdate) -> User:
    """Apply the set fields of ``changes``; role and email stay as they are."""
    values = changes.model_dump(exclude_unset=True)
    if not values:
        return user
    updated = user.model_copy(update=values)
    row = user_to_row(updated)
    if not await store.update(USERS, user.id, {key: row[key] for key in values}):
        raise UserNotFoundError(user.id)
    return updated
