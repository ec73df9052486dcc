"""Profile view and edit for the signed-in user."""
from fastapi import APIRouter

from periodlog.api.deps import CurrentUser, Store
from periodlog.models.user import User, UserProfileUpdate
from periodlog.services.users import update_profile

router = APIRouter()


@router.get("/me", response_model=User)
async def get_profile(user: CurrentUser):
    return user


@router.patch("/me", response_model=User)
async def edit_profile(data: UserProfileUpdate, user: CurrentUser, store: Store):
    """Update subjects, classes, bio, experience, avatar or display name.

    Logs already submitted keep the author name they were created with.
    """
    return await update_profile(store, user, data)
