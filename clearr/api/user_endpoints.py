"""User profile endpoints."""

from fastapi import APIRouter, Depends

from clearr.core.dependencies import Identity, get_user_service, require_path_user
from clearr.schemas.base import Envelope, respond
from clearr.schemas.user import StyleExampleCreate, UserRead, UserStats
from clearr.services.user_service import UserService

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.get("/{user_id}", response_model=Envelope[UserRead])
async def get_user(
    identity: Identity = Depends(require_path_user),
    users: UserService = Depends(get_user_service),
):
    user = users.get_profile(identity.user_id)
    return respond("User retrieved successfully", UserRead.model_validate(user))


@router.get("/{user_id}/stats", response_model=Envelope[UserStats])
async def get_user_stats(
    identity: Identity = Depends(require_path_user),
    users: UserService = Depends(get_user_service),
):
    stats = UserStats(**users.get_stats(identity.user_id))
    return respond("User statistics retrieved successfully", stats)


@router.post("/{user_id}/style-examples", response_model=Envelope[UserRead])
async def add_style_example(
    payload: StyleExampleCreate,
    identity: Identity = Depends(require_path_user),
    users: UserService = Depends(get_user_service),
):
    user = users.add_style_example(identity.user_id, payload.example)
    return respond("Training context added successfully", UserRead.model_validate(user))
