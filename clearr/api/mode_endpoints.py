"""Mode management endpoints, scoped to the authenticated user."""

from fastapi import APIRouter, Depends

from clearr.core.dependencies import Identity, get_mode_service, require_path_user
from clearr.schemas.base import Envelope, respond
from clearr.schemas.mode import ModeCreate, ModeRead, ModeUpdate, SelectedModeUpdate
from clearr.services.mode_service import ModeService, ModeWithPrompt

router = APIRouter(prefix="/api/v1/users/{user_id}", tags=["modes"])


def _mode_read(item: ModeWithPrompt) -> ModeRead:
    read = ModeRead.model_validate(item.mode)
    read.prompt = item.prompt.prompt if item.prompt else None
    return read


@router.get("/modes", response_model=Envelope[list[ModeRead]])
async def list_modes(
    identity: Identity = Depends(require_path_user),
    modes: ModeService = Depends(get_mode_service),
):
    items = modes.list_active(identity.user_id)
    return respond("Modes retrieved successfully", [_mode_read(m) for m in items])


@router.post("/modes", response_model=Envelope[ModeRead], status_code=201)
async def create_mode(
    payload: ModeCreate,
    identity: Identity = Depends(require_path_user),
    modes: ModeService = Depends(get_mode_service),
):
    created = modes.create(
        identity.user_id,
        name=payload.name,
        description=payload.description,
        is_default=payload.is_default,
        prompt=payload.prompt,
    )
    return respond("Mode created successfully", _mode_read(created), status_code=201)


@router.put("/modes/{mode_id}", response_model=Envelope[ModeRead])
async def update_mode(
    mode_id: int,
    payload: ModeUpdate,
    identity: Identity = Depends(require_path_user),
    modes: ModeService = Depends(get_mode_service),
):
    updated = modes.update(identity.user_id, mode_id, payload.model_dump(exclude_unset=True))
    return respond("Mode updated successfully", _mode_read(updated))


@router.delete("/modes/{mode_id}", response_model=Envelope)
async def delete_mode(
    mode_id: int,
    identity: Identity = Depends(require_path_user),
    modes: ModeService = Depends(get_mode_service),
):
    modes.delete(identity.user_id, mode_id)
    return respond("Mode deleted successfully")


@router.put("/selected-mode", response_model=Envelope[ModeRead])
async def set_selected_mode(
    payload: SelectedModeUpdate,
    identity: Identity = Depends(require_path_user),
    modes: ModeService = Depends(get_mode_service),
):
    selected = modes.set_default(identity.user_id, payload.mode_id)
    return respond("Selected mode updated successfully", _mode_read(selected))
