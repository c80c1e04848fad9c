"""Message translation endpoints."""

from fastapi import APIRouter, Depends, Query

from clearr.core.dependencies import (
    Identity,
    get_current_identity,
    get_translation_service,
    require_path_user,
)
from clearr.schemas.base import Envelope, respond
from clearr.schemas.translation import (
    RegenerationResult,
    SelectedVersionUpdate,
    TranslationCreate,
    TranslationRead,
    TranslationResult,
)
from clearr.services.mode_service import ModeById, ModeByLegacyName
from clearr.services.translation_service import (
    DEFAULT_HISTORY_LIMIT,
    MAX_HISTORY_LIMIT,
    TranslationService,
)

router = APIRouter(prefix="/api/v1/translations", tags=["translations"])


@router.post("", response_model=Envelope[TranslationResult])
async def create_translation(
    payload: TranslationCreate,
    identity: Identity = Depends(get_current_identity),
    translations: TranslationService = Depends(get_translation_service),
):
    mode_ref = None
    if payload.mode_id is not None:
        mode_ref = ModeById(payload.mode_id)
    elif payload.mode:
        mode_ref = ModeByLegacyName(payload.mode)

    translation, outputs = await translations.translate(
        identity.user_id, payload.translation_input, mode_ref
    )
    result = TranslationResult(
        translation=TranslationRead.model_validate(translation),
        translation_output=outputs,
    )
    return respond("Translation completed successfully", result)


@router.get("/history/{user_id}", response_model=Envelope[list[TranslationRead]])
async def translation_history(
    limit: int = Query(DEFAULT_HISTORY_LIMIT, ge=1, le=MAX_HISTORY_LIMIT),
    skip: int = Query(0, ge=0),
    identity: Identity = Depends(require_path_user),
    translations: TranslationService = Depends(get_translation_service),
):
    items = translations.get_history(identity.user_id, limit=limit, skip=skip)
    return respond(
        "Translation history retrieved",
        [TranslationRead.model_validate(t) for t in items],
    )


@router.get("/{translation_id}", response_model=Envelope[TranslationRead])
async def get_translation(
    translation_id: int,
    identity: Identity = Depends(get_current_identity),
    translations: TranslationService = Depends(get_translation_service),
):
    translation = translations.get(identity.user_id, translation_id)
    return respond("Translation retrieved successfully", TranslationRead.model_validate(translation))


@router.post("/{translation_id}/regenerate", response_model=Envelope[RegenerationResult])
async def regenerate_translation(
    translation_id: int,
    identity: Identity = Depends(get_current_identity),
    translations: TranslationService = Depends(get_translation_service),
):
    translation, new_output = await translations.regenerate(identity.user_id, translation_id)
    result = RegenerationResult(
        translation=TranslationRead.model_validate(translation),
        new_output=new_output,
    )
    return respond("Translation regenerated successfully", result)


@router.patch("/{translation_id}/selected-version", response_model=Envelope[TranslationRead])
async def select_translation_version(
    translation_id: int,
    payload: SelectedVersionUpdate,
    identity: Identity = Depends(get_current_identity),
    translations: TranslationService = Depends(get_translation_service),
):
    translation = translations.select_version(identity.user_id, translation_id, payload.selected_index)
    return respond("Selected version updated", TranslationRead.model_validate(translation))


@router.delete("/{translation_id}", response_model=Envelope)
async def delete_translation(
    translation_id: int,
    identity: Identity = Depends(get_current_identity),
    translations: TranslationService = Depends(get_translation_service),
):
    translations.delete(identity.user_id, translation_id)
    return respond("Translation deleted successfully")
