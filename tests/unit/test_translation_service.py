"""Unit tests for the translation orchestrator and store."""
import pytest
from sqlalchemy import func, select

from clearr.core.exceptions import (
    ContentBlockedError,
    ForbiddenError,
    GenerationError,
    NoDefaultModeError,
    NotFoundError,
    ValidationError,
)
from clearr.models.translation import Translation
from clearr.models.user import User
from clearr.services.mode_service import ModeById, ModeByLegacyName


def _translation_count(session_factory):
    with session_factory() as session:
        return session.execute(select(func.count()).select_from(Translation)).scalar_one()


@pytest.mark.asyncio
async def test_translate_with_default_mode(translation_service, mode_service, make_user, gateway, session_factory):
    user = make_user()
    mode = mode_service.create(user.id, "personal", "Close relationships", is_default=True).mode

    translation, outputs = await translation_service.translate(user.id, "this is bullshit")

    assert outputs == ["Constructive rewrite #1"]
    assert translation.mode == "personal"
    assert translation.mode_id == mode.id
    assert translation.translation_output == outputs
    assert "PERSONAL MODE GUIDELINES" in gateway.prompts[0]
    with session_factory() as session:
        owner = session.get(User, user.id)
    assert owner.translation_ids == [translation.id]


@pytest.mark.asyncio
async def test_translate_without_any_mode_fails_before_generation(translation_service, make_user, gateway, session_factory):
    user = make_user()
    with pytest.raises(NoDefaultModeError):
        await translation_service.translate(user.id, "hello there")
    assert gateway.prompts == []
    assert _translation_count(session_factory) == 0


@pytest.mark.asyncio
async def test_translate_with_explicit_mode_and_custom_prompt(translation_service, mode_service, make_user, gateway):
    user = make_user(context_training=["cheers mate", "no worries"])
    mode_service.create(user.id, "Work", "Default work tone", is_default=True)
    custom = mode_service.create(user.id, "Coach", "Encouraging feedback", prompt="Praise first.").mode

    translation, _ = await translation_service.translate(user.id, "you messed up", ModeById(custom.id))

    assert translation.mode == "Coach"
    prompt = gateway.prompts[0]
    assert "Instructions: Praise first." in prompt
    assert prompt.startswith("User's communication style examples: cheers mate; no worries")


@pytest.mark.asyncio
async def test_translate_by_legacy_mode_name(translation_service, mode_service, make_user):
    user = make_user()
    mode = mode_service.create(user.id, "Casual", "Friends and social").mode
    translation, _ = await translation_service.translate(user.id, "that's stupid", ModeByLegacyName("casual"))
    assert translation.mode_id == mode.id


@pytest.mark.asyncio
async def test_translate_with_someone_elses_mode_is_forbidden(translation_service, mode_service, make_user):
    owner = make_user()
    intruder = make_user()
    mode_service.create(intruder.id, "Mine", "My own default", is_default=True)
    foreign = mode_service.create(owner.id, "Theirs", "Someone else's").mode

    with pytest.raises(ForbiddenError):
        await translation_service.translate(intruder.id, "hello", ModeById(foreign.id))


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["", "   ", "x" * 10001])
async def test_translate_rejects_bad_input(translation_service, make_user, text):
    user = make_user()
    with pytest.raises(ValidationError):
        await translation_service.translate(user.id, text)


@pytest.mark.asyncio
async def test_translate_for_inactive_user_is_not_found(translation_service, make_user):
    user = make_user(is_active=False)
    with pytest.raises(NotFoundError):
        await translation_service.translate(user.id, "hello")


@pytest.mark.asyncio
async def test_blocked_content_is_not_sent_or_stored(translation_service, mode_service, make_user, gateway, session_factory):
    user = make_user()
    mode_service.create(user.id, "personal", "Close relationships", is_default=True)

    with pytest.raises(ContentBlockedError):
        await translation_service.translate(user.id, "I want to kill myself")

    assert gateway.prompts == []
    assert _translation_count(session_factory) == 0


@pytest.mark.asyncio
async def test_generation_failure_persists_nothing(translation_service, mode_service, make_user, gateway, session_factory):
    user = make_user()
    mode_service.create(user.id, "personal", "Close relationships", is_default=True)
    gateway.fail = True

    with pytest.raises(GenerationError):
        await translation_service.translate(user.id, "you never call")

    assert _translation_count(session_factory) == 0


@pytest.mark.asyncio
async def test_regenerate_appends_outputs(translation_service, mode_service, make_user):
    user = make_user()
    mode_service.create(user.id, "personal", "Close relationships", is_default=True)
    translation, _ = await translation_service.translate(user.id, "you never call")
    before = list(translation.translation_output)

    updated, new_output = await translation_service.regenerate(user.id, translation.id)

    assert new_output == ["Constructive rewrite #2"]
    assert updated.translation_output[: len(before)] == before
    assert updated.translation_output == before + new_output
    assert translation_service.get(user.id, translation.id).translation_output == before + new_output


@pytest.mark.asyncio
async def test_regenerate_uses_current_default_mode(translation_service, mode_service, make_user, gateway):
    user = make_user()
    mode_service.create(user.id, "personal", "Close relationships", is_default=True)
    translation, _ = await translation_service.translate(user.id, "you never call")
    mode_service.create(user.id, "professional", "Workplace", is_default=True)

    await translation_service.regenerate(user.id, translation.id)

    assert "PROFESSIONAL MODE GUIDELINES" in gateway.prompts[-1]


@pytest.mark.asyncio
async def test_regenerate_without_default_mode(translation_service, mode_service, make_user):
    user = make_user()
    mode = mode_service.create(user.id, "personal", "Close relationships", is_default=True).mode
    translation, _ = await translation_service.translate(user.id, "you never call")
    mode_service.delete(user.id, mode.id)

    with pytest.raises(NoDefaultModeError):
        await translation_service.regenerate(user.id, translation.id)


@pytest.mark.asyncio
async def test_regenerate_other_users_translation_is_not_found(translation_service, mode_service, make_user):
    owner = make_user()
    other = make_user()
    mode_service.create(owner.id, "personal", "Close relationships", is_default=True)
    mode_service.create(other.id, "personal", "Close relationships", is_default=True)
    translation, _ = await translation_service.translate(owner.id, "you never call")

    with pytest.raises(NotFoundError):
        await translation_service.regenerate(other.id, translation.id)


@pytest.mark.asyncio
async def test_history_is_newest_first_and_paginated(translation_service, mode_service, make_user):
    user = make_user()
    mode_service.create(user.id, "personal", "Close relationships", is_default=True)
    ids = []
    for i in range(3):
        translation, _ = await translation_service.translate(user.id, f"message {i}")
        ids.append(translation.id)

    history = translation_service.get_history(user.id)
    assert [t.id for t in history] == list(reversed(ids))

    page = translation_service.get_history(user.id, limit=1, skip=1)
    assert [t.id for t in page] == [ids[1]]


@pytest.mark.asyncio
async def test_delete_hides_translation(translation_service, mode_service, make_user, session_factory):
    user = make_user()
    mode_service.create(user.id, "personal", "Close relationships", is_default=True)
    translation, _ = await translation_service.translate(user.id, "you never call")

    translation_service.delete(user.id, translation.id)

    assert translation.id not in [t.id for t in translation_service.get_history(user.id)]
    with pytest.raises(NotFoundError):
        translation_service.get(user.id, translation.id)
    with pytest.raises(NotFoundError):
        translation_service.delete(user.id, translation.id)
    with session_factory() as session:
        assert session.get(User, user.id).translation_ids == [translation.id]


@pytest.mark.asyncio
async def test_select_version_validates_index(translation_service, mode_service, make_user):
    user = make_user()
    mode_service.create(user.id, "personal", "Close relationships", is_default=True)
    translation, _ = await translation_service.translate(user.id, "you never call")
    await translation_service.regenerate(user.id, translation.id)

    assert translation_service.select_version(user.id, translation.id, 1).selected_index == 1
    with pytest.raises(ValidationError):
        translation_service.select_version(user.id, translation.id, 2)
