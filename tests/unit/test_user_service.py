"""Unit tests for the user profile store."""
import pytest

from clearr.core.exceptions import NotFoundError, ValidationError
from clearr.services.mode_service import ModeById


def test_style_examples_keep_newest_ten(user_service, make_user):
    user = make_user()
    for i in range(10):
        user_service.add_style_example(user.id, f"example {i}")

    updated = user_service.add_style_example(user.id, "  newest  ")

    assert len(updated.context_training) == 10
    assert updated.context_training[0] == "example 1"
    assert updated.context_training[-1] == "newest"
    assert "example 0" not in updated.context_training


def test_blank_style_example_rejected(user_service, make_user):
    user = make_user()
    with pytest.raises(ValidationError):
        user_service.add_style_example(user.id, "   ")


def test_update_profile_validates_and_normalizes(user_service, make_user):
    user = make_user()
    updated = user_service.update_profile(
        user.id,
        full_name="  Jamie Doe ",
        email="Jamie@Example.COM",
        preferred_mode="Casual",
        notification_enabled=False,
    )
    assert updated.full_name == "Jamie Doe"
    assert updated.email == "jamie@example.com"
    assert updated.preferred_mode == "casual"
    assert updated.notification_enabled is False


@pytest.mark.parametrize(
    "fields",
    [{"full_name": "J"}, {"email": "not-an-email"}, {"preferred_mode": "angry"}],
)
def test_update_profile_rejects_invalid_fields(user_service, make_user, fields):
    user = make_user()
    with pytest.raises(ValidationError):
        user_service.update_profile(user.id, **fields)


def test_duplicate_email_rejected(user_service, make_user):
    first = make_user()
    second = make_user()
    user_service.update_profile(first.id, email="taken@example.com")
    with pytest.raises(ValidationError):
        user_service.update_profile(second.id, email="taken@example.com")


def test_complete_onboarding_sets_preferences(user_service, make_user):
    user = make_user()
    updated = user_service.complete_onboarding(user.id, preferred_mode="professional", notification_enabled=False)
    assert updated.preferred_mode == "professional"
    assert updated.notification_enabled is False


@pytest.mark.asyncio
async def test_stats_count_active_translations_by_mode(user_service, translation_service, mode_service, make_user):
    user = make_user()
    mode_service.create(user.id, "personal", "Close relationships", is_default=True)
    work = mode_service.create(user.id, "Work", "Workplace tone").mode
    first, _ = await translation_service.translate(user.id, "one")
    await translation_service.translate(user.id, "two")
    await translation_service.translate(user.id, "three", ModeById(work.id))
    translation_service.delete(user.id, first.id)

    stats = user_service.get_stats(user.id)
    assert stats["total_translations"] == 2
    assert stats["translations_by_mode"] == {"personal": 1, "Work": 1}
    assert stats["joined_date"] is not None


def test_deactivate_hides_user(user_service, make_user):
    user = make_user()
    user_service.deactivate(user.id, reason="testing")
    with pytest.raises(NotFoundError):
        user_service.get_profile(user.id)
    with pytest.raises(NotFoundError):
        user_service.deactivate(user.id)
