"""User profile store."""
import logging
from typing import Any, Dict, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from clearr.core.db import db_session
from clearr.core.exceptions import NotFoundError, ValidationError
from clearr.core.validation import validate_email, validate_preferred_mode, validate_text
from clearr.models.translation import Translation
from clearr.models.user import User

logger = logging.getLogger(__name__)

FULL_NAME_MAX = 100
STYLE_EXAMPLE_MAX = 500


class UserService:
    def __init__(self, session_factory, max_style_examples: int = 10):
        self._session_factory = session_factory
        self.max_style_examples = max_style_examples

    def _get_active(self, session, user_id: int, lock: bool = False) -> User:
        stmt = User.active().where(User.id == user_id)
        if lock:
            stmt = stmt.with_for_update()
        user = session.execute(stmt).scalar_one_or_none()
        if user is None:
            raise NotFoundError("User not found")
        return user

    def get_profile(self, user_id: int) -> User:
        with self._session_factory() as session:
            return self._get_active(session, user_id)

    def update_profile(
        self,
        user_id: int,
        full_name: Optional[str] = None,
        email: Optional[str] = None,
        preferred_mode: Optional[str] = None,
        notification_enabled: Optional[bool] = None,
        push_token: Optional[str] = None,
    ) -> User:
        """
        Update the supplied profile fields; ``None`` leaves a field unchanged.

        Raises:
            NotFoundError: User missing or deactivated
            ValidationError: Bad name, email, or mode, or email already taken
        """
        changes: Dict[str, Any] = {}
        if full_name is not None:
            changes["full_name"] = validate_text(full_name, "Full name", 2, FULL_NAME_MAX)
        if email is not None:
            changes["email"] = validate_email(email)
        if preferred_mode is not None:
            changes["preferred_mode"] = validate_preferred_mode(preferred_mode)
        if notification_enabled is not None:
            changes["notification_enabled"] = notification_enabled
        if push_token:
            changes["push_token"] = push_token.strip()

        try:
            with db_session(self._session_factory) as session:
                user = self._get_active(session, user_id, lock=True)
                for key, value in changes.items():
                    setattr(user, key, value)
                session.flush()
        except IntegrityError as e:
            raise ValidationError("Email is already in use") from e

        logger.info("Profile updated", extra={"user_id": user_id, "fields": sorted(changes)})
        return user

    def complete_onboarding(
        self,
        user_id: int,
        preferred_mode: str = "personal",
        notification_enabled: bool = True,
    ) -> User:
        return self.update_profile(
            user_id,
            preferred_mode=preferred_mode,
            notification_enabled=notification_enabled,
        )

    def add_style_example(self, user_id: int, text: str) -> User:
        """
        Append a style example, keeping only the newest ``max_style_examples``.
        """
        example = validate_text(text, "Style example", 1, STYLE_EXAMPLE_MAX)

        with db_session(self._session_factory) as session:
            user = self._get_active(session, user_id, lock=True)
            examples = list(user.context_training or []) + [example]
            # New list object so the JSON column is flagged dirty
            user.context_training = examples[-self.max_style_examples:]

        logger.info(
            "Style example added",
            extra={"user_id": user_id, "style_examples": len(user.context_training)},
        )
        return user

    def get_stats(self, user_id: int) -> Dict[str, Any]:
        with self._session_factory() as session:
            user = self._get_active(session, user_id)
            rows = session.execute(
                select(Translation.mode, func.count(Translation.id))
                .where(Translation.user_id == user_id, Translation.is_active.is_(True))
                .group_by(Translation.mode)
            ).all()

        by_mode = {mode: count for mode, count in rows}
        return {
            "total_translations": sum(by_mode.values()),
            "translations_by_mode": by_mode,
            "joined_date": user.created_at,
        }

    def deactivate(self, user_id: int, reason: Optional[str] = None) -> None:
        with db_session(self._session_factory) as session:
            user = self._get_active(session, user_id, lock=True)
            user.is_active = False
            user.is_deleted = True

        logger.info("Account deactivated", extra={"user_id": user_id, "reason": reason})
