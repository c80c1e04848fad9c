"""
Translation orchestrator and store.

A translation request resolves the mode, checks the input, composes the
prompt, calls the generation gateway and only then persists the result, so
a failed generation leaves no row behind.
"""
import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from clearr.core.db import db_session
from clearr.core.exceptions import (
    ContentBlockedError,
    NoDefaultModeError,
    NotFoundError,
    ValidationError,
)
from clearr.models.mode import Mode
from clearr.models.translation import Translation
from clearr.models.user import User
from clearr.services.generation_gateway import BaseGenerationGateway
from clearr.services.mode_service import ModeRef, ModeService
from clearr.services.prompt_composer import compose
from clearr.services.prompt_resolver import PromptResolver
from clearr.services.safety_filter import should_block

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 20
MAX_HISTORY_LIMIT = 100


class TranslationService:
    def __init__(
        self,
        session_factory,
        mode_service: ModeService,
        prompt_resolver: PromptResolver,
        gateway: BaseGenerationGateway,
        max_input_length: int = 10000,
    ):
        self._session_factory = session_factory
        self.mode_service = mode_service
        self.prompt_resolver = prompt_resolver
        self.gateway = gateway
        self.max_input_length = max_input_length

    def _active_user(self, user_id: int) -> User:
        with self._session_factory() as session:
            user = session.execute(
                User.active().where(User.id == user_id)
            ).scalar_one_or_none()
        if user is None:
            raise NotFoundError("User not found or inactive")
        return user

    def _owned_translation(self, session: Session, user_id: int, translation_id: int, lock: bool = False) -> Translation:
        stmt = Translation.active().where(
            Translation.id == translation_id,
            Translation.user_id == user_id,
        )
        if lock:
            stmt = stmt.with_for_update()
        translation = session.execute(stmt).scalar_one_or_none()
        if translation is None:
            raise NotFoundError("Translation not found")
        return translation

    async def _generate(self, input_text: str, mode: Mode, style_examples: List[str]) -> List[str]:
        prompt_row = self.prompt_resolver.resolve(mode.id)
        prompt_text = compose(
            input_text,
            mode.name,
            mode.description,
            custom_instruction=prompt_row.prompt if prompt_row else None,
            style_examples=style_examples,
        )
        return await self.gateway.generate(prompt_text)

    async def translate(
        self,
        user_id: int,
        input_text: str,
        mode_ref: Optional[ModeRef] = None,
    ) -> Tuple[Translation, List[str]]:
        """
        Rewrite ``input_text`` with the requested (or default) mode and store it.

        Args:
            user_id: Requesting user
            input_text: Message to transform
            mode_ref: Explicit mode; the user's default mode when omitted

        Returns:
            The stored translation and the freshly generated outputs

        Raises:
            ValidationError: Blank or oversized input
            NotFoundError: User or mode missing
            ForbiddenError: Mode owned by another user
            NoDefaultModeError: No mode given and the user has no default
            ContentBlockedError: Input rejected by the safety filter
            GenerationError: The model call failed
        """
        if not input_text or not input_text.strip():
            raise ValidationError("Translation input is required")
        if len(input_text) > self.max_input_length:
            raise ValidationError(
                f"Translation input cannot exceed {self.max_input_length} characters"
            )

        user = self._active_user(user_id)

        if mode_ref is None:
            mode = self.mode_service.get_default(user_id)
            if mode is None:
                raise NoDefaultModeError()
        else:
            mode = self.mode_service.resolve_ref(user_id, mode_ref)

        if should_block(input_text):
            logger.warning("Translation input blocked by safety filter", extra={"user_id": user_id})
            raise ContentBlockedError()

        outputs = await self._generate(input_text, mode, list(user.context_training or []))

        with db_session(self._session_factory) as session:
            owner = session.execute(
                User.active().where(User.id == user_id).with_for_update()
            ).scalar_one_or_none()
            if owner is None:
                raise NotFoundError("User not found or inactive")

            translation = Translation(
                user_id=user_id,
                mode=mode.name,
                mode_id=mode.id,
                translation_input=input_text,
                translation_output=list(outputs),
                selected_index=0,
                is_active=True,
            )
            session.add(translation)
            session.flush()
            owner.translation_ids = list(owner.translation_ids or []) + [translation.id]

        logger.info(
            "Translation created",
            extra={"user_id": user_id, "translation_id": translation.id, "mode_id": mode.id},
        )
        return translation, outputs

    async def regenerate(self, user_id: int, translation_id: int) -> Tuple[Translation, List[str]]:
        """
        Generate another candidate for an existing translation and append it.

        The user's current default mode and style examples are used, not the
        mode the translation was first created with.
        """
        with self._session_factory() as session:
            original = self._owned_translation(session, user_id, translation_id)
        user = self._active_user(user_id)

        mode = self.mode_service.get_default(user_id)
        if mode is None:
            raise NoDefaultModeError("No default mode found")

        new_output = await self._generate(
            original.translation_input, mode, list(user.context_training or [])
        )

        with db_session(self._session_factory) as session:
            translation = self._owned_translation(session, user_id, translation_id, lock=True)
            translation.translation_output = list(translation.translation_output or []) + list(new_output)

        logger.info(
            "Translation regenerated",
            extra={
                "user_id": user_id,
                "translation_id": translation_id,
                "outputs": len(translation.translation_output),
            },
        )
        return translation, new_output

    def get_history(self, user_id: int, limit: int = DEFAULT_HISTORY_LIMIT, skip: int = 0) -> List[Translation]:
        """Active translations, newest first."""
        limit = max(1, min(limit, MAX_HISTORY_LIMIT))
        skip = max(0, skip)
        with self._session_factory() as session:
            return list(
                session.execute(
                    Translation.active()
                    .where(Translation.user_id == user_id)
                    .order_by(Translation.created_at.desc(), Translation.id.desc())
                    .offset(skip)
                    .limit(limit)
                ).scalars()
            )

    def get(self, user_id: int, translation_id: int) -> Translation:
        with self._session_factory() as session:
            return self._owned_translation(session, user_id, translation_id)

    def delete(self, user_id: int, translation_id: int) -> None:
        # user.translation_ids keeps the id; history reads go through is_active
        with db_session(self._session_factory) as session:
            translation = self._owned_translation(session, user_id, translation_id, lock=True)
            translation.is_active = False

        logger.info("Translation deleted", extra={"user_id": user_id, "translation_id": translation_id})

    def select_version(self, user_id: int, translation_id: int, selected_index: int) -> Translation:
        """Record which output the user picked."""
        with db_session(self._session_factory) as session:
            translation = self._owned_translation(session, user_id, translation_id, lock=True)
            outputs = translation.translation_output or []
            if not 0 <= selected_index < len(outputs):
                raise ValidationError(
                    f"Selected index must be between 0 and {len(outputs) - 1}"
                )
            translation.selected_index = selected_index

        return translation
