"""
Mode store: per-user communication modes and their instruction prompts.

Every mutation that touches the default flag runs in one transaction that
first locks the owning user row, so concurrent requests for the same user
serialize and the "one active default per user" rule holds.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from sqlalchemy import func, update
from sqlalchemy.orm import Session

from clearr.core.db import db_session
from clearr.core.exceptions import ForbiddenError, NotFoundError
from clearr.core.validation import validate_text
from clearr.models.mode import Mode, ModePrompt, MODE_NAME_MAX, MODE_DESCRIPTION_MAX, MODE_PROMPT_MAX
from clearr.models.user import User
from clearr.services.prompt_resolver import active_prompt_query

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModeById:
    mode_id: int


@dataclass(frozen=True)
class ModeByLegacyName:
    """Pre-mode clients send one of the old fixed mode names."""
    name: str


ModeRef = Union[ModeById, ModeByLegacyName]


@dataclass
class ModeWithPrompt:
    mode: Mode
    prompt: Optional[ModePrompt] = None


def _lock_active_user(session: Session, user_id: int) -> User:
    user = session.execute(
        User.active().where(User.id == user_id).with_for_update()
    ).scalar_one_or_none()
    if user is None:
        raise NotFoundError("User not found")
    return user


def _owned_active_mode(session: Session, user_id: int, mode_id: int) -> Mode:
    mode = session.execute(
        Mode.active().where(Mode.id == mode_id, Mode.user_id == user_id)
    ).scalar_one_or_none()
    if mode is None:
        raise NotFoundError("Mode not found")
    return mode


def _clear_defaults(session: Session, user_id: int, keep_mode_id: Optional[int] = None) -> None:
    stmt = update(Mode).where(
        Mode.user_id == user_id,
        Mode.is_active.is_(True),
        Mode.is_default.is_(True),
    )
    if keep_mode_id is not None:
        stmt = stmt.where(Mode.id != keep_mode_id)
    session.execute(stmt.values(is_default=False))


def _active_prompt(session: Session, mode_id: int) -> Optional[ModePrompt]:
    return session.execute(active_prompt_query(mode_id)).scalar_one_or_none()


def _deactivate_prompts(session: Session, mode_id: int) -> None:
    session.execute(
        update(ModePrompt)
        .where(ModePrompt.mode_id == mode_id, ModePrompt.is_active.is_(True))
        .values(is_active=False)
    )


class ModeService:
    def __init__(self, session_factory):
        self._session_factory = session_factory

    def create(
        self,
        user_id: int,
        name: str,
        description: str,
        is_default: bool = False,
        prompt: Optional[str] = None,
    ) -> ModeWithPrompt:
        """
        Create a mode for an active user.

        Args:
            user_id: Owner
            name: Mode name, 2-50 characters after trimming
            description: Mode description, 5-200 characters after trimming
            is_default: Make this the user's default, clearing any other
            prompt: Optional custom instruction text

        Returns:
            The created mode and its prompt row (if a prompt was given)
        """
        name = validate_text(name, "Mode name", 2, MODE_NAME_MAX)
        description = validate_text(description, "Mode description", 5, MODE_DESCRIPTION_MAX)
        prompt_text = validate_text(prompt, "Mode prompt", 0, MODE_PROMPT_MAX)

        with db_session(self._session_factory) as session:
            _lock_active_user(session, user_id)
            if is_default:
                _clear_defaults(session, user_id)

            mode = Mode(
                user_id=user_id,
                name=name,
                description=description,
                is_default=bool(is_default),
                is_active=True,
            )
            session.add(mode)
            session.flush()

            prompt_row = None
            if prompt_text:
                prompt_row = ModePrompt(mode_id=mode.id, prompt=prompt_text, is_active=True)
                session.add(prompt_row)
                session.flush()

        logger.info(
            "Mode created",
            extra={"user_id": user_id, "mode_id": mode.id, "is_default": mode.is_default},
        )
        return ModeWithPrompt(mode, prompt_row)

    def update(self, user_id: int, mode_id: int, fields: Dict[str, Any]) -> ModeWithPrompt:
        """
        Apply a partial update. Recognised keys: name, description,
        is_default, prompt. Keys absent from ``fields`` are left alone; a
        blank ``prompt`` removes the custom instruction.
        """
        changes: Dict[str, Any] = {}
        if fields.get("name") is not None:
            changes["name"] = validate_text(fields["name"], "Mode name", 2, MODE_NAME_MAX)
        if fields.get("description") is not None:
            changes["description"] = validate_text(
                fields["description"], "Mode description", 5, MODE_DESCRIPTION_MAX
            )
        if fields.get("is_default") is not None:
            changes["is_default"] = bool(fields["is_default"])
        replace_prompt = "prompt" in fields
        prompt_text = validate_text(fields.get("prompt"), "Mode prompt", 0, MODE_PROMPT_MAX)

        with db_session(self._session_factory) as session:
            _lock_active_user(session, user_id)
            mode = _owned_active_mode(session, user_id, mode_id)

            if changes.get("is_default"):
                _clear_defaults(session, user_id, keep_mode_id=mode.id)
            for key, value in changes.items():
                setattr(mode, key, value)

            if replace_prompt:
                _deactivate_prompts(session, mode.id)
                if prompt_text:
                    session.add(ModePrompt(mode_id=mode.id, prompt=prompt_text, is_active=True))
            session.flush()
            prompt_row = _active_prompt(session, mode.id)

        logger.info("Mode updated", extra={"user_id": user_id, "mode_id": mode_id, "fields": sorted(changes)})
        return ModeWithPrompt(mode, prompt_row)

    def delete(self, user_id: int, mode_id: int) -> Optional[Mode]:
        """
        Soft-delete a mode and its prompts.

        When the deleted mode was the default and other active modes remain,
        the oldest of them becomes the new default.

        Returns:
            The newly promoted default mode, if any
        """
        promoted = None
        with db_session(self._session_factory) as session:
            _lock_active_user(session, user_id)
            mode = _owned_active_mode(session, user_id, mode_id)
            was_default = mode.is_default

            mode.is_active = False
            mode.is_default = False
            session.flush()

            if was_default:
                promoted = session.execute(
                    Mode.active()
                    .where(Mode.user_id == user_id)
                    .order_by(Mode.created_at.asc(), Mode.id.asc())
                    .limit(1)
                ).scalar_one_or_none()
                if promoted is not None:
                    promoted.is_default = True

            _deactivate_prompts(session, mode_id)

        logger.info(
            "Mode deleted",
            extra={
                "user_id": user_id,
                "mode_id": mode_id,
                "promoted_mode_id": promoted.id if promoted else None,
            },
        )
        return promoted

    def set_default(self, user_id: int, mode_id: int) -> ModeWithPrompt:
        """Make ``mode_id`` the user's only default. Idempotent."""
        with db_session(self._session_factory) as session:
            _lock_active_user(session, user_id)
            mode = _owned_active_mode(session, user_id, mode_id)
            _clear_defaults(session, user_id, keep_mode_id=mode.id)
            mode.is_default = True
            session.flush()
            prompt_row = _active_prompt(session, mode.id)

        logger.info("Default mode changed", extra={"user_id": user_id, "mode_id": mode_id})
        return ModeWithPrompt(mode, prompt_row)

    def list_active(self, user_id: int) -> List[ModeWithPrompt]:
        """Active modes, default first, then newest first."""
        with self._session_factory() as session:
            modes = session.execute(
                Mode.active()
                .where(Mode.user_id == user_id)
                .order_by(Mode.is_default.desc(), Mode.created_at.desc(), Mode.id.desc())
            ).scalars().all()
            return [ModeWithPrompt(mode, _active_prompt(session, mode.id)) for mode in modes]

    def get_default(self, user_id: int) -> Optional[Mode]:
        with self._session_factory() as session:
            return session.execute(
                Mode.active().where(Mode.user_id == user_id, Mode.is_default.is_(True))
            ).scalar_one_or_none()

    def resolve_ref(self, user_id: int, ref: ModeRef) -> Mode:
        """
        Turn a request's mode reference into the mode to use.

        Raises:
            NotFoundError: No matching active mode
            ForbiddenError: The mode id belongs to another user
        """
        with self._session_factory() as session:
            if isinstance(ref, ModeById):
                mode = session.execute(
                    Mode.active().where(Mode.id == ref.mode_id)
                ).scalar_one_or_none()
                if mode is None:
                    raise NotFoundError("Mode not found")
                if mode.user_id != user_id:
                    raise ForbiddenError("Access denied to this mode")
                return mode

            mode = session.execute(
                Mode.active()
                .where(
                    Mode.user_id == user_id,
                    func.lower(Mode.name) == ref.name.strip().lower(),
                )
                .order_by(Mode.is_default.desc(), Mode.created_at.asc(), Mode.id.asc())
                .limit(1)
            ).scalar_one_or_none()
            if mode is None:
                raise NotFoundError("Mode not found")
            return mode
