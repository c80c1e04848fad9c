"""Looks up the custom instruction attached to a mode."""
from typing import Optional

from clearr.models.mode import ModePrompt


def active_prompt_query(mode_id: int):
    # Only one row should be active; newest wins if history left more
    return (
        ModePrompt.active()
        .where(ModePrompt.mode_id == mode_id)
        .order_by(ModePrompt.created_at.desc(), ModePrompt.id.desc())
        .limit(1)
    )


class PromptResolver:
    def __init__(self, session_factory):
        self._session_factory = session_factory

    def resolve(self, mode_id: int) -> Optional[ModePrompt]:
        """Return the mode's active prompt row, or None when it has no custom instruction."""
        with self._session_factory() as session:
            return session.execute(active_prompt_query(mode_id)).scalar_one_or_none()
