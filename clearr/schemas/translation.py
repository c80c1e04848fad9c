"""
Translation schemas for API requests/responses
"""
from pydantic import Field
from datetime import datetime
from typing import List, Optional

from clearr.schemas.base import CamelModel


class TranslationCreate(CamelModel):
    """Either ``modeId`` or the legacy ``mode`` name may pick the mode; neither means the default."""
    translation_input: str
    mode_id: Optional[int] = None
    mode: Optional[str] = None


class SelectedVersionUpdate(CamelModel):
    selected_index: int = Field(..., ge=0)


class TranslationRead(CamelModel):
    id: int
    user_id: int
    mode: str
    mode_id: Optional[int] = None
    translation_input: str
    translation_output: List[str]
    selected_index: int = 0
    is_active: bool
    created_at: datetime
    updated_at: datetime


class TranslationResult(CamelModel):
    translation: TranslationRead
    translation_output: List[str]


class RegenerationResult(CamelModel):
    translation: TranslationRead
    new_output: List[str]
