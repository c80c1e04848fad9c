"""
Mode schemas for API requests/responses
"""
from datetime import datetime
from typing import Optional

from clearr.schemas.base import CamelModel


class ModeCreate(CamelModel):
    """Schema for creating a new mode"""
    name: str
    description: str
    is_default: bool = False
    prompt: Optional[str] = None


class ModeUpdate(CamelModel):
    """Schema for updating a mode; unset fields are left untouched"""
    name: Optional[str] = None
    description: Optional[str] = None
    is_default: Optional[bool] = None
    prompt: Optional[str] = None


class SelectedModeUpdate(CamelModel):
    mode_id: int


class ModeRead(CamelModel):
    """Schema for mode read response"""
    id: int
    user_id: int
    name: str
    description: str
    is_default: bool
    is_active: bool
    prompt: Optional[str] = None
    created_at: datetime
    updated_at: datetime
