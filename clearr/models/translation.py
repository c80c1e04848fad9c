from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Index, Text, func

from clearr.core.db import Base
from clearr.models.base import JSONType, SoftDeleteMixin, utcnow


class Translation(SoftDeleteMixin, Base):
    __tablename__ = "translations"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    # Mode label at creation time; mode_id is the canonical reference
    mode = Column(String(50), nullable=False)
    mode_id = Column(Integer, ForeignKey("modes.id"), nullable=True)
    translation_input = Column(Text, nullable=False)
    # Append-only across regenerations
    translation_output = Column(JSONType, nullable=False, default=list)
    selected_index = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow, nullable=False)

    __table_args__ = (
        Index("ix_translations_user_active_created", "user_id", "is_active", "created_at"),
    )
