from sqlalchemy.orm import relationship
from sqlalchemy import Column, String, Integer, Boolean, DateTime, ForeignKey, Index, Text, func, text

from clearr.core.db import Base
from clearr.models.base import SoftDeleteMixin, utcnow

MODE_NAME_MAX = 50
MODE_DESCRIPTION_MAX = 200
MODE_PROMPT_MAX = 2000


class Mode(SoftDeleteMixin, Base):
    __tablename__ = "modes"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(MODE_NAME_MAX), nullable=False)
    description = Column(String(MODE_DESCRIPTION_MAX), nullable=False)
    is_default = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow, nullable=False)

    user = relationship("User", back_populates="modes")
    prompts = relationship("ModePrompt", back_populates="mode")

    __table_args__ = (
        Index("ix_modes_user_active", "user_id", "is_active"),
        # At most one live default per user
        Index(
            "uq_modes_user_default",
            "user_id",
            unique=True,
            postgresql_where=text("is_default AND is_active"),
            sqlite_where=text("is_default AND is_active"),
        ),
    )

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Mode id={self.id} user={self.user_id} name={self.name!r} default={self.is_default}>"


class ModePrompt(SoftDeleteMixin, Base):
    __tablename__ = "mode_prompts"

    id = Column(Integer, primary_key=True)
    mode_id = Column(Integer, ForeignKey("modes.id"), nullable=False, index=True)
    prompt = Column(Text, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    mode = relationship("Mode", back_populates="prompts")
