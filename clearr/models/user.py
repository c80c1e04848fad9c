from sqlalchemy.orm import relationship
from sqlalchemy import Column, String, Integer, Boolean, DateTime, func

from clearr.core.db import Base
from clearr.models.base import JSONType, SoftDeleteMixin, utcnow


class User(SoftDeleteMixin, Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    phone_number = Column(String(20), unique=True, nullable=False, index=True)
    full_name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=True)
    push_token = Column(String(512), nullable=True)
    notification_enabled = Column(Boolean, nullable=False, default=True)
    preferred_mode = Column(String(20), nullable=False, default="personal")
    # Up to MAX_STYLE_EXAMPLES snippets, oldest first
    context_training = Column(JSONType, nullable=False, default=list)
    # Append-only; never pruned on translation delete
    translation_ids = Column(JSONType, nullable=False, default=list)
    is_verified = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    is_deleted = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow, nullable=False)

    modes = relationship("Mode", back_populates="user")

    def __repr__(self) -> str:  # pragma: no cover
        return f"<User id={self.id} phone={self.phone_number}>"
