from datetime import datetime, timezone

from sqlalchemy import JSON, select
from sqlalchemy.dialects.postgresql import JSONB

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SoftDeleteMixin:
    """Rows are never removed; ``is_active`` marks the live ones."""

    @classmethod
    def active(cls):
        return select(cls).where(cls.is_active.is_(True))
