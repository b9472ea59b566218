"""
Declarative base shared by every ORM model.

JSON columns are stored as JSONB on PostgreSQL and plain JSON elsewhere
(SQLite in local runs and tests).
"""

from datetime import datetime, timezone

from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase

JSONType = JSON().with_variant(JSONB(), "postgresql")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass
