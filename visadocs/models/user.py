"""
User ORM Model
==============

Student and admin accounts. Besides credentials and the registration profile,
each user carries the analysis quota counters:

- ``analysis_count``: analyses consumed so far
- ``max_analyses``: cap set by an administrator

``analysis_count <= max_analyses`` is kept by the conditional increment in
``visadocs.services.quota_service``, never by a read-then-write in the routes.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from visadocs.models.base import Base, utcnow


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    phone_number: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    study_destination: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    start_date: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    city: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    country: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    counselling_mode: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    funding_source: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    study_level: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    agree_to_terms: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    allow_contact: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    receive_updates: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    role: Mapped[str] = mapped_column(String(20), nullable=False, default="user")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")

    analysis_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    max_analyses: Mapped[int] = mapped_column(Integer, nullable=False, default=3)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @property
    def is_active(self) -> bool:
        return self.status == "active"
