"""
User model for people who lead areas, own tasks and attend meetings.
"""
from datetime import datetime
from typing import Optional
from sqlalchemy import String, DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column
import uuid

from planner.database import Base, utc_now


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    initials: Mapped[str] = mapped_column(String(10), nullable=False)
    avatar: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    handle: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    wallet: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )
