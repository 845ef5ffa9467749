"""
Task model and the task dependency join table.
"""
from datetime import date, datetime
from typing import Optional
from sqlalchemy import String, Date, DateTime, Text, Boolean, ForeignKey, JSON, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
import uuid

from planner.database import Base, utc_now


class Task(Base):
    __tablename__ = "tasks"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    project_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # No foreign key: deleting an area leaves its tasks pointing at the old id
    area_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True, index=True)
    responsibility_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    assignee_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    deadline: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), default="pending"
    )  # 'pending', 'in_progress', 'blocked', 'completed'
    support_resources: Mapped[Optional[list]] = mapped_column(JSON, nullable=True)
    template_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    is_recurring: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    recurrence: Mapped[Optional[dict]] = mapped_column(
        JSON, nullable=True
    )  # {frequency, interval, endDate}
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    # Relationships
    dependencies: Mapped[list["TaskDependency"]] = relationship(
        "TaskDependency",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def depends_on(self) -> list[uuid.UUID]:
        return [d.depends_on_task_id for d in self.dependencies]


class TaskDependency(Base):
    __tablename__ = "task_dependencies"

    task_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("tasks.id", ondelete="CASCADE"),
        primary_key=True,
    )
    # Stored as given; existence and cycles are not checked
    depends_on_task_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
