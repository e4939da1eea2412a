import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from taskboard.models.base import Base, TimestampMixin, UUIDMixin
from taskboard.models.enums import TaskPriority, TaskStatus


class Task(Base, UUIDMixin, TimestampMixin):
    __tablename__ = "tasks"
    # Not unique: order values inside a column may repeat after moves
    __table_args__ = (
        Index("idx_tasks_project_status_order", "project_id", "status", "order"),
    )

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=TaskStatus.TODO.value)
    priority: Mapped[str] = mapped_column(String(20), nullable=False, default=TaskPriority.MEDIUM.value)
    deadline: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    project_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    creator_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    assignee_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True, index=True
    )

    # Relationships
    project: Mapped["Project"] = relationship("Project", back_populates="tasks")  # noqa: F821
    creator: Mapped["Profile"] = relationship("Profile", foreign_keys=[creator_id])  # noqa: F821
    assignee: Mapped["Profile | None"] = relationship(  # noqa: F821
        "Profile", back_populates="assigned_tasks", foreign_keys=[assignee_id]
    )

    def __repr__(self) -> str:
        return f"<Task {self.title} status={self.status} order={self.order}>"
