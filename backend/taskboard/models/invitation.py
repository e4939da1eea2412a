import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from taskboard.models.base import Base, TimestampMixin, UUIDMixin
from taskboard.models.enums import InvitationStatus


class Invitation(Base, UUIDMixin, TimestampMixin):
    """Token-based invitation to join a project.

    Personal invitations carry the invitee's email and are consumed on
    acceptance. Public invitations have no email and stay PENDING, so the
    same link can be used by several people until it expires.
    """

    __tablename__ = "invitations"

    email: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    token: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=InvitationStatus.PENDING.value
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    is_public: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    sender_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    project_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Relationships
    project: Mapped["Project"] = relationship("Project", back_populates="invitations")  # noqa: F821
    sender: Mapped["Profile"] = relationship("Profile")  # noqa: F821

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at < now

    def __repr__(self) -> str:
        target = "public" if self.is_public else self.email
        return f"<Invitation {target} project={self.project_id} status={self.status}>"
