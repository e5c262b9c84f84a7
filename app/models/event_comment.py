"""EventComment model — append-only discussion on a suggestion."""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.models.event_suggestion import _utcnow


class EventComment(Base):
    __tablename__ = "event_comments"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    suggestion_id: Mapped[int] = mapped_column(
        ForeignKey("event_suggestions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    commenter_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL")
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    suggestion: Mapped["EventSuggestion"] = relationship(  # noqa: F821
        "EventSuggestion", back_populates="comments"
    )
