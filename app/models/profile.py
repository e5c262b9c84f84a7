"""Profile model — alumni details, contact channels and privacy switches."""

import enum
import json
from datetime import datetime
from typing import List, Optional

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    VERIFIED_ALUMNI = "verified_alumni"
    ALUMNI = "alumni"
    GUEST = "guest"


class ContactMethod(str, enum.Enum):
    EMAIL = "email"
    LINKEDIN = "linkedin"
    PHONE = "phone"
    WHATSAPP = "whatsapp"


class Profile(Base):
    __tablename__ = "profiles"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    full_name: Mapped[str] = mapped_column(String(200), nullable=False)
    role: Mapped[UserRole] = mapped_column(Enum(UserRole), default=UserRole.ALUMNI)
    email_verified: Mapped[bool] = mapped_column(Boolean, default=False)

    # ── Profile information ──
    graduation_year: Mapped[Optional[int]] = mapped_column(Integer)
    department: Mapped[Optional[str]] = mapped_column(String(150))
    location: Mapped[Optional[str]] = mapped_column(String(200))
    industry: Mapped[Optional[str]] = mapped_column(String(150))
    company: Mapped[Optional[str]] = mapped_column(String(200))
    job_title: Mapped[Optional[str]] = mapped_column(String(200))
    linkedin_url: Mapped[Optional[str]] = mapped_column(String(500))
    bio: Mapped[Optional[str]] = mapped_column(Text)
    profile_picture_url: Mapped[Optional[str]] = mapped_column(String(500))
    skills_json: Mapped[Optional[str]] = mapped_column(Text)  # JSON list of strings

    # ── Contact information ──
    contact_email: Mapped[Optional[str]] = mapped_column(String(255))
    contact_linkedin: Mapped[Optional[str]] = mapped_column(String(500))
    contact_phone: Mapped[Optional[str]] = mapped_column(String(50))
    contact_whatsapp: Mapped[Optional[str]] = mapped_column(String(50))
    primary_contact_method: Mapped[ContactMethod] = mapped_column(
        Enum(ContactMethod), default=ContactMethod.EMAIL
    )

    # ── Privacy settings ──
    show_email: Mapped[bool] = mapped_column(Boolean, default=False)
    show_linkedin: Mapped[bool] = mapped_column(Boolean, default=True)
    show_phone: Mapped[bool] = mapped_column(Boolean, default=False)
    show_whatsapp: Mapped[bool] = mapped_column(Boolean, default=False)
    pref_anonymous: Mapped[bool] = mapped_column(Boolean, default=False)

    # ── Verification ──
    verified: Mapped[bool] = mapped_column(Boolean, default=False)

    # ── Timestamps ──
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    user: Mapped["User"] = relationship("User", back_populates="profile")  # noqa: F821

    @property
    def skills(self) -> List[str]:
        if not self.skills_json:
            return []
        try:
            return json.loads(self.skills_json)
        except ValueError:
            return []

    @skills.setter
    def skills(self, values: Optional[List[str]]) -> None:
        cleaned = [v.strip() for v in (values or []) if v and v.strip()]
        self.skills_json = json.dumps(cleaned) if cleaned else None
