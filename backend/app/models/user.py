"""
User Model
Stores user credentials and profile information.
"""

import uuid

from sqlalchemy import Column, String, Text, Boolean, DateTime, Index, Uuid
from sqlalchemy.orm import relationship

from app.database import Base, JSONDocument
from app.utils.dates import utcnow


class User(Base):
    """
    User account. Email and username are stored lowercase and unique.
    """
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=False, index=True)
    username = Column(String(100), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)

    # Profile
    full_name = Column(String(255), nullable=True)
    profile_picture_url = Column(Text, nullable=True)

    is_active = Column(Boolean, default=True, nullable=False)
    email_verified = Column(Boolean, default=False, nullable=False)
    role = Column(String(50), default="user", nullable=False)
    preferences = Column(JSONDocument, default=dict, nullable=False)
    last_login_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    scans = relationship(
        "ScanHistory",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    refresh_tokens = relationship(
        "RefreshToken",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("ix_users_is_active_email_verified", "is_active", "email_verified"),
    )

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}')>"
