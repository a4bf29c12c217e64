"""
Refresh Token Model
Opaque refresh tokens grouped into families for rotation and reuse detection.
"""

import uuid

from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey, Index, Uuid
from sqlalchemy.dialects.postgresql import INET
from sqlalchemy.orm import relationship

from app.database import Base, JSONDocument
from app.utils.dates import utcnow


class RefreshToken(Base):
    """
    One issued refresh token.

    A family is every token derived by rotation from one login. A token is
    marked used exactly once, when it is exchanged for its successor; logout
    and theft detection mark the remaining tokens of the family used.
    """
    __tablename__ = "refresh_tokens"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    token = Column(Text, unique=True, nullable=False, index=True)
    family = Column(String(64), nullable=False, index=True)
    fingerprint = Column(String(64), nullable=True)
    device_info = Column(JSONDocument, default=dict, nullable=False)
    ip_address = Column(String(45).with_variant(INET(), "postgresql"), nullable=True)

    used = Column(Boolean, default=False, nullable=False)
    last_used_at = Column(DateTime, nullable=True)
    expires_at = Column(DateTime, nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    user = relationship("User", back_populates="refresh_tokens")

    __table_args__ = (
        Index("ix_refresh_tokens_user_id_used", "user_id", "used"),
        Index("ix_refresh_tokens_family_used", "family", "used"),
    )

    def __repr__(self):
        return f"<RefreshToken(id={self.id}, family='{self.family}', used={self.used})>"
