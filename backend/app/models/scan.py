"""
Scan History Model
AI-derived item assessments, one row per scan, owned by a user.
"""

import uuid

from sqlalchemy import (
    Column, String, Text, Boolean, DateTime, Integer,
    ForeignKey, Index, CheckConstraint, Uuid
)
from sqlalchemy.orm import relationship

from app.database import Base, JSONDocument
from app.utils.dates import utcnow


CONFIDENCE_MIN = 0
CONFIDENCE_MAX = 100


class ScanHistory(Base):
    """
    A single item assessment.
    scanned_at is when the photo was taken; created_at is when the row was written.
    """
    __tablename__ = "scan_history"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Images
    image_url = Column(Text, nullable=False)
    thumbnail_url = Column(Text, nullable=True)

    # Item assessment
    item_name = Column(String(255), nullable=False)
    item_category = Column(String(100), nullable=True, index=True)
    item_brand = Column(String(100), nullable=True, index=True)
    item_description = Column(Text, nullable=True)
    condition_assessment = Column(Text, nullable=True)
    price_range = Column(String(50), nullable=True)
    platform_prices = Column(JSONDocument, default=dict, nullable=False)  # platform -> price
    confidence_score = Column(Integer, nullable=True)
    ai_response = Column(JSONDocument, nullable=True)  # Raw vision service payload

    # User annotations
    is_favorite = Column(Boolean, default=False, nullable=False, index=True)
    notes = Column(Text, nullable=True)

    scanned_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    user = relationship("User", back_populates="scans")

    __table_args__ = (
        CheckConstraint(
            f"confidence_score >= {CONFIDENCE_MIN} AND confidence_score <= {CONFIDENCE_MAX}",
            name="ck_scan_history_confidence_score",
        ),
        Index("ix_scan_history_user_id_scanned_at", "user_id", "scanned_at"),
        Index("ix_scan_history_user_id_is_favorite", "user_id", "is_favorite"),
        Index("ix_scan_history_user_id_item_category", "user_id", "item_category"),
    )

    def __repr__(self):
        return f"<ScanHistory(id={self.id}, item_name='{self.item_name}')>"
