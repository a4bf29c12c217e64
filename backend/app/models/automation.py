"""
Automation Tracking Models
Audit records for the batch jobs. These live in a separate embedded SQLite
store with their own declarative base and never join the primary schema.
"""

from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, Index, JSON
from sqlalchemy.orm import declarative_base

from app.utils.dates import utcnow

AutomationBase = declarative_base()


class AutomationRun(AutomationBase):
    __tablename__ = "automation_runs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=True)
    duration_seconds = Column(Integer, nullable=True)
    total_processed = Column(Integer, default=0, nullable=False)
    total_skipped = Column(Integer, default=0, nullable=False)
    total_errors = Column(Integer, default=0, nullable=False)
    stats_json = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        Index("idx_automation_runs_created", created_at.desc()),
    )

    def __repr__(self):
        return f"<AutomationRun(id={self.id}, start_time={self.start_time})>"


class AutomationError(AutomationBase):
    __tablename__ = "automation_errors"

    id = Column(Integer, primary_key=True, autoincrement=True)
    subreddit = Column(String(255), nullable=False)
    post_id = Column(String(255), nullable=False)
    title = Column(Text, nullable=True)
    error_message = Column(Text, nullable=True)
    resolved = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    resolved_at = Column(DateTime, nullable=True)

    __table_args__ = (
        Index("idx_automation_errors_resolved", "resolved", "created_at"),
    )

    def __repr__(self):
        return f"<AutomationError(id={self.id}, post_id='{self.post_id}', resolved={self.resolved})>"
