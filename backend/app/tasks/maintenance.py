"""
Maintenance Tasks
Periodic cleanup of the primary store, tracked in the automation store.
"""

import logging

from sqlalchemy import delete
from sqlalchemy.orm import Session

from app.worker import celery_app
from app.config import settings
from app.database import SessionLocal
from app.models.refresh_token import RefreshToken
from app.services.automation_tracker import AutomationTracker, create_session_factory
from app.utils.dates import utcnow

logger = logging.getLogger(__name__)


def purge_expired_tokens(session: Session, tracker: AutomationTracker) -> int:
    """Delete expired refresh tokens and record the run. Returns rows deleted."""
    with tracker.tracked_run() as run:
        cutoff = utcnow()
        try:
            result = session.execute(
                delete(RefreshToken).where(RefreshToken.expires_at < cutoff)
            )
            session.commit()
        except Exception:
            session.rollback()
            run["errors"] = 1
            raise
        run["processed"] = result.rowcount
        run["stats"] = {"job": "purge_expired_refresh_tokens", "cutoff": cutoff.isoformat()}

    logger.info(f"Purged {result.rowcount} expired refresh tokens")
    return result.rowcount


@celery_app.task(bind=True, name="app.tasks.maintenance.purge_expired_refresh_tokens")
def purge_expired_refresh_tokens(self):
    tracker = AutomationTracker(create_session_factory(settings.automation_database_url))
    with SessionLocal() as session:
        deleted = purge_expired_tokens(session, tracker)
    return {"status": "completed", "deleted": deleted}
