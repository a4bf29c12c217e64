"""
Automation Tracker
Records runs and per-item errors of batch jobs in the embedded automation store.

Tracking is best effort: a failure while writing an audit record is logged and
swallowed so it never interrupts the batch job that called it.
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional

from sqlalchemy import create_engine, select
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker

from app.models.automation import AutomationBase, AutomationError, AutomationRun
from app.utils.dates import utcnow

logger = logging.getLogger(__name__)


def create_session_factory(database_url: str) -> sessionmaker:
    """Open (and create if needed) the automation store."""
    url = make_url(database_url)
    connect_args = {}
    if url.get_backend_name() == "sqlite":
        connect_args["check_same_thread"] = False
        if url.database and url.database != ":memory:":
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(database_url, connect_args=connect_args)
    AutomationBase.metadata.create_all(engine)
    return sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)


class AutomationTracker:
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def start_run(self) -> Optional[int]:
        try:
            with self._session_factory() as session:
                run = AutomationRun(start_time=utcnow())
                session.add(run)
                session.commit()
                return run.id
        except Exception as e:
            logger.error(f"Failed to record automation run start: {e}")
            return None

    def finish_run(
        self,
        run_id: Optional[int],
        processed: int = 0,
        skipped: int = 0,
        errors: int = 0,
        stats: Optional[Dict[str, Any]] = None,
    ) -> None:
        if run_id is None:
            return
        try:
            with self._session_factory() as session:
                run = session.get(AutomationRun, run_id)
                if run is None:
                    logger.error(f"Automation run {run_id} not found")
                    return
                run.end_time = utcnow()
                run.duration_seconds = int((run.end_time - run.start_time).total_seconds())
                run.total_processed = processed
                run.total_skipped = skipped
                run.total_errors = errors
                run.stats_json = stats or {}
                session.commit()
        except Exception as e:
            logger.error(f"Failed to record automation run {run_id} finish: {e}")

    def log_error(
        self,
        subreddit: str,
        post_id: str,
        title: Optional[str],
        message: Optional[str],
    ) -> Optional[int]:
        try:
            with self._session_factory() as session:
                error = AutomationError(
                    subreddit=subreddit,
                    post_id=post_id,
                    title=title,
                    error_message=message,
                )
                session.add(error)
                session.commit()
                return error.id
        except Exception as e:
            logger.error(f"Failed to record automation error for post {post_id}: {e}")
            return None

    def resolve(self, error_id: int) -> Optional[AutomationError]:
        """Mark an error resolved. Returns None when it does not exist."""
        with self._session_factory() as session:
            error = session.get(AutomationError, error_id)
            if error is None:
                return None
            if not error.resolved:
                error.resolved = True
                error.resolved_at = utcnow()
                session.commit()
            return error

    def recent_runs(self, limit: int = 20) -> List[AutomationRun]:
        with self._session_factory() as session:
            result = session.execute(
                select(AutomationRun).order_by(AutomationRun.created_at.desc(), AutomationRun.id.desc()).limit(limit)
            )
            return list(result.scalars().all())

    def errors(self, resolved: Optional[bool] = False, limit: int = 100) -> List[AutomationError]:
        with self._session_factory() as session:
            stmt = select(AutomationError)
            if resolved is not None:
                stmt = stmt.where(AutomationError.resolved == resolved)
            result = session.execute(stmt.order_by(AutomationError.created_at.desc()).limit(limit))
            return list(result.scalars().all())

    @contextmanager
    def tracked_run(self) -> Iterator[Dict[str, Any]]:
        """
        Track a run around a block. The block fills the yielded counters;
        they are stored when the block exits, even if it raises.
        """
        counters: Dict[str, Any] = {"processed": 0, "skipped": 0, "errors": 0, "stats": {}}
        run_id = self.start_run()
        try:
            yield counters
        finally:
            self.finish_run(
                run_id,
                processed=counters["processed"],
                skipped=counters["skipped"],
                errors=counters["errors"],
                stats=counters["stats"],
            )
