"""
Automation Router
Admin view of batch job runs and errors recorded in the automation store.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.concurrency import run_in_threadpool

from app.api.dependencies import get_automation_tracker, require_admin
from app.exceptions import NotFoundError
from app.schemas.automation import AutomationErrorResponse, AutomationRunResponse
from app.services.automation_tracker import AutomationTracker

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/runs", response_model=List[AutomationRunResponse])
async def list_runs(
    limit: int = Query(20, ge=1, le=200),
    tracker: AutomationTracker = Depends(get_automation_tracker),
):
    return await run_in_threadpool(tracker.recent_runs, limit)


@router.get("/errors", response_model=List[AutomationErrorResponse])
async def list_errors(
    resolved: Optional[bool] = False,
    limit: int = Query(100, ge=1, le=500),
    tracker: AutomationTracker = Depends(get_automation_tracker),
):
    return await run_in_threadpool(tracker.errors, resolved, limit)


@router.post("/errors/{error_id}/resolve", response_model=AutomationErrorResponse)
async def resolve_error(
    error_id: int,
    tracker: AutomationTracker = Depends(get_automation_tracker),
):
    error = await run_in_threadpool(tracker.resolve, error_id)
    if error is None:
        raise NotFoundError("Automation error")
    return error
