"""Endpoints signalling the start and end of a dashboard session."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from cargo_alerts.application.use_cases.programming import AlertScheduler
from cargo_alerts.interfaces.api.dependencies import get_alert_scheduler
from cargo_alerts.interfaces.api.schemas import ProgrammingCheckResponse

router = APIRouter(prefix="/session", tags=["session"])


@router.post("/start", response_model=ProgrammingCheckResponse)
async def start_session(
    scheduler: AlertScheduler = Depends(get_alert_scheduler),
) -> ProgrammingCheckResponse:
    """Reload persisted state, run a check and start the periodic timer."""

    report = scheduler.on_session_start()
    scheduler.start()
    return ProgrammingCheckResponse.from_report(report)


@router.post("/end", status_code=status.HTTP_204_NO_CONTENT)
async def end_session(
    scheduler: AlertScheduler = Depends(get_alert_scheduler),
) -> Response:
    scheduler.on_session_end()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
