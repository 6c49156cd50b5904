"""Endpoints that drive the programming alert scheduler."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status

from cargo_alerts.application.use_cases.programming import AlertScheduler
from cargo_alerts.infrastructure.programming_source import ScheduledItemSource
from cargo_alerts.interfaces.api.dependencies import get_alert_scheduler, get_programming_source
from cargo_alerts.interfaces.api.schemas import ProgrammingCheckResponse, ProgrammingRefreshResponse

router = APIRouter(prefix="/programming", tags=["programming"])


@router.post("/check", response_model=ProgrammingCheckResponse)
async def check_programming(
    scheduler: AlertScheduler = Depends(get_alert_scheduler),
) -> ProgrammingCheckResponse:
    """Run a programming check immediately, ignoring the throttle."""

    return ProgrammingCheckResponse.from_report(scheduler.check_now())


@router.post("/reset", status_code=status.HTTP_204_NO_CONTENT)
async def reset_programming_notifications(
    scheduler: AlertScheduler = Depends(get_alert_scheduler),
) -> Response:
    """Forget notified items so every record is evaluated again."""

    scheduler.reset_notifications()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/refresh", response_model=ProgrammingRefreshResponse)
async def refresh_programming(
    source: ScheduledItemSource = Depends(get_programming_source),
) -> ProgrammingRefreshResponse:
    """Reload the programming records from the operations backend."""

    refresh = getattr(source, "refresh", None)
    if refresh is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No hay un servicio de programación remoto configurado",
        )
    if not await refresh():
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="No se pudo consultar el servicio de programación",
        )
    return ProgrammingRefreshResponse(items=len(source.list_items()))
