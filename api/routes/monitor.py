from __future__ import annotations

from fastapi import APIRouter, HTTPException

from api.responses import CheckResult, MonitorStatus
from api.routes.common import get_monitor
from api.routes.exception import handle_exceptions
from engine.enums import MonitorState

router = APIRouter(tags=["Monitor"])


@router.get("/monitor/status", response_model=MonitorStatus)
@handle_exceptions
async def monitor_status() -> MonitorStatus:
    return get_monitor().status()


@router.post("/monitor/check", response_model=CheckResult, summary="Run one monitor check now")
@handle_exceptions
async def monitor_check() -> CheckResult:
    monitor = get_monitor()
    if monitor.state != MonitorState.idle:
        raise HTTPException(status_code=409, detail=f"monitor is {monitor.state.value}")
    return await monitor.check()
