"""
Lifecycle event routes summarizing pod restarts and out-of-memory kills for an incident window.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from fastapi import APIRouter

from api.requests import RestartRequest
from api.responses import RestartSummary
from api.routes.common import get_provider
from api.routes.exception import handle_exceptions
from engine.enums import LifecycleEventType
from engine.events.restarts import restart_summary

router = APIRouter(tags=["Events"])


@router.post("/events/restarts", response_model=RestartSummary, summary="Pod restart summary for a window")
@handle_exceptions
async def restarts(req: RestartRequest) -> RestartSummary:
    events = get_provider().query_lifecycle(
        req.start,
        req.end,
        event_type=LifecycleEventType.pod_restart,
        namespace=req.namespace,
        pod_name=req.pod_name,
    )
    return restart_summary(events)
