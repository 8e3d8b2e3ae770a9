"""
Timeline routes: the composite incident timeline plus its summary, attack pattern and correlation window views.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter

from api.requests import TimelineRequest
from api.responses import AttackPattern, CorrelationWindowView, IncidentTimeline, TimelineSummary
from api.routes.common import get_provider
from api.routes.exception import handle_exceptions
from engine.correlation import identify_correlation_windows
from engine.patterns import find_attack_patterns
from engine.timeline import build_timeline, generate_timeline_summary
from services.timeline_service import collect_sources, fetch_incident_timeline

router = APIRouter(tags=["Timeline"])


def _timeline(req: TimelineRequest):
    sources = collect_sources(get_provider(), req.start, req.end, req.sources)
    return build_timeline(sources, req.start, req.end)


@router.post("/timeline", response_model=IncidentTimeline, summary="Build the composite incident timeline")
@handle_exceptions
async def incident_timeline(req: TimelineRequest) -> IncidentTimeline:
    return fetch_incident_timeline(get_provider(), req.start, req.end, req.sources, req.window_minutes)


@router.post("/timeline/summary", response_model=TimelineSummary)
@handle_exceptions
async def timeline_summary(req: TimelineRequest) -> TimelineSummary:
    return generate_timeline_summary(_timeline(req))


@router.post("/timeline/patterns", response_model=List[AttackPattern])
@handle_exceptions
async def timeline_patterns(req: TimelineRequest) -> List[AttackPattern]:
    return find_attack_patterns(_timeline(req))


@router.post("/timeline/windows", response_model=List[CorrelationWindowView])
@handle_exceptions
async def timeline_windows(req: TimelineRequest) -> List[CorrelationWindowView]:
    return [w.view() for w in identify_correlation_windows(_timeline(req), req.window_minutes)]
