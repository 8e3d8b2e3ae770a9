from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter

from api.requests import MetricAnomalyRequest, PayloadAnomalyRequest, TimeWindowRequest
from api.responses import AnomalyScan, LiveScan, PayloadAnomaly
from api.routes.common import get_provider
from api.routes.exception import handle_exceptions
from config import settings
from services import anomaly_service

router = APIRouter(tags=["Anomalies"])


@router.post("/anomalies/metrics", response_model=AnomalyScan, summary="Baseline-relative metric anomalies")
@handle_exceptions
async def metric_anomalies(req: MetricAnomalyRequest) -> AnomalyScan:
    return anomaly_service.detect_anomalies(get_provider(), req.start, req.end, req.service)


@router.post("/anomalies/payloads", response_model=List[PayloadAnomaly], summary="Requests above the payload size threshold")
@handle_exceptions
async def payload_anomalies(req: PayloadAnomalyRequest) -> List[PayloadAnomaly]:
    return anomaly_service.detect_payload_anomalies(
        get_provider(), req.start, req.end, threshold=req.threshold, include_gateway=req.include_gateway,
    )


@router.post("/anomalies/live", response_model=LiveScan, summary="Live request-log heuristics")
@handle_exceptions
async def live_anomalies(req: TimeWindowRequest) -> LiveScan:
    return anomaly_service.detect_live(get_provider(), req.start, req.end)


@router.get("/baseline", summary="Reference-window baseline for a service")
@handle_exceptions
async def baseline(service: Optional[str] = None) -> Dict[str, Any]:
    service = service or settings.default_service
    ref = anomaly_service.get_baseline(get_provider(), service)
    if ref is None:
        return {"service": service, "available": False, "baseline": None}
    return {"service": service, "available": True, "baseline": ref.as_dict()}
