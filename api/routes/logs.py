from __future__ import annotations

from fastapi import APIRouter

from api.requests import GatewayStatsRequest, LogErrorsRequest
from api.responses import GatewayStats, LogErrorReport
from api.routes.common import get_provider
from api.routes.exception import handle_exceptions
from config import settings
from engine.enums import LogLevel
from engine import logs
from services.anomaly_service import payload_threshold

router = APIRouter(tags=["Logs"])


@router.post("/logs/errors", response_model=LogErrorReport)
@handle_exceptions
async def log_errors(req: LogErrorsRequest) -> LogErrorReport:
    provider = get_provider()
    window = provider.query_logs(req.start, req.end)
    errors = provider.query_logs(req.start, req.end, level=LogLevel.error)
    threshold = payload_threshold(provider)
    large = sum(1 for r in window if r.request_size > threshold)
    return LogErrorReport(
        patterns=logs.error_patterns(errors)[: req.limit],
        statistics=logs.log_statistics(window, large_payload_count=large),
        top_error_ips=logs.top_source_ips(errors, req.limit),
    )


@router.post("/gateway/stats", response_model=GatewayStats)
@handle_exceptions
async def gateway_stats(req: GatewayStatsRequest) -> GatewayStats:
    records = get_provider().query_gateway(req.start, req.end, endpoint=req.endpoint)
    return GatewayStats(
        total_requests=len(records),
        size_distribution=logs.request_size_distribution(records),
        top_source_ips=logs.top_source_ips(records, req.limit),
        large_request_count=sum(1 for r in records if r.request_size > settings.gateway_large_request_bytes),
    )
