"""
Timeline builder normalizing records from the four sources (request logs, metric samples, gateway logs and lifecycle events) into time-ordered events, projecting metrics and gateway logs down to the records that indicate degradation, large requests or errors.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from api.responses import TimelineEvent
from config import settings
from datasources.base import in_range
from datasources.helpers import TimestampLike, parse_timestamp
from datasources.records import (
    GatewayRecord,
    LifecycleEvent,
    LogRecord,
    MetricSample,
    parse_records,
)
from engine.enums import EventType, Severity, Source


@dataclass(frozen=True)
class TimelineSources:
    logs: Optional[Sequence[Any]] = None
    metrics: Optional[Sequence[Any]] = None
    gateway: Optional[Sequence[Any]] = None
    kubernetes: Optional[Sequence[Any]] = None

    @classmethod
    def from_mapping(cls, raw: Mapping[Any, Optional[Sequence[Any]]]) -> TimelineSources:
        values: Dict[str, Optional[Sequence[Any]]] = {}
        for key, rows in raw.items():
            name = key.value if isinstance(key, Source) else str(key)
            values[Source(name).value] = rows
        return cls(**values)


def _log_event(rec: LogRecord) -> Optional[TimelineEvent]:
    is_error = rec.is_error
    return TimelineEvent(
        timestamp=rec.timestamp,
        source=Source.logs,
        event_type=EventType.error_logged if is_error else EventType.request_logged,
        severity=Severity.high if is_error else Severity.info,
        details={
            "endpoint": rec.endpoint,
            "method": rec.method,
            "source_ip": rec.source_ip,
            "request_size": rec.request_size,
            "response_time_ms": rec.response_time_ms,
            "status_code": rec.status_code,
            "error": rec.error,
        },
    )


def _metric_event(rec: MetricSample) -> Optional[TimelineEvent]:
    m = rec.metrics
    degraded = (
        m.cpu_percent > settings.metric_cpu_event_percent
        or m.memory_percent > settings.metric_memory_event_percent
        or m.error_rate > settings.metric_error_rate_event
    )
    if not degraded:
        return None
    critical = (
        m.cpu_percent > settings.metric_cpu_critical_percent
        or m.memory_percent > settings.metric_memory_critical_percent
    )
    return TimelineEvent(
        timestamp=rec.timestamp,
        source=Source.metrics,
        event_type=EventType.performance_degradation,
        severity=Severity.critical if critical else Severity.high,
        details={
            "service": rec.service,
            "cpu_percent": round(m.cpu_percent, 1),
            "memory_percent": round(m.memory_percent, 1),
            "response_time_p95": m.response_time.p95,
            "error_rate": round(m.error_rate, 3),
        },
    )


def _gateway_event(rec: GatewayRecord) -> Optional[TimelineEvent]:
    large = rec.request_size > settings.gateway_large_request_bytes
    failed = rec.response_code >= settings.gateway_error_status
    if not (large or failed):
        return None
    return TimelineEvent(
        timestamp=rec.timestamp,
        source=Source.gateway,
        event_type=EventType.large_request_detected if large else EventType.gateway_error,
        severity=Severity.warning if large else Severity.high,
        details={
            "request_id": rec.request_id,
            "endpoint": rec.endpoint,
            "request_size": rec.request_size,
            "request_size_mb": round(rec.request_size / 1_048_576, 2),
            "response_code": rec.response_code,
            "source_ip": rec.source_ip,
            "response_time_ms": rec.response_time_ms,
        },
    )


def _lifecycle_event(rec: LifecycleEvent) -> Optional[TimelineEvent]:
    return TimelineEvent(
        timestamp=rec.timestamp,
        source=Source.kubernetes,
        event_type=EventType.from_lifecycle(rec.event_type),
        severity=Severity.critical if rec.reason == settings.oom_reason else Severity.high,
        details={
            "pod_name": rec.pod_name,
            "reason": rec.reason,
            "message": rec.message,
            "namespace": rec.namespace,
            "resource_usage": rec.resource_usage,
            "restart_count": rec.restart_count,
        },
    )


_NORMALIZERS: List[tuple[Source, type, Callable[[Any], Optional[TimelineEvent]]]] = [
    (Source.logs, LogRecord, _log_event),
    (Source.metrics, MetricSample, _metric_event),
    (Source.gateway, GatewayRecord, _gateway_event),
    (Source.kubernetes, LifecycleEvent, _lifecycle_event),
]


def build_timeline(
    sources: TimelineSources | Mapping[Any, Optional[Sequence[Any]]],
    start: TimestampLike,
    end: TimestampLike,
) -> List[TimelineEvent]:
    """Merge source records inside the inclusive ``[start, end]`` range into one timeline.

    Records may be typed models or raw mappings; raw rows that fail validation
    (bad timestamp, missing field) are skipped and logged. Output is sorted by
    timestamp with ties kept in source arrival order.
    """
    if not isinstance(sources, TimelineSources):
        sources = TimelineSources.from_mapping(sources)
    start_ts: datetime = parse_timestamp(start)
    end_ts: datetime = parse_timestamp(end)

    events: List[TimelineEvent] = []
    for kind, model, normalize in _NORMALIZERS:
        rows = getattr(sources, kind.value)
        for rec in parse_records(model, rows, kind.value):
            if not in_range(rec.timestamp, start_ts, end_ts):
                continue
            event = normalize(rec)
            if event is not None:
                events.append(event)

    events.sort(key=lambda e: e.timestamp)
    return events
