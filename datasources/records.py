"""
Typed source record models for request logs, metric samples, gateway logs and lifecycle events.

Each external source has an explicit record shape with required and optional
fields. Batches are validated leniently: a record that fails validation is
skipped and logged, the remainder of the batch is kept.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from datasources.exceptions import MalformedRecord
from datasources.helpers import parse_timestamp
from engine.enums import LifecycleEventType, LogLevel, Source

log = logging.getLogger(__name__)


class SourceRecord(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    timestamp: datetime

    @field_validator("timestamp", mode="before")
    @classmethod
    def _parse_timestamp(cls, v: Any) -> datetime:
        return parse_timestamp(v)


class LogRecord(SourceRecord):
    level: LogLevel
    endpoint: str
    method: str
    request_size: int = Field(ge=0)
    response_time_ms: float = Field(ge=0)
    status_code: int
    source_ip: str
    service: Optional[str] = None
    error: Optional[str] = None

    @field_validator("level", mode="before")
    @classmethod
    def _lower_level(cls, v: Any) -> Any:
        if isinstance(v, str):
            value = v.strip().lower()
            return "warn" if value == "warning" else value
        return v

    @property
    def is_error(self) -> bool:
        return self.level == LogLevel.error


class ResponseTimes(BaseModel):
    model_config = ConfigDict(frozen=True)

    p50: float
    p95: float
    p99: float


class MetricValues(BaseModel):
    model_config = ConfigDict(frozen=True)

    cpu_percent: float
    memory_percent: float
    request_rate: float
    response_time: ResponseTimes
    error_rate: float
    active_connections: int = 0


class MetricSample(SourceRecord):
    service: str
    metrics: MetricValues


class GatewayRecord(SourceRecord):
    request_id: str
    endpoint: str
    request_size: int = Field(ge=0)
    response_code: int
    response_time_ms: float = Field(ge=0)
    source_ip: str


class LifecycleEvent(SourceRecord):
    namespace: str
    pod_name: str
    event_type: LifecycleEventType
    reason: str
    message: str = ""
    resource_usage: Optional[Dict[str, Any]] = None
    restart_count: Optional[int] = None


AnyRecord = Union[LogRecord, MetricSample, GatewayRecord, LifecycleEvent]
R = TypeVar("R", bound=SourceRecord)

RECORD_MODELS: Dict[Source, Type[SourceRecord]] = {
    Source.logs: LogRecord,
    Source.metrics: MetricSample,
    Source.gateway: GatewayRecord,
    Source.kubernetes: LifecycleEvent,
}


def parse_record(model: Type[R], row: Any) -> R:
    if isinstance(row, model):
        return row
    try:
        return model.model_validate(row)
    except ValidationError as exc:
        raise MalformedRecord(f"{model.__name__}: {exc.error_count()} validation error(s)") from exc


def parse_records(model: Type[R], rows: Optional[Iterable[Any]], source: str = "") -> List[R]:
    if not rows:
        return []
    parsed: List[R] = []
    skipped = 0
    for index, row in enumerate(rows):
        try:
            parsed.append(parse_record(model, row))
        except MalformedRecord as exc:
            skipped += 1
            log.warning("Skipping malformed %s record #%d: %s", source or model.__name__, index, exc.__cause__ or exc)
    if skipped:
        log.info("parse_records: kept %d, skipped %d %s record(s)", len(parsed), skipped, source or model.__name__)
    return parsed


def live_log_to_record(row: Dict[str, Any]) -> Dict[str, Any]:
    """Map a request-log line from the live endpoint onto the LogRecord shape."""
    status = row.get("status_code")
    is_error = isinstance(status, int) and status >= 500
    return {
        "timestamp": row.get("timestamp"),
        "service": row.get("service"),
        "endpoint": row.get("endpoint"),
        "method": row.get("method"),
        "request_size": row.get("request_size_bytes", row.get("request_size")),
        "response_time_ms": row.get("response_time_ms"),
        "status_code": status,
        "source_ip": row.get("client_ip", row.get("source_ip")),
        "level": LogLevel.error.value if is_error else LogLevel.info.value,
        "error": f"HTTP {status}" if is_error else None,
    }
