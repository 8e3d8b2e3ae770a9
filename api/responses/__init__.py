"""
Response models for API endpoints and internal data structures.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional
from datetime import datetime
import numpy as np
from pydantic import BaseModel, ConfigDict, Field, model_serializer
from engine.enums import (
    AnomalyType,
    EventType,
    LiveFindingType,
    MonitorState,
    PatternType,
    Severity,
    Source,
)


def _coerce(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {k: _coerce(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_coerce(v) for v in obj]
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        return float(obj)
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    return obj


class NpModel(BaseModel):

    @model_serializer(mode="wrap")
    def _serialize(self, handler: Any) -> Any:
        return _coerce(handler(self))


class TimelineEvent(NpModel):
    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    source: Source
    event_type: EventType
    severity: Severity
    details: Dict[str, Any] = Field(default_factory=dict)


class TimeRange(NpModel):

    start: Optional[datetime] = None
    end: Optional[datetime] = None


class TimelineSummary(NpModel):

    total_events: int
    by_source: Dict[str, int]
    by_severity: Dict[str, int]
    by_event_type: Dict[str, int]
    time_range: TimeRange


class CorrelationWindowView(NpModel):

    start: datetime
    end: datetime
    event_count: int
    severity_distribution: Dict[str, int]


class AttackPattern(NpModel):
    model_config = ConfigDict(frozen=True)

    pattern_type: PatternType
    description: str
    severity: Severity
    evidence: Dict[str, Any]


class Anomaly(NpModel):

    timestamp: datetime
    type: AnomalyType
    severity: Severity
    observed_value: float
    baseline_value: float
    increase_factor: Optional[float] = None


class MetricAnomaly(Anomaly):

    service: str


class PayloadAnomaly(Anomaly):

    type: AnomalyType = AnomalyType.large_payload
    source: Source
    source_ip: str
    endpoint: str
    status_code: int
    response_time_ms: float


class AnomalyScan(NpModel):

    service: str
    start: datetime
    end: datetime
    available: bool
    reason: Optional[str] = None
    baseline: Optional[Dict[str, Any]] = None
    anomalies: List[MetricAnomaly] = Field(default_factory=list)


class LiveFinding(NpModel):

    type: LiveFindingType
    severity: Severity
    count: int
    baseline: float
    details: Dict[str, Any] = Field(default_factory=dict)


class LiveScan(NpModel):

    available: bool
    reason: Optional[str] = None
    baseline: Optional[Dict[str, Any]] = None
    findings: List[LiveFinding] = Field(default_factory=list)


class ErrorPattern(NpModel):

    pattern: str
    frequency: int
    sample_ips: List[str]
    endpoints: List[str]


class LogStatistics(NpModel):

    total_logs: int
    error_count: int
    unique_ips: int
    unique_endpoints: int
    avg_response_time: Optional[float] = None
    large_payload_count: int = 0


class SourceIpCount(NpModel):

    ip: str
    count: int


class RestartEntry(NpModel):

    timestamp: datetime
    pod_name: str
    reason: str


class RestartSummary(NpModel):

    total_restarts: int
    oom_kills: int
    pods_affected: int
    restart_timeline: List[RestartEntry]


class IncidentTimeline(NpModel):

    timeline: List[TimelineEvent]
    summary: TimelineSummary
    attack_patterns: List[AttackPattern]
    correlation_windows: List[CorrelationWindowView]
    metadata: Dict[str, Any] = Field(default_factory=dict)


class CheckResult(NpModel):

    check_number: int
    window: TimeRange
    metric_anomaly_count: int = 0
    metric_detection_available: bool = True
    large_payload_count: int = 0
    error_count: int = 0
    has_metric_anomalies: bool = False
    has_log_anomalies: bool = False
    investigated: bool = False
    outcome: str = "healthy"


class InvestigationReport(NpModel):

    window: TimeRange
    timeline: Dict[str, Any] = Field(default_factory=dict)
    log_analysis: Dict[str, Any] = Field(default_factory=dict)
    root_cause: Dict[str, Any] = Field(default_factory=dict)
    remediation: Dict[str, Any] = Field(default_factory=dict)
    analyzed_log_count: int = 0
    batch_count: int = 0


class MonitorStatus(NpModel):

    state: MonitorState
    running: bool
    check_count: int
    live_data: bool
    last_check: Optional[CheckResult] = None


class LogErrorReport(NpModel):

    patterns: List[ErrorPattern]
    statistics: LogStatistics
    top_error_ips: List[SourceIpCount] = Field(default_factory=list)


class GatewayStats(NpModel):

    total_requests: int
    size_distribution: Dict[str, int]
    top_source_ips: List[SourceIpCount]
    large_request_count: int = 0
