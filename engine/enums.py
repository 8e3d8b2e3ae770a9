"""
Enumerations for Severity, Event Sources, Event Types, Anomaly Types and Attack Patterns

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from enum import Enum

from config import SEVERITY_WEIGHTS


class Severity(str, Enum):
    info = "info"
    warning = "warning"
    high = "high"
    critical = "critical"

    def weight(self) -> int:
        return SEVERITY_WEIGHTS[self.value]

    @classmethod
    def empty_counts(cls) -> dict[Severity, int]:
        return {s: 0 for s in cls}


class Source(str, Enum):
    logs = "logs"
    metrics = "metrics"
    gateway = "gateway"
    kubernetes = "kubernetes"


class LifecycleEventType(str, Enum):
    deployment_update = "deployment_update"
    pod_restart = "pod_restart"
    health_check_failed = "health_check_failed"
    horizontal_scaling = "horizontal_scaling"


class EventType(str, Enum):
    request_logged = "request_logged"
    error_logged = "error_logged"
    performance_degradation = "performance_degradation"
    large_request_detected = "large_request_detected"
    gateway_error = "gateway_error"
    deployment_update = "deployment_update"
    pod_restart = "pod_restart"
    health_check_failed = "health_check_failed"
    horizontal_scaling = "horizontal_scaling"

    @classmethod
    def from_lifecycle(cls, value: LifecycleEventType) -> EventType:
        return cls(value.value)

    def is_error(self) -> bool:
        return self in (EventType.error_logged, EventType.gateway_error)


class LogLevel(str, Enum):
    debug = "debug"
    info = "info"
    warn = "warn"
    error = "error"


class AnomalyType(str, Enum):
    cpu_spike = "cpu_spike"
    memory_spike = "memory_spike"
    response_time_degradation = "response_time_degradation"
    error_rate_spike = "error_rate_spike"
    large_payload = "large_payload"


class LiveFindingType(str, Enum):
    large_payload_burst = "large_payload_burst"
    response_time_degradation = "response_time_degradation"
    error_rate_spike = "error_rate_spike"


class PatternType(str, Enum):
    large_payload_burst = "large_payload_burst"
    resource_exhaustion = "resource_exhaustion"
    error_rate_spike = "error_rate_spike"


class MonitorState(str, Enum):
    idle = "IDLE"
    checking = "CHECKING"
    investigating = "INVESTIGATING"
