"""
Constants and configuration for DeepTrace.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import os
from typing import Dict, Optional

from pydantic_settings import BaseSettings


DEEPTRACE_DATA_DIR = os.getenv("DEEPTRACE_DATA_DIR", "data").rstrip("/")
DEEPTRACE_LIVE_LOG_FILE = os.getenv("DEEPTRACE_LIVE_LOG_FILE", "request_logs.jsonl")
DEEPTRACE_USE_LIVE_DATA = os.getenv("DEEPTRACE_USE_LIVE_DATA", "true").lower() in ("1", "true", "yes")
DEEPTRACE_TOOLS_URL = os.getenv("DEEPTRACE_TOOLS_URL", "http://localhost:3000").rstrip("/")
DEEPTRACE_CONNECTOR_TIMEOUT = int(os.getenv("DEEPTRACE_CONNECTOR_TIMEOUT", "30"))

APPLICATION_LOGS_FILE = "application_logs.json"
METRICS_FILE = "metrics.json"
GATEWAY_LOGS_FILE = "api_gateway_logs.json"
LIFECYCLE_EVENTS_FILE = "kubernetes_events.json"

SOURCE_ALL = "all"

# weight values assigned to severity labels for comparison and ranking
SEVERITY_WEIGHTS: dict[str, int] = {
    "info": 1,
    "warning": 2,
    "high": 4,
    "critical": 8,
}

# bucket upper bounds (exclusive, bytes) for gateway request size distribution
REQUEST_SIZE_BUCKETS: list[tuple[str, Optional[int]]] = [
    ("small", 10_240),
    ("medium", 102_400),
    ("large", 1_048_576),
    ("very_large", 5_242_880),
    ("extreme", None),
]

TOOL_NAMES: Dict[str, str] = {
    "timeline": "fetch_incident_timeline",
    "logs": "analyze_logs",
    "root_cause": "identify_root_cause",
    "remediation": "suggest_remediation",
}


class Settings(BaseSettings):
    default_service: str = "search-api"

    # event normalization thresholds
    metric_cpu_event_percent: float = 70.0
    metric_memory_event_percent: float = 70.0
    metric_error_rate_event: float = 0.1
    metric_cpu_critical_percent: float = 90.0
    metric_memory_critical_percent: float = 85.0
    gateway_large_request_bytes: int = 5_000_000
    gateway_error_status: int = 500
    oom_reason: str = "OOMKilled"

    # correlation windowing
    correlation_window_minutes: float = 5.0

    # baseline reference period (normal traffic before the attack)
    baseline_reference_start: str = "2026-01-29T14:00:00.000Z"
    baseline_reference_end: str = "2026-01-29T14:15:00.000Z"

    # multiplier rules
    cpu_multiplier: float = 2.0
    memory_multiplier: float = 2.0
    response_time_multiplier: float = 5.0
    error_rate_multiplier: float = 10.0
    increase_factor_precision: int = 2

    # large payload thresholds; live monitoring is more sensitive
    large_payload_static_bytes: int = 5_000_000
    large_payload_live_bytes: int = 1_000_000

    # attack pattern heuristics
    pattern_large_request_min: int = 10
    pattern_ip_min: int = 5
    pattern_oom_min: int = 5
    pattern_high_resource_min: int = 5
    pattern_error_min: int = 20

    # monitor loop
    monitor_enabled: bool = False
    monitor_interval_seconds: float = 60.0
    monitor_window_minutes: float = 5.0
    monitor_min_metric_anomalies: int = 3
    monitor_error_log_bound_live: int = 5
    monitor_error_log_bound_static: int = 10
    monitor_investigation_timeout_seconds: float = 120.0
    monitor_static_window_start: Optional[str] = "2026-01-29T14:15:00.000Z"
    monitor_static_window_end: Optional[str] = "2026-01-29T14:30:00.000Z"

    # investigation hand-off
    investigation_batch_size: int = 100
    investigation_max_batches: int = 5

    # live-stream baseline heuristics
    live_baseline_fraction: float = 0.2
    live_payload_multiplier: float = 10.0
    live_response_time_multiplier: float = 5.0
    live_error_rate_multiplier: float = 10.0
    live_min_slow_requests: int = 5
    live_min_errors: int = 5

    # tool-chain connector
    tool_retry_attempts: int = 2
    tool_retry_delay_seconds: float = 1.0

    model_config = {
        "env_prefix": "DEEPTRACE_",
        "extra": "ignore",
    }


settings = Settings()
