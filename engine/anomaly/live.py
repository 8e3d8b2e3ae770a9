"""
Live-stream anomaly heuristics comparing a window of request logs against a baseline drawn from the earliest slice of the live log.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from api.responses import LiveFinding
from config import settings
from datasources.records import LogRecord
from engine.enums import LiveFindingType, Severity
from engine.exceptions import BaselineUnavailable


@dataclass(frozen=True)
class LiveBaseline:
    avg_request_size: float
    avg_response_time: float
    error_rate: float
    sample_count: int

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


def compute_live_baseline(logs: Sequence[LogRecord], fraction: float | None = None) -> Optional[LiveBaseline]:
    if fraction is None:
        fraction = settings.live_baseline_fraction
    ref = list(logs)[: int(math.floor(len(logs) * fraction))]
    if not ref:
        return None
    sizes = np.array([r.request_size for r in ref], dtype=float)
    times = np.array([r.response_time_ms for r in ref], dtype=float)
    errors = sum(1 for r in ref if r.is_error)
    return LiveBaseline(
        avg_request_size=float(sizes.mean()),
        avg_response_time=float(times.mean()),
        error_rate=errors / len(ref),
        sample_count=len(ref),
    )


def detect_live_anomalies(logs: Sequence[LogRecord], baseline: Optional[LiveBaseline]) -> List[LiveFinding]:
    if baseline is None:
        raise BaselineUnavailable("live log baseline is empty; live anomaly detection unavailable")
    if not logs:
        return []

    findings: List[LiveFinding] = []

    large = [r for r in logs if r.request_size > baseline.avg_request_size * settings.live_payload_multiplier]
    if large:
        findings.append(LiveFinding(
            type=LiveFindingType.large_payload_burst,
            severity=Severity.critical,
            count=len(large),
            baseline=baseline.avg_request_size,
            details={
                "max_size": max(r.request_size for r in large),
                "sample_ips": list(dict.fromkeys(r.source_ip for r in large)),
            },
        ))

    slow = [r for r in logs if r.response_time_ms > baseline.avg_response_time * settings.live_response_time_multiplier]
    if len(slow) > settings.live_min_slow_requests:
        findings.append(LiveFinding(
            type=LiveFindingType.response_time_degradation,
            severity=Severity.high,
            count=len(slow),
            baseline=baseline.avg_response_time,
            details={"max_time": max(r.response_time_ms for r in slow)},
        ))

    error_count = sum(1 for r in logs if r.is_error)
    current_rate = error_count / len(logs)
    if current_rate > baseline.error_rate * settings.live_error_rate_multiplier and error_count > settings.live_min_errors:
        findings.append(LiveFinding(
            type=LiveFindingType.error_rate_spike,
            severity=Severity.critical,
            count=error_count,
            baseline=baseline.error_rate,
            details={"current": round(current_rate, 4)},
        ))

    return findings
