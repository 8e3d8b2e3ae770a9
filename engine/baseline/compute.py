"""
Compute logic for per-service baseline metrics (CPU, memory, request rate, response time percentiles and error rate) averaged over a designated normal-traffic reference window, used as the divisor for multiplier-based anomaly rules.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from datasources.base import in_range
from datasources.helpers import TimestampLike, parse_optional_timestamp, to_iso
from datasources.records import MetricSample

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Baseline:
    service: str
    cpu_percent: float
    memory_percent: float
    request_rate: float
    response_time_p50: float
    response_time_p95: float
    response_time_p99: float
    error_rate: float
    sample_count: int = 0
    reference_start: Optional[datetime] = None
    reference_end: Optional[datetime] = None

    def as_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        for key in ("reference_start", "reference_end"):
            if out[key] is not None:
                out[key] = to_iso(out[key])
        return out


def compute(
    samples: Sequence[MetricSample],
    service: str,
    start: Optional[TimestampLike] = None,
    end: Optional[TimestampLike] = None,
) -> Optional[Baseline]:
    """Average the service's samples inside the inclusive reference window.

    Returns ``None`` when the window holds no samples for the service.
    """
    start_ts = parse_optional_timestamp(start)
    end_ts = parse_optional_timestamp(end)
    ref: List[MetricSample] = [
        s for s in samples
        if s.service == service and in_range(s.timestamp, start_ts, end_ts)
    ]
    if not ref:
        log.warning("No reference samples for service=%s in [%s, %s]", service, start, end)
        return None

    arr = np.array(
        [
            [
                s.metrics.cpu_percent,
                s.metrics.memory_percent,
                s.metrics.request_rate,
                s.metrics.response_time.p50,
                s.metrics.response_time.p95,
                s.metrics.response_time.p99,
                s.metrics.error_rate,
            ]
            for s in ref
        ],
        dtype=float,
    )
    means = arr.mean(axis=0)

    return Baseline(
        service=service,
        cpu_percent=float(means[0]),
        memory_percent=float(means[1]),
        request_rate=float(means[2]),
        response_time_p50=float(means[3]),
        response_time_p95=float(means[4]),
        response_time_p99=float(means[5]),
        error_rate=float(means[6]),
        sample_count=len(ref),
        reference_start=start_ts,
        reference_end=end_ts,
    )
