"""
Error pattern grouping and summary statistics over request log records, grouping error-level entries by their error text with the distinct source IPs and endpoints that produced them.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Sequence

import numpy as np

from api.responses import ErrorPattern, LogStatistics
from datasources.records import LogRecord

UNKNOWN_ERROR = "Unknown error"


def error_patterns(logs: Sequence[LogRecord]) -> List[ErrorPattern]:
    buckets: Dict[str, Dict] = defaultdict(lambda: {"frequency": 0, "ips": {}, "endpoints": {}})

    for rec in logs:
        if not rec.is_error:
            continue
        b = buckets[rec.error or UNKNOWN_ERROR]
        b["frequency"] += 1
        b["ips"].setdefault(rec.source_ip, None)
        b["endpoints"].setdefault(rec.endpoint, None)

    results = [
        ErrorPattern(
            pattern=pattern,
            frequency=b["frequency"],
            sample_ips=list(b["ips"]),
            endpoints=list(b["endpoints"]),
        )
        for pattern, b in buckets.items()
    ]
    results.sort(key=lambda p: p.frequency, reverse=True)
    return results


def log_statistics(logs: Sequence[LogRecord], large_payload_count: int = 0) -> LogStatistics:
    avg = None
    if logs:
        avg = round(float(np.mean([r.response_time_ms for r in logs])), 2)
    return LogStatistics(
        total_logs=len(logs),
        error_count=sum(1 for r in logs if r.is_error),
        unique_ips=len({r.source_ip for r in logs}),
        unique_endpoints=len({r.endpoint for r in logs}),
        avg_response_time=avg,
        large_payload_count=large_payload_count,
    )
