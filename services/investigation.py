"""
Investigation hand-off: narrows a flagged window down to its anomalous request logs, batches them for the external tool chain, and defines the investigator contract the monitor drives.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Sequence

from api.responses import InvestigationReport, TimeRange
from config import settings
from datasources.records import LogRecord


@dataclass(frozen=True)
class InvestigationRequest:
    window: TimeRange
    metric_anomaly_count: int = 0
    large_payload_count: int = 0
    error_count: int = 0
    batches: List[List[LogRecord]] = field(default_factory=list)

    @property
    def analyzed_log_count(self) -> int:
        return sum(len(b) for b in self.batches)


class Investigator(Protocol):
    async def investigate(self, request: InvestigationRequest) -> InvestigationReport: ...


def filter_anomalous_logs(
    error_logs: Sequence[LogRecord],
    large_payload_logs: Sequence[LogRecord],
) -> List[LogRecord]:
    """Union of error and large-payload logs, deduplicated by timestamp against the error set."""
    seen = {r.timestamp for r in error_logs}
    combined = list(error_logs)
    combined.extend(r for r in large_payload_logs if r.timestamp not in seen)
    combined.sort(key=lambda r: r.timestamp)
    return combined


def batch_logs(
    logs: Sequence[LogRecord],
    size: Optional[int] = None,
    max_batches: Optional[int] = None,
) -> List[List[LogRecord]]:
    size = size or settings.investigation_batch_size
    max_batches = max_batches or settings.investigation_max_batches
    capped = list(logs)[: size * max_batches]
    return [capped[i:i + size] for i in range(0, len(capped), size)]
