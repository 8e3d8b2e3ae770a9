from __future__ import annotations

from typing import List, Sequence, Union

from api.responses import PayloadAnomaly
from datasources.records import GatewayRecord, LogRecord
from engine.anomaly.detection import increase_factor
from engine.enums import Severity, Source


def detect_large_payloads(
    records: Sequence[Union[LogRecord, GatewayRecord]],
    threshold: int,
) -> List[PayloadAnomaly]:
    """Flag every log or gateway record whose request size exceeds ``threshold`` bytes."""
    anomalies: List[PayloadAnomaly] = []
    for rec in records:
        if rec.request_size <= threshold:
            continue
        if isinstance(rec, GatewayRecord):
            source, status = Source.gateway, rec.response_code
        else:
            source, status = Source.logs, rec.status_code
        anomalies.append(PayloadAnomaly(
            timestamp=rec.timestamp,
            severity=Severity.warning,
            observed_value=float(rec.request_size),
            baseline_value=float(threshold),
            increase_factor=increase_factor(rec.request_size, threshold),
            source=source,
            source_ip=rec.source_ip,
            endpoint=rec.endpoint,
            status_code=status,
            response_time_ms=rec.response_time_ms,
        ))
    return anomalies
