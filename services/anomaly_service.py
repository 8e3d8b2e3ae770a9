"""
Anomaly service wiring the record provider to baseline computation and the metric, payload and live-stream detectors.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""
from __future__ import annotations

import logging
from typing import List, Optional

from api.responses import AnomalyScan, LiveScan, PayloadAnomaly
from config import settings
from datasources.helpers import TimestampLike, parse_timestamp
from datasources.provider import SourceRecordProvider
from engine import anomaly, baseline as baseline_engine
from engine.baseline import Baseline
from engine.exceptions import BaselineUnavailable

log = logging.getLogger(__name__)


def payload_threshold(provider: SourceRecordProvider) -> int:
    return settings.large_payload_live_bytes if provider.live else settings.large_payload_static_bytes


def get_baseline(provider: SourceRecordProvider, service: Optional[str] = None) -> Optional[Baseline]:
    service = service or settings.default_service
    start, end = settings.baseline_reference_start, settings.baseline_reference_end
    samples = provider.query_metrics(start=start, end=end, service=service)
    return baseline_engine.compute(samples, service, start, end)


def detect_anomalies(
    provider: SourceRecordProvider,
    start: TimestampLike,
    end: TimestampLike,
    service: Optional[str] = None,
) -> AnomalyScan:
    service = service or settings.default_service
    start_ts, end_ts = parse_timestamp(start), parse_timestamp(end)
    ref = get_baseline(provider, service)
    scan = AnomalyScan(service=service, start=start_ts, end=end_ts, available=True)

    try:
        found = anomaly.detect(provider.query_metrics(start_ts, end_ts, service), ref, service, start_ts, end_ts)
    except BaselineUnavailable as exc:
        log.warning("Metric anomaly detection unavailable: %s", exc)
        return scan.model_copy(update={"available": False, "reason": str(exc)})

    return scan.model_copy(update={"baseline": ref.as_dict(), "anomalies": found})


def detect_payload_anomalies(
    provider: SourceRecordProvider,
    start: TimestampLike,
    end: TimestampLike,
    threshold: Optional[int] = None,
    include_gateway: bool = False,
) -> List[PayloadAnomaly]:
    if threshold is None:
        threshold = payload_threshold(provider)
    records = list(provider.query_logs(start, end))
    if include_gateway:
        records.extend(provider.query_gateway(start, end))
    found = anomaly.detect_large_payloads(records, threshold)
    found.sort(key=lambda a: a.timestamp)
    return found


def detect_live(provider: SourceRecordProvider, start: TimestampLike, end: TimestampLike) -> LiveScan:
    ref = anomaly.compute_live_baseline(provider.logs.all())
    if ref is None:
        log.warning("Live baseline unavailable: no reference records in the live log")
        return LiveScan(available=False, reason="live log has no reference records")
    findings = anomaly.detect_live_anomalies(provider.query_logs(start, end), ref)
    return LiveScan(available=True, baseline=ref.as_dict(), findings=findings)
