"""
Detection logic for metric anomalies relative to a reference baseline: CPU and memory spikes, response time degradation and error rate spikes, each a strict multiplicative comparison evaluated independently per sample.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from api.responses import MetricAnomaly
from config import settings
from datasources.base import in_range
from datasources.helpers import TimestampLike, parse_optional_timestamp
from datasources.records import MetricSample, MetricValues
from engine.baseline.compute import Baseline
from engine.enums import AnomalyType, Severity
from engine.exceptions import BaselineUnavailable


@dataclass(frozen=True)
class _Rule:
    anomaly_type: AnomalyType
    observed: Callable[[MetricValues], float]
    baseline_attr: str
    multiplier_attr: str
    severity: Callable[[float], Severity]


def _cpu_severity(v: float) -> Severity:
    return Severity.critical if v > settings.metric_cpu_critical_percent else Severity.high


def _memory_severity(v: float) -> Severity:
    return Severity.critical if v > settings.metric_memory_critical_percent else Severity.high


def _always_critical(_: float) -> Severity:
    return Severity.critical


_RULES: tuple[_Rule, ...] = (
    _Rule(AnomalyType.cpu_spike, lambda m: m.cpu_percent, "cpu_percent", "cpu_multiplier", _cpu_severity),
    _Rule(AnomalyType.memory_spike, lambda m: m.memory_percent, "memory_percent", "memory_multiplier", _memory_severity),
    _Rule(
        AnomalyType.response_time_degradation,
        lambda m: m.response_time.p95,
        "response_time_p95",
        "response_time_multiplier",
        _always_critical,
    ),
    _Rule(AnomalyType.error_rate_spike, lambda m: m.error_rate, "error_rate", "error_rate_multiplier", _always_critical),
)


def increase_factor(observed: float, reference: float) -> Optional[float]:
    if reference == 0:
        return None
    return round(observed / reference, settings.increase_factor_precision)


def detect(
    samples: Sequence[MetricSample],
    baseline: Optional[Baseline],
    service: Optional[str] = None,
    start: Optional[TimestampLike] = None,
    end: Optional[TimestampLike] = None,
) -> List[MetricAnomaly]:
    if baseline is None:
        raise BaselineUnavailable(f"no baseline for service={service!r}; metric anomaly detection unavailable")

    service = service or baseline.service
    start_ts = parse_optional_timestamp(start)
    end_ts = parse_optional_timestamp(end)

    anomalies: List[MetricAnomaly] = []
    for sample in samples:
        if sample.service != service or not in_range(sample.timestamp, start_ts, end_ts):
            continue
        for rule in _RULES:
            value = rule.observed(sample.metrics)
            reference = getattr(baseline, rule.baseline_attr)
            if not value > reference * getattr(settings, rule.multiplier_attr):
                continue
            anomalies.append(MetricAnomaly(
                timestamp=sample.timestamp,
                service=service,
                type=rule.anomaly_type,
                severity=rule.severity(value),
                observed_value=value,
                baseline_value=reference,
                increase_factor=increase_factor(value, reference),
            ))

    return anomalies
