"""
Attack pattern heuristics over a merged incident timeline: large payload bursts concentrated on a few source IPs, resource exhaustion with out-of-memory restarts, and error-rate spikes across application and gateway logs.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from collections import Counter
from typing import Callable, Dict, List, Optional

from api.responses import AttackPattern, TimelineEvent
from config import settings
from engine.enums import EventType, PatternType, Severity, Source


def _request_size(event: TimelineEvent) -> Optional[int]:
    value = event.details.get("request_size")
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return None


def _is_large_request(event: TimelineEvent) -> bool:
    if event.event_type == EventType.large_request_detected:
        return True
    size = _request_size(event)
    return size is not None and size > settings.gateway_large_request_bytes


def _large_payload_burst(timeline: List[TimelineEvent]) -> Optional[AttackPattern]:
    large = [e for e in timeline if _is_large_request(e)]
    if len(large) <= settings.pattern_large_request_min:
        return None

    ip_counts = Counter(e.details["source_ip"] for e in large if e.details.get("source_ip"))
    suspicious = [
        {"ip": ip, "count": count}
        for ip, count in ip_counts.most_common()
        if count > settings.pattern_ip_min
    ]
    if not suspicious:
        return None

    return AttackPattern(
        pattern_type=PatternType.large_payload_burst,
        description="Multiple large requests from single source",
        severity=Severity.critical,
        evidence={
            "request_count": len(large),
            "suspicious_ips": suspicious,
            "time_range": {"start": large[0].timestamp, "end": large[-1].timestamp},
        },
    )


def _resource_exhaustion(timeline: List[TimelineEvent]) -> Optional[AttackPattern]:
    oom = [
        e for e in timeline
        if e.source == Source.kubernetes and e.details.get("reason") == settings.oom_reason
    ]
    high_resource = [
        e for e in timeline
        if e.event_type == EventType.performance_degradation and (
            e.details.get("cpu_percent", 0) > settings.metric_cpu_critical_percent
            or e.details.get("memory_percent", 0) > settings.metric_memory_critical_percent
        )
    ]
    if len(oom) <= settings.pattern_oom_min or len(high_resource) <= settings.pattern_high_resource_min:
        return None

    return AttackPattern(
        pattern_type=PatternType.resource_exhaustion,
        description="Service experiencing resource exhaustion with pod restarts",
        severity=Severity.critical,
        evidence={
            "oom_kills": len(oom),
            "high_resource_events": len(high_resource),
            "affected_pods": len({e.details.get("pod_name") for e in oom if e.details.get("pod_name")}),
        },
    )


def _error_rate_spike(timeline: List[TimelineEvent]) -> Optional[AttackPattern]:
    errors = [e for e in timeline if e.event_type.is_error()]
    if len(errors) <= settings.pattern_error_min:
        return None

    return AttackPattern(
        pattern_type=PatternType.error_rate_spike,
        description="Significant increase in error rate",
        severity=Severity.high,
        evidence={
            "error_count": len(errors),
            "error_types": list(dict.fromkeys(e.details["error"] for e in errors if e.details.get("error"))),
        },
    )


_MATCHERS: Dict[PatternType, Callable[[List[TimelineEvent]], Optional[AttackPattern]]] = {
    PatternType.large_payload_burst: _large_payload_burst,
    PatternType.resource_exhaustion: _resource_exhaustion,
    PatternType.error_rate_spike: _error_rate_spike,
}


def find_attack_patterns(timeline: List[TimelineEvent]) -> List[AttackPattern]:
    """Evaluate every pattern independently; several may match the same timeline."""
    matches: List[AttackPattern] = []
    for pattern_type in PatternType:
        match = _MATCHERS[pattern_type](timeline)
        if match is not None:
            matches.append(match)
    return matches
