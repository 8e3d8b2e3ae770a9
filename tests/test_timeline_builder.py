"""
Test cases for timeline construction, validating per-source normalization, time-range filtering, stable ordering and tolerance of malformed records.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from conftest import at, gateway_row, iso, lifecycle_row, log_row, metric_row

from engine.enums import EventType, Severity, Source
from engine.timeline import TimelineSources, build_timeline, generate_timeline_summary


def _sources(**kwargs):
    return TimelineSources(**kwargs)


def test_timeline_sorted_and_within_range():
    sources = _sources(
        logs=[log_row(8), log_row(1), log_row(30)],
        metrics=[metric_row(5, cpu=95.0)],
        gateway=[gateway_row(3, size=6_000_000)],
        kubernetes=[lifecycle_row(-5)],
    )
    timeline = build_timeline(sources, iso(0), iso(10))

    stamps = [e.timestamp for e in timeline]
    assert stamps == sorted(stamps)
    assert all(at(0) <= ts <= at(10) for ts in stamps)
    assert len(timeline) == 4


def test_range_bounds_are_inclusive():
    timeline = build_timeline(_sources(logs=[log_row(0), log_row(10)]), iso(0), iso(10))
    assert len(timeline) == 2


def test_log_records_map_to_request_or_error():
    timeline = build_timeline(
        _sources(logs=[log_row(1), log_row(2, level="error", status=500, error="Payload too large")]),
        iso(0), iso(10),
    )
    assert [e.event_type for e in timeline] == [EventType.request_logged, EventType.error_logged]
    assert [e.severity for e in timeline] == [Severity.info, Severity.high]
    assert timeline[1].details["error"] == "Payload too large"


def test_metrics_are_projected_to_degradations_only():
    timeline = build_timeline(
        _sources(metrics=[
            metric_row(1, cpu=50.0, memory=50.0, error_rate=0.05),
            metric_row(2, cpu=75.0),
            metric_row(3, cpu=91.0),
            metric_row(4, memory=86.0),
            metric_row(5, error_rate=0.2),
        ]),
        iso(0), iso(10),
    )
    assert all(e.event_type == EventType.performance_degradation for e in timeline)
    assert [e.severity for e in timeline] == [Severity.high, Severity.critical, Severity.critical, Severity.high]


def test_metric_thresholds_are_strict():
    timeline = build_timeline(_sources(metrics=[metric_row(1, cpu=70.0, memory=70.0, error_rate=0.1)]), iso(0), iso(10))
    assert timeline == []


def test_gateway_large_and_error_events():
    timeline = build_timeline(
        _sources(gateway=[
            gateway_row(1, size=5_000_000),
            gateway_row(2, size=5_000_001),
            gateway_row(3, code=503),
            gateway_row(4, code=404),
        ]),
        iso(0), iso(10),
    )
    assert [e.event_type for e in timeline] == [EventType.large_request_detected, EventType.gateway_error]
    assert [e.severity for e in timeline] == [Severity.warning, Severity.high]
    assert timeline[0].details["source_ip"] == "10.0.0.1"


def test_lifecycle_events_always_emitted():
    timeline = build_timeline(
        _sources(kubernetes=[
            lifecycle_row(1, reason="OOMKilled"),
            lifecycle_row(2, event_type="health_check_failed", reason="Unhealthy"),
        ]),
        iso(0), iso(10),
    )
    assert [e.source for e in timeline] == [Source.kubernetes, Source.kubernetes]
    assert [e.severity for e in timeline] == [Severity.critical, Severity.high]
    assert timeline[0].event_type == EventType.pod_restart


def test_ties_keep_source_arrival_order():
    sources = _sources(logs=[log_row(1)], kubernetes=[lifecycle_row(1)], gateway=[gateway_row(1, code=500)])
    timeline = build_timeline(sources, iso(0), iso(10))
    assert [e.source for e in timeline] == [Source.logs, Source.gateway, Source.kubernetes]


def test_malformed_records_are_skipped(caplog):
    bad_ts = log_row(2)
    bad_ts["timestamp"] = "not-a-time"
    missing = log_row(3)
    del missing["method"]
    timeline = build_timeline(_sources(logs=[log_row(1), bad_ts, missing, log_row(4)]), iso(0), iso(10))
    assert len(timeline) == 2
    assert "Skipping malformed" in caplog.text


def test_absent_sources_and_mapping_input():
    assert build_timeline(_sources(), iso(0), iso(10)) == []
    timeline = build_timeline({Source.logs: [log_row(1)], "gateway": None}, iso(0), iso(10))
    assert len(timeline) == 1


def test_build_is_idempotent():
    sources = _sources(
        logs=[log_row(i, ip=f"10.0.0.{i}") for i in range(5)],
        metrics=[metric_row(2, cpu=92.0)],
        kubernetes=[lifecycle_row(3)],
    )
    assert build_timeline(sources, iso(0), iso(10)) == build_timeline(sources, iso(0), iso(10))


def test_summary_counts():
    timeline = build_timeline(
        _sources(logs=[log_row(1), log_row(2, level="error", status=500)], kubernetes=[lifecycle_row(3)]),
        iso(0), iso(10),
    )
    summary = generate_timeline_summary(timeline)
    assert summary.total_events == 3
    assert summary.by_source == {"logs": 2, "kubernetes": 1}
    assert summary.by_severity == {"info": 1, "warning": 0, "high": 1, "critical": 1}
    assert summary.by_event_type["pod_restart"] == 1
    assert summary.time_range.start == at(1)
    assert summary.time_range.end == at(3)


def test_summary_of_empty_timeline():
    summary = generate_timeline_summary([])
    assert summary.total_events == 0
    assert summary.time_range.start is None
