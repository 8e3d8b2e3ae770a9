import pytest

from conftest import at, gateway_row, iso, lifecycle_row, log_row, make_provider, metric_row

from config import settings
from engine.enums import AnomalyType, PatternType, Source
from services import anomaly_service
from services.timeline_service import collect_sources, fetch_incident_timeline, resolve_sources


@pytest.fixture
def reference_window(monkeypatch):
    monkeypatch.setattr(settings, "baseline_reference_start", iso(0))
    monkeypatch.setattr(settings, "baseline_reference_end", iso(14))


def test_resolve_sources():
    assert resolve_sources(None) == list(Source)
    assert resolve_sources(["all"]) == list(Source)
    assert resolve_sources(["logs", "kubernetes"]) == [Source.logs, Source.kubernetes]


def test_collect_sources_only_queries_requested():
    provider = make_provider(logs=[log_row(1)], kubernetes=[lifecycle_row(2)])
    sources = collect_sources(provider, iso(0), iso(5), ["kubernetes"])
    assert sources.logs is None
    assert len(sources.kubernetes) == 1


def test_fetch_incident_timeline_composite():
    logs = [log_row(i * 0.2, level="error", status=500, error="boom") for i in range(21)]
    provider = make_provider(logs=logs, gateway=[gateway_row(30, size=6_000_000)])
    result = fetch_incident_timeline(provider, iso(0), iso(20))

    assert result.summary.total_events == 21
    assert [p.pattern_type for p in result.attack_patterns] == [PatternType.error_rate_spike]
    assert len(result.correlation_windows) == 1
    assert result.correlation_windows[0].event_count == 21
    assert result.metadata["total_events"] == 21
    assert result.metadata["sources_queried"] == ["logs", "metrics", "gateway", "kubernetes"]
    assert result.metadata["time_range"] == "2026-01-29T14:00:00.000Z to 2026-01-29T14:20:00.000Z"


def test_fetch_incident_timeline_empty_window():
    result = fetch_incident_timeline(make_provider(), iso(0), iso(5), ["logs"])
    assert result.timeline == []
    assert result.attack_patterns == []
    assert result.correlation_windows == []


def test_get_baseline_uses_reference_window(ramp_metrics, reference_window):
    provider = make_provider(metrics=ramp_metrics)
    baseline = anomaly_service.get_baseline(provider)
    assert baseline.service == settings.default_service
    assert baseline.cpu_percent == pytest.approx(22.2)


def test_detect_anomalies_scan(ramp_metrics, reference_window):
    provider = make_provider(metrics=ramp_metrics)
    scan = anomaly_service.detect_anomalies(provider, iso(15), iso(29))
    assert scan.available
    assert scan.baseline["sample_count"] == 15
    assert scan.anomalies[0].type == AnomalyType.cpu_spike
    assert scan.anomalies[0].timestamp == at(19)


def test_detect_anomalies_without_baseline_is_unavailable(reference_window):
    provider = make_provider(metrics=[metric_row(20, cpu=99.0)])
    scan = anomaly_service.detect_anomalies(provider, iso(15), iso(29))
    assert not scan.available
    assert scan.anomalies == []
    assert scan.baseline is None
    assert "no baseline" in scan.reason


def test_payload_threshold_depends_on_live_flag():
    logs = [log_row(1, size=2_000_000)]
    assert anomaly_service.detect_payload_anomalies(make_provider(logs=logs), iso(0), iso(5)) == []
    live = anomaly_service.detect_payload_anomalies(make_provider(logs=logs, live=True), iso(0), iso(5))
    assert len(live) == 1


def test_payload_anomalies_include_gateway():
    provider = make_provider(logs=[log_row(2, size=6_000_000)], gateway=[gateway_row(1, size=7_000_000)])
    found = anomaly_service.detect_payload_anomalies(provider, iso(0), iso(5), include_gateway=True)
    assert [a.source for a in found] == [Source.gateway, Source.logs]


def test_detect_live_unavailable_for_empty_log():
    scan = anomaly_service.detect_live(make_provider(live=True), iso(0), iso(5))
    assert not scan.available
    assert scan.findings == []
