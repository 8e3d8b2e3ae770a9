import pytest

from conftest import log_row

from datasources.records import LogRecord, parse_records
from engine.anomaly import compute_live_baseline, detect_live_anomalies
from engine.enums import LiveFindingType, Severity
from engine.exceptions import BaselineUnavailable


def _logs(rows):
    return parse_records(LogRecord, rows)


@pytest.fixture
def normal_logs():
    return _logs([log_row(i * 0.1, size=1000, response_time=100) for i in range(20)])


def test_live_baseline_uses_leading_fraction(normal_logs):
    extra = _logs([log_row(5, size=9_000_000, response_time=9000)])
    baseline = compute_live_baseline(normal_logs + extra)
    # floor(21 * 0.2) = 4 leading records
    assert baseline.sample_count == 4
    assert baseline.avg_request_size == 1000.0
    assert baseline.avg_response_time == 100.0
    assert baseline.error_rate == 0.0


def test_live_baseline_absent_for_short_log():
    assert compute_live_baseline(_logs([log_row(0)] * 4)) is None
    assert compute_live_baseline([]) is None


def test_missing_live_baseline_raises():
    with pytest.raises(BaselineUnavailable):
        detect_live_anomalies([], None)


def test_live_findings(normal_logs):
    baseline = compute_live_baseline(normal_logs)
    window = _logs(
        [log_row(10, size=20_000, ip="6.6.6.6")]
        + [log_row(11, response_time=600) for _ in range(6)]
        + [log_row(12, level="error", status=500) for _ in range(6)]
    )
    findings = {f.type: f for f in detect_live_anomalies(window, baseline)}

    burst = findings[LiveFindingType.large_payload_burst]
    assert burst.count == 1
    assert burst.severity == Severity.critical
    assert burst.details["sample_ips"] == ["6.6.6.6"]

    slow = findings[LiveFindingType.response_time_degradation]
    assert slow.count == 6
    assert slow.severity == Severity.high

    spike = findings[LiveFindingType.error_rate_spike]
    assert spike.count == 6


def test_live_thresholds_require_minimum_counts(normal_logs):
    baseline = compute_live_baseline(normal_logs)
    window = _logs(
        [log_row(11, response_time=600) for _ in range(5)]
        + [log_row(12, level="error", status=500) for _ in range(5)]
    )
    assert detect_live_anomalies(window, baseline) == []


def test_empty_window_has_no_findings(normal_logs):
    assert detect_live_anomalies([], compute_live_baseline(normal_logs)) == []
