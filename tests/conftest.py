import os
import sys
from datetime import datetime, timedelta, timezone

import pytest

# ensure workspace root is on sys.path so our application packages can be imported
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from datasources.base import InMemorySource
from datasources.provider import SourceRecordProvider
from engine.enums import Source

T0 = datetime(2026, 1, 29, 14, 0, tzinfo=timezone.utc)


def at(minutes: float = 0, seconds: float = 0) -> datetime:
    return T0 + timedelta(minutes=minutes, seconds=seconds)


def iso(minutes: float = 0, seconds: float = 0) -> str:
    return at(minutes, seconds).isoformat().replace("+00:00", "Z")


def log_row(minutes=0, level="info", size=2048, ip="10.0.0.1", endpoint="/api/search",
            status=200, response_time=120, error=None, seconds=0):
    return {
        "timestamp": iso(minutes, seconds),
        "level": level,
        "endpoint": endpoint,
        "method": "POST",
        "request_size": size,
        "response_time_ms": response_time,
        "status_code": status,
        "source_ip": ip,
        "error": error,
    }


def metric_row(minutes=0, cpu=22.0, memory=30.0, p95=200.0, error_rate=0.01, service="search-api", seconds=0):
    return {
        "timestamp": iso(minutes, seconds),
        "service": service,
        "metrics": {
            "cpu_percent": cpu,
            "memory_percent": memory,
            "request_rate": 100.0,
            "response_time": {"p50": p95 / 2, "p95": p95, "p99": p95 * 1.5},
            "error_rate": error_rate,
            "active_connections": 20,
        },
    }


def gateway_row(minutes=0, size=4096, code=200, ip="10.0.0.1", endpoint="/api/search", seconds=0):
    return {
        "timestamp": iso(minutes, seconds),
        "request_id": f"req-{minutes}-{seconds}-{ip}",
        "endpoint": endpoint,
        "request_size": size,
        "response_code": code,
        "response_time_ms": 150,
        "source_ip": ip,
    }


def lifecycle_row(minutes=0, event_type="pod_restart", reason="OOMKilled", pod="search-api-1", seconds=0):
    return {
        "timestamp": iso(minutes, seconds),
        "namespace": "production",
        "pod_name": pod,
        "event_type": event_type,
        "reason": reason,
        "message": f"{pod} {reason}",
        "restart_count": 1,
    }


def make_provider(logs=(), metrics=(), gateway=(), kubernetes=(), live=False) -> SourceRecordProvider:
    return SourceRecordProvider(
        logs=InMemorySource(Source.logs, list(logs)),
        metrics=InMemorySource(Source.metrics, list(metrics)),
        gateway=InMemorySource(Source.gateway, list(gateway)),
        kubernetes=InMemorySource(Source.kubernetes, list(kubernetes)),
        live=live,
    ).load()


@pytest.fixture
def ramp_metrics():
    """15 baseline samples around 22% cpu followed by 15 samples ramping 25% to 95%."""
    rows = [metric_row(minutes=i, cpu=20.0 + (i % 6)) for i in range(15)]
    for i in range(15):
        rows.append(metric_row(minutes=15 + i, cpu=25.0 + i * 5.0))
    return rows
