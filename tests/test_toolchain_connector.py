import json

import httpx
import pytest

from conftest import at, log_row

from api.responses import TimeRange
from config import settings
from connectors.exceptions import ToolCallFailed, ToolCallTimeout, ToolChainUnavailable
from connectors.toolchain import ToolChainClient, ToolChainInvestigator
from datasources.records import LogRecord, parse_records
from services.investigation import InvestigationRequest

RESPONSES = {
    "fetch_incident_timeline": {"summary": {"total_events": 5}, "timeline": []},
    "analyze_logs": {"ai_analysis": {"attack_type": "Payload flood"}},
    "identify_root_cause": {"root_cause": "Unbounded request bodies"},
    "suggest_remediation": {"immediate_actions": [{"action": "Block 6.6.6.6"}]},
}


def make_client(handler, attempts=2):
    return ToolChainClient("http://tools.local/", attempts=attempts, delay=0, transport=httpx.MockTransport(handler))


def _request(with_logs=True):
    batches = [parse_records(LogRecord, [log_row(1, level="error")])] if with_logs else []
    return InvestigationRequest(window=TimeRange(start=at(0), end=at(5)), error_count=1, batches=batches)


@pytest.mark.asyncio
async def test_investigator_drives_four_tools_in_order(monkeypatch):
    monkeypatch.setattr(settings, "investigation_batch_size", 25)
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        tool = request.url.path.rsplit("/", 1)[-1]
        calls.append((tool, json.loads(request.content)))
        return httpx.Response(200, json=RESPONSES[tool])

    report = await ToolChainInvestigator(make_client(handler)).investigate(_request())

    assert [c[0] for c in calls] == list(RESPONSES)
    assert calls[0][1] == {
        "start_time": "2026-01-29T14:00:00.000Z",
        "end_time": "2026-01-29T14:05:00.000Z",
        "sources": ["all"],
    }
    assert calls[1][1]["log_level"] == "error"
    assert calls[1][1]["limit"] == 25
    assert calls[3][1]["attack_type"] == "Payload flood"
    assert calls[3][1]["root_cause"] == "Unbounded request bodies"
    assert report.root_cause == RESPONSES["identify_root_cause"]
    assert report.analyzed_log_count == 1
    assert report.batch_count == 1


@pytest.mark.asyncio
async def test_investigator_stops_after_timeline_without_logs():
    calls = []

    def handler(request):
        calls.append(request.url.path)
        return httpx.Response(200, json=RESPONSES["fetch_incident_timeline"])

    report = await ToolChainInvestigator(make_client(handler)).investigate(_request(with_logs=False))
    assert calls == ["/tools/fetch_incident_timeline"]
    assert report.timeline["summary"]["total_events"] == 5
    assert report.log_analysis == {}


@pytest.mark.asyncio
async def test_http_error_is_not_retried():
    calls = []

    def handler(request):
        calls.append(1)
        return httpx.Response(500, text="boom")

    with pytest.raises(ToolCallFailed):
        await make_client(handler).call("analyze_logs", {})
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_timeout_is_retried_then_raised():
    calls = []

    def handler(request):
        calls.append(1)
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(ToolCallTimeout):
        await make_client(handler, attempts=3).call("analyze_logs", {})
    assert len(calls) == 3


@pytest.mark.asyncio
async def test_unreachable_tool_chain():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(ToolChainUnavailable):
        await make_client(handler, attempts=1).call("analyze_logs", {})


@pytest.mark.asyncio
async def test_error_body_raises():
    def handler(request):
        return httpx.Response(200, json={"error": "Failed to fetch incident timeline: bad range"})

    with pytest.raises(ToolCallFailed):
        await make_client(handler).call("fetch_incident_timeline", {})


def test_url_for_strips_trailing_slash():
    client = make_client(lambda r: httpx.Response(200, json={}))
    assert client.url_for("analyze_logs") == "http://tools.local/tools/analyze_logs"
