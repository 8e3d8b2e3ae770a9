from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional

import httpx

from api.responses import InvestigationReport
from config import SOURCE_ALL, TOOL_NAMES, settings
from connectors.exceptions import ToolCallFailed, ToolCallTimeout, ToolChainUnavailable
from datasources.helpers import to_iso
from datasources.retry import retry
from engine.enums import Severity
from services.investigation import InvestigationRequest

log = logging.getLogger(__name__)


class ToolChainClient:
    def __init__(
        self,
        base_url: str,
        timeout: float = 30,
        attempts: Optional[int] = None,
        delay: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = str(base_url).rstrip("/")
        self.timeout = timeout
        self.transport = transport
        self.call = retry(
            attempts=attempts or settings.tool_retry_attempts,
            delay=settings.tool_retry_delay_seconds if delay is None else delay,
            exceptions=(ToolCallTimeout, ToolChainUnavailable),
        )(self._call_once)

    def url_for(self, tool: str) -> str:
        return f"{self.base_url}/tools/{tool}"

    async def _call_once(self, tool: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        url = self.url_for(tool)
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                resp = await client.post(url, json=payload)
                resp.raise_for_status()
                body = resp.json()
        except httpx.HTTPStatusError as e:
            raise ToolCallFailed(f"{tool} failed [{e.response.status_code}]: {e.response.text}") from e
        except httpx.TimeoutException as e:
            raise ToolCallTimeout(f"{tool} timed out") from e
        except httpx.RequestError as e:
            raise ToolChainUnavailable(f"Cannot reach tool chain at {url}") from e
        except ValueError as e:
            raise ToolCallFailed(f"{tool} returned a non-JSON body") from e

        if isinstance(body, dict) and body.get("error"):
            raise ToolCallFailed(f"{tool}: {body['error']}")
        return body


class ToolChainInvestigator:
    """Drives the four investigation tools for a flagged window, in order."""

    def __init__(self, client: ToolChainClient):
        self.client = client

    @classmethod
    def from_url(cls, base_url: str, timeout: float = 30) -> ToolChainInvestigator:
        return cls(ToolChainClient(base_url, timeout=timeout))

    async def investigate(self, request: InvestigationRequest) -> InvestigationReport:
        window = {"start": to_iso(request.window.start), "end": to_iso(request.window.end)}
        report = InvestigationReport(
            window=request.window,
            analyzed_log_count=request.analyzed_log_count,
            batch_count=len(request.batches),
        )

        timeline = await self.client.call(TOOL_NAMES["timeline"], {
            "start_time": window["start"],
            "end_time": window["end"],
            "sources": [SOURCE_ALL],
        })
        log.info("Timeline built: %s event(s)", (timeline.get("summary") or {}).get("total_events", 0))
        report = report.model_copy(update={"timeline": timeline})

        if not request.batches:
            log.info("No anomalous logs in window; skipping log analysis")
            return report

        log_analysis = await self.client.call(TOOL_NAMES["logs"], {
            "time_range": window,
            "log_level": "error",
            "limit": settings.investigation_batch_size,
        })
        attack_type = (log_analysis.get("ai_analysis") or {}).get("attack_type") or "Unknown"

        root_cause = await self.client.call(TOOL_NAMES["root_cause"], {
            "incident_id": f"INC-{int(time.time() * 1000)}",
            "include_metrics": True,
            "include_logs": True,
            "time_range": window,
        })

        remediation = await self.client.call(TOOL_NAMES["remediation"], {
            "root_cause": root_cause.get("root_cause"),
            "attack_type": attack_type,
            "severity": Severity.critical.value,
            "include_commands": True,
        })

        log.info("Investigation complete: attack_type=%s root_cause=%s", attack_type, root_cause.get("root_cause"))
        return report.model_copy(update={
            "log_analysis": log_analysis,
            "root_cause": root_cause,
            "remediation": remediation,
        })
