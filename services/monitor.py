"""
Anomaly monitor: a timer-driven state machine that checks a trailing window for metric and log anomalies and hands flagged windows to an investigator.

Each tick moves IDLE to CHECKING, evaluates the window, and either returns to
IDLE ("healthy") or moves to INVESTIGATING and awaits the investigator under a
timeout. Timeouts and investigator failures are logged and the monitor always
returns to IDLE; checks never overlap. A scheduled tick that finds a check
already running (an on-demand one) is skipped, and an unexpected error in a
tick is logged without stopping the loop.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from api.responses import CheckResult, InvestigationReport, MonitorStatus, TimeRange
from config import settings
from datasources.exceptions import DataSourceError
from datasources.helpers import parse_timestamp, to_iso
from datasources.provider import SourceRecordProvider
from engine.enums import LogLevel, MonitorState
from services.anomaly_service import detect_anomalies, payload_threshold
from services.investigation import InvestigationRequest, Investigator, batch_logs, filter_anomalous_logs

log = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Monitor:
    def __init__(
        self,
        provider: SourceRecordProvider,
        investigator: Optional[Investigator] = None,
        clock: Callable[[], datetime] = _utcnow,
        interval_seconds: Optional[float] = None,
        timeout_seconds: Optional[float] = None,
    ):
        self.provider = provider
        self.investigator = investigator
        self.clock = clock
        self.interval_seconds = settings.monitor_interval_seconds if interval_seconds is None else interval_seconds
        self.timeout_seconds = (
            settings.monitor_investigation_timeout_seconds if timeout_seconds is None else timeout_seconds
        )
        self.state = MonitorState.idle
        self.check_count = 0
        self.last_check: Optional[CheckResult] = None
        self.last_report: Optional[InvestigationReport] = None
        self._stop = asyncio.Event()
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def window(self) -> TimeRange:
        static_start, static_end = settings.monitor_static_window_start, settings.monitor_static_window_end
        if not self.provider.live and static_start and static_end:
            return TimeRange(start=parse_timestamp(static_start), end=parse_timestamp(static_end))
        end = self.clock()
        return TimeRange(start=end - timedelta(minutes=settings.monitor_window_minutes), end=end)

    def status(self) -> MonitorStatus:
        return MonitorStatus(
            state=self.state,
            running=self._running,
            check_count=self.check_count,
            live_data=self.provider.live,
            last_check=self.last_check,
        )

    async def check(self) -> CheckResult:
        if self.state != MonitorState.idle:
            raise RuntimeError(f"check requested while monitor is {self.state.value}")

        self.check_count += 1
        self.state = MonitorState.checking
        window = self.window()
        result = CheckResult(check_number=self.check_count, window=window)
        try:
            result = await self._evaluate(result)
        finally:
            self.state = MonitorState.idle
            self.last_check = result
        return result

    async def _evaluate(self, result: CheckResult) -> CheckResult:
        start, end = result.window.start, result.window.end
        log.info("Check #%d: window %s to %s", result.check_number, to_iso(start), to_iso(end))

        try:
            self.provider.refresh()
            scan = detect_anomalies(self.provider, start, end)
            logs = self.provider.query_logs(start, end)
        except DataSourceError as exc:
            log.error("Check #%d: data source error: %s", result.check_number, exc)
            return result.model_copy(update={"outcome": "source_error"})

        threshold = payload_threshold(self.provider)
        large = [r for r in logs if r.request_size > threshold]
        errors = [r for r in logs if r.level == LogLevel.error]
        error_bound = settings.monitor_error_log_bound_live if self.provider.live else settings.monitor_error_log_bound_static

        has_metric = scan.available and len(scan.anomalies) >= settings.monitor_min_metric_anomalies
        has_log = len(large) > 0 or len(errors) > error_bound
        result = result.model_copy(update={
            "metric_anomaly_count": len(scan.anomalies),
            "metric_detection_available": scan.available,
            "large_payload_count": len(large),
            "error_count": len(errors),
            "has_metric_anomalies": has_metric,
            "has_log_anomalies": has_log,
        })
        log.info(
            "Check #%d: metric_anomalies=%d (available=%s) large_payloads=%d errors=%d",
            result.check_number, len(scan.anomalies), scan.available, len(large), len(errors),
        )

        if not (has_metric or has_log):
            log.info("Check #%d: healthy", result.check_number)
            return result

        if self.investigator is None:
            log.warning("Check #%d: anomalies detected but no investigator configured", result.check_number)
            return result.model_copy(update={"outcome": "anomalous"})

        request = InvestigationRequest(
            window=result.window,
            metric_anomaly_count=len(scan.anomalies),
            large_payload_count=len(large),
            error_count=len(errors),
            batches=batch_logs(filter_anomalous_logs(errors, large)),
        )
        return await self._investigate(result, request)

    async def _investigate(self, result: CheckResult, request: InvestigationRequest) -> CheckResult:
        self.state = MonitorState.investigating
        log.info(
            "Check #%d: investigating %d anomalous log(s) in %d batch(es)",
            result.check_number, request.analyzed_log_count, len(request.batches),
        )
        try:
            self.last_report = await asyncio.wait_for(
                self.investigator.investigate(request), timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            log.error("Check #%d: investigation timed out after %ss", result.check_number, self.timeout_seconds)
            return result.model_copy(update={"outcome": "investigation_timeout"})
        except Exception:
            log.exception("Check #%d: investigation failed", result.check_number)
            return result.model_copy(update={"outcome": "investigation_failed"})

        return result.model_copy(update={"investigated": True, "outcome": "investigated"})

    async def _tick(self) -> None:
        if self.state != MonitorState.idle:
            log.info("Skipping scheduled check: monitor is %s", self.state.value)
            return
        try:
            await self.check()
        except Exception:
            log.exception("Check #%d failed; monitor stays up", self.check_count)

    async def run_forever(self) -> None:
        self._running = True
        self._stop.clear()
        log.info("Monitor started: interval=%ss live=%s", self.interval_seconds, self.provider.live)
        try:
            while not self._stop.is_set():
                await self._tick()
                try:
                    await asyncio.wait_for(self._stop.wait(), timeout=self.interval_seconds)
                except asyncio.TimeoutError:
                    continue
        finally:
            self._running = False
            log.info("Monitor stopped after %d check(s)", self.check_count)

    def stop(self) -> None:
        self._stop.set()
