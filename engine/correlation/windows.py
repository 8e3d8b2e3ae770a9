"""
Correlation windowing that groups a time-ordered event timeline into temporally dense clusters, extending the current window while each next event falls within the configured gap of the window's latest event.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Tuple

from api.responses import CorrelationWindowView, TimelineEvent
from config import settings
from engine.enums import Severity


@dataclass(frozen=True)
class CorrelationWindow:
    start: datetime
    end: datetime
    events: Tuple[TimelineEvent, ...] = ()
    severity_counts: Dict[Severity, int] = field(default_factory=Severity.empty_counts)

    @property
    def event_count(self) -> int:
        return len(self.events)

    def view(self) -> CorrelationWindowView:
        return CorrelationWindowView(
            start=self.start,
            end=self.end,
            event_count=self.event_count,
            severity_distribution={s.value: c for s, c in self.severity_counts.items()},
        )


def _close(events: List[TimelineEvent]) -> CorrelationWindow:
    counts = Severity.empty_counts()
    for e in events:
        counts[e.severity] += 1
    return CorrelationWindow(
        start=events[0].timestamp,
        end=events[-1].timestamp,
        events=tuple(events),
        severity_counts=counts,
    )


def identify_correlation_windows(
    timeline: List[TimelineEvent],
    window_minutes: float | None = None,
) -> List[CorrelationWindow]:
    if window_minutes is None:
        window_minutes = settings.correlation_window_minutes
    if not timeline:
        return []

    windows: List[CorrelationWindow] = []
    current: List[TimelineEvent] = [timeline[0]]

    for event in timeline[1:]:
        gap_minutes = (event.timestamp - current[-1].timestamp).total_seconds() / 60.0
        if gap_minutes <= window_minutes:
            current.append(event)
        else:
            windows.append(_close(current))
            current = [event]

    windows.append(_close(current))
    return windows
