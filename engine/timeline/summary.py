from __future__ import annotations

from collections import Counter
from typing import List

from api.responses import TimeRange, TimelineEvent, TimelineSummary
from engine.enums import Severity


def generate_timeline_summary(timeline: List[TimelineEvent]) -> TimelineSummary:
    by_source: Counter[str] = Counter()
    by_event_type: Counter[str] = Counter()
    by_severity = {s.value: 0 for s in Severity}

    for event in timeline:
        by_source[event.source.value] += 1
        by_event_type[event.event_type.value] += 1
        by_severity[event.severity.value] += 1

    return TimelineSummary(
        total_events=len(timeline),
        by_source=dict(by_source),
        by_severity=by_severity,
        by_event_type=dict(by_event_type),
        time_range=TimeRange(
            start=timeline[0].timestamp if timeline else None,
            end=timeline[-1].timestamp if timeline else None,
        ),
    )
