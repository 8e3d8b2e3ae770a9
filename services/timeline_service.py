"""
Composite incident timeline service: queries the requested sources for a time range, builds the merged timeline and derives its summary, attack patterns and correlation windows.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from api.responses import IncidentTimeline
from config import SOURCE_ALL
from datasources.helpers import TimestampLike, parse_timestamp, to_iso
from datasources.provider import SourceRecordProvider
from engine.correlation import identify_correlation_windows
from engine.enums import Source
from engine.patterns import find_attack_patterns
from engine.timeline import TimelineSources, build_timeline, generate_timeline_summary

log = logging.getLogger(__name__)


def resolve_sources(sources: Optional[Iterable[str]] = None) -> List[Source]:
    requested = [str(getattr(s, "value", s)).lower() for s in (sources or [SOURCE_ALL])]
    if SOURCE_ALL in requested:
        return list(Source)
    return [s for s in Source if s.value in requested]


def collect_sources(
    provider: SourceRecordProvider,
    start: TimestampLike,
    end: TimestampLike,
    sources: Optional[Iterable[str]] = None,
) -> TimelineSources:
    selected = resolve_sources(sources)
    return TimelineSources(**{
        kind.value: provider.query(kind, start=start, end=end) for kind in selected
    })


def fetch_incident_timeline(
    provider: SourceRecordProvider,
    start: TimestampLike,
    end: TimestampLike,
    sources: Optional[Iterable[str]] = None,
    window_minutes: Optional[float] = None,
) -> IncidentTimeline:
    start_ts, end_ts = parse_timestamp(start), parse_timestamp(end)
    selected = resolve_sources(sources)
    timeline = build_timeline(collect_sources(provider, start_ts, end_ts, [s.value for s in selected]), start_ts, end_ts)
    patterns = find_attack_patterns(timeline)
    windows = identify_correlation_windows(timeline, window_minutes)

    log.info(
        "Incident timeline %s..%s: %d event(s), %d pattern(s), %d window(s)",
        to_iso(start_ts), to_iso(end_ts), len(timeline), len(patterns), len(windows),
    )
    return IncidentTimeline(
        timeline=timeline,
        summary=generate_timeline_summary(timeline),
        attack_patterns=patterns,
        correlation_windows=[w.view() for w in windows],
        metadata={
            "time_range": f"{to_iso(start_ts)} to {to_iso(end_ts)}",
            "sources_queried": [s.value for s in selected],
            "total_events": len(timeline),
        },
    )
