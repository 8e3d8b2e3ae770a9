"""
Restart summary over orchestration lifecycle events, counting pod restarts, out-of-memory kills and the distinct pods affected.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import Sequence

from api.responses import RestartEntry, RestartSummary
from config import settings
from datasources.records import LifecycleEvent
from engine.enums import LifecycleEventType


def restart_summary(events: Sequence[LifecycleEvent]) -> RestartSummary:
    restarts = [e for e in events if e.event_type == LifecycleEventType.pod_restart]
    return RestartSummary(
        total_restarts=len(restarts),
        oom_kills=sum(1 for e in restarts if e.reason == settings.oom_reason),
        pods_affected=len({e.pod_name for e in restarts}),
        restart_timeline=[
            RestartEntry(timestamp=e.timestamp, pod_name=e.pod_name, reason=e.reason)
            for e in restarts
        ],
    )
