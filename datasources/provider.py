"""
Provider bundling the four record sources behind one query contract.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from .base import RecordSource
from .data_config import DataSourceSettings
from .factory import DataSourceFactory
from .helpers import TimestampLike
from engine.enums import Source

log = logging.getLogger(__name__)


class SourceRecordProvider:
    def __init__(
        self,
        logs: RecordSource,
        metrics: RecordSource,
        gateway: RecordSource,
        kubernetes: RecordSource,
        live: bool = False,
    ):
        self.live = live
        self.sources: Dict[Source, RecordSource] = {
            Source.logs: logs,
            Source.metrics: metrics,
            Source.gateway: gateway,
            Source.kubernetes: kubernetes,
        }

    @classmethod
    def from_settings(cls, settings: Optional[DataSourceSettings] = None) -> SourceRecordProvider:
        settings = settings or DataSourceSettings()
        return cls(
            logs=DataSourceFactory.create_logs(settings),
            metrics=DataSourceFactory.create_metrics(settings),
            gateway=DataSourceFactory.create_gateway(settings),
            kubernetes=DataSourceFactory.create_lifecycle(settings),
            live=settings.use_live_data,
        )

    @property
    def logs(self) -> RecordSource:
        return self.sources[Source.logs]

    @property
    def metrics(self) -> RecordSource:
        return self.sources[Source.metrics]

    @property
    def gateway(self) -> RecordSource:
        return self.sources[Source.gateway]

    @property
    def kubernetes(self) -> RecordSource:
        return self.sources[Source.kubernetes]

    def load(self) -> SourceRecordProvider:
        for source in self.sources.values():
            source.load()
        log.info(
            "Provider loaded (live=%s): %s",
            self.live,
            ", ".join(f"{k.value}={len(v.all())}" for k, v in self.sources.items()),
        )
        return self

    def refresh(self) -> SourceRecordProvider:
        for source in self.sources.values():
            source.refresh()
        return self

    def refresh_live(self) -> SourceRecordProvider:
        """Re-read the append-only request log; static snapshots stay as loaded."""
        if self.live:
            self.logs.refresh()
        return self

    def query(
        self,
        kind: Source,
        start: Optional[TimestampLike] = None,
        end: Optional[TimestampLike] = None,
        **filters: Any,
    ) -> List[Any]:
        return self.sources[kind].query(start=start, end=end, **filters)

    def query_logs(self, start=None, end=None, **filters: Any) -> List[Any]:
        return self.logs.query(start=start, end=end, **filters)

    def query_metrics(self, start=None, end=None, service: Optional[str] = None) -> List[Any]:
        return self.metrics.query(start=start, end=end, service=service)

    def query_gateway(self, start=None, end=None, **filters: Any) -> List[Any]:
        return self.gateway.query(start=start, end=end, **filters)

    def query_lifecycle(self, start=None, end=None, **filters: Any) -> List[Any]:
        return self.kubernetes.query(start=start, end=end, **filters)
