"""
Base record source and the shared query contract for all event sources.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence

from datasources.exceptions import SnapshotNotLoaded, UnsupportedFilter
from datasources.helpers import TimestampLike, parse_optional_timestamp
from datasources.records import RECORD_MODELS, SourceRecord, parse_records
from engine.enums import Source

log = logging.getLogger(__name__)


def _logs_filter(records: List[Any], level=None, endpoint=None, source_ip=None, limit=None) -> List[Any]:
    level_value = str(getattr(level, "value", level)).lower() if level is not None else None
    if level_value is not None and level_value != "all":
        records = [r for r in records if r.level.value == level_value]
    if endpoint is not None:
        records = [r for r in records if r.endpoint == endpoint]
    if source_ip is not None:
        records = [r for r in records if r.source_ip == source_ip]
    if limit:
        records = records[: int(limit)]
    return records


def _metrics_filter(records: List[Any], service=None) -> List[Any]:
    if service is not None:
        records = [r for r in records if r.service == service]
    return records


def _gateway_filter(records: List[Any], endpoint=None, source_ip=None, min_request_size=None) -> List[Any]:
    if endpoint is not None:
        records = [r for r in records if r.endpoint == endpoint]
    if source_ip is not None:
        records = [r for r in records if r.source_ip == source_ip]
    if min_request_size:
        records = [r for r in records if r.request_size >= int(min_request_size)]
    return records


def _lifecycle_filter(records: List[Any], event_type=None, namespace=None, pod_name=None) -> List[Any]:
    if event_type is not None:
        type_value = getattr(event_type, "value", event_type)
        records = [r for r in records if r.event_type.value == type_value]
    if namespace is not None:
        records = [r for r in records if r.namespace == namespace]
    if pod_name is not None:
        records = [r for r in records if pod_name in r.pod_name]
    return records


_FILTERS: Dict[Source, Callable[..., List[Any]]] = {
    Source.logs: _logs_filter,
    Source.metrics: _metrics_filter,
    Source.gateway: _gateway_filter,
    Source.kubernetes: _lifecycle_filter,
}

_FILTER_KEYS: Dict[Source, frozenset] = {
    Source.logs: frozenset({"level", "endpoint", "source_ip", "limit"}),
    Source.metrics: frozenset({"service"}),
    Source.gateway: frozenset({"endpoint", "source_ip", "min_request_size"}),
    Source.kubernetes: frozenset({"event_type", "namespace", "pod_name"}),
}


def in_range(ts: datetime, start: Optional[datetime], end: Optional[datetime]) -> bool:
    if start is not None and ts < start:
        return False
    if end is not None and ts > end:
        return False
    return True


class RecordSource(ABC):
    """A snapshot of one source's records with a time-range query contract.

    Records are only available after an explicit :meth:`load`; querying an
    unloaded source raises :class:`SnapshotNotLoaded`.
    """

    def __init__(self, kind: Source) -> None:
        self.kind = kind
        self.model = RECORD_MODELS[kind]
        self._records: Optional[List[SourceRecord]] = None

    @abstractmethod
    def _read(self) -> List[SourceRecord]: ...

    @property
    def loaded(self) -> bool:
        return self._records is not None

    def load(self) -> RecordSource:
        self._records = self._read()
        log.debug("%s source loaded %d record(s)", self.kind.value, len(self._records))
        return self

    def refresh(self) -> RecordSource:
        return self.load()

    def all(self) -> List[SourceRecord]:
        if self._records is None:
            raise SnapshotNotLoaded(f"{self.kind.value} source queried before load()")
        return list(self._records)

    def query(
        self,
        start: Optional[TimestampLike] = None,
        end: Optional[TimestampLike] = None,
        **filters: Any,
    ) -> List[SourceRecord]:
        unknown = set(filters) - _FILTER_KEYS[self.kind]
        if unknown:
            raise UnsupportedFilter(f"{self.kind.value} source does not support filters: {sorted(unknown)}")

        start_ts = parse_optional_timestamp(start)
        end_ts = parse_optional_timestamp(end)
        results = [r for r in self.all() if in_range(r.timestamp, start_ts, end_ts)]
        active = {k: v for k, v in filters.items() if v is not None}
        return _FILTERS[self.kind](results, **active)


class InMemorySource(RecordSource):
    def __init__(self, kind: Source, rows: Optional[Sequence[Any]] = None) -> None:
        super().__init__(kind)
        self._rows = list(rows or [])

    def _read(self) -> List[SourceRecord]:
        return parse_records(self.model, self._rows, self.kind.value)

    def extend(self, rows: Sequence[Any]) -> None:
        self._rows.extend(rows)
