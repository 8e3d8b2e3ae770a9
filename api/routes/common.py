"""
Shared utilities and dependencies for API route modules.

Holds the process-wide record provider and monitor created during application
startup. Routes read them through :func:`get_provider` and :func:`get_monitor`
so tests can monkeypatch either accessor with a dummy. Nothing is created on
first use: querying before startup has installed a provider raises
:class:`SnapshotNotLoaded`, which the exception decorator maps to ``503``.
In live mode every :func:`get_provider` call re-reads the request log so
queries see lines appended since startup.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import Optional

from datasources.data_config import DataSourceSettings
from datasources.exceptions import SnapshotNotLoaded
from datasources.provider import SourceRecordProvider
from services.monitor import Monitor

_provider: Optional[SourceRecordProvider] = None
_monitor: Optional[Monitor] = None


def init_provider(settings: Optional[DataSourceSettings] = None) -> SourceRecordProvider:
    global _provider
    _provider = SourceRecordProvider.from_settings(settings).load()
    return _provider


def set_provider(provider: Optional[SourceRecordProvider]) -> None:
    global _provider
    _provider = provider


def get_provider() -> SourceRecordProvider:
    if _provider is None:
        raise SnapshotNotLoaded("record provider has not been initialized")
    return _provider.refresh_live()


def set_monitor(monitor: Optional[Monitor]) -> None:
    global _monitor
    _monitor = monitor


def get_monitor() -> Monitor:
    if _monitor is None:
        raise SnapshotNotLoaded("monitor has not been initialized")
    return _monitor
