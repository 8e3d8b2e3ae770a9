"""
Entry point for the DeepTrace correlation and anomaly engine API server.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import uvicorn
from fastapi import FastAPI

from api.routes import router
from api.routes.common import init_provider, set_monitor, set_provider
from config import settings
from connectors.toolchain import ToolChainInvestigator
from datasources.data_config import DataSourceSettings
from services.monitor import Monitor

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    stream=sys.stdout,
)
log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    ds_settings = DataSourceSettings()
    provider = init_provider(ds_settings)
    monitor = Monitor(
        provider,
        investigator=ToolChainInvestigator.from_url(ds_settings.tools_url, timeout=ds_settings.connector_timeout),
    )
    set_monitor(monitor)

    monitor_task: Optional[asyncio.Task] = None
    if settings.monitor_enabled:
        monitor_task = asyncio.create_task(monitor.run_forever())
    else:
        log.info("Background monitor disabled; checks run on demand via /api/v1/monitor/check")
    try:
        yield
    finally:
        monitor.stop()
        if monitor_task is not None:
            monitor_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await monitor_task
        set_monitor(None)
        set_provider(None)


app = FastAPI(
    title="DeepTrace Correlation Engine",
    description="Incident timeline correlation, baseline-relative anomaly detection and attack pattern matching.",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(router, prefix="/api/v1")


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=4322,
        log_level="info",
        access_log=True,
    )
