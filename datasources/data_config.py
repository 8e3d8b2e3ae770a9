"""
Data source settings: locations of the static datasets, the live request log and the tool-chain endpoint.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings
from config import (
    APPLICATION_LOGS_FILE,
    METRICS_FILE,
    GATEWAY_LOGS_FILE,
    LIFECYCLE_EVENTS_FILE,
    DEEPTRACE_DATA_DIR,
    DEEPTRACE_LIVE_LOG_FILE,
    DEEPTRACE_USE_LIVE_DATA,
    DEEPTRACE_TOOLS_URL,
    DEEPTRACE_CONNECTOR_TIMEOUT,
)


class DataSourceSettings(BaseSettings):
    data_dir: str = DEEPTRACE_DATA_DIR
    application_logs_file: str = APPLICATION_LOGS_FILE
    metrics_file: str = METRICS_FILE
    gateway_logs_file: str = GATEWAY_LOGS_FILE
    lifecycle_events_file: str = LIFECYCLE_EVENTS_FILE
    live_log_file: str = DEEPTRACE_LIVE_LOG_FILE
    use_live_data: bool = DEEPTRACE_USE_LIVE_DATA
    tools_url: str = DEEPTRACE_TOOLS_URL
    connector_timeout: int = DEEPTRACE_CONNECTOR_TIMEOUT

    @field_validator("data_dir", "tools_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        value = str(v or "").strip()
        return value.rstrip("/") or value

    @field_validator("connector_timeout", mode="before")
    @classmethod
    def validate_timeout(cls, v: int) -> int:
        value = int(v)
        if value <= 0:
            raise ValueError(f"connector_timeout must be positive: {value!r}")
        return value

    def path_for(self, name: str) -> Path:
        path = Path(name)
        if path.is_absolute():
            return path
        return Path(self.data_dir) / path

    model_config = {"env_prefix": "DEEPTRACE_", "extra": "ignore"}
