from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from config import SOURCE_ALL
from datasources.helpers import parse_timestamp
from engine.enums import Source

_SOURCE_NAMES = {s.value for s in Source} | {SOURCE_ALL}


class TimeWindowRequest(BaseModel):
    start: datetime
    end: datetime

    @field_validator("start", "end", mode="before")
    @classmethod
    def _iso(cls, v):
        return parse_timestamp(v)

    @model_validator(mode="after")
    def _ordered(self):
        if self.start > self.end:
            raise ValueError("start must be <= end")
        return self


class TimelineRequest(TimeWindowRequest):
    sources: List[str] = Field(default_factory=lambda: [SOURCE_ALL])
    window_minutes: Optional[float] = Field(default=None, gt=0.0, le=1440.0)

    @field_validator("sources")
    @classmethod
    def _known_sources(cls, v: List[str]) -> List[str]:
        names = [s.lower() for s in v] or [SOURCE_ALL]
        unknown = sorted(set(names) - _SOURCE_NAMES)
        if unknown:
            raise ValueError(f"unknown sources: {unknown}")
        return names


class MetricAnomalyRequest(TimeWindowRequest):
    service: Optional[str] = None


class PayloadAnomalyRequest(TimeWindowRequest):
    threshold: Optional[int] = Field(default=None, ge=0)
    include_gateway: bool = False


class LogErrorsRequest(TimeWindowRequest):
    limit: int = Field(default=10, ge=1, le=100)


class GatewayStatsRequest(TimeWindowRequest):
    limit: int = Field(default=10, ge=1, le=100)
    endpoint: Optional[str] = None


class RestartRequest(TimeWindowRequest):
    namespace: Optional[str] = None
    pod_name: Optional[str] = None
