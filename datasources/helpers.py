"""
Shared helper functions for record sources: timestamp parsing and file reading.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator, List, Optional, Union

from datasources.exceptions import DataSourceUnavailable

log = logging.getLogger(__name__)

TimestampLike = Union[str, datetime]


def parse_timestamp(value: TimestampLike) -> datetime:
    """Parse an ISO-8601 value into a timezone-aware UTC instant.

    Naive values are assumed to be UTC. Raises ``ValueError`` for anything
    that is not a datetime or a parseable ISO-8601 string.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("empty timestamp")
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    else:
        raise ValueError(f"unsupported timestamp type: {type(value).__name__}")

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_optional_timestamp(value: Optional[TimestampLike]) -> Optional[datetime]:
    if value is None:
        return None
    return parse_timestamp(value)


def to_iso(ts: datetime) -> str:
    return ts.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def read_json_array(path: Path) -> List[Any]:
    try:
        with path.open("r", encoding="utf-8") as fh:
            payload = json.load(fh)
    except FileNotFoundError as e:
        raise DataSourceUnavailable(f"Data file not found: {path}") from e
    except (OSError, json.JSONDecodeError) as e:
        raise DataSourceUnavailable(f"Cannot read data file {path}: {e}") from e
    if not isinstance(payload, list):
        raise DataSourceUnavailable(f"Expected a JSON array in {path}")
    return payload


def iter_jsonl(path: Path) -> Iterator[dict]:
    if not path.exists():
        return
    try:
        with path.open("r", encoding="utf-8") as fh:
            lines = fh.readlines()
    except OSError as e:
        raise DataSourceUnavailable(f"Cannot read log file {path}: {e}") from e

    for lineno, line in enumerate(lines, start=1):
        line = line.strip()
        if not line:
            continue
        try:
            row = json.loads(line)
        except json.JSONDecodeError as exc:
            log.warning("Skipping unparsable line %s:%d: %s", path.name, lineno, exc)
            continue
        if not isinstance(row, dict):
            log.warning("Skipping non-object line %s:%d", path.name, lineno)
            continue
        yield row
