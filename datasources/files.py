"""
File-backed record sources: static JSON array datasets and the append-only live request log.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Union

from datasources.base import RecordSource
from datasources.helpers import iter_jsonl, read_json_array
from datasources.records import SourceRecord, live_log_to_record, parse_records
from engine.enums import Source

log = logging.getLogger(__name__)


class JsonArraySource(RecordSource):
    def __init__(self, kind: Source, path: Union[str, Path]) -> None:
        super().__init__(kind)
        self.path = Path(path)

    def _read(self) -> List[SourceRecord]:
        rows = read_json_array(self.path)
        return parse_records(self.model, rows, self.kind.value)


class JsonlLogSource(RecordSource):
    """Request log written one JSON object per line by the live endpoint.

    The file is re-read on every load/refresh. A missing file is an empty
    log, since the endpoint creates it on its first request.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        super().__init__(Source.logs)
        self.path = Path(path)

    def _read(self) -> List[SourceRecord]:
        if not self.path.exists():
            log.debug("Live log %s does not exist yet", self.path)
            return []
        rows = [live_log_to_record(row) for row in iter_jsonl(self.path)]
        return parse_records(self.model, rows, "live_logs")
