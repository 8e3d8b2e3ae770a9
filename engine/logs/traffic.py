from __future__ import annotations

from collections import Counter
from typing import Dict, List, Sequence, Union

from api.responses import SourceIpCount
from config import REQUEST_SIZE_BUCKETS
from datasources.records import GatewayRecord, LogRecord

Traffic = Sequence[Union[LogRecord, GatewayRecord]]


def request_size_distribution(records: Traffic) -> Dict[str, int]:
    distribution = {name: 0 for name, _ in REQUEST_SIZE_BUCKETS}
    for rec in records:
        for name, upper in REQUEST_SIZE_BUCKETS:
            if upper is None or rec.request_size < upper:
                distribution[name] += 1
                break
    return distribution


def top_source_ips(records: Traffic, limit: int = 10) -> List[SourceIpCount]:
    counts = Counter(rec.source_ip for rec in records)
    return [SourceIpCount(ip=ip, count=count) for ip, count in counts.most_common(limit)]
