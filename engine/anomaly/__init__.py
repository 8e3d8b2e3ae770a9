"""
Anomaly detection logic: baseline-relative metric rules, large payload detection over request and gateway logs, and live-stream heuristics over the request log.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.anomaly.detection import detect
from engine.anomaly.live import LiveBaseline, compute_live_baseline, detect_live_anomalies
from engine.anomaly.payload import detect_large_payloads

__all__ = [
    "detect",
    "detect_large_payloads",
    "LiveBaseline",
    "compute_live_baseline",
    "detect_live_anomalies",
]
