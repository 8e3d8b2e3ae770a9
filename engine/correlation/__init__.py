"""
Correlation logic for grouping timeline events into windows of temporally related activity, to assist in incident investigation.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.correlation.windows import CorrelationWindow, identify_correlation_windows

__all__ = ["CorrelationWindow", "identify_correlation_windows"]
