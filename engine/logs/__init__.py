"""
Request log analysis: error pattern grouping, log statistics, request size distribution and top talkers by source IP.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.logs.patterns import error_patterns, log_statistics
from engine.logs.traffic import request_size_distribution, top_source_ips

__all__ = ["error_patterns", "log_statistics", "request_size_distribution", "top_source_ips"]
