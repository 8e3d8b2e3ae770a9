"""
Timeline construction from request logs, metrics, gateway logs and lifecycle events, plus summary statistics over the merged timeline.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.timeline.builder import TimelineSources, build_timeline
from engine.timeline.summary import generate_timeline_summary

__all__ = ["TimelineSources", "build_timeline", "generate_timeline_summary"]
