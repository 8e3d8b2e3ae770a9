"""
Factory for creating record sources based on configuration.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from datasources.files import JsonArraySource, JsonlLogSource
from engine.enums import Source


class DataSourceFactory:

    @staticmethod
    def create_logs(config):
        if config.use_live_data:
            return JsonlLogSource(config.path_for(config.live_log_file))
        return JsonArraySource(Source.logs, config.path_for(config.application_logs_file))

    @staticmethod
    def create_metrics(config):
        return JsonArraySource(Source.metrics, config.path_for(config.metrics_file))

    @staticmethod
    def create_gateway(config):
        return JsonArraySource(Source.gateway, config.path_for(config.gateway_logs_file))

    @staticmethod
    def create_lifecycle(config):
        return JsonArraySource(Source.kubernetes, config.path_for(config.lifecycle_events_file))
