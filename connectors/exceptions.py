# connectors/exceptions.py

from datasources.exceptions import DataSourceError, DataSourceUnavailable


class InvestigationFailed(DataSourceError):
    pass


class ToolCallFailed(InvestigationFailed):
    pass


class ToolCallTimeout(InvestigationFailed):
    pass


class ToolChainUnavailable(InvestigationFailed, DataSourceUnavailable):
    pass
