# datasources/exceptions.py

class DataSourceError(Exception):
    pass


class DataSourceUnavailable(DataSourceError):
    pass


class SnapshotNotLoaded(DataSourceError):
    pass


class MalformedRecord(DataSourceError):
    pass


class UnsupportedFilter(DataSourceError):
    pass
