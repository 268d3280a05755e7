"""
Exceptions raised by the APNIC sync pipeline.

- ConfigError: missing or invalid environment configuration
- FetchError: registry download failed (network error, non-2xx status)
- ScanError: the registry stream broke while it was being read
- RecordFormatError / AllocationCountError: one malformed registry line
- UploadError: writing the result object to COS failed
"""


class SyncError(Exception):
    """Base class for every pipeline error"""


class ConfigError(SyncError):
    pass


class FetchError(SyncError):
    def __init__(self, message, url=None, status_code=None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ScanError(SyncError):
    pass


class RecordFormatError(SyncError, ValueError):
    def __init__(self, message, line=None):
        super().__init__(message)
        self.line = line


class AllocationCountError(RecordFormatError):
    """Allocated address count does not map to a 0-32 prefix length"""

    def __init__(self, message, count=None, line=None):
        super().__init__(message, line=line)
        self.count = count


class UploadError(SyncError):
    def __init__(self, message, object_key=None):
        super().__init__(message)
        self.object_key = object_key
