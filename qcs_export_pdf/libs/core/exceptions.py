"""
Exception Hierarchy

All errors raised by the export tool derive from QcsExportError so callers
can handle the whole family at the application boundary.
"""


class QcsExportError(Exception):
    """Base exception for the export tool"""


class ConfigurationError(QcsExportError):
    """Invalid or incomplete configuration"""


class AuthenticationError(QcsExportError):
    """The service rejected the API key"""


class NetworkError(QcsExportError):
    """Transport failure or unexpected HTTP response"""


class ExportJobError(QcsExportError):
    """The remote export job failed or produced no result"""


class ExportCancelledError(QcsExportError):
    """A shutdown signal interrupted a wait"""
