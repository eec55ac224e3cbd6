"""
Core Libraries

Shared functionality and utilities for the export tool.
"""

from .auth import ApiKeyAuth
from .config import ConfigManager, ExportSettings
from .exceptions import (
    QcsExportError,
    ConfigurationError,
    AuthenticationError,
    NetworkError,
    ExportJobError,
    ExportCancelledError,
)
from .utils import setup_logging, disable_ssl_warnings, mask_sensitive_info, format_bytes

__all__ = [
    'ApiKeyAuth',
    'ConfigManager',
    'ExportSettings',
    'QcsExportError',
    'ConfigurationError',
    'AuthenticationError',
    'NetworkError',
    'ExportJobError',
    'ExportCancelledError',
    'setup_logging',
    'disable_ssl_warnings',
    'mask_sensitive_info',
    'format_bytes'
]
