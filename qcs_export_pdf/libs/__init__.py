"""
Export Library

Scheduled PDF export of a single Qlik Cloud visualization.
"""

__version__ = "1.0.0"

# Core libraries
from .core import ApiKeyAuth, ConfigManager, ExportSettings
from .core.exceptions import QcsExportError, ConfigurationError, AuthenticationError, NetworkError, ExportJobError

# Reports libraries
from .reports import ReportsClient, JobStatus, await_export_completion, build_export_request, write_report

# Scheduling, CLI and main application
from .scheduler import TickScheduler
from .cli_interface import CLIInterface
from .main_app import ExportApplication, main

__all__ = [
    # Core
    'ApiKeyAuth',
    'ConfigManager',
    'ExportSettings',
    'QcsExportError',
    'ConfigurationError',
    'AuthenticationError',
    'NetworkError',
    'ExportJobError',
    # Reports
    'ReportsClient',
    'JobStatus',
    'await_export_completion',
    'build_export_request',
    'write_report',
    # Main
    'TickScheduler',
    'CLIInterface',
    'ExportApplication',
    'main'
]
