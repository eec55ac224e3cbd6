"""
Reports Libraries

Handles interactions with the tenant's reports API: job submission, status
polling and artifact download.
"""

from .client import ReportsClient
from .poller import JobStatus, await_export_completion
from .request import build_export_request
from .writer import report_filename, write_report

__all__ = [
    'ReportsClient',
    'JobStatus',
    'await_export_completion',
    'build_export_request',
    'report_filename',
    'write_report'
]
