"""
QCS Export PDF

Periodically asks a Qlik Cloud tenant to render a visualization as a PDF,
waits for the render to complete and stores the result on local disk.
"""

__version__ = "1.0.0"

from .libs import ExportApplication, ExportSettings, ReportsClient, TickScheduler, main

__all__ = [
    'ExportApplication',
    'ExportSettings',
    'ReportsClient',
    'TickScheduler',
    'main'
]
